"""Tree-walking renderer for the curly AST.

Rendering is a pure recursive walk. The only state carried between nodes is
what is passed down explicitly:

- ``context``: the current data (the caller's object, an ``each`` item, or a
  partial's merged mapping); never mutated
- ``data``: ``@`` metadata visible to the current block (``@index``...)
- ``rctx``: the ``RenderContext`` (options, source, active partials)

Output Semantics:
    Text      → verbatim
    Variable  → resolve, filter, stringify, HTML-escape unless no_escape
    Block     → helper(*resolved_args, options), stringified, not escaped
    Partial   → compiled through the environment cache, rendered with a
                child RenderContext

"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from curly.environment.exceptions import (
    ErrorCode,
    RenderError,
    TemplateError,
    UnknownHelperError,
    UnknownPartialError,
)
from curly.nodes import Block, Node, Partial, Text, Variable
from curly.render_context import render_context
from curly.template.helpers import HelperOptions, resolve_path, to_str
from curly.utils.html import html_escape

if TYPE_CHECKING:
    from curly.environment.core import Environment
    from curly.environment.registry import Helper
    from curly.render_context import RenderContext


class Renderer:
    """Evaluate nodes against a context using one Environment's registries."""

    __slots__ = ("_env", "_dispatch")

    def __init__(self, env: Environment):
        self._env = env
        self._dispatch: dict[type, Callable[..., str]] = {
            Text: self._render_text,
            Variable: self._render_variable,
            Block: self._render_block,
            Partial: self._render_partial,
        }

    def render(
        self,
        nodes: Sequence[Node],
        context: Any,
        data: Mapping[str, Any],
        rctx: RenderContext,
    ) -> str:
        dispatch = self._dispatch
        return "".join(dispatch[type(node)](node, context, data, rctx) for node in nodes)

    # ------------------------------------------------------------------
    # Node handlers
    # ------------------------------------------------------------------

    def _render_text(self, node: Text, context: Any, data: Mapping[str, Any], rctx: RenderContext) -> str:
        return node.content

    def _render_variable(
        self, node: Variable, context: Any, data: Mapping[str, Any], rctx: RenderContext
    ) -> str:
        if node.is_helper_call:
            helper = self._lookup_helper(node.path, node, rctx)
            if helper is None:
                return ""
            args = [self._resolve(context, arg, data, node, rctx) for arg in node.args]
            value = self._call_inline(helper, node.path, args, node, rctx)
        else:
            value = self._resolve(context, node.path, data, node, rctx)

        for stage in node.filters:
            helper = self._lookup_helper(stage.name, node, rctx)
            if helper is None:
                continue
            value = self._call_inline(helper, stage.name, [value, *stage.args], node, rctx)

        text = self._stringify(value, node, rctx)
        return text if rctx.no_escape else html_escape(text)

    def _render_block(self, node: Block, context: Any, data: Mapping[str, Any], rctx: RenderContext) -> str:
        helper = self._lookup_helper(node.name, node, rctx)
        if helper is None:
            return ""
        args = [self._resolve(context, arg, data, node, rctx) for arg in node.args]

        if not helper.is_block:
            result = self._invoke(helper.func, node.name, args, node, rctx)
            return self._stringify(result, node, rctx)

        def render_children(child_context: Any, extra: Mapping[str, Any] | None) -> str:
            child_data = {**data, **extra} if extra else data
            return self.render(node.children, child_context, child_data, rctx)

        options = HelperOptions(node.name, context, render_children)
        result = self._invoke(helper.func, node.name, [*args, options], node, rctx)
        return self._stringify(result, node, rctx)

    def _render_partial(
        self, node: Partial, context: Any, data: Mapping[str, Any], rctx: RenderContext
    ) -> str:
        source = self._env._partials.get(node.name)
        if source is None:
            if rctx.strict:
                raise UnknownPartialError(node.name, **_where(node, rctx))
            return ""

        partial_context = context
        if node.context_expr:
            value = self._resolve(context, node.context_expr, data, node, rctx)
            if isinstance(value, Mapping):
                base = context if isinstance(context, Mapping) else {}
                partial_context = {**base, **value}

        child = rctx.child_context(node.name, source)
        template = self._env.compile(
            source, name=node.name, strict=rctx.strict, no_escape=rctx.no_escape
        )
        with render_context(child):
            return self.render(template.nodes, partial_context, data, child)

    # ------------------------------------------------------------------
    # Helper dispatch
    # ------------------------------------------------------------------

    def _lookup_helper(self, name: str, node: Node, rctx: RenderContext) -> Helper | None:
        helper = self._env._helpers.get(name)
        if helper is None and rctx.strict:
            raise UnknownHelperError(name, **_where(node, rctx))
        return helper

    def _call_inline(
        self, helper: Helper, name: str, args: list[Any], node: Node, rctx: RenderContext
    ) -> Any:
        if helper.is_block:
            raise RenderError(
                f"block helper '{name}' can only be used as {{{{#{name}}}}}...{{{{/{name}}}}}",
                helper=name,
                **_where(node, rctx),
            )
        return self._invoke(helper.func, name, args, node, rctx)

    def _invoke(
        self, func: Callable[..., Any], name: str, args: list[Any], node: Node, rctx: RenderContext
    ) -> Any:
        try:
            return func(*args)
        except TemplateError:
            raise
        except Exception as e:
            raise RenderError(
                f"helper '{name}' raised {type(e).__name__}: {e}",
                helper=name,
                original=e,
                **_where(node, rctx),
            ) from e

    def _resolve(
        self, context: Any, path: str, data: Mapping[str, Any], node: Node, rctx: RenderContext
    ) -> Any:
        try:
            return resolve_path(context, path, data)
        except Exception as e:
            raise RenderError(
                f"cannot resolve '{path}': {type(e).__name__}: {e}",
                original=e,
                code=ErrorCode.CONVERSION_ERROR,
                **_where(node, rctx),
            ) from e

    def _stringify(self, value: Any, node: Node, rctx: RenderContext) -> str:
        try:
            return to_str(value)
        except Exception as e:
            raise RenderError(
                f"cannot convert {type(value).__name__} to text: {e}",
                original=e,
                code=ErrorCode.CONVERSION_ERROR,
                **_where(node, rctx),
            ) from e


def _where(node: Node, rctx: RenderContext) -> dict[str, Any]:
    return {"source": rctx.source, "offset": node.offset, "template_name": rctx.template_name}
