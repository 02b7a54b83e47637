"""Curly Template: compiled template object ready for rendering.

A Template holds the parsed node tuple for one source string together with
the options it was compiled with. Calling it renders the nodes against a
context:

    >>> from curly import Environment
    >>> env = Environment()
    >>> greet = env.compile("Hello {{name}}!")
    >>> greet({"name": "World"})
    'Hello World!'

Thread-Safety:
- Templates are immutable after construction
- Each call creates its own RenderContext; no shared buffers
- Multiple threads can render the same template simultaneously, provided
  the owning Environment's registries are not being mutated concurrently

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from curly.environment.options import TemplateOptions
from curly.render_context import RenderContext, render_context

if TYPE_CHECKING:
    from curly.environment.core import Environment
    from curly.nodes import Node


class Template:
    """Compiled template: a callable ``context -> str``.

    Attributes:
        name: Template identifier (for error messages)
        source: Template source the nodes were parsed from
        nodes: Parsed top-level nodes
        options: Options bound at compile time

    Example:
            >>> t = env.compile("{{#each items}}{{this}}{{/each}}")
            >>> t({"items": [1, 2, 3]})
            '123'
            >>> t.render(items=["a", "b"])  # Keyword context also works
            'ab'

    """

    __slots__ = ("_env", "_name", "_nodes", "_options", "_source")

    def __init__(
        self,
        env: Environment,
        nodes: tuple[Node, ...],
        source: str,
        name: str | None = None,
        options: TemplateOptions | None = None,
    ):
        self._env = env
        self._nodes = nodes
        self._source = source
        self._name = name
        self._options = options or TemplateOptions()

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def source(self) -> str:
        return self._source

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def options(self) -> TemplateOptions:
        return self._options

    def with_options(self, options: TemplateOptions, name: str | None = None) -> Template:
        """Same compiled nodes bound to different options and name."""
        if options == self._options and name == self._name:
            return self
        return Template(self._env, self._nodes, self._source, name, options)

    def render(self, context: Any = None, /, **kwargs: Any) -> str:
        """Render the template.

        Args:
            context: Any mapping or object; defaults to an empty dict
            **kwargs: Extra top-level values, merged over a mapping context

        Raises:
            RenderError: A helper failed, a partial recursed into itself, or
                (strict mode) a helper or partial is unknown
        """
        if context is None:
            context = {}
        if kwargs:
            base = context if isinstance(context, Mapping) else {}
            context = {**base, **kwargs}

        rctx = RenderContext(
            template_name=self._name,
            source=self._source,
            strict=self._options.strict,
            no_escape=self._options.no_escape,
        )
        with render_context(rctx):
            return self._env._renderer.render(self._nodes, context, {}, rctx)

    __call__ = render

    def __repr__(self) -> str:
        preview = self._source if len(self._source) <= 40 else self._source[:37] + "..."
        return f"<Template {self._name or '<string>'}: {preview!r}>"
