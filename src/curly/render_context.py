"""Per-render state, kept apart from the user's context.

The renderer threads a ``RenderContext`` explicitly through every node it
visits. The active context is also published through a ``ContextVar`` so
helper functions can inspect it (``get_render_context()``) without it
leaking into template data.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class RenderContext:
    """State for one ``render()`` call and its nested partials.

    Attributes:
        template_name: Name used in error messages (partial name when nested)
        source: Source of the template currently being rendered
        strict: Raise on unknown helpers/partials instead of rendering ""
        no_escape: Skip HTML escaping of variable output
        partial_stack: Names of partials currently being rendered, outermost
            first. Used to detect a partial that includes itself.
    """

    template_name: str | None = None
    source: str | None = None
    strict: bool = False
    no_escape: bool = False
    partial_stack: tuple[str, ...] = field(default_factory=tuple)

    def check_partial_cycle(self, name: str) -> None:
        """Raise if ``name`` is already on the active partial path.

        Raises:
            RenderError: With code PARTIAL_CYCLE
        """
        if name in self.partial_stack:
            from curly.environment.exceptions import ErrorCode, RenderError

            chain = " -> ".join((*self.partial_stack, name))
            raise RenderError(
                f"partial cycle detected: {name} ({chain})",
                partial=name,
                template_name=self.template_name,
                code=ErrorCode.PARTIAL_CYCLE,
            )

    def child_context(self, partial_name: str, source: str) -> RenderContext:
        """Context for rendering a partial one level down."""
        self.check_partial_cycle(partial_name)
        return replace(
            self,
            template_name=partial_name,
            source=source,
            partial_stack=(*self.partial_stack, partial_name),
        )


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "curly_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Current render context, or None outside a render call."""
    return _render_context.get()


@contextmanager
def render_context(ctx: RenderContext) -> Iterator[RenderContext]:
    """Publish ``ctx`` as the current render context for the with block.

    Example:
        with render_context(RenderContext(template_name="page")) as ctx:
            html = renderer.render(nodes, data, ctx)
    """
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
