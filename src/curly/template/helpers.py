"""Pure runtime functions used by the renderer and built-in helpers.

None of these close over Environment state.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

# Marks "no context passed" for HelperOptions.fn(); None is a valid context
_AMBIENT: Any = object()


def resolve_path(context: Any, path: str, data: Mapping[str, Any] | None = None) -> Any:
    """Resolve a dotted path against the context.

    - ``this`` and ``.`` return the whole context; ``this.x`` is ``x``
    - ``@name`` reads per-block metadata (``@index``, ``@first``, ``@last``)
      before falling back to the context
    - Mapping keys, sequence indices (``items.0``) and public object
      attributes are followed segment by segment
    - A missing segment short-circuits to ``None``

    Example:
        >>> resolve_path({"user": {"name": "Ada"}}, "user.name")
        'Ada'
        >>> resolve_path({}, "missing.deep.path") is None
        True
    """
    if not path:
        return None
    if path in ("this", "."):
        return context
    if path.startswith("this."):
        path = path[5:]

    if path.startswith("@") and data is not None and path in data:
        return data[path]

    current = context
    for segment in path.split("."):
        if current is None:
            return None
        current = _get_segment(current, segment)
    return current


def _get_segment(value: Any, segment: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(segment)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if segment.isdigit():
            index = int(segment)
            return value[index] if index < len(value) else None
        if segment == "length":
            return len(value)
        return None
    if segment.startswith("_"):
        return None
    return getattr(value, segment, None)


def to_str(value: Any) -> str:
    """Convert a rendered value to output text.

    ``None`` renders empty, booleans as ``true``/``false``, integral floats
    without a trailing ``.0`` and lists comma-joined.

    Example:
        >>> to_str([1, 2.0, None, True])
        '1,2,,true'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_str(item) for item in value)
    return str(value)


def coerce_numeric(value: Any) -> int | float | None:
    """Coerce a helper argument to a number.

    Numbers pass through (booleans excluded); numeric strings are parsed,
    since filter arguments always arrive as raw strings. Anything else
    returns None so the caller can apply its own fallback.

    Example:
        >>> coerce_numeric("10"), coerce_numeric("2.5"), coerce_numeric("x")
        (10, 2.5, None)
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            return int(s)
        except ValueError:
            try:
                return float(s)
            except ValueError:
                return None
    return None


class HelperOptions:
    """Final positional argument passed to block helpers.

    Attributes:
        name: Helper name the block was opened with
        data: The ambient context the block appears in

    Methods:
        fn(context, data): Render the block's children. Without a context
            argument the ambient context is used; ``data`` adds ``@``
            metadata visible to the children.
        inverse(context, data): The ``{{else}}`` branch. Always renders
            ``""``: ``{{else}}`` is not a recognised marker.

    Example:
        >>> @block_helper
        ... def with_user(user, options):
        ...     return options.fn(user)
    """

    __slots__ = ("_render", "data", "name")

    def __init__(
        self,
        name: str,
        data: Any,
        render: Callable[[Any, Mapping[str, Any] | None], str],
    ):
        self.name = name
        self.data = data
        self._render = render

    def fn(self, context: Any = _AMBIENT, data: Mapping[str, Any] | None = None) -> str:
        if context is _AMBIENT:
            context = self.data
        return self._render(context, data)

    def inverse(self, context: Any = _AMBIENT, data: Mapping[str, Any] | None = None) -> str:
        return ""

    def __repr__(self) -> str:
        return f"HelperOptions(name={self.name!r})"
