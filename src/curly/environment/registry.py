"""Helper and partial registries for a curly Environment.

Helpers come in two kinds:

- **inline** helpers take resolved positional arguments and return a value:
  ``{{uppercase name}}``, ``{{title | truncate 20}}``
- **block** helpers additionally receive a ``HelperOptions`` as their final
  positional argument and decide whether/how to render their children:
  ``{{#each items}}...{{/each}}``

Mark block helpers with ``@block_helper`` or pass ``block=True`` when
registering.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from curly.environment.core import Environment

V = TypeVar("V")
F = TypeVar("F", bound=Callable[..., Any])

_BLOCK_MARKER = "__curly_block_helper__"


class HelperKind(Enum):
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True, slots=True)
class Helper:
    """A registered helper function and how it is invoked."""

    func: Callable[..., Any]
    kind: HelperKind = HelperKind.INLINE

    @property
    def is_block(self) -> bool:
        return self.kind is HelperKind.BLOCK

    @classmethod
    def wrap(cls, func: Callable[..., Any] | Helper, block: bool | None = None) -> Helper:
        """Build a Helper from a plain callable.

        ``block=None`` reads the ``@block_helper`` marker from the function.
        """
        if isinstance(func, Helper):
            if block is None:
                return func
            func = func.func
        if block is None:
            block = bool(getattr(func, _BLOCK_MARKER, False))
        return cls(func, HelperKind.BLOCK if block else HelperKind.INLINE)


def block_helper(func: F) -> F:
    """Mark a function as a block helper.

    Example:
        >>> @block_helper
        ... def twice(options):
        ...     return options.fn() * 2
    """
    setattr(func, _BLOCK_MARKER, True)
    return func


class Registry(Generic[V]):
    """Dict-like view over one of an Environment's registries.

    Supports:
        - env.helpers['name'] = helper
        - env.helpers.update({'name': helper})
        - helper = env.helpers['name']
        - 'name' in env.helpers

    All mutations use copy-on-write: a render that already fetched the dict
    keeps seeing a consistent snapshot.
    """

    __slots__ = ("_attr", "_env")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, V]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, V]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> V:
        return self._get_dict()[name]

    def __setitem__(self, name: str, value: V) -> None:
        new = self._get_dict().copy()
        new[name] = value
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __iter__(self) -> Iterator[str]:
        return iter(self._get_dict())

    def __len__(self) -> int:
        return len(self._get_dict())

    def get(self, name: str, default: V | None = None) -> V | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: Mapping[str, V]) -> None:
        """Batch update in a single copy."""
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def copy(self) -> dict[str, V]:
        return self._get_dict().copy()

    def keys(self):
        return self._get_dict().keys()

    def items(self):
        return self._get_dict().items()
