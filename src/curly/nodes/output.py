"""Output nodes for the curly AST."""

from __future__ import annotations

from dataclasses import dataclass

from curly.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text between template constructs."""

    content: str


@dataclass(frozen=True, slots=True)
class Filter(Node):
    """One pipeline stage: {{ value | name arg1 arg2 }}

    Arguments are the raw whitespace-split strings; the helper parses them.
    """

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Variable(Node):
    """Interpolation: {{ path.to.value | filter arg }}

    When ``args`` is non-empty the expression is an inline helper call
    ({{ helper arg1 arg2 }}) and ``path`` holds the helper name.
    """

    path: str
    filters: tuple[Filter, ...] = ()
    args: tuple[str, ...] = ()

    @property
    def is_helper_call(self) -> bool:
        return bool(self.args)
