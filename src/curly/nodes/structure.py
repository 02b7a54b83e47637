"""Structural nodes for the curly AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from curly.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Block helper invocation: {{#name arg1 arg2}}...{{/name}}"""

    name: str
    args: tuple[str, ...]
    children: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Partial(Node):
    """Partial reference: {{> name context_expr}}"""

    name: str
    context_expr: str | None = None
