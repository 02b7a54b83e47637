"""Base node class for the curly AST."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track the source offset of the token they came from.
    Nodes are immutable so a compiled template can be shared freely.

    """

    offset: int
