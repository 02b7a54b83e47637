"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens emitted by the lexer.

    Comments are recognised by the lexer but never emitted.
    """

    TEXT = "text"
    VARIABLE = "variable"
    BLOCK_START = "block_start"
    BLOCK_END = "block_end"
    PARTIAL = "partial"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token kind
        value: Raw matched source text
        params: Capture groups that matched (name, arguments, expression)
        offset: Start offset of the token in the template source
    """

    type: TokenType
    value: str
    params: tuple[str, ...]
    offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, offset={self.offset})"
