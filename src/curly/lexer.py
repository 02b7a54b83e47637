"""Curly lexer: template source to token stream.

The lexer is a single forward scan. At each position the token patterns are
tried in a fixed priority order and the first one that matches *at that
position* wins:

1. ``{{#name args}}``      BLOCK_START
2. ``{{/name}}``           BLOCK_END
3. ``{{> name ctx}}``      PARTIAL
4. ``{{!-- text --}}``     comment (discarded)
5. ``{{expr}}``            VARIABLE
6. text up to next ``{{``  TEXT

When nothing matches, exactly one character is emitted as TEXT, so the scan
position always advances and tokenization always terminates. The lexer never
raises: malformed ``{{...}}`` sequences degrade to text.

Example:
    >>> [t.type.name for t in tokenize("Hi {{name}}!")]
    ['TEXT', 'VARIABLE', 'TEXT']

"""

from __future__ import annotations

import re

from curly._types import Token, TokenType

# Patterns are compiled once at import (immutable, safe to share)
_BLOCK_START_RE = re.compile(r"\{\{\s*#(\w+)(?:\s+(.+?))?\s*\}\}")
_BLOCK_END_RE = re.compile(r"\{\{\s*/(\w+)\s*\}\}")
_PARTIAL_RE = re.compile(r"\{\{\s*>\s*(\w+)(?:\s+(.+?))?\s*\}\}")
_COMMENT_RE = re.compile(r"\{\{!--.*?--\}\}", re.DOTALL)
_VARIABLE_RE = re.compile(r"\{\{\s*([^#/>\s][^}]*?)\s*\}\}")
_TEXT_RE = re.compile(r"(?:[^{]|\{(?!\{))+")

# None marks a pattern whose matches are dropped
_PATTERNS: tuple[tuple[TokenType | None, re.Pattern[str]], ...] = (
    (TokenType.BLOCK_START, _BLOCK_START_RE),
    (TokenType.BLOCK_END, _BLOCK_END_RE),
    (TokenType.PARTIAL, _PARTIAL_RE),
    (None, _COMMENT_RE),
    (TokenType.VARIABLE, _VARIABLE_RE),
    (TokenType.TEXT, _TEXT_RE),
)


class Lexer:
    """Tokenizer for curly template source.

    Example:
        >>> Lexer("{{#if ok}}yes{{/if}}").tokenize()[0].params
        ('if', 'ok')

    """

    __slots__ = ("_source",)

    def __init__(self, source: str):
        self._source = source

    def tokenize(self) -> list[Token]:
        source = self._source
        length = len(source)
        tokens: list[Token] = []
        pos = 0

        while pos < length:
            for token_type, pattern in _PATTERNS:
                match = pattern.match(source, pos)
                if match is None:
                    continue
                if token_type is not None:
                    params = tuple(g for g in match.groups() if g is not None)
                    tokens.append(Token(token_type, match.group(0), params, pos))
                pos = match.end()
                break
            else:
                tokens.append(Token(TokenType.TEXT, source[pos], (), pos))
                pos += 1

        return tokens


def tokenize(source: str) -> list[Token]:
    """Tokenize template source into a list of tokens."""
    return Lexer(source).tokenize()


def location(source: str, offset: int) -> tuple[int, int]:
    """Map a source offset to ``(lineno, col_offset)``.

    Line numbers are 1-based, columns 0-based.
    """
    offset = max(0, min(offset, len(source)))
    lineno = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return lineno, offset - line_start
