"""Recursive parser producing the curly AST.

The parser walks a flat token list by index. A block's children are parsed
from a slice of that same list, so source text is only ever scanned once by
the lexer.

Block matching counts depth per helper name: a nested ``{{#each}}`` inside an
``{{#each}}`` increments the counter, so the outer block is closed by the
correct ``{{/each}}``. Blocks with a different name do not affect the count.

"""

from __future__ import annotations

from collections.abc import Sequence

from curly._types import Token, TokenType
from curly.environment.exceptions import CompileError, ErrorCode
from curly.nodes import Block, Filter, Node, Partial, Text, Variable


class Parser:
    """Build an AST from a token list.

    Args:
        tokens: Tokens produced by ``curly.lexer.tokenize``
        source: Original template source, used for error snippets
        name: Template name for error messages
    """

    __slots__ = ("_name", "_source", "_tokens")

    def __init__(
        self,
        tokens: Sequence[Token],
        source: str | None = None,
        name: str | None = None,
    ):
        self._tokens = tokens
        self._source = source
        self._name = name

    def parse(self) -> tuple[Node, ...]:
        """Parse the whole token list.

        Raises:
            CompileError: A block is never closed, or blocks nest deeper than
                the interpreter recursion limit allows
        """
        try:
            return self._parse_range(0, len(self._tokens))
        except RecursionError:
            opening = next(t for t in self._tokens if t.type is TokenType.BLOCK_START)
            name = opening.params[0]
            raise CompileError(
                f"blocks nested too deeply: {name}",
                name=name,
                offset=opening.offset,
                source=self._source,
                template_name=self._name,
                code=ErrorCode.NESTING_TOO_DEEP,
            ) from None

    def _parse_range(self, start: int, stop: int) -> tuple[Node, ...]:
        tokens = self._tokens
        nodes: list[Node] = []
        pos = start

        while pos < stop:
            token = tokens[pos]
            if token.type is TokenType.TEXT:
                nodes.append(Text(token.offset, token.value))
            elif token.type is TokenType.VARIABLE:
                nodes.append(self._parse_variable(token))
            elif token.type is TokenType.BLOCK_START:
                end = self._find_block_end(pos, stop)
                name = token.params[0]
                args = _split_args(token.params[1]) if len(token.params) > 1 else ()
                children = self._parse_range(pos + 1, end)
                nodes.append(Block(token.offset, name, args, children))
                pos = end
            elif token.type is TokenType.PARTIAL:
                context_expr = token.params[1].strip() if len(token.params) > 1 else None
                nodes.append(Partial(token.offset, token.params[0], context_expr or None))
            # A BLOCK_END with no opening block is ignored
            pos += 1

        return tuple(nodes)

    def _parse_variable(self, token: Token) -> Variable:
        expression = token.params[0]
        head, *stages = expression.split("|")
        filters: list[Filter] = []
        for stage in stages:
            parts = stage.split()
            if parts:
                filters.append(Filter(token.offset, parts[0], tuple(parts[1:])))

        words = head.split()
        if len(words) > 1:
            return Variable(token.offset, words[0], tuple(filters), tuple(words[1:]))
        return Variable(token.offset, head.strip(), tuple(filters))

    def _find_block_end(self, start: int, stop: int) -> int:
        """Index of the BLOCK_END closing the BLOCK_START at ``start``.

        Raises:
            CompileError: If the block is never closed before ``stop``
        """
        opening = self._tokens[start]
        name = opening.params[0]
        depth = 1
        for i in range(start + 1, stop):
            token = self._tokens[i]
            if token.params and token.params[0] == name:
                if token.type is TokenType.BLOCK_START:
                    depth += 1
                elif token.type is TokenType.BLOCK_END:
                    depth -= 1
                    if depth == 0:
                        return i
        raise CompileError(
            f"unclosed block: {name}",
            name=name,
            offset=opening.offset,
            source=self._source,
            template_name=self._name,
        )


def _split_args(raw: str) -> tuple[str, ...]:
    return tuple(raw.split())


def parse(
    tokens: Sequence[Token],
    source: str | None = None,
    name: str | None = None,
) -> tuple[Node, ...]:
    """Parse a token list into a tuple of top-level nodes."""
    return Parser(tokens, source, name).parse()
