"""Curly parser: token stream to AST.

Example:
    >>> from curly.lexer import tokenize
    >>> from curly.parser import parse
    >>> parse(tokenize("{{#if ok}}yes{{/if}}"))
    (Block(offset=0, name='if', args=('ok',), children=(Text(offset=10, content='yes'),)),)

"""

from curly.parser.core import Parser, parse

__all__ = ["Parser", "parse"]
