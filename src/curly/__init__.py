"""Curly: a small Handlebars-style template engine.

Compiles template text into a reusable callable that renders a context
(any nested mapping/sequence/object structure) to a string.

Quickstart:
    >>> from curly import Environment
    >>> env = Environment()
    >>> env.render("Hello {{name}}", {"name": "World"})
    'Hello World'
    >>> env.render("{{#each items}}{{this}}{{/each}}", {"items": [1, 2, 3]})
    '123'

Syntax:
    {{ path.to.value }}              variable (HTML-escaped)
    {{ value | filter arg }}         filter pipeline, left to right
    {{ helper arg1 arg2 }}           inline helper call
    {{#helper arg}}...{{/helper}}    block helper
    {{> partial ctx}}                partial, optionally merged with ctx
    {{!-- comment --}}               stripped

Arguments are never literals: every block, partial and inline-helper
argument is resolved as a path at render time. Filter arguments are handed
to the helper as raw strings (``{{title | truncate 10}}``).

Architecture:
Template Source → Lexer → Parser → AST → Template → Renderer

Pipeline stages:
1. **Lexer**: Tokenizes template source into a token stream
2. **Parser**: Builds an immutable AST, matching nested blocks by name
3. **Template**: Wraps the AST with options in a callable
4. **Renderer**: Walks the AST, dispatching to helpers and partials

Compiled templates are cached per Environment by exact source text until
``clear_cache()``.

Strict Mode (opt-in):
Unknown helpers and partials raise ``UnknownHelperError`` /
``UnknownPartialError`` instead of rendering an empty string. Missing
variables always render as an empty string.

"""

from curly._types import Token, TokenType
from curly.environment import (
    CacheStats,
    CompileError,
    Environment,
    ErrorCode,
    Helper,
    HelperKind,
    RenderError,
    TemplateError,
    TemplateOptions,
    UnknownHelperError,
    UnknownPartialError,
    block_helper,
)
from curly.lexer import tokenize
from curly.parser import parse
from curly.render_context import RenderContext, get_render_context
from curly.template import HelperOptions, Template
from curly.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "CacheStats",
    "CompileError",
    "Environment",
    "ErrorCode",
    "Helper",
    "HelperKind",
    "HelperOptions",
    "RenderContext",
    "RenderError",
    "Template",
    "TemplateError",
    "TemplateOptions",
    "Token",
    "TokenType",
    "UnknownHelperError",
    "UnknownPartialError",
    "__version__",
    "block_helper",
    "get_render_context",
    "html_escape",
    "parse",
    "tokenize",
]
