"""Exceptions for the curly template engine.

Exception Hierarchy:
TemplateError (base)
├── CompileError              # Block without a matching end, nesting too deep
└── RenderError               # Helper failure, conversion failure, partial cycle
    ├── UnknownHelperError    # Strict mode only
    └── UnknownPartialError   # Strict mode only

Error Messages:
Compile and render errors carry, where known:
- The helper or partial name involved
- A source snippet showing the offending template line
- The original exception (as ``__cause__``) for wrapped helper failures

Example:
    ```
    C-PAR-001: unclosed block: if
      --> <template>:1:0
       |
    >  1 | {{#if x}}no end
       |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from curly.environment import terminal
from curly.lexer import location

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for curly template errors.

    Format: C-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), RUN (runtime)
    """

    # Parser errors (C-PAR-xxx)
    UNCLOSED_BLOCK = "C-PAR-001"
    NESTING_TOO_DEEP = "C-PAR-002"

    # Runtime errors (C-RUN-xxx)
    HELPER_ERROR = "C-RUN-001"
    UNKNOWN_HELPER = "C-RUN-002"
    UNKNOWN_PARTIAL = "C-RUN-003"
    PARTIAL_CYCLE = "C-RUN-004"
    CONVERSION_ERROR = "C-RUN-005"

    @property
    def category(self) -> str:
        """Error category ('parser' or 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "RUN": "runtime",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet in Rust-inspired diagnostic style with colors."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')} {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


def snippet_at(source: str | None, offset: int | None) -> SourceSnippet | None:
    """Build a snippet for a source offset, or None when either is unknown."""
    if not source or offset is None:
        return None
    lineno, col = location(source, offset)
    return build_source_snippet(source, lineno, column=col)


class TemplateError(Exception):
    """Base exception for all curly template errors.

        >>> try:
        ...     env.render(source, context)
        ... except TemplateError as e:
        ...     log.error("template failed: %s", e)

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short, human-readable summary."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class CompileError(TemplateError):
    """A block's matching end could not be found, or blocks nest too deeply.

    Raised synchronously from ``compile()`` and ``render()``. No template is
    produced.

    Attributes:
        message: Human-readable description
        name: Helper name of the unclosed block
        offset: Source offset of the opening tag
        source: Template source, when available
    """

    code: ErrorCode | None = ErrorCode.UNCLOSED_BLOCK

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        offset: int | None = None,
        source: str | None = None,
        template_name: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.name = name
        self.offset = offset
        self.source = source
        self.template_name = template_name
        if code is not None:
            self.code = code
        self.lineno: int | None = None
        self.col_offset: int | None = None
        if source is not None and offset is not None:
            self.lineno, self.col_offset = location(source, offset)
        super().__init__(self._format_message())

    def _location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}:{self.col_offset}"
        return loc

    def _format_message(self) -> str:
        header = f"{self.message}\n  --> {self._location()}"
        snippet = snippet_at(self.source, self.offset)
        if snippet is not None:
            return f"{header}\n{snippet.format()}"
        return header

    def format_compact(self) -> str:
        code_prefix = f"{self.code.value}: " if self.code else ""
        return f"{code_prefix}{self.message}\n  --> {self._location()}"


class RenderError(TemplateError):
    """Render-time failure with debugging context.

    Raised when a helper raises, when a value cannot be converted to output
    text, or when a partial re-enters itself. The originating exception is
    chained as ``__cause__``; the current ``render()`` call returns nothing.

    Output Format:
            ```
            Render Error: helper 'shout' raised ValueError: boom
              Helper: shout
              Location: <template>:3
               |
            >  3 | {{shout name}}
               |
            ```

    Attributes:
        message: Error description
        helper: Name of the helper involved, if any
        partial: Name of the partial involved, if any
        source: Template source being rendered
        offset: Source offset of the failing node
        template_name: Name used in diagnostics
        original: The wrapped exception, if any
    """

    code: ErrorCode | None = ErrorCode.HELPER_ERROR

    def __init__(
        self,
        message: str,
        *,
        helper: str | None = None,
        partial: str | None = None,
        source: str | None = None,
        offset: int | None = None,
        template_name: str | None = None,
        original: BaseException | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.helper = helper
        self.partial = partial
        self.source = source
        self.offset = offset
        self.template_name = template_name
        self.original = original
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _location(self) -> str | None:
        if self.source is None or self.offset is None:
            return self.template_name
        lineno, _ = location(self.source, self.offset)
        return f"{self.template_name or '<template>'}:{lineno}"

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.message}"]
        if self.helper:
            parts.append(f"  Helper: {self.helper}")
        if self.partial:
            parts.append(f"  Partial: {self.partial}")
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        snippet = snippet_at(self.source, self.offset)
        if snippet is not None:
            parts.append(snippet.format())
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        return "\n".join(parts)


class UnknownHelperError(RenderError):
    """A block, inline helper call, or filter named an unregistered helper.

    Only raised in strict mode; otherwise the engine renders an empty string.
    """

    code: ErrorCode | None = ErrorCode.UNKNOWN_HELPER

    def __init__(self, name: str, **kwargs):
        super().__init__(f"Unknown helper: {name}", helper=name, **kwargs)


class UnknownPartialError(RenderError):
    """A ``{{> name}}`` reference named an unregistered partial.

    Only raised in strict mode; otherwise the engine renders an empty string.
    """

    code: ErrorCode | None = ErrorCode.UNKNOWN_PARTIAL

    def __init__(self, name: str, **kwargs):
        super().__init__(f"Unknown partial: {name}", partial=name, **kwargs)
