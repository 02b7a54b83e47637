"""ANSI color codes for diagnostics and the CLI helpers.

Two consumers share the palette here:

- Error messages (``curly.environment.exceptions``) go through ``style()``,
  which honours TTY detection, ``NO_COLOR`` and ``FORCE_COLOR``.
- The ``colorize`` template helper uses ``ANSI_CODES`` directly. Template
  output is data, so it always carries the raw codes.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

# Raw codes exposed to templates through the `colorize` helper
ANSI_CODES: dict[str, str] = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "gray": "\033[90m",
    "reset": "\033[0m",
}

_STYLES = {
    **ANSI_CODES,
    "bold": "\033[1m",
    "dim": "\033[2m",
    "bright_red": "\033[91m",
}

StyleName = Literal[
    "reset", "bold", "dim",
    "red", "green", "yellow", "blue", "magenta", "cyan", "white", "gray",
    "bright_red",
]

_ANSI_ESCAPE_RE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Decide whether diagnostics should be colored.

    Respects:
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - NO_COLOR environment variable (https://no-color.org/)
        - sys.stderr.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


# Decided once at import
_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """True when diagnostics are colored."""
    return _USE_COLORS


def style(text: str, *styles: StyleName) -> str:
    """Wrap text in ANSI codes when diagnostics are colored.

    Example:
        >>> style("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not styles:
        return text
    prefix = "".join(_STYLES.get(name, "") for name in styles)
    if not prefix:
        return text
    return f"{prefix}{text}{_STYLES['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from text.

    Example:
        >>> strip_colors("\033[31mError\033[0m")
        'Error'
    """
    return _ANSI_ESCAPE_RE.sub("", text)


def error_code(text: str) -> str:
    return style(text, "bright_red", "bold")


def location(text: str) -> str:
    return style(text, "cyan")


def line_number(text: str) -> str:
    return style(text, "yellow")


def error_line(text: str) -> str:
    return style(text, "bright_red")


def dim_text(text: str) -> str:
    return style(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """Format error header with optional code, e.g. ``C-RUN-002: Unknown helper``."""
    if code:
        return f"{error_code(code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Format one snippet line; the error line gets a '>' marker."""
    marker = ">" if is_error else " "
    num = line_number(f"{marker}{lineno:>3}")
    text = error_line(content) if is_error else dim_text(content)
    return f"{num} | {text}"
