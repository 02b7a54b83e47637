"""HTML escaping for variable output."""

from __future__ import annotations

# Single-pass escaping via str.translate()
_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


def html_escape(text: str) -> str:
    """Escape ``& < > " '`` in text.

    Example:
        >>> html_escape('<a href="x">Tom & Jerry\\'s</a>')
        '&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#39;s&lt;/a&gt;'
    """
    return text.translate(_ESCAPE_TABLE)
