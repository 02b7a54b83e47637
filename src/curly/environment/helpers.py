"""Built-in helpers registered on every Environment.

Helpers are called three ways:

- block: ``{{#each items}}...{{/each}}`` (arguments resolved as paths,
  ``HelperOptions`` appended)
- inline: ``{{uppercase name}}`` (arguments resolved as paths)
- filter: ``{{name | truncate 10}}`` (current value first, then the raw
  argument strings)

Because filter arguments arrive as raw strings, numeric parameters go through
``coerce_numeric``. A parameter that is missing or resolves to ``None`` takes
its default.

Categories:
**Block**: `if`, `unless`, `each`
**Comparison**: `eq`, `ne`, `lt`, `le`, `gt`, `ge`
**String**: `capitalize`, `uppercase`, `lowercase`, `truncate`
**Formatting**: `json`, `formatNumber`, `formatDate`
**Array**: `length`, `first`, `last`, `join`
**Arithmetic**: `add`, `subtract`, `multiply`, `divide`
**Utility**: `default`
**CLI**: `colorize`, `progress`

Custom Helpers:
    >>> env.register_helper("shout", lambda s: f"{s}!")
    >>> env.render("{{shout name}}", {"name": "hey"})
    'hey!'

"""

from __future__ import annotations

import json
import math
import operator
import re
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from curly.environment.registry import Helper, block_helper
from curly.environment.terminal import ANSI_CODES
from curly.template.helpers import HelperOptions, coerce_numeric, to_str
from curly.template.loop_context import LoopContext

# ---------------------------------------------------------------------------
# Block helpers
# ---------------------------------------------------------------------------


def _split_options(args: tuple[Any, ...]) -> tuple[list[Any], HelperOptions]:
    *params, options = args
    return params, options


@block_helper
def _helper_if(*args: Any) -> str:
    params, options = _split_options(args)
    if params and params[0]:
        return options.fn()
    return options.inverse()


@block_helper
def _helper_unless(*args: Any) -> str:
    params, options = _split_options(args)
    if not (params and params[0]):
        return options.fn()
    return options.inverse()


@block_helper
def _helper_each(*args: Any) -> str:
    params, options = _split_options(args)
    items = params[0] if params else None
    if not isinstance(items, (list, tuple)):
        return ""
    loop = LoopContext(items)
    return "".join(options.fn(loop.scope(item), loop.data()) for item in loop)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


def _comparison(op: Callable[[Any, Any], bool]) -> Callable[..., bool]:
    def compare(a: Any = None, b: Any = None) -> bool:
        try:
            return bool(op(a, b))
        except TypeError:
            # Incomparable values (e.g. None < 1) are never ordered
            return False

    compare.__name__ = f"_helper_{op.__name__}"
    return compare


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def _helper_capitalize(value: Any = None) -> str:
    if not isinstance(value, str):
        return ""
    return value[:1].upper() + value[1:].lower()


def _helper_uppercase(value: Any = None) -> str:
    if not isinstance(value, str):
        return ""
    return value.upper()


def _helper_lowercase(value: Any = None) -> str:
    if not isinstance(value, str):
        return ""
    return value.lower()


def _helper_truncate(value: Any = None, length: Any = None) -> str:
    if not isinstance(value, str):
        return ""
    limit = _int_arg(length, 50)
    return value[:limit] + "..." if len(value) > limit else value


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _helper_json(value: Any = None, indent: Any = None) -> str:
    width = _int_arg(indent, 2)
    try:
        if width > 0:
            return json.dumps(value, indent=width, ensure_ascii=False, default=_json_default)
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError):
        return ""


def _helper_format_number(value: Any = None, decimals: Any = None) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    places = max(0, _int_arg(decimals, 2))
    return f"{value:.{places}f}"


_DATE_TOKEN_RE = re.compile(r"YYYY|YY|MM|M|DD|D|HH|H|mm|m|ss|s")


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _helper_format_date(value: Any = None, fmt: Any = None) -> str:
    moment = _to_datetime(value)
    if moment is None:
        return ""
    pattern = fmt if isinstance(fmt, str) else "YYYY-MM-DD"
    fields = {
        "YYYY": str(moment.year),
        "YY": str(moment.year)[-2:],
        "MM": f"{moment.month:02d}",
        "M": str(moment.month),
        "DD": f"{moment.day:02d}",
        "D": str(moment.day),
        "HH": f"{moment.hour:02d}",
        "H": str(moment.hour),
        "mm": f"{moment.minute:02d}",
        "m": str(moment.minute),
        "ss": f"{moment.second:02d}",
        "s": str(moment.second),
    }
    return _DATE_TOKEN_RE.sub(lambda m: fields[m.group(0)], pattern)


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------


def _helper_length(value: Any = None) -> int:
    return len(value) if isinstance(value, (list, tuple)) else 0


def _helper_first(value: Any = None) -> Any:
    if isinstance(value, (list, tuple)) and value:
        return value[0]
    return None


def _helper_last(value: Any = None) -> Any:
    if isinstance(value, (list, tuple)) and value:
        return value[-1]
    return None


def _helper_join(value: Any = None, separator: Any = None) -> str:
    if not isinstance(value, (list, tuple)):
        return ""
    sep = ", " if separator is None else to_str(separator)
    return sep.join(to_str(item) for item in value)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _arithmetic(op: Callable[[Any, Any], Any]) -> Callable[..., int | float]:
    def apply(a: Any = None, b: Any = None) -> int | float:
        left, right = coerce_numeric(a), coerce_numeric(b)
        if left is None or right is None:
            return 0
        if op is operator.truediv and right == 0:
            return 0
        return op(left, right)

    apply.__name__ = f"_helper_{op.__name__}"
    return apply


# ---------------------------------------------------------------------------
# Utility and CLI
# ---------------------------------------------------------------------------


def _helper_default(value: Any = None, fallback: Any = None) -> Any:
    return value if value is not None else fallback


def _helper_colorize(text: Any = None, color: Any = None) -> str:
    code = ANSI_CODES.get(color, "") if isinstance(color, str) else ""
    return f"{code}{to_str(text)}{ANSI_CODES['reset']}"


def _helper_progress(current: Any = None, total: Any = None, width: Any = None) -> str:
    done, whole = coerce_numeric(current), coerce_numeric(total)
    if done is None or whole is None or whole == 0:
        return ""
    bar_width = max(0, _int_arg(width, 20))
    percentage = min(100.0, max(0.0, done / whole * 100))
    completed = math.floor(percentage / 100 * bar_width)
    remaining = bar_width - completed
    return f"[{'█' * completed}{'░' * remaining}] {percentage:.1f}%"


def _int_arg(value: Any, default: int) -> int:
    number = coerce_numeric(value)
    if number is None or not math.isfinite(number):
        return default
    return int(number)


DEFAULT_HELPERS: dict[str, Helper] = {
    name: Helper.wrap(func)
    for name, func in {
        # Block
        "if": _helper_if,
        "unless": _helper_unless,
        "each": _helper_each,
        # Comparison
        "eq": _comparison(operator.eq),
        "ne": _comparison(operator.ne),
        "lt": _comparison(operator.lt),
        "le": _comparison(operator.le),
        "gt": _comparison(operator.gt),
        "ge": _comparison(operator.ge),
        # String
        "capitalize": _helper_capitalize,
        "uppercase": _helper_uppercase,
        "lowercase": _helper_lowercase,
        "truncate": _helper_truncate,
        # Formatting
        "json": _helper_json,
        "formatNumber": _helper_format_number,
        "formatDate": _helper_format_date,
        # Array
        "length": _helper_length,
        "first": _helper_first,
        "last": _helper_last,
        "join": _helper_join,
        # Arithmetic
        "add": _arithmetic(operator.add),
        "subtract": _arithmetic(operator.sub),
        "multiply": _arithmetic(operator.mul),
        "divide": _arithmetic(operator.truediv),
        # Utility
        "default": _helper_default,
        # CLI
        "colorize": _helper_colorize,
        "progress": _helper_progress,
    }.items()
}
