"""Curly template package: compiled templates and their runtime.

Re-exports the public runtime symbols so that ``from curly.template import
Template`` works without knowing the module layout.

"""

from curly.template.core import Template
from curly.template.helpers import HelperOptions, coerce_numeric, resolve_path, to_str
from curly.template.loop_context import LoopContext

__all__ = [
    "HelperOptions",
    "LoopContext",
    "Template",
    "coerce_numeric",
    "resolve_path",
    "to_str",
]
