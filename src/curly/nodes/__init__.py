"""Curly AST node types.

Node hierarchy:
    Node
    ├── Text        literal text
    ├── Variable    {{ path | filter }} or {{ helper arg }}
    ├── Filter      one filter stage of a Variable
    ├── Block       {{#helper args}}...{{/helper}}
    └── Partial     {{> name ctx}}

"""

from curly.nodes.base import Node
from curly.nodes.output import Filter, Text, Variable
from curly.nodes.structure import Block, Partial

__all__ = [
    "Block",
    "Filter",
    "Node",
    "Partial",
    "Text",
    "Variable",
]
