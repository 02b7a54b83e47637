"""Iteration metadata for ``{{#each}}`` blocks."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any


class LoopContext:
    """Per-iteration metadata exposed to ``{{#each}}`` children as ``@`` paths.

    Properties:
        index: 0-based iteration count (``@index``)
        first: True on the first iteration (``@first``)
        last: True on the final iteration (``@last``)
        length: Total number of items

    Example:
            ```
            {{#each items}}{{@index}}:{{name}}{{/each}}
            ```

    Mapping items are merged with the metadata keys, so ``{{@index}}`` and
    ``{{name}}`` both resolve against the item. Other items become the child
    context as-is (``{{this}}``) and the metadata is carried alongside.

    """

    __slots__ = ("_index", "_items", "_length")

    def __init__(self, items: Sequence[Any]) -> None:
        self._items = items
        self._length = len(items)
        self._index = 0

    def __iter__(self) -> Iterator[Any]:
        """Iterate through items, updating index for each."""
        for i, item in enumerate(self._items):
            self._index = i
            yield item

    @property
    def index(self) -> int:
        return self._index

    @property
    def first(self) -> bool:
        return self._index == 0

    @property
    def last(self) -> bool:
        return self._index == self._length - 1

    @property
    def length(self) -> int:
        return self._length

    def data(self) -> dict[str, Any]:
        """Metadata for the current iteration."""
        return {"@index": self.index, "@first": self.first, "@last": self.last}

    def scope(self, item: Any) -> Any:
        """Child context for the current iteration."""
        if isinstance(item, Mapping):
            return {**item, **self.data()}
        return item

    def __repr__(self) -> str:
        return f"LoopContext(index={self._index}, length={self._length})"
