import heapq
from typing import Iterable, Iterator, List

from mathscan.document.math_item import MathItem


def _key(item: MathItem):
    return item.key


class MathList:
    """MathItems kept in document order of their start positions."""

    def __init__(self, items: Iterable[MathItem] = ()):
        self._items: List[MathItem] = sorted(items, key=_key)

    def __iter__(self) -> Iterator[MathItem]:
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, i):
        return self._items[i]

    def reversed(self) -> Iterator[MathItem]:
        return reversed(self._items)

    def push(self, item: MathItem):
        """Add an item that is known to come after everything in the list."""
        self._items.append(item)

    def merge(self, items: Iterable[MathItem]) -> "MathList":
        # heapq.merge is stable: on equal keys, items already in the list come first
        incoming = sorted(items, key=_key)
        self._items = list(heapq.merge(self._items, incoming, key=_key))
        return self

    def remove(self, item: MathItem):
        self._items = [other for other in self._items if other is not item]

    def clear(self):
        self._items = []

    def keys(self) -> List[tuple]:
        return [item.key for item in self._items]
