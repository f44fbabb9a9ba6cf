"""An in-memory B+ tree mapping ordered keys to values."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Generic, Iterator, Optional, Tuple, TypeVar, Union

K = TypeVar("K")
V = TypeVar("V")

_Split = Optional[Tuple[Any, "Union[_Leaf, _Internal]"]]


class _Leaf:
    __slots__ = ("keys", "values", "next")

    def __init__(self) -> None:
        self.keys: list = []
        self.values: list = []
        self.next: Optional[_Leaf] = None

    def _position(self, key) -> Optional[int]:
        idx = bisect_left(self.keys, key)
        if idx < len(self.keys) and self.keys[idx] == key:
            return idx
        return None

    def insert(self, key, value, order: int) -> _Split:
        idx = bisect_left(self.keys, key)
        if idx < len(self.keys) and self.keys[idx] == key:
            self.values[idx] = value
            return None

        self.keys.insert(idx, key)
        self.values.insert(idx, value)

        if len(self.keys) <= order:
            return None

        mid = len(self.keys) // 2
        sibling = _Leaf()
        sibling.keys = self.keys[mid:]
        sibling.values = self.values[mid:]
        del self.keys[mid:]
        del self.values[mid:]
        sibling.next = self.next
        self.next = sibling
        return sibling.keys[0], sibling

    def find(self, key):
        idx = self._position(key)
        return None if idx is None else self.values[idx]

    def update(self, key, value) -> bool:
        idx = self._position(key)
        if idx is None:
            return False
        self.values[idx] = value
        return True

    def remove(self, key) -> bool:
        idx = self._position(key)
        if idx is None:
            return False
        del self.keys[idx]
        del self.values[idx]
        return True


class _Internal:
    __slots__ = ("keys", "children")

    def __init__(self) -> None:
        self.keys: list = []
        self.children: list = []

    def child_for(self, key):
        return self.children[bisect_right(self.keys, key)]

    def insert(self, key, value, order: int) -> _Split:
        idx = bisect_right(self.keys, key)
        split = self.children[idx].insert(key, value, order)
        if split is None:
            return None

        split_key, new_node = split
        self.keys.insert(idx, split_key)
        self.children.insert(idx + 1, new_node)

        if len(self.keys) <= order:
            return None

        mid = len(self.keys) // 2
        middle_key = self.keys[mid]
        sibling = _Internal()
        sibling.keys = self.keys[mid + 1:]
        sibling.children = self.children[mid + 1:]
        del self.keys[mid:]
        del self.children[mid + 1:]
        return middle_key, sibling

    def find(self, key):
        return self.child_for(key).find(key)

    def update(self, key, value) -> bool:
        return self.child_for(key).update(key, value)

    def remove(self, key) -> bool:
        # Nodes are never merged; underfull leaves simply stay in place.
        return self.child_for(key).remove(key)


class BPlusTree(Generic[K, V]):
    """A B+ tree whose nodes split once they hold more than ``order`` keys."""

    def __init__(self, order: int = 4) -> None:
        if order < 1:
            raise ValueError("order must be at least 1")
        self.order = order
        self._root: Union[_Leaf, _Internal] = _Leaf()

    def insert(self, key: K, value: V) -> None:
        """Insert a key, replacing the value if the key is already present."""
        split = self._root.insert(key, value, self.order)
        if split is not None:
            split_key, new_node = split
            new_root = _Internal()
            new_root.keys.append(split_key)
            new_root.children.extend([self._root, new_node])
            self._root = new_root

    def find(self, key: K) -> Optional[V]:
        """Return the value stored under ``key``, or None if it is absent."""
        return self._root.find(key)

    def update(self, key: K, value: V) -> bool:
        """Replace the value of an existing key; return False if it is absent."""
        return self._root.update(key, value)

    def remove(self, key: K) -> bool:
        """Remove ``key``; return whether it was present."""
        removed = self._root.remove(key)
        root = self._root
        if removed and isinstance(root, _Internal) and not root.keys:
            self._root = root.children[0]
        return removed

    def range_scan(self, start: K, end: K) -> Iterator[Tuple[K, V]]:
        """Yield ``(key, value)`` pairs with ``start <= key <= end`` in key order."""
        node = self._root
        while isinstance(node, _Internal):
            node = node.child_for(start)

        leaf: Optional[_Leaf] = node
        while leaf is not None:
            first = bisect_left(leaf.keys, start)
            for key, value in zip(leaf.keys[first:], leaf.values[first:]):
                if key > end:
                    return
                yield key, value
            leaf = leaf.next