"""Indexable skip list ordered by each item's ``compare`` method.

Items that define ``compare(other)`` (negative, zero or positive) are
ordered by it; other items fall back to the natural ``<``/``>`` ordering.
Every node records the width of each forward link, so items can also be
addressed by their zero-based position.
"""

from __future__ import annotations

import random
from typing import Any, Iterator

_P = 0.5
_LEVELS = (8, 16, 32, 64)

_generator = random.Random()


def _compare(a: Any, b: Any) -> int:
    compare = getattr(a, "compare", None)
    if compare is not None:
        return compare(b)
    return (a > b) - (a < b)


def _generate_level(max_level: int) -> int:
    level = 1
    while level < max_level - 1:
        if _generator.random() >= _P:
            return level
        level += 1
    return level


class _Node:
    __slots__ = ("entry", "forward", "widths", "pre_node")

    def __init__(self, entry: Any, levels: int) -> None:
        self.entry = entry
        self.forward: list[_Node | None] = [None] * levels
        self.widths: list[int] = [0] * levels
        self.pre_node: _Node | None = None


class SkipIterator:
    """Cursor over a skip list that can step forwards and backwards.

    The first call to ``next`` or ``prev`` lands on the starting item.
    """

    def __init__(self, node: _Node | None = None) -> None:
        self._first = node is not None
        self._node = node

    def next(self) -> bool:
        """Move to the following item; return whether there is one."""
        if self._first:
            self._first = False
            return self._node is not None
        if self._node is None:
            return False
        self._node = self._node.forward[0]
        return self._node is not None

    def prev(self) -> bool:
        """Move to the preceding item; return whether there is one."""
        if self._first:
            self._first = False
            return self._node is not None
        if self._node is None:
            return False
        self._node = self._node.pre_node
        return self._node is not None and self._node.entry is not None

    def value(self) -> Any:
        """Return the item at the cursor, or None."""
        if self._node is None:
            return None
        return self._node.entry

    def __iter__(self) -> Iterator[Any]:
        while self.next():
            yield self.value()


class SkipList:
    """Sorted list with logarithmic search, insertion, deletion and indexing."""

    def __init__(self, max_level: int = 32) -> None:
        if max_level not in _LEVELS:
            raise ValueError(f"max_level must be one of {_LEVELS}, not {max_level!r}")
        self._max_level = max_level
        self._level = 0
        self._num = 0
        self._head = _Node(None, max_level)
        self._cache: list[_Node] = [self._head] * max_level
        self._pos_cache: list[int] = [0] * max_level

    def __len__(self) -> int:
        return self._num

    def __iter__(self) -> Iterator[Any]:
        node = self._head.forward[0]
        while node is not None:
            yield node.entry
            node = node.forward[0]

    def _reset_cache(self) -> None:
        for i in range(self._max_level):
            self._cache[i] = self._head
            self._pos_cache[i] = 0

    def _search(self, item: Any, update: bool) -> tuple[_Node | None, int]:
        if self._num == 0:
            if update:
                self._reset_cache()
            return None, 1

        pos = 0
        checked = None
        node = self._head
        for offset in range(self._level, -1, -1):
            while True:
                nxt = node.forward[offset]
                if nxt is None or nxt is checked or _compare(nxt.entry, item) >= 0:
                    break
                pos += node.widths[offset]
                node = nxt
            checked = node
            if update:
                self._cache[offset] = node
                self._pos_cache[offset] = pos
        return node.forward[0], pos + 1

    def _search_by_position(self, position: int, update: bool) -> tuple[_Node | None, int]:
        if self._num == 0 or position > self._num:
            if update:
                self._reset_cache()
            return None, 1

        pos = 0
        node = self._head
        for offset in range(self._level, -1, -1):
            while True:
                nxt = node.forward[offset]
                if nxt is None or pos + node.widths[offset] > position:
                    break
                pos += node.widths[offset]
                node = nxt
            if update:
                self._cache[offset] = node
                self._pos_cache[offset] = pos
        return node, pos + 1

    def _insert_node(self, found: _Node | None, item: Any, pos: int, allow_duplicate: bool) -> Any:
        if not allow_duplicate and found is not None and _compare(found.entry, item) == 0:
            old = found.entry
            found.entry = item
            return old

        self._num += 1
        cache, pos_cache = self._cache, self._pos_cache
        node_level = _generate_level(self._max_level)
        if node_level > self._level:
            for i in range(self._level, node_level):
                cache[i] = self._head
                pos_cache[i] = 0
            self._level = node_level

        new = _Node(item, node_level)
        for i in range(node_level):
            prev = cache[i]
            if i == 0:
                new.pre_node = prev
                following = prev.forward[0]
                if following is not None:
                    following.pre_node = new
            new.forward[i] = prev.forward[i]
            prev.forward[i] = new

            former = prev.widths[i]
            new.widths[i] = 0 if former == 0 else pos_cache[i] + former + 1 - pos
            prev.widths[i] = pos - pos_cache[i]

        for i in range(node_level, self._level):
            if cache[i].forward[i] is not None:
                cache[i].widths[i] += 1
        return None

    def get(self, *args: Any) -> list[Any]:
        """Return the stored item equal to each argument, or None in its place."""
        result = []
        for item in args:
            node, _ = self._search(item, False)
            if node is not None and _compare(node.entry, item) == 0:
                result.append(node.entry)
            else:
                result.append(None)
        return result

    def get_with_position(self, item: Any) -> tuple[Any, int]:
        """Return the first item not less than ``item`` and its position, or (None, 0)."""
        node, pos = self._search(item, False)
        if node is None:
            return None, 0
        return node.entry, pos - 1

    def by_position(self, position: int) -> Any:
        """Return the item at zero-based ``position``, or None."""
        node, _ = self._search_by_position(position + 1, False)
        if node is None:
            return None
        return node.entry

    def insert(self, *args: Any) -> list[Any]:
        """Insert the items; return for each the item it replaced, or None."""
        overwritten = []
        for item in args:
            node, pos = self._search(item, True)
            overwritten.append(self._insert_node(node, item, pos, False))
        return overwritten

    def insert_at_position(self, position: int, item: Any) -> None:
        """Insert ``item`` at ``position`` without order or duplicate checks.

        A position past the end appends the item.
        """
        position = min(position, self._num)
        node, pos = self._search_by_position(position, True)
        self._insert_node(node, item, pos, True)

    def replace_at_position(self, position: int, item: Any) -> None:
        """Replace the item at ``position``; do nothing if there is none."""
        node, _ = self._search_by_position(position + 1, False)
        if node is None or node is self._head:
            return
        node.entry = item

    def _delete(self, item: Any) -> Any:
        node, _ = self._search(item, True)
        if node is None or _compare(node.entry, item) != 0:
            return None

        self._num -= 1
        for i in range(self._level + 1):
            prev = self._cache[i]
            if prev.forward[i] is not node:
                if prev.forward[i] is not None:
                    prev.widths[i] -= 1
                continue
            if i == 0:
                following = node.forward[0]
                if following is not None:
                    following.pre_node = prev
                node.pre_node = None
            prev.widths[i] += node.widths[i] - 1
            prev.forward[i] = node.forward[i]

        while self._level > 1 and self._head.forward[self._level - 1] is None:
            self._head.widths[self._level] = 0
            self._level -= 1
        return node.entry

    def delete(self, *args: Any) -> list[Any]:
        """Remove the items; return for each the removed item, or None."""
        return [self._delete(item) for item in args]

    def iter_at_position(self, position: int) -> SkipIterator:
        """Return a cursor starting at zero-based ``position``."""
        node, _ = self._search_by_position(position + 1, False)
        if node is None or node.entry is None:
            return SkipIterator()
        return SkipIterator(node)

    def iter_from(self, item: Any) -> SkipIterator:
        """Return a cursor starting at the first item not less than ``item``."""
        node, _ = self._search(item, False)
        if node is None:
            return SkipIterator()
        return SkipIterator(node)

    def _reset_max_level(self) -> None:
        if self._level < 1:
            self._level = 1
            return
        while self._head.forward[self._level - 1] is None and self._level > 1:
            self._level -= 1

    def split_at(self, index: int) -> tuple[SkipList, SkipList | None]:
        """Split after zero-based ``index`` into (left, right), changing this list.

        If ``index`` is the last position or beyond, returns (self, None).
        """
        index += 1
        if index >= self._num:
            return self, None

        right = SkipList(self._max_level)
        right._level = self._level
        self._search_by_position(index, True)

        for i in range(self._level + 1):
            prev = self._cache[i]
            right._head.forward[i] = prev.forward[i]
            if prev.forward[i] is not None:
                right._head.widths[i] = prev.widths[i] - (index - self._pos_cache[i])
            prev.widths[i] = 0
            prev.forward[i] = None

        first = right._head.forward[0]
        if first is not None:
            first.pre_node = right._head

        right._num = self._num - index
        self._num -= right._num

        self._reset_max_level()
        right._reset_max_level()
        return self, right