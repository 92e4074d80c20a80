"""Rank entries, their ordering, and the expiry heap used by rankings."""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field


def transform_level(level: int) -> int:
    """Map a configured skip list level to a supported maximum level (default 32)."""
    return level if level in (8, 16, 32, 64) else 32


def compare_is_equal(first: list[int], second: list[int]) -> bool:
    """Return whether the two sort-data lists are identical."""
    return list(first) == list(second)


def compare_more_than(first: list[int], second: list[int]) -> int:
    """Compare sort data over their common prefix: 1, -1, or 0 when tied."""
    for a, b in zip(first, second):
        if a > b:
            return 1
        if a < b:
            return -1
    return 0


@dataclass
class ExtendIncData:
    """Extension value given as an initial value plus an increment."""

    init_value: int = 0
    increase_value: int = 0


@dataclass
class RankEntry:
    """Data submitted for one key of a ranking."""

    key: int
    sort_data: list[int] = field(default_factory=list)
    data: bytes | None = None
    ex_data: list[ExtendIncData] = field(default_factory=list)


@dataclass(eq=False)
class RankData:
    """A key's place in a ranking, ordered by ``compare``.

    Two items with the same key compare equal; otherwise sort data decides,
    then the key breaks ties.
    """

    key: int
    sort_data: list[int] = field(default_factory=list)
    data: bytes | None = None
    ex_data: list[int] = field(default_factory=list)
    refresh_timestamp: int = 0
    is_desc: bool = False

    def compare(self, other: RankData) -> int:
        if other.key == self.key:
            return 0
        if self.is_desc:
            flag = compare_more_than(other.sort_data, self.sort_data)
            if flag == 0:
                flag = -1 if self.key > other.key else 1
            return flag
        flag = compare_more_than(self.sort_data, other.sort_data)
        if flag == 0:
            flag = 1 if self.key > other.key else -1
        return flag


def new_rank_data(is_desc: bool, entry: RankEntry, refresh_timestamp: int) -> RankData:
    """Build a RankData from ``entry``, folding each extension into one value."""
    return RankData(
        key=entry.key,
        sort_data=list(entry.sort_data),
        data=entry.data,
        ex_data=[d.init_value + d.increase_value for d in entry.ex_data],
        refresh_timestamp=refresh_timestamp,
        is_desc=is_desc,
    )


class ExpireHeap:
    """Tracks keys by last refresh time and yields those older than ``expire_ns``."""

    def __init__(self, expire_ns: int) -> None:
        self.expire_ns = expire_ns
        self._entries: dict[int, tuple[int, int]] = {}
        self._heap: list[tuple[int, int, int]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _compact(self) -> None:
        if len(self._heap) > 2 * len(self._entries) + 64:
            self._heap = [(ts, version, key) for key, (ts, version) in self._entries.items()]
            heapq.heapify(self._heap)

    def _discard_stale(self) -> None:
        while self._heap:
            ts, version, key = self._heap[0]
            if self._entries.get(key) == (ts, version):
                return
            heapq.heappop(self._heap)

    def push_or_refresh(self, key: int, refresh_timestamp: int) -> None:
        """Record ``key`` as refreshed at ``refresh_timestamp`` (nanoseconds)."""
        version = next(self._counter)
        self._entries[key] = (refresh_timestamp, version)
        heapq.heappush(self._heap, (refresh_timestamp, version, key))
        self._compact()

    def pop_expired_key(self, now_ns: int | None = None) -> int | None:
        """Remove and return the oldest key if it has expired, else None."""
        if now_ns is None:
            now_ns = time.time_ns()
        self._discard_stale()
        if not self._heap:
            return None
        ts, _, key = self._heap[0]
        if ts + self.expire_ns > now_ns:
            return None
        heapq.heappop(self._heap)
        del self._entries[key]
        return key

    def remove(self, key: int) -> None:
        """Stop tracking ``key``; nothing happens if it is not tracked."""
        if self._entries.pop(key, None) is not None:
            self._compact()