"""Bounded in-memory topic queue and ordered sequence numbers for topic data."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from servkit.bisearch import bi_search

DEFAULT_ONCE_PROCESS_TOPIC_DATA_NUM = 1024
DEFAULT_MAX_TOPIC_BACKLOG_NUM = 100000
DEFAULT_MEMORY_QUEUE_LEN = 50000
MAX_TRY_PERSIST_NUM = 3000


@dataclass
class TopicData:
    """One published message: its sequence number, raw payload and extra data."""

    seq: int = 0
    raw_data: bytes | None = None
    extend_param: Any = None


def _seq_of(item: TopicData) -> int:
    return item.seq


class MemoryQueue:
    """Ring buffer of the most recent ``capacity`` topic items, ordered by ``seq``.

    When full, pushing drops the oldest item.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._slots: list[TopicData | None] = [None] * (capacity + 1)
        self._head = 0
        self._tail = 0
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return (self._tail - self._head) % len(self._slots)

    def push(self, topic_data: TopicData) -> None:
        """Append ``topic_data`` at the tail, evicting the oldest item if full."""
        with self._lock:
            size = len(self._slots)
            next_pos = (self._tail + 1) % size
            if next_pos == self._head:
                self._head = (self._head + 1) % size
            self._tail = next_pos
            self._slots[self._tail] = topic_data

    def _find(self, start: int, start_index: int, limit: int) -> list[TopicData] | None:
        end = self._tail + 1 if start <= self._tail else len(self._slots)
        if start >= end:
            return None
        window = self._slots[start:end]
        if window[0].seq > start_index:
            return None
        pos = bi_search(window, start_index, 1, key=_seq_of)
        if pos == -1:
            return None
        return window[pos:pos + limit]

    def find_data(self, start_index: int, limit: int) -> tuple[list[TopicData], bool]:
        """Return up to ``limit`` items with ``seq`` from ``start_index`` on.

        The flag is False when the memory queue cannot answer the request
        (it is empty, or the wanted items are older or newer than what it
        holds) and the caller should look elsewhere.
        """
        with self._lock:
            if self._head == self._tail:
                return [], False
            found = self._find(self._head + 1, start_index, limit)
            if found is not None:
                return list(found), True
            if self._head < self._tail:
                return [], False
            found = self._find(0, start_index, limit)
            if found is not None:
                return list(found), True
            return [], False


class SeqGenerator:
    """Produces increasing sequence numbers: seconds in the high 32 bits,
    a per-second counter starting at 1 in the low 32 bits."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._seq = 0
        self._last_time = 0
        self._lock = threading.Lock()

    def next_seq(self) -> int:
        """Return the next sequence number."""
        with self._lock:
            now_sec = int(self._clock())
            if now_sec != self._last_time:
                self._seq = 0
                self._last_time = now_sec
            self._seq += 1
            return (now_sec << 32) | self._seq