"""A bounded, optionally expiring ranking kept in a skip list."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from servkit.rank_data import (
    ExpireHeap,
    ExtendIncData,
    RankData,
    RankEntry,
    compare_is_equal,
    compare_more_than,
    new_rank_data,
    transform_level,
)
from servkit.skiplist import SkipList

MAX_PICK_EXPIRE_NUM = 128


class RankChange(IntEnum):
    """What an upsert did to the ranking."""

    NONE = 0
    ADD = 1
    UPDATE = 2
    DELETE = 3


class RankModule:
    """Receives ranking lifecycle callbacks.

    The default module remembers the rankings set up on it, whether it is
    running, and how many enter, leave and change events it has seen.
    Subclasses override the callbacks to persist or react to changes.
    """

    @property
    def rank_skips(self) -> dict[int, RankSkip]:
        return vars(self).setdefault("_rank_skips", {})

    @property
    def event_counts(self) -> Counter:
        return vars(self).setdefault("_event_counts", Counter())

    @property
    def running(self) -> bool:
        return vars(self).get("_running", False)

    def on_setup_rank(self, manual: bool, rank_skip: RankSkip) -> None:
        """Called once a ranking has been set up."""
        self.rank_skips[rank_skip.rank_id] = rank_skip

    def on_start(self) -> None:
        """Called when the owning service starts."""
        vars(self)["_running"] = True

    def on_enter_rank(self, rank_skip: RankSkip, data: RankData) -> None:
        """Called when a key enters the ranking."""
        self.event_counts[RankChange.ADD] += 1

    def on_leave_rank(self, rank_skip: RankSkip, data: RankData) -> None:
        """Called when a key leaves the ranking."""
        self.event_counts[RankChange.DELETE] += 1

    def on_change_rank_data(self, rank_skip: RankSkip, data: RankData) -> None:
        """Called when a key's rank data changes."""
        self.event_counts[RankChange.UPDATE] += 1

    def on_stop(self, rank_skips: dict[int, RankSkip]) -> None:
        """Called when the owning service stops."""
        vars(self)["_running"] = False


@dataclass
class SetSortAndExtendData:
    """Forces a sort-data (``is_sort_data``) or extension value at ``pos``."""

    is_sort_data: bool = False
    pos: int = 0
    data: int = 0


@dataclass
class IncreaseRankData:
    """Incremental change to a key's sort data and extension values."""

    key: int
    increase_sort_data: list[int] = field(default_factory=list)
    set_sort_and_extend_data: list[SetSortAndExtendData] = field(default_factory=list)
    extend: list[ExtendIncData] = field(default_factory=list)
    insert_data_on_non_existent: bool = False
    init_data: bytes | None = None
    init_sort_data: list[int] = field(default_factory=list)


@dataclass
class RankPosData:
    """A key's rank (1-based) together with its data."""

    key: int
    rank: int
    sort_data: list[int] = field(default_factory=list)
    data: bytes | None = None
    extend_data: list[int] = field(default_factory=list)


def _pos_data(rank_data: RankData, rank: int) -> RankPosData:
    return RankPosData(
        key=rank_data.key,
        rank=rank,
        sort_data=rank_data.sort_data,
        data=rank_data.data,
        extend_data=rank_data.ex_data,
    )


class RankSkip:
    """Ranking of keys by sort data, ascending or descending (``is_desc``).

    ``max_len`` of 0 means unbounded; ``expire_ms`` of 0 means entries never
    expire.  ``rank_module`` is told about entries entering, leaving and
    changing.
    """

    def __init__(
        self,
        rank_id: int,
        rank_name: str,
        is_desc: bool = False,
        max_level: int = 32,
        max_len: int = 0,
        expire_ms: int = 0,
        rank_module: RankModule | None = None,
    ) -> None:
        self.rank_id = rank_id
        self.rank_name = rank_name
        self.is_desc = is_desc
        self.max_len = max_len
        self.expire_ms = expire_ms
        self.rank_module = rank_module if rank_module is not None else RankModule()
        self._skip = SkipList(transform_level(max_level))
        self._rank_data: dict[int, RankData] = {}
        self._expire = ExpireHeap(expire_ms * 1_000_000)

    def __len__(self) -> int:
        return len(self._skip)

    def __contains__(self, key: object) -> bool:
        return key in self._rank_data

    def _pick_expire_keys(self) -> None:
        if self.expire_ms == 0:
            return
        for _ in range(MAX_PICK_EXPIRE_NUM):
            key = self._expire.pop_expired_key()
            if key is None:
                return
            self.delete_rank_data([key])

    def _store(self, rank_data: RankData) -> None:
        self._skip.insert(rank_data)
        self._rank_data[rank_data.key] = rank_data

    def upsert_rank_list(self, entries: Iterable[RankEntry]) -> tuple[int, int]:
        """Upsert every entry; return (added count, modified count)."""
        added = modified = 0
        for entry in entries:
            change = self.upsert_rank(entry, time.time_ns(), False)
            if change is RankChange.ADD:
                added += 1
            elif change is RankChange.UPDATE:
                modified += 1
        self._pick_expire_keys()
        return added, modified

    def upsert_rank(
        self, entry: RankEntry, refresh_timestamp: int | None = None, from_load: bool = False
    ) -> RankChange:
        """Insert or update ``entry``; callbacks are skipped when ``from_load``."""
        if refresh_timestamp is None:
            refresh_timestamp = time.time_ns()

        node = self._rank_data.get(entry.key)
        if node is not None:
            for i, ext in enumerate(entry.ex_data):
                if i < len(node.ex_data):
                    node.ex_data[i] += ext.increase_value
                else:
                    node.ex_data.append(ext.init_value + ext.increase_value)

            if compare_is_equal(node.sort_data, entry.sort_data):
                node.data = entry.data
                node.refresh_timestamp = refresh_timestamp
                if not from_load:
                    self.rank_module.on_change_rank_data(self, node)
                self._expire.push_or_refresh(entry.key, refresh_timestamp)
                return RankChange.UPDATE

            new = RankData(
                key=entry.key,
                sort_data=list(entry.sort_data),
                data=entry.data if entry.data is not None else node.data,
                ex_data=list(node.ex_data),
                refresh_timestamp=refresh_timestamp,
                is_desc=self.is_desc,
            )
            self._skip.delete(node)
            self._store(new)
            self._expire.push_or_refresh(entry.key, refresh_timestamp)
            if not from_load:
                self.rank_module.on_change_rank_data(self, new)
            return RankChange.UPDATE

        if self._check_insert_and_replace(entry):
            new = new_rank_data(self.is_desc, entry, refresh_timestamp)
            self._store(new)
            self._expire.push_or_refresh(entry.key, refresh_timestamp)
            if not from_load:
                self.rank_module.on_enter_rank(self, new)
            return RankChange.ADD

        return RankChange.NONE

    def update_rank_data(self, key: int, data: bytes | None) -> bool:
        """Replace the payload of ``key``; False if the key is not ranked."""
        node = self._rank_data.get(key)
        if node is None:
            return False
        node.data = data
        self._expire.push_or_refresh(key, time.time_ns())
        self.rank_module.on_change_rank_data(self, node)
        return True

    def _insert_on_non_existent(self, change: IncreaseRankData) -> bool:
        if not change.insert_data_on_non_existent:
            return False

        sort_data = list(change.init_sort_data)
        for i, inc in enumerate(change.increase_sort_data[: len(sort_data)]):
            sort_data[i] += inc
        ex_data = [ExtendIncData(e.init_value, e.increase_value) for e in change.extend]

        for setting in change.set_sort_and_extend_data:
            if setting.is_sort_data:
                if not 0 <= setting.pos < len(sort_data):
                    return False
                sort_data[setting.pos] = setting.data
            elif 0 <= setting.pos < len(ex_data):
                ex_data[setting.pos] = ExtendIncData(setting.data, 0)

        refresh_timestamp = time.time_ns()
        entry = RankEntry(key=change.key, sort_data=sort_data, data=change.init_data, ex_data=ex_data)
        new = new_rank_data(self.is_desc, entry, refresh_timestamp)
        self._store(new)
        self._expire.push_or_refresh(change.key, refresh_timestamp)
        self.rank_module.on_change_rank_data(self, new)
        return True

    def change_extend_data(self, change: IncreaseRankData) -> bool:
        """Apply increments and forced values to a key.

        A missing key is inserted only when ``insert_data_on_non_existent``
        is set; otherwise False is returned.
        """
        node = self._rank_data.get(change.key)
        if node is None:
            return self._insert_on_non_existent(change)

        increases = change.increase_sort_data[: len(node.sort_data)]
        settings = change.set_sort_and_extend_data
        changed = any(inc != 0 for inc in increases) or any(s.is_sort_data for s in settings)

        rank_data = node
        refresh_timestamp = time.time_ns()
        if changed:
            sort_data = list(node.sort_data)
            for i, inc in enumerate(increases):
                sort_data[i] += inc
            for setting in settings:
                if setting.is_sort_data and 0 <= setting.pos < len(sort_data):
                    sort_data[setting.pos] = setting.data

            entry = RankEntry(key=node.key, sort_data=sort_data, data=node.data)
            rank_data = new_rank_data(self.is_desc, entry, refresh_timestamp)
            rank_data.ex_data = list(node.ex_data)
            self._skip.delete(node)
            self._store(rank_data)

        for i, ext in enumerate(change.extend):
            if i < len(rank_data.ex_data):
                rank_data.ex_data[i] += ext.increase_value
            else:
                rank_data.ex_data.append(ext.init_value + ext.increase_value)

        for setting in settings:
            if not setting.is_sort_data and 0 <= setting.pos < len(rank_data.ex_data):
                rank_data.ex_data[setting.pos] = setting.data

        self._expire.push_or_refresh(rank_data.key, refresh_timestamp)
        self.rank_module.on_change_rank_data(self, rank_data)
        return True

    def delete_rank_data(self, keys: Iterable[int]) -> int:
        """Remove the given keys; return how many were ranked."""
        removed = 0
        for key in keys:
            rank_data = self._rank_data.pop(key, None)
            if rank_data is None:
                continue
            removed += 1
            self._skip.delete(rank_data)
            self._expire.remove(key)
            self.rank_module.on_leave_rank(self, rank_data)
        return removed

    def get_rank_node_data(self, key: int) -> tuple[RankData | None, int]:
        """Return the data of ``key`` and its 1-based rank, or (None, 0)."""
        if key not in self._rank_data:
            return None, 0
        self._pick_expire_keys()
        node = self._rank_data.get(key)
        if node is None:
            return None, 0
        _, index = self._skip.get_with_position(node)
        return node, index + 1

    def get_rank_node_data_by_rank(self, rank: int) -> tuple[RankData | None, int]:
        """Return the data at 1-based ``rank`` and the rank, or (None, 0)."""
        self._pick_expire_keys()
        if rank < 1:
            return None, 0
        node = self._skip.by_position(rank - 1)
        if node is None:
            return None, 0
        return node, rank

    def _walk_from(self, key: int, count: int, forward: bool) -> list[RankPosData]:
        if len(self._skip) == 0:
            raise LookupError(f"rank[{self.rank_id}] no data")
        found = self._rank_data.get(key)
        if found is None:
            raise LookupError(f"rank[{self.rank_id}] no data")

        _, pos = self._skip.get_with_position(found)
        cursor = self._skip.iter_from(found)
        step = cursor.next if forward else cursor.prev
        result: list[RankPosData] = []
        while len(result) < count and step():
            offset = len(result)
            rank = pos + offset + 1 if forward else pos - offset + 1
            result.append(_pos_data(cursor.value(), rank))
        return result

    def get_rank_key_prev_to_limit(self, key: int, count: int) -> list[RankPosData]:
        """Return ``key`` and the entries ranked before it, up to ``count`` in all."""
        return self._walk_from(key, count, False)

    def get_rank_key_next_to_limit(self, key: int, count: int) -> list[RankPosData]:
        """Return ``key`` and the entries ranked after it, up to ``count`` in all."""
        return self._walk_from(key, count, True)

    def get_rank_data_from_to_limit(self, start_pos: int, count: int) -> list[RankPosData]:
        """Return up to ``count`` entries starting at zero-based ``start_pos``.

        A start beyond the ranking's length starts at the last entry.
        """
        total = len(self._skip)
        if total == 0:
            return []
        self._pick_expire_keys()
        if start_pos < 0 or start_pos > total:
            start_pos = total - 1

        cursor = self._skip.iter_at_position(start_pos)
        result: list[RankPosData] = []
        while len(result) < count and cursor.next():
            result.append(_pos_data(cursor.value(), start_pos + len(result) + 1))
        return result

    def _check_insert_and_replace(self, entry: RankEntry) -> bool:
        if self.max_len == 0:
            return True
        length = len(self._skip)
        if self.max_len > length:
            return True

        last: RankData = self._skip.by_position(length - 1)
        flag = compare_more_than(entry.sort_data, last.sort_data)
        if (self.is_desc and flag < 0) or (not self.is_desc and flag > 0) or flag == 0:
            return False

        self._expire.remove(last.key)
        self.rank_module.on_leave_rank(self, last)
        self._skip.delete(last)
        self._rank_data.pop(last.key, None)
        return True