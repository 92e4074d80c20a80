import random

import pytest

from servkit.skiplist import SkipList


class Item:
    def __init__(self, key, payload=None):
        self.key = key
        self.payload = payload

    def compare(self, other):
        return (self.key > other.key) - (self.key < other.key)


def _filled(values, max_level=32):
    sl = SkipList(max_level)
    sl.insert(*values)
    return sl


def _check_consistent(sl, expected):
    assert len(sl) == len(expected)
    assert list(sl) == expected
    for index, value in enumerate(expected):
        assert sl.by_position(index) == value
        assert sl.get_with_position(value) == (value, index)


def test_invalid_max_level_raises():
    with pytest.raises(ValueError):
        SkipList(10)


def test_insert_keeps_sorted_order():
    values = list(range(0, 300, 3))
    shuffled = values[:]
    random.Random(7).shuffle(shuffled)
    sl = _filled(shuffled)
    _check_consistent(sl, values)


def test_insert_returns_none_for_new_items():
    sl = SkipList(16)
    assert sl.insert(5, 1, 9) == [None, None, None]
    assert len(sl) == 3


def test_duplicate_insert_replaces_entry():
    sl = SkipList()
    first = Item(1, "a")
    second = Item(1, "b")
    sl.insert(first, Item(2, "c"))
    assert sl.insert(second) == [first]
    assert len(sl) == 2
    assert sl.get(Item(1))[0] is second


def test_get_missing_returns_none():
    sl = _filled([10, 20, 30])
    assert sl.get(20, 25) == [20, None]


def test_by_position_out_of_range():
    sl = _filled([10, 20, 30])
    assert sl.by_position(3) is None
    assert SkipList().by_position(0) is None


def test_get_with_position_on_empty_list():
    assert SkipList().get_with_position(4) == (None, 0)


def test_delete_returns_removed_items():
    sl = _filled([10, 20, 30, 40])
    assert sl.delete(20, 25) == [20, None]
    _check_consistent(sl, [10, 30, 40])


def test_delete_everything_then_reuse():
    sl = _filled([3, 1, 2])
    assert sl.delete(1, 2, 3) == [1, 2, 3]
    assert len(sl) == 0
    assert list(sl) == []
    sl.insert(8, 6)
    _check_consistent(sl, [6, 8])


def test_random_inserts_and_deletes_keep_positions():
    rng = random.Random(12345)
    values = rng.sample(range(100000), 400)
    sl = _filled(values, max_level=8)
    removed = values[::2]
    assert sl.delete(*removed) == removed
    kept = sorted(values[1::2])
    _check_consistent(sl, kept)
    extra = [v for v in rng.sample(range(100000, 200000), 150)]
    sl.insert(*extra)
    _check_consistent(sl, sorted(kept + extra))


def test_iter_from_forward():
    sl = _filled([10, 20, 30, 40])
    it = sl.iter_from(25)
    assert it.next() is True
    assert it.value() == 30
    assert it.next() is True
    assert it.value() == 40
    assert it.next() is False
    assert it.value() is None


def test_iter_from_backward():
    sl = _filled([10, 20, 30, 40])
    it = sl.iter_from(30)
    seen = []
    while it.prev():
        seen.append(it.value())
    assert seen == [30, 20, 10]


def test_iter_from_past_end_is_empty():
    sl = _filled([10, 20])
    it = sl.iter_from(45)
    assert it.next() is False
    assert it.value() is None


def test_prev_links_survive_deletes():
    rng = random.Random(3)
    values = rng.sample(range(1000), 60)
    sl = _filled(values)
    sl.delete(*values[:20])
    kept = sorted(values[20:])
    it = sl.iter_at_position(len(kept) - 1)
    backwards = []
    while it.prev():
        backwards.append(it.value())
    assert backwards == kept[::-1]


def test_iter_at_position():
    values = list(range(0, 50, 5))
    sl = _filled(values)
    assert list(sl.iter_at_position(4)) == values[4:]
    assert list(sl.iter_at_position(len(values))) == []


def test_insert_at_position_front_and_past_end():
    sl = _filled([10, 20, 30])
    sl.insert_at_position(0, 5)
    sl.insert_at_position(100, 99)
    _check_consistent(sl, [5, 10, 20, 30, 99])


def test_insert_at_position_allows_duplicates():
    sl = _filled([10, 20, 30])
    sl.insert_at_position(1, 10)
    assert list(sl) == [10, 10, 20, 30]
    assert len(sl) == 4


def test_replace_at_position():
    sl = _filled([10, 20, 30])
    sl.replace_at_position(1, 21)
    sl.replace_at_position(7, 70)
    assert list(sl) == [10, 21, 30]
    assert len(sl) == 3


def test_split_at_middle():
    values = list(range(100))
    sl = _filled(values)
    left, right = sl.split_at(39)
    assert left is sl
    _check_consistent(left, values[:40])
    _check_consistent(right, values[40:])


def test_split_right_iterates_backwards_within_itself():
    values = list(range(20))
    _, right = _filled(values).split_at(9)
    it = right.iter_at_position(len(right) - 1)
    backwards = []
    while it.prev():
        backwards.append(it.value())
    assert backwards == values[10:][::-1]


def test_split_at_last_index_returns_no_right():
    sl = _filled([1, 2, 3])
    left, right = sl.split_at(2)
    assert left is sl
    assert right is None
    assert list(left) == [1, 2, 3]


def test_split_lists_accept_new_items():
    values = list(range(0, 60, 2))
    left, right = _filled(values).split_at(14)
    left.insert(1, 3)
    right.insert(31, 59)
    _check_consistent(left, sorted(values[:15] + [1, 3]))
    _check_consistent(right, sorted(values[15:] + [31, 59]))