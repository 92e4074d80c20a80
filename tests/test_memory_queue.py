import pytest

from servkit.memory_queue import MemoryQueue, SeqGenerator, TopicData


def _queue(capacity, seqs):
    queue = MemoryQueue(capacity)
    for seq in seqs:
        queue.push(TopicData(seq=seq))
    return queue


def _seqs(items):
    return [item.seq for item in items]


def test_source_case_wrapped_queue_too_old_start():
    queue = _queue(5, range(1, 9))
    start_index = 0
    rounds = 0
    while True:
        data, ok = queue.find_data(start_index + 1, 10)
        rounds += 1
        for item in data:
            start_index = max(start_index, item.seq)
        if not ok:
            break
    assert rounds == 1
    assert start_index == 0


def test_wrapped_queue_keeps_latest_items():
    queue = _queue(5, range(1, 9))
    assert len(queue) == 5
    data, ok = queue.find_data(4, 10)
    assert ok is True
    assert _seqs(data) == [4, 5]
    data, ok = queue.find_data(6, 10)
    assert ok is True
    assert _seqs(data) == [6, 7, 8]


def test_wrapped_queue_start_past_newest():
    queue = _queue(5, range(1, 9))
    assert queue.find_data(9, 10) == ([], False)


def test_empty_queue_asks_elsewhere():
    queue = MemoryQueue(3)
    assert queue.find_data(1, 10) == ([], False)
    assert len(queue) == 0


def test_unwrapped_queue_with_limit():
    queue = _queue(10, [2, 4, 6, 8])
    data, ok = queue.find_data(4, 2)
    assert ok is True
    assert _seqs(data) == [4, 6]


def test_missing_seq_matches_next_greater():
    queue = _queue(10, [2, 4, 6, 8])
    data, ok = queue.find_data(5, 10)
    assert ok is True
    assert _seqs(data) == [6, 8]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        MemoryQueue(0)


def test_seq_generator_counts_within_second_and_resets():
    now = [100.2]
    gen = SeqGenerator(clock=lambda: now[0])
    first = gen.next_seq()
    second = gen.next_seq()
    assert first == (100 << 32) | 1
    assert second == (100 << 32) | 2
    now[0] = 101.0
    assert gen.next_seq() == (101 << 32) | 1


def test_seq_generator_increasing():
    gen = SeqGenerator()
    values = [gen.next_seq() for _ in range(50)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)