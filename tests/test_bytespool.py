import pytest

from servkit.bytespool import BytesMemPool


def test_small_buffer_rounded_to_first_class():
    pool = BytesMemPool()
    buff = pool.make_bytes(100)
    assert len(buff) == 100
    assert len(buff.obj) == 512


@pytest.mark.parametrize("size", [4096, 40960, 417792, 1925120])
def test_class_boundaries_are_exact(size):
    pool = BytesMemPool()
    buff = pool.make_bytes(size)
    assert len(buff) == size
    assert len(buff.obj) == size


@pytest.mark.parametrize("size", [0, 1, 513, 5000, 50000, 500000])
def test_capacity_covers_size(size):
    pool = BytesMemPool()
    buff = pool.make_bytes(size)
    assert len(buff) == size
    assert len(buff.obj) >= size


def test_released_buffer_is_reused():
    pool = BytesMemPool()
    buff = pool.make_bytes(700)
    backing = buff.obj
    assert pool.release_bytes(buff) is True
    again = pool.make_bytes(800)
    assert again.obj is backing
    assert len(again) == 800


def test_oversized_not_pooled():
    pool = BytesMemPool()
    buff = pool.make_bytes(2_000_000)
    assert len(buff) == 2_000_000
    assert pool.release_bytes(buff) is False


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        BytesMemPool().make_bytes(-1)


def test_plain_bytearray_can_be_released():
    pool = BytesMemPool()
    assert pool.release_bytes(bytearray(10)) is True