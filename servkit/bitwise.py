"""Bit flags stored in a mutable sequence of fixed-width integers."""

from __future__ import annotations

from typing import MutableSequence


def _locate(buff: MutableSequence[int], index: int, width: int) -> tuple[int, int] | None:
    if width <= 0:
        raise ValueError("width must be positive")
    if index < 0 or index >= len(buff) * width:
        return None
    return divmod(index, width)


def get_bitwise_num(buff: MutableSequence[int], width: int = 8) -> int:
    """Return how many bits ``buff`` holds when each item is ``width`` bits wide."""
    return len(buff) * width


def get_bitwise_tag(buff: MutableSequence[int], index: int, width: int = 8) -> bool:
    """Return whether bit ``index`` is set; raise ValueError if it is out of range."""
    location = _locate(buff, index, width)
    if location is None:
        raise ValueError("invalid parameter")
    slot, bit = location
    return buff[slot] & (1 << bit) != 0


def _set_tag(buff: MutableSequence[int], index: int, width: int, tag: bool) -> bool:
    location = _locate(buff, index, width)
    if location is None:
        return False
    slot, bit = location
    if tag:
        buff[slot] |= 1 << bit
    else:
        buff[slot] &= ~(1 << bit)
    return True


def set_bitwise_tag(buff: MutableSequence[int], index: int, width: int = 8) -> bool:
    """Set bit ``index``; return False if the index is out of range."""
    return _set_tag(buff, index, width, True)


def clear_bitwise_tag(buff: MutableSequence[int], index: int, width: int = 8) -> bool:
    """Clear bit ``index``; return False if the index is out of range."""
    return _set_tag(buff, index, width, False)