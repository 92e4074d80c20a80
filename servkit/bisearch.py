"""Binary search over sorted sequences with nearest-neighbour matching."""

from __future__ import annotations

from typing import Any, Callable, Sequence


def bi_search(
    elements: Sequence[Any],
    value: Any,
    match_up: int = 0,
    key: Callable[[Any], Any] | None = None,
) -> int:
    """Return the index of ``value`` in the sorted ``elements``, or -1.

    ``match_up`` selects what happens when no element equals ``value``:
    0 requires an exact match, -1 picks the nearest element to the left,
    1 picks the nearest element to the right.  ``key`` extracts the
    comparable value from an element (the element itself by default).
    """

    def value_at(index: int) -> Any:
        item = elements[index]
        return item if key is None else key(item)

    low, high = 0, len(elements) - 1
    if high == -1:
        return -1

    mid = 0
    while low <= high:
        mid = low + ((high - low) >> 1)
        current = value_at(mid)
        if current > value:
            high = mid - 1
        elif current < value:
            low = mid + 1
        else:
            return mid

    current = value_at(mid)
    if match_up == 1:
        if current < value:
            return -1 if mid + 1 >= len(elements) else mid + 1
        return mid
    if match_up == -1:
        if current > value:
            return -1 if mid - 1 < 0 else mid - 1
        return mid
    return -1