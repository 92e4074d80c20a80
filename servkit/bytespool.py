"""Size-classed pool of reusable byte buffers."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

# (smallest size, largest size, growth step) of each size class range
_AREAS = (
    (1, 4096, 512),
    (4097, 40960, 4096),
    (40961, 417792, 16384),
    (417793, 1925120, 65536),
)


def _slot_of(size: int, minimum: int, growth: int) -> int:
    # Truncating division, so that a zero size lands in the first slot.
    return int((size - minimum) / growth)


@dataclass
class _Area:
    minimum: int
    maximum: int
    growth: int
    free: list[list[bytearray]] = field(init=False)

    def __post_init__(self) -> None:
        slots = (self.maximum - self.minimum + 1) // self.growth
        self.free = [[] for _ in range(slots)]

    def slot_size(self, pos: int) -> int:
        return self.minimum - 1 + (pos + 1) * self.growth

    def position(self, size: int) -> int:
        pos = _slot_of(size, self.minimum, self.growth)
        return pos if 0 <= pos < len(self.free) else -1


class BytesMemPool:
    """Hands out buffers whose capacity is rounded up to a size class.

    ``make_bytes`` returns a memoryview of ``size`` bytes over a pooled
    bytearray; ``release_bytes`` gives the buffer back for reuse.
    """

    def __init__(self) -> None:
        self._areas = [_Area(*area) for area in _AREAS]
        self._lock = threading.Lock()

    def make_bytes(self, size: int) -> memoryview:
        """Return a writable buffer of ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        for area in self._areas:
            if size <= area.maximum:
                pos = area.position(size)
                if pos == -1:
                    raise ValueError(f"no size class for {size} bytes")
                with self._lock:
                    free = area.free[pos]
                    buffer = free.pop() if free else None
                if buffer is None or len(buffer) < size:
                    buffer = bytearray(area.slot_size(pos))
                return memoryview(buffer)[:size]
        return memoryview(bytearray(size))

    def release_bytes(self, buff: memoryview | bytearray) -> bool:
        """Return ``buff`` to the pool; False if it is too large to pool."""
        backing = buff.obj if isinstance(buff, memoryview) else buff
        if isinstance(buff, memoryview):
            buff.release()
        if not isinstance(backing, bytearray):
            raise TypeError("only bytearray-backed buffers can be pooled")
        capacity = len(backing)
        for area in self._areas:
            if capacity <= area.maximum:
                pos = area.position(capacity)
                if pos == -1:
                    raise ValueError(f"buffer of {capacity} bytes does not fit any size class")
                with self._lock:
                    area.free[pos].append(backing)
                return True
        return False