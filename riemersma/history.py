"""Fixed-capacity ring of the most recent quantisation errors."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

ColorError = tuple[float, ...]

NUM_CHANNELS = 4
ZERO_ERROR: ColorError = (0.0,) * NUM_CHANNELS


class ErrorHistory:
    """Ring buffer of :data:`ColorError` vectors.

    ``get(0)`` is the most recent write, ``get(capacity - 1)`` the oldest
    one still remembered.  Slots that were never written read as
    :data:`ZERO_ERROR`.
    """

    __slots__ = ("_slots", "_head")

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            msg = f"History capacity must be at least 1, got {capacity}"
            raise ValueError(msg)
        self._slots: list[ColorError] = [ZERO_ERROR] * capacity
        self._head = 0  # next slot to overwrite, i.e. the oldest entry

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def get(self, i: int) -> ColorError:
        n = len(self._slots)
        if not 0 <= i < n:
            msg = f"History offset {i} outside [0, {n})"
            raise IndexError(msg)
        return self._slots[(self._head - 1 - i) % n]

    def rotate(self, entry: Sequence[float]) -> None:
        """Overwrite the oldest slot with *entry*."""
        self._slots[self._head] = tuple(entry)
        self._head += 1
        if self._head >= len(self._slots):
            self._head = 0

    def oldest_first(self) -> Iterator[ColorError]:
        n = len(self._slots)
        for i in range(n):
            yield self._slots[(self._head + i) % n]
