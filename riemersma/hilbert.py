"""Hilbert-curve traversal.

The curve is generated from four orientation productions.  A curve of
order ``level`` facing some orientation is four sub-curves of order
``level - 1`` joined by three unit moves; at order 1 only the three moves
remain.  Expansion runs on an explicit stack so very deep curves never
touch the interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import Enum


class Direction(Enum):
    NONE = 0
    UP = 1
    LEFT = 2
    DOWN = 3
    RIGHT = 4

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]


_DELTAS = {
    Direction.NONE: (0, 0),
    Direction.UP: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.DOWN: (0, 1),
    Direction.RIGHT: (1, 0),
}

# orientation -> (sub-curve orientations, joining moves)
PRODUCTIONS: dict[Direction, tuple[tuple[Direction, ...], tuple[Direction, ...]]] = {
    Direction.UP: (
        (Direction.LEFT, Direction.UP, Direction.UP, Direction.RIGHT),
        (Direction.DOWN, Direction.RIGHT, Direction.UP),
    ),
    Direction.DOWN: (
        (Direction.RIGHT, Direction.DOWN, Direction.DOWN, Direction.LEFT),
        (Direction.UP, Direction.LEFT, Direction.DOWN),
    ),
    Direction.LEFT: (
        (Direction.UP, Direction.LEFT, Direction.LEFT, Direction.DOWN),
        (Direction.RIGHT, Direction.DOWN, Direction.LEFT),
    ),
    Direction.RIGHT: (
        (Direction.DOWN, Direction.RIGHT, Direction.RIGHT, Direction.UP),
        (Direction.LEFT, Direction.UP, Direction.RIGHT),
    ),
}


def hilbert_level(width: int, height: int) -> int:
    """Smallest ``level`` with ``2**level >= max(width, height)``."""
    side = max(width, height)
    if side <= 1:
        return 0
    return (side - 1).bit_length()


def hilbert_moves(
    level: int,
    orientation: Direction = Direction.UP,
) -> Iterator[Direction]:
    """Yield the ``4**level - 1`` unit moves of a Hilbert curve.

    Args:
        level:       Curve order; 0 yields nothing.
        orientation: Orientation of the outermost production.
    """
    if level < 0:
        msg = f"Hilbert level must be non-negative, got {level}"
        raise ValueError(msg)
    if level == 0:
        return
    if orientation is Direction.NONE:
        msg = "Hilbert orientation cannot be NONE"
        raise ValueError(msg)

    # (order, direction): order 0 is a single move, otherwise a sub-curve
    stack: list[tuple[int, Direction]] = [(level, orientation)]
    while stack:
        order, direction = stack.pop()
        if order == 0:
            yield direction
            continue

        subs, moves = PRODUCTIONS[direction]
        if order == 1:
            tasks = [(0, m) for m in moves]
        else:
            tasks = [
                (order - 1, subs[0]), (0, moves[0]),
                (order - 1, subs[1]), (0, moves[1]),
                (order - 1, subs[2]), (0, moves[2]),
                (order - 1, subs[3]),
            ]
        stack.extend(reversed(tasks))


def hilbert_path(level: int) -> Iterator[tuple[int, int]]:
    """Lazily yield every cell of ``[0, 2**level)^2`` in Hilbert order."""
    x = y = 0
    for direction in hilbert_moves(level):
        yield x, y
        dx, dy = direction.delta
        x += dx
        y += dy
    yield x, y


def traverse(level: int, on_visit: Callable[[int, int], None]) -> None:
    """Call ``on_visit(x, y)`` once per cell, starting at ``(0, 0)``."""
    for x, y in hilbert_path(level):
        on_visit(x, y)
