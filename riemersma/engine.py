"""Riemersma dithering.

Pixels are visited along a Hilbert curve instead of a raster scan.  Each
pixel receives a weighted sum of the quantisation errors of the last
``queue_size`` pixels visited, the sink quantises the adjusted colour, and
the difference between source and stored colour joins the error history.
Because consecutive Hilbert cells are always neighbours, the error stays
local without the directional streaks of raster error diffusion.

The sink decides how colours are quantised; the engine only reads back
what was actually stored.
"""

from __future__ import annotations

import logging
from typing import Protocol

from riemersma.color_utils import Color16, clamp16
from riemersma.hilbert import Direction, hilbert_level, hilbert_moves
from riemersma.history import NUM_CHANNELS, ColorError, ErrorHistory
from riemersma.weights import build_weights, round_half_away, validate

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 16
DEFAULT_RATIO = 16.0

Rect = tuple[int, int, int, int]  # (x0, y0, x1, y1), half-open


class PixelSource(Protocol):
    @property
    def size(self) -> tuple[int, int]: ...

    def color_at(self, x: int, y: int) -> Color16: ...


class PixelSink(Protocol):
    @property
    def size(self) -> tuple[int, int]: ...

    def propose(self, x: int, y: int, color: Color16) -> None: ...

    def read_back(self, x: int, y: int) -> Color16: ...


def region_size(
    source_size: tuple[int, int],
    rect: Rect,
    offset: tuple[int, int],
) -> tuple[int, int]:
    """Overlap of *rect* with the source available from *offset*."""
    sw, sh = source_size
    x0, y0, x1, y1 = rect
    w = min(sw - offset[0], x1 - x0)
    h = min(sh - offset[1], y1 - y0)
    return max(0, w), max(0, h)


def clip_rect(
    rect: Rect,
    sink_size: tuple[int, int],
    offset: tuple[int, int],
) -> tuple[Rect, tuple[int, int]]:
    """Intersect *rect* with the sink and shift *offset* to match.

    A negative *offset* is clipped too, by moving the rectangle's origin.
    """
    x0, y0, x1, y1 = rect
    ox, oy = offset
    cx0, cy0 = max(x0, 0), max(y0, 0)
    ox += cx0 - x0
    oy += cy0 - y0
    if ox < 0:
        cx0 -= ox
        ox = 0
    if oy < 0:
        cy0 -= oy
        oy = 0
    cx1, cy1 = min(x1, sink_size[0]), min(y1, sink_size[1])
    return (cx0, cy0, max(cx0, cx1), max(cy0, cy1)), (ox, oy)


class RiemersmaDither:
    """Riemersma dither operation.

    The instance only holds the weight curve; every :meth:`run` starts
    with an empty error history at the curve's origin, so one instance
    can serve any number of sequential runs.

    Args:
        queue_size: Number of most recent quantisation errors remembered.
        ratio:      Weight ratio between the youngest and oldest error.

    Raises:
        DomainError: ``queue_size < 1``, ``ratio <= 0`` or infinite ratio.
    """

    def __init__(
        self,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        ratio: float = DEFAULT_RATIO,
    ) -> None:
        validate(queue_size, ratio)
        self.queue_size = queue_size
        self.ratio = float(ratio)
        self.weights = build_weights(queue_size, ratio)

    def __repr__(self) -> str:
        return f"RiemersmaDither(queue_size={self.queue_size}, ratio={self.ratio})"

    def accumulated_error(self, history: ErrorHistory) -> list[float]:
        """Weighted sum of the remembered errors, divided by the ratio.

        Weights run oldest to youngest, so the youngest error weighs
        ``ratio`` times the oldest one.
        """
        acc = [0.0] * NUM_CHANNELS
        for w, err in zip(self.weights, history.oldest_first(), strict=True):
            for j in range(NUM_CHANNELS):
                acc[j] += err[j] * w
        for j in range(NUM_CHANNELS):
            acc[j] /= self.ratio
        return acc

    def run(
        self,
        source: PixelSource,
        sink: PixelSink,
        rect: Rect | None = None,
        offset: tuple[int, int] = (0, 0),
    ) -> int:
        """Dither *source* into *sink*.

        Args:
            source: Pixel colours to reproduce.
            sink:   Destination; quantises whatever it is given.
            rect:   Destination rectangle, defaults to the whole sink;
                    clipped to the sink's bounds.
            offset: Source pixel mapped to the top-left of *rect*.

        Returns:
            Number of pixels dithered.
        """
        if rect is None:
            rect = (0, 0, *sink.size)
        rect, offset = clip_rect(rect, sink.size, offset)
        width, height = region_size(source.size, rect, offset)
        level = hilbert_level(width, height)
        logger.debug(
            "Riemersma run: %dx%d region, Hilbert level %d, %s",
            width, height, level, self,
        )

        state = _Run(self, source, sink, rect, offset, width, height)
        for direction in hilbert_moves(level):
            state.move(direction)
        state.move(Direction.NONE)
        return state.dithered


class _Run:
    """Cursor and error history of a single :meth:`RiemersmaDither.run`."""

    def __init__(
        self,
        op: RiemersmaDither,
        source: PixelSource,
        sink: PixelSink,
        rect: Rect,
        offset: tuple[int, int],
        width: int,
        height: int,
    ) -> None:
        self.op = op
        self.source = source
        self.sink = sink
        self.dest_origin = rect[:2]
        self.offset = offset
        self.width = width
        self.height = height
        self.history = ErrorHistory(op.queue_size)
        self.x = 0
        self.y = 0
        self.dithered = 0

    def move(self, direction: Direction) -> None:
        """Dither the pixel under the cursor, then step in *direction*."""
        if 0 <= self.x < self.width and 0 <= self.y < self.height:
            acc = self.op.accumulated_error(self.history)
            self.history.rotate(self.dither_pixel(self.x, self.y, acc))
            self.dithered += 1

        dx, dy = direction.delta
        self.x += dx
        self.y += dy

    def dither_pixel(self, x: int, y: int, acc: list[float]) -> ColorError:
        src = self.source.color_at(self.offset[0] + x, self.offset[1] + y)
        proposed = tuple(
            clamp16(src[j] + int(round_half_away(acc[j])))
            for j in range(NUM_CHANNELS)
        )

        dx, dy = self.dest_origin[0] + x, self.dest_origin[1] + y
        self.sink.propose(dx, dy, proposed)
        stored = self.sink.read_back(dx, dy)

        return tuple(float(src[j]) - float(stored[j]) for j in range(NUM_CHANNELS))


def draw(
    sink: PixelSink,
    source: PixelSource,
    rect: Rect | None = None,
    offset: tuple[int, int] = (0, 0),
) -> int:
    """Dither with the default queue size and ratio."""
    return RiemersmaDither().run(source, sink, rect, offset)
