"""
Riemersma Dither
================

Error-diffusion dithering along a Hilbert curve.  The quantisation error
of the last few pixels visited is remembered with geometrically
decaying weights and added to the next pixel, so the error spreads to
spatial neighbours without the directional artifacts of a raster scan.

- **Engine**: :class:`RiemersmaDither` over any pixel source and sink
- **Sinks**: grayscale, fixed palette, or full-fidelity RGBA
"""

__version__ = "1.0.0"

from riemersma.config import DitherConfig
from riemersma.engine import (
    DEFAULT_QUEUE_SIZE,
    DEFAULT_RATIO,
    PixelSink,
    PixelSource,
    RiemersmaDither,
    draw,
)
from riemersma.hilbert import (
    Direction,
    hilbert_level,
    hilbert_moves,
    hilbert_path,
    traverse,
)
from riemersma.history import ErrorHistory
from riemersma.image_io import ArraySource, load_image, save_image
from riemersma.palette import grayscale_palette, parse_palette
from riemersma.sinks import GraySink, PaletteSink, RGBASink
from riemersma.weights import DomainError, build_weights

__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "DEFAULT_RATIO",
    "ArraySource",
    "Direction",
    "DitherConfig",
    "DomainError",
    "ErrorHistory",
    "GraySink",
    "PaletteSink",
    "PixelSink",
    "PixelSource",
    "RGBASink",
    "RiemersmaDither",
    "build_weights",
    "draw",
    "grayscale_palette",
    "hilbert_level",
    "hilbert_moves",
    "hilbert_path",
    "load_image",
    "parse_palette",
    "save_image",
    "traverse",
]
