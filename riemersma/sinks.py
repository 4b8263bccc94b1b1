"""Destination images the engine dithers into.

A sink owns its quantisation policy.  The engine proposes a 16-bit colour
for a pixel and then reads back whatever the sink actually stored.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from riemersma.color_utils import (
    MAX_VALUE,
    Color16,
    luma8,
    nearest_index,
    nearest_index_lab,
    palette_to16,
    rgb_to_lab,
    widen,
)


class GraySink:
    """8-bit grayscale destination."""

    def __init__(self, width: int, height: int) -> None:
        self.pixels = np.zeros((height, width), dtype=np.uint8)

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.pixels.shape
        return w, h

    def propose(self, x: int, y: int, color: Color16) -> None:
        self.pixels[y, x] = luma8(color)

    def read_back(self, x: int, y: int) -> Color16:
        v = int(self.pixels[y, x]) * 257
        return (v, v, v, MAX_VALUE)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)


class PaletteSink:
    """Indexed destination that snaps every colour to a fixed palette.

    Args:
        width, height: Destination size.
        palette:       (K, 3) or (K, 4) uint8 colours.
        color_space:   ``"rgb"`` matches on premultiplied 16-bit RGBA,
                       ``"lab"`` on CIELAB distance.
    """

    def __init__(
        self,
        width: int,
        height: int,
        palette: np.ndarray,
        color_space: str = "rgb",
    ) -> None:
        if len(palette) == 0:
            msg = "Palette must contain at least one colour"
            raise ValueError(msg)
        if color_space not in ("rgb", "lab"):
            msg = f"Unknown colour space '{color_space}'. Available: lab, rgb"
            raise ValueError(msg)

        self.palette = np.asarray(palette, dtype=np.uint8)
        self.color_space = color_space
        dtype = np.uint8 if len(self.palette) <= 256 else np.uint16
        self.indices = np.zeros((height, width), dtype=dtype)

        self._palette16 = palette_to16(self.palette)
        self._readback = [
            tuple(int(v) for v in c)
            for c in widen(self.palette.reshape(1, len(self.palette), -1))[0]
        ]
        self._palette_lab = (
            rgb_to_lab(self.palette[:, :3]) if color_space == "lab" else None
        )

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.indices.shape
        return w, h

    def propose(self, x: int, y: int, color: Color16) -> None:
        if self._palette_lab is not None:
            self.indices[y, x] = nearest_index_lab(color, self._palette_lab)
        else:
            self.indices[y, x] = nearest_index(color, self._palette16)

    def read_back(self, x: int, y: int) -> Color16:
        return self._readback[int(self.indices[y, x])]

    def to_array(self) -> np.ndarray:
        """(H, W, C) uint8 colours of the stored indices."""
        return self.palette[self.indices]

    def to_image(self) -> Image.Image:
        if len(self.palette) > 256:
            return Image.fromarray(self.to_array())
        img = Image.fromarray(self.indices.astype(np.uint8))
        img.putpalette(self.palette[:, :3].reshape(-1).tolist())
        return img


class RGBASink:
    """Full-fidelity 16-bit RGBA destination; stores exactly what it gets."""

    def __init__(self, width: int, height: int) -> None:
        self.pixels = np.zeros((height, width, 4), dtype=np.uint16)

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.pixels.shape[:2]
        return w, h

    def propose(self, x: int, y: int, color: Color16) -> None:
        self.pixels[y, x] = color

    def read_back(self, x: int, y: int) -> Color16:
        r, g, b, a = self.pixels[y, x]
        return (int(r), int(g), int(b), int(a))

    def to_image(self) -> Image.Image:
        return Image.fromarray((self.pixels >> 8).astype(np.uint8))
