"""16-bit colour conversion and palette matching.

Every colour that crosses the engine boundary is a non-premultiplied
``(r, g, b, a)`` tuple of ints in ``[0, 0xFFFF]``.
"""

from __future__ import annotations

import numpy as np
from skimage.color import rgb2lab

MAX_VALUE = 0xFFFF

Color16 = tuple[int, int, int, int]


def clamp16(value: int) -> int:
    if value < 0:
        return 0
    if value > MAX_VALUE:
        return MAX_VALUE
    return value


def widen(array: np.ndarray) -> np.ndarray:
    """Convert an 8- or 16-bit image array to ``(H, W, 4)`` uint16 RGBA.

    Accepts ``(H, W)`` grayscale, ``(H, W, 3)`` RGB or ``(H, W, 4)`` RGBA.
    8-bit values are widened by replication (``v * 257``) so 0xFF maps to
    0xFFFF exactly.
    """
    if array.dtype == np.uint8:
        wide = array.astype(np.uint16) * 257
    elif array.dtype == np.uint16:
        wide = array.astype(np.uint16)
    else:
        msg = f"Unsupported pixel dtype {array.dtype}; expected uint8 or uint16"
        raise ValueError(msg)

    if wide.ndim == 2:
        wide = np.repeat(wide[:, :, np.newaxis], 3, axis=2)
    if wide.ndim != 3 or wide.shape[2] not in (3, 4):
        msg = f"Unsupported image shape {array.shape}"
        raise ValueError(msg)
    if wide.shape[2] == 3:
        alpha = np.full(wide.shape[:2] + (1,), MAX_VALUE, dtype=np.uint16)
        wide = np.concatenate([wide, alpha], axis=2)
    return wide


def premultiply(color: Color16) -> Color16:
    r, g, b, a = color
    return (r * a // MAX_VALUE, g * a // MAX_VALUE, b * a // MAX_VALUE, a)


def luma8(color: Color16) -> int:
    """8-bit luma of a colour, using the ITU-R 601 integer weights."""
    r, g, b, _ = premultiply(color)
    return (19595 * r + 38470 * g + 7471 * b + (1 << 15)) >> 24


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3) uint8 RGB → (N, 3) float64 CIELAB."""
    return rgb2lab(rgb.astype(np.float64).reshape(1, -1, 3) / 255.0).reshape(-1, 3)


def palette_to16(palette: np.ndarray) -> np.ndarray:
    """(K, 3|4) uint8 palette → (K, 4) int64 premultiplied 16-bit RGBA."""
    wide = widen(palette.reshape(1, len(palette), -1))[0].astype(np.int64)
    alpha = wide[:, 3:4]
    wide[:, :3] = wide[:, :3] * alpha // MAX_VALUE
    return wide


def nearest_index(color: Color16, palette16: np.ndarray) -> int:
    """Index of the palette entry closest to *color*.

    Distance is the sum over premultiplied channels of ``(d*d) >> 2``; the
    first entry wins ties.
    """
    diff = palette16 - np.asarray(premultiply(color), dtype=np.int64)
    dist = ((diff * diff) >> 2).sum(axis=1)
    return int(np.argmin(dist))


def nearest_index_lab(color: Color16, palette_lab: np.ndarray) -> int:
    """Index of the palette entry closest to *color* in CIELAB."""
    rgb8 = np.array([[c >> 8 for c in color[:3]]], dtype=np.uint8)
    lab = rgb_to_lab(rgb8)[0]
    dist = np.sum((palette_lab - lab) ** 2, axis=1)
    return int(np.argmin(dist))
