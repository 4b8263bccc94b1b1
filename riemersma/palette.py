"""Destination palettes: grayscale ramps, named presets, or hex lists."""

from __future__ import annotations

import numpy as np

GRAY_DEPTHS = (1, 2, 4, 8)

# Named palettes: name -> hex colours
NAMED_PALETTES: dict[str, list[str]] = {
    "gameboy": ["#0F380F", "#306230", "#8BAC0F", "#9BBC0F"],
    "cga": ["#000000", "#55FFFF", "#FF55FF", "#FFFFFF"],
    "sepia": ["#2B1D0E", "#6B4E2E", "#B08D57", "#F1E3C6"],
    "epaper": ["#000000", "#FFFFFF", "#FF0000", "#FFFF00"],
    "pico8": [
        "#000000", "#1D2B53", "#7E2553", "#008751",
        "#AB5236", "#5F574F", "#C2C3C7", "#FFF1E8",
        "#FF004D", "#FFA300", "#FFEC27", "#00E436",
        "#29ADFF", "#83769C", "#FF77A8", "#FFCCAA",
    ],
}


def grayscale_palette(depth: int) -> np.ndarray:
    """``2**depth`` evenly spaced grays from black to white.

    Levels are ``i * (255 // (n - 1))``, so for depths that do not divide
    255 evenly the brightest level falls slightly short of white.

    Returns:
        (2**depth, 3) uint8 array.
    """
    if depth not in GRAY_DEPTHS:
        msg = f"Unsupported color depth: {depth}. Available: 1, 2, 4, 8"
        raise ValueError(msg)
    n = 1 << depth
    step = 0xFF // (n - 1)
    g = (np.arange(n) * step).astype(np.uint8).reshape(-1, 1)
    return np.repeat(g, 3, axis=1)


def _hex_to_rgb(hex_str: str) -> np.ndarray:
    """Parse '#RRGGBB' to (3,) uint8 array."""
    h = hex_str.strip().lstrip("#")
    if len(h) != 6:
        msg = f"Invalid hex colour '{hex_str}', expected #RRGGBB"
        raise ValueError(msg)
    try:
        return np.array([int(h[i : i + 2], 16) for i in (0, 2, 4)], dtype=np.uint8)
    except ValueError:
        msg = f"Invalid hex colour '{hex_str}', expected #RRGGBB"
        raise ValueError(msg) from None


def parse_palette(value: str) -> np.ndarray:
    """Resolve a palette name or a comma-separated hex list.

    Returns:
        (K, 3) uint8 array.
    """
    key = value.strip().lower()
    if key in NAMED_PALETTES:
        return np.array([_hex_to_rgb(h) for h in NAMED_PALETTES[key]])

    colours = [c for c in value.split(",") if c.strip()]
    if not colours or not any(c.strip().startswith("#") for c in colours):
        available = ", ".join(sorted(NAMED_PALETTES))
        msg = f"Unknown palette '{value}'. Available: {available}, or '#RRGGBB,...'"
        raise ValueError(msg)
    return np.array([_hex_to_rgb(c) for c in colours])
