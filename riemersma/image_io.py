"""Image loading, saving, sink construction and comparison images."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from riemersma.color_utils import Color16, widen
from riemersma.config import DitherConfig
from riemersma.palette import grayscale_palette, parse_palette
from riemersma.sinks import GraySink, PaletteSink

STDIO = "-"

_FORMAT_BY_SUFFIX = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".jfif": "JPEG",
    ".bmp": "BMP",
    ".gif": "GIF",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}


class ArraySource:
    """Pixel source over an 8- or 16-bit image array."""

    def __init__(self, array: np.ndarray) -> None:
        self.pixels = widen(np.asarray(array))

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.pixels.shape[:2]
        return w, h

    def color_at(self, x: int, y: int) -> Color16:
        r, g, b, a = self.pixels[y, x]
        return (int(r), int(g), int(b), int(a))


def load_image(path: str | Path) -> tuple[np.ndarray, str]:
    """Load an image as RGBA; ``"-"`` reads standard input.

    Returns:
        ((H, W, 4) uint8 array, source format such as ``"PNG"``).
    """
    if str(path) == STDIO:
        img = Image.open(io.BytesIO(sys.stdin.buffer.read()))
    else:
        img = Image.open(path)
    fmt = img.format or "PNG"
    return np.array(img.convert("RGBA"), dtype=np.uint8), fmt


def output_format(
    output: str | Path,
    source_format: str,
    override: str | None = None,
) -> str:
    """Pick the format to save in.

    An explicit *override* wins, then the output suffix.  Otherwise PNG
    inputs stay PNG and everything else becomes JPEG.
    """
    if override:
        return override.upper()
    if str(output) != STDIO:
        fmt = _FORMAT_BY_SUFFIX.get(Path(output).suffix.lower())
        if fmt:
            return fmt
    return "PNG" if source_format.upper() == "PNG" else "JPEG"


def save_image(img: Image.Image, path: str | Path, fmt: str) -> None:
    """Save *img*; ``"-"`` writes to standard output."""
    if fmt == "JPEG" and img.mode not in ("L", "RGB"):
        img = img.convert("RGB")
    if str(path) == STDIO:
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        sys.stdout.buffer.write(buf.getvalue())
        sys.stdout.buffer.flush()
    else:
        img.save(path, format=fmt)


def make_sink(width: int, height: int, cfg: DitherConfig) -> GraySink | PaletteSink:
    """Destination for *cfg*: a palette, an 8-bit gray image, or a gray ramp."""
    if cfg.palette:
        palette = parse_palette(cfg.palette)
        return PaletteSink(width, height, palette, color_space=cfg.color_space)
    if cfg.depth == 8:
        return GraySink(width, height)
    return PaletteSink(
        width, height, grayscale_palette(cfg.depth), color_space=cfg.color_space,
    )


def make_comparison_grid(
    original: np.ndarray,
    dithered: Image.Image,
    output_path: str | Path,
    fmt: str = "PNG",
) -> None:
    """Create a 2-panel comparison: Original | Dithered."""
    source = Image.fromarray(original).convert("RGB")
    result = dithered.convert("RGB")
    panel_w, panel_h = source.size
    label_height = 36
    gap = 8

    canvas = Image.new(
        "RGB", (2 * panel_w + gap, panel_h + label_height), (30, 30, 30),
    )
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    panels = [source, result]
    labels = ["Original", "Dithered"]

    for i, (panel, label) in enumerate(zip(panels, labels, strict=True)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    save_image(canvas, output_path, fmt)
