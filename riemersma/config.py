"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from riemersma.engine import DEFAULT_QUEUE_SIZE, DEFAULT_RATIO
from riemersma.palette import GRAY_DEPTHS

COLOR_SPACES = ("rgb", "lab")


@dataclass(frozen=True)
class DitherConfig:
    """All tuneable parameters for a dither run.

    Attributes:
        queue_size:      Number of most recent quantisation errors remembered.
        ratio:           Weight ratio between youngest and oldest error.
        depth:           Grayscale depth in bits (1, 2, 4 or 8).
        palette:         Named palette or comma-separated hex colours;
                         overrides *depth* when set.
        color_space:     Palette matching metric - "rgb" or "lab".
        output_format:   Format for saved files (None = follow the input).
        save_comparison: Also write a side-by-side comparison image.
        input_dir:       Folder to scan for source images (batch).
        output_dir:      Folder for results (batch).
    """

    # Diffusion
    queue_size: int = DEFAULT_QUEUE_SIZE
    ratio: float = DEFAULT_RATIO

    # Destination colours
    depth: int = 1
    palette: str | None = None
    color_space: str = "rgb"

    # Output
    output_format: str | None = None
    save_comparison: bool = False

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )

    def __post_init__(self) -> None:
        if self.depth not in GRAY_DEPTHS:
            msg = f"Unsupported color depth: {self.depth}. Available: 1, 2, 4, 8"
            raise ValueError(msg)
        if self.color_space not in COLOR_SPACES:
            msg = f"Unknown colour space '{self.color_space}'. Available: lab, rgb"
            raise ValueError(msg)
