"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from riemersma.config import DitherConfig
from riemersma.engine import RiemersmaDither
from riemersma.image_io import (
    STDIO,
    ArraySource,
    load_image,
    make_comparison_grid,
    make_sink,
    output_format,
    save_image,
)

app = typer.Typer(
    name="riemersma",
    help="Riemersma dithering along a Hilbert curve.",
    add_completion=False,
    rich_markup_mode="rich",
)
# Status output goes to stderr so "-o -" can stream the image on stdout
console = Console(stderr=True)

logger = logging.getLogger("riemersma")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _build_config(**kwargs: object) -> DitherConfig:
    try:
        return DitherConfig(**kwargs)  # type: ignore[arg-type]
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def _build_op(cfg: DitherConfig) -> RiemersmaDither:
    try:
        return RiemersmaDither(cfg.queue_size, cfg.ratio)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def _quality_metric(source: np.ndarray, result: np.ndarray) -> float:
    """Mean absolute gray-level difference, in 8-bit units."""
    s = source[..., :3].astype(np.float64).mean(axis=-1)
    r = result.astype(np.float64)
    if r.ndim == 3:
        r = r[..., :3].mean(axis=-1)
    return float(np.mean(np.abs(s - r)))


def _dither_file(
    op: RiemersmaDither,
    cfg: DitherConfig,
    input_path: str | Path,
    output_path: str | Path,
    compare_path: Path | None = None,
) -> tuple[int, int, float, float]:
    """Dither one image file; returns (width, height, error, seconds)."""
    t0 = time.perf_counter()
    pixels, src_format = load_image(input_path)
    h, w = pixels.shape[:2]
    logger.info("Source: %dx%d %s", w, h, src_format)

    try:
        sink = make_sink(w, h, cfg)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    count = op.run(ArraySource(pixels), sink)
    logger.debug("Dithered %d pixels", count)

    fmt = output_format(output_path, src_format, cfg.output_format)
    result = sink.to_image()
    save_image(result, output_path, fmt)

    if compare_path is not None:
        cmp_fmt = output_format(compare_path, "PNG")
        make_comparison_grid(pixels, result, compare_path, cmp_fmt)

    err = _quality_metric(pixels, np.asarray(result.convert("RGB")))
    return w, h, err, time.perf_counter() - t0


# Defaults come from DitherConfig - single source of truth
_DEFAULTS = DitherConfig()


# -- dither command ----------------------------------------------------

@app.command()
def dither(
    input_path: str = typer.Argument(STDIO, help="Input image file, '-' for stdin"),
    output: str = typer.Option(
        STDIO, "--output", "-o", help="Output image file, '-' for stdout",
    ),
    ratio: float = typer.Option(
        _DEFAULTS.ratio, "--ratio", "-r",
        help="Weight ratio between youngest and oldest pixel",
    ),
    size: int = typer.Option(
        _DEFAULTS.queue_size, "--size", "-s",
        help="Number of most recent pixel quantization errors to remember",
    ),
    depth: int = typer.Option(
        _DEFAULTS.depth, "--depth", "-d",
        help="Grayscale color depth in bits: 1, 2, 4 or 8",
    ),
    palette: str | None = typer.Option(
        None, "--palette", "-p",
        help="Palette name or comma-separated hex colours (overrides --depth)",
    ),
    color_space: str = typer.Option(
        _DEFAULTS.color_space, "--color-space", help="'rgb' or 'lab' palette matching",
    ),
    fmt: str | None = typer.Option(None, "--format", help="Output format, e.g. PNG"),
    compare: Path | None = typer.Option(
        None, "--compare", help="Also write an Original | Dithered comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Dither a single image."""
    _setup_logging(verbose)

    cfg = _build_config(
        queue_size=size,
        ratio=ratio,
        depth=depth,
        palette=palette,
        color_space=color_space,
        output_format=fmt,
    )
    op = _build_op(cfg)

    if output != STDIO:
        Path(output).parent.mkdir(parents=True, exist_ok=True)

    w, h, err, elapsed = _dither_file(op, cfg, input_path, output, compare)
    console.print(
        f"[green]✓[/green] Saved to {'stdout' if output == STDIO else output}  "
        f"[dim]{w}x{h}  error={err:.1f}  time={elapsed:.1f}s[/dim]"
    )


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    ratio: float = typer.Option(_DEFAULTS.ratio, "--ratio", "-r"),
    size: int = typer.Option(_DEFAULTS.queue_size, "--size", "-s"),
    depth: int = typer.Option(_DEFAULTS.depth, "--depth", "-d"),
    palette: str | None = typer.Option(None, "--palette", "-p"),
    color_space: str = typer.Option(_DEFAULTS.color_space, "--color-space"),
    fmt: str | None = typer.Option(None, "--format"),
    compare: bool = typer.Option(
        _DEFAULTS.save_comparison, "--compare/--no-compare",
        help="Write a comparison image next to each result",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Dither all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    cfg = _build_config(
        queue_size=size,
        ratio=ratio,
        depth=depth,
        palette=palette,
        color_space=color_space,
        output_format=fmt,
        save_comparison=compare,
        input_dir=input_dir,
        output_dir=output_dir,
    )
    op = _build_op(cfg)

    output_dir.mkdir(parents=True, exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    target = cfg.palette or f"{cfg.depth}-bit gray"
    console.print(Panel.fit(
        f"[bold]RIEMERSMA DITHER[/bold]\n"
        f"Queue size: {cfg.queue_size}  |  Ratio: {cfg.ratio}\n"
        f"Colours: {target}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    total_pixels = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        stem = img_path.stem
        suffix = img_path.suffix
        if cfg.output_format is not None:
            suffix = f".{cfg.output_format.lower()}"
        out_path = output_dir / f"{stem}_dithered{suffix}"
        cmp_path = None
        if cfg.save_comparison:
            cmp_path = output_dir / f"{stem}_comparison.png"

        w, h, err, elapsed = _dither_file(op, cfg, img_path, out_path, cmp_path)
        total_pixels += w * h
        console.print(
            f"  [green]✓[/green] {out_path.name}  "
            f"[dim]{w}x{h}  error={err:.1f}  time={elapsed:.1f}s[/dim]"
        )

    logger.info("Dithered %s pixels in total", f"{total_pixels:,}")
    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
