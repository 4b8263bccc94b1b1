#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch

Or dither a single file:

    python main.py dither photo.png -o photo_1bit.png
    python -m riemersma.cli dither --help
"""

from riemersma.cli import app

if __name__ == "__main__":
    app()
