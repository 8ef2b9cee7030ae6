"""Font loading for export text."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import ImageFont

REGULAR_FONTS = ("DejaVuSans", "Arial", "LiberationSans-Regular", "Helvetica")
BOLD_FONTS = ("DejaVuSans-Bold", "Arial Bold", "arialbd", "LiberationSans-Bold", "Helvetica-Bold")

# Sizes in px
TITLE_SIZE = 28
CHIP_LABEL_SIZE = 18
CHIP_COUNT_SIZE = 16
BADGE_SIZE = 16


def _candidate_paths(name: str, font_dir: Optional[Path]) -> list[str]:
    paths = []
    if font_dir is not None:
        paths += [str(font_dir / f"{name}.ttf"), str(font_dir / f"{name}.otf")]
    paths += [
        # Linux
        f"/usr/share/fonts/truetype/dejavu/{name}.ttf",
        f"/usr/share/fonts/truetype/liberation/{name}.ttf",
        f"/usr/share/fonts/TTF/{name}.ttf",
        # macOS
        f"/Library/Fonts/{name}.ttf",
        f"/System/Library/Fonts/Supplemental/{name}.ttf",
        # Windows
        f"C:/Windows/Fonts/{name}.ttf",
    ]
    return paths


def load_font(names: tuple[str, ...], size: int, font_dir: Optional[Path] = None):
    """Load the first available TrueType font, falling back to Pillow's default."""
    for name in names:
        for path in _candidate_paths(name, font_dir):
            if os.path.exists(path):
                try:
                    return ImageFont.truetype(path, size)
                except OSError:
                    continue

        # Let FreeType search by name
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            pass

    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class FontSet:
    """Fonts used by one export."""

    title: ImageFont.FreeTypeFont
    chip_label: ImageFont.FreeTypeFont
    chip_count: ImageFont.FreeTypeFont
    badge: ImageFont.FreeTypeFont


def load_fonts(font_dir: Optional[Path] = None) -> FontSet:
    return FontSet(
        title=load_font(BOLD_FONTS, TITLE_SIZE, font_dir),
        chip_label=load_font(BOLD_FONTS, CHIP_LABEL_SIZE, font_dir),
        chip_count=load_font(REGULAR_FONTS, CHIP_COUNT_SIZE, font_dir),
        badge=load_font(BOLD_FONTS, BADGE_SIZE, font_dir),
    )
