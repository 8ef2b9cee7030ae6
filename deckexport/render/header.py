"""
Export header: background, deck title and per-category count chips.

Header Layout:
  +----------------------------------------------------------+
  | Deck title                                      [LOGO]   |  <- title at (40, 20)
  | (Allies: [ic]) (Weapons: [ic]) (Talismans: [ic]) ...     |  <- chips at y=52, h=48
  |  (  12     )    (   4      )                             |
  |                                                          |  <- layout_top = 120
  |  cards ...                                               |
  +----------------------------------------------------------+
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from PIL import Image, ImageDraw

from deckexport.deck.models import CATEGORY_LABELS, CATEGORY_ORDER, Category
from deckexport.render.fonts import FontSet
from deckexport.render.geometry import draw_image, measure_chip, rounded_rect_path, text_width

TEXT_COLOR = "white"
DEFAULT_TITLE = "Untitled deck"
TITLE_POS = (40, 20)

# Chips
CHIP_TOP = 52
CHIP_START_X = 40
CHIP_GAP = 14
CHIP_HEIGHT = 48
CHIP_PADDING = 18
CHIP_INNER_GAP = 14
CHIP_ICON_BOX = 40
CHIP_ICON_FRACTION = 0.7
CHIP_FILL = "#302146"
CHIP_LABEL_BASELINE = 0.42      # fraction of chip height
CHIP_COUNT_BASELINE = 0.78
HEADER_BOTTOM_MARGIN = 20
LAYOUT_TOP = CHIP_TOP + CHIP_HEIGHT + HEADER_BOTTOM_MARGIN

# Edition logo in the top-right corner
LOGO_SIZE = 80
LOGO_MARGIN = 20


class CropPolicy(str, Enum):
    """How the background template is mapped onto the canvas."""

    STRETCH_FIT = "stretch-fit"
    CENTER_CROP_SQUARE = "center-crop-square"


def background_source_box(
    source_size: tuple[int, int],
    target_size: tuple[int, int],
    policy: CropPolicy,
) -> tuple[float, float, float, float]:
    """Region of the background template that gets scaled onto the canvas."""
    src_w, src_h = source_size
    dst_w, dst_h = target_size
    full = (0.0, 0.0, float(src_w), float(src_h))
    if policy is CropPolicy.STRETCH_FIT:
        return full

    target_ratio = dst_w / dst_h
    if src_w / src_h > target_ratio:
        # Left-anchored slice, full height
        source_width = src_h * target_ratio
        return (0.0, 0.0, source_width, float(src_h))
    return full


def draw_background(canvas: Image.Image, background: Image.Image, policy: CropPolicy) -> None:
    box = background_source_box(background.size, canvas.size, policy)
    scaled = background.convert("RGBA").resize(canvas.size, Image.Resampling.LANCZOS, box=box)
    canvas.alpha_composite(scaled)


def draw_chip(
    canvas: Image.Image,
    draw: ImageDraw.ImageDraw,
    x: float,
    label: str,
    count: int,
    icon: Optional[Image.Image],
    fonts: FontSet,
) -> float:
    """Draw one pill-shaped category chip at ``x``. Returns its width."""
    label_text = f"{label}:"
    count_text = str(count)
    box = measure_chip(
        text_width(fonts.chip_label, label_text),
        text_width(fonts.chip_count, count_text),
        height=CHIP_HEIGHT,
        padding=CHIP_PADDING,
        inner_gap=CHIP_INNER_GAP,
        icon_box=CHIP_ICON_BOX,
    )

    draw.polygon(rounded_rect_path(x, CHIP_TOP, box.width, box.height, box.radius), fill=CHIP_FILL)

    text_center_x = x + box.padding + box.text_block_width / 2
    draw.text(
        (text_center_x, CHIP_TOP + box.height * CHIP_LABEL_BASELINE),
        label_text,
        font=fonts.chip_label,
        fill=TEXT_COLOR,
        anchor="ms",
    )
    draw.text(
        (text_center_x, CHIP_TOP + box.height * CHIP_COUNT_BASELINE),
        count_text,
        font=fonts.chip_count,
        fill=TEXT_COLOR,
        anchor="ms",
    )

    if icon is not None:
        icon_size = box.icon_box * CHIP_ICON_FRACTION
        icon_center_x = x + box.width - box.padding - box.icon_box / 2
        icon_center_y = CHIP_TOP + box.height / 2
        draw_image(
            canvas,
            icon,
            icon_center_x - icon_size / 2,
            icon_center_y - icon_size / 2,
            icon_size,
            icon_size,
        )

    return box.width


def draw_header(
    canvas: Image.Image,
    title: str,
    counts: Mapping[Category, int],
    icons: Mapping[Category, Optional[Image.Image]],
    fonts: FontSet,
) -> int:
    """Draw the title and the chip row over an already painted background.

    Returns:
        layout_top: the Y offset below which the header draws nothing
    """
    draw = ImageDraw.Draw(canvas)
    draw.text(TITLE_POS, title or DEFAULT_TITLE, font=fonts.title, fill=TEXT_COLOR, anchor="la")

    x = CHIP_START_X
    for category in CATEGORY_ORDER:
        width = draw_chip(
            canvas,
            draw,
            x,
            CATEGORY_LABELS[category],
            counts.get(category, 0),
            icons.get(category),
            fonts,
        )
        x += width + CHIP_GAP

    return LAYOUT_TOP


def draw_edition_logo(canvas: Image.Image, logo: Image.Image) -> None:
    x = canvas.width - LOGO_SIZE - LOGO_MARGIN
    draw_image(canvas, logo, x, LOGO_MARGIN, LOGO_SIZE, LOGO_SIZE)
