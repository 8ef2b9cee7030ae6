"""
Square-grid layout for the vertical (square) export.

Every distinct card gets one cell in a near-square grid:

    cols = ceil(sqrt(n))      rows = ceil(n / cols)

Cells keep the card aspect ratio (height = 1.5 x width) and are as
large as both the free width and the free height allow. The grid is
centred horizontally and starts right below the header. Cards with more
than one copy get a round quantity badge at the top centre of the cell.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from PIL import Image, ImageDraw

from deckexport.deck.models import CardStack
from deckexport.render.assets import AssetScope
from deckexport.render.geometry import draw_image

logger = logging.getLogger(__name__)

MARGIN_LEFT = 40
MARGIN_RIGHT = 40
MARGIN_BOTTOM = 40
GAP = 8
CARD_ASPECT = 1.5

BADGE_RADIUS = 15
BADGE_FILL = (0, 0, 0, 102)     # black at 40% opacity
BADGE_TEXT_COLOR = "white"


def grid_shape(count: int) -> tuple[int, int]:
    """Columns and rows for ``count`` cells."""
    if count <= 0:
        return 0, 0
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    return cols, rows


def cell_size(
    cols: int,
    rows: int,
    available_width: float,
    available_height: float,
    gap: float = GAP,
) -> tuple[float, float]:
    """Largest card-shaped cell that fits both budgets."""
    max_width = (available_width - (cols - 1) * gap) / cols
    max_height = (available_height - (rows - 1) * gap) / rows

    width = min(max_width, max_height / CARD_ASPECT)
    height = width * CARD_ASPECT
    if height > max_height:
        height = max_height
        width = height / CARD_ASPECT
    return width, height


@dataclass(frozen=True, slots=True)
class GridCell:
    stack: CardStack
    col: int
    row: int
    x: float
    y: float


@dataclass(slots=True)
class GridLayout:
    cols: int
    rows: int
    cell_width: float
    cell_height: float
    start_x: float
    start_y: float
    cells: list[GridCell] = field(default_factory=list)

    @property
    def total_width(self) -> float:
        return self.cols * self.cell_width + max(0, self.cols - 1) * GAP


def plan_grid(
    stacks: Sequence[CardStack],
    layout_top: float,
    canvas_width: float,
    canvas_height: float,
) -> GridLayout:
    cols, rows = grid_shape(len(stacks))
    if not cols:
        return GridLayout(0, 0, 0.0, 0.0, canvas_width / 2, layout_top)

    available_width = canvas_width - MARGIN_LEFT - MARGIN_RIGHT
    available_height = canvas_height - layout_top - MARGIN_BOTTOM
    width, height = cell_size(cols, rows, available_width, available_height)

    total_width = cols * width + (cols - 1) * GAP
    layout = GridLayout(
        cols=cols,
        rows=rows,
        cell_width=width,
        cell_height=height,
        start_x=(canvas_width - total_width) / 2,
        start_y=layout_top,
    )
    for i, stack in enumerate(stacks):
        col, row = i % cols, i // cols
        layout.cells.append(
            GridCell(
                stack=stack,
                col=col,
                row=row,
                x=layout.start_x + col * (width + GAP),
                y=layout.start_y + row * (height + GAP),
            )
        )
    logger.debug(f"Grid layout: {cols}x{rows} cells of {width:.1f}x{height:.1f}px")
    return layout


def draw_quantity_badge(canvas: Image.Image, center_x: float, center_y: float, quantity: int, font) -> None:
    """Translucent round counter with the quantity centred in it."""
    size = BADGE_RADIUS * 2
    overlay = Image.new("RGBA", (size + 1, size + 1), (0, 0, 0, 0))
    ImageDraw.Draw(overlay).ellipse((0, 0, size, size), fill=BADGE_FILL)
    draw_image(canvas, overlay, center_x - BADGE_RADIUS, center_y - BADGE_RADIUS, size + 1, size + 1)

    ImageDraw.Draw(canvas).text(
        (center_x, center_y),
        str(quantity),
        font=font,
        fill=BADGE_TEXT_COLOR,
        anchor="mm",
    )


def draw_grid(canvas: Image.Image, layout: GridLayout, assets: AssetScope, badge_font) -> int:
    """Draw every cell. Returns how many cells got their card image.

    A cell whose image is unavailable stays blank, badge included.
    """
    drawn = 0
    for cell in layout.cells:
        image = assets.get(cell.stack.card.image)
        if image is None:
            logger.debug(f"Leaving cell {cell.col},{cell.row} blank: {cell.stack.card.id} unavailable")
            continue
        draw_image(canvas, image, cell.x, cell.y, layout.cell_width, layout.cell_height)
        if cell.stack.quantity > 1:
            center_x = cell.x + layout.cell_width / 2
            draw_quantity_badge(canvas, center_x, cell.y + BADGE_RADIUS, cell.stack.quantity, badge_font)
        drawn += 1
    return drawn
