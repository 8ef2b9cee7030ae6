"""
Row-packing layout for the horizontal export.

Each category is laid out left to right in rows that wrap at the right
margin. A card with N copies becomes one stack, its copies fanned out
by a fixed offset. Layout runs in two passes:

  1. simulate the walk at base size to measure the used height
  2. scale up to fill the free height (never down, capped at 1.4x)
     and walk again at that scale to get the final positions

A deck too tall for the canvas stays at 1.0x and runs past the bottom
margin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from PIL import Image

from deckexport.deck.models import Card, Category, CategoryGroup
from deckexport.render.assets import AssetScope
from deckexport.render.geometry import draw_image, fit_image

logger = logging.getLogger(__name__)

MARGIN_LEFT = 80
MARGIN_RIGHT = 80
MARGIN_BOTTOM = 40
CATEGORY_GAP = 4
MAX_SCALE = 1.4


@dataclass(frozen=True, slots=True)
class RowMetrics:
    card_width: float = 100
    card_height: float = 150
    gap_x: float = 18
    gap_y: float = 12
    stack_offset: float = 10

    def scaled(self, scale: float) -> "RowMetrics":
        return RowMetrics(
            card_width=self.card_width * scale,
            card_height=self.card_height * scale,
            gap_x=self.gap_x * scale,
            gap_y=self.gap_y * scale,
            stack_offset=self.stack_offset * scale,
        )

    def stack_width(self, quantity: int) -> float:
        return self.card_width + (quantity - 1) * self.stack_offset


BASE_METRICS = RowMetrics()


@dataclass(frozen=True, slots=True)
class StackPlacement:
    """Position of one card stack in a row."""

    card: Card
    quantity: int
    x: float
    y: float

    def copy_positions(self, metrics: RowMetrics) -> list[tuple[float, float]]:
        """Top-left corner of every copy, left to right, same Y."""
        return [(self.x + i * metrics.stack_offset, self.y) for i in range(self.quantity)]


@dataclass(slots=True)
class LayoutRow:
    category: Category
    y: float
    stacks: list[StackPlacement] = field(default_factory=list)


@dataclass(slots=True)
class RowLayout:
    """Result of one layout walk."""

    metrics: RowMetrics
    layout_top: float
    bottom: float
    rows: list[LayoutRow] = field(default_factory=list)
    scale: float = 1.0

    @property
    def used_height(self) -> float:
        return self.bottom - self.layout_top

    def placements(self) -> Iterable[StackPlacement]:
        for row in self.rows:
            yield from row.stacks


def pack_rows(
    groups: Iterable[CategoryGroup],
    layout_top: float,
    canvas_width: float,
    metrics: RowMetrics = BASE_METRICS,
) -> RowLayout:
    """Walk the groups once, wrapping stacks into rows.

    Categories keep their given order; each one starts a new row below a
    small fixed gap.
    """
    usable_right = canvas_width - MARGIN_RIGHT
    layout = RowLayout(metrics=metrics, layout_top=layout_top, bottom=layout_top)
    current_y = layout_top

    for group in groups:
        if not group.stacks:
            continue
        current_y += CATEGORY_GAP
        row = LayoutRow(category=group.category, y=current_y)
        layout.rows.append(row)
        current_x = MARGIN_LEFT

        for stack in group.stacks:
            stack_width = metrics.stack_width(stack.quantity)
            if current_x + stack_width > usable_right:
                current_x = MARGIN_LEFT
                row = LayoutRow(category=group.category, y=row.y + metrics.card_height + metrics.gap_y)
                layout.rows.append(row)
            row.stacks.append(StackPlacement(stack.card, stack.quantity, current_x, row.y))
            current_x += stack_width + metrics.gap_x

        current_y = row.y + metrics.card_height + metrics.gap_y

    layout.bottom = current_y
    return layout


def resolve_scale(used_height: float, available_height: float) -> float:
    """Fill-only scale factor: grow to the free height, never shrink."""
    if used_height > 0 and available_height > 0:
        ratio = available_height / used_height
        if ratio > 1:
            return min(ratio, MAX_SCALE)
    return 1.0


def plan_rows(
    groups: Iterable[CategoryGroup],
    layout_top: float,
    canvas_width: float,
    canvas_height: float,
    base: RowMetrics = BASE_METRICS,
) -> RowLayout:
    """Measure at base size, pick the scale, and lay out at that scale."""
    groups = list(groups)
    simulated = pack_rows(groups, layout_top, canvas_width, base)
    available = canvas_height - layout_top - MARGIN_BOTTOM
    scale = resolve_scale(simulated.used_height, available)
    logger.debug(
        f"Row layout: used={simulated.used_height:.1f}px available={available:.1f}px scale={scale:.3f}"
    )

    layout = pack_rows(groups, layout_top, canvas_width, base.scaled(scale))
    layout.scale = scale
    return layout


def draw_rows(canvas: Image.Image, layout: RowLayout, assets: AssetScope) -> int:
    """Draw every copy of every stack. Returns how many copies were drawn.

    A copy whose image is unavailable is skipped; its slot stays empty.
    """
    metrics = layout.metrics
    drawn = 0
    for placement in layout.placements():
        image: Optional[Image.Image] = assets.get(placement.card.image)
        if image is None:
            logger.debug(f"Skipping {placement.quantity} copies of {placement.card.id}: image unavailable")
            continue
        # Every copy in the stack shares one resampled bitmap
        card = fit_image(image, metrics.card_width, metrics.card_height)
        for x, y in placement.copy_positions(metrics):
            draw_image(canvas, card, x, y, metrics.card_width, metrics.card_height)
            drawn += 1
    return drawn
