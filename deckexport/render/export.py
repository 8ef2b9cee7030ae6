"""
Deck image export.

Two fixed formats:
  horizontal  1920x1080  stretched background, row-packed card stacks
  vertical    1080x1080  left slice of the background, square card grid

Draw order is background, title and chips, edition logo, then cards.
Assets load one at a time in that order. A missing card image only
empties its own slot; a missing background or a drawing error means no
image at all (``None``).
"""

from __future__ import annotations

import io
import logging
import re
from enum import Enum
from typing import Mapping, Optional

from PIL import Image

from deckexport.config import ExportContext
from deckexport.deck.grouping import group_by_category, unique_stacks
from deckexport.deck.icons import deck_edition, resolve_ally_icon
from deckexport.deck.models import CATEGORY_ORDER, Catalog, Category, Deck
from deckexport.deck.stats import category_counts
from deckexport.errors import RenderError
from deckexport.render.assets import AssetScope
from deckexport.render.grid import draw_grid, plan_grid
from deckexport.render.header import CropPolicy, draw_background, draw_edition_logo, draw_header
from deckexport.render.rows import draw_rows, plan_rows

logger = logging.getLogger(__name__)

DEFAULT_FILE_STEM = "deck"


class ExportFormat(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


CANVAS_SIZES: dict[ExportFormat, tuple[int, int]] = {
    ExportFormat.HORIZONTAL: (1920, 1080),
    ExportFormat.VERTICAL: (1080, 1080),
}

CROP_POLICIES: dict[ExportFormat, CropPolicy] = {
    ExportFormat.HORIZONTAL: CropPolicy.STRETCH_FIT,
    ExportFormat.VERTICAL: CropPolicy.CENTER_CROP_SQUARE,
}


def suggested_filename(deck_name: str, fmt: ExportFormat) -> str:
    """``{deck name}-{format}.png``, safe to use as a file name."""
    stem = re.sub(r"[\\/:*?\"<>|]+", "_", (deck_name or "").strip()) or DEFAULT_FILE_STEM
    return f"{stem}-{fmt.value}.png"


def _render(
    canvas: Image.Image,
    deck: Deck,
    catalog: Catalog,
    fmt: ExportFormat,
    counts: Mapping[Category, int],
    context: ExportContext,
    assets: AssetScope,
) -> None:
    manifest = context.manifest
    width, height = canvas.size

    background = assets.get(manifest.background)
    if background is None:
        raise RenderError(f"background template unavailable: {manifest.background}")
    draw_background(canvas, background, CROP_POLICIES[fmt])

    ally = resolve_ally_icon(deck.entries, catalog, manifest.thematic_edition)
    icon_refs = manifest.chip_icons(ally)
    icons = {category: assets.get(icon_refs[category]) for category in CATEGORY_ORDER}
    layout_top = draw_header(canvas, deck.name, counts, icons, context.fonts)

    edition = deck_edition(deck.entries, catalog)
    if edition is not None:
        logo = assets.get(manifest.edition_logos[edition])
        if logo is not None:
            draw_edition_logo(canvas, logo)

    if fmt is ExportFormat.HORIZONTAL:
        layout = plan_rows(group_by_category(deck.entries, catalog), layout_top, width, height)
        drawn = draw_rows(canvas, layout, assets)
        logger.info(f"Drew {drawn} card copies at scale {layout.scale:.2f}")
    else:
        grid = plan_grid(unique_stacks(deck.entries, catalog), layout_top, width, height)
        drawn = draw_grid(canvas, grid, assets, context.fonts.badge)
        logger.info(f"Drew {drawn}/{len(grid.cells)} cells in a {grid.cols}x{grid.rows} grid")


def render_deck_image(
    deck: Deck,
    catalog: Catalog,
    fmt: ExportFormat,
    context: ExportContext,
    counts: Optional[Mapping[Category, int]] = None,
) -> Optional[Image.Image]:
    """Render a deck to a new canvas.

    Args:
        deck: deck name and entries
        catalog: card id -> Card
        fmt: target format
        context: manifest, image source and fonts for this call
        counts: per-category totals for the header chips; computed from
            the deck when omitted

    Returns:
        The finished RGBA canvas, or None when no image could be produced
    """
    if counts is None:
        counts = category_counts(deck.entries, catalog)

    canvas = Image.new("RGBA", CANVAS_SIZES[fmt], (0, 0, 0, 0))
    assets = AssetScope(context.loader)
    logger.info(f"Rendering '{deck.name}' as {fmt.value} {canvas.width}x{canvas.height}")
    try:
        _render(canvas, deck, catalog, fmt, counts, context, assets)
    except RenderError as e:
        logger.error(f"Export failed: {e}")
        return None
    except (OSError, ValueError):
        logger.exception("Export failed while drawing")
        return None
    return canvas


def encode_png(image: Image.Image) -> bytes:
    output = io.BytesIO()
    image.save(output, format="PNG", optimize=True)
    return output.getvalue()


def export_deck_image(
    deck: Deck,
    catalog: Catalog,
    fmt: ExportFormat,
    context: ExportContext,
    counts: Optional[Mapping[Category, int]] = None,
) -> Optional[bytes]:
    """Render and PNG-encode a deck. None means the export failed."""
    image = render_deck_image(deck, catalog, fmt, context, counts)
    if image is None:
        return None
    return encode_png(image)
