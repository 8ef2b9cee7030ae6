#!/usr/bin/env python3
"""deckexport CLI - render shareable deck images."""

import logging
import sys
from pathlib import Path

import click

from deckexport import __version__
from deckexport.deck import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    category_counts,
    compute_deck_stats,
    deck_edition,
    deck_list_text,
    deck_race,
    group_by_category,
    load_catalog,
    load_deck,
    resolve_ally_icon,
    unique_stacks,
)
from deckexport.errors import DeckExportError


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _load_inputs(deck_path: str, catalog_path: str):
    try:
        return load_deck(deck_path), load_catalog(catalog_path)
    except DeckExportError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def cli(verbose):
    """deckexport - shareable images of card game decks.

    Render a deck as a wide summary (1920x1080) or a square grid
    (1080x1080) for social sharing.
    """
    _setup_logging(verbose)


@cli.command()
@click.option("--deck", "deck_path", required=True, type=click.Path(exists=True), help="Deck file (YAML/JSON)")
@click.option("--catalog", "catalog_path", required=True, type=click.Path(exists=True), help="Card catalog (JSON/YAML)")
@click.option("--format", "fmt", type=click.Choice(["horizontal", "vertical", "both"]), default="horizontal")
@click.option("--out-dir", default=".", type=click.Path(file_okay=False), help="Output directory")
@click.option("--assets", "assets_path", type=click.Path(exists=True), help="Asset manifest YAML")
def render(deck_path, catalog_path, fmt, out_dir, assets_path):
    """Render deck image(s) to PNG."""
    from deckexport.config import ExportContext
    from deckexport.render.export import ExportFormat, export_deck_image, suggested_filename

    deck, catalog = _load_inputs(deck_path, catalog_path)
    try:
        context = ExportContext.from_env(assets_path)
    except DeckExportError as e:
        raise click.ClickException(str(e))

    formats = list(ExportFormat) if fmt == "both" else [ExportFormat(fmt)]
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    failed = 0
    for export_format in formats:
        data = export_deck_image(deck, catalog, export_format, context)
        if data is None:
            click.echo(f"[ERROR] Could not render {export_format.value} image", err=True)
            failed += 1
            continue
        path = out / suggested_filename(deck.name, export_format)
        path.write_bytes(data)
        click.echo(f"[OK] {path}")

    if failed:
        sys.exit(1)


@cli.command()
@click.option("--deck", "deck_path", required=True, type=click.Path(exists=True), help="Deck file (YAML/JSON)")
@click.option("--catalog", "catalog_path", required=True, type=click.Path(exists=True), help="Card catalog (JSON/YAML)")
def layout(deck_path, catalog_path):
    """Show the export layout without fetching any image."""
    from deckexport.render.export import CANVAS_SIZES, ExportFormat
    from deckexport.render.grid import plan_grid
    from deckexport.render.header import LAYOUT_TOP
    from deckexport.render.rows import plan_rows

    deck, catalog = _load_inputs(deck_path, catalog_path)

    counts = category_counts(deck.entries, catalog)
    click.echo("Chips: " + "  ".join(f"{CATEGORY_LABELS[c]}: {n}" for c, n in counts.items()))

    width, height = CANVAS_SIZES[ExportFormat.HORIZONTAL]
    rows = plan_rows(group_by_category(deck.entries, catalog), LAYOUT_TOP, width, height)
    click.echo(f"Horizontal {width}x{height}: scale {rows.scale:.3f}, bottom at {rows.bottom:.1f}px")
    for row in rows.rows:
        stacks = ", ".join(f"{p.card.id} x{p.quantity}" for p in row.stacks)
        click.echo(f"  {row.category.value:<9} y={row.y:7.1f}  {stacks}")
    if rows.bottom > height:
        click.echo(f"  [WARN] Layout runs {rows.bottom - height:.0f}px past the canvas bottom")

    width, height = CANVAS_SIZES[ExportFormat.VERTICAL]
    grid = plan_grid(unique_stacks(deck.entries, catalog), LAYOUT_TOP, width, height)
    click.echo(
        f"Vertical {width}x{height}: {grid.cols}x{grid.rows} grid, "
        f"cells {grid.cell_width:.1f}x{grid.cell_height:.1f}px"
    )
    for cell in grid.cells:
        click.echo(f"  [{cell.row},{cell.col}] {cell.stack.card.id} x{cell.stack.quantity}")


@cli.command()
@click.option("--deck", "deck_path", required=True, type=click.Path(exists=True), help="Deck file (YAML/JSON)")
@click.option("--catalog", "catalog_path", required=True, type=click.Path(exists=True), help="Card catalog (JSON/YAML)")
def stats(deck_path, catalog_path):
    """Print the deck summary and card list."""
    deck, catalog = _load_inputs(deck_path, catalog_path)
    summary = compute_deck_stats(deck.entries, catalog)

    click.echo(f"Deck: {deck.name or '(untitled)'}")
    click.echo(f"Total: {summary.total_cards} cards, average cost {summary.average_cost:.2f}")
    for category in CATEGORY_ORDER:
        click.echo(f"  {category.value:<9} {summary.count(category)}")

    edition = deck_edition(deck.entries, catalog)
    race = deck_race(deck.entries, catalog)
    ally = resolve_ally_icon(deck.entries, catalog)
    click.echo(f"Edition: {edition.value if edition else 'mixed'}")
    click.echo(f"Race: {race.value if race else 'mixed'}")
    click.echo(f"Ally icon: {ally.kind.value}")
    click.echo("")
    click.echo(deck_list_text(deck.entries, catalog))


if __name__ == "__main__":
    cli()
