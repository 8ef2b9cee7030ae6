"""Load card catalogs and decks from JSON or YAML files.

Catalog files hold a list of card records (or ``{"cards": [...]}``).
Both the deck builder's camelCase keys (``isOroIni``, ``isInitialGold``)
and snake_case keys are accepted.

Deck files look like::

    name: Knights of the Round
    cards:
      - cardId: ESP-001
        quantity: 3
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from deckexport.deck.models import (
    Card,
    Deck,
    DeckEntry,
    build_catalog,
    parse_category,
    parse_edition,
    parse_race,
)
from deckexport.errors import CatalogError

logger = logging.getLogger(__name__)


def _read_data(path: Path) -> Any:
    """Decode a JSON or YAML file, picked by suffix."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yml", ".yaml"):
                return yaml.safe_load(f)
            return json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Failed to parse {path}: {e}") from e
    except FileNotFoundError as e:
        raise CatalogError(f"File not found: {path}") from e


def resolve_ref(ref: str, base_dir: Optional[Path]) -> str:
    """Make a relative file reference absolute against ``base_dir``.

    URLs, data URIs and absolute paths are returned unchanged.
    """
    if base_dir is None or ref.startswith(("http://", "https://", "data:")):
        return ref
    path = Path(ref)
    return str(path if path.is_absolute() else base_dir / path)


def _parse_flag(card_id: str, value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise CatalogError(f"Card '{card_id}' has invalid initial gold flag {value!r}")


def _first(entry: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return default


def parse_card(entry: dict[str, Any], base_dir: Optional[Path] = None) -> Card:
    """Build a Card from a catalog record.

    Relative image paths resolve against ``base_dir`` when given.
    """
    if not isinstance(entry, dict):
        raise CatalogError(f"Card record must be an object, got {type(entry).__name__}")

    card_id = entry.get("id")
    if not isinstance(card_id, str) or not card_id.strip():
        raise CatalogError(f"Card record without id: {entry!r}")

    type_value = entry.get("type")
    category = parse_category(type_value) if isinstance(type_value, str) else None
    if category is None:
        raise CatalogError(f"Card '{card_id}' has unknown type {type_value!r}")

    image = entry.get("image")
    if not isinstance(image, str) or not image:
        raise CatalogError(f"Card '{card_id}' must define an image reference")

    cost = entry.get("cost")
    if cost is not None:
        try:
            cost = int(cost)
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Card '{card_id}' has invalid cost {cost!r}") from e

    race = None
    race_value = entry.get("race")
    if race_value:
        race = parse_race(str(race_value))
        if race is None:
            logger.warning(f"Card '{card_id}': unknown race {race_value!r}, ignoring")

    edition = None
    edition_value = entry.get("edition")
    if edition_value:
        edition = parse_edition(str(edition_value))
        if edition is None:
            logger.warning(f"Card '{card_id}': unknown edition {edition_value!r}, ignoring")

    return Card(
        id=card_id,
        type=category,
        image=resolve_ref(image, base_dir),
        name=str(entry.get("name", "")),
        cost=cost,
        race=race,
        edition=edition,
        is_initial_gold=_parse_flag(
            card_id, _first(entry, "isInitialGold", "is_initial_gold", "isOroIni", default=False)
        ),
    )


def parse_catalog(data: Any, base_dir: Optional[Path] = None) -> dict[str, Card]:
    if isinstance(data, dict):
        data = data.get("cards")
    if not isinstance(data, list):
        raise CatalogError("Catalog must be a list of cards or an object with a 'cards' list")
    return build_catalog(parse_card(entry, base_dir) for entry in data)


def load_catalog(path: str | Path) -> dict[str, Card]:
    """Load a catalog file into an id -> Card mapping.

    Relative card image paths are taken relative to the catalog file.
    """
    path = Path(path)
    catalog = parse_catalog(_read_data(path), base_dir=path.resolve().parent)
    logger.info(f"Loaded {len(catalog)} card(s) from {path}")
    return catalog


def parse_deck(data: Any, default_name: str = "") -> Deck:
    if not isinstance(data, dict):
        raise CatalogError("Deck must be an object with 'name' and 'cards'")

    entries = []
    for idx, raw in enumerate(data.get("cards") or [], start=1):
        if not isinstance(raw, dict):
            raise CatalogError(f"Deck entry #{idx} must be an object")
        card_id = _first(raw, "cardId", "card_id", "id")
        if not isinstance(card_id, str) or not card_id:
            raise CatalogError(f"Deck entry #{idx} must define 'cardId'")
        try:
            quantity = int(raw.get("quantity", 1))
        except (TypeError, ValueError) as e:
            raise CatalogError(f"Deck entry #{idx} has invalid quantity {raw.get('quantity')!r}") from e
        if quantity < 0:
            raise CatalogError(f"Deck entry #{idx} has negative quantity {quantity}")
        entries.append(DeckEntry(card_id=card_id, quantity=quantity))

    return Deck(name=str(data.get("name") or default_name), entries=tuple(entries))


def load_deck(path: str | Path) -> Deck:
    """Load a deck file. The file stem names the deck when it has no name."""
    path = Path(path)
    return parse_deck(_read_data(path), default_name=path.stem)
