from __future__ import annotations

from typing import Optional

import pytest
from PIL import Image

from deckexport.config import AssetManifest, ExportContext
from deckexport.deck.models import Card, Category, DeckEntry, Edition, Race, build_catalog
from deckexport.render.fonts import load_fonts

BACKGROUND_COLOR = (10, 20, 30, 255)
CARD_COLOR = (200, 0, 0, 255)


def solid(color, size=(50, 75)) -> Image.Image:
    return Image.new("RGBA", size, color)


class FakeSource:
    """In-memory image source that records every load in order."""

    def __init__(self, images: Optional[dict] = None, missing=()):
        self.images = dict(images or {})
        self.missing = set(missing)
        self.calls: list[str] = []

    def load(self, ref: str) -> Optional[Image.Image]:
        self.calls.append(ref)
        if ref in self.missing:
            return None
        if ref in self.images:
            return self.images[ref]
        if ref == "bg":
            return solid(BACKGROUND_COLOR, (1920, 1080))
        return solid(CARD_COLOR)


def manifest_data() -> dict:
    return {
        "background": "bg",
        "thematic_edition": "Drácula",
        "generic_ally_icon": "icon:ally",
        "category_icons": {c.value: f"icon:{c.value}" for c in Category if c is not Category.ALLY},
        "race_icons": {r.value: f"race:{r.name}" for r in Race},
        "edition_logos": {e.value: f"logo:{e.name}" for e in Edition},
    }


def make_card(card_id: str, category: Category = Category.ALLY, **kwargs) -> Card:
    kwargs.setdefault("image", f"img:{card_id}")
    return Card(id=card_id, type=category, **kwargs)


def entries(*pairs) -> tuple[DeckEntry, ...]:
    return tuple(DeckEntry(card_id, quantity) for card_id, quantity in pairs)


@pytest.fixture(scope="session")
def fonts():
    return load_fonts()


@pytest.fixture()
def manifest() -> AssetManifest:
    return AssetManifest.from_dict(manifest_data())


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture()
def context(manifest, source, fonts) -> ExportContext:
    return ExportContext(manifest=manifest, loader=source, fonts=fonts)


@pytest.fixture()
def catalog():
    return build_catalog([
        make_card("ally-a", Category.ALLY, cost=2, race=Race.KNIGHT, edition=Edition.SACRED_SWORD),
        make_card("ally-b", Category.ALLY, cost=1, race=Race.KNIGHT, edition=Edition.SACRED_SWORD),
        make_card("ally-c", Category.ALLY, cost=None, race=Race.DRAGON, edition=Edition.SACRED_SWORD),
        make_card("weapon-a", Category.WEAPON, cost=3, edition=Edition.SACRED_SWORD),
        make_card("talisman-a", Category.TALISMAN, cost=1, edition=Edition.SACRED_SWORD),
        make_card("totem-a", Category.TOTEM, cost=4, edition=Edition.SACRED_SWORD),
        make_card("gold", Category.GOLD, edition=Edition.SACRED_SWORD),
        make_card("gold-alt", Category.GOLD, edition=Edition.SACRED_SWORD),
        make_card("gold-initial", Category.GOLD, edition=Edition.SACRED_SWORD, is_initial_gold=True),
    ])
