"""Card, deck and grouping types.

Cards come from an external catalog and are never mutated. Everything
else here (stacks, category groups) is derived per export call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class Category(str, Enum):
    """Card type. Also the primary grouping key of an export."""

    ALLY = "Ally"
    WEAPON = "Weapon"
    TALISMAN = "Talisman"
    TOTEM = "Totem"
    GOLD = "Gold"


# Fixed iteration order for every export. Never alphabetical.
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.ALLY,
    Category.WEAPON,
    Category.TALISMAN,
    Category.TOTEM,
    Category.GOLD,
)

# Chip labels (plural)
CATEGORY_LABELS: dict[Category, str] = {
    Category.ALLY: "Allies",
    Category.WEAPON: "Weapons",
    Category.TALISMAN: "Talismans",
    Category.TOTEM: "Totems",
    Category.GOLD: "Golds",
}

# Labels used by the deck builder's card database
_CATEGORY_ALIASES: dict[str, Category] = {
    "aliado": Category.ALLY,
    "arma": Category.WEAPON,
    "talismán": Category.TALISMAN,
    "talisman": Category.TALISMAN,
    "tótem": Category.TOTEM,
    "totem": Category.TOTEM,
    "oro": Category.GOLD,
}


class Race(str, Enum):
    """Ally races. Values are the labels stored in the card database."""

    KNIGHT = "Caballero"
    DRAGON = "Dragón"
    FAERIE = "Faerie"
    HERO = "Héroe"
    OLYMPIAN = "Olímpico"
    TITAN = "Titán"
    DEFENDER = "Defensor"
    CHALLENGER = "Desafiante"
    SHADOW = "Sombra"
    ETERNAL = "Eterno"
    PHARAOH = "Faraón"
    PRIEST = "Sacerdote"


class Edition(str, Enum):
    """Card editions, in release order."""

    SACRED_SWORD = "Espada Sagrada"
    HELLENIC = "Helénica"
    CHILDREN_OF_DAANA = "Hijos de Daana"
    DOMAINS_OF_RA = "Dominios de Ra"
    DRACULA = "Drácula"


def _lookup(enum_cls, value: str, aliases: Mapping[str, Enum] | None = None):
    """Match an enum by value or member name, case-insensitively."""
    key = value.strip()
    for member in enum_cls:
        if key == member.value or key.upper() == member.name:
            return member
    folded = key.casefold()
    for member in enum_cls:
        if folded == member.value.casefold() or folded == member.name.casefold().replace("_", " "):
            return member
    if aliases and folded in aliases:
        return aliases[folded]
    return None


def parse_category(value: str) -> Optional[Category]:
    return _lookup(Category, value, _CATEGORY_ALIASES)


def parse_race(value: str) -> Optional[Race]:
    return _lookup(Race, value)


def parse_edition(value: str) -> Optional[Edition]:
    return _lookup(Edition, value)


@dataclass(frozen=True, slots=True)
class Card:
    """A catalog card. Only the fields the export needs are kept."""

    id: str
    type: Category
    image: str
    name: str = ""
    cost: Optional[int] = None
    race: Optional[Race] = None
    edition: Optional[Edition] = None
    is_initial_gold: bool = False

    @property
    def sort_cost(self) -> int:
        return self.cost if self.cost is not None else 0


@dataclass(frozen=True, slots=True)
class DeckEntry:
    """One line of a deck: a card reference and how many copies."""

    card_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class Deck:
    name: str
    entries: tuple[DeckEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class CardStack:
    """A resolved deck entry: the card and its copy count."""

    card: Card
    quantity: int


@dataclass(frozen=True, slots=True)
class CategoryGroup:
    """Ordered stacks of one category, as they will be laid out."""

    category: Category
    stacks: tuple[CardStack, ...]

    @property
    def copies(self) -> int:
        return sum(stack.quantity for stack in self.stacks)


Catalog = Mapping[str, Card]


def build_catalog(cards) -> dict[str, Card]:
    """Index cards by id. Later duplicates replace earlier ones."""
    return {card.id: card for card in cards}
