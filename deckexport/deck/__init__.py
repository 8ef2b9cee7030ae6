"""Deck data: card types, grouping order, and deck-level summaries."""

from deckexport.deck.models import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    Card,
    CardStack,
    Catalog,
    Category,
    CategoryGroup,
    Deck,
    DeckEntry,
    Edition,
    Race,
    build_catalog,
)
from deckexport.deck.grouping import (
    group_by_category,
    resolve_stacks,
    sort_category,
    unique_stacks,
)
from deckexport.deck.icons import (
    AllyIcon,
    AllyIconKind,
    deck_edition,
    deck_race,
    resolve_ally_icon,
)
from deckexport.deck.stats import (
    DeckStats,
    category_counts,
    compute_deck_stats,
    deck_list_text,
)
from deckexport.deck.loader import load_catalog, load_deck

__all__ = [
    # models.py
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "Card",
    "CardStack",
    "Catalog",
    "Category",
    "CategoryGroup",
    "Deck",
    "DeckEntry",
    "Edition",
    "Race",
    "build_catalog",
    # grouping.py
    "group_by_category",
    "resolve_stacks",
    "sort_category",
    "unique_stacks",
    # icons.py
    "AllyIcon",
    "AllyIconKind",
    "deck_edition",
    "deck_race",
    "resolve_ally_icon",
    # stats.py
    "DeckStats",
    "category_counts",
    "compute_deck_stats",
    "deck_list_text",
    # loader.py
    "load_catalog",
    "load_deck",
]
