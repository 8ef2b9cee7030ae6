"""Deck summary numbers and the plain-text deck list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from deckexport.deck.grouping import group_by_category, resolve_stacks
from deckexport.deck.models import CATEGORY_ORDER, Catalog, Category, DeckEntry, Edition


@dataclass(slots=True)
class DeckStats:
    """Totals for a deck. ``cards_by_type`` feeds the header chips."""

    total_cards: int = 0
    total_cost: int = 0
    average_cost: float = 0.0
    cards_by_type: dict[Category, int] = field(default_factory=dict)
    cards_by_edition: dict[Edition, int] = field(default_factory=dict)
    has_initial_gold: bool = False

    def count(self, category: Category) -> int:
        return self.cards_by_type.get(category, 0)


def compute_deck_stats(entries: Iterable[DeckEntry], catalog: Catalog) -> DeckStats:
    """Summarize a deck.

    Average cost leaves Gold cards out and is rounded to two decimals.
    """
    stats = DeckStats()
    non_gold_cards = 0
    non_gold_cost = 0

    for stack in resolve_stacks(entries, catalog):
        card, quantity = stack.card, stack.quantity
        stats.total_cards += quantity
        stats.total_cost += card.sort_cost * quantity
        stats.cards_by_type[card.type] = stats.cards_by_type.get(card.type, 0) + quantity
        if card.edition is not None:
            stats.cards_by_edition[card.edition] = stats.cards_by_edition.get(card.edition, 0) + quantity
        if card.is_initial_gold:
            stats.has_initial_gold = True
        if card.type is not Category.GOLD:
            non_gold_cards += quantity
            non_gold_cost += card.sort_cost * quantity

    if non_gold_cards:
        stats.average_cost = round(non_gold_cost / non_gold_cards, 2)
    return stats


def category_counts(entries: Iterable[DeckEntry], catalog: Catalog) -> dict[Category, int]:
    """Copies per category, every category present (zero when empty)."""
    stats = compute_deck_stats(entries, catalog)
    return {category: stats.count(category) for category in CATEGORY_ORDER}


def deck_list_text(entries: Iterable[DeckEntry], catalog: Catalog) -> str:
    """``<qty>x <name>`` lines in export order."""
    lines = []
    for group in group_by_category(entries, catalog):
        for stack in group.stacks:
            lines.append(f"{stack.quantity}x {stack.card.name or stack.card.id}")
    return "\n".join(lines)
