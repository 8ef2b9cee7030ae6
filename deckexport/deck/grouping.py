"""Category grouping and ordering of deck entries.

Order rules:
  - categories always follow CATEGORY_ORDER (Ally, Weapon, Talisman, Totem, Gold)
  - inside a category cards go by cost ascending, missing cost counts as 0
  - Gold goes by quantity descending, with initial Gold cards always last
"""

from __future__ import annotations

import logging
from typing import Iterable

from deckexport.deck.models import (
    CATEGORY_ORDER,
    CardStack,
    Catalog,
    Category,
    CategoryGroup,
    DeckEntry,
)

logger = logging.getLogger(__name__)


def resolve_stacks(entries: Iterable[DeckEntry], catalog: Catalog) -> list[CardStack]:
    """Pair deck entries with catalog cards, in deck order.

    Entries with no copies are inert. Entries whose card is not in the
    catalog are dropped without error.
    """
    stacks = []
    for entry in entries:
        if entry.quantity <= 0:
            continue
        card = catalog.get(entry.card_id)
        if card is None:
            logger.debug(f"Dropping unknown card id {entry.card_id!r}")
            continue
        stacks.append(CardStack(card=card, quantity=entry.quantity))
    return stacks


def sort_category(category: Category, stacks: Iterable[CardStack]) -> list[CardStack]:
    """Order the stacks of a single category."""
    stacks = list(stacks)
    if category is Category.GOLD:
        regular = [s for s in stacks if not s.card.is_initial_gold]
        initial = [s for s in stacks if s.card.is_initial_gold]
        regular.sort(key=lambda s: -s.quantity)
        initial.sort(key=lambda s: -s.quantity)
        return regular + initial
    return sorted(stacks, key=lambda s: s.card.sort_cost)


def group_by_category(entries: Iterable[DeckEntry], catalog: Catalog) -> list[CategoryGroup]:
    """Group a deck into ordered CategoryGroups, skipping empty categories."""
    buckets: dict[Category, list[CardStack]] = {category: [] for category in CATEGORY_ORDER}
    for stack in resolve_stacks(entries, catalog):
        buckets[stack.card.type].append(stack)

    groups = []
    for category in CATEGORY_ORDER:
        if not buckets[category]:
            continue
        groups.append(CategoryGroup(category, tuple(sort_category(category, buckets[category]))))
    return groups


def unique_stacks(entries: Iterable[DeckEntry], catalog: Catalog) -> list[CardStack]:
    """One stack per distinct card, flattened in category order.

    Repeated entries for the same card id are merged and their
    quantities summed, so every copy is still accounted for.
    """
    totals: dict[str, int] = {}
    merged: list[DeckEntry] = []
    for stack in resolve_stacks(entries, catalog):
        if stack.card.id not in totals:
            merged.append(DeckEntry(stack.card.id, 0))
        totals[stack.card.id] = totals.get(stack.card.id, 0) + stack.quantity

    merged = [DeckEntry(entry.card_id, totals[entry.card_id]) for entry in merged]
    return [stack for group in group_by_category(merged, catalog) for stack in group.stacks]
