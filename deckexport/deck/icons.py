"""Deck-level identity: the Ally chip icon, the deck edition and the deck race."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from deckexport.deck.grouping import resolve_stacks
from deckexport.deck.models import Catalog, Category, DeckEntry, Edition, Race

# Share of Ally copies needed to switch away from the generic icon
EDITION_SHARE_THRESHOLD = 0.30
RACE_SHARE_THRESHOLD = 0.40

DEFAULT_THEMATIC_EDITION = Edition.DRACULA


class AllyIconKind(str, Enum):
    GENERIC = "generic"
    EDITION = "edition"
    RACE = "race"


@dataclass(frozen=True, slots=True)
class AllyIcon:
    """Which icon the Ally chip shows."""

    kind: AllyIconKind
    race: Optional[Race] = None
    edition: Optional[Edition] = None


GENERIC_ALLY_ICON = AllyIcon(AllyIconKind.GENERIC)


def resolve_ally_icon(
    entries: Iterable[DeckEntry],
    catalog: Catalog,
    thematic_edition: Edition = DEFAULT_THEMATIC_EDITION,
) -> AllyIcon:
    """Pick the Ally chip icon from the deck's Ally copies.

    The thematic edition wins above 30% of Ally copies, then a single
    race above 40%. Anything else, including a tie between two races
    for the top spot, falls back to the generic icon.
    """
    total = 0
    in_edition = 0
    by_race: Counter[Race] = Counter()

    for stack in resolve_stacks(entries, catalog):
        card = stack.card
        if card.type is not Category.ALLY:
            continue
        total += stack.quantity
        if card.edition is thematic_edition:
            in_edition += stack.quantity
        if card.race is not None:
            by_race[card.race] += stack.quantity

    if total == 0:
        return GENERIC_ALLY_ICON

    if in_edition / total > EDITION_SHARE_THRESHOLD:
        return AllyIcon(AllyIconKind.EDITION, edition=thematic_edition)

    ranked = by_race.most_common(2)
    if ranked:
        race, count = ranked[0]
        tied = len(ranked) > 1 and ranked[1][1] == count
        if not tied and count / total > RACE_SHARE_THRESHOLD:
            return AllyIcon(AllyIconKind.RACE, race=race)

    return GENERIC_ALLY_ICON


def deck_edition(entries: Iterable[DeckEntry], catalog: Catalog) -> Optional[Edition]:
    """The edition shared by every card in the deck, if there is exactly one."""
    editions = {stack.card.edition for stack in resolve_stacks(entries, catalog)}
    if len(editions) == 1:
        return editions.pop()
    return None


def deck_race(entries: Iterable[DeckEntry], catalog: Catalog) -> Optional[Race]:
    """The race shared by every Ally with a race, if there is exactly one."""
    races = {
        stack.card.race
        for stack in resolve_stacks(entries, catalog)
        if stack.card.type is Category.ALLY and stack.card.race is not None
    }
    if len(races) == 1:
        return races.pop()
    return None
