from deckexport.deck.grouping import group_by_category, resolve_stacks, sort_category, unique_stacks
from deckexport.deck.models import CATEGORY_ORDER, CardStack, Category, build_catalog

from conftest import entries, make_card


def _ids(group):
    return [stack.card.id for stack in group.stacks]


def test_gold_initial_goes_after_regular_gold():
    catalog = build_catalog([
        make_card("ally", Category.ALLY, cost=2),
        make_card("gold-initial", Category.GOLD, is_initial_gold=True),
        make_card("gold", Category.GOLD),
    ])
    deck = entries(("ally", 4), ("gold-initial", 1), ("gold", 2))

    groups = group_by_category(deck, catalog)

    assert [g.category for g in groups] == [Category.ALLY, Category.GOLD]
    gold = groups[1]
    assert [(s.card.id, s.quantity) for s in gold.stacks] == [("gold", 2), ("gold-initial", 1)]


def test_initial_gold_stays_last_even_with_more_copies(catalog):
    deck = entries(("gold-initial", 5), ("gold", 1), ("gold-alt", 3))

    (gold,) = group_by_category(deck, catalog)

    assert _ids(gold) == ["gold-alt", "gold", "gold-initial"]


def test_categories_follow_fixed_order(catalog):
    deck = entries(("gold", 1), ("totem-a", 1), ("weapon-a", 1), ("talisman-a", 1), ("ally-a", 1))

    groups = group_by_category(deck, catalog)

    assert [g.category for g in groups] == list(CATEGORY_ORDER)


def test_cost_ascending_with_missing_cost_as_zero(catalog):
    deck = entries(("ally-a", 1), ("ally-b", 1), ("ally-c", 1))

    (allies,) = group_by_category(deck, catalog)

    assert _ids(allies) == ["ally-c", "ally-b", "ally-a"]


def test_equal_costs_keep_deck_order():
    catalog = build_catalog([make_card(f"c{i}", Category.WEAPON, cost=1) for i in range(4)])
    deck = entries(("c2", 1), ("c0", 1), ("c3", 1), ("c1", 1))

    (group,) = group_by_category(deck, catalog)

    assert _ids(group) == ["c2", "c0", "c3", "c1"]


def test_unknown_and_empty_entries_are_dropped(catalog):
    deck = entries(("ally-a", 2), ("missing", 3), ("weapon-a", 0))

    stacks = resolve_stacks(deck, catalog)

    assert stacks == [CardStack(catalog["ally-a"], 2)]
    assert [g.category for g in group_by_category(deck, catalog)] == [Category.ALLY]


def test_empty_deck_has_no_groups(catalog):
    assert group_by_category((), catalog) == []


def test_sort_category_non_gold_ignores_initial_flag(catalog):
    stacks = [CardStack(catalog["ally-a"], 1), CardStack(catalog["ally-b"], 3)]
    assert [s.card.id for s in sort_category(Category.ALLY, stacks)] == ["ally-b", "ally-a"]


def test_unique_stacks_merge_repeated_entries(catalog):
    deck = entries(("gold", 1), ("ally-a", 2), ("ally-a", 1), ("gold-initial", 1), ("weapon-a", 1))

    stacks = unique_stacks(deck, catalog)

    assert [(s.card.id, s.quantity) for s in stacks] == [
        ("ally-a", 3),
        ("weapon-a", 1),
        ("gold", 1),
        ("gold-initial", 1),
    ]


def test_group_copies_match_deck_quantities(catalog):
    deck = entries(("ally-a", 3), ("ally-b", 2), ("gold", 7), ("gold-initial", 1), ("totem-a", 1))

    groups = group_by_category(deck, catalog)

    assert sum(g.copies for g in groups) == 14
