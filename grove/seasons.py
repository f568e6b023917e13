"""
Season and turn controller.

A turn advances the calendar by one month, tops up the nutrient pool,
ages fruit on the ground, and then applies whichever seasonal transition
the new month triggers. Transitions are month-indexed branches over the
whole tree collection; the only per-tree state they rely on is leaf color.

With the northern calendar:

    August      harvest: ripe fruit falls to the ground, the rest is lost
    September   leaves turn senescent with probability 0.5
    October     senescent leaves drop, the remaining leaves turn
    November    every leaf drops
"""

import logging
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from grove import rules
from grove.config import SeasonCalendar
from grove.state import GameState
from grove.structure import FallenFruit
from grove.tree import Tree

logger = logging.getLogger(__name__)


class TransitionResult(NamedTuple):
    """What a single seasonal transition did to the tree collection."""

    fallen: list[FallenFruit]
    fruit_discarded: int
    leaves_recolored: int
    leaves_dropped: int


class SeasonReport(NamedTuple):
    """Summary of one call to advance_turn."""

    month_index: int
    month_name: str
    nutrients_gained: int
    fruit_fallen: int
    fruit_discarded: int
    fallen_fruit_expired: int
    leaves_recolored: int
    leaves_dropped: int


def next_month(month_index: int, calendar: SeasonCalendar | None = None) -> int:
    """Month after `month_index`, wrapping December back to January."""
    num_months = calendar.num_months if calendar is not None else 12
    return (month_index + 1) % num_months


def month_name(month_index: int, calendar: SeasonCalendar | None = None) -> str:
    calendar = calendar or SeasonCalendar.northern()
    return calendar.month_names[month_index % calendar.num_months]


def _harvest(trees: Iterable[Tree]) -> tuple[list[FallenFruit], int]:
    fallen: list[FallenFruit] = []
    discarded = 0
    for tree in trees:
        for fruit in tree.fruits:
            if rules.is_viable_seed(fruit.size, tree.species):
                fallen.append(FallenFruit(x=fruit.x, y=tree.y, size=fruit.size, color=fruit.color))
            else:
                discarded += 1
        tree.fruits.clear()
    return fallen, discarded


def _change_color(trees: Iterable[Tree], calendar: SeasonCalendar, rng: np.random.Generator) -> int:
    recolored = 0
    for tree in trees:
        for leaf in tree.get_all_leaves():
            if leaf.color != calendar.senescent_color and rng.random() < calendar.color_change_probability:
                leaf.color = calendar.senescent_color
                recolored += 1
    return recolored


def _begin_leaf_fall(trees: Iterable[Tree], calendar: SeasonCalendar) -> tuple[int, int]:
    recolored = 0
    dropped = 0
    for tree in trees:
        for branch in tree.get_all_branches():
            kept = [leaf for leaf in branch.leaves if leaf.color != calendar.senescent_color]
            dropped += len(branch.leaves) - len(kept)
            for leaf in kept:
                leaf.color = calendar.senescent_color
            recolored += len(kept)
            branch.leaves = kept
    return recolored, dropped


def _drop_all_leaves(trees: Iterable[Tree]) -> int:
    dropped = 0
    for tree in trees:
        for branch in tree.get_all_branches():
            dropped += len(branch.leaves)
            branch.leaves.clear()
    return dropped


def apply_seasonal_transition(
    trees: list[Tree],
    month_index: int,
    calendar: SeasonCalendar,
    rng: np.random.Generator,
) -> TransitionResult:
    """
    Apply the transition (if any) that `month_index` triggers.

    Args:
        trees: Every tree in the world
        month_index: The month just entered
        calendar: Which months trigger which transitions
        rng: Random generator for the color-change draw

    Returns:
        TransitionResult; harvested fruit is returned, not stored
    """
    fallen: list[FallenFruit] = []
    discarded = 0
    recolored = 0
    dropped = 0

    if month_index == calendar.harvest_month:
        fallen, discarded = _harvest(trees)
    if month_index == calendar.color_change_month:
        recolored = _change_color(trees, calendar, rng)
    if month_index == calendar.leaf_fall_month:
        recolored, dropped = _begin_leaf_fall(trees, calendar)
    if month_index == calendar.bare_month:
        dropped = _drop_all_leaves(trees)

    return TransitionResult(fallen, discarded, recolored, dropped)


def age_fallen_fruit(fallen_fruits: list[FallenFruit], lifetime: int) -> list[FallenFruit]:
    """
    Age every fallen fruit by one turn.

    Returns:
        The fruit still on the ground (age below `lifetime`)
    """
    for fruit in fallen_fruits:
        fruit.age()
    return [fruit for fruit in fallen_fruits if fruit.grounded_time < lifetime]


def advance_turn(
    state: GameState,
    calendar: SeasonCalendar,
    nutrients_per_turn: int,
    rng: np.random.Generator,
) -> SeasonReport:
    """
    Advance the game by one month.

    Order: month, nutrients, fallen-fruit aging, seasonal transition.

    Args:
        state: Game state, mutated in place
        calendar: Season calendar
        nutrients_per_turn: Nutrients added to the pool
        rng: Random generator

    Returns:
        SeasonReport describing what changed
    """
    state.month_index = next_month(state.month_index, calendar)
    state.turn += 1
    state.nutrients += nutrients_per_turn

    before = len(state.fallen_fruits)
    state.fallen_fruits = age_fallen_fruit(state.fallen_fruits, calendar.fallen_fruit_lifetime)
    expired = before - len(state.fallen_fruits)

    result = apply_seasonal_transition(state.trees, state.month_index, calendar, rng)
    state.fallen_fruits.extend(result.fallen)

    name = month_name(state.month_index, calendar)
    if result.fallen or result.fruit_discarded:
        logger.info("Harvest: %d fruit fell, %d discarded", len(result.fallen), result.fruit_discarded)
    if result.leaves_dropped:
        logger.info("%s: %d leaves dropped", name, result.leaves_dropped)
    logger.info("Turn %d ended, now %s with %d nutrients", state.turn, name, state.nutrients)

    return SeasonReport(
        month_index=state.month_index,
        month_name=name,
        nutrients_gained=nutrients_per_turn,
        fruit_fallen=len(result.fallen),
        fruit_discarded=result.fruit_discarded,
        fallen_fruit_expired=expired,
        leaves_recolored=result.leaves_recolored,
        leaves_dropped=result.leaves_dropped,
    )
