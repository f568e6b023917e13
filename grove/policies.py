"""
Scripted turn policies.

A policy looks at the game state and the selected tree and decides how
much of each action to request this turn. Policies only express intent;
World enforces costs and rules, so an over-eager plan simply completes
fewer units.

All policies return a TurnPlan and share the PolicyFn signature.
"""

from collections.abc import Callable
from typing import NamedTuple

from grove import rules
from grove.config import SeasonCalendar
from grove.state import GameState
from grove.tree import Tree


class TurnPlan(NamedTuple):
    """Per-action request counts for one turn."""

    height_steps: int = 0
    roots: int = 0
    branches: int = 0
    leaves: int = 0
    fruit: int = 0
    plant: bool = False


PolicyFn = Callable[[GameState, Tree, SeasonCalendar], TurnPlan]


def idle_policy(
    state: GameState,  # noqa: ARG001
    tree: Tree,  # noqa: ARG001
    calendar: SeasonCalendar,  # noqa: ARG001
) -> TurnPlan:
    """Do nothing; the tree only experiences the seasons."""
    return TurnPlan()


def baseline_policy(
    state: GameState,
    tree: Tree,
    calendar: SeasonCalendar,
) -> TurnPlan:
    """
    Hand-coded baseline following the game's natural progression.

    Phases:
    - Seedling: pour nutrients into height until branching unlocks
    - Sapling: keep growing, fill the branch budget, a few roots
    - Mature: leaf out in season, fruit before harvest, plant seeds

    Args:
        state: Current game state
        tree: Tree the plan applies to
        calendar: Season calendar (fruit is only worth making before harvest)

    Returns:
        TurnPlan for this turn
    """
    species = tree.species
    month = state.month_index

    if tree.height < species.rules.min_height_for_branches:
        return TurnPlan(height_steps=5, roots=1)

    height_steps = 5 if rules.can_grow_height(tree.height, species) else 0
    branch_room = rules.branch_capacity(tree.height, species) - len(tree.get_all_branches())
    branches = min(max(branch_room, 0), 10)

    leaves = 0
    if rules.can_leaf_in_month(month, species):
        leaves = max(species.rules.min_leaves_for_fruits - tree.get_total_leaves(), 0) + 10

    fruit = 0
    if month < calendar.harvest_month and rules.can_produce_fruit(tree.height, tree.get_total_leaves(), species):
        fruit = 5

    return TurnPlan(
        height_steps=height_steps,
        roots=1,
        branches=branches,
        leaves=leaves,
        fruit=fruit,
        plant=bool(tree.viable_fruit()),
    )


def canopy_policy(
    state: GameState,
    tree: Tree,
    calendar: SeasonCalendar,  # noqa: ARG001
) -> TurnPlan:
    """
    Policy focused on a wide, leafy crown.

    Grows just tall enough to branch, then spends most nutrients on
    branches and leaves. Never fruits or plants.
    """
    species = tree.species
    if tree.height < species.rules.min_height_for_branches + 50:
        return TurnPlan(height_steps=10)

    leaves = 40 if rules.can_leaf_in_month(state.month_index, species) else 0
    return TurnPlan(height_steps=2, branches=25, leaves=leaves)


POLICIES: dict[str, PolicyFn] = {
    "idle": idle_policy,
    "baseline": baseline_policy,
    "canopy": canopy_policy,
}
