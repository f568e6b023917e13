"""
World orchestrator.

World owns a GameState and is the only place nutrients are spent. Each
command acts on the selected tree, charges the shared pool per unit of
work, and returns an ActionResult. Like the tree operations underneath
them, commands fail softly: an unaffordable, out-of-season or otherwise
illegal request completes zero units and charges nothing.

Costs follow EconomyConfig:

    grow_height     1 nutrient per height_per_nutrient units actually grown
    add_roots       root_cost each
    add_branches    branch_cost per success (failed attempts are refunded)
    add_leaves      leaf_cost per success
    produce_fruit   fruit_cost per attempt, once the fruit gate is open
    plant_new_tree  planting_cost plus one viable fruit
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from grove import rules, seasons
from grove.config import EconomyConfig, SeasonCalendar, SpeciesConfig
from grove.seasons import SeasonReport
from grove.species import DEFAULT_TREE, SPECIES_CATALOG
from grove.state import GameState
from grove.tree import Tree

logger = logging.getLogger(__name__)

PLANTING_MARGIN = 30.0  # Keep new trees this far from the world edges
MATURITY_TRUNK_PROBABILITY = 0.3
MATURITY_MIN_TRUNK_BRANCHES = 5

ACTIONS = (
    "grow_height",
    "add_roots",
    "add_branches",
    "add_leaves",
    "produce_fruit",
    "plant_new_tree",
)


class ActionResult(NamedTuple):
    """Outcome of one orchestrator command."""

    requested: int
    completed: int
    nutrients_spent: int

    @property
    def succeeded(self) -> bool:
        return self.completed > 0


NO_ACTION = ActionResult(0, 0, 0)


class World:
    """
    A set of trees sharing one nutrient pool and one calendar.

    Args:
        species: Species of the first tree, planted at the world's center
        economy: Nutrient economy (defaults to EconomyConfig())
        calendar: Season calendar (defaults to the northern calendar)
        catalog: Species rotation used when planting from fruit
        seed: Seed for the world's random generator
        rng: Random generator, overrides `seed`
    """

    def __init__(
        self,
        species: SpeciesConfig = DEFAULT_TREE,
        *,
        economy: EconomyConfig | None = None,
        calendar: SeasonCalendar | None = None,
        catalog: tuple[SpeciesConfig, ...] = SPECIES_CATALOG,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not catalog:
            raise ValueError("Species catalog must not be empty")
        self.economy = economy or EconomyConfig()
        self.calendar = calendar or SeasonCalendar.northern()
        self.catalog = catalog
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.state = GameState(nutrients=self.economy.starting_nutrients)

        self._catalog_index = catalog.index(species) if species in catalog else 0
        first = self.plant_tree(self.economy.world_width / 2, species)
        self.state.select(first)

    # ------------------------------------------------------------------
    # Trees and selection
    # ------------------------------------------------------------------

    @property
    def trees(self) -> list[Tree]:
        return self.state.trees

    @property
    def selected(self) -> Tree | None:
        return self.state.selected

    def plant_tree(self, x: float, species: SpeciesConfig) -> Tree:
        """Add a seedling at `x` on the ground line. Does not charge or select."""
        tree = Tree(
            x,
            self.economy.ground_y,
            species,
            height=self.economy.initial_tree_height,
            width=self.economy.initial_tree_width,
            soil_depth=self.economy.soil_depth,
            rng=self.rng,
        )
        self.state.trees.append(tree)
        return tree

    def select(self, tree: Tree) -> None:
        self.state.select(tree)

    def select_at(self, x: float, y: float) -> Tree | None:
        """
        Select the top-most tree whose trunk box contains (x, y).

        Later-planted trees draw on top, so they win overlaps. A miss keeps
        the current selection.

        Returns:
            The newly selected tree, or None on a miss
        """
        for tree in reversed(self.state.trees):
            if tree.contains_point(x, y, padding=self.economy.click_padding):
                self.state.select(tree)
                logger.debug("Selected %r", tree)
                return tree
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _target(self, action: str, count: int) -> Tree | None:
        if count <= 0:
            logger.debug("%s: requested count must be positive, got %d", action, count)
            return None
        tree = self.state.selected
        if tree is None:
            logger.debug("%s: no tree selected", action)
        return tree

    def grow_height(self, requested_steps: int = 1) -> ActionResult:
        """
        Grow the selected tree by up to `requested_steps` nutrients' worth.

        Only the height actually gained is charged, rounded up to whole
        nutrients, so a tree near max height pays for what it got.
        """
        tree = self._target("grow_height", requested_steps)
        if tree is None:
            return ActionResult(max(requested_steps, 0), 0, 0)

        affordable = min(requested_steps, self.state.nutrients)
        if affordable <= 0:
            logger.debug("Not enough nutrients to grow height")
            return ActionResult(requested_steps, 0, 0)

        per_nutrient = self.economy.height_per_nutrient
        gained = tree.grow_height(affordable * per_nutrient)
        # Round away float noise before ceil, and never charge past what was affordable
        spent = min(affordable, math.ceil(round(gained / per_nutrient, 9))) if gained > 0 else 0
        if not self.state.spend(spent):
            logger.debug("Could not pay %d nutrients for height growth", spent)
            return ActionResult(requested_steps, 0, 0)
        if affordable < requested_steps:
            logger.debug("Nutrients covered %d of %d height steps", affordable, requested_steps)
        return ActionResult(requested_steps, spent, spent)

    def add_roots(self, count: int = 1) -> ActionResult:
        tree = self._target("add_roots", count)
        if tree is None:
            return ActionResult(max(count, 0), 0, 0)

        added = 0
        for _ in range(count):
            if not self.state.spend(self.economy.root_cost):
                logger.debug("Not enough nutrients to add more roots")
                break
            tree.add_root()
            added += 1
        return ActionResult(count, added, added * self.economy.root_cost)

    def add_leaves(self, count: int = 1) -> ActionResult:
        """Add up to `count` leaves, paying only for leaves actually grown."""
        tree = self._target("add_leaves", count)
        if tree is None:
            return ActionResult(max(count, 0), 0, 0)

        added = 0
        for _ in range(count):
            if not self.state.can_afford(self.economy.leaf_cost):
                logger.debug("Not enough nutrients to add more leaves")
                break
            # A failed leaf means the season or the branch count forbids it,
            # neither of which changes within this loop
            if not tree.add_leaf(self.state.month_index):
                break
            self.state.spend(self.economy.leaf_cost)
            added += 1
        return ActionResult(count, added, added * self.economy.leaf_cost)

    def produce_fruit(self, count: int = 1) -> ActionResult:
        """Attempt `count` fruit; each attempt past the fruit gate costs fruit_cost."""
        tree = self._target("produce_fruit", count)
        if tree is None:
            return ActionResult(max(count, 0), 0, 0)

        if not rules.can_produce_fruit(tree.height, tree.get_total_leaves(), tree.species):
            logger.debug("Tree cannot produce fruit due to height or leaf count")
            return ActionResult(count, 0, 0)

        produced = 0
        spent = 0
        for _ in range(count):
            if not self.state.spend(self.economy.fruit_cost):
                logger.debug("Not enough nutrients to produce more fruit")
                break
            spent += self.economy.fruit_cost
            produced += tree.produce_fruit(1)
        return ActionResult(count, produced, spent)

    def _should_try_trunk(self, tree: Tree) -> bool:
        if not tree.branches:
            return True
        if tree.height < tree.species.rules.min_height_for_branches + self.economy.trunk_priority_margin:
            return True
        return self.rng.random() < self.economy.trunk_branch_probability

    def _try_child_branch(self, tree: Tree) -> bool:
        all_branches = tree.get_all_branches()
        if not all_branches:
            return False
        parent = all_branches[self.rng.integers(len(all_branches))]
        return tree.add_child_branch(parent)

    def add_branches(self, count: int = 1) -> ActionResult:
        """
        Add up to `count` branches to the selected tree.

        Each attempt tentatively spends branch_cost and goes either to the
        trunk or to a random existing branch, falling back to a child branch
        when a trunk attempt fails. Failed attempts are refunded; the loop
        stops after max_consecutive_branch_failures failures in a row.
        """
        tree = self._target("add_branches", count)
        if tree is None:
            return ActionResult(max(count, 0), 0, 0)

        cost = self.economy.branch_cost
        added = 0
        consecutive_failures = 0
        while added < count and consecutive_failures < self.economy.max_consecutive_branch_failures:
            if not self.state.spend(cost):
                logger.debug("Out of nutrients after adding %d of %d branches", added, count)
                break

            if self._should_try_trunk(tree):
                success = tree.add_branch() or self._try_child_branch(tree)
            else:
                success = self._try_child_branch(tree)

            if success:
                added += 1
                consecutive_failures = 0
            else:
                self.state.refund(cost)
                consecutive_failures += 1

        if consecutive_failures >= self.economy.max_consecutive_branch_failures:
            logger.debug(
                "Stopped adding branches after %d consecutive failures, added %d",
                consecutive_failures,
                added,
            )
        return ActionResult(count, added, added * cost)

    def _next_species(self) -> SpeciesConfig:
        self._catalog_index = (self._catalog_index + 1) % len(self.catalog)
        return self.catalog[self._catalog_index]

    def _find_seed(self) -> Tree | None:
        """Tree holding a viable fruit, preferring the selected tree."""
        selected = self.state.selected
        if selected is not None and selected.viable_fruit():
            return selected
        for tree in self.state.trees:
            if tree.viable_fruit():
                return tree
        return None

    def plant_new_tree(self) -> ActionResult:
        """
        Consume a viable fruit to plant the next species in the rotation.

        The new tree is planted at a random x and becomes selected.
        """
        parent = self._find_seed()
        if parent is None:
            logger.debug("No tree has fruit large enough to plant")
            return ActionResult(1, 0, 0)
        if self.state.nutrients <= 0 or not self.state.spend(self.economy.planting_cost):
            logger.debug("Not enough nutrients to plant a new tree")
            return ActionResult(1, 0, 0)

        parent.take_viable_fruit()
        x = self.rng.uniform(PLANTING_MARGIN, self.economy.world_width - PLANTING_MARGIN)
        species = self._next_species()
        tree = self.plant_tree(x, species)
        self.state.select(tree)
        logger.info("Planted a new %s at x=%.1f from %s fruit", species.name, x, parent.species.name)
        return ActionResult(1, 1, self.economy.planting_cost)

    # ------------------------------------------------------------------
    # Queries and turn flow
    # ------------------------------------------------------------------

    def available_actions(self) -> dict[str, bool]:
        """Which commands could currently do something for the selected tree."""
        has_nutrients = self.state.nutrients > 0
        any_viable = any(tree.viable_fruit() for tree in self.state.trees)
        actions = dict.fromkeys(ACTIONS, False)
        actions["plant_new_tree"] = has_nutrients and any_viable

        tree = self.state.selected
        if tree is None or not has_nutrients:
            return actions

        branch_count = len(tree.get_all_branches())
        actions["grow_height"] = rules.can_grow_height(tree.height, tree.species)
        actions["add_roots"] = True
        actions["add_branches"] = rules.can_add_branch(tree.height, branch_count, tree.species)
        actions["add_leaves"] = branch_count > 0 and rules.can_leaf_in_month(
            self.state.month_index, tree.species
        )
        actions["produce_fruit"] = rules.can_produce_fruit(tree.height, tree.get_total_leaves(), tree.species)
        return actions

    def total_score(self) -> int:
        return sum(tree.get_score() for tree in self.state.trees)

    def advance_turn(self) -> SeasonReport:
        return seasons.advance_turn(self.state, self.calendar, self.economy.nutrients_per_turn, self.rng)

    def grow_to_maturity(
        self,
        tree: Tree,
        *,
        roots: int = 50,
        branches: int = 100,
        leaves: int = 500,
        fruit: int = 50,
        max_branch_attempts: int = 500,
    ) -> Tree:
        """
        Grow `tree` straight to a showcase state, free of charge.

        Maxes the height, then adds roots, branches, leaves (as if in the
        first leaf-out month) and fruit. The nutrient pool and the
        calendar are untouched.

        Returns:
            The same tree, for chaining
        """
        tree.grow_height(tree.species.max_height)

        for _ in range(roots):
            tree.add_root()

        added = 0
        attempts = 0
        while added < branches and attempts < max_branch_attempts:
            attempts += 1
            try_trunk = (
                not tree.branches
                or len(tree.get_all_branches()) < MATURITY_MIN_TRUNK_BRANCHES
                or self.rng.random() < MATURITY_TRUNK_PROBABILITY
            )
            if try_trunk:
                success = tree.add_branch() or self._try_child_branch(tree)
            else:
                success = self._try_child_branch(tree) or tree.add_branch()
            if success:
                added += 1

        month = tree.species.leaf_out_start_month
        grown = 0
        for _ in range(leaves):
            if tree.add_leaf(month):
                grown += 1

        for _ in range(fruit):
            if not tree.produce_fruit(1):
                break

        logger.info(
            "%s grown to maturity: height %.0f, %d branches, %d leaves, %d fruit",
            tree.species.name,
            tree.height,
            len(tree.get_all_branches()),
            grown,
            len(tree.fruits),
        )
        return tree
