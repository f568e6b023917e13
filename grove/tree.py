"""
Tree aggregate.

A Tree owns its trunk dimensions and the forests of branches and roots
hanging off it, plus its fruit. Growth operations check the rule engine,
delegate geometry to the generator, and report soft failures through
their return values. Nutrient costs are not handled here; the caller
charges for actions (see grove.world).

Invariants:
    height <= species.max_height
    width <= species.max_width
    len(get_all_branches()) <= rules.branch_capacity(height, species)
"""

import logging

import numpy as np

from grove import generator, rules
from grove.config import SpeciesConfig
from grove.generator import TrunkGeometry
from grove.structure import Branch, Fruit, Leaf, Root, flatten

logger = logging.getLogger(__name__)

LEAF_OFFSET_SCALE = 1.5  # Sideways leaf offset, in leaf sizes
FRUIT_OFFSET_SCALE = 2.0  # Sideways fruit offset, in fruit sizes


class Tree:
    """
    A single growing tree.

    Attributes:
        x, y: Base of the trunk in world coordinates (y is the ground line)
        species: Shared, read-only species config
        height, width: Trunk dimensions, growing monotonically to the maxima
        roots: Primary roots, each a recursive root tree
        branches: Trunk branches, each a recursive branch tree
        fruits: Fruit currently hanging on the tree
        is_selected: Selection flag owned by the orchestrator
        soil_depth: How far below the ground line roots may reach
    """

    def __init__(
        self,
        x: float,
        y: float,
        species: SpeciesConfig,
        height: float = 10.0,
        width: float = 5.0,
        *,
        soil_depth: float = 400.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.x = x
        self.y = y
        self.species = species
        self.height = min(height, species.max_height)
        self.width = min(width, species.max_width)
        self.soil_depth = soil_depth
        self.rng = rng if rng is not None else np.random.default_rng()

        self.roots: list[Root] = []
        self.branches: list[Branch] = []
        self.fruits: list[Fruit] = []
        self.is_selected = False

    def __repr__(self) -> str:
        return (
            f"Tree({self.species.name}, x={self.x:.1f}, height={self.height:.1f}, "
            f"width={self.width:.2f}, branches={len(self.get_all_branches())})"
        )

    @property
    def trunk(self) -> TrunkGeometry:
        return TrunkGeometry(x=self.x, y=self.y, height=self.height, width=self.width)

    @property
    def top_y(self) -> float:
        return self.y - self.height

    @property
    def floor_y(self) -> float:
        return self.y + self.soil_depth

    # ------------------------------------------------------------------
    # Trunk growth
    # ------------------------------------------------------------------

    def grow_height(self, amount: float = 10.0) -> float:
        """
        Grow the trunk taller, widening it in proportion.

        The amount is clamped so height never exceeds max_height; width
        grows by amount * trunk_width_growth_factor up to max_width.

        Args:
            amount: Requested height increase

        Returns:
            Height actually gained (0 when already at max height)
        """
        max_height = self.species.max_height
        if amount <= 0:
            return 0.0
        if self.height >= max_height:
            logger.debug("%s already at maximum height %.1f", self.species.name, max_height)
            return 0.0

        amount = min(amount, max_height - self.height)
        self.height += amount
        self.width = min(self.species.max_width, self.width + amount * self.species.trunk_width_growth_factor)
        logger.debug("%s grew to height %.1f, width %.2f", self.species.name, self.height, self.width)
        return amount

    def grow_width(self, amount: float = 2.0) -> float:
        """Widen the trunk directly, up to max_width. Returns the width gained."""
        if amount <= 0 or self.width >= self.species.max_width:
            return 0.0
        before = self.width
        self.width = min(self.species.max_width, self.width + amount)
        return self.width - before

    # ------------------------------------------------------------------
    # Branches and roots
    # ------------------------------------------------------------------

    def add_branch(self) -> bool:
        """Try to grow a new branch from the trunk."""
        branch = generator.generate_trunk_branch(
            self.trunk, self.species, len(self.get_all_branches()), self.rng
        )
        if branch is None:
            return False
        self.branches.append(branch)
        return True

    def add_child_branch(self, parent: Branch) -> bool:
        """Try to sprout a child from one of this tree's branches."""
        child = generator.generate_child_branch(
            parent, self.trunk, self.species, len(self.get_all_branches()), self.rng
        )
        return child is not None

    def add_root(self) -> Root:
        """Grow a new primary root (with self-seeded children). Always succeeds."""
        root = generator.generate_trunk_root(self.trunk, self.species, self.floor_y, self.rng)
        self.roots.append(root)
        logger.debug("%s primary root added at angle %.2f", self.species.name, root.angle)
        return root

    def get_all_branches(self) -> list[Branch]:
        """Every branch on the tree, pre-order."""
        return flatten(self.branches)

    def get_all_roots(self) -> list[Root]:
        """Every root on the tree, pre-order."""
        return flatten(self.roots)

    # ------------------------------------------------------------------
    # Leaves and fruit
    # ------------------------------------------------------------------

    def add_leaf(self, month_index: int, size: float | None = None, color: str | None = None) -> bool:
        """
        Attach a leaf to a random branch.

        Args:
            month_index: Current month (0-11)
            size: Leaf size, sampled from the species range when omitted
            color: Leaf color, the species leaf color when omitted

        Returns:
            False outside the leaf-out window or when there are no branches
        """
        if not rules.can_leaf_in_month(month_index, self.species):
            logger.debug(
                "Cannot add leaf to %s in month %d (window %d-%d)",
                self.species.name,
                month_index,
                self.species.leaf_out_start_month,
                self.species.leaf_out_end_month,
            )
            return False

        all_branches = self.get_all_branches()
        if not all_branches:
            logger.debug("Cannot add leaf: %s has no branches", self.species.name)
            return False

        branch = all_branches[self.rng.integers(len(all_branches))]
        if size is None:
            size = self.rng.uniform(self.species.leaf_size.min, self.species.leaf_size.max)
        if color is None:
            color = self.species.colors.leaf

        placement = self.species.leaf_placement
        base_x, base_y = branch.point_along(self.rng.uniform(placement.min, placement.max))
        offset = (self.rng.random() - 0.5) * size * LEAF_OFFSET_SCALE
        leaf_x, leaf_y = branch.offset_perpendicular(base_x, base_y, offset)

        branch.leaves.append(Leaf(x=leaf_x, y=leaf_y, size=size, color=color, orientation=branch.angle))
        return True

    def get_total_leaves(self) -> int:
        return sum(branch.leaf_count for branch in self.get_all_branches())

    def get_all_leaves(self) -> list[Leaf]:
        return [leaf for branch in self.get_all_branches() for leaf in branch.leaves]

    def produce_fruit(self, count: int = 1) -> int:
        """
        Hang up to `count` fruit on random leaf-bearing branches.

        Fruit size is min + U * U * (max - min), biased toward small fruit.

        Returns:
            Number of fruit produced (0 if the tree is too short, has too
            few leaves, or no branch bears leaves)
        """
        if not rules.can_produce_fruit(self.height, self.get_total_leaves(), self.species):
            logger.debug(
                "%s cannot fruit: height %.1f (needs %.1f), leaves %d (needs %d)",
                self.species.name,
                self.height,
                self.species.rules.min_height_for_fruits,
                self.get_total_leaves(),
                self.species.rules.min_leaves_for_fruits,
            )
            return 0

        bearing = [branch for branch in self.get_all_branches() if branch.leaves]
        if not bearing:
            logger.debug("Cannot produce fruit: no branches have leaves")
            return 0

        size_range = self.species.fruit_size
        placement = self.species.fruit_placement
        produced = 0
        for _ in range(count):
            branch = bearing[self.rng.integers(len(bearing))]
            base_x, base_y = branch.point_along(self.rng.uniform(placement.min, placement.max))
            size = size_range.min + self.rng.random() * self.rng.random() * size_range.span
            offset = (self.rng.random() - 0.5) * size * FRUIT_OFFSET_SCALE
            fruit_x, fruit_y = branch.offset_perpendicular(base_x, base_y, offset)
            self.fruits.append(Fruit(x=fruit_x, y=fruit_y, size=size, color=self.species.colors.fruit))
            produced += 1

        if produced:
            logger.debug("%d fruit produced on %s, %d total", produced, self.species.name, len(self.fruits))
        return produced

    def viable_fruit(self) -> list[Fruit]:
        """Fruit large enough to seed a new tree."""
        return [fruit for fruit in self.fruits if rules.is_viable_seed(fruit.size, self.species)]

    def take_viable_fruit(self) -> Fruit | None:
        """Remove and return the first viable fruit, if any."""
        for index, fruit in enumerate(self.fruits):
            if rules.is_viable_seed(fruit.size, self.species):
                return self.fruits.pop(index)
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_score(self) -> int:
        """height + width * height / 10 + 5 per fruit, rounded."""
        volume_score = self.width * self.height / 10
        return round(self.height + volume_score + len(self.fruits) * 5)

    def contains_point(self, x: float, y: float, padding: float = 0.0) -> bool:
        """Point lies inside the trunk's bounding box (widened by padding)."""
        half_width = self.width / 2 + padding
        return (self.x - half_width <= x <= self.x + half_width) and (self.top_y <= y <= self.y)
