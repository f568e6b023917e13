"""
Mutable game state shared by the season controller and the orchestrator.

GameState is the single owner of everything that persists between turns:
the nutrient pool, the calendar position, the tree collection and the
fruit lying on the ground. Growth code never reaches into it directly;
the orchestrator reads values out and passes them in.
"""

from dataclasses import dataclass, field

from grove.structure import FallenFruit
from grove.tree import Tree


@dataclass
class GameState:
    """
    Everything that changes from turn to turn.

    Attributes:
        nutrients: Shared nutrient pool, never negative
        month_index: Current month, 0-11 (0 = January)
        turn: Turns played so far
        trees: All trees, in planting order (later trees draw on top)
        fallen_fruits: Harvested fruit lying on the ground
    """

    nutrients: int = 0
    month_index: int = 0
    turn: int = 0
    trees: list[Tree] = field(default_factory=list)
    fallen_fruits: list[FallenFruit] = field(default_factory=list)

    @property
    def selected(self) -> Tree | None:
        """The currently selected tree, if any."""
        for tree in self.trees:
            if tree.is_selected:
                return tree
        return None

    def select(self, tree: Tree) -> None:
        """Make `tree` the only selected tree."""
        for other in self.trees:
            other.is_selected = False
        tree.is_selected = True

    def can_afford(self, cost: int) -> bool:
        return self.nutrients >= cost

    def spend(self, cost: int) -> bool:
        """Deduct `cost` from the pool. Returns False (no change) if it can't be paid."""
        if cost > self.nutrients:
            return False
        self.nutrients -= cost
        return True

    def refund(self, amount: int) -> None:
        self.nutrients += amount
