"""
Multi-turn game simulation.

This module plays a game forward turn by turn, combining:
- A policy that plans each turn for the selected tree
- The World orchestrator that spends nutrients on the plan
- The season controller that advances the calendar

The result is a trajectory containing the per-turn history of score,
nutrients and tree structure, plus the season reports.
"""

from dataclasses import dataclass, field

import numpy as np

from grove.config import EconomyConfig, SpeciesConfig
from grove.policies import PolicyFn, TurnPlan
from grove.seasons import SeasonReport
from grove.species import DEFAULT_TREE
from grove.world import World


@dataclass
class Trajectory:
    """
    Complete record of a game.

    Histories hold one entry per turn plus the initial state, and track the
    tree that was selected at that point. Scores and tree counts cover the
    whole world.
    """

    scores: list[int] = field(default_factory=list)
    nutrients: list[int] = field(default_factory=list)
    heights: list[float] = field(default_factory=list)
    branch_counts: list[int] = field(default_factory=list)
    leaf_counts: list[int] = field(default_factory=list)
    fruit_counts: list[int] = field(default_factory=list)
    tree_counts: list[int] = field(default_factory=list)
    months: list[int] = field(default_factory=list)
    plans: list[TurnPlan] = field(default_factory=list)
    reports: list[SeasonReport] = field(default_factory=list)

    @property
    def num_turns(self) -> int:
        return len(self.reports)

    def record(self, world: World) -> None:
        """Append a snapshot of the world."""
        tree = world.selected
        self.scores.append(world.total_score())
        self.nutrients.append(world.state.nutrients)
        self.tree_counts.append(len(world.trees))
        self.months.append(world.state.month_index)
        self.heights.append(tree.height if tree is not None else 0.0)
        self.branch_counts.append(len(tree.get_all_branches()) if tree is not None else 0)
        self.leaf_counts.append(tree.get_total_leaves() if tree is not None else 0)
        self.fruit_counts.append(len(tree.fruits) if tree is not None else 0)

    def get_history_arrays(self) -> dict[str, np.ndarray]:
        """Convert the histories to arrays for plotting."""
        return {
            "score": np.array(self.scores),
            "nutrients": np.array(self.nutrients),
            "height": np.array(self.heights),
            "branches": np.array(self.branch_counts),
            "leaves": np.array(self.leaf_counts),
            "fruit": np.array(self.fruit_counts),
            "trees": np.array(self.tree_counts),
        }

    def get_scalar_summary(self) -> dict[str, float]:
        """
        Compute scalar diagnostic summary of the game.

        Returns a dictionary with key metrics for quick evaluation:
        - FinalScore: Total score of every tree (primary metric)
        - PeakScore: Best score reached during the game
        - FinalNutrients: Nutrients left in the pool
        - NutrientsSpent: Nutrients consumed by growth
        - FinalHeight/Branches/Leaves: Selected tree at the end
        - PeakLeaves: Most leaves the selected tree carried
        - Trees: Trees in the world at the end
        - FruitFallen: Fruit harvested onto the ground over the game
        """
        arrays = self.get_history_arrays()
        gained = sum(report.nutrients_gained for report in self.reports)
        spent = self.nutrients[0] + gained - self.nutrients[-1]

        return {
            "Turns": self.num_turns,
            "FinalScore": int(arrays["score"][-1]),
            "PeakScore": int(arrays["score"].max()),
            "FinalNutrients": int(arrays["nutrients"][-1]),
            "NutrientsSpent": int(spent),
            "FinalHeight": float(arrays["height"][-1]),
            "FinalBranches": int(arrays["branches"][-1]),
            "FinalLeaves": int(arrays["leaves"][-1]),
            "PeakLeaves": int(arrays["leaves"].max()),
            "Trees": int(arrays["trees"][-1]),
            "FruitFallen": sum(report.fruit_fallen for report in self.reports),
        }

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        summary = self.get_scalar_summary()
        print("\n" + "=" * 40)
        print("GAME SUMMARY")
        print("=" * 40)
        for key, value in summary.items():
            if isinstance(value, int):
                print(f"{key:20s}: {value:>10d}")
            else:
                print(f"{key:20s}: {value:>10.3f}")
        print("=" * 40)


def apply_plan(world: World, plan: TurnPlan) -> None:
    """Carry out a turn plan on the selected tree, skipping empty requests."""
    if plan.height_steps > 0:
        world.grow_height(plan.height_steps)
    if plan.roots > 0:
        world.add_roots(plan.roots)
    if plan.branches > 0:
        world.add_branches(plan.branches)
    if plan.leaves > 0:
        world.add_leaves(plan.leaves)
    if plan.fruit > 0:
        world.produce_fruit(plan.fruit)
    if plan.plant:
        world.plant_new_tree()


def run_game(world: World, policy: PolicyFn, num_turns: int) -> Trajectory:
    """
    Play `num_turns` turns of a game.

    Each turn the policy plans for the selected tree, the plan is applied
    through the world, and the turn advances.

    Args:
        world: World to play in (mutated)
        policy: Policy function that returns turn plans
        num_turns: Number of turns to play

    Returns:
        Trajectory containing full game history
    """
    if num_turns < 0:
        raise ValueError(f"num_turns must be nonnegative, got {num_turns}")

    trajectory = Trajectory()
    trajectory.record(world)

    for _ in range(num_turns):
        tree = world.selected
        plan = policy(world.state, tree, world.calendar) if tree is not None else TurnPlan()
        trajectory.plans.append(plan)
        apply_plan(world, plan)

        trajectory.reports.append(world.advance_turn())
        trajectory.record(world)

    return trajectory


def evaluate_policy(
    policy: PolicyFn,
    species: SpeciesConfig = DEFAULT_TREE,
    num_turns: int = 24,
    seeds: tuple[int, ...] = (0, 1, 2),
    economy: EconomyConfig | None = None,
) -> dict[str, float]:
    """
    Evaluate a policy over several seeded games.

    Args:
        policy: Policy function to evaluate
        species: Species of the first tree
        num_turns: Turns per game
        seeds: One game is played per seed
        economy: Nutrient economy (defaults to EconomyConfig())

    Returns:
        Dictionary with evaluation metrics
    """
    if not seeds:
        raise ValueError("Need at least one seed to evaluate a policy")

    scores = []
    heights = []
    tree_counts = []
    for seed in seeds:
        world = World(species, economy=economy, seed=seed)
        trajectory = run_game(world, policy, num_turns)
        scores.append(trajectory.scores[-1])
        heights.append(trajectory.heights[-1])
        tree_counts.append(trajectory.tree_counts[-1])

    return {
        "mean_score": float(np.mean(scores)),
        "std_score": float(np.std(scores)),
        "mean_height": float(np.mean(heights)),
        "mean_trees": float(np.mean(tree_counts)),
    }


def compare_policies(
    policies_dict: dict[str, PolicyFn],
    species: SpeciesConfig = DEFAULT_TREE,
    num_turns: int = 24,
    seeds: tuple[int, ...] = (0, 1, 2),
) -> dict[str, dict[str, float]]:
    """
    Compare multiple policies on the same species and seeds.

    Args:
        policies_dict: Dictionary mapping policy names to functions
        species: Species of the first tree
        num_turns: Turns per game
        seeds: Seeds shared by every policy

    Returns:
        Dictionary mapping policy names to their metrics
    """
    results = {}
    for name, policy in policies_dict.items():
        results[name] = evaluate_policy(policy, species, num_turns, seeds)
    return results
