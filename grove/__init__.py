"""
Grove Growth Module

The simulation core of a turn-based tree-growing game: procedurally
generated trees spend a shared nutrient pool on height, roots, branches,
leaves and fruit across a twelve-month season cycle.

Modules:
    config: Species, economy and calendar configuration
    species: The built-in species catalog
    rules: Growth rule engine (branch budget, eligibility checks)
    structure: Branches, roots, leaves and fruit
    generator: Procedural branch and root generation
    tree: The Tree aggregate
    state: Mutable game state
    seasons: Month advance and seasonal transitions
    world: Orchestrator with nutrient-costed commands
    policies: Scripted turn policies
    rollout: Multi-turn game simulation
    visualization: matplotlib preview renderer and plots
"""

from grove.config import (
    AngleParams,
    BranchParams,
    ColorPalette,
    EconomyConfig,
    GrowthRules,
    PlacementRange,
    SeasonCalendar,
    SizeRange,
    SpeciesConfig,
    derive_species,
)
from grove.generator import TrunkGeometry
from grove.policies import PolicyFn, TurnPlan, baseline_policy, canopy_policy, idle_policy
from grove.rollout import Trajectory, compare_policies, evaluate_policy, run_game
from grove.rules import branch_capacity, max_allowed_branches
from grove.seasons import SeasonReport, advance_turn, apply_seasonal_transition, month_name, next_month
from grove.species import DEFAULT_TREE, SPECIES_CATALOG, get_species, species_names
from grove.state import GameState
from grove.structure import Branch, FallenFruit, Fruit, Leaf, Root
from grove.tree import Tree
from grove.visualization import (
    RenderStyle,
    plot_branch_capacity,
    plot_trajectory,
    render_world,
    save_world,
)
from grove.world import ActionResult, World

__all__ = [
    # Config
    "AngleParams",
    "BranchParams",
    "ColorPalette",
    "EconomyConfig",
    "GrowthRules",
    "PlacementRange",
    "SeasonCalendar",
    "SizeRange",
    "SpeciesConfig",
    "derive_species",
    # Species
    "DEFAULT_TREE",
    "SPECIES_CATALOG",
    "get_species",
    "species_names",
    # Rules
    "branch_capacity",
    "max_allowed_branches",
    # Structure
    "Branch",
    "FallenFruit",
    "Fruit",
    "Leaf",
    "Root",
    "Tree",
    "TrunkGeometry",
    # Game flow
    "ActionResult",
    "GameState",
    "SeasonReport",
    "World",
    "advance_turn",
    "apply_seasonal_transition",
    "month_name",
    "next_month",
    # Policies
    "PolicyFn",
    "TurnPlan",
    "baseline_policy",
    "canopy_policy",
    "idle_policy",
    # Simulation
    "Trajectory",
    "compare_policies",
    "evaluate_policy",
    "run_game",
    # Rendering
    "RenderStyle",
    "plot_branch_capacity",
    "plot_trajectory",
    "render_world",
    "save_world",
]
