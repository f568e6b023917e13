"""
Configuration and type definitions for the tree growth game.

This module defines every constant that parameterizes growth:

    SpeciesConfig: Immutable per-species growth constants (sizes, angles,
        rule thresholds, branch-count scaling, structural limits,
        placement ranges and the leaf-out window).
    EconomyConfig: Nutrient costs and orchestrator tuning.
    SeasonCalendar: Month names and the seasonal transition months.

Coordinates follow screen convention: x grows to the right, y grows
downward, so "up" is -pi/2 and "down" is +pi/2. Angles are radians with
0 pointing right.

All config objects are frozen dataclasses validated once at construction.
Variants are built with `derive_species`, never by mutating a base.
"""

import math
from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class ColorPalette:
    """Colors used when creating new structure for a species."""

    trunk: str = "saddlebrown"
    leaf: str = "green"
    fruit: str = "red"
    root: str = "peru"


@dataclass(frozen=True)
class AngleParams:
    """
    Angle parameters in radians.

    Trunk branch angles are sampled in [branch_initial_min, branch_initial_max]
    for the RIGHT side of the trunk and mirrored for the left side.
    Child branches deviate from their parent by up to
    +/- branch_subsequent_variation. Roots start around root_initial_base
    (straight down) +/- root_initial_variation; child roots deviate by up to
    +/- root_subsequent_variation / 2.
    """

    branch_initial_min: float = -math.pi
    branch_initial_max: float = 0.0
    branch_subsequent_variation: float = math.pi / 3  # +/- 60 degrees
    root_initial_base: float = math.pi / 2  # Straight down
    root_initial_variation: float = math.pi / 2.5  # Max 72 degrees off vertical
    root_subsequent_variation: float = math.pi / 2.5

    def __post_init__(self) -> None:
        if self.branch_initial_min > self.branch_initial_max:
            raise ValueError("branch_initial_min must not exceed branch_initial_max")
        for name in (
            "branch_subsequent_variation",
            "root_initial_variation",
            "root_subsequent_variation",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be nonnegative")


@dataclass(frozen=True)
class GrowthRules:
    """Thresholds gating branching and fruiting."""

    min_height_for_branches: float = 100.0
    min_height_for_fruits: float = 250.0
    min_leaves_for_fruits: int = 50

    def __post_init__(self) -> None:
        if self.min_height_for_branches < 0 or self.min_height_for_fruits < 0:
            raise ValueError("Height thresholds must be nonnegative")
        if self.min_leaves_for_fruits < 0:
            raise ValueError("min_leaves_for_fruits must be nonnegative")


@dataclass(frozen=True)
class BranchParams:
    """
    Power-law scaling of the tree-wide branch budget.

    At min_height_for_branches the tree may hold min_branches_at_min_height
    branches; at max_height it may hold max_branches_at_max_height.
    """

    min_branches_at_min_height: int = 2
    max_branches_at_max_height: int = 1000
    scaling_exponent: float = 1.5

    def __post_init__(self) -> None:
        if self.min_branches_at_min_height < 0:
            raise ValueError("min_branches_at_min_height must be nonnegative")
        if self.min_branches_at_min_height > self.max_branches_at_max_height:
            raise ValueError("min_branches_at_min_height exceeds max_branches_at_max_height")
        if self.scaling_exponent <= 0:
            raise ValueError("scaling_exponent must be positive")


@dataclass(frozen=True)
class SizeRange:
    """Closed size interval [min, max] in world units."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError("Size range must be nonnegative")
        if self.min > self.max:
            raise ValueError(f"Size range min {self.min} exceeds max {self.max}")

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class PlacementRange:
    """Fraction of the way along a parent segment, within [0, 1]."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if not (0.0 <= self.min <= self.max <= 1.0):
            raise ValueError(
                f"Placement range must satisfy 0 <= min <= max <= 1, got [{self.min}, {self.max}]"
            )


@dataclass(frozen=True)
class SpeciesConfig:
    """
    Complete growth parameter set for one tree archetype.

    Defaults describe the base "DefaultTree" species. Every other species is
    derived from it with `derive_species`.
    """

    name: str = "DefaultTree"
    max_height: float = 1000.0
    max_width: float = 30.0  # Maximum trunk width

    colors: ColorPalette = field(default_factory=ColorPalette)
    angles: AngleParams = field(default_factory=AngleParams)
    rules: GrowthRules = field(default_factory=GrowthRules)
    branch_params: BranchParams = field(default_factory=BranchParams)

    fruit_size: SizeRange = field(default_factory=lambda: SizeRange(8.0, 35.0))
    min_size_for_new_tree: float = 25.0  # Fruit this size can seed a new tree
    leaf_size: SizeRange = field(default_factory=lambda: SizeRange(16.0, 30.0))

    # Width gained per unit of height growth
    trunk_width_growth_factor: float = 0.05

    # Structural limits
    max_child_branches_per_branch: int = 2
    min_branch_length_for_sub_branching: float = 10.0
    max_child_roots_per_root: int = 2
    min_root_length_for_sub_rooting: float = 8.0

    # Placement along the parent branch
    leaf_placement: PlacementRange = field(default_factory=lambda: PlacementRange(0.2, 1.0))
    fruit_placement: PlacementRange = field(default_factory=lambda: PlacementRange(0.2, 0.8))

    # Leaf-out window, inclusive month indices (evergreens use 0-11)
    leaf_out_start_month: int = 2  # March
    leaf_out_end_month: int = 5  # June

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Species name must be non-empty")
        if self.max_height <= 0 or self.max_width <= 0:
            raise ValueError("max_height and max_width must be positive")
        if self.max_height <= self.rules.min_height_for_branches:
            raise ValueError(
                f"{self.name}: max_height {self.max_height} must exceed "
                f"min_height_for_branches {self.rules.min_height_for_branches}"
            )
        if self.trunk_width_growth_factor < 0:
            raise ValueError("trunk_width_growth_factor must be nonnegative")
        if self.min_size_for_new_tree < 0:
            raise ValueError("min_size_for_new_tree must be nonnegative")
        for name in (
            "max_child_branches_per_branch",
            "min_branch_length_for_sub_branching",
            "max_child_roots_per_root",
            "min_root_length_for_sub_rooting",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be nonnegative")
        if not (0 <= self.leaf_out_start_month <= self.leaf_out_end_month <= 11):
            raise ValueError(
                f"{self.name}: leaf-out window must satisfy 0 <= start <= end <= 11, "
                f"got {self.leaf_out_start_month}-{self.leaf_out_end_month}"
            )

    @property
    def is_evergreen(self) -> bool:
        return self.leaf_out_start_month == 0 and self.leaf_out_end_month == 11


# Nested groups that `derive_species` merges field-by-field from a dict
_NESTED_GROUPS = {
    "colors",
    "angles",
    "rules",
    "branch_params",
    "fruit_size",
    "leaf_size",
    "leaf_placement",
    "fruit_placement",
}


def derive_species(base: SpeciesConfig, name: str, **overrides: Any) -> SpeciesConfig:
    """
    Build a species variant from a base config plus overrides.

    Top-level fields are replaced outright. Nested groups accept either a
    complete value object or a dict of partial field overrides, which are
    merged onto the base's group:

        derive_species(DEFAULT, "Oak", angles={"branch_initial_min": -2.5})

    Args:
        base: Species to start from
        name: Name of the new species
        **overrides: Field overrides

    Returns:
        New, validated SpeciesConfig

    Raises:
        ValueError: If an override names an unknown field or the result is invalid
    """
    known = {f.name for f in fields(SpeciesConfig)}
    changes: dict[str, Any] = {"name": name}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown species field: {key}")
        if key in _NESTED_GROUPS and isinstance(value, dict):
            group = getattr(base, key)
            group_fields = {f.name for f in fields(group)}
            unknown = set(value) - group_fields
            if unknown:
                raise ValueError(f"Unknown {key} field(s): {sorted(unknown)}")
            value = replace(group, **value)
        changes[key] = value
    return replace(base, **changes)


@dataclass(frozen=True)
class EconomyConfig:
    """
    Nutrient economy and orchestrator tuning.

    Nutrients are a shared pool across all trees. Every growth action costs
    nutrients; failed attempts are refunded or never charged.
    """

    starting_nutrients: int = 10000
    nutrients_per_turn: int = 1

    # Action costs
    height_per_nutrient: float = 10.0  # Height units bought by one nutrient
    root_cost: int = 1
    leaf_cost: int = 1
    fruit_cost: int = 1
    branch_cost: int = 1
    planting_cost: int = 1

    # Branch request loop
    max_consecutive_branch_failures: int = 10
    trunk_branch_probability: float = 0.4
    trunk_priority_margin: float = 20.0  # Always try the trunk this close to min height

    # New trees
    initial_tree_height: float = 10.0
    initial_tree_width: float = 5.0
    soil_depth: float = 400.0  # Lowest root depth below the ground line
    world_width: float = 1200.0  # Horizontal span new trees are planted in
    ground_y: float = 744.0  # World y of the ground line
    click_padding: float = 10.0

    def __post_init__(self) -> None:
        if self.height_per_nutrient <= 0:
            raise ValueError("height_per_nutrient must be positive")
        if not 0.0 <= self.trunk_branch_probability <= 1.0:
            raise ValueError("trunk_branch_probability must be in [0, 1]")
        if self.max_consecutive_branch_failures < 1:
            raise ValueError("max_consecutive_branch_failures must be at least 1")
        if self.soil_depth <= 0 or self.world_width <= 0:
            raise ValueError("soil_depth and world_width must be positive")
        for name in ("root_cost", "leaf_cost", "fruit_cost", "branch_cost", "planting_cost"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be nonnegative")

    @classmethod
    def sandbox(cls) -> "EconomyConfig":
        """An economy with effectively unlimited nutrients, for demos and tests."""
        return cls(starting_nutrients=1_000_000, nutrients_per_turn=100)


MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class SeasonCalendar:
    """
    Month names and the months that trigger seasonal transitions.

    Transition months (0-indexed):
        harvest_month: ripe fruit falls, the rest is discarded
        color_change_month: leaves randomly turn the senescent color
        leaf_fall_month: senescent leaves drop, the rest turn senescent
        bare_month: every remaining leaf drops
    """

    month_names: tuple[str, ...] = MONTH_NAMES
    harvest_month: int = 7  # August
    color_change_month: int = 8  # September
    leaf_fall_month: int = 9  # October
    bare_month: int = 10  # November
    senescent_color: str = "yellow"
    color_change_probability: float = 0.5
    fallen_fruit_lifetime: int = 3  # Turns a fallen fruit stays on the ground

    def __post_init__(self) -> None:
        if len(self.month_names) != 12:
            raise ValueError("A calendar needs exactly 12 month names")
        for name in ("harvest_month", "color_change_month", "leaf_fall_month", "bare_month"):
            if not 0 <= getattr(self, name) <= 11:
                raise ValueError(f"{name} must be a month index in 0-11")
        if not 0.0 <= self.color_change_probability <= 1.0:
            raise ValueError("color_change_probability must be in [0, 1]")
        if self.fallen_fruit_lifetime < 0:
            raise ValueError("fallen_fruit_lifetime must be nonnegative")

    @property
    def num_months(self) -> int:
        return len(self.month_names)

    @classmethod
    def northern(cls) -> "SeasonCalendar":
        """The default northern-hemisphere autumn: harvest in August, bare by November."""
        return cls()
