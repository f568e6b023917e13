"""
Species catalog.

Every archetype is derived from DEFAULT_TREE with `derive_species`.
The catalog order is the planting rotation used when a fruit seeds a new
tree. Rarity tiers are informational only:

    Common:     DefaultTree, WillowLike
    Uncommon:   Oak, Beech, Maple
    Rare:       Fir, Pine, Spruce (evergreen)
    Epic:       Mango, Avocado, Orange
    Legendary:  Durian, Lychee
    Mythical:   Redwood
"""

import math

from grove.config import (
    AngleParams,
    ColorPalette,
    GrowthRules,
    PlacementRange,
    SizeRange,
    SpeciesConfig,
    derive_species,
)

PI = math.pi

DEFAULT_TREE = SpeciesConfig()

WILLOW_LIKE = derive_species(
    DEFAULT_TREE,
    "WillowLike",
    max_height=800.0,
    max_width=25.0,
    colors=ColorPalette(trunk="#8B4513", leaf="darkolivegreen", fruit="lightcoral", root="#A0522D"),
    # Drooping branches with wide variation
    angles=AngleParams(
        branch_initial_min=-PI * 0.75,
        branch_initial_max=-PI * 0.25,
        branch_subsequent_variation=PI / 2,
        root_initial_base=PI / 2,
        root_initial_variation=PI / 2,
        root_subsequent_variation=PI / 2,
    ),
    rules=GrowthRules(min_height_for_branches=80.0, min_height_for_fruits=200.0, min_leaves_for_fruits=60),
    branch_params={"min_branches_at_min_height": 3, "max_branches_at_max_height": 1200, "scaling_exponent": 1.6},
    fruit_size=SizeRange(6.0, 10.0),
    min_size_for_new_tree=9.0,
    leaf_size=SizeRange(20.0, 36.0),
    trunk_width_growth_factor=0.04,
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=8.0,
    max_child_roots_per_root=3,
    min_root_length_for_sub_rooting=6.0,
    leaf_placement=PlacementRange(0.1, 1.0),
    fruit_placement=PlacementRange(0.1, 0.9),
    leaf_out_start_month=3,
    leaf_out_end_month=6,
)

OAK = derive_species(
    DEFAULT_TREE,
    "Oak",
    max_height=900.0,
    max_width=35.0,
    colors=ColorPalette(trunk="#654321", leaf="#556B2F", fruit="#8B4513", root="#5C4033"),
    angles={"branch_initial_min": -PI * 0.8, "branch_initial_max": -PI * 0.2},
    rules={"min_height_for_branches": 90.0, "min_height_for_fruits": 220.0},
    branch_params={"max_branches_at_max_height": 1100, "scaling_exponent": 1.4},
    fruit_size=SizeRange(5.0, 8.0),  # Acorns
    min_size_for_new_tree=7.0,
    leaf_size=SizeRange(18.0, 32.0),
    trunk_width_growth_factor=0.055,
    min_branch_length_for_sub_branching=12.0,
    min_root_length_for_sub_rooting=9.0,
    leaf_placement=PlacementRange(0.15, 0.95),
)

BEECH = derive_species(
    DEFAULT_TREE,
    "Beech",
    max_height=850.0,
    colors=ColorPalette(trunk="#A9A9A9", leaf="#3CB371", fruit="#D2691E", root="#808080"),
    angles={"branch_subsequent_variation": PI / 2.5},
    rules={"min_height_for_branches": 95.0, "min_leaves_for_fruits": 55},
    branch_params={"scaling_exponent": 1.55},
    fruit_size=SizeRange(4.0, 7.0),  # Beechnuts
    min_size_for_new_tree=6.0,
    leaf_size=SizeRange(17.0, 30.0),
    trunk_width_growth_factor=0.045,
    max_child_roots_per_root=3,
    min_root_length_for_sub_rooting=7.0,
    fruit_placement=PlacementRange(0.25, 0.85),
    leaf_out_start_month=3,
    leaf_out_end_month=6,
)

MAPLE = derive_species(
    DEFAULT_TREE,
    "Maple",
    max_height=750.0,
    max_width=28.0,
    colors=ColorPalette(trunk="#BC8F8F", leaf="#FF6347", fruit="#CD853F", root="#A0522D"),
    angles={"branch_initial_min": -PI * 0.9, "branch_initial_max": -PI * 0.1},
    rules={"min_height_for_fruits": 230.0},
    branch_params={"min_branches_at_min_height": 3, "max_branches_at_max_height": 1300, "scaling_exponent": 1.6},
    fruit_size=SizeRange(10.0, 15.0),  # Samaras
    min_size_for_new_tree=14.0,
    leaf_size=SizeRange(20.0, 38.0),
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=9.0,
    leaf_placement=PlacementRange(0.1, 0.9),
    fruit_placement=PlacementRange(0.15, 0.8),
)

FIR = derive_species(
    DEFAULT_TREE,
    "Fir",
    max_height=1200.0,
    max_width=25.0,
    colors=ColorPalette(trunk="#708090", leaf="#006400", fruit="#8B4513", root="#556B2F"),
    # Branches point slightly downwards
    angles={"branch_initial_min": PI / 12, "branch_initial_max": PI / 4, "branch_subsequent_variation": PI / 6},
    rules={"min_height_for_branches": 70.0, "min_height_for_fruits": 300.0},
    branch_params={"max_branches_at_max_height": 800, "scaling_exponent": 1.3},
    fruit_size=SizeRange(10.0, 18.0),  # Cones
    min_size_for_new_tree=17.0,
    leaf_size=SizeRange(12.0, 22.0),  # Needle clusters
    trunk_width_growth_factor=0.035,
    min_branch_length_for_sub_branching=15.0,
    min_root_length_for_sub_rooting=10.0,
    leaf_placement=PlacementRange(0.05, 1.0),
    fruit_placement=PlacementRange(0.5, 0.9),
    leaf_out_start_month=0,
    leaf_out_end_month=11,
)

PINE = derive_species(
    DEFAULT_TREE,
    "Pine",
    max_height=1100.0,
    max_width=28.0,
    colors=ColorPalette(trunk="#8B7355", leaf="#228B22", fruit="#A0522D", root="#6B4226"),
    angles={"branch_initial_min": -PI * 0.7, "branch_initial_max": -PI * 0.3, "branch_subsequent_variation": PI / 3.5},
    rules={"min_height_for_branches": 75.0, "min_leaves_for_fruits": 70},
    branch_params={"max_branches_at_max_height": 900, "scaling_exponent": 1.35},
    fruit_size=SizeRange(8.0, 15.0),
    min_size_for_new_tree=14.0,
    leaf_size=SizeRange(14.0, 25.0),
    trunk_width_growth_factor=0.04,
    min_branch_length_for_sub_branching=14.0,
    min_root_length_for_sub_rooting=9.0,
    leaf_placement=PlacementRange(0.1, 1.0),
    fruit_placement=PlacementRange(0.4, 0.85),
    leaf_out_start_month=0,
    leaf_out_end_month=11,
)

SPRUCE = derive_species(
    DEFAULT_TREE,
    "Spruce",
    max_height=1300.0,
    max_width=22.0,
    colors=ColorPalette(trunk="#696969", leaf="#008080", fruit="#D2B48C", root="#4A3B31"),
    # Slightly downturned branches
    angles={"branch_initial_min": 0.0, "branch_initial_max": PI / 6, "branch_subsequent_variation": PI / 5},
    rules={"min_height_for_branches": 60.0, "min_height_for_fruits": 350.0},
    branch_params={"max_branches_at_max_height": 700, "scaling_exponent": 1.25},
    fruit_size=SizeRange(12.0, 20.0),
    min_size_for_new_tree=19.0,
    leaf_size=SizeRange(10.0, 20.0),
    trunk_width_growth_factor=0.03,
    max_child_branches_per_branch=1,  # Keeps the conical shape
    min_branch_length_for_sub_branching=18.0,
    min_root_length_for_sub_rooting=12.0,
    leaf_placement=PlacementRange(0.0, 1.0),
    fruit_placement=PlacementRange(0.6, 0.95),
    leaf_out_start_month=0,
    leaf_out_end_month=11,
)

MANGO = derive_species(
    DEFAULT_TREE,
    "Mango",
    max_height=600.0,
    max_width=40.0,
    colors=ColorPalette(trunk="#A0522D", leaf="#3A5F0B", fruit="#FFBF00", root="#8B4513"),
    angles={"branch_initial_min": -PI * 0.85, "branch_initial_max": -PI * 0.15, "branch_subsequent_variation": PI / 2.8},
    rules=GrowthRules(min_height_for_branches=50.0, min_height_for_fruits=150.0, min_leaves_for_fruits=40),
    branch_params={"min_branches_at_min_height": 4, "max_branches_at_max_height": 1500, "scaling_exponent": 1.7},
    fruit_size=SizeRange(15.0, 25.0),
    min_size_for_new_tree=24.0,
    leaf_size=SizeRange(22.0, 40.0),
    trunk_width_growth_factor=0.06,
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=7.0,
    max_child_roots_per_root=3,
    min_root_length_for_sub_rooting=5.0,
    leaf_placement=PlacementRange(0.1, 1.0),
    fruit_placement=PlacementRange(0.3, 0.7),
    leaf_out_start_month=1,
    leaf_out_end_month=10,
)

AVOCADO = derive_species(
    DEFAULT_TREE,
    "Avocado",
    max_height=500.0,
    max_width=38.0,
    colors=ColorPalette(trunk="#8FBC8F", leaf="#2E8B57", fruit="#556B2F", root="#715C3A"),
    angles={"branch_subsequent_variation": PI / 2.5},
    rules={"min_height_for_fruits": 120.0, "min_leaves_for_fruits": 35},
    branch_params={"max_branches_at_max_height": 1400, "scaling_exponent": 1.65},
    fruit_size=SizeRange(12.0, 20.0),
    min_size_for_new_tree=19.0,
    leaf_size=SizeRange(20.0, 35.0),
    trunk_width_growth_factor=0.058,
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=6.0,
    max_child_roots_per_root=3,
    min_root_length_for_sub_rooting=6.0,
    leaf_placement=PlacementRange(0.15, 0.95),
    fruit_placement=PlacementRange(0.25, 0.75),
    leaf_out_start_month=1,
    leaf_out_end_month=10,
)

ORANGE = derive_species(
    DEFAULT_TREE,
    "Orange",
    max_height=400.0,
    max_width=25.0,
    colors=ColorPalette(trunk="#B8860B", leaf="#008000", fruit="#FFA500", root="#8B4513"),
    angles={"branch_initial_min": -PI * 0.9, "branch_initial_max": -PI * 0.1, "branch_subsequent_variation": PI / 2.9},
    rules=GrowthRules(min_height_for_branches=40.0, min_height_for_fruits=100.0, min_leaves_for_fruits=30),
    branch_params={"min_branches_at_min_height": 3, "max_branches_at_max_height": 1600, "scaling_exponent": 1.75},
    fruit_size=SizeRange(10.0, 16.0),
    min_size_for_new_tree=15.0,
    leaf_size=SizeRange(18.0, 30.0),
    trunk_width_growth_factor=0.052,
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=5.0,
    min_root_length_for_sub_rooting=5.0,
    leaf_placement=PlacementRange(0.1, 0.95),
    leaf_out_start_month=2,
    leaf_out_end_month=9,
)

DURIAN = derive_species(
    DEFAULT_TREE,
    "Durian",
    max_height=700.0,
    max_width=33.0,
    colors=ColorPalette(trunk="#7B684E", leaf="#556B2F", fruit="#BDB76B", root="#654321"),
    angles={"branch_initial_max": -PI * 0.25},
    rules=GrowthRules(min_height_for_branches=60.0, min_height_for_fruits=180.0, min_leaves_for_fruits=50),
    branch_params={"max_branches_at_max_height": 1200},
    fruit_size=SizeRange(20.0, 35.0),
    min_size_for_new_tree=34.0,
    leaf_size=SizeRange(18.0, 30.0),
    trunk_width_growth_factor=0.053,
    leaf_placement=PlacementRange(0.2, 0.9),
    fruit_placement=PlacementRange(0.3, 0.6),
    leaf_out_start_month=1,
    leaf_out_end_month=10,
)

LYCHEE = derive_species(
    DEFAULT_TREE,
    "Lychee",
    max_height=450.0,
    colors=ColorPalette(trunk="#A0522D", leaf="#2E8B57", fruit="#FF007F", root="#8B5A2B"),
    angles={"branch_subsequent_variation": PI / 2.7},
    rules=GrowthRules(min_height_for_branches=35.0, min_height_for_fruits=90.0, min_leaves_for_fruits=30),
    branch_params={"max_branches_at_max_height": 1700, "scaling_exponent": 1.8},
    fruit_size=SizeRange(6.0, 10.0),
    min_size_for_new_tree=9.0,
    leaf_size=SizeRange(15.0, 28.0),
    max_child_branches_per_branch=3,
    min_branch_length_for_sub_branching=4.0,
    max_child_roots_per_root=3,
    min_root_length_for_sub_rooting=4.0,
    leaf_placement=PlacementRange(0.1, 1.0),
    leaf_out_start_month=2,
    leaf_out_end_month=9,
)

REDWOOD = derive_species(
    DEFAULT_TREE,
    "Redwood",
    max_height=3000.0,
    max_width=80.0,
    colors=ColorPalette(trunk="#5C4033", leaf="#006400", fruit="#654321", root="#5C4033"),
    # Short, upswept branches keep the crown vertical
    angles={"branch_initial_min": -PI * 0.6, "branch_initial_max": -PI * 0.4, "branch_subsequent_variation": PI / 5},
    rules=GrowthRules(min_height_for_branches=150.0, min_height_for_fruits=500.0, min_leaves_for_fruits=200),
    branch_params={"min_branches_at_min_height": 5, "max_branches_at_max_height": 500, "scaling_exponent": 1.2},
    fruit_size=SizeRange(3.0, 6.0),
    min_size_for_new_tree=5.0,
    leaf_size=SizeRange(5.0, 15.0),
    trunk_width_growth_factor=0.025,
    min_branch_length_for_sub_branching=20.0,
    min_root_length_for_sub_rooting=15.0,
    leaf_placement=PlacementRange(0.1, 0.9),
    fruit_placement=PlacementRange(0.7, 0.95),
    leaf_out_start_month=0,
    leaf_out_end_month=11,
)

SPECIES_CATALOG: tuple[SpeciesConfig, ...] = (
    DEFAULT_TREE,
    WILLOW_LIKE,
    OAK,
    BEECH,
    MAPLE,
    FIR,
    PINE,
    SPRUCE,
    MANGO,
    AVOCADO,
    ORANGE,
    DURIAN,
    LYCHEE,
    REDWOOD,
)

_BY_NAME = {species.name.lower(): species for species in SPECIES_CATALOG}


def species_names() -> list[str]:
    """Names of every catalogued species, in planting order."""
    return [species.name for species in SPECIES_CATALOG]


def get_species(name: str) -> SpeciesConfig:
    """
    Look up a species by name (case-insensitive).

    Raises:
        KeyError: If no species has that name
    """
    try:
        return _BY_NAME[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown species {name!r}. Available: {', '.join(species_names())}") from None
