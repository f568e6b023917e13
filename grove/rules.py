"""
Growth rule engine.

Pure functions deciding what growth is legal. Nothing here mutates state
or draws random numbers; callers pass the values they need.

The central rule is the branch budget: how many branches (trunk branches
plus every descendant) a tree of height h may carry.

    budget(h) = 0                                   if h < h_min
              = B_max                               if h >= H_max
              = floor(B_min + (B_max - B_min) * r^k) otherwise

    with r = (h - h_min) / (H_max - h_min)

The curve is non-decreasing in h, so growing taller never removes
capacity.
"""

import math

import numpy as np

from grove.config import SpeciesConfig


def max_allowed_branches(
    height: float,
    min_height_for_branches: float,
    max_height: float,
    min_branches: int,
    max_branches: int,
    exponent: float,
) -> int:
    """
    Maximum number of branches a tree of the given height may have.

    Args:
        height: Current trunk height
        min_height_for_branches: Height where branching unlocks
        max_height: Species maximum height
        min_branches: Budget at min_height_for_branches
        max_branches: Budget at max_height
        exponent: Power-law exponent of the curve

    Returns:
        Branch budget, counting the whole flattened hierarchy
    """
    if height < min_height_for_branches:
        return 0
    if height >= max_height:
        return max_branches

    span = max_height - min_height_for_branches
    if span <= 0:
        # Degenerate config, avoid dividing by zero
        return min_branches

    ratio = (height - min_height_for_branches) / span
    return math.floor(min_branches + (max_branches - min_branches) * ratio**exponent)


def branch_capacity(height: float, species: SpeciesConfig) -> int:
    """Branch budget for a tree of `species` at `height`."""
    return max_allowed_branches(
        height,
        species.rules.min_height_for_branches,
        species.max_height,
        species.branch_params.min_branches_at_min_height,
        species.branch_params.max_branches_at_max_height,
        species.branch_params.scaling_exponent,
    )


def branch_capacity_curve(heights: np.ndarray, species: SpeciesConfig) -> np.ndarray:
    """
    Vectorized branch budget over an array of heights.

    Matches `branch_capacity` elementwise; used for plotting and sweeps.
    """
    heights = np.asarray(heights, dtype=float)
    h_min = species.rules.min_height_for_branches
    h_max = species.max_height
    b_min = species.branch_params.min_branches_at_min_height
    b_max = species.branch_params.max_branches_at_max_height

    ratio = np.clip((heights - h_min) / (h_max - h_min), 0.0, 1.0)
    budget = np.floor(b_min + (b_max - b_min) * ratio**species.branch_params.scaling_exponent)
    budget = np.where(heights < h_min, 0, budget)
    budget = np.where(heights >= h_max, b_max, budget)
    return budget.astype(int)


def can_grow_height(height: float, species: SpeciesConfig) -> bool:
    """Trunk can still grow taller."""
    return height < species.max_height


def can_add_branch(height: float, branch_count: int, species: SpeciesConfig) -> bool:
    """
    A new trunk branch is allowed.

    Requires the branching height and spare budget for the whole hierarchy.
    """
    if height < species.rules.min_height_for_branches:
        return False
    return branch_count < branch_capacity(height, species)


def can_sub_branch(
    parent_length: float,
    parent_child_count: int,
    height: float,
    branch_count: int,
    species: SpeciesConfig,
) -> bool:
    """A child branch may sprout from a parent branch."""
    if branch_count >= branch_capacity(height, species):
        return False
    if parent_length < species.min_branch_length_for_sub_branching:
        return False
    return parent_child_count < species.max_child_branches_per_branch


def can_sub_root(parent_length: float, parent_child_count: int, species: SpeciesConfig) -> bool:
    """A child root may sprout from a parent root."""
    if parent_length < species.min_root_length_for_sub_rooting:
        return False
    return parent_child_count < species.max_child_roots_per_root


def can_leaf_in_month(month_index: int, species: SpeciesConfig) -> bool:
    """Month falls inside the species' inclusive leaf-out window."""
    return species.leaf_out_start_month <= month_index <= species.leaf_out_end_month


def can_produce_fruit(height: float, total_leaves: int, species: SpeciesConfig) -> bool:
    """Tree is tall and leafy enough to bear fruit."""
    if height < species.rules.min_height_for_fruits:
        return False
    return total_leaves >= species.rules.min_leaves_for_fruits


def is_viable_seed(fruit_size: float, species: SpeciesConfig) -> bool:
    """Fruit is large enough to plant a new tree (and to survive harvest)."""
    return fruit_size >= species.min_size_for_new_tree
