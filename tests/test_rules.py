"""
Tests for the growth rule engine.

These tests verify the branch budget curve and the eligibility checks
that gate every growth operation.
"""

import math

import numpy as np

from grove import rules
from grove.config import SpeciesConfig


class TestMaxAllowedBranches:
    """Tests for the power-law branch budget."""

    def test_zero_below_branch_height(self) -> None:
        assert rules.max_allowed_branches(50.0, 100.0, 1000.0, 2, 1000, 1.5) == 0
        assert rules.max_allowed_branches(99.99, 100.0, 1000.0, 2, 1000, 1.5) == 0

    def test_minimum_at_branch_height(self) -> None:
        assert rules.max_allowed_branches(100.0, 100.0, 1000.0, 2, 1000, 1.5) == 2

    def test_maximum_at_and_above_max_height(self) -> None:
        assert rules.max_allowed_branches(1000.0, 100.0, 1000.0, 2, 1000, 1.5) == 1000
        assert rules.max_allowed_branches(5000.0, 100.0, 1000.0, 2, 1000, 1.5) == 1000

    def test_midpoint_value(self) -> None:
        """Height 500 of 1000: floor(2 + 998 * (400/900)^1.5)."""
        expected = math.floor(2 + 998 * (400 / 900) ** 1.5)
        budget = rules.max_allowed_branches(500.0, 100.0, 1000.0, 2, 1000, 1.5)
        assert budget == expected
        assert budget == 297

    def test_non_decreasing(self) -> None:
        """Growing taller never removes capacity."""
        heights = np.linspace(0.0, 1200.0, 500)
        budgets = [rules.max_allowed_branches(float(h), 100.0, 1000.0, 2, 1000, 1.5) for h in heights]
        assert all(b2 >= b1 for b1, b2 in zip(budgets, budgets[1:]))

    def test_vectorized_curve_matches(self) -> None:
        species = SpeciesConfig()
        heights = np.array([0.0, 99.0, 100.0, 250.0, 500.0, 999.0, 1000.0, 1500.0])
        curve = rules.branch_capacity_curve(heights, species)
        expected = [rules.branch_capacity(float(h), species) for h in heights]
        assert list(curve) == expected


class TestEligibility:
    """Tests for the can_* checks."""

    def test_grow_height(self) -> None:
        species = SpeciesConfig()
        assert rules.can_grow_height(999.0, species)
        assert not rules.can_grow_height(1000.0, species)

    def test_add_branch_needs_height(self) -> None:
        species = SpeciesConfig()
        assert not rules.can_add_branch(50.0, 0, species)
        assert rules.can_add_branch(100.0, 0, species)

    def test_add_branch_respects_budget(self) -> None:
        species = SpeciesConfig()
        assert rules.can_add_branch(500.0, 296, species)
        assert not rules.can_add_branch(500.0, 297, species)

    def test_sub_branch_limits(self) -> None:
        species = SpeciesConfig()
        assert rules.can_sub_branch(20.0, 0, 500.0, 10, species)
        # Parent too short
        assert not rules.can_sub_branch(5.0, 0, 500.0, 10, species)
        # Parent full
        assert not rules.can_sub_branch(20.0, 2, 500.0, 10, species)
        # Tree at budget
        assert not rules.can_sub_branch(20.0, 0, 500.0, 297, species)

    def test_sub_root_limits(self) -> None:
        species = SpeciesConfig()
        assert rules.can_sub_root(10.0, 1, species)
        assert not rules.can_sub_root(5.0, 0, species)
        assert not rules.can_sub_root(10.0, 2, species)

    def test_leaf_window_inclusive(self) -> None:
        """March through June, both ends included."""
        species = SpeciesConfig()
        allowed = [month for month in range(12) if rules.can_leaf_in_month(month, species)]
        assert allowed == [2, 3, 4, 5]

    def test_fruit_gate(self) -> None:
        species = SpeciesConfig()
        assert rules.can_produce_fruit(250.0, 50, species)
        assert not rules.can_produce_fruit(249.0, 50, species)
        assert not rules.can_produce_fruit(250.0, 49, species)

    def test_viable_seed(self) -> None:
        species = SpeciesConfig()
        assert rules.is_viable_seed(25.0, species)
        assert not rules.is_viable_seed(24.9, species)
