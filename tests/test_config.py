"""
Tests for configuration types.

These tests verify that config objects validate once at construction
and that species variants are derived without touching the base.
"""

import dataclasses
import math

import pytest

from grove.config import (
    AngleParams,
    BranchParams,
    EconomyConfig,
    GrowthRules,
    PlacementRange,
    SeasonCalendar,
    SizeRange,
    SpeciesConfig,
    derive_species,
)


class TestSpeciesDefaults:
    """Tests for the base species parameters."""

    def test_default_values(self) -> None:
        """Base species should carry the documented defaults."""
        species = SpeciesConfig()
        assert species.name == "DefaultTree"
        assert species.max_height == 1000.0
        assert species.max_width == 30.0
        assert species.rules.min_height_for_branches == 100.0
        assert species.branch_params.max_branches_at_max_height == 1000
        assert species.leaf_out_start_month == 2
        assert species.leaf_out_end_month == 5

    def test_default_angles_point_up(self) -> None:
        """Trunk branch angles should span the upper half-plane."""
        angles = AngleParams()
        assert angles.branch_initial_min == -math.pi
        assert angles.branch_initial_max == 0.0
        assert angles.root_initial_base == pytest.approx(math.pi / 2)

    def test_frozen(self) -> None:
        """Species configs should be immutable."""
        species = SpeciesConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            species.max_height = 5.0  # type: ignore[misc]

    def test_evergreen_flag(self) -> None:
        """Only a full-year leaf-out window counts as evergreen."""
        assert not SpeciesConfig().is_evergreen
        assert SpeciesConfig(leaf_out_start_month=0, leaf_out_end_month=11).is_evergreen


class TestValidation:
    """Tests for construction-time validation."""

    def test_max_height_must_exceed_branch_height(self) -> None:
        """A species that can never branch is rejected."""
        with pytest.raises(ValueError, match="min_height_for_branches"):
            SpeciesConfig(max_height=100.0, rules=GrowthRules(min_height_for_branches=100.0))

    def test_reversed_leaf_window_rejected(self) -> None:
        with pytest.raises(ValueError, match="leaf-out window"):
            SpeciesConfig(leaf_out_start_month=6, leaf_out_end_month=3)

    def test_leaf_window_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            SpeciesConfig(leaf_out_end_month=12)

    def test_nonpositive_dimensions_rejected(self) -> None:
        with pytest.raises(ValueError):
            SpeciesConfig(max_width=0.0)

    def test_size_range_order(self) -> None:
        """Size ranges need min <= max."""
        with pytest.raises(ValueError):
            SizeRange(10.0, 5.0)
        assert SizeRange(5.0, 10.0).span == 5.0

    def test_placement_range_bounds(self) -> None:
        """Placement fractions must lie in [0, 1]."""
        with pytest.raises(ValueError):
            PlacementRange(0.5, 1.5)
        with pytest.raises(ValueError):
            PlacementRange(0.8, 0.2)
        PlacementRange(0.0, 1.0)

    def test_branch_params_order(self) -> None:
        with pytest.raises(ValueError):
            BranchParams(min_branches_at_min_height=50, max_branches_at_max_height=10)

    def test_exponent_positive(self) -> None:
        with pytest.raises(ValueError):
            BranchParams(scaling_exponent=0.0)

    def test_negative_structural_limit_rejected(self) -> None:
        with pytest.raises(ValueError):
            SpeciesConfig(max_child_branches_per_branch=-1)


class TestDeriveSpecies:
    """Tests for building variants from a base."""

    def test_top_level_override(self) -> None:
        """Top-level fields are replaced outright."""
        base = SpeciesConfig()
        tall = derive_species(base, "Tall", max_height=2000.0)
        assert tall.name == "Tall"
        assert tall.max_height == 2000.0
        assert tall.max_width == base.max_width

    def test_partial_nested_override(self) -> None:
        """A dict override merges into the base's nested group."""
        base = SpeciesConfig()
        variant = derive_species(base, "Narrow", angles={"branch_initial_min": -2.0})
        assert variant.angles.branch_initial_min == -2.0
        assert variant.angles.branch_initial_max == base.angles.branch_initial_max
        assert variant.angles.root_initial_base == base.angles.root_initial_base

    def test_base_untouched(self) -> None:
        base = SpeciesConfig()
        derive_species(base, "Other", rules={"min_leaves_for_fruits": 5})
        assert base.rules.min_leaves_for_fruits == 50

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown species field"):
            derive_species(SpeciesConfig(), "Bad", crown_shape="round")

    def test_unknown_nested_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="rules"):
            derive_species(SpeciesConfig(), "Bad", rules={"min_height_for_flowers": 3.0})

    def test_derived_species_validated(self) -> None:
        """Invalid combinations are caught on the derived config."""
        with pytest.raises(ValueError):
            derive_species(SpeciesConfig(), "Stubby", max_height=50.0)


class TestEconomyAndCalendar:
    """Tests for economy and calendar presets."""

    def test_economy_defaults(self) -> None:
        economy = EconomyConfig()
        assert economy.starting_nutrients == 10000
        assert economy.nutrients_per_turn == 1
        assert economy.height_per_nutrient == 10.0
        assert economy.max_consecutive_branch_failures == 10

    def test_sandbox_is_rich(self) -> None:
        assert EconomyConfig.sandbox().starting_nutrients > EconomyConfig().starting_nutrients

    def test_invalid_trunk_probability(self) -> None:
        with pytest.raises(ValueError):
            EconomyConfig(trunk_branch_probability=1.5)

    def test_northern_calendar(self) -> None:
        """Northern autumn: harvest in August, bare by November."""
        calendar = SeasonCalendar.northern()
        assert calendar.num_months == 12
        assert calendar.month_names[calendar.harvest_month] == "August"
        assert calendar.month_names[calendar.bare_month] == "November"
        assert calendar.senescent_color == "yellow"

    def test_calendar_needs_twelve_months(self) -> None:
        with pytest.raises(ValueError):
            SeasonCalendar(month_names=("Spring", "Summer", "Autumn", "Winter"))
