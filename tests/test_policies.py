"""
Tests for scripted turn policies.

These tests verify that policies produce sensible plans for each phase
of a tree's life.
"""

from grove import policies
from grove.config import SeasonCalendar
from grove.state import GameState
from grove.world import World


def make_world_at(height: float, month_index: int = 0) -> World:
    """Create a world whose selected tree has been grown to `height`."""
    world = World(seed=0)
    world.selected.grow_height(height - world.selected.height)
    world.state.month_index = month_index
    return world


def plan_for(policy: policies.PolicyFn, world: World) -> policies.TurnPlan:
    return policy(world.state, world.selected, world.calendar)


class TestIdlePolicy:
    """Tests for the do-nothing policy."""

    def test_empty_plan(self) -> None:
        plan = plan_for(policies.idle_policy, make_world_at(500.0))
        assert plan == policies.TurnPlan()
        assert not plan.plant


class TestBaselinePolicy:
    """Tests for the phased baseline."""

    def test_seedling_grows_up(self) -> None:
        plan = plan_for(policies.baseline_policy, make_world_at(10.0))
        assert plan.height_steps > 0
        assert plan.branches == 0
        assert plan.leaves == 0

    def test_sapling_branches(self) -> None:
        plan = plan_for(policies.baseline_policy, make_world_at(300.0))
        assert plan.branches > 0

    def test_leaves_only_in_season(self) -> None:
        spring = plan_for(policies.baseline_policy, make_world_at(300.0, month_index=3))
        winter = plan_for(policies.baseline_policy, make_world_at(300.0, month_index=0))
        assert spring.leaves > 0
        assert winter.leaves == 0

    def test_no_fruit_after_harvest(self) -> None:
        world = make_world_at(300.0, month_index=SeasonCalendar().harvest_month)
        plan = plan_for(policies.baseline_policy, world)
        assert plan.fruit == 0

    def test_stops_growing_at_max(self) -> None:
        plan = plan_for(policies.baseline_policy, make_world_at(1000.0))
        assert plan.height_steps == 0

    def test_branch_request_capped(self) -> None:
        plan = plan_for(policies.baseline_policy, make_world_at(900.0))
        assert 0 < plan.branches <= 10


class TestCanopyPolicy:
    """Tests for the crown-focused policy."""

    def test_grows_past_branch_height_first(self) -> None:
        plan = plan_for(policies.canopy_policy, make_world_at(120.0))
        assert plan.height_steps > 0
        assert plan.branches == 0

    def test_never_fruits(self) -> None:
        plan = plan_for(policies.canopy_policy, make_world_at(800.0, month_index=3))
        assert plan.fruit == 0
        assert not plan.plant
        assert plan.leaves > 0


class TestRegistry:
    def test_all_policies_registered(self) -> None:
        assert set(policies.POLICIES) == {"idle", "baseline", "canopy"}

    def test_policies_accept_plain_state(self) -> None:
        """Policies only read from the state they are given."""
        world = make_world_at(300.0)
        state = GameState(nutrients=0, month_index=4)
        for policy in policies.POLICIES.values():
            assert isinstance(policy(state, world.selected, world.calendar), policies.TurnPlan)
