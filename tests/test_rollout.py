"""
Tests for multi-turn games.

These tests verify that full games produce consistent trajectories and
respect the tree invariants throughout.
"""

import pytest

from grove import policies, rollout
from grove.config import EconomyConfig
from grove.world import World


def make_world(seed: int = 0, sandbox: bool = False) -> World:
    economy = EconomyConfig.sandbox() if sandbox else EconomyConfig()
    return World(economy=economy, seed=seed)


class TestRunGame:
    """Tests for a single game."""

    def test_history_lengths(self) -> None:
        """Histories include the initial state."""
        trajectory = rollout.run_game(make_world(), policies.baseline_policy, 12)
        assert trajectory.num_turns == 12
        assert len(trajectory.scores) == 13
        assert len(trajectory.nutrients) == 13
        assert len(trajectory.plans) == 12
        assert trajectory.months[-1] == 0

    def test_zero_turns(self) -> None:
        trajectory = rollout.run_game(make_world(), policies.baseline_policy, 0)
        assert trajectory.num_turns == 0
        assert len(trajectory.scores) == 1

    def test_negative_turns(self) -> None:
        with pytest.raises(ValueError):
            rollout.run_game(make_world(), policies.idle_policy, -1)

    def test_idle_game(self) -> None:
        """Without actions only the nutrient pool changes."""
        trajectory = rollout.run_game(make_world(), policies.idle_policy, 6)
        assert set(trajectory.scores) == {15}
        assert trajectory.nutrients == [10000 + turn for turn in range(7)]

    def test_baseline_grows(self) -> None:
        trajectory = rollout.run_game(make_world(), policies.baseline_policy, 12)
        assert trajectory.heights[-1] > trajectory.heights[0]
        assert trajectory.scores[-1] > trajectory.scores[0]

    def test_invariants_hold(self) -> None:
        world = make_world(seed=4, sandbox=True)
        rollout.run_game(world, policies.canopy_policy, 24)
        for tree in world.trees:
            assert tree.height <= tree.species.max_height
            assert tree.width <= tree.species.max_width

    def test_leaves_gone_in_november(self) -> None:
        world = make_world(seed=1, sandbox=True)
        trajectory = rollout.run_game(world, policies.canopy_policy, 10)
        assert trajectory.months[-1] == 10
        for tree in world.trees:
            assert tree.get_total_leaves() == 0

    def test_reproducible(self) -> None:
        first = rollout.run_game(make_world(seed=9), policies.baseline_policy, 12)
        second = rollout.run_game(make_world(seed=9), policies.baseline_policy, 12)
        assert first.scores == second.scores
        assert first.branch_counts == second.branch_counts


class TestSummary:
    """Tests for the scalar summary."""

    def test_summary_keys(self) -> None:
        trajectory = rollout.run_game(make_world(), policies.baseline_policy, 6)
        summary = trajectory.get_scalar_summary()
        for key in ("Turns", "FinalScore", "PeakScore", "NutrientsSpent", "FinalHeight", "Trees"):
            assert key in summary
        assert summary["Turns"] == 6
        assert summary["PeakScore"] >= summary["FinalScore"]

    def test_nutrients_spent_balances(self) -> None:
        trajectory = rollout.run_game(make_world(), policies.baseline_policy, 6)
        summary = trajectory.get_scalar_summary()
        assert summary["NutrientsSpent"] == 10000 + 6 - summary["FinalNutrients"]

    def test_history_arrays(self) -> None:
        trajectory = rollout.run_game(make_world(), policies.idle_policy, 3)
        arrays = trajectory.get_history_arrays()
        assert arrays["score"].shape == (4,)

    def test_print_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        trajectory = rollout.run_game(make_world(), policies.idle_policy, 2)
        trajectory.print_summary()
        out = capsys.readouterr().out
        assert "GAME SUMMARY" in out
        assert "FinalScore" in out


class TestEvaluation:
    """Tests for multi-seed evaluation."""

    def test_evaluate_policy(self) -> None:
        metrics = rollout.evaluate_policy(policies.idle_policy, num_turns=3, seeds=(0, 1))
        assert metrics["mean_score"] == 15.0
        assert metrics["std_score"] == 0.0
        assert metrics["mean_trees"] == 1.0

    def test_needs_seeds(self) -> None:
        with pytest.raises(ValueError):
            rollout.evaluate_policy(policies.idle_policy, seeds=())

    def test_compare_policies(self) -> None:
        results = rollout.compare_policies(
            {"idle": policies.idle_policy, "baseline": policies.baseline_policy},
            num_turns=6,
            seeds=(0,),
        )
        assert set(results) == {"idle", "baseline"}
        assert results["baseline"]["mean_score"] > results["idle"]["mean_score"]
