"""
Tests for the season and turn controller.
"""

import math

import numpy as np

from grove import seasons
from grove.config import SeasonCalendar, SpeciesConfig
from grove.state import GameState
from grove.structure import Branch, FallenFruit, Fruit, Leaf
from grove.tree import Tree


def make_leafy_tree(leaves: int = 10, color: str = "green", x: float = 600.0) -> Tree:
    """Create a tree with one branch and one child branch, leaves split between them."""
    tree = Tree(x, 744.0, SpeciesConfig(), height=300.0, width=10.0, rng=np.random.default_rng(0))
    parent = Branch(start_x=x, start_y=500.0, length=60.0, angle=-math.pi / 4, thickness=3.0, color="brown")
    child = Branch(start_x=parent.end_x, start_y=parent.end_y, length=30.0, angle=-math.pi / 3, thickness=2.0,
                   color="brown")
    parent.children.append(child)
    tree.branches.append(parent)
    for index in range(leaves):
        target = parent if index % 2 == 0 else child
        target.leaves.append(Leaf(x=0.0, y=0.0, size=20.0, color=color, orientation=0.0))
    return tree


def make_state(month_index: int, trees: list[Tree] | None = None) -> GameState:
    return GameState(nutrients=100, month_index=month_index, trees=trees or [])


class TestCalendar:
    """Tests for month arithmetic."""

    def test_next_month_wraps(self) -> None:
        assert seasons.next_month(0) == 1
        assert seasons.next_month(11) == 0

    def test_month_names(self) -> None:
        assert seasons.month_name(0) == "January"
        assert seasons.month_name(11) == "December"


class TestAdvanceTurn:
    """Tests for the per-turn bookkeeping."""

    def test_month_and_nutrients(self) -> None:
        state = make_state(0)
        report = seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))
        assert state.month_index == 1
        assert state.turn == 1
        assert state.nutrients == 101
        assert report.month_name == "February"
        assert report.nutrients_gained == 1

    def test_year_wraps(self) -> None:
        state = make_state(11)
        seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))
        assert state.month_index == 0

    def test_quiet_months_leave_trees_alone(self) -> None:
        tree = make_leafy_tree()
        tree.fruits.append(Fruit(0.0, 0.0, 30.0, "red"))
        state = make_state(2, [tree])
        seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))
        assert tree.get_total_leaves() == 10
        assert len(tree.fruits) == 1


class TestHarvest:
    """Tests for the harvest month."""

    def test_ripe_fruit_falls(self) -> None:
        tree = make_leafy_tree()
        tree.fruits = [
            Fruit(610.0, 480.0, 30.0, "red"),
            Fruit(620.0, 470.0, 10.0, "red"),
            Fruit(630.0, 460.0, 25.0, "red"),
        ]
        state = make_state(6, [tree])
        report = seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))

        assert state.month_index == 7
        assert tree.fruits == []
        assert report.fruit_fallen == 2
        assert report.fruit_discarded == 1
        assert [fruit.x for fruit in state.fallen_fruits] == [610.0, 630.0]
        for fruit in state.fallen_fruits:
            assert fruit.y == tree.y
            assert fruit.grounded_time == 0

    def test_fallen_fruit_expires(self) -> None:
        state = make_state(0)
        state.fallen_fruits.append(FallenFruit(600.0, 744.0, 30.0, "red"))
        calendar = SeasonCalendar()
        rng = np.random.default_rng(0)

        seasons.advance_turn(state, calendar, 1, rng)
        seasons.advance_turn(state, calendar, 1, rng)
        assert len(state.fallen_fruits) == 1
        assert state.fallen_fruits[0].grounded_time == 2

        report = seasons.advance_turn(state, calendar, 1, rng)
        assert state.fallen_fruits == []
        assert report.fallen_fruit_expired == 1

    def test_age_fallen_fruit(self) -> None:
        fruits = [FallenFruit(0.0, 0.0, 30.0, "red", grounded_time=age) for age in (0, 1, 2)]
        remaining = seasons.age_fallen_fruit(fruits, lifetime=3)
        assert [fruit.grounded_time for fruit in remaining] == [1, 2]


class TestLeafTransitions:
    """Tests for autumn leaf color and fall."""

    def test_color_change_all(self) -> None:
        tree = make_leafy_tree()
        calendar = SeasonCalendar(color_change_probability=1.0)
        result = seasons.apply_seasonal_transition([tree], calendar.color_change_month, calendar,
                                                   np.random.default_rng(0))
        assert result.leaves_recolored == 10
        assert all(leaf.color == "yellow" for leaf in tree.get_all_leaves())

    def test_color_change_none(self) -> None:
        tree = make_leafy_tree()
        calendar = SeasonCalendar(color_change_probability=0.0)
        seasons.apply_seasonal_transition([tree], calendar.color_change_month, calendar, np.random.default_rng(0))
        assert all(leaf.color == "green" for leaf in tree.get_all_leaves())

    def test_color_change_rate(self) -> None:
        """About half the leaves turn in September."""
        tree = make_leafy_tree(leaves=2000)
        calendar = SeasonCalendar()
        seasons.apply_seasonal_transition([tree], calendar.color_change_month, calendar, np.random.default_rng(5))
        yellow = sum(1 for leaf in tree.get_all_leaves() if leaf.color == "yellow")
        assert 900 < yellow < 1100
        assert tree.get_total_leaves() == 2000

    def test_any_non_senescent_color_counts_as_green(self) -> None:
        tree = make_leafy_tree(color="darkolivegreen")
        calendar = SeasonCalendar(color_change_probability=1.0)
        seasons.apply_seasonal_transition([tree], calendar.color_change_month, calendar, np.random.default_rng(0))
        assert all(leaf.color == "yellow" for leaf in tree.get_all_leaves())

    def test_leaf_fall_onset(self) -> None:
        """October: yellow leaves drop, the rest turn yellow."""
        tree = make_leafy_tree(leaves=6)
        leaves = tree.get_all_leaves()
        for leaf in leaves[:2]:
            leaf.color = "yellow"
        state = make_state(8, [tree])

        report = seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))
        assert state.month_index == 9
        assert report.leaves_dropped == 2
        assert report.leaves_recolored == 4
        assert tree.get_total_leaves() == 4
        assert all(leaf.color == "yellow" for leaf in tree.get_all_leaves())

    def test_total_leaf_fall(self) -> None:
        """Entering November clears every leaf on every tree."""
        trees = [make_leafy_tree(leaves=8), make_leafy_tree(leaves=5, x=900.0)]
        state = make_state(9, trees)
        report = seasons.advance_turn(state, SeasonCalendar(), 1, np.random.default_rng(0))

        assert state.month_index == 10
        assert report.leaves_dropped == 13
        for tree in trees:
            for branch in tree.get_all_branches():
                assert branch.leaves == []

    def test_branches_survive_autumn(self) -> None:
        tree = make_leafy_tree()
        state = make_state(6, [tree])
        rng = np.random.default_rng(0)
        for _ in range(6):
            seasons.advance_turn(state, SeasonCalendar(), 1, rng)
        assert len(tree.get_all_branches()) == 2
