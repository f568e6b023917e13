"""
Preview renderer for game states and plots for game trajectories.

Draws a GameState in world coordinates with matplotlib:
- Tapered trunk triangles
- Roots and branches as outlined strokes (line width = thickness)
- Oriented elliptical leaves and a translucent canopy hull around them
- Hanging fruit and fruit lying on the ground

The y axis is flipped to match world coordinates (y grows downward).
"""

from dataclasses import dataclass

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle, Ellipse, Polygon, Rectangle
from scipy.spatial import ConvexHull, QhullError

from grove import rules
from grove.config import SpeciesConfig
from grove.rollout import Trajectory
from grove.state import GameState
from grove.structure import Branch, Root, Segment
from grove.tree import Tree


@dataclass
class RenderStyle:
    """Visual style of the preview renderer."""

    lead_color: str = "#1a1a1a"  # Outline around wood
    selected_color: str = "gold"
    sky_color: str = "#cfe8f7"
    soil_color: str = "#6b4f3a"
    ground_line_color: str = "#3b7a2a"
    canopy_alpha: float = 0.15
    leaf_aspect: float = 0.5  # Leaf width / length
    show_roots: bool = True
    show_canopy: bool = True
    margin: float = 40.0


def compute_canopy_hull(tree: Tree) -> np.ndarray:
    """
    Convex hull around a tree's leaves.

    Returns:
        Nx2 array of hull vertices (empty when fewer than three leaves, or
        when the leaves are collinear)
    """
    points = np.array([(leaf.x, leaf.y) for leaf in tree.get_all_leaves()])
    if len(points) < 3:
        return np.empty((0, 2))
    try:
        hull = ConvexHull(points)
    except QhullError:
        return np.empty((0, 2))
    return points[hull.vertices]


def world_bounds(state: GameState, margin: float = 40.0) -> tuple[float, float, float, float]:
    """(xmin, xmax, ymin, ymax) covering every trunk, branch and root."""
    xs: list[float] = []
    ys: list[float] = []
    for tree in state.trees:
        xs.extend([tree.x - tree.width / 2, tree.x + tree.width / 2])
        ys.extend([tree.top_y, tree.y])
        for segment in [*tree.get_all_branches(), *tree.get_all_roots()]:
            xs.extend([segment.start_x, segment.end_x])
            ys.extend([segment.start_y, segment.end_y])
    if not xs:
        return (0.0, 1.0, 0.0, 1.0)
    return (min(xs) - margin, max(xs) + margin, min(ys) - margin, max(ys) + margin)


def draw_trunk(ax: plt.Axes, tree: Tree, style: RenderStyle) -> None:
    """Draw the trunk as a triangle tapering from the base to the top."""
    half = tree.width / 2
    vertices = [(tree.x - half, tree.y), (tree.x + half, tree.y), (tree.x, tree.top_y)]
    edge = style.selected_color if tree.is_selected else style.lead_color
    ax.add_patch(
        Polygon(
            vertices,
            closed=True,
            facecolor=tree.species.colors.trunk,
            edgecolor=edge,
            linewidth=2.0 if tree.is_selected else 0.8,
            zorder=5,
        )
    )


def draw_segments(ax: plt.Axes, segments: list[Branch] | list[Root], style: RenderStyle, zorder: int) -> None:
    """Draw woody segments as outlined strokes."""
    for segment in segments:
        xs, ys = _segment_line(segment)
        ax.plot(xs, ys, color=style.lead_color, linewidth=segment.thickness + 1.0,
                solid_capstyle="round", zorder=zorder)
        ax.plot(xs, ys, color=segment.color, linewidth=segment.thickness,
                solid_capstyle="round", zorder=zorder + 1)


def _segment_line(segment: Segment) -> tuple[list[float], list[float]]:
    return [segment.start_x, segment.end_x], [segment.start_y, segment.end_y]


def draw_leaves(ax: plt.Axes, tree: Tree, style: RenderStyle) -> None:
    for leaf in tree.get_all_leaves():
        ax.add_patch(
            Ellipse(
                (leaf.x, leaf.y),
                width=leaf.size,
                height=leaf.size * style.leaf_aspect,
                angle=float(np.degrees(leaf.orientation)),
                facecolor=leaf.color,
                edgecolor=style.lead_color,
                linewidth=0.3,
                zorder=10,
            )
        )


def draw_canopy(ax: plt.Axes, tree: Tree, style: RenderStyle) -> None:
    hull = compute_canopy_hull(tree)
    if len(hull) == 0:
        return
    ax.add_patch(
        Polygon(hull, closed=True, facecolor=tree.species.colors.leaf,
                edgecolor="none", alpha=style.canopy_alpha, zorder=2)
    )


def draw_fruit(ax: plt.Axes, state: GameState, style: RenderStyle) -> None:
    for tree in state.trees:
        for fruit in tree.fruits:
            ax.add_patch(Circle((fruit.x, fruit.y), fruit.size / 2, facecolor=fruit.color,
                                edgecolor=style.lead_color, linewidth=0.5, zorder=12))
    for fruit in state.fallen_fruits:
        # Resting on the ground line
        ax.add_patch(Circle((fruit.x, fruit.y - fruit.size / 2), fruit.size / 2, facecolor=fruit.color,
                            edgecolor=style.lead_color, linewidth=0.5, alpha=0.8, zorder=12))


def render_world(
    state: GameState,
    ax: plt.Axes | None = None,
    style: RenderStyle | None = None,
    figsize: tuple = (12, 8),
    title: str = "",
) -> tuple[plt.Figure, plt.Axes]:
    """
    Render every tree in a game state.

    Args:
        state: Game state to draw
        ax: Axes to draw into (a new figure is created when omitted)
        style: Visual style configuration
        figsize: Figure size in inches, for a new figure
        title: Optional axes title

    Returns:
        (figure, axes) tuple
    """
    if style is None:
        style = RenderStyle()
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    xmin, xmax, ymin, ymax = world_bounds(state, style.margin)
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymax, ymin)  # Flip Y for world coords
    ax.set_aspect("equal")
    ax.axis("off")

    # Sky above the ground line, soil below it
    ground_y = state.trees[0].y if state.trees else 0.0
    ax.add_patch(Rectangle((xmin, ymin), xmax - xmin, ground_y - ymin, facecolor=style.sky_color, zorder=0))
    if style.show_roots:
        ax.add_patch(Rectangle((xmin, ground_y), xmax - xmin, ymax - ground_y, facecolor=style.soil_color,
                               alpha=0.4, zorder=0))
    ax.axhline(y=ground_y, color=style.ground_line_color, linewidth=2, zorder=1)

    for tree in state.trees:
        if style.show_canopy:
            draw_canopy(ax, tree, style)
        if style.show_roots:
            draw_segments(ax, tree.get_all_roots(), style, zorder=3)
        draw_segments(ax, tree.get_all_branches(), style, zorder=6)
        draw_trunk(ax, tree, style)
        draw_leaves(ax, tree, style)
    draw_fruit(ax, state, style)

    if title:
        ax.set_title(title)
    return fig, ax


def save_world(
    filepath: str,
    state: GameState,
    style: RenderStyle | None = None,
    dpi: int = 150,
    figsize: tuple = (12, 8),
    title: str = "",
) -> None:
    """Render and save a game state to file."""
    fig, _ = render_world(state, style=style, figsize=figsize, title=title)
    fig.savefig(filepath, dpi=dpi, bbox_inches="tight", pad_inches=0.1)
    plt.close(fig)
    print(f"Saved to {filepath}")


def plot_trajectory(trajectory: Trajectory, figsize: tuple = (12, 8)) -> tuple[plt.Figure, np.ndarray]:
    """
    Plot the histories of a game on a 2x2 grid.

    Panels: total score, nutrient pool, selected-tree height, and
    selected-tree branches, leaves and fruit.
    """
    arrays = trajectory.get_history_arrays()
    turns = np.arange(len(arrays["score"]))

    fig, axes = plt.subplots(2, 2, figsize=figsize, sharex=True)
    axes[0, 0].plot(turns, arrays["score"], color="tab:green")
    axes[0, 0].set_title("Score")
    axes[0, 1].plot(turns, arrays["nutrients"], color="tab:brown")
    axes[0, 1].set_title("Nutrients")
    axes[1, 0].plot(turns, arrays["height"], color="tab:blue")
    axes[1, 0].set_title("Height")
    for key in ("branches", "leaves", "fruit"):
        axes[1, 1].plot(turns, arrays[key], label=key)
    axes[1, 1].set_title("Structure")
    axes[1, 1].legend()

    for ax in axes[1]:
        ax.set_xlabel("Turn")
    fig.tight_layout()
    return fig, axes


def plot_branch_capacity(
    species: SpeciesConfig,
    num_points: int = 200,
    ax: plt.Axes | None = None,
) -> tuple[plt.Figure, plt.Axes]:
    """Plot a species' branch budget against trunk height."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))
    else:
        fig = ax.figure

    heights = np.linspace(0.0, species.max_height, num_points)
    ax.step(heights, rules.branch_capacity_curve(heights, species), where="post", color="tab:green")
    ax.axvline(species.rules.min_height_for_branches, color="gray", linestyle="--", linewidth=1)
    ax.set_xlabel("Height")
    ax.set_ylabel("Max branches")
    ax.set_title(f"{species.name} branch budget")
    return fig, ax
