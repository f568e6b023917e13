"""
Procedural structure generator for branches and roots.

Each function synthesizes one new segment from either the trunk or a
parent segment, with randomized geometry constrained by the species
config. Failure is soft: a function that cannot legally grow returns
None and leaves the tree untouched.

Branches:
    Trunk branches start on the trunk's center line, somewhere in the top
    80% of the eligible trunk span (the part above min_height_for_branches).
    Lower starts give longer, thicker branches (scale factor 0.5 -> 1.0).
    Child branches start at the parent's tip and shrink to 50-80% length.

Roots:
    Trunk roots start across the trunk base and point downward around
    root_initial_base. Child roots shrink to 50-90% length and must avoid
    the forbidden cone of +/-45 degrees around straight up, must stay below
    the ground line and above the soil floor. Roots self-seed children as
    they are created.

All randomness comes from an injected numpy Generator, so a seeded
generator reproduces the same tree.
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from grove import rules
from grove.config import SpeciesConfig
from grove.structure import Branch, Root

logger = logging.getLogger(__name__)

# Forbidden "sharply upward" cone for roots, open interval around -pi/2
FORBIDDEN_CONE_MIN = -3 * math.pi / 4
FORBIDDEN_CONE_MAX = -math.pi / 4

# Fraction of the eligible trunk span (from the top) new branches start in
BRANCH_START_SPAN = 0.8
MIN_BRANCH_SCALE = 0.5
MAX_BRANCH_SCALE = 1.0

MAX_ROOT_ANGLE_ATTEMPTS = 10
MIN_ROOT_LENGTH = 2.0
GROUND_TOLERANCE = 2.0  # Parent roots this close to the ground may turn horizontal
ROOT_SELF_BRANCH_CHANCE = 0.4
SECOND_LAYER_ROOT_CHANCE = 0.5


class TrunkGeometry(NamedTuple):
    """
    Trunk dimensions passed by value into the generator.

    (x, y) is the base of the trunk; the top is at y - height.
    """

    x: float
    y: float
    height: float
    width: float


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi] via atan2."""
    return math.atan2(math.sin(angle), math.cos(angle))


def mirror_angle(angle: float) -> float:
    """Mirror a right-side angle to the left side of the trunk."""
    return normalize_angle(math.pi - angle)


def in_forbidden_cone(angle: float) -> bool:
    """Angle points sharply upward (strictly inside the forbidden cone)."""
    return FORBIDDEN_CONE_MIN < angle < FORBIDDEN_CONE_MAX


def branch_scale_factor(start_y: float, trunk: TrunkGeometry, min_height_for_branches: float) -> float:
    """
    Size multiplier for a trunk branch starting at `start_y`.

    Interpolates linearly from 0.5 at the top of the trunk to 1.0 at the
    bottom of the eligible span, clamped to [0.5, 1.0].
    """
    eligible = trunk.height - min_height_for_branches
    if eligible <= 0:
        return MAX_BRANCH_SCALE

    distance_from_top = start_y - (trunk.y - trunk.height)
    normalized = distance_from_top / eligible
    scale = MIN_BRANCH_SCALE + (MAX_BRANCH_SCALE - MIN_BRANCH_SCALE) * normalized
    return float(np.clip(scale, MIN_BRANCH_SCALE, MAX_BRANCH_SCALE))


def generate_trunk_branch(
    trunk: TrunkGeometry,
    species: SpeciesConfig,
    branch_count: int,
    rng: np.random.Generator,
) -> Branch | None:
    """
    Create a new branch growing out of the trunk.

    Args:
        trunk: Current trunk dimensions
        species: Species config of the owning tree
        branch_count: Branches already on the tree (whole hierarchy)
        rng: Random generator

    Returns:
        The new branch (not yet attached), or None if the tree is too short
        or has used up its branch budget
    """
    budget = rules.branch_capacity(trunk.height, species)
    if branch_count >= budget:
        logger.debug(
            "Cannot add trunk branch: maximum %d branches for height %.1f reached",
            budget,
            trunk.height,
        )
        return None

    min_height = species.rules.min_height_for_branches
    if trunk.height < min_height:
        logger.debug("Tree too short for branches: %.1f < %.1f", trunk.height, min_height)
        return None

    eligible = trunk.height - min_height
    if eligible <= 0:
        logger.debug("No eligible trunk height for branches")
        return None

    proportion = rng.uniform(0.0, BRANCH_START_SPAN)
    start_y = (trunk.y - trunk.height) + eligible * proportion

    # Configured angles describe the right side; mirror them for the left
    base_angle = rng.uniform(species.angles.branch_initial_min, species.angles.branch_initial_max)
    on_left = rng.random() < 0.5
    angle = mirror_angle(base_angle) if on_left else base_angle

    scale = branch_scale_factor(start_y, trunk, min_height)
    base_length = trunk.height / 5 + rng.uniform(0.0, trunk.height / 4)
    base_thickness = max(1.0, trunk.width / 4)

    return Branch(
        start_x=trunk.x,
        start_y=start_y,
        length=base_length * scale,
        angle=angle,
        thickness=max(1.0, base_thickness * scale),
        color=species.colors.trunk,
    )


def generate_child_branch(
    parent: Branch,
    trunk: TrunkGeometry,
    species: SpeciesConfig,
    branch_count: int,
    rng: np.random.Generator,
) -> Branch | None:
    """
    Sprout a child branch from the tip of `parent` and attach it.

    Args:
        parent: Branch to grow from
        trunk: Current trunk dimensions (height drives the branch budget)
        species: Species config of the owning tree
        branch_count: Branches already on the tree (whole hierarchy)
        rng: Random generator

    Returns:
        The attached child, or None if the budget is used up, the parent
        is too short, or the parent already has its maximum children
    """
    if not rules.can_sub_branch(parent.length, len(parent.children), trunk.height, branch_count, species):
        logger.debug("Branch too short, full, or tree at branch budget; no child branch added")
        return None

    variation = species.angles.branch_subsequent_variation
    child = Branch(
        start_x=parent.end_x,
        start_y=parent.end_y,
        length=parent.length * rng.uniform(0.5, 0.8),
        angle=parent.angle + rng.uniform(-variation, variation),
        thickness=max(1.0, parent.thickness * 0.7),
        color=parent.color,
    )
    parent.children.append(child)
    return child


def sample_child_root_angle(
    parent_angle: float,
    variation: float,
    rng: np.random.Generator,
    max_attempts: int = MAX_ROOT_ANGLE_ATTEMPTS,
) -> float | None:
    """
    Sample a child root angle outside the forbidden upward cone.

    Candidates deviate from the parent by up to +/- variation / 2. A
    candidate inside the cone is nudged toward the nearer horizontal.

    Returns:
        Accepted angle, or None if no valid angle was found in max_attempts
    """
    for _ in range(max_attempts):
        angle = normalize_angle(parent_angle + rng.uniform(-variation / 2, variation / 2))
        if in_forbidden_cone(angle):
            if angle < -math.pi / 2:
                angle = -math.pi + rng.uniform(0.0, math.pi / 4)
            else:
                angle = -rng.uniform(0.0, math.pi / 4)
        if not in_forbidden_cone(angle):
            return angle
    return None


def grow_child_root(
    parent: Root,
    species: SpeciesConfig,
    ground_y: float,
    floor_y: float,
    rng: np.random.Generator,
) -> Root | None:
    """
    Grow a child root from the tip of `parent` and attach it.

    Constraints, in order:
        1. parent long enough and below its child limit
        2. an angle outside the forbidden cone within the attempt cap
        3. the tip stays at or below the ground line; a parent lying at the
           ground may turn the child horizontal to stay there
        4. the tip stays above the soil floor
        5. length of at least 2

    On success there is a further 40% chance the new root immediately
    grows a child of its own.

    Args:
        parent: Root to grow from
        species: Species config of the owning tree
        ground_y: World y of the tree's ground line
        floor_y: Lowest world y roots may reach
        rng: Random generator

    Returns:
        The attached child, or None if any constraint rejected it
    """
    if not rules.can_sub_root(parent.length, len(parent.children), species):
        return None

    length = parent.length * rng.uniform(0.5, 0.9)
    thickness = max(1.0, parent.thickness * 0.8)

    angle = sample_child_root_angle(parent.angle, species.angles.root_subsequent_variation, rng)
    if angle is None:
        return None

    end_y = parent.end_y + math.sin(angle) * length
    if end_y < ground_y:
        if parent.end_y > ground_y + GROUND_TOLERANCE:
            return None
        angle = 0.0 if angle > -math.pi / 2 else math.pi
        end_y = parent.end_y + math.sin(angle) * length
        if end_y < ground_y:
            return None

    if end_y > floor_y - GROUND_TOLERANCE:
        return None

    if length < MIN_ROOT_LENGTH:
        return None

    child = Root(
        start_x=parent.end_x,
        start_y=parent.end_y,
        length=length,
        angle=angle,
        thickness=thickness,
        color=parent.color,
    )
    parent.children.append(child)

    if (
        rng.random() < ROOT_SELF_BRANCH_CHANCE
        and len(child.children) < species.max_child_roots_per_root
        and child.length > species.min_root_length_for_sub_rooting
    ):
        grow_child_root(child, species, ground_y, floor_y, rng)

    return child


def generate_trunk_root(
    trunk: TrunkGeometry,
    species: SpeciesConfig,
    floor_y: float,
    rng: np.random.Generator,
) -> Root:
    """
    Create a primary root at the trunk base, self-seeded with children.

    The primary root makes 1-2 immediate child attempts; each resulting
    child then gets a 50% chance of one attempt of its own.

    Args:
        trunk: Current trunk dimensions
        species: Species config of the owning tree
        floor_y: Lowest world y roots may reach
        rng: Random generator

    Returns:
        The new primary root (not yet attached to the tree)
    """
    variation = species.angles.root_initial_variation
    root = Root(
        start_x=trunk.x - trunk.width / 2 + rng.uniform(0.0, trunk.width),
        start_y=trunk.y,
        length=trunk.height / 15 + rng.uniform(0.0, 10.0) + 10.0,
        angle=species.angles.root_initial_base + rng.uniform(-variation, variation),
        thickness=max(2.0, trunk.width / 4),
        color=species.colors.root,
    )

    max_children = species.max_child_roots_per_root
    min_length = species.min_root_length_for_sub_rooting

    attempts = 1 + int(rng.integers(0, 2))
    for _ in range(attempts):
        if root.length > min_length and len(root.children) < max_children:
            grow_child_root(root, species, trunk.y, floor_y, rng)

    for child in list(root.children):
        if (
            rng.random() < SECOND_LAYER_ROOT_CHANCE
            and child.length > min_length
            and len(child.children) < max_children
        ):
            grow_child_root(child, species, trunk.y, floor_y, rng)

    return root
