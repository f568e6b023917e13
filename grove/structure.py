"""
Structural entities of a tree: branches, roots, leaves and fruit.

Branches and roots are recursive segments. Each owns its children
outright; nothing keeps a reference back to its parent or tree. Anything
a segment needs to know about its tree (species limits, height, ground
line) is passed into the generator by value.

Segment geometry:
    end = start + (cos(angle), sin(angle)) * length

with y growing downward, so an angle of -pi/2 points straight up.
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TypeVar


@dataclass
class Leaf:
    """A leaf attached somewhere along a branch."""

    x: float
    y: float
    size: float  # Diameter
    color: str
    orientation: float  # Angle of the bearing branch, for oriented shapes


@dataclass
class Fruit:
    """A fruit hanging from a leaf-bearing branch."""

    x: float
    y: float
    size: float
    color: str


@dataclass
class FallenFruit:
    """Harvested fruit lying on the ground, aging one step per turn."""

    x: float
    y: float
    size: float
    color: str
    grounded_time: int = 0  # Turns since it fell

    def age(self) -> None:
        self.grounded_time += 1


@dataclass
class Segment:
    """A straight woody segment (branch or root)."""

    start_x: float
    start_y: float
    length: float
    angle: float
    thickness: float
    color: str

    @property
    def end_x(self) -> float:
        return self.start_x + math.cos(self.angle) * self.length

    @property
    def end_y(self) -> float:
        return self.start_y + math.sin(self.angle) * self.length

    def point_along(self, fraction: float) -> tuple[float, float]:
        """Point at `fraction` of the way from start (0) to end (1)."""
        return (
            self.start_x + math.cos(self.angle) * self.length * fraction,
            self.start_y + math.sin(self.angle) * self.length * fraction,
        )

    def offset_perpendicular(self, x: float, y: float, offset: float) -> tuple[float, float]:
        """Shift a point sideways off the segment's line by `offset`."""
        return (
            x + math.sin(self.angle) * offset,
            y - math.cos(self.angle) * offset,
        )


@dataclass
class Branch(Segment):
    """A branch carrying leaves and child branches."""

    leaves: list[Leaf] = field(default_factory=list)
    children: list["Branch"] = field(default_factory=list)

    @property
    def leaf_count(self) -> int:
        return len(self.leaves)


@dataclass
class Root(Segment):
    """A root with child roots. Roots never carry leaves."""

    children: list["Root"] = field(default_factory=list)


S = TypeVar("S", Branch, Root)


def iter_preorder(segments: Iterable[S]) -> Iterator[S]:
    """Yield every segment in a forest, parents before their children."""
    for segment in segments:
        yield segment
        yield from iter_preorder(segment.children)


def flatten(segments: Iterable[S]) -> list[S]:
    """Pre-order list of every segment in a forest."""
    return list(iter_preorder(segments))


def max_depth(segments: Iterable[S]) -> int:
    """Depth of the deepest segment (a lone top-level segment has depth 1)."""
    return max((1 + max_depth(s.children) for s in segments), default=0)
