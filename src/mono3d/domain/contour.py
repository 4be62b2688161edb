"""Core geometric types for contour representation.

This module defines the 2D types flowing through the tracing pipeline:
- Point: A 2D point
- Edge: A marching-squares boundary segment
- Loop: An ordered, implicitly closed sequence of points
- WindingDirection: Enum for ring winding direction
- ContourInfo / ContourTree: The containment forest of traced loops
- Polygon: A solid outer ring with zero or more hole rings
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto


class WindingDirection(Enum):
    """Ring winding direction.

    In world coordinates (y up):
    - Solid outer rings wind counter-clockwise
    - Hole rings wind clockwise
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate (grid or world units depending on stage)
        y: Y coordinate (grid or world units depending on stage)
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


Loop = tuple[Point, ...]
"""An ordered closed polyline; the closing point is not repeated."""


@dataclass(frozen=True, slots=True)
class Edge:
    """An undirected marching-squares segment between two cell midpoints.

    Attributes:
        start: First endpoint
        end: Second endpoint
    """

    start: Point
    end: Point


@dataclass(frozen=True)
class ContourInfo:
    """A traced loop classified within the containment forest.

    Parent and children are indices into the owning ContourTree's node
    array, never object references.

    Attributes:
        index: Position of this node in the area-sorted node array
        points: Simplified loop in world coordinates (original winding)
        area: Absolute polygon area
        depth: Nesting depth (0 for outermost)
        is_hole: True for odd depth
        parent: Index of the immediate enclosing node, or None
        children: Indices of directly enclosed nodes
    """

    index: int
    points: Loop
    area: float
    depth: int
    is_hole: bool
    parent: int | None
    children: tuple[int, ...] = ()


@dataclass(frozen=True)
class ContourTree:
    """Immutable containment forest over a flat node array.

    Nodes are ordered by descending area, so every parent precedes its
    children.
    """

    nodes: tuple[ContourInfo, ...] = ()

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[ContourInfo]:
        return iter(self.nodes)

    def __getitem__(self, index: int) -> ContourInfo:
        return self.nodes[index]

    @property
    def roots(self) -> list[int]:
        """Indices of depth-0 nodes."""
        return [node.index for node in self.nodes if node.parent is None]

    def solids(self) -> list[ContourInfo]:
        """Nodes at even depth."""
        return [node for node in self.nodes if not node.is_hole]

    def holes(self) -> list[ContourInfo]:
        """Nodes at odd depth."""
        return [node for node in self.nodes if node.is_hole]

    @property
    def max_depth(self) -> int:
        """Deepest nesting level, -1 for an empty tree."""
        return max((node.depth for node in self.nodes), default=-1)


@dataclass(frozen=True)
class Polygon:
    """A solid region bounded by one outer ring and zero or more holes.

    Attributes:
        outer: Outer boundary, counter-clockwise
        holes: Hole boundaries, each clockwise
    """

    outer: Loop
    holes: tuple[Loop, ...] = field(default_factory=tuple)

    @property
    def rings(self) -> tuple[Loop, ...]:
        """Outer ring followed by the hole rings."""
        return (self.outer, *self.holes)

    @property
    def vertex_count(self) -> int:
        """Total number of ring vertices."""
        return sum(len(ring) for ring in self.rings)

    def with_hole(self, ring: Loop) -> "Polygon":
        """Return a new polygon with ``ring`` appended to the holes."""
        return Polygon(outer=self.outer, holes=(*self.holes, ring))
