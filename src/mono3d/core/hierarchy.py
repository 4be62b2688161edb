"""Polygon hierarchy construction with the even-odd nesting rule.

This module turns traced loops into solids with holes in two passes:

1. ``build_contour_tree`` sorts loops by area (largest first) and links
   each loop to the smallest earlier loop containing its first point. The
   result is an immutable forest stored as a flat array with index parent
   links. Because parents are always larger than their children, the sort
   guarantees every parent is classified before any of its children.
2. ``build_polygons`` walks that forest: even-depth nodes become polygons
   with a counter-clockwise outer ring, odd-depth nodes become clockwise
   hole rings of their parent's polygon.

The containment search is pluggable through ``ContainmentStrategy``; the
default quadratic scan is adequate for the loop counts a single image
produces.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from mono3d.core.geometry import point_in_polygon, signed_area, with_winding
from mono3d.domain import ContourInfo, ContourTree, Loop, Polygon, WindingDirection

logger = logging.getLogger(__name__)


class ContainmentStrategy(Protocol):
    """Finds the immediate parent of a loop among larger loops."""

    def find_parent(self, index: int, loops: Sequence[Loop], areas: Sequence[float]) -> int | None:
        """Return the index of the parent of ``loops[index]``.

        Args:
            index: Loop to classify
            loops: All loops, sorted by descending area
            areas: Absolute areas matching ``loops``

        Returns:
            Index of the smallest earlier loop containing the first point of
            ``loops[index]``, or None
        """
        ...


class ScanContainment:
    """Quadratic containment search over every earlier loop."""

    def find_parent(self, index: int, loops: Sequence[Loop], areas: Sequence[float]) -> int | None:
        loop = loops[index]
        if not loop:
            return None

        test_point = loop[0]
        parent: int | None = None
        min_area = float("inf")

        for candidate in range(index):
            if areas[candidate] < min_area and point_in_polygon(test_point, loops[candidate]):
                parent = candidate
                min_area = areas[candidate]

        return parent


@dataclass(frozen=True)
class HierarchyResult:
    """Outcome of polygon classification.

    Attributes:
        polygons: One polygon per even-depth node, in tree order
        tree: The containment forest the polygons were built from
        dropped_holes: Indices of hole nodes that had no polygon to join
    """

    polygons: tuple[Polygon, ...]
    tree: ContourTree
    dropped_holes: tuple[int, ...] = field(default_factory=tuple)

    @property
    def hole_count(self) -> int:
        """Number of hole rings attached to polygons."""
        return sum(len(polygon.holes) for polygon in self.polygons)


def build_contour_tree(
    loops: Sequence[Loop],
    strategy: ContainmentStrategy | None = None,
) -> ContourTree:
    """Classify loops into a containment forest.

    Args:
        loops: Simplified loops in world coordinates
        strategy: Containment search (defaults to ScanContainment)

    Returns:
        Immutable ContourTree with nodes sorted by descending area
    """
    strategy = strategy or ScanContainment()

    areas = [abs(signed_area(loop)) for loop in loops]
    order = sorted(range(len(loops)), key=lambda i: areas[i], reverse=True)
    sorted_loops = [tuple(loops[i]) for i in order]
    sorted_areas = [areas[i] for i in order]

    parents: list[int | None] = []
    depths: list[int] = []
    for idx in range(len(sorted_loops)):
        parent = strategy.find_parent(idx, sorted_loops, sorted_areas)
        parents.append(parent)
        depths.append(0 if parent is None else depths[parent] + 1)

    children: list[list[int]] = [[] for _ in sorted_loops]
    for idx, parent in enumerate(parents):
        if parent is not None:
            children[parent].append(idx)

    nodes = tuple(
        ContourInfo(
            index=idx,
            points=sorted_loops[idx],
            area=sorted_areas[idx],
            depth=depths[idx],
            is_hole=depths[idx] % 2 == 1,
            parent=parents[idx],
            children=tuple(children[idx]),
        )
        for idx in range(len(sorted_loops))
    )
    tree = ContourTree(nodes=nodes)
    logger.debug(
        "Built contour tree: %d nodes, %d roots, max depth %d",
        len(tree),
        len(tree.roots),
        tree.max_depth,
    )
    return tree


def build_polygons(tree: ContourTree) -> HierarchyResult:
    """Assemble polygons from a containment forest.

    Solid nodes get their ring forced counter-clockwise and start a new
    polygon. Hole nodes get their ring forced clockwise and are appended to
    the parent's polygon; a hole whose parent has no polygon is dropped.

    Args:
        tree: Forest from build_contour_tree

    Returns:
        HierarchyResult with polygons and dropped hole indices
    """
    polygons: dict[int, Polygon] = {}
    dropped: list[int] = []

    for node in tree:
        if not node.is_hole:
            outer = with_winding(node.points, WindingDirection.COUNTER_CLOCKWISE)
            polygons[node.index] = Polygon(outer=outer)
        elif node.parent is not None and node.parent in polygons:
            hole = with_winding(node.points, WindingDirection.CLOCKWISE)
            polygons[node.parent] = polygons[node.parent].with_hole(hole)
        else:
            dropped.append(node.index)

    if dropped:
        logger.debug("Dropped %d holes without an enclosing solid", len(dropped))

    return HierarchyResult(
        polygons=tuple(polygons.values()), tree=tree, dropped_holes=tuple(dropped)
    )


def classify_loops(
    loops: Sequence[Loop],
    strategy: ContainmentStrategy | None = None,
) -> HierarchyResult:
    """Build the containment forest and the polygons in one call."""
    return build_polygons(build_contour_tree(loops, strategy))
