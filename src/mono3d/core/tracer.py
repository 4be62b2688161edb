"""Iso-contour tracing with marching squares.

Tracing runs in two steps:
1. Cell classification: every 2x2 cell of the field is binarized against
   the threshold and mapped to zero, one or two boundary segments whose
   endpoints sit on cell-edge midpoints (the half-integer lattice).
2. Loop stitching: segments sharing an endpoint are chained into loops
   using a coordinate hash, so the walk is linear in the segment count.

Coordinates are in field space: x grows to the right, y grows downward,
and sample (col, row) sits at integer coordinate (col, row).
"""

import logging
from collections import defaultdict

import numpy as np

from mono3d.domain import Edge, Loop, Point, ScalarField

logger = logging.getLogger(__name__)

# Midpoints of the four cell sides, as offsets from the top-left corner
_TOP = (0.5, 0.0)
_RIGHT = (1.0, 0.5)
_BOTTOM = (0.5, 1.0)
_LEFT = (0.0, 0.5)

# Case code (TL << 3 | TR << 2 | BR << 1 | BL) -> segments through the cell.
# Saddles 5 and 10 always take the same fixed diagonal split.
SEGMENT_TABLE: dict[int, tuple[tuple[tuple[float, float], tuple[float, float]], ...]] = {
    0: (),
    1: ((_LEFT, _BOTTOM),),
    2: ((_BOTTOM, _RIGHT),),
    3: ((_LEFT, _RIGHT),),
    4: ((_TOP, _RIGHT),),
    5: ((_LEFT, _TOP), (_BOTTOM, _RIGHT)),
    6: ((_TOP, _BOTTOM),),
    7: ((_LEFT, _TOP),),
    8: ((_LEFT, _TOP),),
    9: ((_TOP, _BOTTOM),),
    10: ((_TOP, _RIGHT), (_LEFT, _BOTTOM)),
    11: ((_TOP, _RIGHT),),
    12: ((_LEFT, _RIGHT),),
    13: ((_BOTTOM, _RIGHT),),
    14: ((_LEFT, _BOTTOM),),
    15: (),
}

KEY_PRECISION = 2
MIN_LOOP_POINTS = 3


def _coord_key(point: Point) -> tuple[float, float]:
    return (round(point.x, KEY_PRECISION), round(point.y, KEY_PRECISION))


def cell_cases(field: ScalarField, threshold: float) -> np.ndarray:
    """Compute the 4-bit marching-squares case code of every cell.

    Args:
        field: Scalar field to classify
        threshold: Iso-level; corners strictly above it count as inside

    Returns:
        Integer array of shape (resolution - 1, resolution - 1), indexed
        [row, col] by the cell's top-left sample
    """
    inside = (field.values > threshold).astype(np.uint8)
    top_left = inside[:-1, :-1]
    top_right = inside[:-1, 1:]
    bottom_right = inside[1:, 1:]
    bottom_left = inside[1:, :-1]
    return (top_left << 3) | (top_right << 2) | (bottom_right << 1) | bottom_left


def classify_cells(field: ScalarField, threshold: float) -> list[Edge]:
    """Emit the boundary segments of every cell.

    Cells are visited row by row, left to right.

    Args:
        field: Scalar field to trace
        threshold: Iso-level

    Returns:
        Unordered list of boundary edges
    """
    if field.resolution < 2:
        return []

    cases = cell_cases(field, threshold)
    rows, cols = np.nonzero((cases != 0) & (cases != 15))

    edges: list[Edge] = []
    for row, col in zip(rows.tolist(), cols.tolist(), strict=True):
        for (ax, ay), (bx, by) in SEGMENT_TABLE[int(cases[row, col])]:
            edges.append(
                Edge(
                    start=Point(col + ax, row + ay),
                    end=Point(col + bx, row + by),
                )
            )

    return edges


def stitch_loops(edges: list[Edge]) -> list[Loop]:
    """Chain boundary edges into loops.

    Starting from any unused edge, the walk repeatedly picks an unused edge
    touching the current endpoint and continues from its far endpoint until
    none is left. Closed loops are returned without repeating the first
    point; open chains (dead ends from degenerate input) keep both ends.
    Chains shorter than three points are discarded.

    Args:
        edges: Boundary edges in any order

    Returns:
        List of loops in discovery order
    """
    touching: defaultdict[tuple[float, float], list[int]] = defaultdict(list)
    for idx, edge in enumerate(edges):
        touching[_coord_key(edge.start)].append(idx)
        touching[_coord_key(edge.end)].append(idx)

    used = [False] * len(edges)
    loops: list[Loop] = []
    open_chains = 0

    for first_idx, first in enumerate(edges):
        if used[first_idx]:
            continue
        used[first_idx] = True

        chain = [first.start]
        current = first.end

        while True:
            current_key = _coord_key(current)
            next_idx = next(
                (idx for idx in touching[current_key] if not used[idx]),
                None,
            )
            if next_idx is None:
                break

            used[next_idx] = True
            edge = edges[next_idx]
            chain.append(current)
            current = edge.end if _coord_key(edge.start) == current_key else edge.start

        if _coord_key(current) != _coord_key(chain[0]):
            chain.append(current)
            open_chains += 1

        if len(chain) >= MIN_LOOP_POINTS:
            loops.append(tuple(chain))

    if open_chains:
        logger.debug("Stitched %d open chains", open_chains)

    return loops


def trace_contours(field: ScalarField, threshold: float) -> list[Loop]:
    """Trace the iso-contours of ``field`` at ``threshold``.

    Never raises for a well-formed field. A field entirely on one side of
    the threshold has no boundary and yields no loops.

    Args:
        field: Scalar field to trace
        threshold: Iso-level in (0, 1)

    Returns:
        Loops in field coordinates
    """
    edges = classify_cells(field, threshold)
    loops = stitch_loops(edges)
    logger.debug("Traced %d edges into %d loops", len(edges), len(loops))
    return loops
