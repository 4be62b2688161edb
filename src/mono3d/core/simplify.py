"""Douglas-Peucker polyline simplification."""

from collections.abc import Sequence

from mono3d.core.geometry import distance_to_segment
from mono3d.domain import Loop, Point


def _farthest_point(points: Loop, start: int, end: int) -> tuple[int, float]:
    first, last = points[start], points[end]
    max_dist = 0.0
    split = start
    for i in range(start + 1, end):
        dist = distance_to_segment(points[i], first, last)
        if dist > max_dist:
            max_dist = dist
            split = i
    return split, max_dist


def simplify_loop(points: Sequence[Point], tolerance: float) -> Loop:
    """Simplify a polyline with the Douglas-Peucker algorithm.

    The interior point farthest from the chord joining the first and last
    points is kept when its distance exceeds ``tolerance`` and both halves
    are simplified the same way; otherwise the range collapses to its two
    endpoints. Endpoints are never moved.

    Ranges are processed from an explicit stack of (start, end) indices into
    an immutable copy of the input, so long loops cannot exhaust the
    interpreter's recursion limit. The output is the same as the textbook
    recursive formulation.

    With ``tolerance == 0`` only points lying exactly on the chord are
    removed.

    Args:
        points: Polyline to simplify
        tolerance: Maximum allowed deviation, in the points' units

    Returns:
        New tuple of points

    Raises:
        ValueError: If tolerance is negative
    """
    if tolerance < 0:
        raise ValueError(f"Tolerance must be non-negative, got {tolerance}")

    backing = tuple(points)
    n = len(backing)
    if n <= 2:
        return backing

    keep = [False] * n
    keep[0] = keep[-1] = True
    ranges = [(0, n - 1)]

    while ranges:
        start, end = ranges.pop()
        split, max_dist = _farthest_point(backing, start, end)
        if max_dist > tolerance:
            keep[split] = True
            ranges.append((start, split))
            ranges.append((split, end))

    return tuple(point for point, kept in zip(backing, keep, strict=True) if kept)
