"""Planar geometry helpers for contour processing.

This module provides the mathematical utilities used by the tracing and
nesting stages:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (ray casting algorithm)
- Winding direction detection and enforcement
- Point-to-segment distance
- Collinear vertex removal for closed rings

All functions are pure and stateless.
"""

import math
from collections.abc import Sequence

from mono3d.domain import Loop, Point, WindingDirection


def signed_area(points: Sequence[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction (y up):
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        >>> signed_area(square)
        1.0
        >>> signed_area(square[::-1])
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts crossings
    with polygon edges. Odd count means inside, even means outside.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise

    Examples:
        >>> square = [Point(0.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> point_in_polygon(Point(1.0, 1.0), square)
        True
        >>> point_in_polygon(Point(3.0, 3.0), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def winding_direction(points: Sequence[Point]) -> WindingDirection:
    """Classify the winding of a ring.

    Degenerate rings (zero area) are reported as counter-clockwise.
    """
    if signed_area(points) < 0:
        return WindingDirection.CLOCKWISE
    return WindingDirection.COUNTER_CLOCKWISE


def with_winding(points: Sequence[Point], direction: WindingDirection) -> Loop:
    """Return the ring as a tuple wound in ``direction``.

    The input is never modified; a reversed copy is returned when the
    current winding differs.
    """
    ring = tuple(points)
    if winding_direction(ring) != direction:
        return ring[::-1]
    return ring


def distance_to_segment(point: Point, seg_start: Point, seg_end: Point) -> float:
    """Euclidean distance from a point to a line segment.

    Projects the point onto the segment's line and clamps the projection to
    the segment endpoints. A zero-length segment degrades to point distance.

    Examples:
        >>> distance_to_segment(Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0))
        1.0
    """
    dx = seg_end.x - seg_start.x
    dy = seg_end.y - seg_start.y

    segment_length_sq = dx * dx + dy * dy
    if segment_length_sq == 0.0:
        return math.hypot(point.x - seg_start.x, point.y - seg_start.y)

    t = ((point.x - seg_start.x) * dx + (point.y - seg_start.y) * dy) / segment_length_sq
    t = max(0.0, min(1.0, t))

    return math.hypot(point.x - (seg_start.x + t * dx), point.y - (seg_start.y + t * dy))


COLLINEAR_EPSILON = 1e-9


def _cross(a: Point, b: Point, c: Point) -> float:
    return (b.x - a.x) * (c.y - b.y) - (b.y - a.y) * (c.x - b.x)


def remove_collinear(points: Sequence[Point], epsilon: float = COLLINEAR_EPSILON) -> Loop:
    """Drop every vertex lying on the line through its two neighbours.

    The ring is treated as closed, so the first and last vertices are
    checked against each other too. Repeated points and zero-width spikes
    have a zero cross product and are removed as well.

    Args:
        points: Closed ring without a repeated closing point
        epsilon: Largest cross product magnitude treated as collinear

    Returns:
        The reduced ring, or an empty tuple if fewer than three vertices
        remain

    Examples:
        >>> ring = [Point(0.0, 0.0), Point(1.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> len(remove_collinear(ring))
        4
    """
    kept: list[Point] = []
    for point in points:
        while len(kept) >= 2 and abs(_cross(kept[-2], kept[-1], point)) <= epsilon:
            kept.pop()
        kept.append(point)

    # Seam between the last and first vertex
    while len(kept) >= 3:
        if abs(_cross(kept[-2], kept[-1], kept[0])) <= epsilon:
            kept.pop()
        elif abs(_cross(kept[-1], kept[0], kept[1])) <= epsilon:
            kept.pop(0)
        else:
            break

    if len(kept) < 3:
        return ()
    return tuple(kept)
