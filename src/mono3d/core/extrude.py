"""Vector-mode solid construction.

Each polygon is extruded straight up into a closed prism: both caps are
triangulated with their holes by earcut, and every ring edge gets a
two-triangle side wall. The prisms are concatenated and optionally stacked
on a flat base slab covering the whole output footprint.
"""

import logging
from collections.abc import Sequence

import mapbox_earcut
import numpy as np
import trimesh

from mono3d.core.geometry import remove_collinear
from mono3d.domain import Mesh, Polygon, merge_meshes
from mono3d.exceptions import MeshBuildError

logger = logging.getLogger(__name__)


def triangulate_polygon(polygon: Polygon) -> tuple[np.ndarray, np.ndarray, list[tuple[int, int]]]:
    """Triangulate a polygon with holes.

    Collinear vertices are removed from every ring first, so each side wall
    edge matches a cap edge. Holes that collapse to fewer than three
    vertices are dropped.

    Args:
        polygon: Polygon with CCW outer ring and CW holes

    Returns:
        Tuple of (coords, triangles, rings) where coords has shape (N, 2),
        triangles has shape (T, 3) and is wound counter-clockwise, and rings
        lists (start, length) of every ring within coords. All three are
        empty when the outer ring collapses.
    """
    outer = remove_collinear(polygon.outer)
    if not outer:
        return np.zeros((0, 2)), np.zeros((0, 3), dtype=np.int64), []
    holes = [ring for ring in (remove_collinear(hole) for hole in polygon.holes) if ring]

    rings: list[tuple[int, int]] = []
    flat: list[tuple[float, float]] = []
    for ring in (outer, *holes):
        rings.append((len(flat), len(ring)))
        flat.extend(point.to_tuple() for point in ring)

    coords = np.asarray(flat, dtype=np.float64).reshape(-1, 2)
    ring_ends = np.asarray([start + length for start, length in rings], dtype=np.uint32)

    triangles = np.asarray(
        mapbox_earcut.triangulate_float64(coords, ring_ends), dtype=np.int64
    ).reshape(-1, 3)

    if len(triangles):
        a, b, c = coords[triangles[:, 0]], coords[triangles[:, 1]], coords[triangles[:, 2]]
        cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        clockwise = cross < 0
        triangles[clockwise] = triangles[clockwise][:, ::-1]

    return coords, triangles, rings


def _side_faces(rings: list[tuple[int, int]], offset: int) -> np.ndarray:
    faces: list[np.ndarray] = []
    for start, length in rings:
        i0 = start + np.arange(length, dtype=np.int64)
        i1 = start + (np.arange(length, dtype=np.int64) + 1) % length
        faces.append(np.column_stack([i0, i1, i1 + offset]))
        faces.append(np.column_stack([i0, i1 + offset, i0 + offset]))
    if not faces:
        return np.zeros((0, 3), dtype=np.int64)
    return np.vstack(faces)


def extrude_polygon(polygon: Polygon, height: float) -> Mesh:
    """Extrude a polygon into a closed prism from z=0 to z=height.

    The bottom cap faces -z, the top cap faces +z and side walls face away
    from the solid, given the CCW outer / CW hole convention.

    Args:
        polygon: Polygon in world coordinates
        height: Extrusion height, positive

    Returns:
        Non-indexed mesh with flat per-face normals, empty when the outer
        ring has no area
    """
    if height <= 0:
        raise ValueError(f"Extrusion height must be positive, got {height}")

    coords, triangles, rings = triangulate_polygon(polygon)
    n = len(coords)

    vertices = np.vstack(
        [
            np.column_stack([coords, np.zeros(n)]),
            np.column_stack([coords, np.full(n, float(height))]),
        ]
    )
    faces = np.vstack([triangles[:, ::-1], triangles + n, _side_faces(rings, n)])

    return Mesh.from_indexed(vertices, faces)


def build_base_slab(world_size: float, thickness: float) -> Mesh:
    """Build the base plate spanning the full footprint.

    The slab is centred on the origin in x/y and spans z in [0, thickness].

    Args:
        world_size: Side length of the square footprint
        thickness: Slab thickness, positive
    """
    box = trimesh.creation.box(extents=(world_size, world_size, thickness))
    return Mesh.from_indexed(box.vertices, box.faces).translated(dz=thickness / 2.0)


def build_solid_mesh(
    polygons: Sequence[Polygon],
    extrusion_height: float,
    base_thickness: float = 0.0,
    include_base: bool = False,
    world_size: float = 100.0,
) -> Mesh:
    """Extrude all polygons and optionally add a base slab.

    Args:
        polygons: Polygons from the hierarchy builder
        extrusion_height: Height of the extruded shapes
        base_thickness: Slab thickness; shapes are lifted by this amount
        include_base: Whether to add the slab
        world_size: Side length of the slab footprint

    Returns:
        Merged mesh. Empty when there are no polygons. If the slab cannot be
        merged with the shapes, the shapes alone are returned.

    Raises:
        ValueError: If the base is requested with a non-positive thickness
        MeshBuildError: If the extruded shapes themselves cannot be merged
    """
    if include_base and base_thickness <= 0:
        raise ValueError(f"Base thickness must be positive, got {base_thickness}")

    if not polygons:
        return Mesh.empty()

    extrusion = merge_meshes([extrude_polygon(polygon, extrusion_height) for polygon in polygons])

    if not include_base:
        return extrusion

    lifted = extrusion.translated(dz=base_thickness)
    slab = build_base_slab(world_size, base_thickness)

    try:
        return merge_meshes([slab, lifted])
    except MeshBuildError as e:
        logger.warning("Could not merge base slab, returning shapes only: %s", e.reason)
        return lifted
