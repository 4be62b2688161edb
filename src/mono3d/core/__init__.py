"""Core processing algorithms for mono3d.

This module contains the core algorithms for:

- Scalar field construction (luminance, alpha, inversion, contrast)
- Contour tracing (marching squares and loop stitching)
- Path simplification (Douglas-Peucker)
- Polygon hierarchy (even-odd nesting and winding enforcement)
- Mesh construction (vector extrusion and relief heightfield)

All stage functions are:
- Stateless (safe to call concurrently on independent inputs)
- Pure (inputs are never modified)
- Deterministic

Key functions:
- build_scalar_field / build_relief_field: Pixels to ScalarField
- trace_contours: ScalarField to loops
- simplify_loop: Douglas-Peucker simplification
- build_contour_tree / build_polygons: Loops to nested polygons
- build_solid_mesh / build_heightfield_mesh: Geometry to Mesh

Key classes:
- MeshPipeline: Runs the stages selected by MeshSettings
- WorldTransform: Field space to world space mapping
- ScanContainment: Default containment strategy
"""

from mono3d.core.extrude import build_base_slab, build_solid_mesh, extrude_polygon
from mono3d.core.field import build_relief_field, build_scalar_field
from mono3d.core.geometry import (
    distance_to_segment,
    point_in_polygon,
    signed_area,
    winding_direction,
    with_winding,
)
from mono3d.core.heightfield import build_heightfield_mesh
from mono3d.core.hierarchy import (
    ContainmentStrategy,
    HierarchyResult,
    ScanContainment,
    build_contour_tree,
    build_polygons,
    classify_loops,
)
from mono3d.core.pipeline import MeshPipeline, MeshResult, convert_pixels
from mono3d.core.simplify import simplify_loop
from mono3d.core.tracer import classify_cells, stitch_loops, trace_contours
from mono3d.core.transform import WorldTransform

__all__ = [
    # Hierarchy classes
    "ContainmentStrategy",
    "HierarchyResult",
    # Pipeline classes
    "MeshPipeline",
    "MeshResult",
    "ScanContainment",
    "WorldTransform",
    # Mesh builders
    "build_base_slab",
    "build_contour_tree",
    "build_heightfield_mesh",
    "build_polygons",
    "build_relief_field",
    "build_scalar_field",
    "build_solid_mesh",
    "classify_cells",
    "classify_loops",
    "convert_pixels",
    "distance_to_segment",
    "extrude_polygon",
    "point_in_polygon",
    "signed_area",
    "simplify_loop",
    "stitch_loops",
    "trace_contours",
    "winding_direction",
    "with_winding",
]
