"""Domain models for mono3d.

This module contains the data types passed between pipeline stages. All
models are designed to be:

- Immutable (frozen dataclasses, tuples and read-only numpy arrays)
- Free of references back to earlier stages
- Independent of the image and mesh file libraries

Key classes:
- Point, Edge, Loop: 2D tracing primitives
- ContourInfo, ContourTree: Containment forest with index parent links
- Polygon: Outer ring plus hole rings
- ScalarField: Normalized brightness grid
- Mesh: Non-indexed triangle soup with positions and normals
"""

from mono3d.domain.contour import (
    ContourInfo,
    ContourTree,
    Edge,
    Loop,
    Point,
    Polygon,
    WindingDirection,
)
from mono3d.domain.field import ScalarField
from mono3d.domain.mesh import Mesh, merge_meshes

__all__: list[str] = [
    # Enums
    "WindingDirection",
    # Core types
    "Point",
    "Edge",
    "Loop",
    "ContourInfo",
    "ContourTree",
    "Polygon",
    "ScalarField",
    "Mesh",
    "merge_meshes",
]
