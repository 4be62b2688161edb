"""Relief-mode (lithophane) mesh construction.

The relief mesh is a regular grid with one vertex per field sample,
displaced along z by brightness. It does not use contour tracing.
"""

import numpy as np

from mono3d.domain import Mesh, ScalarField


def grid_faces(resolution: int) -> np.ndarray:
    """Triangle indices for a resolution x resolution vertex grid.

    Vertices are numbered row by row from the top-left. Each cell yields two
    triangles wound counter-clockwise when seen from +z with rows running
    toward -y.
    """
    cells = resolution - 1
    if cells < 1:
        return np.zeros((0, 3), dtype=np.int64)

    rows, cols = np.meshgrid(np.arange(cells), np.arange(cells), indexing="ij")
    a = (rows * resolution + cols).ravel()
    b = a + resolution
    c = b + 1
    d = a + 1
    return np.vstack(
        [np.column_stack([a, b, d]), np.column_stack([b, c, d])]
    ).astype(np.int64)


def vertex_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Average adjacent face normals at every vertex.

    Face normals are left unnormalized before summing, so larger faces
    weigh more. Vertices with no adjacent face get a zero normal.
    """
    tri = vertices[faces]
    face_normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])

    normals = np.zeros_like(vertices)
    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return normals / np.where(lengths > 0.0, lengths, 1.0)


def build_heightfield_mesh(
    field: ScalarField,
    height_scale: float,
    base_thickness: float = 0.0,
    world_size: float = 100.0,
) -> Mesh:
    """Displace a grid by the field values.

    Vertex (col, row) sits at world x/y spanning ``world_size`` centred on
    the origin with row 0 at the top (+y), and at
    ``z = value * height_scale + base_thickness``.

    Args:
        field: Relief field, typically from build_relief_field
        height_scale: Relief amplitude
        base_thickness: Constant z offset
        world_size: Side length of the square footprint

    Returns:
        Non-indexed mesh with smoothed vertex normals. Empty for a field
        with fewer than two samples per side.
    """
    resolution = field.resolution
    if resolution < 2:
        return Mesh.empty()

    half = world_size / 2.0
    axis = np.linspace(-half, half, resolution)
    xs, ys = np.meshgrid(axis, -axis, indexing="xy")
    zs = field.values * height_scale + base_thickness

    vertices = np.column_stack([xs.ravel(), ys.ravel(), zs.ravel()])
    faces = grid_faces(resolution)

    return Mesh.from_indexed(vertices, faces, vertex_normals=vertex_normals(vertices, faces))
