"""Triangle mesh representation.

A Mesh is a non-indexed triangle soup carrying exactly two per-vertex
attributes, position and normal. Every three consecutive vertices form one
triangle. Meshes are never modified in place: transforms and merges return
new instances.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from mono3d.exceptions import MeshBuildError


def _readonly(array: NDArray[np.float64]) -> NDArray[np.float64]:
    result = np.array(array, dtype=np.float64, copy=True)
    result.setflags(write=False)
    return result


def _normalize_rows(vectors: NDArray[np.float64]) -> NDArray[np.float64]:
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    safe = np.where(lengths > 0.0, lengths, 1.0)
    return vectors / safe


@dataclass(frozen=True)
class Mesh:
    """Non-indexed triangle mesh with positions and normals.

    Attributes:
        positions: Array of shape (N, 3), N a multiple of 3
        normals: Array of shape (N, 3)
    """

    positions: NDArray[np.float64]
    normals: NDArray[np.float64]

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", _readonly(self.positions))
        object.__setattr__(self, "normals", _readonly(self.normals))

    @classmethod
    def empty(cls) -> "Mesh":
        """Mesh with no triangles."""
        return cls(positions=np.zeros((0, 3)), normals=np.zeros((0, 3)))

    @classmethod
    def from_indexed(
        cls,
        vertices: NDArray[np.float64],
        faces: NDArray[np.int64],
        vertex_normals: NDArray[np.float64] | None = None,
    ) -> "Mesh":
        """Expand an indexed triangle list into a soup.

        Args:
            vertices: Array of shape (V, 3)
            faces: Array of shape (F, 3) of vertex indices
            vertex_normals: Optional per-vertex normals of shape (V, 3). When
                omitted, each triangle gets its flat face normal.

        Returns:
            Mesh with 3 * F vertices
        """
        vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
        if len(faces) == 0:
            return cls.empty()

        positions = vertices[faces].reshape(-1, 3)
        if vertex_normals is not None:
            normals = np.asarray(vertex_normals, dtype=np.float64)[faces].reshape(-1, 3)
        else:
            tri = vertices[faces]
            face_normals = _normalize_rows(
                np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
            )
            normals = np.repeat(face_normals, 3, axis=0)
        return cls(positions=positions, normals=normals)

    @property
    def vertex_count(self) -> int:
        """Number of vertices (three per triangle)."""
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        """Number of triangles."""
        return self.vertex_count // 3

    def is_empty(self) -> bool:
        """True when the mesh holds no triangles."""
        return self.vertex_count == 0

    def triangles(self) -> NDArray[np.float64]:
        """Positions grouped per triangle, shape (T, 3, 3)."""
        return self.positions.reshape(-1, 3, 3)

    def bounds(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Axis-aligned bounding box as (min, max).

        Raises:
            ValueError: If the mesh is empty
        """
        if self.is_empty():
            raise ValueError("Empty mesh has no bounds")
        return self.positions.min(axis=0), self.positions.max(axis=0)

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Mesh":
        """Return a copy moved by (dx, dy, dz)."""
        offset = np.array([dx, dy, dz], dtype=np.float64)
        return Mesh(positions=self.positions + offset, normals=self.normals)

    def has_valid_layout(self) -> bool:
        """True when positions and normals describe whole triangles."""
        return (
            self.positions.ndim == 2
            and self.positions.shape[1:] == (3,)
            and self.normals.shape == self.positions.shape
            and self.vertex_count % 3 == 0
        )


def merge_meshes(meshes: Sequence[Mesh]) -> Mesh:
    """Concatenate meshes into one.

    Pure: the inputs are left untouched.

    Args:
        meshes: Meshes to combine, in order

    Returns:
        A mesh holding every triangle of every input

    Raises:
        MeshBuildError: If there is nothing to merge or an input has an
            incompatible attribute layout
    """
    if not meshes:
        raise MeshBuildError("no meshes to merge")

    for idx, mesh in enumerate(meshes):
        if not mesh.has_valid_layout():
            raise MeshBuildError(
                f"mesh {idx} has incompatible layout "
                f"(positions {mesh.positions.shape}, normals {mesh.normals.shape})"
            )

    return Mesh(
        positions=np.concatenate([m.positions for m in meshes], axis=0),
        normals=np.concatenate([m.normals for m in meshes], axis=0),
    )
