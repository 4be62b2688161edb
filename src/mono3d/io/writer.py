"""Mesh writer for saving STL files.

This module provides the MeshWriter class, which hands the triangle soup
to trimesh for binary STL serialization.
"""

from pathlib import Path

import numpy as np
import trimesh

from mono3d.config import OutputMode
from mono3d.domain import Mesh
from mono3d.exceptions import MeshExportError


def to_trimesh(mesh: Mesh) -> trimesh.Trimesh:
    """Wrap a triangle soup in a trimesh object without merging vertices."""
    faces = np.arange(mesh.vertex_count, dtype=np.int64).reshape(-1, 3)
    return trimesh.Trimesh(
        vertices=np.array(mesh.positions),
        faces=faces,
        process=False,
    )


class MeshWriter:
    """Writes meshes as binary STL.

    Example:
        writer = MeshWriter(Path("logo-vector.stl"))
        writer.write(mesh)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the mesh writer.

        Args:
            output_path: Path where the STL will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        """Destination file."""
        return self._output_path

    def write(self, mesh: Mesh) -> Path:
        """Serialize ``mesh`` to the output path.

        Args:
            mesh: Mesh to save

        Returns:
            The path written

        Raises:
            MeshExportError: If the mesh is empty or the file cannot be written
        """
        if mesh.is_empty():
            raise MeshExportError(str(self._output_path), "mesh is empty, nothing to export")

        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            to_trimesh(mesh).export(str(self._output_path), file_type="stl")
        except OSError as e:
            raise MeshExportError(str(self._output_path), str(e)) from e

        return self._output_path

    @staticmethod
    def get_output_path(input_path: Path, mode: OutputMode) -> Path:
        """Derive the default output path for an input image.

        Args:
            input_path: Source image path
            mode: Output mode used for the conversion

        Returns:
            Path like ``logo-vector.stl`` next to the input

        Examples:
            >>> MeshWriter.get_output_path(Path("art/logo.png"), OutputMode.VECTOR)
            PosixPath('art/logo-vector.stl')
        """
        return input_path.with_name(f"{input_path.stem}-{mode.value}.stl")
