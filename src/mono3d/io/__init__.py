"""Image and mesh I/O layer for mono3d.

This module handles decoding images with Pillow and writing meshes with
trimesh. It keeps those libraries out of the core pipeline.

Key responsibilities:
- Decode images and resample to the working resolution
- Report undecodable input as ImageDecodeError
- Export meshes as binary STL with a mode-based naming convention

Key classes:
- ImageReader: Load images as RGBA buffers
- MeshWriter: Save meshes
"""

from mono3d.io.reader import ImageReader, read_pixels
from mono3d.io.writer import MeshWriter, to_trimesh

__all__ = [
    "ImageReader",
    "MeshWriter",
    "read_pixels",
    "to_trimesh",
]
