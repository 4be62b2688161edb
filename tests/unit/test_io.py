"""Unit tests for the image and mesh I/O layer.

Tests for ImageReader, read_pixels and MeshWriter.
"""

from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest
import trimesh
from PIL import Image

from mono3d.config import OutputMode
from mono3d.core.extrude import extrude_polygon
from mono3d.domain import Mesh, Polygon
from mono3d.exceptions import ImageDecodeError, MeshExportError
from mono3d.io import ImageReader, MeshWriter, read_pixels
from mono3d.io.writer import to_trimesh


@pytest.fixture
def png_path(tmp_path: Path) -> Path:
    """A 40x20 RGB image, white on the left half."""
    image = Image.new("RGB", (40, 20), (0, 0, 0))
    image.paste((255, 255, 255), (0, 0, 20, 20))
    path = tmp_path / "half.png"
    image.save(path)
    return path


@pytest.fixture
def prism(ring) -> Mesh:
    return extrude_polygon(Polygon(outer=ring(0.0, 0.0, 5.0)), 2.0)


class TestImageReader:
    """Tests for ImageReader class."""

    def test_init(self):
        """Test ImageReader initialization."""
        reader = ImageReader(Path("logo.png"), 64)
        assert reader._image_path == Path("logo.png")
        assert reader._image is None
        assert reader.resolution == 64

    def test_invalid_resolution(self):
        """Test a non-positive resolution is rejected."""
        with pytest.raises(ValueError):
            ImageReader(Path("logo.png"), 0)

    def test_load_nonexistent_file(self, tmp_path):
        """Test loading a missing file raises ImageDecodeError."""
        reader = ImageReader(tmp_path / "missing.png", 16)
        with pytest.raises(ImageDecodeError, match="file not found"):
            reader.load()

    def test_load_garbage_file(self, tmp_path):
        """Test loading a non-image file raises ImageDecodeError."""
        path = tmp_path / "notes.png"
        path.write_bytes(b"this is not an image")
        reader = ImageReader(path, 16)
        with pytest.raises(ImageDecodeError) as exc_info:
            reader.load()
        assert exc_info.value.path == str(path)

    def test_source_size_before_load(self):
        """Test accessing source_size before loading raises RuntimeError."""
        reader = ImageReader(Path("logo.png"), 16)
        with pytest.raises(RuntimeError, match="Image not loaded"):
            _ = reader.source_size

    def test_pixels_before_load(self):
        """Test reading pixels before loading raises RuntimeError."""
        reader = ImageReader(Path("logo.png"), 16)
        with pytest.raises(RuntimeError, match="Image not loaded"):
            reader.pixels()

    def test_source_size(self, png_path):
        """Test the decoded image size is reported."""
        reader = ImageReader(png_path, 16)
        reader.load()
        assert reader.source_size == (40, 20)

    def test_pixels_length_and_alpha(self, png_path):
        """RGB input is converted to opaque RGBA at the target resolution."""
        reader = ImageReader(png_path, 16)
        reader.load()
        pixels = reader.pixels()

        assert len(pixels) == 16 * 16 * 4
        rgba = np.frombuffer(pixels, dtype=np.uint8).reshape(16, 16, 4)
        assert np.all(rgba[..., 3] == 255)

    def test_pixels_are_stretched(self, png_path):
        """The wide image is stretched, so the left half stays bright."""
        with ImageReader(png_path, 16) as reader:
            rgba = np.frombuffer(reader.pixels(), dtype=np.uint8).reshape(16, 16, 4)

        assert rgba[8, 2, 0] > 200
        assert rgba[8, 13, 0] < 50

    def test_context_manager_closes(self, png_path):
        """Test leaving the context releases the image."""
        with ImageReader(png_path, 8) as reader:
            reader.pixels()
        with pytest.raises(RuntimeError):
            reader.pixels()

    def test_read_pixels(self, png_path):
        """Test the one-call helper returns a full buffer."""
        assert len(read_pixels(png_path, 10)) == 400


class TestMeshWriter:
    """Tests for MeshWriter class."""

    def test_init(self, tmp_path):
        """Test MeshWriter initialization."""
        path = tmp_path / "out.stl"
        writer = MeshWriter(path)
        assert writer.output_path == path

    def test_write_round_trip(self, tmp_path, prism):
        """Test a written STL loads back with the same faces."""
        path = tmp_path / "nested" / "prism.stl"
        written = MeshWriter(path).write(prism)

        assert written == path
        assert path.exists()
        loaded = trimesh.load(path, file_type="stl")
        assert len(loaded.faces) == prism.triangle_count

    def test_written_mesh_is_watertight(self, tmp_path, prism):
        """Test a closed prism stays closed after export."""
        path = tmp_path / "prism.stl"
        MeshWriter(path).write(prism)
        loaded = trimesh.load(path, file_type="stl")
        assert loaded.is_watertight
        assert loaded.volume == pytest.approx(100.0 * 2.0)

    def test_write_empty_mesh(self, tmp_path):
        """Test writing an empty mesh raises MeshExportError."""
        path = tmp_path / "empty.stl"
        with pytest.raises(MeshExportError, match="empty"):
            MeshWriter(path).write(Mesh.empty())
        assert not path.exists()

    def test_write_os_error(self, tmp_path, prism):
        """Test filesystem failures are wrapped in MeshExportError."""
        writer = MeshWriter(tmp_path / "out.stl")
        with patch.object(trimesh.Trimesh, "export", side_effect=OSError("disk full")):
            with pytest.raises(MeshExportError, match="disk full"):
                writer.write(prism)

    def test_to_trimesh_keeps_soup(self, prism):
        """Test the wrapper keeps one vertex per triangle corner."""
        wrapped = to_trimesh(prism)
        assert len(wrapped.vertices) == prism.vertex_count
        assert len(wrapped.faces) == prism.triangle_count

    @pytest.mark.parametrize(
        "mode,expected",
        [(OutputMode.VECTOR, "logo-vector.stl"), (OutputMode.RELIEF, "logo-relief.stl")],
    )
    def test_get_output_path(self, mode, expected):
        """Test default output path derivation."""
        result = MeshWriter.get_output_path(Path("art/logo.png"), mode)
        assert result == Path("art") / expected
