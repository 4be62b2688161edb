"""Image reader for loading raster images as RGBA pixel buffers.

This module provides the ImageReader class for decoding image files with
Pillow and resampling them onto the square grid the pipeline expects.
"""

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from mono3d.exceptions import ImageDecodeError


class ImageReader:
    """Loads images and produces RGBA buffers at a fixed resolution.

    The image is stretched onto a ``resolution x resolution`` square with
    high-quality resampling, matching how the buffer's pixels are later
    interpreted by the field builders.

    Example:
        reader = ImageReader(Path("logo.png"), resolution=256)
        reader.load()
        pixels = reader.pixels()
    """

    def __init__(self, image_path: Path, resolution: int) -> None:
        """Initialize the image reader.

        Args:
            image_path: Path to the image file
            resolution: Side length of the output buffer in pixels
        """
        if resolution < 1:
            raise ValueError(f"Resolution must be positive, got {resolution}")
        self._image_path = image_path
        self._resolution = resolution
        self._image: Image.Image | None = None

    def load(self) -> None:
        """Decode the image file.

        Raises:
            ImageDecodeError: If the file is missing or cannot be decoded
        """
        if not self._image_path.exists():
            raise ImageDecodeError(str(self._image_path), "file not found")

        try:
            with Image.open(self._image_path) as image:
                image.load()
                self._image = image.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageDecodeError(str(self._image_path), str(e)) from e

    @property
    def source_size(self) -> tuple[int, int]:
        """Original (width, height) of the decoded image.

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        if self._image is None:
            raise RuntimeError("Image not loaded. Call load() first.")
        return self._image.size

    @property
    def resolution(self) -> int:
        """Side length of the produced buffer."""
        return self._resolution

    def pixels(self) -> bytes:
        """Return interleaved RGBA bytes of length resolution^2 * 4.

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        if self._image is None:
            raise RuntimeError("Image not loaded. Call load() first.")

        resized = self._image.resize(
            (self._resolution, self._resolution),
            Image.Resampling.LANCZOS,
        )
        return resized.tobytes()

    def close(self) -> None:
        """Release the decoded image."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "ImageReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def read_pixels(image_path: Path, resolution: int) -> bytes:
    """Decode ``image_path`` into an RGBA buffer in one call.

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    with ImageReader(image_path, resolution) as reader:
        return reader.pixels()
