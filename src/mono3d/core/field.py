"""Scalar field construction from RGBA pixel buffers."""

import numpy as np

from mono3d.domain import ScalarField
from mono3d.exceptions import PixelBufferError

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def _pixels_to_rgba(pixels: bytes | bytearray | memoryview, resolution: int) -> np.ndarray:
    if resolution < 1:
        raise ValueError(f"Resolution must be positive, got {resolution}")
    expected = resolution * resolution * 4
    buffer = np.frombuffer(pixels, dtype=np.uint8)
    if buffer.size != expected:
        raise PixelBufferError(expected=expected, actual=int(buffer.size))
    return buffer.reshape(resolution, resolution, 4).astype(np.float64)


def build_scalar_field(
    pixels: bytes | bytearray | memoryview,
    resolution: int,
    contrast: float = 1.0,
    invert: bool = False,
) -> ScalarField:
    """Build the normalized field used for contour tracing.

    Luminance uses the Rec. 601 weights and is multiplied by alpha, so
    transparent pixels fall to 0 (background). Inversion is applied before
    the contrast stretch ``clamp01((v - 0.5) * contrast + 0.5)``, which only
    runs for ``contrast > 1``.

    Args:
        pixels: Interleaved RGBA bytes, row-major from the top-left pixel
        resolution: Side length of the square image
        contrast: Linear contrast factor about the midpoint
        invert: Replace each value v with 1 - v

    Returns:
        ScalarField of shape (resolution, resolution)

    Raises:
        PixelBufferError: If the buffer length is not resolution^2 * 4
    """
    rgba = _pixels_to_rgba(pixels, resolution)

    values = (rgba[..., :3] @ LUMA_WEIGHTS) / 255.0
    values *= rgba[..., 3] / 255.0

    if invert:
        values = 1.0 - values
    if contrast > 1.0:
        values = np.clip((values - 0.5) * contrast + 0.5, 0.0, 1.0)

    return ScalarField(values)


def build_relief_field(
    pixels: bytes | bytearray | memoryview,
    resolution: int,
    invert: bool = False,
) -> ScalarField:
    """Build the field used by the relief (heightfield) mode.

    Uses the plain channel average and ignores alpha, threshold and
    contrast.

    Raises:
        PixelBufferError: If the buffer length is not resolution^2 * 4
    """
    rgba = _pixels_to_rgba(pixels, resolution)

    values = rgba[..., :3].sum(axis=-1) / 3.0 / 255.0
    if invert:
        values = 1.0 - values

    return ScalarField(values)
