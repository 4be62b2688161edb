"""Shared fixtures: synthetic masks, fields and pixel buffers."""

from collections.abc import Callable

import numpy as np
import pytest

from mono3d.domain import Point, ScalarField


def disk_mask(resolution: int, radius: float) -> np.ndarray:
    """Boolean mask of a filled disk centred in the grid."""
    center = (resolution - 1) / 2.0
    rows, cols = np.mgrid[0:resolution, 0:resolution]
    return (cols - center) ** 2 + (rows - center) ** 2 <= radius**2


def square_mask(resolution: int, lo: int, hi: int) -> np.ndarray:
    """Boolean mask with samples lo..hi (inclusive) set on both axes."""
    mask = np.zeros((resolution, resolution), dtype=bool)
    mask[lo : hi + 1, lo : hi + 1] = True
    return mask


def square_with_hole_mask(resolution: int = 32) -> np.ndarray:
    """Filled square with a smaller centred square hole."""
    return square_mask(resolution, 6, 25) & ~square_mask(resolution, 12, 19)


def nested_rings_mask(resolution: int = 32) -> np.ndarray:
    """Solid square, hole inside it, solid island inside the hole."""
    return (
        square_mask(resolution, 2, 29) & ~square_mask(resolution, 7, 24)
    ) | square_mask(resolution, 12, 19)


def mask_to_pixels(mask: np.ndarray) -> bytes:
    """Opaque white-on-black RGBA buffer from a boolean mask."""
    rgba = np.zeros((*mask.shape, 4), dtype=np.uint8)
    rgba[mask, :3] = 255
    rgba[..., 3] = 255
    return rgba.tobytes()


def square_ring(cx: float, cy: float, half: float) -> tuple[Point, ...]:
    """Axis-aligned square ring, counter-clockwise in y-up coordinates."""
    return (
        Point(cx - half, cy - half),
        Point(cx + half, cy - half),
        Point(cx + half, cy + half),
        Point(cx - half, cy + half),
    )


@pytest.fixture
def field_from_mask() -> Callable[[np.ndarray], ScalarField]:
    """Factory turning a boolean mask into a 0/1 ScalarField."""

    def _make(mask: np.ndarray) -> ScalarField:
        return ScalarField(mask.astype(np.float64))

    return _make


@pytest.fixture
def disk_field() -> ScalarField:
    """32x32 field holding a filled disk of radius 8."""
    return ScalarField(disk_mask(32, 8.0).astype(np.float64))


@pytest.fixture
def masks():
    """Namespace of mask builders."""

    class Masks:
        disk = staticmethod(disk_mask)
        square = staticmethod(square_mask)
        square_with_hole = staticmethod(square_with_hole_mask)
        nested_rings = staticmethod(nested_rings_mask)

    return Masks


@pytest.fixture
def to_pixels() -> Callable[[np.ndarray], bytes]:
    """Mask to opaque RGBA buffer converter."""
    return mask_to_pixels


@pytest.fixture
def ring() -> Callable[[float, float, float], tuple[Point, ...]]:
    """Square ring builder."""
    return square_ring
