"""Mapping between field coordinates and world coordinates."""

from collections.abc import Sequence
from dataclasses import dataclass

from mono3d.domain import Loop, Point


@dataclass(frozen=True)
class WorldTransform:
    """Center-and-scale transform from field space to world space.

    The field spans ``resolution`` samples and maps onto a square of side
    ``world_size`` centred on the origin. The vertical axis is flipped so
    that image "up" becomes world +y.

    Attributes:
        resolution: Field side length in samples
        world_size: Output footprint side length
    """

    resolution: int
    world_size: float

    def __post_init__(self) -> None:
        if self.resolution < 1:
            raise ValueError(f"Resolution must be positive, got {self.resolution}")
        if self.world_size <= 0:
            raise ValueError(f"World size must be positive, got {self.world_size}")

    @property
    def scale(self) -> float:
        """World units per field unit."""
        return self.world_size / self.resolution

    def to_world(self, point: Point) -> Point:
        half = self.resolution / 2.0
        return Point((point.x - half) * self.scale, (half - point.y) * self.scale)

    def to_grid(self, point: Point) -> Point:
        half = self.resolution / 2.0
        return Point(point.x / self.scale + half, half - point.y / self.scale)

    def loop_to_world(self, points: Sequence[Point]) -> Loop:
        return tuple(self.to_world(p) for p in points)

    def loop_to_grid(self, points: Sequence[Point]) -> Loop:
        return tuple(self.to_grid(p) for p in points)
