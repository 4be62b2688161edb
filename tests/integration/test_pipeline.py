"""End-to-end pipeline tests on synthetic images.

These tests push RGBA buffers built from boolean masks through MeshPipeline
and check the traced hierarchy and the resulting meshes.
"""

import warnings

import numpy as np
import pytest
import trimesh
from pydantic import ValidationError

from mono3d.config import MeshSettings, OutputMode
from mono3d.core import MeshPipeline, convert_pixels
from mono3d.core.extrude import extrude_polygon
from mono3d.core.geometry import signed_area
from mono3d.exceptions import EmptyResultWarning, PixelBufferError

RESOLUTION = 32


@pytest.fixture
def settings() -> MeshSettings:
    """Binary-mask friendly settings at a small resolution."""
    return MeshSettings(
        resolution=RESOLUTION,
        mask_threshold=0.5,
        contrast=1.0,
        simplification=0.15,
        height_scale=10.0,
        base_thickness=2.0,
        enable_base=False,
    )


@pytest.fixture
def pipeline(settings) -> MeshPipeline:
    return MeshPipeline(settings)


def enclosed_volume(positions: np.ndarray) -> float:
    tri = positions.reshape(-1, 3, 3)
    return float(np.einsum("ij,ij->i", tri[:, 0], np.cross(tri[:, 1], tri[:, 2])).sum() / 6.0)


class TestVectorScenarios:
    """Vector-mode conversions of simple shapes."""

    def test_field_entirely_above_threshold(self, pipeline, to_pixels) -> None:
        """A fully bright image has no boundary and yields an empty mesh."""
        pixels = to_pixels(np.ones((RESOLUTION, RESOLUTION), dtype=bool))

        with pytest.warns(EmptyResultWarning, match="No contours"):
            result = pipeline.run(pixels)

        assert result.is_empty
        assert result.mode == OutputMode.VECTOR
        assert result.hierarchy is not None
        assert result.hierarchy.polygons == ()
        assert len(result.warnings) == 1

    def test_fully_dark_image_is_empty(self, pipeline, to_pixels) -> None:
        """A fully dark image is also empty, not an error."""
        pixels = to_pixels(np.zeros((RESOLUTION, RESOLUTION), dtype=bool))
        with pytest.warns(EmptyResultWarning):
            result = pipeline.run(pixels)
        assert result.is_empty

    def test_single_disk(self, pipeline, masks, to_pixels) -> None:
        """A filled disk becomes one solid polygon without holes."""
        result = pipeline.run(to_pixels(masks.disk(RESOLUTION, 8.0)))

        tree = result.hierarchy.tree
        assert len(tree) == 1
        assert tree[0].depth == 0
        assert tree[0].is_hole is False
        assert len(result.hierarchy.polygons) == 1
        assert result.hierarchy.polygons[0].holes == ()
        assert not result.is_empty

    def test_square_with_hole(self, pipeline, masks, to_pixels) -> None:
        """A square with a centred hole becomes one polygon with one hole."""
        result = pipeline.run(to_pixels(masks.square_with_hole(RESOLUTION)))

        tree = result.hierarchy.tree
        assert [node.depth for node in tree] == [0, 1]
        assert [node.is_hole for node in tree] == [False, True]

        (polygon,) = result.hierarchy.polygons
        assert len(polygon.holes) == 1
        assert signed_area(polygon.outer) > 0
        assert signed_area(polygon.holes[0]) < 0

    def test_nested_rings(self, pipeline, masks, to_pixels) -> None:
        """Solid, hole, solid nest as depths 0, 1, 2 and give two polygons."""
        result = pipeline.run(to_pixels(masks.nested_rings(RESOLUTION)))

        tree = result.hierarchy.tree
        assert [node.depth for node in tree] == [0, 1, 2]
        assert len(result.hierarchy.polygons) == 2

        outer, island = result.hierarchy.polygons
        assert len(outer.holes) == 1
        assert island.holes == ()
        assert result.stats.max_depth == 2

    def test_base_adds_vertices(self, settings, masks, to_pixels) -> None:
        """Enabling the base slab strictly increases the vertex count."""
        pixels = to_pixels(masks.disk(RESOLUTION, 8.0))
        without = MeshPipeline(settings).run(pixels)
        with_base = MeshPipeline(settings.merged_with({"enable_base": True})).run(pixels)

        assert with_base.mesh.vertex_count > without.mesh.vertex_count
        low, high = with_base.mesh.bounds()
        assert low.tolist() == pytest.approx([-50.0, -50.0, 0.0])
        assert high[2] == pytest.approx(12.0)

    def test_base_requires_thickness(self, settings) -> None:
        """A base slab without thickness is refused at configuration time."""
        with pytest.raises(ValidationError, match="base_thickness"):
            MeshSettings(resolution=RESOLUTION, base_thickness=0.0)
        with pytest.raises(ValidationError, match="base_thickness"):
            settings.merged_with({"enable_base": True, "base_thickness": 0.0})

        flat = settings.merged_with({"base_thickness": 0.0})
        relief = settings.merged_with({"flat_top": False, "enable_base": True, "base_thickness": 0.0})
        assert flat.base_thickness == 0.0
        assert relief.base_thickness == 0.0

    @pytest.mark.parametrize("shape", ["square_with_hole", "nested_rings"])
    def test_solids_are_watertight(self, pipeline, masks, to_pixels, shape: str) -> None:
        """Every extruded polygon closes up once coincident vertices merge."""
        result = pipeline.run(to_pixels(getattr(masks, shape)(RESOLUTION)))

        for polygon in result.hierarchy.polygons:
            solid = extrude_polygon(polygon, 10.0)
            faces = np.arange(solid.vertex_count).reshape(-1, 3)
            merged = trimesh.Trimesh(vertices=solid.positions, faces=faces, process=False)
            merged.merge_vertices()
            assert merged.is_watertight

        faces = np.arange(result.mesh.vertex_count).reshape(-1, 3)
        whole = trimesh.Trimesh(vertices=result.mesh.positions, faces=faces)
        assert whole.is_watertight

    def test_volume_matches_polygon_area(self, pipeline, masks, to_pixels) -> None:
        """The extruded solid encloses net polygon area times height."""
        result = pipeline.run(to_pixels(masks.square_with_hole(RESOLUTION)))

        net_area = sum(
            signed_area(polygon.outer) + sum(signed_area(hole) for hole in polygon.holes)
            for polygon in result.hierarchy.polygons
        )
        assert enclosed_volume(result.mesh.positions) == pytest.approx(net_area * 10.0)

    def test_footprint_in_world_space(self, pipeline, masks, to_pixels) -> None:
        """Traced shapes are centred and scaled into the world square."""
        result = pipeline.run(to_pixels(masks.square(RESOLUTION, 6, 25)))
        low, high = result.mesh.bounds()

        scale = 100.0 / RESOLUTION
        assert low[0] == pytest.approx((5.5 - 16) * scale)
        assert high[0] == pytest.approx((25.5 - 16) * scale)
        assert low[1] == pytest.approx((16 - 25.5) * scale)
        assert high[1] == pytest.approx((16 - 5.5) * scale)
        assert (low[2], high[2]) == (0.0, 10.0)

    def test_no_warnings_for_normal_input(self, pipeline, masks, to_pixels) -> None:
        """A regular image converts without any warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = pipeline.run(to_pixels(masks.nested_rings(RESOLUTION)))
        assert result.warnings == []

    def test_invert_traces_same_outline(self, settings, masks, to_pixels) -> None:
        """Inverting a disk image traces the same single outline."""
        pixels = to_pixels(masks.disk(RESOLUTION, 8.0))
        result = MeshPipeline(settings.merged_with({"invert": True})).run(pixels)

        # The bright frame touches the border, so its outline is the disk only
        assert len(result.hierarchy.tree) == 1
        assert not result.is_empty


class TestPipelineStats:
    """Statistics gathered during a run."""

    def test_stats_populated(self, pipeline, masks, to_pixels) -> None:
        """Counters and timings are recorded for every stage."""
        result = pipeline.run(to_pixels(masks.square_with_hole(RESOLUTION)))
        stats = result.stats

        assert stats.mode == "vector"
        assert stats.loops_traced == 2
        assert stats.loops_kept == 2
        assert stats.polygon_count == 1
        assert stats.hole_count == 1
        assert stats.points_after <= stats.points_before
        assert stats.triangle_count == result.mesh.triangle_count
        assert {"field", "trace", "simplify", "hierarchy", "extrude"} <= set(stats.stage_ms)

    def test_simplification_reduces_points(self, settings, masks, to_pixels) -> None:
        """A larger tolerance keeps fewer points."""
        pixels = to_pixels(masks.disk(RESOLUTION, 10.0))
        exact = MeshPipeline(settings.merged_with({"simplification": 0.0})).run(pixels)
        coarse = MeshPipeline(settings.merged_with({"simplification": 1.0})).run(pixels)

        assert coarse.stats.points_after < exact.stats.points_after
        assert coarse.stats.reduction_ratio > 0.0


class TestReliefMode:
    """Relief (heightfield) conversions."""

    def test_relief_grid(self, settings, masks, to_pixels) -> None:
        """Relief mode displaces the full grid and ignores the threshold."""
        relief = settings.merged_with({"flat_top": False})
        result = MeshPipeline(relief).run(to_pixels(masks.disk(RESOLUTION, 8.0)))

        assert result.mode == OutputMode.RELIEF
        assert result.hierarchy is None
        assert result.mesh.triangle_count == 2 * (RESOLUTION - 1) ** 2
        low, high = result.mesh.bounds()
        assert low[2] == pytest.approx(2.0)
        assert high[2] == pytest.approx(12.0)

    def test_relief_of_blank_image_is_not_empty(self, settings, to_pixels) -> None:
        """Relief mode never reports an empty result."""
        relief = settings.merged_with({"flat_top": False})
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = MeshPipeline(relief).run(to_pixels(np.zeros((RESOLUTION, RESOLUTION), dtype=bool)))
        assert not result.is_empty


class TestPipelineContract:
    """Input validation and determinism."""

    def test_wrong_buffer_length(self, pipeline) -> None:
        """A buffer not matching the resolution is rejected."""
        with pytest.raises(PixelBufferError):
            pipeline.run(bytes(RESOLUTION * RESOLUTION * 3))

    def test_deterministic(self, pipeline, masks, to_pixels) -> None:
        """Repeated runs on the same input give identical meshes."""
        pixels = to_pixels(masks.nested_rings(RESOLUTION))
        first = pipeline.run(pixels)
        second = pipeline.run(pixels)

        assert np.array_equal(first.mesh.positions, second.mesh.positions)
        assert np.array_equal(first.mesh.normals, second.mesh.normals)
        assert first.hierarchy.polygons == second.hierarchy.polygons

    def test_convert_pixels_defaults(self, masks, to_pixels) -> None:
        """The one-shot helper uses default settings when none are given."""
        mask = masks.disk(512, 100.0)
        result = convert_pixels(to_pixels(mask))
        assert result.mode == OutputMode.VECTOR
        assert len(result.hierarchy.polygons) == 1
