"""Image-to-mesh orchestration.

This module ties the stages together for one conversion:

    pixels -> ScalarField -> edges -> loops -> simplified loops
           -> world loops -> ContourTree -> Polygons -> Mesh

or, in relief mode, pixels -> relief ScalarField -> heightfield Mesh.

Key components:
- MeshResult: Mesh plus the statistics and warnings of the run
- MeshPipeline: Runs the stages selected by MeshSettings
- convert_pixels: One-shot convenience wrapper
"""

import time
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import structlog

from mono3d.config import MeshSettings, OutputMode, get_default_settings
from mono3d.core.extrude import build_solid_mesh
from mono3d.core.field import build_relief_field, build_scalar_field
from mono3d.core.heightfield import build_heightfield_mesh
from mono3d.core.hierarchy import (
    ContainmentStrategy,
    HierarchyResult,
    build_contour_tree,
    build_polygons,
)
from mono3d.core.simplify import simplify_loop
from mono3d.core.tracer import MIN_LOOP_POINTS, classify_cells, stitch_loops
from mono3d.core.transform import WorldTransform
from mono3d.domain import Loop, Mesh, ScalarField
from mono3d.exceptions import DroppedHoleWarning, EmptyResultWarning
from mono3d.utils import PipelineLogger, PipelineStats


@dataclass(frozen=True)
class MeshResult:
    """Outcome of one conversion.

    Attributes:
        mesh: The generated mesh (possibly empty)
        mode: Output mode that produced it
        stats: Counters and stage timings
        hierarchy: Polygon classification (vector mode only)
    """

    mesh: Mesh
    mode: OutputMode
    stats: PipelineStats = field(default_factory=PipelineStats)
    hierarchy: HierarchyResult | None = None

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to export."""
        return self.mesh.is_empty()

    @property
    def warnings(self) -> list[str]:
        """Warnings raised while building."""
        return self.stats.warnings


class MeshPipeline:
    """Runs the image-to-mesh stages for one set of settings.

    A pipeline holds no state between calls apart from its settings and
    logger, so the same instance can convert several buffers.

    Example:
        pipeline = MeshPipeline(MeshSettings(resolution=256))
        result = pipeline.run(pixels)
        if not result.is_empty:
            MeshWriter(Path("out.stl")).write(result.mesh)
    """

    def __init__(
        self,
        settings: MeshSettings,
        strategy: ContainmentStrategy | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Conversion settings
            strategy: Containment search for the hierarchy builder
            logger: Structured logger (defaults to the "mono3d" logger)
        """
        self.settings = settings
        self.strategy = strategy
        self.logger = logger or structlog.get_logger("mono3d")
        self.transform = WorldTransform(
            resolution=settings.resolution,
            world_size=settings.world_size,
        )

    @contextmanager
    def _stage(self, tracker: PipelineLogger, name: str) -> Iterator[None]:
        start = time.perf_counter()
        yield
        tracker.log_stage(name, (time.perf_counter() - start) * 1000)

    def build_field(self, pixels: bytes) -> ScalarField:
        """Build the tracing field for ``pixels``."""
        return build_scalar_field(
            pixels,
            self.settings.resolution,
            contrast=self.settings.contrast,
            invert=self.settings.invert,
        )

    def trace(self, field: ScalarField, tracker: PipelineLogger | None = None) -> list[Loop]:
        """Trace, simplify and normalize loops to world coordinates.

        Loops that simplify to fewer than three points are discarded.
        """
        tracker = tracker or PipelineLogger(self.logger)

        with self._stage(tracker, "trace"):
            edges = classify_cells(field, self.settings.mask_threshold)
            loops = stitch_loops(edges)

        with self._stage(tracker, "simplify"):
            simplified = [simplify_loop(loop, self.settings.simplification) for loop in loops]
            kept = [
                self.transform.loop_to_world(loop)
                for loop in simplified
                if len(loop) >= MIN_LOOP_POINTS
            ]

        tracker.log_contours(
            edges=len(edges),
            loops=len(loops),
            kept=len(kept),
            points_before=sum(len(loop) for loop in loops),
            points_after=sum(len(loop) for loop in kept),
        )
        return kept

    def classify(self, loops: list[Loop], tracker: PipelineLogger | None = None) -> HierarchyResult:
        """Nest world-space loops into polygons."""
        tracker = tracker or PipelineLogger(self.logger)

        with self._stage(tracker, "hierarchy"):
            tree = build_contour_tree(loops, self.strategy)
            hierarchy = build_polygons(tree)

        tracker.log_hierarchy(
            polygons=len(hierarchy.polygons),
            holes=hierarchy.hole_count,
            dropped=len(hierarchy.dropped_holes),
            max_depth=tree.max_depth,
        )

        if hierarchy.dropped_holes:
            message = f"{len(hierarchy.dropped_holes)} holes had no enclosing solid and were dropped"
            tracker.log_warning(message, dropped=len(hierarchy.dropped_holes))
            warnings.warn(message, DroppedHoleWarning, stacklevel=3)

        return hierarchy

    def _run_vector(self, pixels: bytes, tracker: PipelineLogger) -> MeshResult:
        with self._stage(tracker, "field"):
            field = self.build_field(pixels)
        self.logger.debug(
            "Field built",
            stage="field",
            coverage=round(field.coverage(self.settings.mask_threshold), 4),
        )

        loops = self.trace(field, tracker)
        if not loops:
            message = (
                f"No contours found at threshold {self.settings.mask_threshold}; "
                "nothing to export"
            )
            tracker.log_warning(message, threshold=self.settings.mask_threshold)
            warnings.warn(message, EmptyResultWarning, stacklevel=3)

        hierarchy = self.classify(loops, tracker)

        with self._stage(tracker, "extrude"):
            mesh = build_solid_mesh(
                hierarchy.polygons,
                extrusion_height=self.settings.height_scale,
                base_thickness=self.settings.base_thickness,
                include_base=self.settings.enable_base,
                world_size=self.settings.world_size,
            )

        return MeshResult(
            mesh=mesh,
            mode=OutputMode.VECTOR,
            stats=tracker.stats,
            hierarchy=hierarchy,
        )

    def _run_relief(self, pixels: bytes, tracker: PipelineLogger) -> MeshResult:
        with self._stage(tracker, "field"):
            field = build_relief_field(
                pixels,
                self.settings.resolution,
                invert=self.settings.invert,
            )

        with self._stage(tracker, "heightfield"):
            mesh = build_heightfield_mesh(
                field,
                height_scale=self.settings.height_scale,
                base_thickness=self.settings.base_thickness,
                world_size=self.settings.world_size,
            )

        return MeshResult(mesh=mesh, mode=OutputMode.RELIEF, stats=tracker.stats)

    def run(self, pixels: bytes) -> MeshResult:
        """Convert an RGBA buffer into a mesh.

        Args:
            pixels: Interleaved RGBA bytes of length resolution^2 * 4

        Returns:
            MeshResult; the mesh is empty when nothing was traced

        Raises:
            PixelBufferError: If the buffer does not match the resolution
            MeshBuildError: If the extruded shapes cannot be merged
        """
        tracker = PipelineLogger(self.logger)
        mode = self.settings.mode

        self.logger.info(
            "Starting conversion",
            mode=mode.value,
            resolution=self.settings.resolution,
            threshold=self.settings.mask_threshold,
        )

        if mode is OutputMode.VECTOR:
            result = self._run_vector(pixels, tracker)
        else:
            result = self._run_relief(pixels, tracker)

        tracker.log_mesh_complete(mode.value, result.mesh.triangle_count)
        return result


def convert_pixels(pixels: bytes, settings: MeshSettings | None = None) -> MeshResult:
    """Convert an RGBA buffer with the given (or default) settings."""
    return MeshPipeline(settings or get_default_settings().mesh).run(pixels)
