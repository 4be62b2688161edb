"""Logging utilities for Mono3D."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class PipelineStats:
    """Statistics from one conversion run."""

    mode: str = ""
    edges_traced: int = 0
    loops_traced: int = 0
    loops_kept: int = 0
    points_before: int = 0
    points_after: int = 0
    polygon_count: int = 0
    hole_count: int = 0
    dropped_holes: int = 0
    max_depth: int = -1
    triangle_count: int = 0
    stage_ms: dict[str, float] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        """Total time spent in all stages."""
        return sum(self.stage_ms.values())

    @property
    def reduction_ratio(self) -> float:
        """Fraction of loop points removed by simplification."""
        if self.points_before == 0:
            return 0.0
        return 1.0 - self.points_after / self.points_before


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"mono3d_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("mono3d")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class PipelineLogger:
    """Logger for tracking pipeline stages and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, stats: PipelineStats | None = None) -> None:
        self._logger = logger
        self._stats = stats if stats is not None else PipelineStats()

    def log_stage(self, stage: str, duration_ms: float, **details: object) -> None:
        """Log completion of a pipeline stage."""
        self._stats.stage_ms[stage] = duration_ms
        self._logger.debug(
            "Stage complete",
            stage=stage,
            duration_ms=round(duration_ms, 2),
            **details,
        )

    def log_contours(
        self,
        edges: int,
        loops: int,
        kept: int,
        points_before: int,
        points_after: int,
    ) -> None:
        """Log tracing and simplification results."""
        self._logger.debug(
            "Contours traced",
            edges=edges,
            loops=loops,
            kept=kept,
            points_before=points_before,
            points_after=points_after,
        )
        self._stats.edges_traced = edges
        self._stats.loops_traced = loops
        self._stats.loops_kept = kept
        self._stats.points_before = points_before
        self._stats.points_after = points_after

    def log_hierarchy(self, polygons: int, holes: int, dropped: int, max_depth: int) -> None:
        """Log polygon classification results."""
        self._logger.debug(
            "Contour hierarchy",
            polygons=polygons,
            holes=holes,
            dropped=dropped,
            max_depth=max_depth,
        )
        self._stats.polygon_count = polygons
        self._stats.hole_count = holes
        self._stats.dropped_holes = dropped
        self._stats.max_depth = max_depth

    def log_warning(self, message: str, **details: object) -> None:
        """Log a recoverable condition and remember it."""
        self._logger.warning(message, **details)
        self._stats.warnings.append(message)

    def log_mesh_complete(self, mode: str, triangles: int) -> None:
        """Log the finished mesh."""
        self._stats.mode = mode
        self._stats.triangle_count = triangles
        self._logger.info(
            "Mesh built",
            mode=mode,
            triangles=triangles,
            duration_ms=round(self._stats.duration_ms, 2),
        )

    @property
    def stats(self) -> PipelineStats:
        """Get current pipeline statistics."""
        return self._stats
