"""Utility functions for mono3d.

This module provides logging setup and per-run statistics tracking.
"""

from mono3d.utils.logging import (
    PipelineLogger,
    PipelineStats,
    configure_logging,
)

__all__ = [
    "PipelineLogger",
    "PipelineStats",
    "configure_logging",
]
