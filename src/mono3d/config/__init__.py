"""Configuration management for mono3d.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, advisory suggestions or
defaults.

Key classes:
- MeshSettings: Conversion parameters (threshold, heights, resolution, mode)
- OutputMode: Vector extrusion or relief heightfield
- LoggingConfig: Logging settings
- Mono3DSettings: Main application settings
"""

from mono3d.config.settings import (
    LoggingConfig,
    MeshSettings,
    Mono3DSettings,
    OutputMode,
    get_default_settings,
)

__all__ = [
    "LoggingConfig",
    "MeshSettings",
    "Mono3DSettings",
    "OutputMode",
    "get_default_settings",
]
