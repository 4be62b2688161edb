"""Configuration settings for Mono3D."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator


class OutputMode(str, Enum):
    """Mesh generation mode."""

    VECTOR = "vector"
    RELIEF = "relief"


class MeshSettings(BaseModel):
    """Settings for a single image-to-mesh conversion.

    Defaults are the presets used when no advisory suggestion is available.
    All lengths are in millimetres.
    """

    height_scale: float = Field(
        default=10.0,
        gt=0.0,
        le=500.0,
        description="Extrusion height (vector mode) or relief amplitude (relief mode)",
    )
    base_thickness: float = Field(
        default=2.0,
        ge=0.0,
        le=100.0,
        description="Thickness of the base slab or minimum relief offset",
    )
    resolution: int = Field(
        default=512,
        ge=2,
        le=2048,
        description="Side length of the square sampling grid in pixels",
    )
    invert: bool = Field(
        default=False,
        description="Swap bright and dark before tracing",
    )
    mask_threshold: float = Field(
        default=0.15,
        gt=0.0,
        lt=1.0,
        description="Iso-level separating solid from background",
    )
    contrast: float = Field(
        default=8.0,
        ge=1.0,
        le=100.0,
        description="Linear contrast stretch about the midpoint (1 = off)",
    )
    simplification: float = Field(
        default=0.15,
        ge=0.0,
        le=10.0,
        description="Douglas-Peucker tolerance in grid units",
    )
    enable_base: bool = Field(
        default=True,
        description="Add a flat slab under the extruded shapes",
    )
    flat_top: bool = Field(
        default=True,
        description="True for vector extrusion, False for relief heightfield",
    )
    world_size: float = Field(
        default=100.0,
        gt=0.0,
        le=1000.0,
        description="Side length of the square output footprint",
    )

    @model_validator(mode="after")
    def _check_base_thickness(self) -> "MeshSettings":
        if self.flat_top and self.enable_base and self.base_thickness <= 0:
            raise ValueError("base_thickness must be positive when the base slab is enabled")
        return self

    @property
    def mode(self) -> OutputMode:
        """Output mode selected by ``flat_top``."""
        return OutputMode.VECTOR if self.flat_top else OutputMode.RELIEF

    def merged_with(self, suggestion: dict[str, Any]) -> "MeshSettings":
        """Return a copy with recognised suggestion fields applied.

        Unknown keys are ignored. The result is re-validated, so an
        out-of-range value raises ``pydantic.ValidationError``.

        Args:
            suggestion: Partial settings, e.g. from the advisory service

        Returns:
            New validated MeshSettings
        """
        known = {k: v for k, v in suggestion.items() if k in type(self).model_fields}
        return type(self).model_validate({**self.model_dump(), **known})


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class Mono3DSettings(BaseModel):
    """Main application settings."""

    mesh: MeshSettings = Field(default_factory=MeshSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> Mono3DSettings:
    """Get default application settings."""
    return Mono3DSettings()
