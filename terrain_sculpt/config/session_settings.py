"""
Validated parameters for a sculpting session.

Invalid grid sizes, multipliers and strengths are rejected here so the
deformation pipeline can assume its inputs are sane.
"""

import math
from pydantic import BaseModel, Field, field_validator, model_validator

from .config import settings


class SessionConfig(BaseModel):
    """Parameters a session is created with."""

    world_size: float = Field(default=settings.world_size, gt=0, description="Terrain edge length")
    divisions: int = Field(default=settings.default_divisions, gt=0, description="Grid divisions")
    max_divisions: int = Field(default=settings.max_divisions, gt=0, description="Division limit")
    resolution_multiplier: int = Field(
        default=settings.resolution_multiplier,
        ge=1,
        le=settings.max_resolution_multiplier,
        description="Render vertices per cell",
    )
    strength: float = Field(default=settings.default_strength, description="Brush strength")
    strength_scale: float = Field(default=settings.strength_scale, gt=0, description="Strength unit")

    @field_validator("world_size", "strength_scale")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be finite")
        return value

    @field_validator("strength")
    @classmethod
    def _strength_in_range(cls, value: float) -> float:
        return validate_strength(value)

    @model_validator(mode="after")
    def _divisions_within_limit(self) -> "SessionConfig":
        validate_divisions(self.divisions, self.max_divisions)
        return self


def validate_strength(value: float) -> float:
    """Strength must be a finite number in (0, 1]."""
    if not math.isfinite(value) or not 0 < value <= 1:
        raise ValueError(f"Strength must be in (0, 1], got {value}")
    return float(value)


def validate_divisions(divisions: int, max_divisions: int) -> int:
    if not 1 <= divisions <= max_divisions:
        raise ValueError(f"Grid divisions must be between 1 and {max_divisions}, got {divisions}")
    return divisions
