"""
Ghost preview of a pending brush stroke.

The preview uses the same kernel pipeline and strength scaling as the
applicator, so the ghost patch is exactly the delta a click would add.
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple, Union

from .brushes import BrushSpec
from .deformation import (
    DEFAULT_STRENGTH_SCALE,
    SculptMode,
    build_brush_patch,
    signed_strength,
)
from .grid import GridGeometry, GridPoint

# Lift above the terrain surface so the ghost does not z-fight with it
PREVIEW_HEIGHT_OFFSET = 0.16

RAISE_COLOR = "#4ade80"
LOWER_COLOR = "#f87171"


@dataclass(frozen=True)
class PreviewPatch:
    """Geometry and placement of a ghost patch for the renderer."""

    heights: np.ndarray
    width: float
    depth: float
    segments: Tuple[int, int]
    position: Tuple[float, float, float]
    rotation: int
    mode: SculptMode
    color: str

    def to_dict(self) -> dict:
        return {
            "heights": self.heights.tolist(),
            "width": self.width,
            "depth": self.depth,
            "segments": list(self.segments),
            "position": list(self.position),
            "rotation": self.rotation,
            "mode": self.mode.value,
            "color": self.color,
        }


def project_preview(
    geometry: GridGeometry,
    brush: Union[BrushSpec, str],
    rotation: int,
    target: GridPoint,
    mode: SculptMode,
    strength: float,
    strength_scale: float = DEFAULT_STRENGTH_SCALE,
    height_offset: float = PREVIEW_HEIGHT_OFFSET,
    raise_color: str = RAISE_COLOR,
    lower_color: str = LOWER_COLOR,
) -> PreviewPatch:
    """Build the ghost patch for a brush hovering over ``target``."""
    mode = SculptMode(mode)
    patch = build_brush_patch(brush, rotation, target, geometry.resolution_multiplier)

    width_cells, depth_cells = patch.footprint
    cell_size = geometry.cell_size
    half_world = geometry.world_size / 2

    center_x = (patch.start_cell[0] + width_cells / 2) * cell_size - half_world
    center_z = (patch.start_cell[1] + depth_cells / 2) * cell_size - half_world

    rows, cols = patch.heights.shape
    return PreviewPatch(
        heights=patch.heights * signed_strength(mode, strength, strength_scale),
        width=width_cells * cell_size,
        depth=depth_cells * cell_size,
        segments=(cols - 1, rows - 1),
        position=(center_x, height_offset, center_z),
        rotation=rotation,
        mode=mode,
        color=lower_color if mode is SculptMode.LOWER else raise_color,
    )
