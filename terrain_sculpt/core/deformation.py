"""
Brush deformation pipeline.

A brush kernel is generated at native resolution, rotated in quarter turns,
upsampled to the render mesh resolution and accumulated into the heightmap
with its footprint centered on the target grid cell. The preview projector
runs the same pipeline without touching the heightmap.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .brushes import BrushSpec, get_brush
from .grid import GridGeometry, GridPoint
from .heightmap import Heightmap
from .matrix_ops import rotate, upsample_bilinear

logger = structlog.get_logger()

# Applied deltas are kernel * strength * this factor, in both apply and preview
DEFAULT_STRENGTH_SCALE = 2.0

ROTATION_STATES = 4


class SculptMode(str, Enum):
    """Whether a stroke raises or lowers the terrain."""

    RAISE = "raise"
    LOWER = "lower"

    @classmethod
    def from_modifier(cls, alternate: bool) -> "SculptMode":
        """The alternate input modifier (shift) lowers instead of raising."""
        return cls.LOWER if alternate else cls.RAISE

    @property
    def sign(self) -> float:
        return -1.0 if self is SculptMode.LOWER else 1.0


def next_rotation(rotation: int) -> int:
    return (rotation + 1) % ROTATION_STATES


def resolve_brush(brush: Union[BrushSpec, str]) -> BrushSpec:
    if isinstance(brush, BrushSpec):
        return brush
    return get_brush(brush)


def signed_strength(
    mode: SculptMode, strength: float, strength_scale: float = DEFAULT_STRENGTH_SCALE
) -> float:
    """Multiplier applied to kernel values for a stroke."""
    return SculptMode(mode).sign * strength * strength_scale


def footprint_start(target: GridPoint, footprint: Tuple[int, int]) -> GridPoint:
    """Top-left cell of a footprint centered on ``target``."""
    width, height = footprint
    return (target[0] - width // 2, target[1] - height // 2)


@dataclass(frozen=True)
class BrushPatch:
    """A brush kernel resolved for one placement on the grid."""

    heights: np.ndarray
    footprint: Tuple[int, int]
    start_cell: GridPoint
    start_vertex: GridPoint


def build_brush_patch(
    brush: Union[BrushSpec, str],
    rotation: int,
    target: GridPoint,
    resolution_multiplier: int,
) -> BrushPatch:
    """
    Resolve a brush into a render-resolution patch placed at ``target``.

    Args:
        brush: Brush spec or catalog id
        rotation: Quarter turns clockwise, 0 to 3
        target: Grid cell the footprint is centered on
        resolution_multiplier: Render vertices per grid cell

    Returns:
        BrushPatch with the upsampled kernel and its placement
    """
    brush = resolve_brush(brush)
    if rotation not in range(ROTATION_STATES):
        raise ValueError(f"Rotation must be 0-{ROTATION_STATES - 1}, got {rotation!r}")

    native = brush.kernel()
    rotated = rotate(native, rotation)
    heights = upsample_bilinear(rotated, resolution_multiplier)

    rows, cols = native.shape
    footprint = (cols - 1, rows - 1)
    if rotation % 2:
        footprint = (footprint[1], footprint[0])

    start_cell = footprint_start(target, footprint)
    start_vertex = (
        start_cell[0] * resolution_multiplier,
        start_cell[1] * resolution_multiplier,
    )
    return BrushPatch(
        heights=heights,
        footprint=footprint,
        start_cell=start_cell,
        start_vertex=start_vertex,
    )


@dataclass(frozen=True)
class DeformationResult:
    """Outcome of one apply call."""

    applied: bool
    vertices_changed: int = 0
    clipped: bool = False


def apply_deformation(
    heightmap: Heightmap,
    geometry: GridGeometry,
    brush: Union[BrushSpec, str],
    rotation: int,
    target: GridPoint,
    mode: SculptMode,
    strength: float,
    strength_scale: float = DEFAULT_STRENGTH_SCALE,
) -> DeformationResult:
    """
    Stamp a brush onto the heightmap, accumulating into existing heights.

    Kernel vertices that fall outside the heightmap are clipped. A heightmap
    that does not match ``geometry`` (stale during a resize) is left alone.
    """
    brush = resolve_brush(brush)
    patch = build_brush_patch(brush, rotation, target, geometry.resolution_multiplier)

    if heightmap.segments != geometry.render_segments:
        logger.warning(
            "Heightmap resolution does not match grid, skipping deformation",
            heightmap_segments=heightmap.segments,
            grid_segments=geometry.render_segments,
        )
        return DeformationResult(applied=False)

    deltas = patch.heights * signed_strength(mode, strength, strength_scale)
    changed = heightmap.add_patch(deltas, *patch.start_vertex)

    logger.debug(
        "Deformation applied",
        brush=brush.id,
        cell=list(target),
        rotation=rotation,
        mode=SculptMode(mode).value,
        vertices_changed=changed,
    )
    return DeformationResult(
        applied=True,
        vertices_changed=changed,
        clipped=changed < deltas.size,
    )
