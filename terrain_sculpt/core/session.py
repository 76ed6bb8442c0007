"""
Sculpting session.

The session owns the heightmap and the interaction state around it: the
selected brush, strength, rotation, the hovered cell and a pending grid
resize. Input events from whatever front end drives the editor are fed in
through plain method calls; every call runs to completion before returning.
"""

import operator
import uuid
import structlog
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import SessionConfig, settings, validate_divisions, validate_strength
from .brushes import BrushSpec, get_brush
from .deformation import DeformationResult, SculptMode, apply_deformation, next_rotation
from .grid import GridGeometry, GridPoint
from .heightmap import Heightmap
from .preview import PreviewPatch, project_preview

logger = structlog.get_logger()


@dataclass(frozen=True)
class HoverState:
    """Cell under the pointer and the mode implied by its modifiers."""

    cell: GridPoint
    mode: SculptMode


@dataclass(frozen=True)
class ResizeOutcome:
    """Result of a grid resize request."""

    resized: bool
    confirmation_required: bool
    divisions: int


class SculptSession:
    """Interactive terrain sculpting state for one editor."""

    def __init__(self, config: Optional[SessionConfig] = None, session_id: Optional[str] = None):
        self.config = config or SessionConfig()
        self.id = session_id or str(uuid.uuid4())

        self.geometry = GridGeometry(
            world_size=self.config.world_size,
            divisions=self.config.divisions,
            resolution_multiplier=self.config.resolution_multiplier,
        )
        self.heightmap: Heightmap = self.geometry.new_heightmap()

        self.brush: Optional[BrushSpec] = None
        self.strength = self.config.strength
        self.rotation = 0
        self.hover_state: Optional[HoverState] = None
        self.modified = False
        self.pending_divisions: Optional[int] = None

        logger.info(
            "Sculpt session created",
            session_id=self.id,
            divisions=self.geometry.divisions,
            render_segments=self.geometry.render_segments,
        )

    @property
    def divisions(self) -> int:
        return self.geometry.divisions

    # Tool state

    def select_brush(self, brush_id: Optional[str]) -> Optional[BrushSpec]:
        """Select a brush by id, or deselect with None."""
        self.brush = get_brush(brush_id) if brush_id is not None else None
        return self.brush

    def set_strength(self, strength: float) -> float:
        self.strength = validate_strength(strength)
        return self.strength

    def rotate(self) -> int:
        """Advance the brush a quarter turn clockwise."""
        self.rotation = next_rotation(self.rotation)
        return self.rotation

    # Pointer events

    def _check_cell(self, cell: GridPoint) -> GridPoint:
        try:
            cell = (operator.index(cell[0]), operator.index(cell[1]))
        except TypeError:
            raise ValueError(f"Cell {cell!r} must be a pair of integers") from None
        if not self.geometry.in_grid(cell):
            raise ValueError(f"Cell {cell} is outside the {self.divisions}x{self.divisions} grid")
        return cell

    def hover(self, cell: GridPoint, alternate: bool = False) -> Optional[PreviewPatch]:
        """Record the hovered cell and return the ghost preview for it."""
        self.hover_state = HoverState(self._check_cell(cell), SculptMode.from_modifier(alternate))
        return self.preview()

    def leave(self) -> None:
        """The pointer left the grid."""
        self.hover_state = None

    def click(self, cell: GridPoint, alternate: bool = False) -> DeformationResult:
        """Apply the selected brush at ``cell``."""
        cell = self._check_cell(cell)
        if self.brush is None:
            return DeformationResult(applied=False)

        result = apply_deformation(
            self.heightmap,
            self.geometry,
            self.brush,
            self.rotation,
            cell,
            SculptMode.from_modifier(alternate),
            self.strength,
            strength_scale=self.config.strength_scale,
        )
        if result.applied:
            self.modified = True
        return result

    def preview(self) -> Optional[PreviewPatch]:
        """Ghost patch for the current hover state, if there is one."""
        if self.brush is None or self.hover_state is None:
            return None
        return project_preview(
            self.geometry,
            self.brush,
            self.rotation,
            self.hover_state.cell,
            self.hover_state.mode,
            self.strength,
            strength_scale=self.config.strength_scale,
            height_offset=settings.preview_height_offset,
            raise_color=settings.raise_color,
            lower_color=settings.lower_color,
        )

    # Terrain lifecycle

    def reset(self) -> None:
        """Flatten the terrain."""
        self.heightmap.reset()
        self.modified = False
        logger.info("Terrain reset", session_id=self.id)

    def request_resize(self, divisions: int) -> ResizeOutcome:
        """
        Ask for a new grid size.

        An untouched terrain is resized straight away. A sculpted one keeps
        the request pending until it is confirmed, since resizing discards
        every height.
        """
        divisions = validate_divisions(int(divisions), self.config.max_divisions)
        logger.info("Grid resize requested", session_id=self.id, divisions=divisions)

        if divisions == self.divisions:
            self.pending_divisions = None
            return ResizeOutcome(resized=False, confirmation_required=False, divisions=divisions)

        if self.modified:
            self.pending_divisions = divisions
            return ResizeOutcome(resized=False, confirmation_required=True, divisions=divisions)

        self._resize(divisions)
        return ResizeOutcome(resized=True, confirmation_required=False, divisions=divisions)

    def confirm_resize(self) -> ResizeOutcome:
        if self.pending_divisions is None:
            return ResizeOutcome(resized=False, confirmation_required=False, divisions=self.divisions)

        divisions = self.pending_divisions
        self._resize(divisions)
        logger.info("Grid resize confirmed", session_id=self.id, divisions=divisions)
        return ResizeOutcome(resized=True, confirmation_required=False, divisions=divisions)

    def cancel_resize(self) -> None:
        if self.pending_divisions is not None:
            logger.info(
                "Grid resize cancelled", session_id=self.id, divisions=self.pending_divisions
            )
        self.pending_divisions = None

    def _resize(self, divisions: int) -> None:
        self.geometry = GridGeometry(
            world_size=self.geometry.world_size,
            divisions=divisions,
            resolution_multiplier=self.geometry.resolution_multiplier,
        )
        self.heightmap = self.geometry.new_heightmap()
        self.modified = False
        self.pending_divisions = None
        self.hover_state = None

    # Rendering

    def mesh_vertices(self) -> Optional[np.ndarray]:
        """World-space render vertices of the terrain."""
        return self.geometry.vertex_positions(self.heightmap)

    def summary(self) -> dict:
        return {
            "id": self.id,
            "divisions": self.divisions,
            "resolution_multiplier": self.geometry.resolution_multiplier,
            "render_segments": self.geometry.render_segments,
            "world_size": self.geometry.world_size,
            "brush": self.brush.id if self.brush else None,
            "strength": self.strength,
            "rotation": self.rotation,
            "modified": self.modified,
            "pending_divisions": self.pending_divisions,
            "hover": (
                {"cell": list(self.hover_state.cell), "mode": self.hover_state.mode.value}
                if self.hover_state
                else None
            ),
        }
