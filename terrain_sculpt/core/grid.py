"""
Geometry of the interaction grid and the render mesh laid over it.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from .heightmap import Heightmap

GridPoint = Tuple[int, int]


@dataclass(frozen=True)
class GridGeometry:
    """World-space layout of a square terrain."""

    world_size: float
    divisions: int
    resolution_multiplier: int = 4

    def __post_init__(self):
        if self.divisions < 1:
            raise ValueError(f"Grid divisions must be positive, got {self.divisions}")
        if self.resolution_multiplier < 1:
            raise ValueError(
                f"Resolution multiplier must be positive, got {self.resolution_multiplier}"
            )
        if not (self.world_size > 0 and math.isfinite(self.world_size)):
            raise ValueError(f"World size must be a positive number, got {self.world_size}")

    @property
    def cell_size(self) -> float:
        return self.world_size / self.divisions

    @property
    def render_segments(self) -> int:
        return self.divisions * self.resolution_multiplier

    @property
    def vertex_count(self) -> int:
        return (self.render_segments + 1) ** 2

    def new_heightmap(self) -> Heightmap:
        return Heightmap(self.render_segments)

    def in_grid(self, point: GridPoint) -> bool:
        x, z = point
        return 0 <= x < self.divisions and 0 <= z < self.divisions

    def world_to_cell(self, x: float, z: float) -> Optional[GridPoint]:
        """Map a world-space point on the ground plane to a grid cell."""
        half = self.world_size / 2
        cell = (
            math.floor((x + half) / self.cell_size),
            math.floor((z + half) / self.cell_size),
        )
        return cell if self.in_grid(cell) else None

    def vertex_positions(self, heightmap: Heightmap) -> Optional[np.ndarray]:
        """
        World-space ``(x, height, z)`` for every render vertex.

        Returns None if the heightmap belongs to a different resolution.
        """
        heights = heightmap.to_vertex_heights(self.vertex_count)
        if heights is None:
            return None

        n = self.render_segments + 1
        coords = np.linspace(-self.world_size / 2, self.world_size / 2, n)
        zz, xx = np.meshgrid(coords, coords, indexing="ij")
        return np.column_stack([xx.ravel(), heights, zz.ravel()])
