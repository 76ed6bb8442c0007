"""
Heightmap store for the render mesh.

Heights live in a ``(segments + 1) x (segments + 1)`` float array indexed
``[z, x]``. Deformations only ever accumulate into it; the store is replaced,
never resampled, when the grid is resized.
"""

import numpy as np
import structlog
from typing import Optional, Tuple

logger = structlog.get_logger()


class Heightmap:
    """Mutable grid of vertex heights."""

    def __init__(self, segments: int):
        """
        Create a flat heightmap.

        Args:
            segments: Render segments per axis; the store holds one more
                vertex than segments on each axis
        """
        if segments < 1:
            raise ValueError(f"Heightmap needs at least one segment, got {segments}")
        self.segments = int(segments)
        self.heights = np.zeros((self.segments + 1, self.segments + 1), dtype=np.float64)

    @property
    def size(self) -> int:
        """Vertices per axis."""
        return self.segments + 1

    @property
    def shape(self) -> Tuple[int, int]:
        return self.heights.shape

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.size and 0 <= z < self.size

    def get(self, x: int, z: int) -> float:
        return float(self.heights[z, x])

    def set(self, x: int, z: int, value: float) -> None:
        self.heights[z, x] = value

    def add(self, x: int, z: int, delta: float) -> None:
        self.heights[z, x] += delta

    def add_patch(self, patch: np.ndarray, start_x: int, start_z: int) -> int:
        """
        Accumulate a patch with its top-left vertex at ``(start_x, start_z)``.

        Patch vertices falling outside the heightmap are dropped.

        Returns:
            Number of heightmap vertices that received a value
        """
        patch_rows, patch_cols = patch.shape

        x0 = max(start_x, 0)
        z0 = max(start_z, 0)
        x1 = min(start_x + patch_cols, self.size)
        z1 = min(start_z + patch_rows, self.size)
        if x0 >= x1 or z0 >= z1:
            return 0

        self.heights[z0:z1, x0:x1] += patch[z0 - start_z:z1 - start_z, x0 - start_x:x1 - start_x]
        return (x1 - x0) * (z1 - z0)

    def reset(self) -> None:
        """Flatten the terrain in place."""
        self.heights.fill(0.0)

    def is_flat(self) -> bool:
        return not np.any(self.heights)

    def to_vertex_heights(self, expected_count: int) -> Optional[np.ndarray]:
        """
        Flatten heights row by row for a plane geometry's vertex buffer.

        Returns None when the geometry does not have one vertex per height
        sample, which happens transiently while the grid is being resized.
        """
        if expected_count != self.heights.size:
            logger.warning(
                "Heightmap and geometry size mismatch, skipping update",
                expected=expected_count,
                actual=int(self.heights.size),
            )
            return None
        return self.heights.ravel().copy()

    def stats(self) -> dict:
        return {
            "min": float(self.heights.min()),
            "max": float(self.heights.max()),
            "mean": float(self.heights.mean()),
        }
