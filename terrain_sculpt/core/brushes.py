"""
Brush kernel library.

Each brush is a deterministic generator from a requested vertex size to a
square matrix of height deltas. A brush covering ``N x N`` grid cells has
``N + 1`` vertices per side, so kernels are generated at native resolution
and upsampled later to match the render mesh.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

Kernel = np.ndarray
KernelGenerator = Callable[[int], Kernel]


def _cosine_falloff(dist: np.ndarray, max_dist: float, peak: float) -> np.ndarray:
    """Smooth cosine falloff from ``peak`` at distance 0 to 0 at ``max_dist``."""
    heights = (np.cos(np.pi * dist / max_dist) + 1.0) / 2.0 * peak
    return np.where(dist <= max_dist, heights, 0.0)


def generate_flat(size: int, peak: float) -> Kernel:
    """Every vertex set to ``peak``."""
    size = max(int(size), 1)
    return np.full((size, size), float(peak), dtype=np.float64)


def generate_soft_dome(size: int, peak: float) -> Kernel:
    """
    Radial cosine dome centered on the kernel.

    The falloff is normalized by the distance from the center to a corner,
    so the corners reach exactly zero and the edge midpoints keep some height.
    """
    size = max(int(size), 2)
    center = (size - 1) / 2.0
    max_dist = math.sqrt(2.0 * center * center)

    z, x = np.mgrid[0:size, 0:size].astype(np.float64)
    dist = np.sqrt((x - center) ** 2 + (z - center) ** 2)
    return _cosine_falloff(dist, max_dist, peak)


def generate_linear_ramp(size: int, peak: float) -> Kernel:
    """Linear ramp from 0 on row 0 to ``peak`` on the last row."""
    size = max(int(size), 2)
    column = np.arange(size, dtype=np.float64) / (size - 1) * peak
    return np.repeat(column[:, None], size, axis=1)


def generate_ridge(size: int, peak: float) -> Kernel:
    """Cosine profile across x, extruded along z."""
    size = max(int(size), 2)
    center = (size - 1) / 2.0

    dist = np.abs(np.arange(size, dtype=np.float64) - center)
    profile = _cosine_falloff(dist, center, peak)
    return np.repeat(profile[None, :], size, axis=0)


@dataclass(frozen=True)
class BrushSpec:
    """A named brush in the catalog."""

    id: str
    name: str
    footprint_cells: int
    generator: KernelGenerator

    @property
    def vertex_size(self) -> int:
        """Native kernel dimension (fence-post sizing)."""
        return self.footprint_cells + 1

    def kernel(self, vertex_size: Optional[int] = None) -> Kernel:
        """Generate the kernel, at native resolution unless a size is given."""
        kernel = self.generator(vertex_size if vertex_size is not None else self.vertex_size)
        kernel.setflags(write=False)
        return kernel


def _brush(brush_id: str, name: str, cells: int, shape, peak: float) -> BrushSpec:
    return BrushSpec(
        id=brush_id,
        name=name,
        footprint_cells=cells,
        generator=lambda size: shape(size, peak),
    )


# Catalog order is the toolbar order
BRUSHES: List[BrushSpec] = [
    _brush("raise", "Raise Cell", 1, generate_flat, 0.5),
    _brush("lower", "Lower Cell", 1, generate_flat, -0.5),
    _brush("softHill", "Soft Hill", 3, generate_soft_dome, 2.0),
    _brush("ridge", "Ridge", 3, generate_ridge, 1.0),
    _brush("linearRamp", "Linear Ramp", 3, generate_linear_ramp, 1.5),
    _brush("softValley", "Soft Valley", 3, generate_soft_dome, -2.0),
]

_BRUSHES_BY_ID: Dict[str, BrushSpec] = {brush.id: brush for brush in BRUSHES}


def get_brush(brush_id: str) -> BrushSpec:
    """Look up a brush by id, raising ``ValueError`` for unknown ids."""
    try:
        return _BRUSHES_BY_ID[brush_id]
    except KeyError:
        raise ValueError(f"Unknown brush: {brush_id!r}") from None


def list_brushes() -> List[str]:
    """Brush ids in catalog order."""
    return [brush.id for brush in BRUSHES]
