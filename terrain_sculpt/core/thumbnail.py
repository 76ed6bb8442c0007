"""
Grayscale thumbnails of brush kernels for the brush picker.
"""

import numpy as np

from .matrix_ops import MatrixLike, resample_bilinear

THUMBNAIL_RESOLUTION = 256


def render_thumbnail(kernel: MatrixLike, resolution: int = THUMBNAIL_RESOLUTION) -> np.ndarray:
    """
    Render a kernel as a ``resolution x resolution`` uint8 image.

    The gray range always includes zero, so a raising brush reads as brighter
    than the flat ground and a lowering brush as darker. Constant non-zero
    kernels render white or black; only an all-zero kernel renders mid-grey.
    """
    image = resample_bilinear(kernel, resolution, resolution)

    kernel = np.asarray(kernel, dtype=np.float64)
    low = min(float(kernel.min()), 0.0)
    high = max(float(kernel.max()), 0.0)
    span = high - low

    if span == 0:
        normalized = np.full_like(image, 0.5)
    else:
        normalized = (image - low) / span
    return np.floor(np.clip(normalized, 0.0, 1.0) * 255).astype(np.uint8)
