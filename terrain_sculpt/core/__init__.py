"""
Core terrain sculpting functionality.
"""

from .brushes import BRUSHES, BrushSpec, get_brush, list_brushes
from .matrix_ops import rotate, rotate_90, upsample_bilinear, resample_bilinear
from .heightmap import Heightmap
from .grid import GridGeometry
from .deformation import SculptMode, DeformationResult, apply_deformation, build_brush_patch
from .preview import PreviewPatch, project_preview
from .thumbnail import render_thumbnail
from .session import SculptSession

__all__ = ['BRUSHES', 'BrushSpec', 'get_brush', 'list_brushes',
           'rotate', 'rotate_90', 'upsample_bilinear', 'resample_bilinear',
           'Heightmap', 'GridGeometry',
           'SculptMode', 'DeformationResult', 'apply_deformation', 'build_brush_patch',
           'PreviewPatch', 'project_preview', 'render_thumbnail', 'SculptSession']
