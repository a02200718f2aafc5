"""Piecewise-affine resampling into the canonical frame."""

from .mean_image import MeanImage
from .piecewise_affine import (
    Warper,
    draw_triangle_edges,
    triangle_targets,
    warp_triangles,
)

__all__ = [
    "MeanImage",
    "Warper",
    "draw_triangle_edges",
    "triangle_targets",
    "warp_triangles",
]
