"""Landmark normalization and piecewise-affine warping into a canonical frame."""

from landmark_warp.alignment.procrustes import ShapeAligner
from landmark_warp.config import LandmarkWarpConfig
from landmark_warp.geometry.landmark_models import (
    AlignmentParameters,
    LandmarkBox,
    LandmarkSample,
    MeanShape,
    Triangle,
)
from landmark_warp.mesh.delaunay import TriangleMesh
from landmark_warp.pipeline.runner import Pipeline
from landmark_warp.warping.piecewise_affine import Warper

__version__ = "0.1.0"

__all__ = [
    "AlignmentParameters",
    "LandmarkBox",
    "LandmarkSample",
    "LandmarkWarpConfig",
    "MeanShape",
    "Pipeline",
    "ShapeAligner",
    "Triangle",
    "TriangleMesh",
    "Warper",
]
