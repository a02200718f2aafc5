"""Landmark data contracts and shape normalization helpers."""

from .landmark_models import (
    AlignmentParameters,
    LandmarkBox,
    LandmarkSample,
    MeanShape,
    Triangle,
)
from .landmarks import (
    augment_landmarks,
    center_shape,
    normalize_shape,
    select_box,
    to_canonical_frame,
)

__all__ = [
    "AlignmentParameters",
    "LandmarkBox",
    "LandmarkSample",
    "MeanShape",
    "Triangle",
    "augment_landmarks",
    "center_shape",
    "normalize_shape",
    "select_box",
    "to_canonical_frame",
]
