"""Landmark augmentation and normalization utilities (pure numpy)."""

from __future__ import annotations

import warnings
from typing import Optional, Tuple

import numpy as np

from landmark_warp.errors import (
    DegenerateShapeError,
    MissingGeometryError,
    MultipleGeometryWarning,
)
from landmark_warp.geometry.landmark_models import LandmarkBox, LandmarkSample


def select_box(sample: LandmarkSample, stage: Optional[str] = None) -> LandmarkBox:
    """Return the first bounding box, warning when more than one is present."""
    if not sample.boxes:
        raise MissingGeometryError(
            "sample has no bounding box", sample_id=sample.sample_id, stage=stage
        )
    if len(sample.boxes) > 1:
        warnings.warn(
            f"Sample {sample.sample_id!r} has {len(sample.boxes)} bounding boxes; "
            "using the first",
            MultipleGeometryWarning,
            stacklevel=2,
        )
    return sample.boxes[0]


def augment_landmarks(
    sample: LandmarkSample, stage: Optional[str] = None
) -> np.ndarray:
    """
    Append the first box's four corners to the sample's landmarks.

    Returns:
        (N + 4, 2) float64 array; corners follow the landmarks in the order
        top-left, top-right, bottom-left, bottom-right.
    """
    box = select_box(sample, stage=stage)
    points = list(sample.points)
    points.extend(box.corners())
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)


def center_shape(
    points: np.ndarray, sample_id: Optional[str] = None, stage: Optional[str] = None
) -> Tuple[np.ndarray, np.ndarray, float]:
    """
    Remove translation from a point set.

    Returns:
        Tuple of (centered points, centroid, Frobenius norm of centered points)
    """
    points = np.asarray(points, dtype=np.float64)
    centroid = points.mean(axis=0)
    centered = points - centroid
    norm = float(np.linalg.norm(centered))
    if norm == 0.0:
        raise DegenerateShapeError(
            "all landmarks coincide; shape cannot be normalized",
            sample_id=sample_id,
            stage=stage,
        )
    return centered, centroid, norm


def normalize_shape(
    points: np.ndarray, sample_id: Optional[str] = None, stage: Optional[str] = None
) -> np.ndarray:
    """Center a point set on the origin and scale it to unit Frobenius norm."""
    centered, _, norm = center_shape(points, sample_id=sample_id, stage=stage)
    return centered / norm


def to_canonical_frame(
    points: np.ndarray,
    translation: np.ndarray,
    norm: float,
    scale: float,
    offset: float,
) -> np.ndarray:
    """Map image coordinates into the fixed-size canonical working frame."""
    points = np.asarray(points, dtype=np.float64)
    translation = np.asarray(translation, dtype=np.float64)
    return (points - translation) / (norm / scale) + offset
