"""Procrustes alignment of landmark sets onto a learned mean shape."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np
from scipy.linalg import orthogonal_procrustes

from landmark_warp.config import AlignmentConfig
from landmark_warp.errors import CorrespondenceError
from landmark_warp.geometry.landmark_models import (
    AlignmentParameters,
    LandmarkSample,
    MeanShape,
)
from landmark_warp.geometry.landmarks import (
    augment_landmarks,
    center_shape,
    normalize_shape,
    to_canonical_frame,
)

TRAIN_STAGE = "align.train"
PROJECT_STAGE = "align.project"


def train_mean_shape(samples: Iterable[LandmarkSample]) -> MeanShape:
    """
    Average the normalized, box-augmented landmark sets of a corpus.

    Samples without landmarks are skipped. Every remaining sample must yield
    the same number of augmented points.

    Args:
        samples: Training samples, each with at least one bounding box

    Returns:
        MeanShape with one row per augmented landmark
    """
    normalized: List[np.ndarray] = []
    for sample in samples:
        if not sample.points:
            continue
        augmented = augment_landmarks(sample, stage=TRAIN_STAGE)
        if normalized and augmented.shape[0] != normalized[0].shape[0]:
            raise CorrespondenceError(
                f"sample has {augmented.shape[0]} augmented landmarks, "
                f"expected {normalized[0].shape[0]}",
                sample_id=sample.sample_id,
                stage=TRAIN_STAGE,
            )
        normalized.append(
            normalize_shape(augmented, sample_id=sample.sample_id, stage=TRAIN_STAGE)
        )

    if not normalized:
        raise CorrespondenceError(
            "no training sample carries landmarks", stage=TRAIN_STAGE
        )

    return MeanShape(points=np.mean(np.stack(normalized), axis=0))


def project_sample(
    sample: LandmarkSample,
    mean_shape: MeanShape,
    config: Optional[AlignmentConfig] = None,
) -> AlignmentParameters:
    """
    Compute the normalization and rotation taking a sample onto the mean shape.

    The centered landmarks are rescaled into the canonical frame and the
    rotation solves the orthogonal Procrustes problem against the mean shape
    (R = U Vt from the SVD of Pt M). Reflections are not corrected.
    """
    config = config or AlignmentConfig()
    augmented = augment_landmarks(sample, stage=PROJECT_STAGE)
    if augmented.shape[0] != mean_shape.num_points:
        raise CorrespondenceError(
            f"sample has {augmented.shape[0]} augmented landmarks, "
            f"mean shape has {mean_shape.num_points}",
            sample_id=sample.sample_id,
            stage=PROJECT_STAGE,
        )

    _, centroid, norm = center_shape(
        augmented, sample_id=sample.sample_id, stage=PROJECT_STAGE
    )
    canonical = to_canonical_frame(
        augmented,
        centroid,
        norm,
        config.canonical_scale,
        config.canonical_offset,
    )
    rotation, _ = orthogonal_procrustes(
        canonical, mean_shape.points.astype(np.float64)
    )

    return AlignmentParameters(
        rotation=rotation,
        translation=(float(centroid[0]), float(centroid[1])),
        norm=norm,
    )


class ShapeAligner:
    """Learns a mean shape and projects samples onto it."""

    def __init__(
        self,
        config: Optional[AlignmentConfig] = None,
        mean_shape: Optional[MeanShape] = None,
    ):
        self.config = config or AlignmentConfig()
        self.config.validate()
        self.mean_shape = mean_shape

    @property
    def is_trained(self) -> bool:
        return self.mean_shape is not None

    def train(self, samples: Iterable[LandmarkSample]) -> MeanShape:
        """Replace the mean shape with one learned from ``samples``."""
        mean_shape = train_mean_shape(samples)
        self.mean_shape = mean_shape
        return mean_shape

    def project(self, sample: LandmarkSample) -> AlignmentParameters:
        if self.mean_shape is None:
            raise ValueError("ShapeAligner must be trained or loaded before project()")
        return project_sample(sample, self.mean_shape, self.config)

    def store(self, path: Union[str, Path]) -> None:
        if self.mean_shape is None:
            raise ValueError("ShapeAligner has no mean shape to store")
        self.mean_shape.save(path)

    def load(
        self, path: Union[str, Path], expected_points: Optional[int] = None
    ) -> None:
        if expected_points is None and self.mean_shape is not None:
            expected_points = self.mean_shape.num_points
        self.mean_shape = MeanShape.load(path, expected_points=expected_points)
