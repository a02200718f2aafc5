"""Feature vectors and the contract expected from downstream classifiers."""

from __future__ import annotations

from typing import List, Protocol, Sequence

import numpy as np

from landmark_warp.geometry.landmark_models import LandmarkSample


class Classifier(Protocol):
    """Trainable scorer consuming one float32 row per sample."""

    def train(self, features: np.ndarray, labels: np.ndarray) -> None:
        ...

    def predict(self, features: np.ndarray) -> float:
        ...


def to_feature_vector(image: np.ndarray) -> np.ndarray:
    """Flatten an image into a (1, D) float32 row vector."""
    return np.asarray(image, dtype=np.float32).reshape(1, -1)


def stack_features(samples: Sequence[LandmarkSample]) -> np.ndarray:
    """Stack sample images into an (N, D) matrix, requiring a common D."""
    rows = [to_feature_vector(sample.image) for sample in samples]
    if not rows:
        return np.zeros((0, 0), dtype=np.float32)
    width = rows[0].shape[1]
    for sample, row in zip(samples, rows):
        if row.shape[1] != width:
            raise ValueError(
                f"sample {sample.sample_id!r} yields {row.shape[1]} features, "
                f"expected {width}"
            )
    return np.vstack(rows)


def train_classifier(
    classifier: Classifier, samples: Sequence[LandmarkSample], labels: Sequence[float]
) -> None:
    if len(samples) != len(labels):
        raise ValueError("samples and labels must have the same length")
    classifier.train(stack_features(samples), np.asarray(labels, dtype=np.float32))


def score_samples(
    classifier: Classifier,
    samples: Sequence[LandmarkSample],
    *,
    return_confidence: bool = False,
) -> List[float]:
    """
    Score each sample with ``classifier``.

    Args:
        classifier: Trained classifier
        samples: Transformed samples sharing one image shape
        return_confidence: Use ``predict_proba`` instead of ``predict``

    Returns:
        One score per sample
    """
    features = stack_features(samples)
    if return_confidence:
        predict = getattr(classifier, "predict_proba", None)
        if predict is None:
            raise TypeError(f"{type(classifier).__name__} has no predict_proba()")
    else:
        predict = classifier.predict
    return [
        float(np.asarray(predict(row.reshape(1, -1))).ravel()[0]) for row in features
    ]
