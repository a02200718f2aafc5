"""Tests for feature extraction and the classifier contract."""

from __future__ import annotations

import unittest

import numpy as np

from landmark_warp.classifier import (
    score_samples,
    stack_features,
    to_feature_vector,
    train_classifier,
)
from landmark_warp.geometry.landmark_models import LandmarkSample


class MeanThresholdClassifier:
    """Scores a row by how far its mean exceeds the trained label-0 mean."""

    def __init__(self) -> None:
        self.threshold = 0.0

    def train(self, features: np.ndarray, labels: np.ndarray) -> None:
        self.threshold = float(features[labels == 0].mean())

    def predict(self, features: np.ndarray) -> float:
        return float(features.mean() > self.threshold)

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        return np.array([features.mean() / 255.0])


def make_sample(value: int, shape=(4, 4), sample_id="c") -> LandmarkSample:
    return LandmarkSample(image=np.full(shape, value, dtype=np.uint8), sample_id=sample_id)


class TestClassifierContract(unittest.TestCase):
    def test_feature_vector_is_float_row(self) -> None:
        vector = to_feature_vector(np.ones((3, 4, 2), dtype=np.uint8))
        self.assertEqual(vector.shape, (1, 24))
        self.assertEqual(vector.dtype, np.float32)

    def test_inconsistent_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            stack_features([make_sample(1), make_sample(1, shape=(5, 4), sample_id="big")])

    def test_train_and_score(self) -> None:
        samples = [make_sample(10), make_sample(20), make_sample(200), make_sample(220)]
        classifier = MeanThresholdClassifier()
        train_classifier(classifier, samples, [0, 0, 1, 1])

        self.assertEqual(score_samples(classifier, samples), [0.0, 1.0, 1.0, 1.0])
        confidence = score_samples(classifier, samples[:1], return_confidence=True)
        self.assertAlmostEqual(confidence[0], 10.0 / 255.0, places=6)

    def test_label_count_mismatch(self) -> None:
        with self.assertRaises(ValueError):
            train_classifier(MeanThresholdClassifier(), [make_sample(1)], [0, 1])

    def test_confidence_requires_predict_proba(self) -> None:
        class PlainClassifier:
            def train(self, features, labels):
                pass

            def predict(self, features):
                return 1.0

        with self.assertRaises(TypeError):
            score_samples(PlainClassifier(), [make_sample(1)], return_confidence=True)


if __name__ == "__main__":
    unittest.main()
