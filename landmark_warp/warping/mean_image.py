"""Per-pixel mean image over a training set."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np

from landmark_warp.geometry.landmark_models import LandmarkSample

_HEADER_DTYPE = np.dtype("<i4")
_VALUE_DTYPE = np.dtype("<f4")


class MeanImage:
    """Learns the float32 mean of equally sized images."""

    def __init__(self, mean: Optional[np.ndarray] = None):
        self.mean = mean

    def train(self, images: Iterable[np.ndarray]) -> np.ndarray:
        total: Optional[np.ndarray] = None
        count = 0
        for image in images:
            converted = np.asarray(image).astype(np.float32)
            if total is None:
                total = np.zeros_like(converted)
            elif converted.shape != total.shape:
                raise ValueError(
                    f"image shape {converted.shape} differs from {total.shape}"
                )
            total += converted
            count += 1
        if total is None:
            raise ValueError("MeanImage requires at least one training image")
        self.mean = total / float(count)
        return self.mean

    def project(self, sample: LandmarkSample) -> LandmarkSample:
        """Replace the sample image with the learned mean."""
        if self.mean is None:
            raise ValueError("MeanImage must be trained before project()")
        return sample.with_image(self.mean.copy())

    def store(self, path: Union[str, Path]) -> None:
        if self.mean is None:
            raise ValueError("MeanImage has no mean to store")
        shape = self.mean.shape + (1,) * (3 - self.mean.ndim)
        header = np.array(shape, dtype=_HEADER_DTYPE)
        body = np.ascontiguousarray(self.mean, dtype=_VALUE_DTYPE)
        Path(path).write_bytes(header.tobytes() + body.tobytes())

    def load(self, path: Union[str, Path]) -> None:
        blob = Path(path).read_bytes()
        header_size = 3 * _HEADER_DTYPE.itemsize
        if len(blob) < header_size:
            raise ValueError("MeanImage blob is truncated")
        rows, cols, channels = (
            int(v) for v in np.frombuffer(blob[:header_size], _HEADER_DTYPE)
        )
        body = np.frombuffer(blob[header_size:], dtype=_VALUE_DTYPE)
        if body.size != rows * cols * channels:
            raise ValueError("MeanImage blob size does not match its header")
        shape = (rows, cols) if channels == 1 else (rows, cols, channels)
        self.mean = body.reshape(shape).copy()
