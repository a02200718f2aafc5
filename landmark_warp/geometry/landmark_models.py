"""Canonical data contracts for landmark alignment and warping."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from landmark_warp.errors import CorrespondenceError, StaleMetadataError

Point = Tuple[float, float]
PixelPoint = Tuple[int, int]

_BLOB_HEADER_DTYPE = np.dtype("<i4")
_BLOB_VALUE_DTYPE = np.dtype("<f4")

# Stable keys used when alignment metadata leaves the pipeline.
METADATA_KEYS = (
    "align_r00",
    "align_r10",
    "align_r11",
    "align_r01",
    "align_mean_x",
    "align_mean_y",
    "align_norm",
)


@dataclass(frozen=True)
class LandmarkBox:
    """Axis-aligned bounding box in image coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float

    @staticmethod
    def from_xywh(x: float, y: float, w: float, h: float) -> "LandmarkBox":
        """Create a box from its top-left corner and size."""
        if w < 0 or h < 0:
            raise ValueError("box width and height must be >= 0")
        return LandmarkBox(x0=float(x), y0=float(y), x1=float(x + w), y1=float(y + h))

    @property
    def w(self) -> float:
        """Width in pixels."""
        return self.x1 - self.x0

    @property
    def h(self) -> float:
        """Height in pixels."""
        return self.y1 - self.y0

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Return top-left, top-right, bottom-left, bottom-right."""
        return (
            (self.x0, self.y0),
            (self.x1, self.y0),
            (self.x0, self.y1),
            (self.x1, self.y1),
        )


@dataclass(frozen=True, eq=False)
class AlignmentParameters:
    """Procrustes result for one sample.

    Attributes:
        rotation: 2x2 orthogonal matrix mapping the sample onto the mean shape.
        translation: Centroid of the augmented landmarks before normalization.
        norm: Frobenius norm of the centered landmarks.
    """

    rotation: np.ndarray
    translation: Tuple[float, float]
    norm: float

    def __post_init__(self):
        rotation = np.asarray(self.rotation, dtype=np.float64)
        if rotation.shape != (2, 2):
            raise ValueError(f"rotation must be 2x2, got {rotation.shape}")
        if len(self.translation) != 2:
            raise ValueError("translation must have 2 components")
        if self.norm <= 0:
            raise ValueError("norm must be > 0")
        object.__setattr__(self, "rotation", rotation)
        translation = (float(self.translation[0]), float(self.translation[1]))
        object.__setattr__(self, "translation", translation)
        object.__setattr__(self, "norm", float(self.norm))

    def to_metadata(self) -> Dict[str, float]:
        """Flatten into scalar fields under stable keys."""
        values = (
            self.rotation[0, 0],
            self.rotation[1, 0],
            self.rotation[1, 1],
            self.rotation[0, 1],
            self.translation[0],
            self.translation[1],
            self.norm,
        )
        return {key: float(value) for key, value in zip(METADATA_KEYS, values)}

    @staticmethod
    def from_metadata(
        metadata: Mapping[str, float], sample_id: Optional[str] = None
    ) -> "AlignmentParameters":
        """Rebuild parameters exported by :meth:`to_metadata`."""
        missing = [key for key in METADATA_KEYS if key not in metadata]
        if missing:
            raise StaleMetadataError(
                f"alignment metadata is missing {missing}", sample_id=sample_id
            )
        rotation = np.array(
            [
                [metadata["align_r00"], metadata["align_r01"]],
                [metadata["align_r10"], metadata["align_r11"]],
            ],
            dtype=np.float64,
        )
        return AlignmentParameters(
            rotation=rotation,
            translation=(metadata["align_mean_x"], metadata["align_mean_y"]),
            norm=metadata["align_norm"],
        )


@dataclass(frozen=True, eq=False)
class MeanShape:
    """Point-wise mean of normalized training shapes (N x 2)."""

    points: np.ndarray

    def __post_init__(self):
        points = np.array(self.points, dtype=np.float32)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"MeanShape points must be (N, 2), got {points.shape}")
        points.setflags(write=False)
        object.__setattr__(self, "points", points)

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])

    def to_bytes(self) -> bytes:
        """Serialize as row/col counts followed by row-major float32 values."""
        header = np.array(self.points.shape, dtype=_BLOB_HEADER_DTYPE)
        body = np.ascontiguousarray(self.points, dtype=_BLOB_VALUE_DTYPE)
        return header.tobytes() + body.tobytes()

    @staticmethod
    def from_bytes(blob: bytes, expected_points: Optional[int] = None) -> "MeanShape":
        """Deserialize a blob written by :meth:`to_bytes`."""
        header_size = 2 * _BLOB_HEADER_DTYPE.itemsize
        if len(blob) < header_size:
            raise ValueError("MeanShape blob is truncated")
        header = np.frombuffer(blob[:header_size], dtype=_BLOB_HEADER_DTYPE)
        rows, cols = int(header[0]), int(header[1])
        body = np.frombuffer(blob[header_size:], dtype=_BLOB_VALUE_DTYPE)
        if cols != 2 or body.size != rows * cols:
            raise ValueError(
                f"MeanShape blob holds {body.size} values, header says {rows}x{cols}"
            )
        if expected_points is not None and rows != expected_points:
            raise CorrespondenceError(
                f"stored MeanShape has {rows} points, expected {expected_points}"
            )
        return MeanShape(points=body.reshape(rows, cols))

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_bytes(self.to_bytes())

    @staticmethod
    def load(
        path: Union[str, Path], expected_points: Optional[int] = None
    ) -> "MeanShape":
        return MeanShape.from_bytes(Path(path).read_bytes(), expected_points)


@dataclass(frozen=True)
class Triangle:
    """Triangle with integer pixel vertices."""

    vertices: Tuple[PixelPoint, PixelPoint, PixelPoint]

    def as_array(self) -> np.ndarray:
        """Vertices as a (3, 2) float32 array."""
        return np.array(self.vertices, dtype=np.float32)

    @property
    def area(self) -> float:
        (x0, y0), (x1, y1), (x2, y2) = self.vertices
        return abs((x1 - x0) * (y2 - y0) - (x2 - x0) * (y1 - y0)) / 2.0


@dataclass(frozen=True, eq=False)
class LandmarkSample:
    """Image plus its ordered landmarks, boxes and derived per-sample state."""

    image: np.ndarray
    points: Sequence[Point] = ()
    boxes: Sequence[LandmarkBox] = ()
    sample_id: Optional[str] = None
    alignment: Optional[AlignmentParameters] = None
    triangles: Optional[Tuple[Triangle, ...]] = None

    def __post_init__(self):
        if self.image.ndim not in (2, 3):
            raise ValueError(f"Unsupported image shape: {self.image.shape}")
        object.__setattr__(
            self, "points", tuple((float(x), float(y)) for x, y in self.points)
        )
        object.__setattr__(self, "boxes", tuple(self.boxes))

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def with_alignment(self, alignment: AlignmentParameters) -> "LandmarkSample":
        return replace(self, alignment=alignment)

    def with_triangles(self, triangles: Sequence[Triangle]) -> "LandmarkSample":
        return replace(self, triangles=tuple(triangles))

    def with_image(self, image: np.ndarray) -> "LandmarkSample":
        return replace(self, image=image)
