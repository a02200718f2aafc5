"""Triangle-by-triangle affine warping of a sample into the canonical frame."""

from __future__ import annotations

from typing import Optional, Sequence

import cv2
import numpy as np

from landmark_warp.config import AlignmentConfig, WarpConfig
from landmark_warp.errors import CorrespondenceError, StaleMetadataError
from landmark_warp.geometry.landmark_models import (
    AlignmentParameters,
    LandmarkSample,
    MeanShape,
    Triangle,
)
from landmark_warp.geometry.landmarks import to_canonical_frame
from landmark_warp.mesh.delaunay import TriangleMesh

WARP_STAGE = "warp"

_INTERPOLATION_FLAGS = {
    "linear": cv2.INTER_LINEAR,
    "nearest": cv2.INTER_NEAREST,
}

# Pixel types cv2.warpAffine resamples natively
_WARPABLE_DTYPES = frozenset(
    np.dtype(name) for name in ("uint8", "uint16", "int16", "float32", "float64")
)


def triangle_targets(
    triangle: Triangle,
    alignment: AlignmentParameters,
    scale: float = 150.0,
    offset: float = 50.0,
) -> np.ndarray:
    """Map a triangle into the canonical frame and apply the sample rotation."""
    source = to_canonical_frame(
        triangle.as_array(), alignment.translation, alignment.norm, scale, offset
    )
    return (source @ alignment.rotation).astype(np.float32)


def warp_triangles(
    image: np.ndarray,
    triangles: Sequence[Triangle],
    alignment: AlignmentParameters,
    *,
    scale: float = 150.0,
    offset: float = 50.0,
    interpolation: str = "linear",
) -> np.ndarray:
    """
    Composite per-triangle affine warps of ``image`` into a fresh buffer.

    Each triangle is resampled through the exact affine map taking it onto
    its target triangle; only pixels inside the target triangle that no
    earlier triangle has painted are written.

    Args:
        image: Source image (H x W or H x W x C)
        triangles: Triangles in source pixel coordinates
        alignment: Procrustes parameters of the sample
        scale: Canonical frame scale constant
        offset: Canonical frame origin offset
        interpolation: "linear" or "nearest"

    Returns:
        Image with the source shape and dtype; uncovered pixels are zero
    """
    if interpolation not in _INTERPOLATION_FLAGS:
        raise ValueError(f"Unknown interpolation: {interpolation}")
    flags = _INTERPOLATION_FLAGS[interpolation]

    source = image if image.dtype in _WARPABLE_DTYPES else image.astype(np.float64)
    height, width = image.shape[:2]
    output = np.zeros_like(source)
    covered = np.zeros((height, width), dtype=bool)

    for triangle in triangles:
        if triangle.area == 0:
            continue
        target = triangle_targets(triangle, alignment, scale, offset)
        affine = cv2.getAffineTransform(triangle.as_array(), target)
        scratch = cv2.warpAffine(
            source,
            affine,
            (width, height),
            flags=flags,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0,
        )
        # cv2 drops the channel axis for single-channel H x W x 1 input
        scratch = scratch.reshape(image.shape)

        mask = np.zeros((height, width), dtype=np.uint8)
        cv2.fillConvexPoly(mask, np.rint(target).astype(np.int32), 255, cv2.LINE_8)

        patch = (mask > 0) & ~covered
        output[patch] = scratch[patch]
        covered |= patch

    if source is not image:
        output = _restore_dtype(output, image.dtype)
    return output


def _restore_dtype(values: np.ndarray, dtype: np.dtype) -> np.ndarray:
    """Round and clip float64 pixels back into ``dtype``."""
    if dtype == np.bool_:
        return np.rint(values) != 0
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        values = np.clip(np.rint(values), info.min, info.max)
    return values.astype(dtype)


def draw_triangle_edges(
    image: np.ndarray,
    triangles: Sequence[Triangle],
    *,
    color: int = 0,
    thickness: int = 1,
) -> np.ndarray:
    """Return a copy of ``image`` with triangle edges drawn on it."""
    canvas = np.ascontiguousarray(image).copy()
    line_color = (float(color),) * 4
    for triangle in triangles:
        a, b, c = triangle.vertices
        cv2.line(canvas, a, b, line_color, thickness)
        cv2.line(canvas, b, c, line_color, thickness)
        cv2.line(canvas, c, a, line_color, thickness)
    return canvas


class Warper:
    """Resamples aligned samples into the canonical frame."""

    def __init__(
        self,
        alignment_config: Optional[AlignmentConfig] = None,
        warp_config: Optional[WarpConfig] = None,
    ):
        self.alignment_config = alignment_config or AlignmentConfig()
        self.warp_config = warp_config or WarpConfig()
        self.alignment_config.validate()
        self.warp_config.validate()
        self._mesh = TriangleMesh()

    def _triangles_for(
        self, sample: LandmarkSample, triangles: Optional[Sequence[Triangle]]
    ) -> Sequence[Triangle]:
        if triangles is not None:
            return triangles
        if sample.triangles is not None:
            return sample.triangles
        return self._mesh.build(sample)

    def warp(
        self,
        sample: LandmarkSample,
        alignment: Optional[AlignmentParameters] = None,
        mean_shape: Optional[MeanShape] = None,
        triangles: Optional[Sequence[Triangle]] = None,
    ) -> np.ndarray:
        """
        Warp a sample into the canonical frame.

        Alignment and triangles default to the ones carried by the sample.
        When ``mean_shape`` is given, the sample must correspond to it.
        """
        alignment = alignment or sample.alignment
        if alignment is None:
            raise StaleMetadataError(
                "sample has no alignment parameters; run alignment first",
                sample_id=sample.sample_id,
                stage=WARP_STAGE,
            )
        if mean_shape is not None and len(sample.points) + 4 != mean_shape.num_points:
            raise CorrespondenceError(
                f"sample has {len(sample.points) + 4} augmented landmarks, "
                f"mean shape has {mean_shape.num_points}",
                sample_id=sample.sample_id,
                stage=WARP_STAGE,
            )

        return warp_triangles(
            sample.image,
            self._triangles_for(sample, triangles),
            alignment,
            scale=self.alignment_config.canonical_scale,
            offset=self.alignment_config.canonical_offset,
            interpolation=self.warp_config.interpolation,
        )

    def overlay(
        self, sample: LandmarkSample, triangles: Optional[Sequence[Triangle]] = None
    ) -> np.ndarray:
        """Draw the sample's triangulation on a copy of its image."""
        return draw_triangle_edges(
            sample.image,
            self._triangles_for(sample, triangles),
            color=self.warp_config.edge_color,
            thickness=self.warp_config.edge_thickness,
        )
