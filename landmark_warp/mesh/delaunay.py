"""Delaunay triangulation of box-augmented landmarks."""

from __future__ import annotations

from typing import List, Optional

import cv2
import numpy as np

from landmark_warp.config import MeshConfig
from landmark_warp.geometry.landmark_models import LandmarkSample, Triangle
from landmark_warp.geometry.landmarks import augment_landmarks

MESH_STAGE = "mesh.build"


def _inside_frame(vertices: np.ndarray, width: int, height: int) -> bool:
    xs = vertices[:, 0]
    ys = vertices[:, 1]
    return bool(np.all((xs > 0) & (xs < width) & (ys > 0) & (ys < height)))


def triangulate(points: np.ndarray, width: int, height: int) -> List[Triangle]:
    """
    Triangulate points with an incremental Delaunay subdivision of the frame.

    Points outside [0, width) x [0, height) cannot be inserted and are
    ignored. Vertices are rounded to the nearest pixel and triangles with
    any vertex outside the open frame (0, width) x (0, height) are dropped.

    Args:
        points: (N, 2) array of x, y coordinates
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Valid triangles in the order the subdivision reports them
    """
    if width <= 0 or height <= 0:
        return []

    points = np.asarray(points, dtype=np.float32).reshape(-1, 2)
    usable = points[
        (points[:, 0] >= 0)
        & (points[:, 0] < width)
        & (points[:, 1] >= 0)
        & (points[:, 1] < height)
    ]
    if len(np.unique(usable, axis=0)) < 3:
        return []

    subdiv = cv2.Subdiv2D((0, 0, int(width), int(height)))
    for x, y in usable:
        subdiv.insert((float(x), float(y)))

    triangles: List[Triangle] = []
    for row in subdiv.getTriangleList():
        vertices = np.rint(np.asarray(row, dtype=np.float64).reshape(3, 2)).astype(int)
        if not _inside_frame(vertices, width, height):
            continue
        triangles.append(
            Triangle(vertices=tuple((int(x), int(y)) for x, y in vertices))
        )
    return triangles


class TriangleMesh:
    """Builds the per-sample triangulation used for piecewise warping."""

    def __init__(self, config: Optional[MeshConfig] = None):
        self.config = config or MeshConfig()
        self.config.validate()

    def build(self, sample: LandmarkSample) -> List[Triangle]:
        augmented = augment_landmarks(sample, stage=MESH_STAGE)
        return triangulate(augmented, sample.width, sample.height)
