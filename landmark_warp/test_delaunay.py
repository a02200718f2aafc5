"""Tests for per-sample Delaunay triangulation."""

from __future__ import annotations

import unittest

import cv2
import numpy as np

from landmark_warp.errors import MissingGeometryError
from landmark_warp.geometry.landmark_models import LandmarkBox, LandmarkSample
from landmark_warp.geometry.landmarks import augment_landmarks
from landmark_warp.mesh.delaunay import TriangleMesh, triangulate


def make_sample(points, box, width=50, height=50, sample_id="m"):
    return LandmarkSample(
        image=np.zeros((height, width), dtype=np.uint8),
        points=points,
        boxes=() if box is None else (box,),
        sample_id=sample_id,
    )


class TestTriangleMesh(unittest.TestCase):
    def test_square_splits_into_two_triangles(self) -> None:
        square = [(10.0, 10.0), (40.0, 10.0), (10.0, 40.0), (40.0, 40.0)]
        sample = make_sample(square, LandmarkBox(10.0, 10.0, 40.0, 40.0))

        triangles = TriangleMesh().build(sample)

        self.assertEqual(len(triangles), 2)
        vertices = {v for triangle in triangles for v in triangle.vertices}
        self.assertEqual(vertices, {(10, 10), (40, 10), (10, 40), (40, 40)})
        self.assertAlmostEqual(sum(t.area for t in triangles), 900.0)

    def test_vertices_strictly_inside_frame(self) -> None:
        rng = np.random.default_rng(3)
        points = [tuple(p) for p in rng.uniform(0, 100, size=(20, 2))]
        sample = make_sample(points, LandmarkBox(0.0, 0.0, 100.0, 80.0), width=100, height=80)

        triangles = TriangleMesh().build(sample)

        self.assertGreater(len(triangles), 0)
        for triangle in triangles:
            for x, y in triangle.vertices:
                self.assertTrue(0 < x < 100, (x, y))
                self.assertTrue(0 < y < 80, (x, y))

    def test_triangles_tile_convex_hull(self) -> None:
        rng = np.random.default_rng(11)
        points = np.unique(rng.integers(15, 85, size=(15, 2)), axis=0)
        box = LandmarkBox(5.0, 5.0, 95.0, 95.0)
        sample = make_sample([tuple(map(float, p)) for p in points], box, 100, 100)

        triangles = TriangleMesh().build(sample)

        hull_points = augment_landmarks(sample).astype(np.float32)
        hull_area = cv2.contourArea(cv2.convexHull(hull_points))
        self.assertAlmostEqual(sum(t.area for t in triangles), hull_area, places=3)

    def test_box_only_sample(self) -> None:
        sample = make_sample([], LandmarkBox(10.0, 10.0, 40.0, 30.0))
        self.assertEqual(augment_landmarks(sample).shape, (4, 2))

        triangles = TriangleMesh().build(sample)

        self.assertEqual(len(triangles), 2)

    def test_too_few_points(self) -> None:
        sample = make_sample([], LandmarkBox(5.0, 5.0, 5.0, 5.0))
        self.assertEqual(TriangleMesh().build(sample), [])

    def test_points_outside_image_are_ignored(self) -> None:
        sample = make_sample([(25.0, 25.0)], LandmarkBox(-10.0, -10.0, 60.0, 60.0))
        self.assertEqual(TriangleMesh().build(sample), [])

    def test_box_on_image_border(self) -> None:
        points = [(20.0, 20.0), (30.0, 22.0), (25.0, 35.0)]
        sample = make_sample(points, LandmarkBox(0.0, 0.0, 50.0, 50.0))
        for triangle in TriangleMesh().build(sample):
            for x, y in triangle.vertices:
                self.assertTrue(0 < x < 50 and 0 < y < 50)

    def test_missing_box(self) -> None:
        with self.assertRaises(MissingGeometryError):
            TriangleMesh().build(make_sample([(10.0, 10.0)], None))

    def test_triangulate_empty_frame(self) -> None:
        self.assertEqual(triangulate(np.zeros((0, 2)), 0, 0), [])


if __name__ == "__main__":
    unittest.main()
