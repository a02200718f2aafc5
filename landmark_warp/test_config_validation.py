"""Tests for configuration defaults and validation (pure Python)."""

from __future__ import annotations

import json
import unittest

from landmark_warp.config import (
    AlignmentConfig,
    LandmarkWarpConfig,
    MeshConfig,
    PipelineConfig,
    WarpConfig,
)


class TestConfigDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = LandmarkWarpConfig()
        self.assertEqual(cfg.alignment.canonical_scale, 150.0)
        self.assertEqual(cfg.alignment.canonical_offset, 50.0)
        self.assertFalse(cfg.warp.draw_edges)
        self.assertTrue(cfg.mesh.inject_box_corners)
        cfg.validate()

    def test_to_dict_json_safe(self) -> None:
        json.dumps(LandmarkWarpConfig().to_dict())

    def test_from_dict_round_trip(self) -> None:
        cfg = LandmarkWarpConfig.from_dict(
            {"alignment": {"canonical_scale": 100.0}, "warp": {"draw_edges": True}}
        )
        self.assertEqual(cfg.alignment.canonical_scale, 100.0)
        self.assertTrue(cfg.warp.draw_edges)
        self.assertEqual(LandmarkWarpConfig.from_dict(cfg.to_dict()).to_dict(), cfg.to_dict())


class TestConfigValidation(unittest.TestCase):
    def test_invalid_scale(self) -> None:
        with self.assertRaises(ValueError):
            AlignmentConfig(canonical_scale=0.0).validate()

    def test_corner_injection_cannot_be_disabled(self) -> None:
        with self.assertRaises(ValueError):
            MeshConfig(inject_box_corners=False).validate()

    def test_invalid_interpolation(self) -> None:
        with self.assertRaises(ValueError):
            WarpConfig(interpolation="cubic").validate()

    def test_invalid_edge_thickness(self) -> None:
        with self.assertRaises(ValueError):
            WarpConfig(edge_thickness=0).validate()

    def test_invalid_workers(self) -> None:
        with self.assertRaises(ValueError):
            PipelineConfig(max_workers=0).validate()

    def test_unknown_keys(self) -> None:
        with self.assertRaises(ValueError):
            LandmarkWarpConfig.from_dict({"render": {}})
        with self.assertRaises(ValueError):
            LandmarkWarpConfig.from_dict({"warp": {"thickness": 2}})

    def test_from_dict_validates(self) -> None:
        with self.assertRaises(ValueError):
            LandmarkWarpConfig.from_dict({"alignment": {"canonical_scale": -1.0}})


if __name__ == "__main__":
    unittest.main()
