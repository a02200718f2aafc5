"""Tests for manifest schema integrity (pure Python)."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from landmark_warp.utils.manifest import build_manifest, write_manifest
from landmark_warp.utils.run_context import RunContext


class TestManifestSchema(unittest.TestCase):
    def test_manifest_contains_required_keys(self) -> None:
        ctx = RunContext(verbose=False)
        manifest = build_manifest(ctx, outputs={}, warnings=[], errors=[])
        for key in (
            "manifest_version",
            "run_id",
            "created_utc",
            "context",
            "stages",
            "outputs",
            "warnings",
            "errors",
        ):
            self.assertIn(key, manifest)

    def test_collects_logged_diagnostics(self) -> None:
        ctx = RunContext(verbose=False)
        ctx.log("warn", "two boxes")
        ctx.log("error", "no box")
        manifest = build_manifest(ctx)
        self.assertEqual(manifest["run_id"], ctx.run_id)
        self.assertEqual(manifest["warnings"], ["two boxes"])
        self.assertEqual(manifest["errors"], ["no box"])

    def test_write_manifest(self) -> None:
        ctx = RunContext(verbose=False)
        manifest = build_manifest(ctx, outputs={"path": Path("out.png")})
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "manifest.json"
            write_manifest(path, manifest)
            loaded = json.loads(path.read_text())
        self.assertEqual(loaded["outputs"]["path"], "out.png")


if __name__ == "__main__":
    unittest.main()
