"""Tests for RunContext utilities (pure Python)."""

from __future__ import annotations

import json
import unittest

from landmark_warp.config import LandmarkWarpConfig
from landmark_warp.utils.run_context import RunContext


class TestRunContext(unittest.TestCase):
    def test_log_line_format(self) -> None:
        ctx = RunContext(run_id="abc", verbose=False)
        line = ctx.log("warn", "two boxes", sample="s1", boxes=2)
        self.assertEqual(
            line, "[landmark_warp] run_id=abc level=warn msg=two boxes boxes=2 sample=s1"
        )
        self.assertEqual(ctx.messages("warn"), ["two boxes"])
        self.assertEqual(ctx.messages("error"), [])

    def test_to_dict_json_safe(self) -> None:
        ctx = RunContext(config=LandmarkWarpConfig())
        json.dumps(ctx.to_dict())

    def test_time_block_records(self) -> None:
        ctx = RunContext()
        with ctx.time_block("align", sample_id="s"):
            pass
        self.assertEqual(len(ctx.stages), 1)
        self.assertEqual(ctx.stages[0].stage, "align")
        self.assertEqual(ctx.stages[0].sample_id, "s")
        self.assertGreaterEqual(ctx.stages[0].elapsed_ms, 0.0)

    def test_time_block_records_on_error(self) -> None:
        ctx = RunContext()
        with self.assertRaises(RuntimeError):
            with ctx.time_block("warp"):
                raise RuntimeError("boom")
        self.assertEqual(ctx.stages[0].stage, "warp")


if __name__ == "__main__":
    unittest.main()
