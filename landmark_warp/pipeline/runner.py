"""Sequential per-sample execution and pooled batch execution of stages."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from landmark_warp.config import LandmarkWarpConfig
from landmark_warp.errors import LandmarkWarpError
from landmark_warp.geometry.landmark_models import LandmarkSample, MeanShape
from landmark_warp.mesh.delaunay import TriangleMesh
from landmark_warp.pipeline.stages import AlignStage, MeshStage, SampleStage, WarpStage
from landmark_warp.utils.manifest import build_manifest
from landmark_warp.utils.progress import iter_progress
from landmark_warp.utils.run_context import RunContext


class Pipeline:
    """Runs a fixed sequence of stages over samples."""

    def __init__(
        self,
        stages: Sequence[SampleStage],
        config: Optional[LandmarkWarpConfig] = None,
        context: Optional[RunContext] = None,
    ):
        self.config = config or LandmarkWarpConfig()
        self.config.validate()
        self.stages = list(stages)
        self.context = context or RunContext(config=self.config)
        if self.context.config is None:
            self.context.config = self.config

    def run(self, sample: LandmarkSample) -> LandmarkSample:
        """
        Apply every stage in order to one sample.

        Extra bounding boxes are logged once here. Stages only see the first
        box and the full set is put back on the result.
        """
        boxes = tuple(sample.boxes)
        if len(boxes) > 1:
            self.context.log(
                "warn",
                "multiple bounding boxes; using the first",
                sample=sample.sample_id,
                boxes=len(sample.boxes),
            )
            sample = replace(sample, boxes=boxes[:1])

        for stage in self.stages:
            with self.context.time_block(stage.name, sample_id=sample.sample_id):
                try:
                    sample = stage(sample)
                except LandmarkWarpError as exc:
                    if exc.stage is None:
                        exc.stage = stage.name
                    if exc.sample_id is None:
                        exc.sample_id = sample.sample_id
                    self.context.log(
                        "error",
                        exc.message,
                        error=type(exc).__name__,
                        sample=exc.sample_id,
                        stage=exc.stage,
                    )
                    raise
        if len(boxes) > 1:
            sample = replace(sample, boxes=boxes)
        return sample

    def run_many(self, samples: Sequence[LandmarkSample]) -> List[LandmarkSample]:
        """
        Process independent samples on a worker pool.

        Results keep the input order. The first failing sample's error is
        raised once the pool reaches it.
        """
        samples = list(samples)
        self.context.log("info", "batch started", samples=len(samples))
        with ThreadPoolExecutor(max_workers=self.config.pipeline.max_workers) as pool:
            results = list(
                iter_progress(
                    pool.map(self.run, samples),
                    desc="samples",
                    total=len(samples),
                    enabled=self.config.pipeline.show_progress,
                )
            )
        self.context.log("info", "batch finished", samples=len(results))
        return results

    def manifest(self, outputs: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build a manifest from everything this pipeline has logged."""
        return build_manifest(self.context, outputs=outputs)


def build_pipeline(
    mean_shape: MeanShape,
    config: Optional[LandmarkWarpConfig] = None,
    context: Optional[RunContext] = None,
) -> Pipeline:
    """Standard align, mesh and warp pipeline around a trained mean shape."""
    config = config or LandmarkWarpConfig()
    stages: List[SampleStage] = [
        AlignStage(mean_shape=mean_shape, config=config.alignment),
        MeshStage(mesh=TriangleMesh(config.mesh)),
        WarpStage(alignment_config=config.alignment, warp_config=config.warp),
    ]
    return Pipeline(stages, config=config, context=context)
