"""Composable per-sample stages and the batch runner."""

from .runner import Pipeline, build_pipeline
from .stages import AlignStage, MeanImageStage, MeshStage, SampleStage, WarpStage

__all__ = [
    "AlignStage",
    "MeanImageStage",
    "MeshStage",
    "Pipeline",
    "SampleStage",
    "WarpStage",
    "build_pipeline",
]
