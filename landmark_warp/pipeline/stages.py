"""Pipeline stages; each consumes a sample and returns an updated copy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from landmark_warp.alignment.procrustes import project_sample
from landmark_warp.config import AlignmentConfig, WarpConfig
from landmark_warp.geometry.landmark_models import LandmarkSample, MeanShape
from landmark_warp.mesh.delaunay import TriangleMesh
from landmark_warp.warping.mean_image import MeanImage
from landmark_warp.warping.piecewise_affine import Warper


class SampleStage(Protocol):
    """Anything with a name that maps a sample to a new sample."""

    name: str

    def __call__(self, sample: LandmarkSample) -> LandmarkSample:
        ...


@dataclass
class AlignStage:
    """Attach Procrustes parameters computed against a fixed mean shape."""

    mean_shape: MeanShape
    config: AlignmentConfig = field(default_factory=AlignmentConfig)
    name: str = "align"

    def __call__(self, sample: LandmarkSample) -> LandmarkSample:
        alignment = project_sample(sample, self.mean_shape, self.config)
        return sample.with_alignment(alignment)


@dataclass
class MeshStage:
    """Attach the sample's own Delaunay triangulation."""

    mesh: TriangleMesh = field(default_factory=TriangleMesh)
    name: str = "mesh"

    def __call__(self, sample: LandmarkSample) -> LandmarkSample:
        return sample.with_triangles(self.mesh.build(sample))


@dataclass
class WarpStage:
    """Replace the image by its canonical-frame warp, or by an edge overlay."""

    alignment_config: AlignmentConfig = field(default_factory=AlignmentConfig)
    warp_config: WarpConfig = field(default_factory=WarpConfig)
    name: str = "warp"

    def __post_init__(self):
        self._warper = Warper(self.alignment_config, self.warp_config)

    def __call__(self, sample: LandmarkSample) -> LandmarkSample:
        if self.warp_config.draw_edges:
            return sample.with_image(self._warper.overlay(sample))
        return sample.with_image(self._warper.warp(sample))


@dataclass
class MeanImageStage:
    """Replace the image by a trained mean image."""

    mean_image: MeanImage
    name: str = "mean_image"

    def __call__(self, sample: LandmarkSample) -> LandmarkSample:
        return self.mean_image.project(sample)
