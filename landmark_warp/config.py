"""Configuration models for the landmark warp pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional


_VALID_INTERPOLATIONS = {"linear", "nearest"}


@dataclass
class AlignmentConfig:
    """Configuration for mapping normalized shapes into the canonical frame."""

    canonical_scale: float = 150.0
    canonical_offset: float = 50.0

    def validate(self) -> None:
        """Validate configuration values."""
        if self.canonical_scale <= 0:
            raise ValueError("canonical_scale must be > 0")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "canonical_scale": self.canonical_scale,
            "canonical_offset": self.canonical_offset,
        }


@dataclass
class MeshConfig:
    """Configuration for per-sample Delaunay triangulation."""

    inject_box_corners: bool = True

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.inject_box_corners:
            raise ValueError("inject_box_corners cannot be disabled")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {"inject_box_corners": self.inject_box_corners}


@dataclass
class WarpConfig:
    """Configuration for piecewise-affine resampling."""

    interpolation: str = "linear"
    draw_edges: bool = False
    edge_color: int = 0
    edge_thickness: int = 1

    def validate(self) -> None:
        """Validate configuration values."""
        if self.interpolation not in _VALID_INTERPOLATIONS:
            raise ValueError(f"interpolation must be one of {_VALID_INTERPOLATIONS}")
        if not (0 <= self.edge_color <= 255):
            raise ValueError("edge_color must be in [0, 255]")
        if self.edge_thickness < 1:
            raise ValueError("edge_thickness must be >= 1")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "interpolation": self.interpolation,
            "draw_edges": self.draw_edges,
            "edge_color": self.edge_color,
            "edge_thickness": self.edge_thickness,
        }


@dataclass
class PipelineConfig:
    """Configuration for batch execution."""

    max_workers: Optional[int] = None
    show_progress: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 when provided")

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "max_workers": self.max_workers,
            "show_progress": self.show_progress,
        }


@dataclass
class LandmarkWarpConfig:
    """Root configuration for the align, mesh and warp workflow."""

    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)
    mesh: MeshConfig = field(default_factory=MeshConfig)
    warp: WarpConfig = field(default_factory=WarpConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    def validate(self) -> None:
        """Validate configuration values across groups."""
        self.alignment.validate()
        self.mesh.validate()
        self.warp.validate()
        self.pipeline.validate()

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict matching the canonical schema."""
        return {
            "alignment": self.alignment.to_dict(),
            "mesh": self.mesh.to_dict(),
            "warp": self.warp.to_dict(),
            "pipeline": self.pipeline.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LandmarkWarpConfig":
        """Build and validate a config from a nested dict, rejecting unknown keys."""
        groups = {
            "alignment": AlignmentConfig,
            "mesh": MeshConfig,
            "warp": WarpConfig,
            "pipeline": PipelineConfig,
        }
        unknown = set(data) - set(groups)
        if unknown:
            raise ValueError(f"Unknown config groups: {sorted(unknown)}")

        kwargs: Dict[str, Any] = {}
        for name, group_cls in groups.items():
            values = data.get(name) or {}
            valid_keys = {f.name for f in fields(group_cls)}
            invalid = set(values) - valid_keys
            if invalid:
                raise ValueError(f"{name} has invalid keys: {sorted(invalid)}")
            kwargs[name] = group_cls(**values)

        cfg = cls(**kwargs)
        cfg.validate()
        return cfg
