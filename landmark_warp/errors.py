"""Error taxonomy for alignment, triangulation and warping."""

from __future__ import annotations

from typing import Optional


class LandmarkWarpError(ValueError):
    """Base error carrying the sample and stage that produced it."""

    def __init__(
        self,
        message: str,
        *,
        sample_id: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.sample_id = sample_id
        self.stage = stage

    def __str__(self) -> str:
        context = []
        if self.stage is not None:
            context.append(f"stage={self.stage}")
        if self.sample_id is not None:
            context.append(f"sample={self.sample_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class CorrespondenceError(LandmarkWarpError):
    """Landmark sets disagree in cardinality, so point i has no counterpart."""


class MissingGeometryError(LandmarkWarpError):
    """A sample has no bounding box to augment its landmarks with."""


class DegenerateShapeError(LandmarkWarpError):
    """All points of a shape coincide, so it cannot be scale-normalized."""


class StaleMetadataError(LandmarkWarpError):
    """Warping was requested before alignment parameters were computed."""


class MultipleGeometryWarning(UserWarning):
    """A sample carries more than one bounding box; only the first is used."""
