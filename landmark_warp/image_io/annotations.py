"""JSON annotation files and alignment metadata records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from landmark_warp.errors import StaleMetadataError
from landmark_warp.geometry.landmark_models import (
    AlignmentParameters,
    LandmarkBox,
    LandmarkSample,
)
from landmark_warp.image_io.image_loader import load_image


def _sample_from_record(record: Mapping[str, Any], image_root: Path) -> LandmarkSample:
    if "image" not in record:
        raise ValueError(f"annotation record has no image: {record}")
    points = record.get("points") or []
    for point in points:
        if len(point) != 2:
            raise ValueError(f"landmark must be [x, y], got {point}")
    boxes = []
    for rect in record.get("rects") or []:
        if len(rect) != 4:
            raise ValueError(f"rect must be [x, y, w, h], got {rect}")
        boxes.append(LandmarkBox.from_xywh(*rect))
    image_path = image_root / record["image"]
    return LandmarkSample(
        image=load_image(image_path),
        points=[tuple(point) for point in points],
        boxes=boxes,
        sample_id=str(record.get("id", Path(record["image"]).stem)),
    )


def load_samples(
    annotation_path: Union[str, Path], image_root: Optional[Union[str, Path]] = None
) -> List[LandmarkSample]:
    """
    Load samples from a JSON list of ``{"id", "image", "points", "rects"}``.

    Image paths are resolved against ``image_root``, defaulting to the
    annotation file's directory. Rects are ``[x, y, w, h]``.
    """
    annotation_path = Path(annotation_path)
    root = Path(image_root) if image_root is not None else annotation_path.parent
    records = json.loads(annotation_path.read_text())
    if not isinstance(records, list):
        raise ValueError("annotation file must contain a JSON list")
    return [_sample_from_record(record, root) for record in records]


def export_alignment_records(samples: Sequence[LandmarkSample]) -> List[Dict[str, Any]]:
    """Flatten each sample's alignment into ``{"id": ..., <metadata keys>}``."""
    records = []
    for sample in samples:
        if sample.alignment is None:
            raise StaleMetadataError(
                "cannot export a sample without alignment", sample_id=sample.sample_id
            )
        records.append({"id": sample.sample_id, **sample.alignment.to_metadata()})
    return records


def apply_alignment_records(
    samples: Sequence[LandmarkSample], records: Sequence[Mapping[str, Any]]
) -> List[LandmarkSample]:
    """Reattach exported alignment metadata to samples by id."""
    by_id = {record.get("id"): record for record in records}
    aligned = []
    for sample in samples:
        record = by_id.get(sample.sample_id)
        if record is None:
            raise StaleMetadataError(
                "no alignment record for sample", sample_id=sample.sample_id
            )
        aligned.append(
            sample.with_alignment(
                AlignmentParameters.from_metadata(record, sample_id=sample.sample_id)
            )
        )
    return aligned
