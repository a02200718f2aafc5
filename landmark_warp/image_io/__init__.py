"""Image and annotation IO at the pipeline boundary."""

from .annotations import apply_alignment_records, export_alignment_records, load_samples
from .image_loader import load_image, save_image

__all__ = [
    "apply_alignment_records",
    "export_alignment_records",
    "load_image",
    "load_samples",
    "save_image",
]
