"""Image loading and saving with Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Load an image from file.

    Args:
        image_path: Path to the image file

    Returns:
        Image as numpy array
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    with Image.open(path) as img:
        return np.array(img)


def save_image(image_path: Union[str, Path], image: np.ndarray) -> None:
    """Save an array as an image, clipping non-uint8 data into [0, 255]."""
    image = np.asarray(image)
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    Path(image_path).parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(image).save(image_path)
