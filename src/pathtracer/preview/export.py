"""Image export utilities for rendered images.

Renders are already 8-bit, gamma-corrected RGB arrays, so export is a direct
hand-off to Pillow. The container format follows the file extension.

Example:
    >>> from pathtracer.preview.export import save_png
    >>> save_png(pixels, "image.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def _check_pixels(pixels: npt.NDArray[np.uint8]) -> None:
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {pixels.dtype}")


def image_to_pil(pixels: npt.NDArray[np.uint8]) -> PILImage.Image:
    """Wrap a rendered (H, W, 3) uint8 array as an RGB Pillow image.

    Raises:
        ValueError: If the array is not (H, W, 3) uint8.
    """
    _check_pixels(pixels)
    return PILImage.fromarray(np.ascontiguousarray(pixels))


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save a rendered image, row 0 at the top.

    Args:
        pixels: Image array of shape (H, W, 3) with dtype uint8.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ValueError: If the array is not (H, W, 3) uint8.
        OSError: If the file cannot be written.
    """
    path = Path(filepath)
    image_to_pil(pixels).save(path)
    logger.info("Saved %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar), in the images' own units.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
