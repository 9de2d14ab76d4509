"""Image loading / saving utilities for the blending demo.

This module reads source images from disk, bounds their size for interactive
use, brings two sources to a common size and writes results back as PNG.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from app.multiband_blending.errors import SourceLoadFailed
from app.multiband_blending.raster import Raster

logger = logging.getLogger(__name__)

LIMIT_DIMENSION = 512  # max side length for interactive performance


def read_rgb(path: str | Path) -> np.ndarray:
    """Read an image file as uint8 (H, W, 3) RGB.

    Raises:
        SourceLoadFailed: If the file is missing or cannot be decoded.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise SourceLoadFailed(f"Failed to read image: {path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def bounded_size(width: int, height: int, limit_dimension: int = LIMIT_DIMENSION) -> tuple[int, int]:
    """Scale (width, height) down to fit `limit_dimension`, then make both sides even."""
    if width > limit_dimension or height > limit_dimension:
        ratio = min(limit_dimension / width, limit_dimension / height)
        width = max(1, int(round(width * ratio)))
        height = max(1, int(round(height * ratio)))

    # Even sizes halve cleanly on the first pyramid step.
    if width > 1 and width % 2 == 1:
        width -= 1
    if height > 1 and height % 2 == 1:
        height -= 1
    return width, height


def resize_image(image: np.ndarray, width: int, height: int) -> np.ndarray:
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image
    interp = cv2.INTER_AREA if width < w or height < h else cv2.INTER_LINEAR
    return cv2.resize(image, (width, height), interpolation=interp)


def load_image(path: str | Path, limit_dimension: int = LIMIT_DIMENSION) -> Raster:
    """Load an image file into a raster at a bounded working size.

    Args:
        path: Image file readable by OpenCV.
        limit_dimension: Largest allowed width/height after scaling.

    Returns:
        An RGB raster with even dimensions no larger than `limit_dimension`.
    """
    image = read_rgb(path)
    h, w = image.shape[:2]
    new_w, new_h = bounded_size(w, h, limit_dimension)
    if (new_w, new_h) != (w, h):
        logger.debug("Resizing %s from %dx%d to %dx%d", path, w, h, new_w, new_h)
    return Raster.from_image(resize_image(image, new_w, new_h))


def resize_raster(raster: Raster, width: int, height: int) -> Raster:
    if raster.size == (width, height):
        return raster
    return Raster.from_array(resize_image(raster.to_array(), width, height).reshape(height, width, 3))


def ensure_same_size(image_a: Raster, image_b: Raster) -> tuple[Raster, Raster]:
    """Resize both rasters to their common (minimum) width and height."""
    width = min(image_a.width, image_b.width)
    height = min(image_a.height, image_b.height)
    return resize_raster(image_a, width, height), resize_raster(image_b, width, height)


def save_png(path: str | Path, raster: Raster, *, visualize: bool = False) -> Path:
    """Write a raster as an 8-bit PNG (clamped; +128 offset when `visualize`)."""
    image = raster.to_visual_image() if visualize else raster.to_image()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), cv2.cvtColor(image, cv2.COLOR_RGB2BGR)):
        raise OSError(f"Failed to write image: {path}")
    return path
