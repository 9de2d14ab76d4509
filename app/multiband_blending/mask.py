"""Blend mask utilities.

The mask weights image A against image B per pixel: 255 selects A, 0 selects
B. Gradient masks reproduce the shapes offered by the demo UI; arbitrary
masks can be loaded from a grayscale image file.
"""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from app.multiband_blending.errors import SourceLoadFailed
from app.multiband_blending.preprocess import resize_image
from app.multiband_blending.raster import Raster

MASK_TYPES = ("horizontal", "vertical", "radial")

# Linear gradients ramp from black to white between these fractions of the axis.
RAMP_START = 0.45
RAMP_END = 0.55


def _linear_ramp(length: int) -> np.ndarray:
    t = (np.arange(length, dtype=np.float32) + 0.5) / max(length, 1)
    return np.clip((t - RAMP_START) / (RAMP_END - RAMP_START), 0.0, 1.0)


def _radial_ramp(width: int, height: int) -> np.ndarray:
    """White inside radius width/8 around the centre, black from radius width/1.5."""
    inner = width / 8.0
    outer = width / 1.5
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    dist = np.hypot(xs + 0.5 - width / 2.0, ys + 0.5 - height / 2.0)
    t = np.clip((dist - inner) / max(outer - inner, 1e-6), 0.0, 1.0)
    return 1.0 - t


def create_gradient_mask(width: int, height: int, kind: str = "horizontal") -> Raster:
    """Build a gradient mask raster with samples in [0, 255].

    Args:
        width: Mask width.
        height: Mask height.
        kind: "horizontal" (black left, white right), "vertical" (black top,
            white bottom) or "radial" (white centre, black border).

    Returns:
        A gray raster (all channels equal).
    """
    if kind == "horizontal":
        weights = np.broadcast_to(_linear_ramp(width)[np.newaxis, :], (height, width))
    elif kind == "vertical":
        weights = np.broadcast_to(_linear_ramp(height)[:, np.newaxis], (height, width))
    elif kind == "radial":
        weights = _radial_ramp(width, height)
    else:
        raise ValueError(f"Unknown mask type {kind!r}; expected one of {MASK_TYPES}.")

    plane = weights.astype(np.float32) * 255.0
    return Raster(width, height, plane, plane, plane)


def load_mask(path: str | Path, width: int, height: int) -> Raster:
    """Read a grayscale mask file and resize it to (width, height)."""
    gray = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if gray is None:
        raise SourceLoadFailed(f"Failed to read mask: {path}")
    return Raster.from_image(resize_image(gray, width, height))
