"""Gaussian/Laplacian pyramid utilities for multi-band blending.

References:
    Burt & Adelson (1983): A Multiresolution Spline With Application to Image Mosaics.
"""

from __future__ import annotations

import logging
import numbers
import os
from typing import Callable, Optional

from app.multiband_blending.errors import BlendCancelled, InvalidLevels
from app.multiband_blending.preprocess import save_png
from app.multiband_blending.raster import Raster
from app.multiband_blending.resample import DEFAULT_SIGMA, expand, reduce

logger = logging.getLogger(__name__)

CancelCheck = Optional[Callable[[], bool]]


def check_levels(levels: int) -> None:
    """Reject anything but a non-negative integer depth."""
    if isinstance(levels, bool) or not isinstance(levels, numbers.Integral):
        raise InvalidLevels(f"`levels` must be an integer, got {levels!r}.")
    if levels < 0:
        raise InvalidLevels(f"`levels` must be >= 0, got {levels}.")


def raise_if_cancelled(should_cancel: CancelCheck, where: str) -> None:
    """Level-boundary cancellation point."""
    if should_cancel is not None and should_cancel():
        raise BlendCancelled(f"Blend cancelled during {where}.")


def build_gaussian_pyramid(
    raster: Raster,
    levels: int,
    *,
    sigma: float = DEFAULT_SIGMA,
    kernel: str = "blur",
    should_cancel: CancelCheck = None,
) -> list[Raster]:
    """Build a Gaussian pyramid [G0, G1, ..., G_levels].

    Requesting more levels than the image supports is allowed: once an axis
    reaches 1 pixel it stays at 1 for every coarser level.
    """
    check_levels(levels)
    gaussian_pyramid = [raster]
    for _ in range(levels):
        gaussian_next = reduce(gaussian_pyramid[-1], sigma=sigma, kernel=kernel)
        gaussian_pyramid.append(gaussian_next)
        raise_if_cancelled(should_cancel, "Gaussian pyramid construction")

    logger.debug("Gaussian pyramid sizes: %s", [g.size for g in gaussian_pyramid])
    return gaussian_pyramid


def build_laplacian_pyramid(
    gaussian_pyramid: list[Raster],
    *,
    sigma: float = DEFAULT_SIGMA,
    kernel: str = "blur",
    should_cancel: CancelCheck = None,
) -> list[Raster]:
    """Build a Laplacian pyramid from a Gaussian pyramid.

    Level k holds ``G[k] - Expand(G[k+1])`` (signed, unclamped); the last level
    is the coarsest Gaussian level itself.
    """
    if not gaussian_pyramid:
        return []

    laplacian_pyramid = []
    num_levels = len(gaussian_pyramid)

    for k in range(num_levels - 1):
        gauss_k = gaussian_pyramid[k]
        gauss_k_plus_1 = gaussian_pyramid[k + 1]

        # Upsample the next level to match the current level's size
        gauss_k_plus_1_up = expand(gauss_k_plus_1, gauss_k.width, gauss_k.height, sigma=sigma, kernel=kernel)
        laplacian_pyramid.append(gauss_k - gauss_k_plus_1_up)
        raise_if_cancelled(should_cancel, "Laplacian pyramid construction")

    laplacian_pyramid.append(gaussian_pyramid[-1])
    return laplacian_pyramid


def save_pyramid(pyramid: list[Raster], directory: str, *, visualize: bool = False) -> list[str]:
    """Write each level as ``level_XX.png``.

    Args:
        pyramid: Levels ordered finest to coarsest.
        directory: Output directory (created if missing).
        visualize: Shift samples by +128 so signed detail is visible.

    Returns:
        Paths of the written files.
    """
    os.makedirs(directory, exist_ok=True)
    paths = []
    for k, level in enumerate(pyramid):
        path = os.path.join(directory, f"level_{k:02d}.png")
        save_png(path, level, visualize=visualize)
        paths.append(path)
    return paths
