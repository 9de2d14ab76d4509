"""Reduce / Expand operators that move a raster one pyramid level down or up.

Two kernels are available:

- ``"blur"`` (default): a fixed-sigma Gaussian blur used uniformly at every
  level, followed by an area resample (Reduce) or preceded by a bilinear
  resample (Expand). This mirrors the fixed 2px blur of the browser demo and
  is a visual approximation of the classical pyramid kernel.
- ``"burt_adelson"``: the 5-tap kernel of Burt & Adelson (1983) through
  ``cv2.pyrDown`` / ``cv2.pyrUp`` with explicit destination sizes.

Both kernels are deterministic: the same input always yields bit-identical
output.
"""

from __future__ import annotations

import cv2
import numpy as np

from app.multiband_blending.raster import Raster

DEFAULT_SIGMA = 2.0
KERNELS = ("blur", "burt_adelson")

# 1-4-6-4-1 binomial taps of the Burt & Adelson generating kernel.
BURT_ADELSON_TAPS = np.array([1.0, 4.0, 6.0, 4.0, 1.0], dtype=np.float32) / 16.0


def _halve(dim: int) -> int:
    # A level never gets a zero dimension: 1 stays 1 (and an empty axis stays empty).
    return dim // 2 if dim >= 2 else dim


def reduced_size(width: int, height: int) -> tuple[int, int]:
    """Size of the next-coarser pyramid level."""
    return _halve(width), _halve(height)


def max_levels(width: int, height: int) -> int:
    """Deepest pyramid for which no level has to be clamped at dimension 1."""
    levels = 0
    while width >= 2 and height >= 2:
        width, height = width // 2, height // 2
        levels += 1
    return levels


def smooth(array: np.ndarray, sigma: float = DEFAULT_SIGMA) -> np.ndarray:
    """Fixed-radius Gaussian blur of an (H, W, C) float32 array."""
    return cv2.GaussianBlur(array, (0, 0), sigmaX=sigma, sigmaY=sigma, borderType=cv2.BORDER_REPLICATE)


def _check_kernel(kernel: str) -> None:
    if kernel not in KERNELS:
        raise ValueError(f"Unknown resampling kernel {kernel!r}; expected one of {KERNELS}.")


def reduce(raster: Raster, *, sigma: float = DEFAULT_SIGMA, kernel: str = "blur") -> Raster:
    """Smooth `raster`, then resample it to half its size (see `reduced_size`).

    Args:
        raster: Source level.
        sigma: Blur strength in pixels (``"blur"`` kernel only).
        kernel: ``"blur"`` or ``"burt_adelson"``.

    Returns:
        A new raster one level coarser.
    """
    _check_kernel(kernel)
    w, h = reduced_size(raster.width, raster.height)
    if raster.width == 0 or raster.height == 0:
        return Raster.zeros(w, h)

    src = raster.to_array()
    if kernel == "burt_adelson":
        out = cv2.pyrDown(src, dstsize=(w, h))
    else:
        out = smooth(src, sigma)
        if (w, h) != raster.size:
            out = cv2.resize(out, (w, h), interpolation=cv2.INTER_AREA)

    return Raster.from_array(out.reshape(h, w, 3))


def expand(
    raster: Raster,
    target_width: int,
    target_height: int,
    *,
    sigma: float = DEFAULT_SIGMA,
    kernel: str = "blur",
) -> Raster:
    """Resample `raster` up to exactly (target_width, target_height), then smooth.

    The caller passes the size of the finer level explicitly because levels
    are not exact powers of two of each other (odd sizes, dimension-1 clamp).
    """
    _check_kernel(kernel)
    if target_width == 0 or target_height == 0 or raster.width == 0 or raster.height == 0:
        return Raster.zeros(target_width, target_height)

    src = raster.to_array()
    if kernel == "burt_adelson":
        for target, source in ((target_width, raster.width), (target_height, raster.height)):
            if abs(target - 2 * source) != target % 2:
                raise ValueError(
                    f"burt_adelson expand cannot map {raster.size} to {(target_width, target_height)}."
                )
        if raster.width < 2 or raster.height < 2:
            # pyrUp leaves part of the output unwritten for 1-pixel sources.
            src = cv2.resize(src, (target_width, target_height), interpolation=cv2.INTER_LINEAR)
            out = cv2.sepFilter2D(
                src, -1, BURT_ADELSON_TAPS, BURT_ADELSON_TAPS, borderType=cv2.BORDER_REPLICATE
            )
        else:
            out = cv2.pyrUp(src, dstsize=(target_width, target_height))
    else:
        if (target_width, target_height) != raster.size:
            src = cv2.resize(src, (target_width, target_height), interpolation=cv2.INTER_LINEAR)
        out = smooth(src, sigma)

    return Raster.from_array(out.reshape(target_height, target_width, 3))
