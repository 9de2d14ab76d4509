"""Band blending + reconstruction for multi-band image blending.

This module blends two Laplacian pyramids level by level using the Gaussian
pyramid of the mask, collapses the blended pyramid back into a single image,
and exposes `multiband_blend`, the one entry point the front ends call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from app.multiband_blending.errors import DimensionMismatch
from app.multiband_blending.pyramids import (
    CancelCheck,
    build_gaussian_pyramid,
    build_laplacian_pyramid,
    check_levels,
    raise_if_cancelled,
)
from app.multiband_blending.raster import Raster
from app.multiband_blending.resample import DEFAULT_SIGMA, KERNELS, expand, max_levels

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class BlendResult:
    """Output of one blend: the composite plus the pyramids used to build it."""

    result: Raster
    laplacian_levels: list[Raster]  # blended bands, finest to coarsest
    gaussian_levels_a: list[Raster]
    gaussian_levels_b: list[Raster]


def blend_level(lap_a: Raster, lap_b: Raster, mask: Raster, *, clamp_alpha: bool = True) -> Raster:
    """Blend one pyramid level: ``A * alpha + B * (1 - alpha)`` with ``alpha = mask / 255``.

    Args:
        lap_a: Level of image A's Laplacian pyramid.
        lap_b: Level of image B's Laplacian pyramid.
        mask: Same level of the mask's Gaussian pyramid (samples in [0, 255]).
        clamp_alpha: Clamp alpha to [0, 1]. When False, out-of-range mask
            samples extrapolate beyond either source.

    Returns:
        The blended level (each mask channel weights its own image channel).
    """
    if not (lap_a.size == lap_b.size == mask.size):
        raise DimensionMismatch(
            f"Level sizes differ: A {lap_a.size}, B {lap_b.size}, mask {mask.size}."
        )

    blended = []
    for la, lb, m in zip(lap_a.channels, lap_b.channels, mask.channels):
        alpha = m / 255.0
        if clamp_alpha:
            alpha = np.clip(alpha, 0.0, 1.0)
        blended.append(la * alpha + lb * (1.0 - alpha))

    return Raster(lap_a.width, lap_a.height, *blended)


def blend_laplacian_pyramids(
    laplacian_a: list[Raster],
    laplacian_b: list[Raster],
    gaussian_mask: list[Raster],
    *,
    clamp_alpha: bool = True,
    should_cancel: CancelCheck = None,
) -> list[Raster]:
    """Blend every level 0..levels of two Laplacian pyramids."""
    if not (len(laplacian_a) == len(laplacian_b) == len(gaussian_mask)):
        raise ValueError(
            f"Pyramid lengths differ: {len(laplacian_a)}, {len(laplacian_b)}, {len(gaussian_mask)}."
        )

    blended_pyramid = []
    for la, lb, gm in zip(laplacian_a, laplacian_b, gaussian_mask):
        blended_pyramid.append(blend_level(la, lb, gm, clamp_alpha=clamp_alpha))
        raise_if_cancelled(should_cancel, "band blending")
    return blended_pyramid


def reconstruct_from_pyramid(
    laplacian_pyramid: list[Raster],
    *,
    sigma: float = DEFAULT_SIGMA,
    kernel: str = "blur",
    should_cancel: CancelCheck = None,
) -> Raster:
    """Collapse a Laplacian pyramid: expand-and-add from the coarsest level down.

    Args:
        laplacian_pyramid: Levels ordered finest to coarsest; the last entry is
            the low-frequency base.

    Returns:
        Unclamped raster at the size of level 0.
    """
    if not laplacian_pyramid:
        raise ValueError("Cannot reconstruct an empty pyramid.")

    current = laplacian_pyramid[-1]
    for k in reversed(range(len(laplacian_pyramid) - 1)):
        Lk = laplacian_pyramid[k]
        up = expand(current, Lk.width, Lk.height, sigma=sigma, kernel=kernel)
        current = Lk + up
        raise_if_cancelled(should_cancel, "reconstruction")

    return current


def validate_inputs(image_a: Raster, image_b: Raster, mask: Raster, levels: int) -> None:
    """Check blend preconditions without touching pixel data."""
    check_levels(levels)
    if not (image_a.size == image_b.size == mask.size):
        raise DimensionMismatch(
            f"Inputs must share one size: A {image_a.size}, B {image_b.size}, mask {mask.size}."
        )


def multiband_blend(
    image_a: Raster,
    image_b: Raster,
    mask: Raster,
    levels: int,
    *,
    sigma: float = DEFAULT_SIGMA,
    kernel: str = "blur",
    clamp_alpha: bool = True,
    should_cancel: CancelCheck = None,
) -> BlendResult:
    """Blend `image_a` and `image_b` along `mask` with a Laplacian pyramid.

    Where the mask is 255 the result follows image A, where it is 0 it follows
    image B. Each frequency band uses the mask blurred to that band's scale,
    so coarse content gets a wide transition and fine detail a narrow one.

    Args:
        image_a: First source.
        image_b: Second source, same size as `image_a`.
        mask: Weight map, same size, samples in [0, 255].
        levels: Pyramid depth (>= 0). Level count is ``levels + 1``.
        sigma: Blur strength of the resampling filter.
        kernel: ``"blur"`` or ``"burt_adelson"``.
        clamp_alpha: Clamp per-level mask weights to [0, 1].
        should_cancel: Optional callable polled at level boundaries; when it
            returns True the blend stops with `BlendCancelled`.

    Returns:
        A `BlendResult` with the composite and the blended bands.

    Raises:
        InvalidLevels: If `levels` is not a non-negative int.
        DimensionMismatch: If the inputs differ in size.
    """
    validate_inputs(image_a, image_b, mask, levels)
    if kernel not in KERNELS:
        raise ValueError(f"Unknown resampling kernel {kernel!r}; expected one of {KERNELS}.")
    if sigma <= 0:
        raise ValueError(f"`sigma` must be > 0, got {sigma}.")

    logger.info(
        "Blending %dx%d images with %d levels (kernel=%s, sigma=%.2f)",
        image_a.width,
        image_a.height,
        levels,
        kernel,
        sigma,
    )
    if levels > max_levels(image_a.width, image_a.height):
        logger.warning(
            "%d levels exceed what %dx%d supports; coarse levels are clamped to 1 pixel",
            levels,
            image_a.width,
            image_a.height,
        )
    opts = dict(sigma=sigma, kernel=kernel, should_cancel=should_cancel)

    # 1. Gaussian pyramids for both images and the mask
    gaussian_a = build_gaussian_pyramid(image_a, levels, **opts)
    gaussian_b = build_gaussian_pyramid(image_b, levels, **opts)
    gaussian_mask = build_gaussian_pyramid(mask, levels, **opts)

    # 2. Laplacian pyramids
    laplacian_a = build_laplacian_pyramid(gaussian_a, **opts)
    laplacian_b = build_laplacian_pyramid(gaussian_b, **opts)

    # 3. Blend bands with the matching mask level
    blended = blend_laplacian_pyramids(
        laplacian_a,
        laplacian_b,
        gaussian_mask,
        clamp_alpha=clamp_alpha,
        should_cancel=should_cancel,
    )

    # 4. Reconstruct
    result = reconstruct_from_pyramid(blended, **opts)

    return BlendResult(
        result=result,
        laplacian_levels=blended,
        gaussian_levels_a=gaussian_a,
        gaussian_levels_b=gaussian_b,
    )
