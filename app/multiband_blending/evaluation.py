"""Quality measures for blended images.

- Reconstruction error against a reference (mean absolute error, 8-bit scale).
- Seam checks on a single row: largest column-to-column step and the width
  of the transition band between two sources.
- Q_AB/F edge preservation (Xydeas & Petrovic, 2000) for two sources.
"""

from __future__ import annotations

import cv2
import numpy as np

from app.multiband_blending.raster import Raster


def mean_absolute_error(a: Raster, b: Raster) -> float:
    """Mean absolute per-channel difference after clamping both to [0, 255]."""
    if a.size != b.size:
        raise ValueError(f"Raster sizes differ: {a.size} vs {b.size}.")
    if a.width == 0 or a.height == 0:
        return 0.0
    diff = np.clip(a.to_array(), 0.0, 255.0) - np.clip(b.to_array(), 0.0, 255.0)
    return float(np.mean(np.abs(diff)))


def _row(raster: Raster, row: int | None) -> np.ndarray:
    if row is None:
        row = raster.height // 2
    return raster.to_array()[row]  # (W, 3)


def max_column_step(raster: Raster, row: int | None = None) -> float:
    """Largest jump between horizontally adjacent pixels on `row` (any channel)."""
    line = _row(raster, row)
    if line.shape[0] < 2:
        return 0.0
    return float(np.max(np.abs(np.diff(line, axis=0))))


def transition_width(
    raster: Raster,
    row: int | None = None,
    channel: int = 0,
    low: float = 10.0,
    high: float = 245.0,
) -> int:
    """Number of columns on `row` whose `channel` lies strictly between `low` and `high`."""
    values = _row(raster, row)[:, channel]
    return int(np.count_nonzero((values > low) & (values < high)))


def compute_sobel_gradients(img: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Sobel edge strength and orientation (radians) of an RGB or gray image."""
    gray = img.astype(np.float32)
    if gray.ndim == 3:
        gray = cv2.cvtColor(gray, cv2.COLOR_RGB2GRAY)

    gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    return np.sqrt(gx**2 + gy**2), np.arctan2(gy, gx)


def compute_Q_preservation(g_src: np.ndarray, a_src: np.ndarray, g_fus: np.ndarray, a_fus: np.ndarray) -> np.ndarray:
    """Per-pixel edge preservation of a source in the fused image."""
    Tg, kg, Dg = 0.9994, -15.0, 0.5
    Ta, ka, Da = 0.9879, -22.0, 0.8
    eps = 1e-6

    # Strength ratio, always <= 1
    g_ratio = np.minimum(g_src, g_fus) / np.maximum(np.maximum(g_src, g_fus), eps)
    Qg = Tg / (1 + np.exp(kg * (g_ratio - Dg)))

    # Orientation difference folded into [0, pi/2]; edges are symmetric
    diff = np.abs(a_src - a_fus)
    diff = np.where(diff > np.pi, 2 * np.pi - diff, diff)
    diff = np.where(diff > np.pi / 2, np.pi - diff, diff)
    A_measure = 1.0 - diff / (np.pi / 2.0)
    Qa = Ta / (1 + np.exp(ka * (A_measure - Da)))

    return Qg * Qa


def compute_q_abf(fused: Raster, image_a: Raster, image_b: Raster) -> float:
    """Q_AB/F score in [0, 1] of `fused` with respect to sources A and B.

    Returns 0.0 when neither source has any edges.
    """
    g_F, a_F = compute_sobel_gradients(fused.to_image())
    g_A, a_A = compute_sobel_gradients(image_a.to_image())
    g_B, a_B = compute_sobel_gradients(image_b.to_image())

    Q_AF = compute_Q_preservation(g_A, a_A, g_F, a_F)
    Q_BF = compute_Q_preservation(g_B, a_B, g_F, a_F)

    # Weight by source edge strength
    total_den = float(np.sum(g_A + g_B))
    if total_den == 0:
        return 0.0
    return float(np.sum(Q_AF * g_A + Q_BF * g_B) / total_den)
