"""Tests for the gradient / file mask collaborators."""

import cv2
import numpy as np
import pytest

from app.multiband_blending.errors import SourceLoadFailed
from app.multiband_blending.mask import create_gradient_mask, load_mask


def test_horizontal_gradient(horizontal_mask64):
    mask = horizontal_mask64
    row = mask.r[0]

    assert mask.size == (64, 64)
    assert row[0] == 0.0 and row[-1] == 255.0
    assert np.all(np.diff(row) >= 0)
    assert np.array_equal(mask.r, mask.g) and np.array_equal(mask.g, mask.b)
    assert np.all(mask.r == row[np.newaxis, :])


def test_horizontal_ramp_is_centered():
    row = create_gradient_mask(100, 2, "horizontal").r[0]
    ramp = np.flatnonzero((row > 0) & (row < 255))
    assert ramp.min() >= 44 and ramp.max() <= 55


def test_vertical_gradient():
    mask = create_gradient_mask(10, 40, "vertical")
    column = mask.r[:, 3]
    assert column[0] == 0.0 and column[-1] == 255.0
    assert np.all(mask.r == column[:, np.newaxis])


def test_radial_gradient():
    mask = create_gradient_mask(64, 64, "radial")
    assert mask.r[32, 32] == pytest.approx(255.0)
    assert mask.r[0, 0] == pytest.approx(0.0)
    assert mask.r[32, 32] > mask.r[32, 50] > mask.r[32, 63]


@pytest.mark.parametrize("kind", ["horizontal", "vertical", "radial"])
def test_samples_within_8bit_range(kind):
    mask = create_gradient_mask(33, 21, kind)
    assert mask.r.min() >= 0.0 and mask.r.max() <= 255.0


def test_unknown_kind():
    with pytest.raises(ValueError):
        create_gradient_mask(8, 8, "diagonal")


def test_load_mask_resizes(tmp_path):
    gray = np.zeros((20, 30), dtype=np.uint8)
    gray[:, 15:] = 255
    path = tmp_path / "mask.png"
    cv2.imwrite(str(path), gray)

    mask = load_mask(path, 60, 40)
    assert mask.size == (60, 40)
    assert mask.r[0, 0] == 0.0 and mask.r[0, -1] == 255.0


def test_load_mask_missing(tmp_path):
    with pytest.raises(SourceLoadFailed):
        load_mask(tmp_path / "nope.png", 8, 8)
