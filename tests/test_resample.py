"""Tests for the Reduce / Expand operators."""

import numpy as np
import pytest

from app.multiband_blending.raster import Raster
from app.multiband_blending.resample import expand, max_levels, reduce, reduced_size


@pytest.mark.parametrize(
    "size, expected",
    [
        ((64, 48), (32, 24)),
        ((5, 3), (2, 1)),
        ((1, 7), (1, 3)),
        ((1, 1), (1, 1)),
        ((0, 4), (0, 2)),
    ],
)
def test_reduced_size(size, expected):
    assert reduced_size(*size) == expected


@pytest.mark.parametrize("size, expected", [((64, 64), 6), ((64, 3), 1), ((1, 10), 0), ((100, 75), 6)])
def test_max_levels(size, expected):
    assert max_levels(*size) == expected


@pytest.mark.parametrize("kernel", ["blur", "burt_adelson"])
def test_reduce_and_expand_sizes(textured, kernel):
    small = reduce(textured, kernel=kernel)
    assert small.size == (24, 20)

    big = expand(small, textured.width, textured.height, kernel=kernel)
    assert big.size == textured.size


def test_dimension_one_is_kept(make_solid):
    strip = make_solid(9, 1, (50, 60, 70))
    reduced = reduce(strip)
    assert reduced.size == (4, 1)
    assert reduce(reduce(reduce(reduced))).size == (1, 1)


def test_reduce_is_deterministic(textured):
    assert reduce(textured).equals(reduce(textured))
    small = reduce(textured)
    assert expand(small, 48, 40).equals(expand(small, 48, 40))


@pytest.mark.parametrize("kernel", ["blur", "burt_adelson"])
def test_constant_image_stays_constant(make_solid, kernel):
    flat = make_solid(32, 32, (40, 80, 120))
    round_trip = expand(reduce(flat, kernel=kernel), 32, 32, kernel=kernel)
    np.testing.assert_allclose(round_trip.to_array(), flat.to_array(), atol=1e-3)


def test_reduce_smooths(textured):
    before = np.std(textured.to_array())
    after = np.std(reduce(textured).to_array())
    assert after < before


def test_empty_raster_passes_through():
    empty = Raster.zeros(0, 0)
    assert reduce(empty).size == (0, 0)
    assert expand(empty, 0, 0).size == (0, 0)


def test_unknown_kernel_rejected(textured):
    with pytest.raises(ValueError):
        reduce(textured, kernel="lanczos")


def test_burt_adelson_rejects_incompatible_target(make_solid):
    with pytest.raises(ValueError):
        expand(make_solid(4, 4, (1, 2, 3)), 20, 20, kernel="burt_adelson")


@pytest.mark.parametrize("kernel", ["blur", "burt_adelson"])
@pytest.mark.parametrize("target", [(3, 1), (1, 3), (3, 3), (2, 2)])
def test_expand_from_single_pixel(make_solid, kernel, target):
    dot = make_solid(1, 1, (100, 100, 100))
    out = expand(dot, *target, kernel=kernel)

    assert out.size == target
    np.testing.assert_allclose(out.to_array(), 100.0, atol=1e-3)
