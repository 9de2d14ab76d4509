"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.multiband_blending.mask import create_gradient_mask  # noqa: E402
from app.multiband_blending.raster import Raster  # noqa: E402


def solid(width, height, rgb):
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = rgb
    return Raster.from_image(image)


@pytest.fixture
def red64():
    return solid(64, 64, (255, 0, 0))


@pytest.fixture
def blue64():
    return solid(64, 64, (0, 0, 255))


@pytest.fixture
def horizontal_mask64():
    return create_gradient_mask(64, 64, "horizontal")


@pytest.fixture
def textured():
    """Deterministic 48x40 RGB texture with edges and smooth regions."""
    rng = np.random.default_rng(1234)
    image = rng.integers(0, 256, size=(40, 48, 3), dtype=np.uint8)
    image[10:30, 12:36] = (200, 120, 40)
    return Raster.from_image(image)


@pytest.fixture
def make_solid():
    """Factory for solid-colour rasters: make_solid(width, height, (r, g, b))."""
    return solid
