"""Multi-band (Laplacian pyramid) image blending.

Two images are decomposed into Laplacian pyramids, each band is blended with
the mask blurred to that band's scale, and the blended pyramid is collapsed
back into one seamless composite (Burt & Adelson, 1983).
"""

from app.multiband_blending.errors import (
    BlendCancelled,
    BlendError,
    DimensionMismatch,
    InvalidLevels,
    SourceLoadFailed,
)
from app.multiband_blending.fusion import BlendResult, multiband_blend
from app.multiband_blending.raster import Raster

__all__ = [
    "BlendCancelled",
    "BlendError",
    "BlendResult",
    "DimensionMismatch",
    "InvalidLevels",
    "Raster",
    "SourceLoadFailed",
    "multiband_blend",
]
