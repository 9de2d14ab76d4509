"""Error kinds raised by the blending pipeline and its collaborators."""

from __future__ import annotations


class BlendError(ValueError):
    """Base class for precondition violations detected before any pixel work."""


class DimensionMismatch(BlendError):
    """The two source images and the mask do not share the same size."""


class InvalidLevels(BlendError):
    """The requested pyramid depth is not a non-negative integer."""


class SourceLoadFailed(FileNotFoundError):
    """An image (or mask) file could not be read or decoded."""


class BlendCancelled(RuntimeError):
    """A blend was cancelled at a level boundary before it finished."""
