"""Per-channel floating point image buffer.

All pyramid math runs on `Raster` objects: three unclamped float32 planes
(red, green, blue). Values are clamped to the 8-bit range only when a raster
is turned back into a displayable image.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _freeze(channel: np.ndarray) -> np.ndarray:
    channel = np.array(channel, dtype=np.float32, order="C")
    channel.flags.writeable = False
    return channel


@dataclass(frozen=True, eq=False)
class Raster:
    """An immutable W x H buffer with independent float32 R, G, B planes."""

    width: int
    height: int
    r: np.ndarray  # (height, width) float32
    g: np.ndarray  # (height, width) float32
    b: np.ndarray  # (height, width) float32

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Raster size must be non-negative, got {self.width}x{self.height}.")
        expected = (self.height, self.width)
        for name in ("r", "g", "b"):
            channel = _freeze(getattr(self, name))
            if channel.shape != expected:
                raise ValueError(f"Channel {name!r} has shape {channel.shape}, expected {expected}.")
            object.__setattr__(self, name, channel)

    # -------------------------
    # Construction
    # -------------------------

    @classmethod
    def zeros(cls, width: int, height: int) -> "Raster":
        plane = np.zeros((height, width), dtype=np.float32)
        return cls(width, height, plane, plane, plane)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Raster":
        """Wrap a float (H, W, 3) RGB stack without any clamping."""
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected HxWx3 array, got shape {array.shape}.")
        h, w = array.shape[:2]
        return cls(w, h, array[:, :, 0], array[:, :, 1], array[:, :, 2])

    @classmethod
    def from_image(cls, image: np.ndarray) -> "Raster":
        """Convert an 8-bit RGB(A) or grayscale image into a raster.

        Args:
            image: uint8 array shaped (H, W), (H, W, 3) or (H, W, 4). Channel
                order is RGB; an alpha channel is dropped.

        Returns:
            A raster holding the samples as float32 in [0, 255].
        """
        if image.ndim == 2:
            image = image[:, :, np.newaxis].repeat(3, axis=2)
        elif image.ndim == 3 and image.shape[2] == 1:
            image = image.repeat(3, axis=2)
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ValueError(f"Expected HxW, HxWx3 or HxWx4 image, got shape {image.shape}.")
        return cls.from_array(image[:, :, :3].astype(np.float32))

    # -------------------------
    # Views / conversion
    # -------------------------

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def channels(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.r, self.g, self.b

    def to_array(self) -> np.ndarray:
        """Stack the planes into a fresh, writable float32 (H, W, 3) array."""
        return np.stack(self.channels, axis=-1)

    def to_image(self) -> np.ndarray:
        """Displayable uint8 (H, W, 3) RGB image: clamp to [0, 255], then round."""
        return np.rint(np.clip(self.to_array(), 0.0, 255.0)).astype(np.uint8)

    def to_visual_image(self) -> np.ndarray:
        """Render signed band-pass detail with zero mapped to neutral gray (128)."""
        return np.rint(np.clip(self.to_array() + 128.0, 0.0, 255.0)).astype(np.uint8)

    # -------------------------
    # Arithmetic (always returns a new raster)
    # -------------------------

    def _check_same_size(self, other: "Raster") -> None:
        if self.size != other.size:
            raise ValueError(f"Raster sizes differ: {self.size} vs {other.size}.")

    def add(self, other: "Raster") -> "Raster":
        self._check_same_size(other)
        return Raster(self.width, self.height, self.r + other.r, self.g + other.g, self.b + other.b)

    def subtract(self, other: "Raster") -> "Raster":
        self._check_same_size(other)
        return Raster(self.width, self.height, self.r - other.r, self.g - other.g, self.b - other.b)

    def __add__(self, other: "Raster") -> "Raster":
        return self.add(other)

    def __sub__(self, other: "Raster") -> "Raster":
        return self.subtract(other)

    def equals(self, other: "Raster") -> bool:
        """Bit-exact comparison of size and samples."""
        return self.size == other.size and all(
            np.array_equal(a, b) for a, b in zip(self.channels, other.channels)
        )
