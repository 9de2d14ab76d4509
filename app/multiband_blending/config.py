"""Blend settings shared by the CLI and the GUI.

Settings can be read from a YAML file, e.g.::

    levels: 5
    kernel: burt_adelson
    mask_type: radial
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from app.multiband_blending.mask import MASK_TYPES
from app.multiband_blending.preprocess import LIMIT_DIMENSION
from app.multiband_blending.resample import DEFAULT_SIGMA, KERNELS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlendConfig:
    """Parameters of one blend run."""

    levels: int = 4
    kernel: str = "blur"
    sigma: float = DEFAULT_SIGMA
    clamp_alpha: bool = True
    mask_type: str = "horizontal"
    limit_dimension: int = LIMIT_DIMENSION

    def replace(self, **overrides: Any) -> "BlendConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def validate(self) -> "BlendConfig":
        """Raise `ValueError` on out-of-range settings; return self otherwise."""
        if isinstance(self.levels, bool) or not isinstance(self.levels, int) or self.levels < 0:
            raise ValueError(f"`levels` must be a non-negative integer, got {self.levels!r}.")
        if self.kernel not in KERNELS:
            raise ValueError(f"`kernel` must be one of {KERNELS}, got {self.kernel!r}.")
        if isinstance(self.sigma, bool) or not isinstance(self.sigma, numbers.Real) or self.sigma <= 0:
            raise ValueError(f"`sigma` must be a number > 0, got {self.sigma!r}.")
        if self.mask_type not in MASK_TYPES:
            raise ValueError(f"`mask_type` must be one of {MASK_TYPES}, got {self.mask_type!r}.")
        if not isinstance(self.clamp_alpha, bool):
            raise ValueError(f"`clamp_alpha` must be true or false, got {self.clamp_alpha!r}.")
        if (
            isinstance(self.limit_dimension, bool)
            or not isinstance(self.limit_dimension, int)
            or self.limit_dimension < 2
        ):
            raise ValueError(f"`limit_dimension` must be an integer >= 2, got {self.limit_dimension!r}.")
        return self


def parse_configs(config: str | Path) -> dict:
    """Load a YAML config file as a dict.

    Args:
        config: Path to YAML config file.

    Returns:
        Parsed config dictionary (empty if the file is not valid YAML).
    """
    with open(config, "r") as stream:
        try:
            configs = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            logger.error(exc)
            return {}
    return configs or {}


def load_config(path: str | Path | None = None) -> BlendConfig:
    """Build a validated `BlendConfig` from defaults plus an optional YAML file."""
    if path is None:
        return BlendConfig()

    values = parse_configs(path)
    if not isinstance(values, dict):
        raise ValueError(f"Config {path} must contain a mapping, got {type(values).__name__}.")

    known = {f.name for f in dataclasses.fields(BlendConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    return BlendConfig(**values).validate()
