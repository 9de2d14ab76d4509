"""Multi-band blending CLI entry point.

Note:
    The GUI (`gui/gui.py`) is the interactive way to run the demo. This module
    blends two image files from the command line and writes the composite,
    optionally with the blended Laplacian bands for inspection.

Example (run from repo root):
    python -m app.multiband_blending.cli_main apple.png orange.png -o out.png --levels 5
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from app.multiband_blending.config import BlendConfig, load_config
from app.multiband_blending.errors import BlendError
from app.multiband_blending.evaluation import compute_q_abf
from app.multiband_blending.fusion import multiband_blend
from app.multiband_blending.mask import MASK_TYPES, create_gradient_mask, load_mask
from app.multiband_blending.preprocess import ensure_same_size, load_image, save_png
from app.multiband_blending.pyramids import save_pyramid
from app.multiband_blending.resample import KERNELS

logger = logging.getLogger(__name__)


def run_blending(
    *,
    image_a_path: Path,
    image_b_path: Path,
    output_path: Path,
    config: BlendConfig,
    mask_path: Optional[Path] = None,
    levels_dir: Optional[Path] = None,
) -> Path:
    """Run the blending pipeline on two image files.

    Args:
        image_a_path: Image shown where the mask is white.
        image_b_path: Image shown where the mask is black.
        output_path: Where the blended PNG is written.
        config: Blend parameters.
        mask_path: Optional grayscale mask file; replaces the gradient mask.
        levels_dir: Optional directory for the blended Laplacian bands (+128 offset).

    Returns:
        Path to the written image.
    """
    logger.info("Loading source images...")
    image_a = load_image(image_a_path, config.limit_dimension)
    image_b = load_image(image_b_path, config.limit_dimension)
    image_a, image_b = ensure_same_size(image_a, image_b)

    if mask_path is not None:
        mask = load_mask(mask_path, image_a.width, image_a.height)
    else:
        mask = create_gradient_mask(image_a.width, image_a.height, config.mask_type)

    output = multiband_blend(
        image_a,
        image_b,
        mask,
        config.levels,
        sigma=config.sigma,
        kernel=config.kernel,
        clamp_alpha=config.clamp_alpha,
    )

    save_png(output_path, output.result)
    logger.info("Saved blended image to: %s", output_path)

    if levels_dir is not None:
        save_pyramid(output.laplacian_levels, str(levels_dir), visualize=True)
        logger.info("Saved %d Laplacian levels to: %s", len(output.laplacian_levels), levels_dir)

    logger.info("Q_AB/F: %.4f", compute_q_abf(output.result, image_a, image_b))
    return output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Laplacian pyramid (multi-band) blending of two images")
    parser.add_argument("image_a", type=Path, help="Image used where the mask is white")
    parser.add_argument("image_b", type=Path, help="Image used where the mask is black")
    parser.add_argument("-o", "--output", type=Path, help="Blended PNG output path", required=True)
    parser.add_argument("--config", type=Path, help="YAML file with blend settings", default=None)
    parser.add_argument("--levels", type=int, help="Pyramid depth (>= 0)", default=None)
    parser.add_argument("--mask-type", choices=MASK_TYPES, help="Gradient mask shape", default=None)
    parser.add_argument("--mask", type=Path, help="[Optional] Grayscale mask image", default=None)
    parser.add_argument("--limit", type=int, help="Max working width/height", default=None)
    parser.add_argument("--kernel", choices=KERNELS, help="Resampling kernel", default=None)
    parser.add_argument("--sigma", type=float, help="Blur strength of the 'blur' kernel", default=None)
    parser.add_argument(
        "--no-clamp-alpha",
        action="store_true",
        help="Let out-of-range mask values extrapolate instead of clamping alpha to [0, 1]",
    )
    parser.add_argument("--levels-dir", type=Path, help="Write blended Laplacian levels here", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config).replace(
            levels=args.levels,
            mask_type=args.mask_type,
            limit_dimension=args.limit,
            kernel=args.kernel,
            sigma=args.sigma,
            clamp_alpha=False if args.no_clamp_alpha else None,
        ).validate()
        output_path = run_blending(
            image_a_path=args.image_a,
            image_b_path=args.image_b,
            output_path=args.output,
            config=config,
            mask_path=args.mask,
            levels_dir=args.levels_dir,
        )
    except (BlendError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2

    print(f"Saved blended image to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
