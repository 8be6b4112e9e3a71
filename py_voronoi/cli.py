"""
Command line driver.

Usage:
    py-voronoi gradient --color1 '#1d2b53' --color2 '#ff77a8' -o out.png
    py-voronoi palette --luminosity bright --npoints 200 -o out.png
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from matplotlib import image as mpimg

from .config import settings
from .core.color import Luminosity, RandomColorConfig, parse_color
from .core.voronoi import gradient_voronoi, new_image, random_voronoi
from .utils.random import set_random_seed

logger = structlog.get_logger()


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure structlog on top of the stdlib logging module."""
    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _dimension(value: str) -> int:
    size = int(value)
    if not 1 <= size <= settings.max_image_size:
        raise argparse.ArgumentTypeError(
            f"must be between 1 and {settings.max_image_size}, got {size}"
        )
    return size


def _color(value: str):
    try:
        return parse_color(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-voronoi", description="Render random Voronoi diagrams to PNG."
    )
    parser.add_argument("--log-level", type=str.upper, default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override LOG_LEVEL")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--width", type=_dimension, default=settings.default_width)
    common.add_argument("--height", type=_dimension, default=settings.default_height)
    common.add_argument("--npoints", type=int, default=settings.default_npoints,
                        help="Number of seed points (0 leaves the background)")
    common.add_argument("--seed", default="default", help="Random seed")
    common.add_argument("--workers", type=int, default=settings.render_workers,
                        help="Rasterisation worker processes")
    common.add_argument("--background", type=_color, default=parse_color("black"))
    common.add_argument("-o", "--output", type=Path, required=True, help="PNG file to write")

    subparsers = parser.add_subparsers(dest="mode", required=True)

    gradient = subparsers.add_parser("gradient", parents=[common],
                                     help="Cells shaded by a horizontal gradient")
    gradient.add_argument("--color1", type=_color, default=parse_color("black"))
    gradient.add_argument("--color2", type=_color, default=parse_color("white"))

    palette = subparsers.add_parser("palette", parents=[common],
                                    help="Cells with independent random colours")
    palette.add_argument("--luminosity", choices=[lum.value for lum in Luminosity],
                         default=Luminosity.RANDOM.value)
    palette.add_argument("--hue", type=float, nargs=2, metavar=("LO", "HI"), default=None,
                         help="Hue range in degrees")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.npoints < 0:
        parser.error("--npoints must not be negative")

    prng = set_random_seed(args.seed)
    img = new_image(args.width, args.height, args.background)

    try:
        if args.mode == "gradient":
            gradient_voronoi(img, args.color1, args.color2, args.npoints,
                             prng=prng, workers=args.workers)
        else:
            color_config = RandomColorConfig(
                prng=prng,
                hue=tuple(args.hue) if args.hue else None,
                luminosity=Luminosity(args.luminosity),
            )
            random_voronoi(img, color_config, args.npoints, prng=prng, workers=args.workers)
    except ValueError as e:
        logger.error("Generation failed", error=str(e), mode=args.mode)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    mpimg.imsave(args.output, img, format="png")
    logger.info("Wrote diagram", path=str(args.output), mode=args.mode,
                width=args.width, height=args.height, npoints=args.npoints)
    return 0


if __name__ == "__main__":
    sys.exit(main())
