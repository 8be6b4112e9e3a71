"""
Voronoi diagram rasterisation.

Every pixel takes the colour of its nearest seed point. Seeds are scattered
at random over the image, indexed in a :class:`KdTree`, and the image is
filled by one nearest-neighbour query per pixel. Rows are split into
disjoint bands rendered on worker processes; each worker receives its own
copy of the read-only tree and returns its band, which is copied into the
image.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..config import settings
from ..utils import random as random_utils
from .alea_prng import AleaPRNG
from .color import RandomColorConfig, Rgb, lerp_color, random_color
from .geometry import BoundingBox, Point
from .kdtree import KdTree
from .sampling import generate_distinct_random_points

logger = structlog.get_logger()

# Maps the nearest seed and its payload to the pixel colour
ColorFn = Callable[[Point, Any], Rgb]


@dataclass(frozen=True)
class GradientShader:
    """Colour a pixel by its nearest seed's x coordinate along a gradient."""
    color1: Rgb
    color2: Rgb
    width: int

    def __call__(self, point: Point, payload: Any = None) -> Rgb:
        t = point.x / self.width if self.width else 0.0
        return lerp_color(self.color1, self.color2, t)


def new_image(width: int, height: int, fill: Sequence[int] = (0, 0, 0)) -> np.ndarray:
    """Allocate an RGB image buffer of shape (height, width, 3)."""
    if width < 0 or height < 0:
        raise ValueError(f"Invalid image size {width}x{height}")
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :] = fill
    return img


def _image_size(img: np.ndarray) -> Tuple[int, int]:
    """Validate an image buffer and return (width, height)."""
    if img.ndim != 3 or img.shape[2] != 3 or img.dtype != np.uint8:
        raise ValueError(
            f"Expected a (height, width, 3) uint8 image, got shape {img.shape} dtype {img.dtype}"
        )
    height, width = img.shape[:2]
    return width, height


def render_band(tree: KdTree, width: int, start: int, stop: int,
                color_of: Optional[ColorFn] = None) -> np.ndarray:
    """
    Render rows ``start`` to ``stop`` (exclusive) into a new uint8 array.

    Without ``color_of`` the nearest seed's payload is used as the colour.
    """
    band = np.empty((stop - start, width, 3), dtype=np.uint8)
    for y in range(start, stop):
        row = []
        for x in range(width):
            point, payload = tree.nearest_neighbor(Point(x, y))
            row.append(payload if color_of is None else color_of(point, payload))
        band[y - start] = row
    return band


# Per-process state set once by the pool initializer
_worker_tree: Optional[KdTree] = None
_worker_color_of: Optional[ColorFn] = None


def _init_worker(tree: KdTree, color_of: Optional[ColorFn]) -> None:
    global _worker_tree, _worker_color_of
    _worker_tree = tree
    _worker_color_of = color_of


def _render_band_in_worker(width: int, start: int, stop: int) -> Tuple[int, np.ndarray]:
    return start, render_band(_worker_tree, width, start, stop, _worker_color_of)


def rasterize(
    img: np.ndarray,
    tree: KdTree,
    color_of: Optional[ColorFn] = None,
    workers: Optional[int] = None,
) -> None:
    """
    Paint every pixel of ``img`` with the colour of its nearest seed.

    Args:
        img: (height, width, 3) uint8 buffer, modified in place
        tree: Index over the seed points
        color_of: ``(point, payload) -> Rgb``; defaults to the payload itself.
            Must be picklable (a module-level function or a class instance
            such as :class:`GradientShader`) when ``workers > 1``.
        workers: Number of worker processes; defaults to
            ``settings.render_workers``. One worker renders in-process.

    Raises:
        RuntimeError: If the tree is empty. No pixel is written in that case.
    """
    width, height = _image_size(img)
    if not tree:
        raise RuntimeError("Cannot rasterise with an empty kd-tree")

    workers = settings.render_workers if workers is None else workers
    workers = max(1, min(workers, height))

    logger.info("Rasterising", width=width, height=height, seeds=len(tree), workers=workers)

    if height == 0 or width == 0:
        return

    if workers == 1:
        img[:] = render_band(tree, width, 0, height, color_of)
        return

    bounds = np.linspace(0, height, workers + 1).astype(int)
    bands = [(int(start), int(stop)) for start, stop in zip(bounds[:-1], bounds[1:]) if stop > start]
    with ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                             initargs=(tree, color_of)) as executor:
        futures = [executor.submit(_render_band_in_worker, width, start, stop)
                   for start, stop in bands]
        for future in futures:
            start, band = future.result()
            img[start:start + len(band)] = band


def _seed_points(img: np.ndarray, npoints: int, prng: AleaPRNG) -> List[Point]:
    width, height = _image_size(img)
    bbox = BoundingBox.from_dimensions(width, height)
    return generate_distinct_random_points(prng, npoints, bbox)


def gradient_voronoi(
    img: np.ndarray,
    color1: Rgb,
    color2: Rgb,
    npoints: int,
    prng: Optional[AleaPRNG] = None,
    workers: Optional[int] = None,
) -> None:
    """
    Draw a Voronoi diagram shaded by a horizontal gradient.

    Each cell is flat-shaded with the gradient from ``color1`` to ``color2``
    evaluated at its seed's x coordinate relative to the image width, not at
    the pixel's own position.

    Args:
        img: (height, width, 3) uint8 buffer, modified in place
        color1: Colour at x = 0
        color2: Colour at x = width
        npoints: Number of seed points; 0 leaves the image untouched
        prng: Generator for the seed positions; defaults to the shared one
        workers: Rasterisation processes
    """
    if npoints == 0:
        return

    if prng is None:
        prng = random_utils.get_prng()
    width, _ = _image_size(img)
    points = _seed_points(img, npoints, prng)

    tree = KdTree.from_vector([(pt, None) for pt in points])
    shader = GradientShader(Rgb(*color1), Rgb(*color2), width)

    logger.info("Generating gradient voronoi", npoints=npoints, color1=tuple(color1),
                color2=tuple(color2), depth=tree.depth)
    rasterize(img, tree, shader, workers=workers)


def random_voronoi(
    img: np.ndarray,
    color_config: RandomColorConfig,
    npoints: int,
    prng: Optional[AleaPRNG] = None,
    workers: Optional[int] = None,
) -> None:
    """
    Draw a Voronoi diagram with an independent random colour per cell.

    Args:
        img: (height, width, 3) uint8 buffer, modified in place
        color_config: Source of the per-seed colours
        npoints: Number of seed points; 0 leaves the image untouched
        prng: Generator for the seed positions; defaults to the shared one
        workers: Rasterisation processes
    """
    if npoints == 0:
        return

    if prng is None:
        prng = random_utils.get_prng()
    points = _seed_points(img, npoints, prng)

    entries = [(pt, random_color(color_config).to_rgb()) for pt in points]
    tree = KdTree.from_vector(entries)

    logger.info("Generating random voronoi", npoints=npoints,
                luminosity=color_config.luminosity.value, depth=tree.depth)
    rasterize(img, tree, workers=workers)
