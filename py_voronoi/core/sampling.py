"""Random seed point generation."""

from typing import List, Set

import structlog

from .alea_prng import AleaPRNG
from .geometry import BoundingBox, Point

logger = structlog.get_logger()


def generate_distinct_random_points(prng: AleaPRNG, n: int, bbox: BoundingBox) -> List[Point]:
    """
    Draw ``n`` pairwise distinct points uniformly from ``bbox``.

    Bounds are inclusive, matching :meth:`BoundingBox.contains`. Points are
    returned in the order they were drawn.

    Args:
        prng: Generator to draw coordinates from
        n: Number of points wanted
        bbox: Region the points must lie in

    Returns:
        List of ``n`` distinct points

    Raises:
        ValueError: If ``n`` is negative, the box is empty, or the box holds
            fewer than ``n`` integer points.
    """
    if n < 0:
        raise ValueError(f"Cannot generate a negative number of points: {n}")
    if n == 0:
        return []
    if bbox.is_empty:
        raise ValueError("Cannot generate points inside an empty bounding box")

    capacity = (bbox.width + 1) * (bbox.height + 1)
    if n > capacity:
        raise ValueError(
            f"Requested {n} distinct points but {bbox!r} only holds {capacity}"
        )

    lo, hi = bbox.min, bbox.max
    seen: Set[Point] = set()
    points: List[Point] = []
    draws = 0

    while len(points) < n:
        draws += 1
        point = Point(prng.randint(lo.x, hi.x), prng.randint(lo.y, hi.y))
        if point in seen:
            continue
        seen.add(point)
        points.append(point)

    logger.debug("Generated seed points", npoints=n, draws=draws, capacity=capacity)
    return points
