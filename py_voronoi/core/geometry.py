"""
Integer point and axis-aligned bounding box primitives.

Coordinates live in the unsigned 32-bit domain used for pixel positions.
Arithmetic that would leave that domain raises instead of wrapping.
"""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional

U32_MAX = 0xFFFFFFFF


def _check_coordinate(value: int, name: str) -> int:
    """Validate a single u32 coordinate."""
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{name}={value} is outside the u32 range [0, {U32_MAX}]")
    return value


class Point(NamedTuple):
    """A 2D pixel coordinate."""

    x: int
    y: int

    @classmethod
    def checked(cls, x: int, y: int) -> Point:
        """Build a point, rejecting coordinates outside the u32 domain."""
        return cls(_check_coordinate(int(x), "x"), _check_coordinate(int(y), "y"))

    def lowest(self, other: Point) -> Point:
        """Component-wise minimum."""
        return Point(min(self.x, other.x), min(self.y, other.y))

    def highest(self, other: Point) -> Point:
        """Component-wise maximum."""
        return Point(max(self.x, other.x), max(self.y, other.y))

    def squared_distance(self, other: Point) -> int:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy


class BoundingBoxOverflowError(ValueError):
    """Raised when a bounding box corner would leave the coordinate domain."""


class BoundingBox:
    """
    Axis-aligned bounding box over integer points.

    A box is either empty (no points seen yet) or spans ``[min, max]``
    inclusive on both axes. The empty state is explicit: ``min`` and
    ``max`` are both ``None`` until the first ``expand_by_point`` call.
    """

    __slots__ = ("_min", "_max")

    def __init__(self, min_point: Optional[Point] = None, max_point: Optional[Point] = None):
        if (min_point is None) != (max_point is None):
            raise ValueError("min and max must both be set or both be None")
        if min_point is not None and (min_point.x > max_point.x or min_point.y > max_point.y):
            raise ValueError(f"Inverted bounding box: min={min_point} max={max_point}")
        self._min = min_point
        self._max = max_point

    @classmethod
    def new(cls) -> BoundingBox:
        """Create an empty bounding box."""
        return cls()

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> BoundingBox:
        """Create a box of the given size anchored at the origin."""
        return cls.from_dimensions_and_origin(Point(0, 0), width, height)

    @classmethod
    def from_dimensions_and_origin(cls, origin: Point, width: int, height: int) -> BoundingBox:
        """
        Create a box spanning ``[origin, origin + (width, height)]``.

        Raises:
            BoundingBoxOverflowError: If a dimension is negative or the far
                corner does not fit in the u32 domain.
        """
        origin = Point.checked(*origin)
        if width < 0 or height < 0:
            raise BoundingBoxOverflowError(
                f"Negative dimensions: width={width} height={height}"
            )
        far_x = origin.x + width
        far_y = origin.y + height
        if far_x > U32_MAX or far_y > U32_MAX:
            raise BoundingBoxOverflowError(
                f"Box from {tuple(origin)} with size {width}x{height} exceeds {U32_MAX}"
            )

        bbox = cls()
        bbox.expand_by_point(origin)
        bbox.expand_by_point(Point(far_x, far_y))
        return bbox

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> BoundingBox:
        """Smallest box containing every point; empty for no points."""
        bbox = cls()
        for point in points:
            bbox.expand_by_point(point)
        return bbox

    @property
    def is_empty(self) -> bool:
        return self._min is None

    @property
    def min(self) -> Optional[Point]:
        return self._min

    @property
    def max(self) -> Optional[Point]:
        return self._max

    @property
    def width(self) -> int:
        """Extent along x; 0 for an empty box."""
        if self.is_empty:
            return 0
        return self._max.x - self._min.x

    @property
    def height(self) -> int:
        """Extent along y; 0 for an empty box."""
        if self.is_empty:
            return 0
        return self._max.y - self._min.y

    def expand_by_point(self, pt: Point) -> None:
        """
        Grow the box so that it contains ``pt``.

        Raises:
            ValueError: If ``pt`` lies outside the u32 domain.
        """
        pt = Point.checked(*pt)
        if self.is_empty:
            self._min = Point(pt.x, pt.y)
            self._max = Point(pt.x, pt.y)
            return
        self._min = self._min.lowest(pt)
        self._max = self._max.highest(pt)

    def contains(self, pt: Point) -> bool:
        """Check whether ``pt`` lies inside the box, edges included."""
        if self.is_empty:
            return False
        return (
            self._min.x <= pt.x <= self._max.x
            and self._min.y <= pt.y <= self._max.y
        )

    def points(self) -> List[Point]:
        """Return the corners in clockwise order starting at ``min``."""
        self._require_non_empty("points")
        return [
            self._min,
            Point(self._max.x, self._min.y),
            self._max,
            Point(self._min.x, self._max.y),
        ]

    def center(self) -> Point:
        """Midpoint of the box, rounded down on both axes."""
        self._require_non_empty("center")
        return Point(
            (self._min.x + self._max.x) // 2,
            (self._min.y + self._max.y) // 2,
        )

    def _require_non_empty(self, operation: str) -> None:
        if self.is_empty:
            raise ValueError(f"Cannot compute {operation} of an empty bounding box")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self._min == other._min and self._max == other._max

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        if self.is_empty:
            return "BoundingBox(empty)"
        return f"BoundingBox(min={tuple(self._min)}, max={tuple(self._max)})"
