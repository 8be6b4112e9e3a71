"""
Static 2-d tree for nearest-neighbour queries over integer points.

The tree is built once from a list of ``(Point, payload)`` entries and never
mutated afterwards, so any number of threads may query it concurrently.
Splitting alternates between the x axis (even depths) and the y axis
(odd depths); each node is the median of its slice, which keeps the depth
logarithmic in the number of entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

import structlog

from .geometry import Point

logger = structlog.get_logger()

T = TypeVar("T")


class Axis(IntEnum):
    """Splitting dimension of a node."""
    X = 0
    Y = 1

    @classmethod
    def for_depth(cls, depth: int) -> Axis:
        return cls(depth % 2)

    def coordinate(self, point: Point) -> int:
        return point[self]


@dataclass(frozen=True)
class KdNode(Generic[T]):
    """A tree node; ``left`` holds smaller coordinates, ``right`` greater or equal."""
    point: Point
    payload: T
    axis: Axis
    left: Optional[KdNode[T]] = None
    right: Optional[KdNode[T]] = None


def _build(entries: List[Tuple[Point, T]], depth: int) -> Optional[KdNode[T]]:
    """Recursively build the subtree for ``entries``."""
    if not entries:
        return None

    axis = Axis.for_depth(depth)
    # sorted() is stable, so equal coordinates keep their input order
    ordered = sorted(entries, key=lambda entry: entry[0][axis])

    median = len(ordered) // 2
    split = ordered[median][0][axis]
    # Move to the first entry sharing the median coordinate so the left
    # subtree is strictly below the splitting plane.
    while median > 0 and ordered[median - 1][0][axis] == split:
        median -= 1

    point, payload = ordered[median]
    return KdNode(
        point=point,
        payload=payload,
        axis=axis,
        left=_build(ordered[:median], depth + 1),
        right=_build(ordered[median + 1:], depth + 1),
    )


def _height(node: Optional[KdNode[Any]]) -> int:
    if node is None:
        return 0
    return 1 + max(_height(node.left), _height(node.right))


class KdTree(Generic[T]):
    """
    Balanced 2-d tree answering nearest-neighbour queries.

    Use :meth:`from_vector` to construct one. An empty tree is valid and
    returns ``None`` for every query.
    """

    def __init__(self, root: Optional[KdNode[T]] = None, size: int = 0):
        self._root = root
        self._size = size

    @classmethod
    def from_vector(cls, entries: Sequence[Tuple[Point, T]]) -> KdTree[T]:
        """
        Build a tree from ``(point, payload)`` pairs.

        Args:
            entries: Points with their associated payloads. The sequence is
                not modified.

        Returns:
            The built tree. Identical input always yields an identical tree.

        Raises:
            ValueError: If a point lies outside the u32 domain.
        """
        entries = [(Point.checked(*point), payload) for point, payload in entries]
        tree = cls(_build(entries, 0), len(entries))
        logger.debug("Built kd-tree", size=tree._size, depth=tree.depth)
        return tree

    @property
    def root(self) -> Optional[KdNode[T]]:
        return self._root

    @property
    def depth(self) -> int:
        """Number of levels; 0 for an empty tree."""
        return _height(self._root)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._root is not None

    def __iter__(self) -> Iterator[Tuple[Point, T]]:
        """In-order traversal of the stored entries."""
        stack: List[KdNode[T]] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.point, node.payload
            node = node.right

    def nearest_neighbor(self, query: Point) -> Optional[Tuple[Point, T]]:
        """
        Find the stored entry closest to ``query``.

        The search descends on the query's side of every splitting plane and
        only visits the far side when the plane is strictly closer than the
        best distance found so far. When several entries are equidistant any
        of them may be returned.

        Returns:
            ``(point, payload)`` of the nearest entry, or ``None`` if the tree
            is empty.
        """
        if self._root is None:
            return None

        qx, qy = query
        best_node = self._root
        best_dist = self._root.point.squared_distance(query)

        def search(node: Optional[KdNode[T]]) -> None:
            nonlocal best_node, best_dist
            if node is None:
                return

            px, py = node.point
            dist = (px - qx) * (px - qx) + (py - qy) * (py - qy)
            if dist < best_dist:
                best_node, best_dist = node, dist

            diff = (qx - px) if node.axis is Axis.X else (qy - py)
            if diff < 0:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            search(near)
            if diff * diff < best_dist:
                search(far)

        search(self._root)
        return best_node.point, best_node.payload
