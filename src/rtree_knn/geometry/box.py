"""Axis-aligned bounding boxes and point-to-box minimum distance."""

from dataclasses import dataclass
from typing import Iterable

from .distance import MetricFn, squared_euclidean


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle with ``min_x <= max_x`` and ``min_y <= max_y``.

    A point is stored as a degenerate box whose min and max coincide.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_point(cls, point) -> "BoundingBox":
        x, y = float(point[0]), float(point[1])
        return cls(x, y, x, y)

    @classmethod
    def from_points(cls, points: Iterable) -> "BoundingBox":
        xs, ys = zip(*((float(p[0]), float(p[1])) for p in points))
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def union(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        boxes = list(boxes)
        return cls(
            min(b.min_x for b in boxes),
            min(b.min_y for b in boxes),
            max(b.max_x for b in boxes),
            max(b.max_y for b in boxes),
        )

    def extend(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box covering both this box and ``other``."""
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def contains(self, point) -> bool:
        """True if ``point`` lies inside the box or on its boundary."""
        return (
            self.min_x <= point[0] <= self.max_x
            and self.min_y <= point[1] <= self.max_y
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)


def box_distance(point, box: BoundingBox, metric: MetricFn = squared_euclidean) -> float:
    """Minimum distance under ``metric`` from ``point`` to any location in ``box``.

    Cases, checked in order:
      1. point inside the box (boundary included): 0, so a containing subtree
         always sorts ahead of boxes the point is merely near;
      2. within the y-range only: nearest of the two vertical edges at the
         point's own y;
      3. within the x-range only: nearest of the two horizontal edges at the
         point's own x;
      4. outside both ranges: nearest of the four corners.

    Degenerate boxes (a point or a segment) fall through the same cases.

    Args:
        point: Query point as (x, y) or (longitude, latitude).
        box: Box to measure against.
        metric: Point-to-point metric, squared Euclidean by default.

    Returns:
        The minimum metric value; 0 when the point is in the box.
    """
    px, py = point[0], point[1]
    in_x = box.min_x <= px <= box.max_x
    in_y = box.min_y <= py <= box.max_y

    if in_x and in_y:
        return 0.0
    if in_y:
        return min(metric(point, (box.min_x, py)), metric(point, (box.max_x, py)))
    if in_x:
        return min(metric(point, (px, box.min_y)), metric(point, (px, box.max_y)))
    return min(
        metric(point, (box.min_x, box.min_y)),
        metric(point, (box.min_x, box.max_y)),
        metric(point, (box.max_x, box.min_y)),
        metric(point, (box.max_x, box.max_y)),
    )
