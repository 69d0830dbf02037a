"""
Planar helpers shared by the ROI stages.

The parking frame is translated to the spot's left-top corner and rotated so the
spot's top edge lies along +x. Moving a world point into it is
``rotate(p - origin_point, -origin_heading)``; moving back is the inverse.
"""

from dataclasses import dataclass
import math
from typing import Iterable, List

import numpy as np

from Types import Point2D


def normalize_angle(angle: float) -> float:
    """Wrap an angle to [-pi, pi)."""
    return (angle + math.pi) % (2 * math.pi) - math.pi


def rotate(point: Point2D, angle: float) -> Point2D:
    """Rotate a point about the origin by ``angle`` radians."""
    c, s = math.cos(angle), math.sin(angle)
    return (point[0] * c - point[1] * s, point[0] * s + point[1] * c)


def vector_angle(start: Point2D, end: Point2D) -> float:
    """Heading of the vector start -> end."""
    return math.atan2(end[1] - start[1], end[0] - start[0])


def distance(p1: Point2D, p2: Point2D) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def cross_prod(start: Point2D, end_1: Point2D, end_2: Point2D) -> float:
    """
    Cross product of (end_1 - start) x (end_2 - start).

    Negative when start -> end_1 -> end_2 turns clockwise.
    """
    return ((end_1[0] - start[0]) * (end_2[1] - start[1])
            - (end_1[1] - start[1]) * (end_2[0] - start[0]))


@dataclass(frozen=True)
class OriginFrame:
    """Translation and rotation of the parking-local frame."""
    origin_point: Point2D
    origin_heading: float

    def to_local(self, point: Point2D) -> Point2D:
        """World point -> parking frame."""
        shifted = (point[0] - self.origin_point[0], point[1] - self.origin_point[1])
        return rotate(shifted, -self.origin_heading)

    def to_world(self, point: Point2D) -> Point2D:
        """Parking frame point -> world."""
        x, y = rotate(point, self.origin_heading)
        return (x + self.origin_point[0], y + self.origin_point[1])

    def points_to_local(self, points: Iterable[Point2D]) -> List[Point2D]:
        return [self.to_local(p) for p in points]

    def points_to_world(self, points: Iterable[Point2D]) -> List[Point2D]:
        return [self.to_world(p) for p in points]

    @staticmethod
    def from_spot_top_edge(left_top: Point2D, right_top: Point2D) -> "OriginFrame":
        """Origin at the left-top corner, x axis along left_top -> right_top."""
        return OriginFrame(origin_point=(float(left_top[0]), float(left_top[1])),
                           origin_heading=vector_angle(left_top, right_top))


def xy_boundary(points: Iterable[Point2D]) -> List[float]:
    """Axis-aligned bounds [x_min, x_max, y_min, y_max] of a point set."""
    arr = np.asarray(list(points), dtype=float)
    return [float(arr[:, 0].min()), float(arr[:, 0].max()),
            float(arr[:, 1].min()), float(arr[:, 1].max())]
