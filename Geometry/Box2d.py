from __future__ import annotations

import math
from typing import List

from shapely.geometry import Point, Polygon

from Types import Point2D


class Box2d:
    """Oriented rectangle described by center, heading, length (along heading) and width."""

    def __init__(self, center: Point2D, heading: float, length: float, width: float) -> None:
        if length < 0.0 or width < 0.0:
            raise ValueError(f"Box2d needs non-negative size, got length={length}, width={width}")
        self.center: Point2D = (float(center[0]), float(center[1]))
        self.heading: float = heading
        self.length: float = length
        '''Extent along the heading direction.'''
        self.width: float = width
        '''Extent perpendicular to the heading direction.'''

    def corners(self) -> List[Point2D]:
        """
        The four corners in counter-clockwise order, starting at front-right.

        Front is +heading, left is +90 deg from heading.
        """
        half_l = self.length / 2.0
        half_w = self.width / 2.0
        cos_h, sin_h = math.cos(self.heading), math.sin(self.heading)
        local = [(half_l, -half_w), (half_l, half_w), (-half_l, half_w), (-half_l, -half_w)]
        cx, cy = self.center
        return [(cx + lx * cos_h - ly * sin_h, cy + lx * sin_h + ly * cos_h) for lx, ly in local]

    def extended(self, longitudinal: float, lateral: float) -> Box2d:
        """A copy whose length grows by ``longitudinal`` and width by ``lateral``."""
        return Box2d(self.center, self.heading, self.length + longitudinal, self.width + lateral)

    def polygon(self) -> Polygon:
        return Polygon(self.corners())

    def distance_to(self, point: Point2D) -> float:
        """Distance from the point to the box, 0 when the point is inside."""
        return float(self.polygon().distance(Point(point[0], point[1])))

    def __repr__(self) -> str:
        return (f"Box2d(center={self.center}, heading={self.heading:.3f}, "
                f"length={self.length:.3f}, width={self.width:.3f})")
