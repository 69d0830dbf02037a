"""
Narrow capability interfaces the ROI decider needs from a map.

The decider never touches a concrete map format: it asks a MapService for lanes and
parking spaces, and a PathQuery for projections, smooth points and road widths.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from Types import Point2D


@dataclass(frozen=True)
class MapPathPoint:
    """A point on a path with its heading and arc length."""
    x: float
    y: float
    heading: float
    s: float

    def xy(self) -> Point2D:
        return (self.x, self.y)


@dataclass
class Lane:
    """Lane centerline with per-point road widths and topology."""
    id: str
    centerline: np.ndarray
    '''(N, 2) centerline points in world frame.'''
    left_widths: np.ndarray
    '''(N,) distance from centerline to the left road edge.'''
    right_widths: np.ndarray
    '''(N,) distance from centerline to the right road edge.'''
    successor_ids: List[str] = field(default_factory=list)
    parking_space_ids: List[str] = field(default_factory=list)
    '''Ids of parking spaces overlapping this lane.'''

    def __post_init__(self) -> None:
        self.centerline = np.asarray(self.centerline, dtype=float).reshape(-1, 2)
        n = len(self.centerline)
        self.left_widths = np.broadcast_to(np.asarray(self.left_widths, dtype=float), (n,)).copy()
        self.right_widths = np.broadcast_to(np.asarray(self.right_widths, dtype=float), (n,)).copy()
        if n < 2:
            raise ValueError(f"Lane {self.id} needs at least 2 centerline points, got {n}")

    @property
    def accumulate_s(self) -> np.ndarray:
        steps = np.linalg.norm(np.diff(self.centerline, axis=0), axis=1)
        return np.concatenate(([0.0], np.cumsum(steps)))


@dataclass(frozen=True)
class ParkingSpace:
    """
    Parking spot polygon. With the spot opening facing up the corners are
    0: left-down, 1: right-down, 2: right-top, 3: left-top.
    """
    id: str
    polygon: Tuple[Point2D, ...]

    @property
    def left_down(self) -> Point2D:
        return self.polygon[0]

    @property
    def right_down(self) -> Point2D:
        return self.polygon[1]

    @property
    def right_top(self) -> Point2D:
        return self.polygon[2]

    @property
    def left_top(self) -> Point2D:
        return self.polygon[3]

    def is_well_formed(self) -> bool:
        return len(self.polygon) == 4


class PathQuery(ABC):
    """Arc-length queries along a lane path."""

    @property
    @abstractmethod
    def length(self) -> float:
        pass

    @property
    @abstractmethod
    def parking_space_overlaps(self) -> Sequence[str]:
        """Ids of parking spaces overlapping any lane of the path."""
        pass

    @abstractmethod
    def get_projection(self, point: Point2D) -> Optional[Tuple[float, float]]:
        """(s, l) of a point, s extrapolated past the path ends, l positive to the left. None on failure."""
        pass

    @abstractmethod
    def get_nearest_point(self, point: Point2D) -> Optional[Tuple[float, float]]:
        """(s, l) of the nearest point on the path, s clamped to [0, length]. None on failure."""
        pass

    @abstractmethod
    def get_smooth_point(self, s: float) -> MapPathPoint:
        """Interpolated point and heading at arc length s (clamped to the path)."""
        pass

    @abstractmethod
    def get_road_left_width(self, s: float) -> float:
        pass

    @abstractmethod
    def get_road_right_width(self, s: float) -> float:
        pass


class MapService(ABC):
    """Lane and parking-space lookup."""

    @abstractmethod
    def get_nearest_lane_with_heading(self, point: Point2D, distance: float, central_heading: float,
                                      max_heading_difference: float) -> Optional[Lane]:
        """Nearest lane within ``distance`` whose heading at the projection is within the tolerance."""
        pass

    @abstractmethod
    def get_lane_by_id(self, lane_id: str) -> Optional[Lane]:
        pass

    @abstractmethod
    def get_parking_space_by_id(self, spot_id: str) -> Optional[ParkingSpace]:
        pass
