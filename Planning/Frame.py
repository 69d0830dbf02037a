from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from Geometry.Transforms import OriginFrame
from HDMap.Interfaces import Lane, ParkingSpace, PathQuery
from ObstacleDetection.Obstacle import PerceptionObstacle
from Types import ConvexPiece, EndPose, Point2D, Polyline, XYBoundary


@dataclass
class VehicleState:
    """Ego pose in world frame."""
    x: float
    y: float
    z: float = 0.0
    heading: float = 0.0

    def xy(self) -> Point2D:
        return (self.x, self.y)


@dataclass
class ResolvedTarget:
    """Parking spot resolved on the map plus the parking frame derived from it."""
    spot_id: str
    lane: Lane
    path: PathQuery
    spot: ParkingSpace
    origin_frame: Optional[OriginFrame] = None


@dataclass
class OpenSpaceInfo:
    """Everything the ROI decider writes for the downstream trajectory optimizer."""
    target_parking_spot_id: Optional[str] = None
    target_parking_lane: Optional[Lane] = None
    resolved_target: Optional[ResolvedTarget] = None
    origin_point: Optional[Point2D] = None
    origin_heading: float = 0.0
    roi_boundary: Polyline = field(default_factory=list)
    '''Closed stitched boundary in the parking frame.'''
    roi_xy_boundary: XYBoundary = field(default_factory=list)
    open_space_end_pose: EndPose = field(default_factory=list)
    obstacles_vertices_vec: List[ConvexPiece] = field(default_factory=list)
    obstacles_edges_num: np.ndarray = field(default_factory=lambda: np.zeros((0, 1), dtype=int))
    obstacles_num: int = 0
    obstacles_A: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    obstacles_b: np.ndarray = field(default_factory=lambda: np.zeros((0, 1)))

    @property
    def origin_frame(self) -> Optional[OriginFrame]:
        if self.origin_point is None:
            return None
        return OriginFrame(self.origin_point, self.origin_heading)


@dataclass
class Frame:
    """One planning cycle's view of the world; the ROI decider reads it and fills open_space_info."""
    vehicle_state: VehicleState
    obstacles: List[PerceptionObstacle] = field(default_factory=list)
    target_parking_spot_id: Optional[str] = None
    '''Parking space id from the routing request.'''
    open_space_info: OpenSpaceInfo = field(default_factory=OpenSpaceInfo)
