"""
Stitch the parking spot rectangle into the lane boundary.

The spot sits on one road edge (the near edge). That edge is pulled in to hug the
spot, cut open between the spot's top corners, and the four spot corners are spliced
in. Together with the opposite (far) edge this gives one closed loop around the free
space, plus the same traversal as a list of 2-point segments.

Both sides are handled by one routine: the near edge is walked in the order in which
the spot corners are met (left-top first). For a spot on the right that is increasing
arc length, for a spot on the left it is decreasing arc length, which is handled by
reversing the edges and negating the stations.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from Geometry.Transforms import OriginFrame
from HDMap.Interfaces import ParkingSpace, PathQuery
from OpenSpaceRoi.BoundaryBuilder import LaneBoundary
from OpenSpaceRoi.Errors import GeometryInconsistency, MapQueryFailure
from Types import ParkingSide, Point2D, Polyline

_WIDTH_EPSILON = 1e-6


@dataclass(frozen=True)
class SpotProjection:
    """Station and lateral offset of the spot's top corners on the lane path."""
    left_top_s: float
    left_top_l: float
    right_top_s: float
    right_top_l: float

    @property
    def center_s(self) -> float:
        return (self.left_top_s + self.right_top_s) / 2.0

    @property
    def average_l(self) -> float:
        return (self.left_top_l + self.right_top_l) / 2.0


def project_spot_top(path: PathQuery, spot: ParkingSpace) -> SpotProjection:
    if not spot.is_well_formed():
        raise GeometryInconsistency(f"Parking space {spot.id} needs 4 polygon points, got {len(spot.polygon)}")
    left_top_proj = path.get_projection(spot.left_top)
    right_top_proj = path.get_projection(spot.right_top)
    if left_top_proj is None or right_top_proj is None:
        raise MapQueryFailure("Fail to get parking spot points' projections on reference line")
    return SpotProjection(left_top_proj[0], left_top_proj[1], right_top_proj[0], right_top_proj[1])


@dataclass
class StitchedBoundary:
    side: ParkingSide
    average_l: float
    '''Mean lateral offset of the spot's top corners from the lane centerline.'''
    left_top_s: float
    right_top_s: float
    boundary_points: Polyline = field(default_factory=list)
    '''Closed loop in the parking frame; first point repeated at the end.'''
    segments: List[List[Point2D]] = field(default_factory=list)
    '''Ordered 2-point segments of the same traversal, in the parking frame.'''


def parking_side(average_l: float) -> ParkingSide:
    """Negative lateral offset means the spot is right of the lane. Exactly zero counts as left."""
    return ParkingSide.RIGHT if average_l < 0.0 else ParkingSide.LEFT


def rescale_edge(edge_points: Sequence[Point2D], center_points: Sequence[Point2D],
                 road_widths: Sequence[float], offset: float) -> List[Point2D]:
    """Move every edge point along its centerline normal so it sits ``offset`` from the centerline."""
    rescaled: List[Point2D] = []
    for edge, center, width in zip(edge_points, center_points, road_widths):
        if width < _WIDTH_EPSILON:
            raise GeometryInconsistency(f"Road width {width} too small to rescale the lane edge")
        scale = offset / width
        rescaled.append((center[0] + (edge[0] - center[0]) * scale,
                         center[1] + (edge[1] - center[1]) * scale))
    return rescaled


def bracket_indices(stations: np.ndarray, near_key: float, far_key: float) -> Tuple[int, int]:
    """
    Stations bracketing the spot along an increasing station array.

    The near bracket is the last station strictly before ``near_key`` (0 if none),
    the far bracket the first station strictly after ``far_key`` (last index if none).
    """
    count = len(stations)
    near = int(np.searchsorted(stations, near_key, side="left"))
    near = near - 1 if near > 0 else 0
    far = int(np.searchsorted(stations, far_key, side="right"))
    far = count - 1 if far >= count else far
    return near, far


def _to_segments(chain: Sequence[Point2D]) -> List[List[Point2D]]:
    return [[chain[i], chain[i + 1]] for i in range(len(chain) - 1)]


def stitch_boundary(path: PathQuery, spot: ParkingSpace, lane_boundary: LaneBoundary,
                    origin_frame: OriginFrame, projection: Optional[SpotProjection] = None) -> StitchedBoundary:
    """
    Build the closed ROI boundary and its segment list in the parking frame.

    Args:
        path: Lane path the spot belongs to, used to project the spot's top corners
        spot: Target parking space (4 corners)
        lane_boundary: World-frame lane edges from build_lane_boundary
        origin_frame: Parking frame
        projection: Top-corner projection already computed for this spot and path

    Returns:
        StitchedBoundary with the side decision, closed polyline and segments
    """
    if projection is None:
        projection = project_spot_top(path, spot)
    lane_boundary.check_consistency()

    left_top_s, right_top_s = projection.left_top_s, projection.right_top_s
    average_l = projection.average_l
    side = parking_side(average_l)

    if side == ParkingSide.RIGHT:
        near_world = rescale_edge(lane_boundary.right_points, lane_boundary.center_points,
                                  lane_boundary.right_widths, -average_l)
        far_world = lane_boundary.left_points
    else:
        near_world = rescale_edge(lane_boundary.left_points, lane_boundary.center_points,
                                  lane_boundary.left_widths, average_l)
        far_world = lane_boundary.right_points
    near_local = origin_frame.points_to_local(near_world)
    far_local = origin_frame.points_to_local(far_world)

    stations = np.asarray(lane_boundary.center_s, dtype=float)
    if side == ParkingSide.RIGHT:
        near_walk, far_walk = near_local, far_local
        walk_stations = stations
        near_key, far_key = left_top_s, right_top_s
    else:
        near_walk, far_walk = near_local[::-1], far_local[::-1]
        walk_stations = -stations[::-1]
        near_key, far_key = -left_top_s, -right_top_s
    near_bracket, far_bracket = bracket_indices(walk_stations, near_key, far_key)

    spot_corners = origin_frame.points_to_local([spot.left_top, spot.left_down, spot.right_down, spot.right_top])
    near_chain = list(near_walk[:near_bracket + 1]) + spot_corners + list(near_walk[far_bracket:])
    far_chain = list(far_walk[::-1])

    if side == ParkingSide.RIGHT:
        loop = near_chain + far_chain
        segments = _to_segments(near_chain) + _to_segments(far_chain)
    else:
        loop = far_chain + near_chain
        segments = _to_segments(far_chain) + _to_segments(near_chain)
    loop.append(loop[0])

    return StitchedBoundary(side=side, average_l=average_l, left_top_s=left_top_s, right_top_s=right_top_s,
                            boundary_points=loop, segments=segments)
