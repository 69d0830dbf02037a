import math
from typing import Any, Dict, List, Optional

import numpy as np
from scipy.interpolate import splev, splprep

from Geometry.Transforms import normalize_angle
from HDMap.Interfaces import Lane, MapService, ParkingSpace
from HDMap.ReferencePath import ReferencePath
from Types import Point2D


def smooth_centerline(points: np.ndarray, resolution: float = 0.5) -> np.ndarray:
    """
    Resample sparse centerline waypoints with an interpolating cubic B-spline.

    Falls back to the raw points when there are too few of them for a cubic fit.
    """
    if len(points) < 4:
        return points
    tck, _ = splprep([points[:, 0], points[:, 1]], s=0, k=3)
    approx_length = float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))
    num = max(int(math.ceil(approx_length / resolution)) + 1, len(points))
    u_new = np.linspace(0.0, 1.0, num=num)
    x_new, y_new = splev(u_new, tck)
    return np.column_stack((x_new, y_new))


def _load_lane(lane_object: Dict[str, Any]) -> Lane:
    centerline = np.asarray(lane_object["Centerline"], dtype=float)
    if lane_object.get("Smooth", False):
        resampled = smooth_centerline(centerline, lane_object.get("Resolution", 0.5))
        # widths are given per raw waypoint; spread them over the resampled points
        left = np.interp(np.linspace(0, 1, len(resampled)), np.linspace(0, 1, len(centerline)),
                         np.broadcast_to(np.asarray(lane_object["Left Width"], dtype=float), (len(centerline),)))
        right = np.interp(np.linspace(0, 1, len(resampled)), np.linspace(0, 1, len(centerline)),
                          np.broadcast_to(np.asarray(lane_object["Right Width"], dtype=float), (len(centerline),)))
        centerline = resampled
    else:
        left = lane_object["Left Width"]
        right = lane_object["Right Width"]
    return Lane(id=str(lane_object["Id"]),
                centerline=centerline,
                left_widths=left,
                right_widths=right,
                successor_ids=[str(i) for i in lane_object.get("Successors", [])],
                parking_space_ids=[str(i) for i in lane_object.get("Parking Spaces", [])])


class Map(MapService):
    """In-memory HD map holding lanes and parking spaces, loaded from a JSON map object."""

    def __init__(self, map_object: Dict[str, Any]) -> None:
        self.lanes: Dict[str, Lane] = {}
        for lane_object in map_object.get("Lanes", []):
            lane = _load_lane(lane_object)
            self.lanes[lane.id] = lane
        self.parking_spaces: Dict[str, ParkingSpace] = {}
        for spot_object in map_object.get("Parking Spaces", []):
            polygon = tuple((float(p[0]), float(p[1])) for p in spot_object["Polygon"])
            self.parking_spaces[str(spot_object["Id"])] = ParkingSpace(id=str(spot_object["Id"]), polygon=polygon)
        self._lane_paths: Dict[str, ReferencePath] = {lane_id: ReferencePath([lane]) for lane_id, lane in self.lanes.items()}

    def get_nearest_lane_with_heading(self, point: Point2D, distance: float, central_heading: float,
                                      max_heading_difference: float) -> Optional[Lane]:
        best_lane: Optional[Lane] = None
        best_distance = math.inf
        for lane_id, path in self._lane_paths.items():
            nearest = path.get_nearest_point(point)
            if nearest is None:
                continue
            s, l = nearest
            if abs(l) > distance:
                continue
            lane_heading = path.get_smooth_point(s).heading
            if abs(normalize_angle(lane_heading - central_heading)) > max_heading_difference:
                continue
            if abs(l) < best_distance:
                best_distance = abs(l)
                best_lane = self.lanes[lane_id]
        return best_lane

    def get_lane_by_id(self, lane_id: str) -> Optional[Lane]:
        return self.lanes.get(lane_id)

    def get_parking_space_by_id(self, spot_id: str) -> Optional[ParkingSpace]:
        return self.parking_spaces.get(spot_id)

    def add_lane(self, lane: Lane) -> None:
        self.lanes[lane.id] = lane
        self._lane_paths[lane.id] = ReferencePath([lane])

    def add_parking_space(self, spot: ParkingSpace) -> None:
        self.parking_spaces[spot.id] = spot

    @property
    def lane_ids(self) -> List[str]:
        return list(self.lanes.keys())
