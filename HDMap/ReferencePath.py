from typing import List, Optional, Sequence, Tuple

import numpy as np

from Geometry.Transforms import normalize_angle
from HDMap.Interfaces import Lane, MapPathPoint, PathQuery
from Types import Point2D


class ReferencePath(PathQuery):
    """Polyline path over one or more consecutive lanes."""

    _JOINT_EPSILON: float = 1e-6

    def __init__(self, lanes: Sequence[Lane]) -> None:
        if not lanes:
            raise ValueError("ReferencePath needs at least one lane")
        self.lanes: List[Lane] = list(lanes)
        points: List[np.ndarray] = []
        left: List[float] = []
        right: List[float] = []
        for lane in self.lanes:
            for p, lw, rw in zip(lane.centerline, lane.left_widths, lane.right_widths):
                # drop repeated points, including the shared joint between lanes
                if points and np.linalg.norm(p - points[-1]) < self._JOINT_EPSILON:
                    continue
                points.append(p)
                left.append(float(lw))
                right.append(float(rw))
        if len(points) < 2:
            raise ValueError("ReferencePath needs at least two distinct points")

        self._points: np.ndarray = np.asarray(points, dtype=float)
        '''(N, 2) path points.'''
        self._left_widths: np.ndarray = np.asarray(left)
        self._right_widths: np.ndarray = np.asarray(right)
        seg = np.diff(self._points, axis=0)
        self._segment_lengths: np.ndarray = np.linalg.norm(seg, axis=1)
        self._unit_directions: np.ndarray = seg / self._segment_lengths[:, None]
        self._accumulated_s: np.ndarray = np.concatenate(([0.0], np.cumsum(self._segment_lengths)))
        segment_headings = np.arctan2(seg[:, 1], seg[:, 0])
        # each point carries the heading of its outgoing segment, the last point its incoming one
        self._headings: np.ndarray = np.append(segment_headings, segment_headings[-1])
        self._overlaps: List[str] = []
        for lane in self.lanes:
            for spot_id in lane.parking_space_ids:
                if spot_id not in self._overlaps:
                    self._overlaps.append(spot_id)

    @property
    def length(self) -> float:
        return float(self._accumulated_s[-1])

    @property
    def parking_space_overlaps(self) -> Sequence[str]:
        return tuple(self._overlaps)

    @property
    def points(self) -> np.ndarray:
        return self._points

    def _nearest_segment(self, point: Point2D) -> Tuple[int, float]:
        """Index of the closest segment and the unclamped projection length along it."""
        p = np.asarray(point, dtype=float)
        rel = p - self._points[:-1]
        proj = np.einsum("ij,ij->i", rel, self._unit_directions)
        clamped = np.clip(proj, 0.0, self._segment_lengths)
        foot = self._points[:-1] + self._unit_directions * clamped[:, None]
        dist = np.linalg.norm(p - foot, axis=1)
        index = int(np.argmin(dist))
        return index, float(proj[index])

    def _lateral(self, point: Point2D, index: int) -> float:
        rel = np.asarray(point, dtype=float) - self._points[index]
        d = self._unit_directions[index]
        return float(d[0] * rel[1] - d[1] * rel[0])

    def get_projection(self, point: Point2D) -> Optional[Tuple[float, float]]:
        if not np.all(np.isfinite(point)):
            return None
        index, proj = self._nearest_segment(point)
        last = len(self._segment_lengths) - 1
        if index == 0 and index == last:
            along = proj
        elif index == 0:
            along = min(proj, self._segment_lengths[index])
        elif index == last:
            along = max(proj, 0.0)
        else:
            along = float(np.clip(proj, 0.0, self._segment_lengths[index]))
        return float(self._accumulated_s[index] + along), self._lateral(point, index)

    def get_nearest_point(self, point: Point2D) -> Optional[Tuple[float, float]]:
        if not np.all(np.isfinite(point)):
            return None
        index, proj = self._nearest_segment(point)
        along = float(np.clip(proj, 0.0, self._segment_lengths[index]))
        foot = self._points[index] + self._unit_directions[index] * along
        lateral = float(np.linalg.norm(np.asarray(point, dtype=float) - foot))
        if self._lateral(point, index) < 0.0:
            lateral = -lateral
        return float(self._accumulated_s[index] + along), lateral

    def get_smooth_point(self, s: float) -> MapPathPoint:
        s = float(np.clip(s, 0.0, self.length))
        index = int(np.searchsorted(self._accumulated_s, s, side="right")) - 1
        index = min(max(index, 0), len(self._points) - 2)
        ratio = (s - self._accumulated_s[index]) / self._segment_lengths[index]
        x, y = self._points[index] + ratio * (self._points[index + 1] - self._points[index])
        h0 = self._headings[index]
        h1 = self._headings[index + 1]
        heading = normalize_angle(h0 + ratio * normalize_angle(h1 - h0))
        return MapPathPoint(x=float(x), y=float(y), heading=heading, s=s)

    def get_road_left_width(self, s: float) -> float:
        return float(np.interp(s, self._accumulated_s, self._left_widths))

    def get_road_right_width(self, s: float) -> float:
        return float(np.interp(s, self._accumulated_s, self._right_widths))
