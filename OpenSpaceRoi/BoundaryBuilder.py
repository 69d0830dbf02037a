import math
from dataclasses import dataclass, field
from typing import List

from Geometry.Transforms import normalize_angle
from HDMap.Interfaces import PathQuery
from OpenSpaceRoi.Errors import ConfigFailure, GeometryInconsistency
from Types import Point2D


@dataclass
class LaneBoundary:
    """Paired road-edge polylines sampled at the same stations along a lane path (world frame)."""
    left_points: List[Point2D] = field(default_factory=list)
    right_points: List[Point2D] = field(default_factory=list)
    center_points: List[Point2D] = field(default_factory=list)
    center_s: List[float] = field(default_factory=list)
    '''Arc length of every station, strictly increasing.'''
    left_widths: List[float] = field(default_factory=list)
    right_widths: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.center_s)

    def check_consistency(self) -> None:
        sizes = {len(self.left_points), len(self.right_points), len(self.center_points),
                 len(self.center_s), len(self.left_widths), len(self.right_widths)}
        if len(sizes) != 1:
            raise GeometryInconsistency(f"Lane boundary arrays have mismatched sizes {sorted(sizes)}")
        if len(self.center_s) < 2:
            raise GeometryInconsistency(f"Lane boundary needs at least 2 stations, got {len(self.center_s)}")


def build_lane_boundary(path: PathQuery, start_s: float, end_s: float,
                        min_turn_angle: float, max_segment_length: float) -> LaneBoundary:
    """
    Sample the road edges of ``path`` between start_s and end_s.

    Candidate stations are spaced ``max_segment_length`` apart. A candidate is only
    recorded when the heading has turned by at least ``min_turn_angle`` since the last
    recorded station, so straight stretches get sparse stations and curves dense ones.
    The first and last stations are always recorded.

    Args:
        path: Lane path to sample
        start_s: First station
        end_s: Last station
        min_turn_angle: Heading change (rad) needed to record an intermediate station
        max_segment_length: Distance between candidate stations

    Returns:
        LaneBoundary with left/right edge points, centerline points and widths per station
    """
    if max_segment_length <= 0.0:
        raise ConfigFailure(f"max_segment_length must be positive, got {max_segment_length}")
    if end_s < start_s:
        raise GeometryInconsistency(f"Empty sampling window: start_s={start_s} > end_s={end_s}")

    boundary = LaneBoundary()
    last_recorded_heading = path.get_smooth_point(start_s).heading
    index = 0
    check_point_s = start_s
    while check_point_s <= end_s:
        check_point = path.get_smooth_point(check_point_s)
        heading = check_point.heading
        is_endpoint = check_point_s == start_s or check_point_s == end_s
        if not is_endpoint and abs(normalize_angle(heading - last_recorded_heading)) < min_turn_angle:
            index += 1
            check_point_s = min(start_s + index * max_segment_length, end_s)
            continue

        left_width = path.get_road_left_width(check_point_s)
        right_width = path.get_road_right_width(check_point_s)
        left_dir = (math.cos(heading + math.pi / 2.0), math.sin(heading + math.pi / 2.0))
        right_dir = (math.cos(heading - math.pi / 2.0), math.sin(heading - math.pi / 2.0))
        cx, cy = check_point.xy()
        boundary.left_points.append((cx + left_width * left_dir[0], cy + left_width * left_dir[1]))
        boundary.right_points.append((cx + right_width * right_dir[0], cy + right_width * right_dir[1]))
        boundary.center_points.append((cx, cy))
        boundary.center_s.append(check_point_s)
        boundary.left_widths.append(left_width)
        boundary.right_widths.append(right_width)
        last_recorded_heading = heading

        if check_point_s == end_s:
            break
        index += 1
        check_point_s = min(start_s + index * max_segment_length, end_s)

    boundary.check_consistency()
    return boundary
