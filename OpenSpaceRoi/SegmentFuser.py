from typing import List

from Geometry.Transforms import cross_prod, distance
from OpenSpaceRoi.Errors import GeometryInconsistency
from Types import Point2D

FUSE_EPSILON: float = 1e-8
'''Two segment ends closer than this are treated as one joint.'''


def fuse_line_segments(segments: List[List[Point2D]]) -> List[List[Point2D]]:
    """
    Merge consecutive segments into convex pieces, in place.

    Two neighbours are merged when they share their joint point and turn clockwise
    there (cross product of left[-2], joint, right[1] is negative). The right
    segment's second point is appended to the left one; its joint point is dropped
    and the segment removed once fewer than two points remain.

    Args:
        segments: Ordered list of polylines (each at least 2 points)

    Returns:
        The same list object, fused
    """
    for index, segment in enumerate(segments):
        if len(segment) < 2:
            raise GeometryInconsistency(f"Single point line segment #{index} not expected")

    current = 0
    while current < len(segments) - 1:
        cur_segment = segments[current]
        next_segment = segments[current + 1]
        if distance(cur_segment[-1], next_segment[0]) > FUSE_EPSILON:
            current += 1
            continue
        if cross_prod(cur_segment[-2], cur_segment[-1], next_segment[1]) < 0.0:
            cur_segment.append(next_segment[1])
            del next_segment[0]
            if len(next_segment) < 2:
                del segments[current + 1]
        else:
            current += 1
    return segments
