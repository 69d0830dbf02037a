import copy

import pytest

from OpenSpaceRoi.Errors import GeometryInconsistency
from OpenSpaceRoi.SegmentFuser import fuse_line_segments


def test_convex_joint_within_epsilon_fuses():
    segments = [[(0.0, 0.0), (1.0, 0.0)], [(1.0, 1e-9), (1.0, -1.0)]]
    fused = fuse_line_segments(segments)
    assert fused is segments
    assert len(fused) == 1
    assert fused[0] == [(0.0, 0.0), (1.0, 0.0), (1.0, -1.0)]


def test_concave_joint_stays_split():
    segments = [[(0.0, 0.0), (1.0, 0.0)], [(1.0, 1e-9), (1.0, 1.0)]]
    fused = fuse_line_segments(segments)
    assert len(fused) == 2
    assert fused[0] == [(0.0, 0.0), (1.0, 0.0)]


def test_disjoint_segments_stay_split():
    segments = [[(0.0, 0.0), (1.0, 0.0)], [(1.5, 0.0), (1.5, -1.0)]]
    assert len(fuse_line_segments(segments)) == 2


def test_collinear_joint_stays_split():
    segments = [[(0.0, 0.0), (1.0, 0.0)], [(1.0, 0.0), (2.0, 0.0)]]
    assert len(fuse_line_segments(segments)) == 2


def test_chain_of_clockwise_turns_fuses_into_one_piece():
    segments = [[(0.0, 0.0), (1.0, 0.0)], [(1.0, 0.0), (1.0, -1.0)], [(1.0, -1.0), (0.0, -1.0)]]
    fused = fuse_line_segments(segments)
    assert fused == [[(0.0, 0.0), (1.0, 0.0), (1.0, -1.0), (0.0, -1.0)]]


def test_spot_notch_fuses_outer_corners_only():
    notch = [(-7.5, 0.0), (0.0, 0.0), (0.0, -2.5), (5.0, -2.5), (5.0, 0.0), (12.5, 0.0)]
    segments = [[notch[i], notch[i + 1]] for i in range(len(notch) - 1)]
    fused = fuse_line_segments(segments)
    assert fused == [
        [(-7.5, 0.0), (0.0, 0.0), (0.0, -2.5)],
        [(0.0, -2.5), (5.0, -2.5)],
        [(5.0, -2.5), (5.0, 0.0), (12.5, 0.0)],
    ]


def test_fusing_is_idempotent():
    notch = [(-7.5, 0.0), (0.0, 0.0), (0.0, -2.5), (5.0, -2.5), (5.0, 0.0), (12.5, 0.0)]
    segments = [[notch[i], notch[i + 1]] for i in range(len(notch) - 1)]
    once = copy.deepcopy(fuse_line_segments(segments))
    twice = fuse_line_segments(copy.deepcopy(once))
    assert twice == once


def test_single_point_segment_fails():
    with pytest.raises(GeometryInconsistency):
        fuse_line_segments([[(0.0, 0.0), (1.0, 0.0)], [(1.0, 0.0)]])
