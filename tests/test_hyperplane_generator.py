import numpy as np
import pytest

from OpenSpaceRoi.Errors import GeometryInconsistency
from OpenSpaceRoi.HyperplaneGenerator import build_hyperplanes, edge_hyperplane, edges_num_of

SQUARE = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0), (0.0, 0.0)]
TRIANGLE = [(0.0, 0.0), (4.0, 1.0), (1.0, 3.0), (0.0, 0.0)]


def _rows_hold(A, b, point):
    return A @ np.asarray(point, dtype=float) - b.ravel()


def test_square_gives_four_axis_aligned_rows():
    edges = edges_num_of([SQUARE])
    A, b = build_hyperplanes(1, edges, [SQUARE])
    assert A.shape == (4, 2)
    assert b.shape == (4, 1)
    for row in A:
        assert sorted(np.abs(row).tolist()) == [0.0, 1.0]
    assert np.all(_rows_hold(A, b, (1.0, 1.0)) > 0.0)


def test_clockwise_square_interior_violates_every_row():
    clockwise = SQUARE[::-1]
    A, b = build_hyperplanes(1, edges_num_of([clockwise]), [clockwise])
    assert np.all(_rows_hold(A, b, (1.0, 1.0)) < 0.0)
    # left of the first edge, travelled upwards along x = 0
    assert _rows_hold(A, b, (-1.0, 1.0))[0] > 0.0


def test_axis_aligned_sign_rules():
    normal, offset = edge_hyperplane((1.0, 3.0), (1.0, 1.0))
    assert normal.tolist() == [1.0, 0.0] and offset == 1.0
    normal, offset = edge_hyperplane((1.0, 1.0), (1.0, 3.0))
    assert normal.tolist() == [-1.0, 0.0] and offset == -1.0
    normal, offset = edge_hyperplane((0.0, 2.0), (3.0, 2.0))
    assert normal.tolist() == [0.0, 1.0] and offset == 2.0
    normal, offset = edge_hyperplane((3.0, 2.0), (0.0, 2.0))
    assert normal.tolist() == [0.0, -1.0] and offset == -2.0


def test_near_vertical_edge_uses_axis_rule():
    normal, offset = edge_hyperplane((1.0, 0.0), (1.0 + 1e-6, 5.0))
    assert normal.tolist() == [-1.0, 0.0]
    assert offset == pytest.approx(-1.0)


def test_general_edges_contain_centroid():
    A, b = build_hyperplanes(1, edges_num_of([TRIANGLE]), [TRIANGLE])
    assert A.shape == (3, 2)
    centroid = np.mean(np.asarray(TRIANGLE[:-1]), axis=0)
    assert np.all(_rows_hold(A, b, centroid) > 0.0)
    # first edge y = 0.25 x travelled left to right
    np.testing.assert_allclose(A[0], [-0.25, 1.0])
    assert b[0, 0] == pytest.approx(0.0)


def test_rows_follow_prefix_sum_of_edges():
    open_piece = [(-5.0, 0.0), (0.0, 0.0), (0.0, -2.5)]
    pieces = [open_piece, SQUARE, TRIANGLE]
    edges = edges_num_of(pieces)
    assert edges.shape == (3, 1)
    assert edges.ravel().tolist() == [2, 4, 3]
    A, b = build_hyperplanes(len(pieces), edges, pieces)
    assert A.shape[0] == b.shape[0] == int(edges.sum())
    square_rows = slice(2, 6)
    assert np.all(_rows_hold(A[square_rows], b[square_rows], (1.0, 1.0)) > 0.0)


def test_count_mismatch_fails():
    with pytest.raises(GeometryInconsistency):
        build_hyperplanes(2, edges_num_of([SQUARE]), [SQUARE])


def test_edge_count_must_match_vertices():
    with pytest.raises(GeometryInconsistency):
        build_hyperplanes(1, np.array([[3]]), [SQUARE])


def test_empty_input_gives_empty_matrices():
    A, b = build_hyperplanes(0, edges_num_of([]), [])
    assert A.shape == (0, 2)
    assert b.shape == (0, 1)
