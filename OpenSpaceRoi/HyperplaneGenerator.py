from typing import Sequence, Tuple

import numpy as np

from OpenSpaceRoi.Errors import GeometryInconsistency
from Types import ConvexPiece, HyperplaneMatrix, HyperplaneOffsets, Point2D

AXIS_EPSILON: float = 1e-5
'''Edges with |dx| or |dy| below this are treated as vertical or horizontal.'''


def edge_hyperplane(v1: Point2D, v2: Point2D) -> Tuple[np.ndarray, float]:
    """
    Halfplane a.p >= b through the edge v1 -> v2.

    For clockwise pieces the halfplane is the free side, left of the direction of
    travel in a y-up frame; the piece interior lies strictly outside it.

    Axis-aligned edges get unit normals; other edges come from the line y = k*x + c
    through both points, oriented by the direction of travel along x.
    """
    if abs(v1[0] - v2[0]) < AXIS_EPSILON:
        if v2[1] < v1[1]:
            return np.array([1.0, 0.0]), v1[0]
        return np.array([-1.0, 0.0]), -v1[0]
    if abs(v1[1] - v2[1]) < AXIS_EPSILON:
        if v1[0] < v2[0]:
            return np.array([0.0, 1.0]), v1[1]
        return np.array([0.0, -1.0]), -v1[1]

    system = np.array([[v1[0], 1.0], [v2[0], 1.0]])
    rhs = np.array([v1[1], v2[1]])
    slope, intercept = np.linalg.solve(system, rhs)
    if v1[0] < v2[0]:
        return np.array([-slope, 1.0]), float(intercept)
    return np.array([slope, -1.0]), float(-intercept)


def edges_num_of(pieces: Sequence[ConvexPiece]) -> np.ndarray:
    """(n, 1) edge counts, one less than each piece's vertex count."""
    return np.array([[len(piece) - 1] for piece in pieces], dtype=int).reshape(-1, 1)


def build_hyperplanes(obstacles_num: int, obstacles_edges_num: np.ndarray,
                      obstacles_vertices_vec: Sequence[ConvexPiece]) -> Tuple[HyperplaneMatrix, HyperplaneOffsets]:
    """
    Stack the H-representation of every piece.

    Rows for piece i start at the prefix sum of the edge counts before it.

    Args:
        obstacles_num: Number of pieces, must equal len(obstacles_vertices_vec)
        obstacles_edges_num: (n, 1) edge count per piece
        obstacles_vertices_vec: Vertex lists; closed pieces repeat their first vertex

    Returns:
        (A, b) with shapes (sum(edges), 2) and (sum(edges), 1)
    """
    if obstacles_num != len(obstacles_vertices_vec):
        raise GeometryInconsistency(
            f"obstacles_num ({obstacles_num}) != number of vertex lists ({len(obstacles_vertices_vec)})")
    edges_num = np.asarray(obstacles_edges_num, dtype=int).reshape(-1)
    if len(edges_num) != obstacles_num:
        raise GeometryInconsistency(f"Edge count vector has {len(edges_num)} entries for {obstacles_num} pieces")

    total_edges = int(edges_num.sum())
    A_all = np.zeros((total_edges, 2))
    b_all = np.zeros((total_edges, 1))
    counter = 0
    for i, vertices in enumerate(obstacles_vertices_vec):
        current_edges = int(edges_num[i])
        if current_edges < 1 or current_edges != len(vertices) - 1:
            raise GeometryInconsistency(
                f"Piece {i} has {len(vertices)} vertices but an edge count of {current_edges}")
        for j in range(current_edges):
            normal, offset = edge_hyperplane(vertices[j], vertices[j + 1])
            A_all[counter + j, :] = normal
            b_all[counter + j, 0] = offset
        counter += current_edges
    return A_all, b_all
