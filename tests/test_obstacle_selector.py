import numpy as np
import pytest

from Geometry.Box2d import Box2d
from Geometry.Transforms import OriginFrame
from ObstacleDetection.Obstacle import PerceptionObstacle, load_obstacles
from ObstacleDetection.ObstacleSelector import ObstacleSelector, select_and_transform
from OpenSpaceRoi.HyperplaneGenerator import build_hyperplanes, edges_num_of
from Types import ObstacleType

ROI = [-10.0, 10.0, -10.0, 10.0]
END_POSE = [0.0, 0.0, 0.0, 0.0]


def _selector(frame=None, filtering_distance=1000.0, inflate=0.0):
    frame = frame or OriginFrame((0.0, 0.0), 0.0)
    return ObstacleSelector(frame, ROI, END_POSE, (0.0, 0.0), filtering_distance, inflate)


def _box_obstacle(obstacle_id, center, heading=0.0, length=2.0, width=2.0, virtual=False):
    obstacle_type = ObstacleType.Virtual if virtual else ObstacleType.Physical
    return PerceptionObstacle(obstacle_id, Box2d(center, heading, length, width), obstacle_type)


def test_virtual_obstacle_is_dropped():
    assert _selector().filter_out(_box_obstacle("v", (2.0, 2.0), virtual=True))


def test_obstacle_outside_roi_is_dropped():
    assert _selector().filter_out(_box_obstacle("out", (20.0, 0.0)))


def test_far_obstacle_is_dropped_only_when_far_from_both():
    selector = _selector(filtering_distance=5.0)
    assert selector.filter_out(_box_obstacle("far", (8.0, 8.0)))
    assert not selector.filter_out(_box_obstacle("near", (3.0, 3.0)))


def test_piece_is_closed_with_five_vertices():
    piece = _selector().to_convex_piece(_box_obstacle("a", (2.0, 2.0)))
    assert len(piece) == 5
    assert piece[0] == piece[-1]
    np.testing.assert_allclose(piece[:-1], [(1.0, 1.0), (1.0, 3.0), (3.0, 3.0), (3.0, 1.0)], atol=1e-12)


def test_inflation_grows_both_sides():
    piece = _selector(inflate=0.5).to_convex_piece(_box_obstacle("a", (2.0, 2.0)))
    xs = [p[0] for p in piece]
    ys = [p[1] for p in piece]
    assert (min(xs), max(xs)) == pytest.approx((0.75, 3.25))
    assert (min(ys), max(ys)) == pytest.approx((0.75, 3.25))


@pytest.mark.parametrize("heading", [0.0, 0.3, 1.2, -2.5])
def test_obstacle_center_violates_every_row(heading):
    frame = OriginFrame((1.0, -2.0), 0.4)
    obstacle = _box_obstacle("rot", frame.to_world((2.0, 3.0)), heading=heading, length=3.0, width=1.5)
    pieces = select_and_transform([obstacle], frame, ROI, END_POSE, (0.0, 0.0), 1000.0, 0.2)
    assert len(pieces) == 1
    A, b = build_hyperplanes(1, edges_num_of(pieces), pieces)
    assert A.shape == (4, 2)
    center = np.array(frame.to_local(obstacle.box.center))
    assert np.all(A @ center - b.ravel() < 0.0)


def test_selection_keeps_order_and_skips_dropped():
    obstacles = [_box_obstacle("a", (2.0, 2.0)), _box_obstacle("v", (0.0, 0.0), virtual=True),
                 _box_obstacle("b", (-4.0, 1.0))]
    pieces = _selector().select(obstacles)
    assert len(pieces) == 2
    assert tuple(np.mean(pieces[1][:-1], axis=0)) == pytest.approx((-4.0, 1.0))


def test_load_obstacles_reads_json_entries():
    obstacles = load_obstacles([
        {"Id": "car", "Center": [1.0, 2.0], "Heading": 0.5, "Length": 4.0, "Width": 2.0},
        {"Id": "wall", "Center": [0.0, 0.0], "Length": 0.1, "Width": 3.0, "Virtual": True},
    ])
    assert [o.id for o in obstacles] == ["car", "wall"]
    assert not obstacles[0].is_virtual and obstacles[1].is_virtual
    assert obstacles[0].box.heading == 0.5


def test_load_obstacles_requires_size():
    with pytest.raises(ValueError):
        load_obstacles([{"Id": "x", "Center": [0.0, 0.0]}])
