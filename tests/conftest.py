import copy
from pathlib import Path

import numpy as np
import pytest

from HDMap.Interfaces import Lane
from HDMap.ReferencePath import ReferencePath
from OpenSpaceRoi.RoiConfig import RoiDeciderConfig
from Planning.Frame import Frame, VehicleState
from Scene.Map import Map
from Scene.Vehicle import VehicleParams

SCENE_DIR = Path(__file__).resolve().parent.parent / "Scene"

LANE_WIDTH = 1.8
SPOT_DEPTH = 2.5

# 5m x 2.5m spots whose opening touches the road edge, centered at s=20
RIGHT_SPOT = [[17.5, -4.3], [22.5, -4.3], [22.5, -1.8], [17.5, -1.8]]
LEFT_SPOT = [[22.5, 4.3], [17.5, 4.3], [17.5, 1.8], [22.5, 1.8]]

STRAIGHT_LOT = {
    "Lanes": [
        {
            "Id": "L1",
            "Centerline": [[0.0, 0.0], [10.0, 0.0], [20.0, 0.0]],
            "Left Width": LANE_WIDTH,
            "Right Width": LANE_WIDTH,
            "Successors": ["L3", "L2"],
        },
        {
            "Id": "L2",
            "Centerline": [[20.0, 0.0], [30.0, 0.0], [40.0, 0.0]],
            "Left Width": LANE_WIDTH,
            "Right Width": LANE_WIDTH,
            "Parking Spaces": ["R1", "P_L"],
        },
        {
            "Id": "L3",
            "Centerline": [[20.0, 0.0], [25.0, 2.0], [30.0, 6.0]],
            "Left Width": LANE_WIDTH,
            "Right Width": LANE_WIDTH,
        },
    ],
    "Parking Spaces": [
        {"Id": "R1", "Polygon": RIGHT_SPOT},
        {"Id": "P_L", "Polygon": LEFT_SPOT},
    ],
}

SINGLE_LANE = {
    "Lanes": [
        {
            "Id": "S1",
            "Centerline": [[0.0, 0.0], [20.0, 0.0], [40.0, 0.0]],
            "Left Width": LANE_WIDTH,
            "Right Width": LANE_WIDTH,
            "Parking Spaces": ["R1", "P_L"],
        },
    ],
    "Parking Spaces": [
        {"Id": "R1", "Polygon": RIGHT_SPOT},
        {"Id": "P_L", "Polygon": LEFT_SPOT},
    ],
}

VEHICLE = {
    "Dimensions": {"Length": 4.933, "Width": 2.11},
    "Front Edge To Center": 3.89,
    "Back Edge To Center": 1.043,
}


@pytest.fixture
def parking_lot() -> Map:
    """Two-lane road L1 -> {L3, L2}; the spots hang off L2."""
    return Map(copy.deepcopy(STRAIGHT_LOT))


@pytest.fixture
def single_lane() -> Map:
    """One straight 40m lane carrying both spots."""
    return Map(copy.deepcopy(SINGLE_LANE))


@pytest.fixture
def single_path(single_lane):
    return ReferencePath([single_lane.get_lane_by_id("S1")])


@pytest.fixture
def config() -> RoiDeciderConfig:
    return RoiDeciderConfig({})


@pytest.fixture
def vehicle_params() -> VehicleParams:
    return VehicleParams(copy.deepcopy(VEHICLE))


def make_frame(spot_id="R1", x=15.0, y=0.5, heading=0.0, obstacles=None) -> Frame:
    return Frame(vehicle_state=VehicleState(x=x, y=y, heading=heading),
                 obstacles=list(obstacles or []),
                 target_parking_spot_id=spot_id)


def quarter_circle_path(radius=5.0, num=91, width=1.5) -> ReferencePath:
    """Left-turning quarter circle from (0, 0) around the center (0, radius)."""
    angles = np.radians(np.linspace(0.0, 90.0, num))
    centerline = np.column_stack((radius * np.sin(angles), radius * (1.0 - np.cos(angles))))
    return ReferencePath([Lane(id="C", centerline=centerline, left_widths=width, right_widths=width)])
