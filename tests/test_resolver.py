import math

import pytest

from Geometry.Transforms import OriginFrame
from HDMap.Interfaces import Lane, ParkingSpace
from OpenSpaceRoi.Errors import GeometryInconsistency, MapQueryFailure, OutOfRangeFailure
from OpenSpaceRoi.ParkingSpotResolver import check_distance_to_parking_spot, resolve_parking_spot
from Planning.Frame import ResolvedTarget, VehicleState
from Scene.Map import Map

from conftest import STRAIGHT_LOT


class NoLookupMap(Map):
    """Fails the test if the nearest-lane search runs."""

    def get_nearest_lane_with_heading(self, point, distance, central_heading, max_heading_difference):
        raise AssertionError("nearest lane lookup should have been skipped")


def test_spot_found_on_successor(parking_lot, config):
    target = resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=0.5), "R1", config)
    assert target.lane.id == "L1"
    assert "R1" in target.path.parking_space_overlaps
    assert target.path.length == pytest.approx(40.0)
    assert target.spot.left_top == (17.5, -1.8)
    assert target.origin_frame is None


def test_missing_spot_fails(parking_lot, config):
    with pytest.raises(MapQueryFailure):
        resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=0.5), "nowhere", config)


def test_no_lane_near_vehicle_fails(parking_lot, config):
    with pytest.raises(MapQueryFailure):
        resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=50.0), "R1", config)


def test_lane_against_heading_is_ignored(parking_lot, config):
    with pytest.raises(MapQueryFailure):
        resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=0.5, heading=math.pi), "R1", config)


def test_spot_too_far_fails(parking_lot, config):
    with pytest.raises(OutOfRangeFailure):
        resolve_parking_spot(parking_lot, VehicleState(x=2.0, y=0.0), "R1", config)


def test_malformed_spot_fails(parking_lot, config):
    parking_lot.add_parking_space(ParkingSpace(id="tri", polygon=((17.5, -4.3), (22.5, -4.3), (22.5, -1.8))))
    parking_lot.get_lane_by_id("L2").parking_space_ids.append("tri")
    with pytest.raises(GeometryInconsistency):
        resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=0.5), "tri", config)


def test_missing_successor_fails(config):
    hd_map = Map({"Lanes": [{"Id": "A", "Centerline": [[0.0, 0.0], [20.0, 0.0]], "Left Width": 1.8,
                             "Right Width": 1.8, "Successors": ["ghost"]}]})
    with pytest.raises(MapQueryFailure):
        resolve_parking_spot(hd_map, VehicleState(x=5.0, y=0.0), "R1", config)


def test_cached_target_skips_lane_search(config):
    hd_map = NoLookupMap(STRAIGHT_LOT)
    lane = hd_map.get_lane_by_id("L1")
    origin = OriginFrame((17.5, -1.8), 0.0)
    previous = ResolvedTarget(spot_id="R1", lane=lane, path=None, spot=None, origin_frame=origin)  # type: ignore
    target = resolve_parking_spot(hd_map, VehicleState(x=15.0, y=0.5), "R1", config, previous)
    assert target.lane is lane
    assert target.origin_frame is origin


def test_cache_for_other_spot_is_ignored(parking_lot, config):
    other_lane = Lane(id="X", centerline=[[100.0, 100.0], [110.0, 100.0]], left_widths=1.0, right_widths=1.0)
    previous = ResolvedTarget(spot_id="P_L", lane=other_lane, path=None, spot=None,  # type: ignore
                              origin_frame=OriginFrame((0.0, 0.0), 0.0))
    target = resolve_parking_spot(parking_lot, VehicleState(x=15.0, y=0.5), "R1", config, previous)
    assert target.lane.id == "L1"
    assert target.origin_frame is None


def test_distance_uses_bottom_edge_center(single_path, single_lane):
    spot = single_lane.get_parking_space_by_id("R1")
    assert check_distance_to_parking_spot(single_path, spot, VehicleState(x=10.0, y=0.0), 12.5)
    assert not check_distance_to_parking_spot(single_path, spot, VehicleState(x=7.5, y=0.0), 12.5)
