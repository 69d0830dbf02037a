from typing import List, Optional

from HDMap.Interfaces import Lane, MapService, ParkingSpace, PathQuery
from HDMap.ReferencePath import ReferencePath
from OpenSpaceRoi.Errors import GeometryInconsistency, MapQueryFailure, OutOfRangeFailure
from OpenSpaceRoi.RoiConfig import RoiDeciderConfig
from Planning.Frame import ResolvedTarget, VehicleState


def search_target_parking_spot_on_path(map_service: MapService, path: PathQuery, spot_id: str) -> Optional[ParkingSpace]:
    """The parking space with ``spot_id`` if the path overlaps it."""
    if spot_id not in path.parking_space_overlaps:
        return None
    return map_service.get_parking_space_by_id(spot_id)


def check_distance_to_parking_spot(path: PathQuery, spot: ParkingSpace, vehicle_state: VehicleState,
                                   parking_start_range: float) -> bool:
    """True when the spot's bottom edge center is within ``parking_start_range`` of the vehicle along the path."""
    left_bottom = path.get_nearest_point(spot.left_down)
    right_bottom = path.get_nearest_point(spot.right_down)
    vehicle = path.get_nearest_point(vehicle_state.xy())
    if left_bottom is None or right_bottom is None or vehicle is None:
        raise MapQueryFailure("Fail to project parking spot or vehicle onto the lane path")
    spot_s = (left_bottom[0] + right_bottom[0]) / 2.0
    return abs(spot_s - vehicle[0]) < parking_start_range


def resolve_parking_spot(map_service: MapService, vehicle_state: VehicleState, spot_id: str,
                         config: RoiDeciderConfig, previous: Optional[ResolvedTarget] = None) -> ResolvedTarget:
    """
    Find the target parking spot and the lane path it hangs off.

    The lane resolved in the previous cycle is reused when it was for the same spot.
    Otherwise the nearest lane aligned with the vehicle heading is looked up. The
    spot is searched on that lane joined with each of its successors in turn.

    Args:
        map_service: Lane and parking-space lookup
        vehicle_state: Current ego pose
        spot_id: Target parking space id from routing
        config: Decider parameters (search radius, heading tolerance, start range)
        previous: Result of the previous planning cycle, if any

    Returns:
        ResolvedTarget; origin_frame is carried over from ``previous`` for the same spot
    """
    same_spot = previous is not None and previous.spot_id == spot_id and previous.lane is not None
    if same_spot:
        nearest_lane: Optional[Lane] = previous.lane  # type: ignore
    else:
        nearest_lane = map_service.get_nearest_lane_with_heading(
            vehicle_state.xy(), config.nearest_lane_search_radius, vehicle_state.heading,
            config.nearest_lane_max_heading_difference)
    if nearest_lane is None:
        raise MapQueryFailure("Getlane failed: no lane near the vehicle with a matching heading")

    candidate_paths: List[ReferencePath] = []
    if nearest_lane.successor_ids:
        for next_lane_id in nearest_lane.successor_ids:
            next_lane = map_service.get_lane_by_id(next_lane_id)
            if next_lane is None:
                raise MapQueryFailure(f"Successor lane {next_lane_id} of {nearest_lane.id} not in map")
            candidate_paths.append(ReferencePath([nearest_lane, next_lane]))
    else:
        candidate_paths.append(ReferencePath([nearest_lane]))

    target_spot: Optional[ParkingSpace] = None
    nearby_path: Optional[ReferencePath] = None
    for path in candidate_paths:
        target_spot = search_target_parking_spot_on_path(map_service, path, spot_id)
        if target_spot is not None:
            nearby_path = path
            break
    if target_spot is None or nearby_path is None:
        raise MapQueryFailure(f"No such parking spot {spot_id} found after searching all path forward possible")

    if not target_spot.is_well_formed():
        raise GeometryInconsistency(
            f"Parking space {spot_id} needs 4 polygon points, got {len(target_spot.polygon)}")

    if not check_distance_to_parking_spot(nearby_path, target_spot, vehicle_state, config.parking_start_range):
        raise OutOfRangeFailure(
            f"Target parking spot {spot_id} found, but too far, distance larger than {config.parking_start_range}")

    origin_frame = previous.origin_frame if same_spot else None  # type: ignore
    return ResolvedTarget(spot_id=spot_id, lane=nearest_lane, path=nearby_path, spot=target_spot,
                          origin_frame=origin_frame)
