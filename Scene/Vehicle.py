from typing import Any, Dict

from OpenSpaceRoi.Errors import ConfigFailure


class VehicleParams:
    def __init__(self, vehicle_json_object: Dict[str, Any]) -> None:
        self.length: float = vehicle_json_object["Dimensions"]["Length"]
        self.width: float = vehicle_json_object["Dimensions"]["Width"]
        self.front_edge_to_center: float = vehicle_json_object["Front Edge To Center"]
        '''Distance from the rear-axle reference point to the front bumper in meters.'''
        self.back_edge_to_center: float = vehicle_json_object["Back Edge To Center"]
        '''Distance from the rear-axle reference point to the rear bumper in meters.'''
        if self.front_edge_to_center < 0.0 or self.back_edge_to_center < 0.0:
            raise ConfigFailure("Vehicle edge-to-center distances must be non-negative")
