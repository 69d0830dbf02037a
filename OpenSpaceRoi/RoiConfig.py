import math
from typing import Any, Dict, Optional

from OpenSpaceRoi.Errors import ConfigFailure


class RoiDeciderConfig:
    """Tunable parameters of the open-space ROI decider, read from the "Open Space ROI Decider" JSON object."""

    def __init__(self, roi_json_object: Optional[Dict[str, Any]] = None) -> None:
        cfg: Dict[str, Any] = roi_json_object or {}
        self.roi_longitudinal_range: float = float(cfg.get("ROI Longitudinal Range", 10.0))
        '''Half-range of the arc-length window around the spot center, in meters.'''
        self.roi_line_segment_min_angle: float = float(cfg.get("ROI Line Segment Min Angle", 0.1))
        '''Minimum heading change, in radians, before a lane station is recorded.'''
        self.roi_line_segment_length: float = float(cfg.get("ROI Line Segment Length", 1.0))
        '''Arc-length step between candidate lane stations, in meters.'''
        self.parking_depth_buffer: float = float(cfg.get("Parking Depth Buffer", 0.1))
        '''Extra depth added to the end pose inside the spot, in meters.'''
        self.parking_inwards: bool = bool(cfg.get("Parking Inwards", False))
        '''True to park head-in; False flips the end pose heading by pi.'''
        self.perception_obstacle_buffer: float = float(cfg.get("Perception Obstacle Buffer", 0.0))
        '''Longitudinal and lateral inflation of perception bounding boxes, in meters.'''
        self.perception_obstacle_filtering_distance: float = float(cfg.get("Perception Obstacle Filtering Distance", 1000.0))
        '''Obstacles farther than this from both the vehicle and the end pose are dropped.'''
        self.parking_start_range: float = float(cfg.get("Parking Start Range", 12.5))
        '''Maximum arc-length gap between the vehicle and the spot to start parking.'''
        self.enable_perception_obstacles: bool = bool(cfg.get("Enable Perception Obstacles", True))
        self.nearest_lane_search_radius: float = float(cfg.get("Nearest Lane Search Radius", 10.0))
        self.nearest_lane_max_heading_difference: float = float(cfg.get("Nearest Lane Max Heading Difference", math.pi / 2.0))
        self.validate()

    def validate(self) -> None:
        """Raise ConfigFailure on values the ROI stages cannot work with."""
        non_negative = {
            "Parking Depth Buffer": self.parking_depth_buffer,
            "Perception Obstacle Buffer": self.perception_obstacle_buffer,
            "Perception Obstacle Filtering Distance": self.perception_obstacle_filtering_distance,
            "Parking Start Range": self.parking_start_range,
            "Nearest Lane Search Radius": self.nearest_lane_search_radius,
            "Nearest Lane Max Heading Difference": self.nearest_lane_max_heading_difference,
            "ROI Line Segment Min Angle": self.roi_line_segment_min_angle,
        }
        for name, value in non_negative.items():
            if value < 0.0:
                raise ConfigFailure(f"'{name}' must be non-negative, got {value}")
        positive = {
            "ROI Longitudinal Range": self.roi_longitudinal_range,
            "ROI Line Segment Length": self.roi_line_segment_length,
        }
        for name, value in positive.items():
            if value <= 0.0:
                raise ConfigFailure(f"'{name}' must be positive, got {value}")
