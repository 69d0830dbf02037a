"""
Open-space ROI decider.

Builds the free-space region around a target parking spot and hands the downstream
trajectory optimizer everything in the parking frame: the ROI box, the end pose and
the obstacles as stacked halfplanes A.p >= b, each row holding on the free side of
its edge.
"""

import math
from typing import List, Optional

import numpy as np

from Geometry.Transforms import OriginFrame, normalize_angle, vector_angle, xy_boundary
from HDMap.Interfaces import MapService
from ObstacleDetection.ObstacleSelector import select_and_transform
from OpenSpaceRoi.BoundaryBuilder import build_lane_boundary
from OpenSpaceRoi.Errors import GeometryInconsistency, MapQueryFailure, OutOfRangeFailure, RoiError, RoiStatus
from OpenSpaceRoi.HyperplaneGenerator import build_hyperplanes, edges_num_of
from OpenSpaceRoi.ParkingSpotResolver import resolve_parking_spot
from OpenSpaceRoi.ParkingSpotStitcher import project_spot_top, stitch_boundary
from OpenSpaceRoi.RoiConfig import RoiDeciderConfig
from OpenSpaceRoi.SegmentFuser import fuse_line_segments
from Planning.Frame import Frame, ResolvedTarget
from Scene.Vehicle import VehicleParams
from Types import ConvexPiece, EndPose, Point2D, XYBoundary

_HEADING_EPSILON = 1e-10


def compute_end_pose(left_top: Point2D, left_down: Point2D, right_top: Point2D,
                     config: RoiDeciderConfig, vehicle_params: VehicleParams) -> EndPose:
    """
    Target pose inside the spot, in the parking frame.

    The pose sits on the spot's center line, a quarter (reverse-in) or three quarters
    (head-in) of the spot depth from the opening, and never closer to the opening than
    the vehicle overhang plus the depth buffer.
    """
    parking_spot_heading = vector_angle(left_top, left_down)
    end_x = (left_top[0] + right_top[0]) / 2.0
    top_to_down_distance = left_top[1] - left_down[1]
    if config.parking_inwards:
        depth_ratio, clearance = 3.0 / 4.0, vehicle_params.front_edge_to_center
    else:
        depth_ratio, clearance = 1.0 / 4.0, vehicle_params.back_edge_to_center

    if parking_spot_heading > _HEADING_EPSILON:
        end_y = left_down[1] - (max(depth_ratio * -top_to_down_distance, clearance) + config.parking_depth_buffer)
    else:
        end_y = left_down[1] + (max(depth_ratio * top_to_down_distance, clearance) + config.parking_depth_buffer)

    if config.parking_inwards:
        end_heading = parking_spot_heading
    else:
        end_heading = normalize_angle(parking_spot_heading + math.pi)
    return [end_x, end_y, end_heading, 0.0]


class OpenSpaceRoiDecider:
    """Region-of-interest and obstacle representation for open-space parking."""
    DEBUG = False  # Set to True to print intermediate results

    def __init__(self, config: RoiDeciderConfig, vehicle_params: VehicleParams, map_service: MapService) -> None:
        self.config: RoiDeciderConfig = config
        self.vehicle_params: VehicleParams = vehicle_params
        self.map_service: MapService = map_service
        '''Lane and parking-space lookup.'''

    def process(self, frame: Optional[Frame], previous: Optional[ResolvedTarget] = None) -> RoiStatus:
        """
        Compute the ROI for one planning cycle and write it onto ``frame.open_space_info``.

        Args:
            frame: Current planning frame
            previous: Target resolved in the previous cycle, reused when the spot id matches

        Returns:
            RoiStatus; on failure the message says which stage failed
        """
        if frame is None:
            msg = "Invalid frame, fail to process the OpenSpaceRoiDecider."
            print(f"[OpenSpaceRoi] {msg}")
            return RoiStatus.failure(msg)
        try:
            self._process(frame, previous)
        except RoiError as err:
            print(f"[OpenSpaceRoi] {err}")
            return RoiStatus.failure(str(err))
        return RoiStatus.OK()

    def _process(self, frame: Frame, previous: Optional[ResolvedTarget]) -> None:
        if not frame.target_parking_spot_id:
            raise MapQueryFailure("Failed to get parking space id from routing")
        info = frame.open_space_info
        info.target_parking_spot_id = frame.target_parking_spot_id

        roi_parking_boundary = self.get_parking_boundary(frame, previous)
        self.formulate_boundary_constraints(roi_parking_boundary, frame)

    def get_parking_boundary(self, frame: Frame, previous: Optional[ResolvedTarget] = None) -> List[ConvexPiece]:
        """
        Resolve the spot, stitch it into the lane boundary and fill origin, ROI box and end pose.

        Returns:
            Fused convex boundary pieces in the parking frame
        """
        info = frame.open_space_info
        target = resolve_parking_spot(self.map_service, frame.vehicle_state, frame.target_parking_spot_id,  # type: ignore
                                      self.config, previous)
        info.target_parking_lane = target.lane
        spot = target.spot
        path = target.path

        projection = project_spot_top(path, spot)
        center_line_s = projection.center_s
        start_s = center_line_s - self.config.roi_longitudinal_range
        end_s = center_line_s + self.config.roi_longitudinal_range

        lane_boundary = build_lane_boundary(path, start_s, end_s,
                                            self.config.roi_line_segment_min_angle,
                                            self.config.roi_line_segment_length)
        if self.DEBUG: print(f"[OpenSpaceRoi Debug] Sampled {len(lane_boundary)} stations in s=[{start_s:.2f}, {end_s:.2f}]")

        origin_frame = target.origin_frame or OriginFrame.from_spot_top_edge(spot.left_top, spot.right_top)
        target.origin_frame = origin_frame
        info.resolved_target = target
        info.origin_point = origin_frame.origin_point
        info.origin_heading = origin_frame.origin_heading

        stitched = stitch_boundary(path, spot, lane_boundary, origin_frame, projection)
        if self.DEBUG: print(f"[OpenSpaceRoi Debug] Spot on {stitched.side.name} of lane, average_l={stitched.average_l:.3f}")
        roi_parking_boundary = fuse_line_segments(stitched.segments)
        if not roi_parking_boundary:
            raise GeometryInconsistency("No boundary pieces left after fusing line segments")
        if self.DEBUG: print(f"[OpenSpaceRoi Debug] {len(stitched.segments)} boundary pieces after fusing")

        info.roi_boundary = stitched.boundary_points
        roi_xy = xy_boundary(stitched.boundary_points)
        info.roi_xy_boundary = roi_xy

        vehicle_local = origin_frame.to_local(frame.vehicle_state.xy())
        if not self._inside(vehicle_local, roi_xy):
            raise OutOfRangeFailure(
                f"vehicle outside of xy boundary of parking ROI: vehicle ({vehicle_local[0]:.2f}, {vehicle_local[1]:.2f}), "
                f"boundary {[round(v, 2) for v in roi_xy]}")

        left_top, left_down, right_top = origin_frame.points_to_local([spot.left_top, spot.left_down, spot.right_top])
        info.open_space_end_pose = compute_end_pose(left_top, left_down, right_top, self.config, self.vehicle_params)
        if self.DEBUG: print(f"[OpenSpaceRoi Debug] End pose {info.open_space_end_pose}")
        return roi_parking_boundary

    @staticmethod
    def _inside(point: Point2D, roi_xy: XYBoundary) -> bool:
        return roi_xy[0] <= point[0] <= roi_xy[1] and roi_xy[2] <= point[1] <= roi_xy[3]

    def formulate_boundary_constraints(self, roi_parking_boundary: List[ConvexPiece], frame: Frame) -> None:
        """Gather boundary and obstacle vertices, then turn them into stacked halfplanes."""
        self.load_obstacle_in_vertices(roi_parking_boundary, frame)
        self.load_obstacle_in_hyperplanes(frame)

    def load_obstacle_in_vertices(self, roi_parking_boundary: List[ConvexPiece], frame: Frame) -> None:
        info = frame.open_space_info
        for piece in roi_parking_boundary:
            if len(piece) < 2:
                raise GeometryInconsistency(f"Boundary piece with {len(piece)} vertices")
        vertices: List[ConvexPiece] = [list(piece) for piece in roi_parking_boundary]

        if self.config.enable_perception_obstacles:
            perception_pieces = select_and_transform(
                frame.obstacles, info.origin_frame, info.roi_xy_boundary, info.open_space_end_pose,  # type: ignore
                frame.vehicle_state.xy(), self.config.perception_obstacle_filtering_distance,
                self.config.perception_obstacle_buffer)
            if not perception_pieces and self.DEBUG:
                print("[OpenSpaceRoi Debug] no obstacle given by perception")
            vertices.extend(perception_pieces)

        info.obstacles_vertices_vec = vertices
        info.obstacles_edges_num = edges_num_of(vertices)
        info.obstacles_num = len(vertices)

    def load_obstacle_in_hyperplanes(self, frame: Frame) -> None:
        info = frame.open_space_info
        A, b = build_hyperplanes(info.obstacles_num, info.obstacles_edges_num, info.obstacles_vertices_vec)
        if A.shape[0] != int(np.sum(info.obstacles_edges_num)):
            raise GeometryInconsistency("Hyperplane rows do not match the edge count")
        info.obstacles_A = A
        info.obstacles_b = b
