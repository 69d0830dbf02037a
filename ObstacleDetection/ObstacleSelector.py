from typing import Iterable, List, Sequence

from Geometry.Transforms import OriginFrame
from ObstacleDetection.Obstacle import PerceptionObstacle
from Types import ConvexPiece, Point2D


class ObstacleSelector:
    """Picks the perception obstacles relevant to the parking maneuver and turns them into closed convex pieces."""
    DEBUG = False  # Set to True to print why obstacles are dropped

    def __init__(self, origin_frame: OriginFrame, roi_xy_boundary: Sequence[float], end_pose: Sequence[float],
                 vehicle_xy: Point2D, filtering_distance: float, inflate_distance: float) -> None:
        """
        Args:
            origin_frame: Parking frame
            roi_xy_boundary: [x_min, x_max, y_min, y_max] in the parking frame
            end_pose: [x, y, heading, v] in the parking frame
            vehicle_xy: Vehicle position in world frame
            filtering_distance: Obstacles farther than this from both vehicle and end pose are dropped
            inflate_distance: Bounding box growth along and across the obstacle heading
        """
        self._origin_frame: OriginFrame = origin_frame
        self._roi_xy_boundary: List[float] = list(roi_xy_boundary)
        self._end_pose_world: Point2D = origin_frame.to_world((end_pose[0], end_pose[1]))
        '''End pose position translated back to world frame for distance checks.'''
        self._vehicle_xy: Point2D = vehicle_xy
        self._filtering_distance: float = filtering_distance
        self._inflate_distance: float = inflate_distance

    def filter_out(self, obstacle: PerceptionObstacle) -> bool:
        """True if the obstacle should be ignored."""
        if obstacle.is_virtual:
            if self.DEBUG: print(f"[ObstacleSelector] {obstacle.id}: virtual")
            return True

        x_min, x_max, y_min, y_max = self._roi_xy_boundary
        cx, cy = self._origin_frame.to_local(obstacle.box.center)
        if cx < x_min or cx > x_max or cy < y_min or cy > y_max:
            if self.DEBUG: print(f"[ObstacleSelector] {obstacle.id}: center ({cx:.2f}, {cy:.2f}) outside ROI")
            return True

        vehicle_to_obstacle = obstacle.box.distance_to(self._vehicle_xy)
        end_pose_to_obstacle = obstacle.box.distance_to(self._end_pose_world)
        if vehicle_to_obstacle > self._filtering_distance and end_pose_to_obstacle > self._filtering_distance:
            if self.DEBUG: print(f"[ObstacleSelector] {obstacle.id}: too far ({vehicle_to_obstacle:.2f}, {end_pose_to_obstacle:.2f})")
            return True
        return False

    def to_convex_piece(self, obstacle: PerceptionObstacle) -> ConvexPiece:
        """
        Inflated bounding box in the parking frame as a closed loop.

        Box corners come counter-clockwise; reversed they run clockwise like the boundary
        pieces, so every edge keeps a.p >= b on the free side and the box interior
        violates all four rows. The first corner is repeated at the end so all four
        edges become constraints.
        """
        box = obstacle.box.extended(self._inflate_distance, self._inflate_distance)
        vertices = [self._origin_frame.to_local(corner) for corner in reversed(box.corners())]
        vertices.append(vertices[0])
        return vertices

    def select(self, obstacles: Iterable[PerceptionObstacle]) -> List[ConvexPiece]:
        pieces: List[ConvexPiece] = []
        for obstacle in obstacles:
            if self.filter_out(obstacle):
                continue
            pieces.append(self.to_convex_piece(obstacle))
        return pieces


def select_and_transform(obstacles: Iterable[PerceptionObstacle], origin_frame: OriginFrame,
                         roi_xy_boundary: Sequence[float], end_pose: Sequence[float], vehicle_xy: Point2D,
                         filtering_distance: float, inflate_distance: float) -> List[ConvexPiece]:
    """Filter perception obstacles and return their inflated boxes as closed pieces in the parking frame."""
    selector = ObstacleSelector(origin_frame, roi_xy_boundary, end_pose, vehicle_xy,
                                filtering_distance, inflate_distance)
    return selector.select(obstacles)
