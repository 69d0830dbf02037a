from __future__ import annotations

from typing import Any, Dict, List

from Geometry.Box2d import Box2d
from Types import ObstacleType


class PerceptionObstacle:
    def __init__(self, obstacle_id: str, box: Box2d, obstacle_type: ObstacleType = ObstacleType.Physical) -> None:
        self.id: str = obstacle_id
        self.box: Box2d = box
        '''The perception bounding box in world frame.'''
        self.type: ObstacleType = obstacle_type
        '''Physical obstacles come from perception, virtual ones are planning artifacts (stop walls etc.).'''

    @property
    def is_virtual(self) -> bool:
        return self.type == ObstacleType.Virtual

    def __repr__(self) -> str:
        return f"PerceptionObstacle(id={self.id!r}, box={self.box}, type={self.type.name})"


def load_obstacles(obs_list: List[Dict[str, Any]]) -> List[PerceptionObstacle]:
    """Loads perception obstacles from a list of dictionaries."""
    obstacles: List[PerceptionObstacle] = []
    for index, obs in enumerate(obs_list):
        if "Center" not in obs or "Length" not in obs or "Width" not in obs:
            raise ValueError(f"Obstacle #{index} must define Center, Length and Width.")
        box = Box2d(center=tuple(obs["Center"]),  # type: ignore
                    heading=float(obs.get("Heading", 0.0)),
                    length=float(obs["Length"]),
                    width=float(obs["Width"]))
        obstacle_type = ObstacleType.Virtual if obs.get("Virtual", False) else ObstacleType.Physical
        obstacles.append(PerceptionObstacle(obstacle_id=str(obs.get("Id", index)), box=box, obstacle_type=obstacle_type))
    return obstacles
