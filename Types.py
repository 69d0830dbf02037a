from enum import Enum, auto
from typing import List, Tuple, TypeAlias
import numpy as np


Point2D: TypeAlias = Tuple[float, float]

Polyline: TypeAlias = List[Point2D]
'''An ordered list of (x, y) points.'''

ConvexPiece: TypeAlias = List[Point2D]
'''Vertices of one convex boundary or obstacle fragment in the parking frame.
Closed pieces (perception obstacles) repeat the first vertex at the end.'''

XYBoundary: TypeAlias = List[float]
'''Axis-aligned bounding box [x_min, x_max, y_min, y_max] in the parking frame.'''

EndPose: TypeAlias = List[float]
'''Target pose [x, y, heading, velocity] in the parking frame.'''

HyperplaneMatrix: TypeAlias = np.ndarray  # shape (edges, 2)
'''Stacked halfplane normals, one row per polygon edge.'''

HyperplaneOffsets: TypeAlias = np.ndarray  # shape (edges, 1)
'''Stacked halfplane offsets matching HyperplaneMatrix rows.'''


class ParkingSide(Enum):
    """Side of the lane the parking spot occupies, looking along the lane."""
    LEFT = auto()
    RIGHT = auto()

class ObstacleType(Enum):
    """Defines if the obstacle comes from perception or is a virtual planning object."""
    Physical = auto()
    Virtual = auto()
