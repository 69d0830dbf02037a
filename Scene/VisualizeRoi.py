"""
Plot the open-space ROI in the parking frame: ROI box, stitched boundary,
convex pieces and the end pose.
"""

import math
from typing import Tuple

import matplotlib.patches as patches
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from Planning.Frame import OpenSpaceInfo


def plot_open_space_roi(open_space_info: OpenSpaceInfo, title: str = "Open Space ROI") -> Tuple[Figure, Axes]:
    """
    Draw the decider output.

    Args:
        open_space_info: Output of a successful ROI computation
        title: Title for the plot

    Returns:
        (fig, ax); the caller decides whether to show or save
    """
    fig, ax = plt.subplots(figsize=(14, 8))
    ax.set_aspect('equal')

    # ROI bounding box
    if len(open_space_info.roi_xy_boundary) == 4:
        x_min, x_max, y_min, y_max = open_space_info.roi_xy_boundary
        roi_box = patches.Rectangle(
            (x_min, y_min), x_max - x_min, y_max - y_min,
            linewidth=1.5, edgecolor='black', facecolor='lightgray',
            alpha=0.15, linestyle='--', label='ROI Box'
        )
        ax.add_patch(roi_box)
        ax.set_xlim(x_min - 1, x_max + 1)
        ax.set_ylim(y_min - 1, y_max + 1)

    # Stitched boundary loop
    if open_space_info.roi_boundary:
        xs = [p[0] for p in open_space_info.roi_boundary]
        ys = [p[1] for p in open_space_info.roi_boundary]
        ax.plot(xs, ys, 'k-', linewidth=1.0, alpha=0.5, label='Stitched Boundary')

    # Convex pieces: open boundary pieces first, closed obstacle boxes after
    boundary_labeled = False
    obstacle_labeled = False
    for piece in open_space_info.obstacles_vertices_vec:
        closed = len(piece) > 2 and piece[0] == piece[-1]
        if closed:
            polygon = patches.Polygon(
                piece[:-1], closed=True,
                linewidth=2, edgecolor='red', facecolor='red',
                alpha=0.4, label='' if obstacle_labeled else 'Obstacles'
            )
            ax.add_patch(polygon)
            obstacle_labeled = True
        else:
            ax.plot([p[0] for p in piece], [p[1] for p in piece], 'b-o', linewidth=2, markersize=3,
                    label='' if boundary_labeled else 'Boundary Pieces')
            boundary_labeled = True

    # End pose
    if len(open_space_info.open_space_end_pose) >= 3:
        end_x, end_y, end_heading = open_space_info.open_space_end_pose[:3]
        ax.arrow(end_x, end_y, math.cos(end_heading), math.sin(end_heading),
                 head_width=0.3, head_length=0.3, fc='green', ec='darkgreen', zorder=10)
        ax.scatter([end_x], [end_y], s=80, c='green', marker='o', edgecolors='darkgreen',
                   linewidth=2, label='End Pose', zorder=10)

    ax.set_xlabel('X local (meters)', fontsize=12)
    ax.set_ylabel('Y local (meters)', fontsize=12)
    ax.set_title(f"{title} ({open_space_info.obstacles_num} pieces)", fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right', fontsize=10)

    plt.tight_layout()
    return fig, ax
