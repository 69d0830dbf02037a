import matplotlib.pyplot as plt
import numpy as np

from ObstacleDetection.Obstacle import load_obstacles
from OpenSpaceRoi.OpenSpaceRoiDecider import OpenSpaceRoiDecider
from OpenSpaceRoi.RoiConfig import RoiDeciderConfig
from Planning.Frame import Frame, VehicleState
from Planning.PlanningContext import PlanningContext
from Scene.JsonManager import load_json
from Scene.Map import Map
from Scene.Vehicle import VehicleParams
from Scene.VisualizeRoi import plot_open_space_roi

# --- INPUT FILES ---
PARAM_PATH = "Scene/Parameters.json"
SCENE_PATH = "Scene/ParkingLot.json"
NUM_CYCLES = 2  # The second cycle reuses the target resolved by the first
SHOW_PLOT = True


def build_frame(scene: dict) -> Frame:
    state = scene["Vehicle State"]
    vehicle_state = VehicleState(x=state["X"], y=state["Y"], z=state.get("Z", 0.0), heading=state.get("Heading", 0.0))
    return Frame(vehicle_state=vehicle_state,
                 obstacles=load_obstacles(scene.get("Obstacles", [])),
                 target_parking_spot_id=scene.get("Target Parking Spot"))


def print_summary(frame: Frame) -> None:
    info = frame.open_space_info
    np.set_printoptions(precision=3, suppress=True)
    print(f"  Target spot:      {info.target_parking_spot_id} on lane {info.target_parking_lane.id if info.target_parking_lane else None}")
    print(f"  Origin:           ({info.origin_point[0]:.3f}, {info.origin_point[1]:.3f}), heading {info.origin_heading:.3f} rad")
    print(f"  ROI xy boundary:  {[round(v, 3) for v in info.roi_xy_boundary]}")
    print(f"  End pose:         {[round(v, 3) for v in info.open_space_end_pose]}")
    print(f"  Pieces:           {info.obstacles_num} (edges per piece {info.obstacles_edges_num.ravel().tolist()})")
    print(f"  A shape / b shape: {info.obstacles_A.shape} / {info.obstacles_b.shape}")


def main():
    print("Loading configuration...")
    roi_params = load_json(PARAM_PATH, "Open Space ROI Decider")
    vehicle_params = VehicleParams(load_json(PARAM_PATH, "Vehicle"))
    scene = load_json(SCENE_PATH)

    config = RoiDeciderConfig(roi_params)
    hd_map = Map(scene["Map"])
    print(f"  Lanes: {hd_map.lane_ids}")
    print(f"  Parking spaces: {list(hd_map.parking_spaces.keys())}")

    decider = OpenSpaceRoiDecider(config, vehicle_params, hd_map)
    context = PlanningContext()
    context.DEBUG = True

    frame = None
    for cycle in range(NUM_CYCLES):
        print(f"\n{'='*60}")
        print(f"Planning cycle {cycle + 1}")
        print(f"{'='*60}")
        frame = build_frame(scene)
        status = context.run_open_space_roi(decider, frame)
        if not status:
            print(f"✗ Open space ROI failed: {status.message}")
            return
        print("✓ Open space ROI computed")
        print_summary(frame)

    if SHOW_PLOT and frame is not None:
        plot_open_space_roi(frame.open_space_info, title=f"Open Space ROI for {frame.target_parking_spot_id}")
        plt.show()


if __name__ == "__main__":
    main()
