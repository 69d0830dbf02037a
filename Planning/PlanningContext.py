from typing import Dict, Optional

from OpenSpaceRoi.Errors import RoiStatus
from OpenSpaceRoi.OpenSpaceRoiDecider import OpenSpaceRoiDecider
from Planning.Frame import Frame, ResolvedTarget


class TargetCache:
    """Resolved parking targets kept across planning cycles, keyed by spot id."""

    def __init__(self) -> None:
        self._targets: Dict[str, ResolvedTarget] = {}

    def lookup(self, spot_id: Optional[str]) -> Optional[ResolvedTarget]:
        if spot_id is None:
            return None
        return self._targets.get(spot_id)

    def remember(self, resolved: ResolvedTarget) -> None:
        # only one target is active at a time
        self._targets = {resolved.spot_id: resolved}

    def clear(self) -> None:
        self._targets.clear()

    def __len__(self) -> int:
        return len(self._targets)


class PlanningContext:
    """
    State shared between planning cycles.

    The ROI decider itself is stateless; this is where the parking frame and the
    lane resolved for a spot live until the routing target changes.
    """
    DEBUG = False

    def __init__(self) -> None:
        self.target_cache: TargetCache = TargetCache()
        self.cycle_count: int = 0

    def run_open_space_roi(self, decider: OpenSpaceRoiDecider, frame: Frame) -> RoiStatus:
        """
        Run the decider on ``frame`` with the cached target for its spot, and cache the new one on success.

        Args:
            decider: Configured ROI decider
            frame: Current planning frame

        Returns:
            The decider's status
        """
        self.cycle_count += 1
        previous = self.target_cache.lookup(frame.target_parking_spot_id)
        if self.DEBUG:
            state = "reusing cached target" if previous is not None else "resolving target"
            print(f"[PlanningContext] cycle {self.cycle_count}: {state} for spot {frame.target_parking_spot_id}")
        status = decider.process(frame, previous)
        resolved = frame.open_space_info.resolved_target
        if status.ok and resolved is not None:
            self.target_cache.remember(resolved)
        return status

    def clear(self) -> None:
        self.target_cache.clear()
        self.cycle_count = 0
