from dataclasses import dataclass


class RoiError(Exception):
    """Base class for every failure of the open-space ROI computation."""
    kind: str = "RoiError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class MapQueryFailure(RoiError):
    """No nearest lane, no path projection, or no parking spot found."""
    kind = "MapQueryFailure"


class GeometryInconsistency(RoiError):
    """Mismatched array sizes, degenerate segments or malformed polygons."""
    kind = "GeometryInconsistency"


class OutOfRangeFailure(RoiError):
    """Vehicle or target outside the computed ROI, or spot too far away."""
    kind = "OutOfRangeFailure"


class ConfigFailure(RoiError):
    """Invalid configuration value."""
    kind = "ConfigFailure"


@dataclass(frozen=True)
class RoiStatus:
    """Outcome of one ROI computation."""
    ok: bool
    message: str = ""

    @staticmethod
    def OK() -> "RoiStatus":
        return RoiStatus(ok=True)

    @staticmethod
    def failure(message: str) -> "RoiStatus":
        return RoiStatus(ok=False, message=message)

    def __bool__(self) -> bool:
        return self.ok
