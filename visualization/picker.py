"""
Ray / gate lookup for pointer interactions on the PPI.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from config import (
    PICK_MAX_AZIMUTH_DIFF_DEG,
    PICK_MAX_DISTANCE_M,
    PICK_RANGE_TOLERANCE_M,
)
from models.scan import RadarRay, RangeGate
from visualization.projection import PolarProjection


def circular_difference(a: float, b: float) -> float:
    """Smallest absolute angle between two azimuths, in [0, 180]."""
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff)


@dataclass
class PickResult:
    ray_index: int
    gate_index: int
    ray: RadarRay
    gate: RangeGate


class RayPicker:
    """Finds the gate under a polar query point.

    Args:
        max_azimuth_diff: Ray must lie strictly closer than this (deg).
        max_distance: Queries beyond this range (m) never pick.
        range_tolerance: Gate must lie strictly closer than this (m).
    """

    def __init__(
        self,
        max_azimuth_diff: float = PICK_MAX_AZIMUTH_DIFF_DEG,
        max_distance: float = PICK_MAX_DISTANCE_M,
        range_tolerance: float = PICK_RANGE_TOLERANCE_M,
    ):
        self.max_azimuth_diff = max_azimuth_diff
        self.max_distance = max_distance
        self.range_tolerance = range_tolerance

    def nearest_ray(
        self, scan: Sequence[RadarRay], azimuth: float
    ) -> Tuple[Optional[int], float]:
        """Index of the ray closest in azimuth (earliest on ties) and its difference."""
        best: Optional[int] = None
        best_diff = float("inf")
        for i, ray in enumerate(scan):
            diff = circular_difference(ray.azimuth, azimuth)
            if diff < best_diff:
                best, best_diff = i, diff
        return best, best_diff

    def pick(
        self, scan: Sequence[RadarRay], azimuth: float, distance: float
    ) -> Optional[PickResult]:
        """Gate at (azimuth, distance), or None if nothing is close enough.

        The first gate in stored order within the range tolerance wins.
        """
        idx, diff = self.nearest_ray(scan, azimuth)
        if idx is None or diff >= self.max_azimuth_diff or distance > self.max_distance:
            return None

        ray = scan[idx]
        for j, gate in enumerate(ray.gates):
            if abs(gate.distance - distance) < self.range_tolerance:
                return PickResult(ray_index=idx, gate_index=j, ray=ray, gate=gate)
        return None

    def pick_at(
        self,
        scan: Sequence[RadarRay],
        projection: PolarProjection,
        point: Tuple[float, float],
    ) -> Optional[PickResult]:
        """Pick from a screen point via the projection's inverse map."""
        azimuth, distance = projection.unproject(point[0], point[1])
        return self.pick(scan, azimuth, distance)


def format_pick(result: PickResult, separator: str = "\n") -> str:
    """Tooltip text for a picked gate."""
    g = result.gate
    return separator.join([
        f"Azimuth: {result.ray.azimuth:.1f}°",
        f"Distance: {g.distance:.0f} m",
        f"Speed: {g.speed:.2f} m/s",
        f"SNR: {g.snr:.1f} dB",
        f"TI: {g.turbulence:.3f}",
    ])
