"""
Scan data model for aligned wind-radar observations.

A scan is an ordered list of rays; each ray carries the range gates
decoded from one wind-log row together with the antenna angles matched
from the angle log.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Sequence


class DisplayMode(Enum):
    """Gate quantity shown on the PPI and in the ray profiles."""

    SPEED = "speed"
    TURBULENCE = "turbulence"

    @property
    def label(self) -> str:
        return "Radial Speed (m/s)" if self is DisplayMode.SPEED else "Turbulence Intensity"


@dataclass
class RangeGate:
    """One range-resolved sample along a ray.

    Args:
        distance: Gate distance from the radar (meters).
        speed: Radial wind speed (m/s, signed).
        snr: Signal-to-noise ratio (dB).
        turbulence: Derived turbulence intensity (dimensionless).
        is_valid: Derived from the SNR threshold.
    """

    distance: float
    speed: float
    snr: float
    turbulence: float = 0.0
    is_valid: bool = True

    def __post_init__(self):
        if self.distance < 0:
            raise ValueError("distance must be >= 0")


@dataclass
class RadarRay:
    """A single beam position: timestamp, antenna angles and its gates."""

    timestamp: datetime
    azimuth: float       # degrees, normalized to [0, 360)
    elevation: float     # degrees
    gates: List[RangeGate] = field(default_factory=list)

    def __post_init__(self):
        self.azimuth = self.azimuth % 360.0
        # mod can round a tiny negative angle up to exactly 360
        if self.azimuth >= 360.0:
            self.azimuth = 0.0

    @property
    def distances(self) -> List[float]:
        return [g.distance for g in self.gates]

    def valid_gates(self) -> List[RangeGate]:
        return [g for g in self.gates if g.is_valid]


ScanData = List[RadarRay]


def copy_scan(scan: Sequence[RadarRay]) -> ScanData:
    """Deep-copy a scan so the result shares no rays or gates with the input."""
    return copy.deepcopy(list(scan))


def gate_count(scan: Sequence[RadarRay]) -> int:
    return sum(len(r.gates) for r in scan)


def valid_gate_count(scan: Sequence[RadarRay]) -> int:
    return sum(1 for r in scan for g in r.gates if g.is_valid)
