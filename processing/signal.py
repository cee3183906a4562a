"""
Quality filtering and turbulence intensity for aligned scans.

Both transforms return new scans and never touch their input, so the
processed view can always be rebuilt from the raw snapshot:

    processed = process_scan(raw, snr_threshold, window_size)
"""

from typing import Sequence

import numpy as np

from config import MIN_MEAN_SPEED, MIN_WINDOW_SIZE
from models.scan import RadarRay, RangeGate, ScanData, copy_scan


def apply_filter(scan: Sequence[RadarRay], snr_threshold: float) -> ScanData:
    """Mark every gate valid iff its SNR is at least ``snr_threshold``.

    Only ``is_valid`` changes; distance, speed and SNR are left alone.
    """
    out = copy_scan(scan)
    for ray in out:
        for gate in ray.gates:
            gate.is_valid = gate.snr >= snr_threshold
    return out


def gate_turbulence(
    speeds: np.ndarray,
    valid: np.ndarray,
    window_size: int,
) -> np.ndarray:
    """Sliding-window turbulence intensity along one ray.

    For gate i the window spans ``[i - window_size // 2, i + window_size // 2]``
    clipped to the ray. TI is the population standard deviation of the
    valid speeds in the window divided by the absolute mean speed.

    TI is 0 when gate i is invalid, when fewer than two gates in the
    window are valid, or when ``|mean| <= MIN_MEAN_SPEED``.

    Args:
        speeds: (G,) radial speeds.
        valid: (G,) boolean validity mask.
        window_size: Window length in gates, clamped to >= 2.

    Returns:
        (G,) array of TI values (>= 0).
    """
    window_size = max(MIN_WINDOW_SIZE, int(window_size))
    half = window_size // 2
    n = len(speeds)
    ti = np.zeros(n)

    for i in range(n):
        if not valid[i]:
            continue
        lo = max(0, i - half)
        hi = min(n - 1, i + half)
        window = speeds[lo:hi + 1][valid[lo:hi + 1]]
        if len(window) < 2:
            continue
        mean = window.mean()
        if abs(mean) <= MIN_MEAN_SPEED:
            continue
        std = np.sqrt(np.mean((window - mean) ** 2))
        ti[i] = std / abs(mean)

    return ti


def compute_turbulence(scan: Sequence[RadarRay], window_size: int) -> ScanData:
    """Return a copy of ``scan`` with per-gate turbulence recomputed from scratch."""
    out = copy_scan(scan)
    for ray in out:
        if not ray.gates:
            continue
        speeds = np.array([g.speed for g in ray.gates], dtype=float)
        valid = np.array([g.is_valid for g in ray.gates], dtype=bool)
        for gate, value in zip(ray.gates, gate_turbulence(speeds, valid, window_size)):
            gate.turbulence = float(value)
    return out


def process_scan(
    raw: Sequence[RadarRay],
    snr_threshold: float,
    window_size: int,
) -> ScanData:
    """Rebuild the processed scan from the raw snapshot: filter, then turbulence."""
    return compute_turbulence(apply_filter(raw, snr_threshold), window_size)


def ray_profile(ray: RadarRay, valid_only: bool = True) -> dict:
    """Gate columns of one ray as numpy arrays (for profile plots and tables)."""
    gates: Sequence[RangeGate] = ray.valid_gates() if valid_only else ray.gates
    return {
        "distance": np.array([g.distance for g in gates], dtype=float),
        "speed": np.array([g.speed for g in gates], dtype=float),
        "snr": np.array([g.snr for g in gates], dtype=float),
        "turbulence": np.array([g.turbulence for g in gates], dtype=float),
    }
