"""
Mock Data for the Wind Radar Scan Analyzer.

Generates a synthetic pair of angle / wind logs in the same text
formats the radar writes, so the app and tests can run without real
files. The antenna sweeps azimuth at a constant rate; radial speed is
the projection of a uniform wind plus range-growing noise, and SNR
falls off with range.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

import numpy as np

DEMO_START = datetime(2025, 11, 18, 13, 0, 0)
DEMO_GATES_M = tuple(float(d) for d in range(100, 4001, 100))


def sweep_azimuth(seconds: np.ndarray, start_deg: float = 0.0, rate_deg_s: float = 1.0) -> np.ndarray:
    """Azimuth of a constant-rate sweep, in [0, 360)."""
    return (start_deg + rate_deg_s * np.asarray(seconds, dtype=float)) % 360.0


def generate_angle_lines(
    duration_s: int = 360,
    start: datetime = DEMO_START,
    rate_deg_s: float = 1.0,
    elevation_deg: float = 5.0,
    header: bool = True,
) -> List[str]:
    """
    Return angle-log lines, one sample per second.

    Format: ``YYYY-MM-DD HH:MM:SS azimuth elevation``.
    """
    lines = ["Time Azimuth Elevation"] if header else []
    t = np.arange(duration_s)
    az = sweep_azimuth(t, rate_deg_s=rate_deg_s)
    for sec, a in zip(t, az):
        ts = start + timedelta(seconds=int(sec))
        lines.append(f"{ts:%Y-%m-%d %H:%M:%S} {a:.1f} {elevation_deg:.1f}")
    return lines


def generate_wind_lines(
    duration_s: int = 360,
    start: datetime = DEMO_START,
    row_interval_s: int = 2,
    time_offset_s: int = 1,
    gate_distances: Sequence[float] = DEMO_GATES_M,
    rate_deg_s: float = 1.0,
    wind_speed: float = 8.0,
    wind_direction_deg: float = 240.0,
    seed: Optional[int] = 42,
) -> List[str]:
    """
    Return wind-log lines: a header naming the gates, then one row per ``row_interval_s``.

    Row timestamps are shifted by ``time_offset_s`` from the angle log
    so alignment has to tolerate the gap.

    Format: ``YYYYMMDD HH:MM:SS speed_1 snr_1 speed_2 snr_2 ...``.
    """
    rng = np.random.default_rng(seed)
    dist = np.asarray(gate_distances, dtype=float)

    header_tokens = ["Date", "Time"]
    for d in dist:
        header_tokens += [f"Speed{d:.0f}m", f"SNR{d:.0f}m"]
    lines = [" ".join(header_tokens)]

    for sec in range(time_offset_s, duration_s, row_interval_s):
        az = float(sweep_azimuth(sec, rate_deg_s=rate_deg_s))
        radial = wind_speed * np.cos(np.radians(az - wind_direction_deg))
        noise = rng.normal(0.0, 0.2 + dist / 4000.0, len(dist))
        speed = radial + noise
        snr = 12.0 - dist / 120.0 + rng.normal(0.0, 2.0, len(dist))

        ts = start + timedelta(seconds=sec)
        values = " ".join(f"{s:.2f} {n:.1f}" for s, n in zip(speed, snr))
        lines.append(f"{ts:%Y%m%d %H:%M:%S} {values}")

    return lines


def get_demo_logs(seed: Optional[int] = 42) -> Tuple[List[str], List[str]]:
    """Angle and wind log lines for one full 360-degree sweep."""
    return generate_angle_lines(), generate_wind_lines(seed=seed)
