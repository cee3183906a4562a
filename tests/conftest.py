"""Shared fixtures for the Wind Radar Scan Analyzer test suite."""

import sys
import os
from datetime import datetime

import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.scan import RadarRay, RangeGate

SAMPLES_DIR = os.path.join(os.path.dirname(__file__), "..", "data", "samples")


def make_ray(speeds, snrs=None, azimuth=10.0, distances=None, timestamp=None):
    """Build a RadarRay from parallel speed/SNR lists (gates every 100 m by default)."""
    if snrs is None:
        snrs = [10.0] * len(speeds)
    if distances is None:
        distances = [100.0 * (i + 1) for i in range(len(speeds))]
    return RadarRay(
        timestamp=timestamp or datetime(2025, 11, 18, 13, 0, 0),
        azimuth=azimuth,
        elevation=5.0,
        gates=[RangeGate(distance=d, speed=s, snr=n) for d, s, n in zip(distances, speeds, snrs)],
    )


@pytest.fixture
def angle_sample_path():
    return os.path.join(SAMPLES_DIR, "angle.txt")


@pytest.fixture
def wind_sample_path():
    return os.path.join(SAMPLES_DIR, "wind.txt")


@pytest.fixture
def simple_scan():
    """Three rays at different azimuths with five gates each."""
    return [
        make_ray([1.0, 2.0, 3.0, 4.0, 5.0], [5.0, -5.0, 5.0, 5.0, -30.0], azimuth=0.0),
        make_ray([2.0, 2.0, 2.0, 2.0, 2.0], azimuth=90.0),
        make_ray([-1.0, 1.0, -1.0, 1.0, 0.0], azimuth=359.0),
    ]


@pytest.fixture
def round_trip_logs():
    """One angle sample at t=100 s and one wind row at t=101 s (gate 500 m, SNR -5)."""
    angle_lines = ["1970-01-01 00:01:40 10 5"]
    wind_lines = [
        "Date Time 500m",
        "19700101 00:01:41 3.0 -5.0",
    ]
    return angle_lines, wind_lines


@pytest.fixture
def ray_factory():
    """The make_ray builder, for tests that assemble their own rays."""
    return make_ray
