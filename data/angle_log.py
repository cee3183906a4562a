"""
Angle log parser.

The antenna controller writes one line per second-ish sample::

    2025-11-18 13:01:22 0 5

(date, time, azimuth, elevation, optionally more columns). The parser
builds a timestamp -> (azimuth, elevation) mapping and a sorted,
searchable ``AngleLog`` view of it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np

from config import ANGLE_HEADER_TOKENS, ANGLE_TIME_FORMAT, MIN_ANGLE_FIELDS
from data.text_io import (
    ParseStats,
    epoch_seconds,
    from_epoch_seconds,
    parse_timestamp,
    read_lines,
    split_fields,
)
from models.errors import ParseFailure

logger = logging.getLogger(__name__)

AngleMap = Dict[int, Tuple[float, float]]


@dataclass
class AngleLog:
    """Angle samples sorted by time.

    Attributes:
        times: (N,) int64 epoch seconds, strictly increasing.
        azimuth: (N,) azimuth in degrees.
        elevation: (N,) elevation in degrees.
    """

    times: np.ndarray
    azimuth: np.ndarray
    elevation: np.ndarray

    @classmethod
    def from_mapping(cls, angles: AngleMap) -> "AngleLog":
        keys = sorted(angles)
        return cls(
            times=np.array(keys, dtype=np.int64),
            azimuth=np.array([angles[k][0] for k in keys], dtype=float),
            elevation=np.array([angles[k][1] for k in keys], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.times)

    def time_span(self) -> str:
        if len(self) == 0:
            return "empty"
        first = from_epoch_seconds(int(self.times[0]))
        last = from_epoch_seconds(int(self.times[-1]))
        return f"{first} -> {last}"


def _is_header(line: str) -> bool:
    return any(token in line for token in ANGLE_HEADER_TOKENS)


def parse_angle_lines(
    lines: Iterable[str],
    stats: Optional[ParseStats] = None,
) -> AngleMap:
    """Parse angle-log lines into an epoch-seconds -> (azimuth, elevation) map.

    Malformed lines are dropped. A later line with the same timestamp
    replaces an earlier one.

    Args:
        lines: Raw text lines of the angle log.
        stats: Optional ParseStats updated in place.

    Returns:
        Dict keyed by epoch seconds (may be empty).
    """
    if stats is None:
        stats = ParseStats()
    angles: AngleMap = {}

    for line in lines:
        line = line.strip()
        if not line:
            continue
        stats.lines += 1
        if _is_header(line):
            stats.headers += 1
            continue

        parts = split_fields(line)
        if len(parts) < MIN_ANGLE_FIELDS:
            stats.skipped += 1
            continue

        ts = parse_timestamp(parts[0], parts[1], ANGLE_TIME_FORMAT)
        if ts is None:
            logger.debug("Angle line skipped, bad timestamp: %r", line)
            stats.skipped += 1
            continue
        try:
            az = float(parts[2])
            el = float(parts[3])
        except ValueError:
            logger.debug("Angle line skipped, bad angles: %r", line)
            stats.skipped += 1
            continue
        if not (math.isfinite(az) and math.isfinite(el)):
            logger.debug("Angle line skipped, bad angles: %r", line)
            stats.skipped += 1
            continue

        angles[epoch_seconds(ts)] = (az, el)
        stats.records += 1

    return angles


def load_angle_log(path: str, stats: Optional[ParseStats] = None) -> AngleLog:
    """Read and parse an angle log file.

    Raises:
        ParseFailure: If the file is unreadable or contains no valid samples.
    """
    return build_angle_log(read_lines(path), source=path, stats=stats)


def build_angle_log(
    lines: Iterable[str],
    source: str = "<angle log>",
    stats: Optional[ParseStats] = None,
) -> AngleLog:
    """Parse angle-log lines into a sorted AngleLog.

    Raises:
        ParseFailure: If no line yields a valid sample.
    """
    if stats is None:
        stats = ParseStats()
    angles = parse_angle_lines(lines, stats)
    if not angles:
        raise ParseFailure(
            f"No valid angle samples in {source}; expected lines like "
            f"'2025-11-18 13:01:22 <azimuth> <elevation>'"
        )

    angle_log = AngleLog.from_mapping(angles)
    logger.info(
        "Angle log %s: %d samples (%s), time range %s",
        source, len(angle_log), stats.summary(), angle_log.time_span(),
    )
    return angle_log
