"""
Nearest-neighbour time alignment of the wind log against the angle log.

For each wind row the closest angle sample in time is found among the
two neighbours of the row's insertion point in the sorted angle times;
the row becomes a ray only if that gap is within tolerance.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from config import ALIGNMENT_TOLERANCE_S
from data.angle_log import AngleLog
from data.text_io import epoch_seconds
from data.wind_log import WindLog, decode_gates
from models.errors import AlignmentFailure
from models.scan import RadarRay, ScanData

logger = logging.getLogger(__name__)


@dataclass
class AlignmentStats:
    """Bookkeeping for one alignment pass."""

    rows: int = 0
    matched: int = 0
    rejected: int = 0
    max_gap_s: float = 0.0   # Largest accepted time difference

    def summary(self) -> str:
        return (
            f"{self.matched}/{self.rows} wind rows matched, "
            f"{self.rejected} outside tolerance, max gap {self.max_gap_s:.0f}s"
        )


def nearest_angle_index(times: np.ndarray, t: int) -> Tuple[Optional[int], float]:
    """Index of the angle sample closest to ``t`` and its absolute gap.

    Only the successor (first time >= t) and the predecessor are
    examined. On a tie the successor is kept.

    Returns:
        (index, gap_seconds); (None, inf) if ``times`` is empty.
    """
    pos = int(np.searchsorted(times, t, side="left"))
    best: Optional[int] = None
    best_gap = float("inf")

    if pos < len(times):
        gap = abs(float(times[pos] - t))
        if gap < best_gap:
            best, best_gap = pos, gap
    if pos > 0:
        gap = abs(float(times[pos - 1] - t))
        if gap < best_gap:
            best, best_gap = pos - 1, gap

    return best, best_gap


def align_scans(
    angle_log: AngleLog,
    wind_log: WindLog,
    tolerance_s: float = ALIGNMENT_TOLERANCE_S,
    stats: Optional[AlignmentStats] = None,
) -> ScanData:
    """Join wind rows with their nearest angle samples.

    Each accepted row yields a RadarRay carrying the wind row's own
    timestamp, the matched azimuth/elevation and the decoded gates.
    Ray order follows wind-log row order.

    Args:
        angle_log: Sorted angle samples.
        wind_log: Parsed wind log.
        tolerance_s: Maximum accepted |time difference| in seconds.
        stats: Optional AlignmentStats updated in place.

    Returns:
        List of RadarRay (never empty).

    Raises:
        AlignmentFailure: If no wind row matches within tolerance.
    """
    if stats is None:
        stats = AlignmentStats()
    rays: ScanData = []

    for row in wind_log.rows:
        stats.rows += 1
        idx, gap = nearest_angle_index(angle_log.times, epoch_seconds(row.timestamp))
        if idx is None or gap > tolerance_s:
            stats.rejected += 1
            continue

        rays.append(
            RadarRay(
                timestamp=row.timestamp,
                azimuth=float(angle_log.azimuth[idx]),
                elevation=float(angle_log.elevation[idx]),
                gates=decode_gates(row.fields, wind_log.gate_distances),
            )
        )
        stats.matched += 1
        stats.max_gap_s = max(stats.max_gap_s, gap)

    logger.info("Alignment: %s", stats.summary())

    if not rays:
        raise AlignmentFailure(
            f"None of the {stats.rows} wind rows has an angle sample within "
            f"{tolerance_s:g}s; the two logs probably do not overlap in time"
        )
    return rays
