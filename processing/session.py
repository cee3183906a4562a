"""
Scan session: the single owner of the raw and processed scan buffers.

The raw scan is an immutable snapshot taken right after alignment. The
processed scan is rebuilt from it whenever the SNR threshold or the TI
window changes, so the order and number of parameter changes never
matter.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from config import (
    ALIGNMENT_TOLERANCE_S,
    DEFAULT_SNR_THRESHOLD_DB,
    DEFAULT_WINDOW_SIZE,
    MIN_WINDOW_SIZE,
)
from data.angle_log import build_angle_log
from data.export import scan_csv_bytes, write_scan_csv
from data.text_io import ParseStats, read_lines
from data.wind_log import build_wind_log
from models.errors import ExportFailure, ScanLoadError
from models.scan import RadarRay
from processing.alignment import AlignmentStats, align_scans
from processing.signal import process_scan

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Diagnostics from the most recent load attempt."""

    angle_stats: ParseStats = field(default_factory=ParseStats)
    wind_stats: ParseStats = field(default_factory=ParseStats)
    alignment: AlignmentStats = field(default_factory=AlignmentStats)
    gate_distances: Tuple[float, ...] = ()
    source_name: str = ""


class ScanSession:
    """Loads a pair of logs and serves filtered, turbulence-annotated rays.

    Args:
        snr_threshold: Initial SNR threshold (dB).
        window_size: Initial TI window in gates.
        tolerance_s: Angle/wind alignment tolerance (seconds).
    """

    def __init__(
        self,
        snr_threshold: float = DEFAULT_SNR_THRESHOLD_DB,
        window_size: int = DEFAULT_WINDOW_SIZE,
        tolerance_s: float = ALIGNMENT_TOLERANCE_S,
    ):
        self.snr_threshold = float(snr_threshold)
        self.window_size = max(MIN_WINDOW_SIZE, int(window_size))
        self.tolerance_s = float(tolerance_s)
        self._raw: Tuple[RadarRay, ...] = ()
        self._processed: Tuple[RadarRay, ...] = ()
        self.last_error: Optional[ScanLoadError] = None
        self.report = LoadReport()

    # -- loading ----------------------------------------------------------

    def load(self, angle_path: str, wind_path: str) -> bool:
        """Load, align and process two log files.

        Returns:
            True on success. On failure the session is left empty and
            ``last_error`` holds a ParseFailure or AlignmentFailure.
        """
        self._clear()
        try:
            angle_lines = read_lines(angle_path)
            wind_lines = read_lines(wind_path)
        except ScanLoadError as e:
            return self._fail(e)
        return self.load_lines(
            angle_lines,
            wind_lines,
            source_name=os.path.basename(wind_path),
            angle_source=angle_path,
            wind_source=wind_path,
        )

    def load_lines(
        self,
        angle_lines: Iterable[str],
        wind_lines: Iterable[str],
        source_name: str = "",
        angle_source: str = "<angle log>",
        wind_source: str = "<wind log>",
    ) -> bool:
        """Same as ``load`` for logs already decoded into lines."""
        self._clear()
        report = LoadReport(source_name=source_name)
        self.report = report
        try:
            angle_log = build_angle_log(angle_lines, angle_source, report.angle_stats)
            wind_log = build_wind_log(wind_lines, wind_source, report.wind_stats)
            report.gate_distances = tuple(wind_log.gate_distances)
            rays = align_scans(angle_log, wind_log, self.tolerance_s, report.alignment)
        except ScanLoadError as e:
            return self._fail(e)

        self._raw = tuple(rays)
        self._recompute()
        logger.info("Loaded %d rays from %s", len(self._raw), source_name or wind_source)
        return True

    def _clear(self) -> None:
        self._raw = ()
        self._processed = ()
        self.last_error = None

    def _fail(self, error: ScanLoadError) -> bool:
        logger.error("Load failed: %s", error)
        self.last_error = error
        return False

    # -- processing -------------------------------------------------------

    def _recompute(self) -> None:
        self._processed = tuple(
            process_scan(self._raw, self.snr_threshold, self.window_size)
        )

    def apply_filter(self, threshold: float) -> None:
        """Set the SNR threshold and rebuild the processed scan from raw."""
        self.snr_threshold = float(threshold)
        self._recompute()

    def compute_turbulence(self, window_size: int) -> None:
        """Set the TI window (clamped to >= 2) and rebuild the processed scan from raw."""
        self.window_size = max(MIN_WINDOW_SIZE, int(window_size))
        self._recompute()

    # -- queries ----------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return bool(self._raw)

    def get_scan_data(self) -> Tuple[RadarRay, ...]:
        """Processed rays. Callers must treat them as read-only."""
        return self._processed

    def get_raw_data(self) -> Tuple[RadarRay, ...]:
        return self._raw

    def __len__(self) -> int:
        return len(self._processed)

    # -- export -----------------------------------------------------------

    def export_to_csv(self, path: str) -> bool:
        """Write valid gates of the processed scan to ``path``; False if not writable."""
        try:
            write_scan_csv(self._processed, path)
        except ExportFailure as e:
            logger.error("Export failed: %s", e)
            return False
        return True

    def export_csv_bytes(self) -> bytes:
        return scan_csv_bytes(self._processed)
