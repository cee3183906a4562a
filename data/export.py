"""
CSV export of processed scans.

One row per valid gate, UTF-8 with BOM so spreadsheet tools pick up the
encoding::

    Time,Azimuth,Elevation,Distance,Speed,SNR,TI
    2025-11-18 13:01:15,10.0,5.0,500.0,3.2,-4.1,0.12
"""

import csv
import io
import logging
from typing import Iterator, List, Sequence

from config import EXPORT_ENCODING, EXPORT_HEADER, EXPORT_TIME_FORMAT
from models.errors import ExportFailure
from models.scan import RadarRay

logger = logging.getLogger(__name__)


def iter_export_rows(scan: Sequence[RadarRay]) -> Iterator[List]:
    """Yield one export row per valid gate, in ray then gate order."""
    for ray in scan:
        ts = ray.timestamp.strftime(EXPORT_TIME_FORMAT)
        for g in ray.gates:
            if g.is_valid:
                yield [ts, ray.azimuth, ray.elevation, g.distance, g.speed, g.snr, g.turbulence]


def _write_csv(f, scan: Sequence[RadarRay]) -> int:
    writer = csv.writer(f, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    n = 0
    for row in iter_export_rows(scan):
        writer.writerow(row)
        n += 1
    return n


def write_scan_csv(scan: Sequence[RadarRay], path: str) -> int:
    """Write the export CSV to ``path``.

    Returns:
        Number of data rows written.

    Raises:
        ExportFailure: If the file cannot be written.
    """
    try:
        with open(path, "w", encoding=EXPORT_ENCODING, newline="") as f:
            n = _write_csv(f, scan)
    except OSError as e:
        raise ExportFailure(f"Cannot write export file {path}: {e}") from e
    logger.info("Exported %d gate rows to %s", n, path)
    return n


def scan_csv_bytes(scan: Sequence[RadarRay]) -> bytes:
    """Export CSV as bytes (for download buttons)."""
    buf = io.StringIO()
    _write_csv(buf, scan)
    return buf.getvalue().encode(EXPORT_ENCODING)
