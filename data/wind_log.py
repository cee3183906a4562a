"""
Wind-speed log parser.

The first line of the wind log is a header whose tokens name the range
gates (``500m``, ``Speed500m``, ``SNR500m`` ...). Each following row is::

    20251118 13:01:15 <speed_1> <snr_1> <speed_2> <snr_2> ...

with one (speed, SNR) pair per discovered gate.

Column inference: the first gate pair is assumed to start at column
``len(fields) - 2 * gate_count``, but never before column 2 (date + time).
When the header and the data rows disagree on the number of columns this
heuristic silently shifts the pairs; it matches how the acquisition
software's own viewer reads these files, so it is kept as-is.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from config import (
    GATE_HEADER_PATTERN,
    MIN_WIND_FIELDS,
    WIND_HEADER_TOKENS,
    WIND_LEADING_COLUMNS,
    WIND_TIME_FORMAT,
)
from data.text_io import ParseStats, parse_timestamp, read_lines, split_fields
from models.errors import ParseFailure
from models.scan import RangeGate

logger = logging.getLogger(__name__)

_GATE_TOKEN_RE = re.compile(GATE_HEADER_PATTERN)


@dataclass
class WindRow:
    """One timestamped wind-log row, kept as split text fields."""

    timestamp: datetime
    fields: List[str]


@dataclass
class WindLog:
    """Gate distances from the header plus the parseable data rows."""

    gate_distances: List[float]
    rows: List[WindRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def discover_range_gates(header: str) -> List[float]:
    """Extract range-gate distances from the wind-log header.

    Every token containing ``<digits>m`` contributes the number made of
    all its digits. Duplicates (speed and SNR columns of the same gate)
    are dropped, keeping first-seen order.

    Example:
        >>> discover_range_gates("Time Date 500m 1000m 1500m 500m")
        [500.0, 1000.0, 1500.0]
    """
    distances: List[float] = []
    for token in split_fields(header):
        if not _GATE_TOKEN_RE.search(token):
            continue
        digits = "".join(c for c in token if c.isdigit())
        if not digits:
            continue
        d = float(digits)
        if d not in distances:
            distances.append(d)
    return distances


def first_gate_column(n_fields: int, n_gates: int) -> int:
    """Column of the first speed value, floored at the date/time columns."""
    return max(WIND_LEADING_COLUMNS, n_fields - 2 * n_gates)


def _to_float(text: str) -> float:
    """Cell value, or 0.0 for anything non-numeric (including nan and inf)."""
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def decode_gates(fields: List[str], gate_distances: List[float]) -> List[RangeGate]:
    """Decode (speed, SNR) pairs from a split wind row.

    Decoding stops early when the row runs out of columns, so short rows
    yield fewer gates than the header announces. Non-numeric cells read
    as 0.0.
    """
    col = first_gate_column(len(fields), len(gate_distances))
    gates: List[RangeGate] = []
    for d in gate_distances:
        if col + 1 >= len(fields):
            break
        gates.append(
            RangeGate(
                distance=d,
                speed=_to_float(fields[col]),
                snr=_to_float(fields[col + 1]),
            )
        )
        col += 2
    return gates


def parse_wind_lines(
    lines: Iterable[str],
    stats: Optional[ParseStats] = None,
) -> WindLog:
    """Parse wind-log lines: header first, then timestamped data rows.

    Rows with fewer than 3 fields or an unparseable timestamp are
    skipped; a bad timestamp on the first data row is logged as a
    warning since it usually means the wrong file or format.
    """
    if stats is None:
        stats = ParseStats()

    it = iter(lines)
    header = ""
    for line in it:
        if line.strip():
            header = line
            break
    gate_distances = discover_range_gates(header)
    logger.info("Wind log header: %d range gates discovered", len(gate_distances))

    wind_log = WindLog(gate_distances=gate_distances)
    data_rows = 0

    for line in it:
        line = line.strip()
        if not line:
            continue
        stats.lines += 1
        if any(token in line for token in WIND_HEADER_TOKENS):
            stats.headers += 1
            continue
        data_rows += 1

        parts = split_fields(line)
        if len(parts) < MIN_WIND_FIELDS:
            stats.skipped += 1
            continue

        ts = parse_timestamp(parts[0], parts[1], WIND_TIME_FORMAT)
        if ts is None:
            if data_rows == 1:
                logger.warning(
                    "First wind row timestamp failed to parse: %r (expected %s)",
                    f"{parts[0]} {parts[1]}", WIND_TIME_FORMAT,
                )
            else:
                logger.debug("Wind row skipped, bad timestamp: %r", line)
            stats.skipped += 1
            continue

        wind_log.rows.append(WindRow(timestamp=ts, fields=parts))
        stats.records += 1

    return wind_log


def load_wind_log(path: str, stats: Optional[ParseStats] = None) -> WindLog:
    """Read and parse a wind log file.

    Raises:
        ParseFailure: If the file is unreadable, names no range gates or has no data rows.
    """
    return build_wind_log(read_lines(path), source=path, stats=stats)


def build_wind_log(
    lines: Iterable[str],
    source: str = "<wind log>",
    stats: Optional[ParseStats] = None,
) -> WindLog:
    """Parse wind-log lines, requiring at least one gate and one data row.

    Raises:
        ParseFailure: If no range gates or no data rows were found.
    """
    if stats is None:
        stats = ParseStats()
    wind_log = parse_wind_lines(lines, stats)
    if not wind_log.gate_distances:
        raise ParseFailure(
            f"No range gates found in the header of {source}; "
            f"expected tokens like '500m'"
        )
    if not wind_log.rows:
        raise ParseFailure(f"No valid data rows in {source}")

    logger.info(
        "Wind log %s: %d rows (%s), %s -> %s",
        source, len(wind_log), stats.summary(),
        wind_log.rows[0].timestamp, wind_log.rows[-1].timestamp,
    )
    return wind_log
