"""
Text decoding for radar log files.

Logs come either as UTF-8 (with or without BOM) or in the legacy
GB18030 code page written by the acquisition PC.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from config import FIELD_SEPARATOR_PATTERN, LEGACY_ENCODING
from models.errors import ParseFailure

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(FIELD_SEPARATOR_PATTERN)
_EPOCH = datetime(1970, 1, 1)


@dataclass
class ParseStats:
    """Row bookkeeping for one parsed log."""

    lines: int = 0        # non-blank lines examined
    headers: int = 0      # lines skipped as header/comment
    records: int = 0      # lines decoded into a record
    skipped: int = 0      # malformed lines dropped

    def summary(self) -> str:
        return (
            f"{self.records} records, {self.skipped} skipped, "
            f"{self.headers} header lines"
        )


def decode_text(data: bytes) -> str:
    """Decode raw log bytes, preferring UTF-8 and falling back to the legacy encoding."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Input is not valid UTF-8, decoding as %s", LEGACY_ENCODING)
        return data.decode(LEGACY_ENCODING, errors="replace")


def read_lines(path: str) -> List[str]:
    """Read a log file into a list of lines.

    Raises:
        ParseFailure: If the file cannot be opened or read.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ParseFailure(f"Cannot read log file {path}: {e}") from e
    return decode_text(data).splitlines()


def split_fields(line: str) -> List[str]:
    """Split a log line on runs of spaces, commas and tabs."""
    return [p for p in _SEPARATOR_RE.split(line.strip()) if p]


def parse_timestamp(date_part: str, time_part: str, fmt: str) -> Optional[datetime]:
    """Join a date and a time field and parse them, returning None on mismatch."""
    try:
        return datetime.strptime(f"{date_part} {time_part}", fmt)
    except ValueError:
        return None


def epoch_seconds(ts: datetime) -> int:
    """Whole seconds since 1970-01-01 for a naive timestamp (no timezone shift)."""
    return int((ts - _EPOCH).total_seconds())


def from_epoch_seconds(seconds: int) -> datetime:
    return _EPOCH + timedelta(seconds=int(seconds))
