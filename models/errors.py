"""
Error taxonomy for loading, aligning and exporting radar scans.

Malformed individual rows are not errors: parsers skip and count them.
"""


class ScanLoadError(ValueError):
    """Base class for failures that leave the session without scan data."""


class ParseFailure(ScanLoadError):
    """A log file could not be read or yielded no usable records."""


class AlignmentFailure(ScanLoadError):
    """Both logs parsed, but no wind row has an angle sample within tolerance."""


class ExportFailure(OSError):
    """The export target could not be written."""
