"""Tests for the angle log parser."""

import pytest

from data.angle_log import (
    AngleLog,
    build_angle_log,
    load_angle_log,
    parse_angle_lines,
)
from data.text_io import ParseStats, epoch_seconds, from_epoch_seconds
from models.errors import ParseFailure


class TestParseAngleLines:
    def test_basic_line(self):
        angles = parse_angle_lines(["2025-11-18 13:01:22 0 5"])
        assert len(angles) == 1
        (key, (az, el)), = angles.items()
        assert from_epoch_seconds(key).isoformat() == "2025-11-18T13:01:22"
        assert az == 0.0
        assert el == 5.0

    def test_comma_and_tab_separators(self):
        angles = parse_angle_lines(["2025-11-18,13:01:22,\t12.5,,3.25"])
        assert list(angles.values()) == [(12.5, 3.25)]

    def test_extra_columns_ignored(self):
        angles = parse_angle_lines(["2025-11-18 13:01:22 90 5 junk 42"])
        assert list(angles.values()) == [(90.0, 5.0)]

    def test_header_and_blank_lines_skipped(self):
        stats = ParseStats()
        angles = parse_angle_lines(
            ["时间 方位 俯仰", "", "   ", "Time Azimuth Elevation", "2025-11-18 13:01:22 1 2"],
            stats,
        )
        assert len(angles) == 1
        assert stats.headers == 2
        assert stats.skipped == 0

    def test_bad_timestamp_dropped(self):
        stats = ParseStats()
        angles = parse_angle_lines(["2025/11/18 13:01:22 1 2", "2025-11-18 25:00:00 1 2"], stats)
        assert angles == {}
        assert stats.skipped == 2

    def test_bad_angle_dropped(self):
        stats = ParseStats()
        angles = parse_angle_lines(
            ["2025-11-18 13:01:22 abc 2", "2025-11-18 13:01:23 1 n/a"], stats
        )
        assert angles == {}
        assert stats.skipped == 2

    def test_non_finite_angle_dropped(self):
        stats = ParseStats()
        angles = parse_angle_lines([
            "2025-11-18 13:01:22 nan 2",
            "2025-11-18 13:01:23 1 inf",
            "2025-11-18 13:01:24 -Infinity 2",
            "2025-11-18 13:01:25 4 2",
        ], stats)
        assert list(angles.values()) == [(4.0, 2.0)]
        assert stats.skipped == 3

    def test_too_few_fields_dropped(self):
        assert parse_angle_lines(["2025-11-18 13:01:22 1"]) == {}

    def test_duplicate_timestamp_last_wins(self):
        angles = parse_angle_lines([
            "2025-11-18 13:01:22 1 2",
            "2025-11-18 13:01:22 7 8",
        ])
        assert list(angles.values()) == [(7.0, 8.0)]


class TestAngleLog:
    def test_sorted_by_time(self):
        log = AngleLog.from_mapping({30: (3.0, 0.0), 10: (1.0, 0.0), 20: (2.0, 0.0)})
        assert log.times.tolist() == [10, 20, 30]
        assert log.azimuth.tolist() == [1.0, 2.0, 3.0]

    def test_empty_raises_parse_failure(self):
        with pytest.raises(ParseFailure):
            build_angle_log(["header only 时间", "garbage"])

    def test_load_sample_file(self, angle_sample_path):
        stats = ParseStats()
        log = load_angle_log(angle_sample_path, stats)
        assert len(log) == 6
        assert stats.records == 6
        assert stats.skipped == 2
        assert stats.headers == 1

    def test_missing_file_raises_parse_failure(self, tmp_path):
        with pytest.raises(ParseFailure):
            load_angle_log(str(tmp_path / "missing.csv"))

    def test_legacy_encoding(self, tmp_path):
        path = tmp_path / "angle_gbk.csv"
        path.write_bytes("时间 方位角 俯仰角\n2025-11-18 13:01:22 45 5\n".encode("gb18030"))
        log = load_angle_log(str(path))
        assert len(log) == 1
        assert log.azimuth[0] == 45.0

    def test_epoch_seconds_ignores_local_timezone(self):
        assert epoch_seconds(from_epoch_seconds(100)) == 100
