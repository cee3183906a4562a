"""Tests for ScanSession: load, reprocess, export."""

import codecs
import logging
import os

import pytest

from config import EXPORT_HEADER
from models.errors import AlignmentFailure, ParseFailure
from processing.session import ScanSession


@pytest.fixture
def loaded_session(angle_sample_path, wind_sample_path):
    session = ScanSession(snr_threshold=-20.0, window_size=5)
    assert session.load(angle_sample_path, wind_sample_path)
    return session


def _read_export(path):
    with open(path, "rb") as f:
        data = f.read()
    return data, data.decode("utf-8-sig").splitlines()


class TestLoad:
    def test_sample_files(self, loaded_session):
        assert loaded_session.is_loaded
        assert len(loaded_session) == 3
        assert loaded_session.last_error is None
        assert loaded_session.report.gate_distances == (500.0, 1000.0, 1500.0)
        assert loaded_session.report.source_name == "wind.txt"
        assert loaded_session.report.alignment.rejected == 1

    def test_processed_and_raw_separate(self, loaded_session):
        raw = loaded_session.get_raw_data()
        processed = loaded_session.get_scan_data()
        assert all(g.is_valid for r in raw for g in r.gates)
        assert not all(g.is_valid for r in processed for g in r.gates)

    def test_load_lines(self, round_trip_logs):
        angle_lines, wind_lines = round_trip_logs
        session = ScanSession()
        assert session.load_lines(angle_lines, wind_lines, source_name="mem")
        ray = session.get_scan_data()[0]
        assert ray.azimuth == 10.0
        assert ray.elevation == 5.0
        assert [(g.distance, g.speed, g.snr) for g in ray.gates] == [(500.0, 3.0, -5.0)]

    def test_missing_file_is_parse_failure(self, angle_sample_path, tmp_path):
        session = ScanSession()
        assert not session.load(angle_sample_path, str(tmp_path / "missing.txt"))
        assert isinstance(session.last_error, ParseFailure)

    def test_headerless_wind_is_parse_failure(self):
        session = ScanSession()
        assert not session.load_lines(
            ["2025-11-18 13:01:20 10 5"], ["20251118 13:01:20 1.0 2.0"],
        )
        assert isinstance(session.last_error, ParseFailure)

    def test_no_overlap_is_alignment_failure(self):
        session = ScanSession()
        ok = session.load_lines(
            ["2025-11-18 13:01:20 10 5"],
            ["Date Time 500m", "20251118 14:00:00 1.0 2.0"],
        )
        assert not ok
        assert isinstance(session.last_error, AlignmentFailure)

    def test_failed_reload_clears_previous_scan(self, loaded_session):
        assert not loaded_session.load_lines([], [])
        assert not loaded_session.is_loaded
        assert loaded_session.get_scan_data() == ()
        assert loaded_session.get_raw_data() == ()

    def test_successful_reload_clears_error(self, angle_sample_path, wind_sample_path):
        session = ScanSession()
        session.load_lines([], [])
        assert session.last_error is not None
        assert session.load(angle_sample_path, wind_sample_path)
        assert session.last_error is None

    def test_failure_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="processing.session"):
            ScanSession().load_lines([], [])
        assert any("Load failed" in r.message for r in caplog.records)

    def test_custom_tolerance(self):
        angle = ["2025-11-18 13:01:20 10 5"]
        wind = ["Date Time 500m", "20251118 13:01:28 1.0 2.0"]
        assert not ScanSession().load_lines(angle, wind)
        assert ScanSession(tolerance_s=10.0).load_lines(angle, wind)


class TestReprocess:
    def test_filter_rebuilds_from_raw(self, loaded_session):
        loaded_session.apply_filter(100.0)
        assert not any(g.is_valid for r in loaded_session.get_scan_data() for g in r.gates)
        loaded_session.apply_filter(-100.0)
        assert all(g.is_valid for r in loaded_session.get_scan_data() for g in r.gates)

    def test_filter_idempotent(self, loaded_session):
        loaded_session.apply_filter(0.0)
        first = loaded_session.export_csv_bytes()
        loaded_session.apply_filter(0.0)
        assert loaded_session.export_csv_bytes() == first

    def test_window_clamped(self, loaded_session):
        loaded_session.compute_turbulence(1)
        assert loaded_session.window_size == 2

    def test_turbulence_follows_window(self, loaded_session):
        loaded_session.apply_filter(-100.0)
        loaded_session.compute_turbulence(2)
        narrow = [g.turbulence for g in loaded_session.get_scan_data()[0].gates]
        loaded_session.compute_turbulence(9)
        wide = [g.turbulence for g in loaded_session.get_scan_data()[0].gates]
        assert narrow != wide

    def test_empty_session_noops(self):
        session = ScanSession()
        session.apply_filter(0.0)
        session.compute_turbulence(5)
        assert len(session) == 0


class TestExport:
    def test_sample_export(self, loaded_session, tmp_path):
        path = str(tmp_path / "out.csv")
        assert loaded_session.export_to_csv(path)
        data, lines = _read_export(path)
        assert data.startswith(codecs.BOM_UTF8)
        assert lines[0] == ",".join(EXPORT_HEADER)
        assert len(lines) == 1 + 7
        assert lines[1].startswith("2025-11-18 13:01:21,11.0,5.0,500.0,3.0,-5.0,")

    def test_round_trip_through_logs(self, round_trip_logs, tmp_path):
        angle_lines, wind_lines = round_trip_logs
        session = ScanSession()
        assert session.load_lines(angle_lines, wind_lines)
        assert len(session) == 1
        assert session.get_scan_data()[0].azimuth == 10.0

        session.apply_filter(0.0)
        assert not session.get_scan_data()[0].gates[0].is_valid

        path = str(tmp_path / "rt.csv")
        assert session.export_to_csv(path)
        data, lines = _read_export(path)
        assert data.startswith(codecs.BOM_UTF8)
        assert lines == [",".join(EXPORT_HEADER)]

    def test_unwritable_path_returns_false(self, loaded_session, tmp_path):
        path = os.path.join(str(tmp_path), "no_such_dir", "out.csv")
        assert not loaded_session.export_to_csv(path)

    def test_export_bytes_match_file(self, loaded_session, tmp_path):
        path = str(tmp_path / "out.csv")
        loaded_session.export_to_csv(path)
        with open(path, "rb") as f:
            assert f.read() == loaded_session.export_csv_bytes()

    def test_empty_session_exports_header(self):
        data = ScanSession().export_csv_bytes()
        assert data == codecs.BOM_UTF8 + (",".join(EXPORT_HEADER) + "\n").encode("utf-8")
