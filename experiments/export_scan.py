#!/usr/bin/env python3
"""
Headless scan export.

Loads an angle log and a wind log, applies the SNR filter and the
turbulence window, writes the valid gates to CSV and prints a summary.
With ``--sweep-windows`` it also reports how the mean turbulence
intensity responds to the window size.

Usage:
    python experiments/export_scan.py angle.csv wind.csv -o radar.csv
    python experiments/export_scan.py angle.csv wind.csv --snr -15 --window 7
    python experiments/export_scan.py --demo --sweep-windows 2 5 10 20
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import numpy as np

from config import ALIGNMENT_TOLERANCE_S, DEFAULT_SNR_THRESHOLD_DB, DEFAULT_WINDOW_SIZE
from data.mock_data import get_demo_logs
from logging_config import setup_logging
from models.scan import gate_count, valid_gate_count
from processing.session import ScanSession


def mean_turbulence(scan) -> float:
    values = [g.turbulence for r in scan for g in r.gates if g.is_valid and g.turbulence > 0]
    return float(np.mean(values)) if values else 0.0


def main():
    parser = argparse.ArgumentParser(description="Align, process and export a radar scan")
    parser.add_argument("angle_log", nargs="?", help="Angle log path")
    parser.add_argument("wind_log", nargs="?", help="Wind log path")
    parser.add_argument("--demo", action="store_true", help="Use synthetic demo logs")
    parser.add_argument("-o", "--output", default="radar.csv", help="CSV output path")
    parser.add_argument("--snr", type=float, default=DEFAULT_SNR_THRESHOLD_DB,
                        help="SNR threshold (dB)")
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW_SIZE,
                        help="Turbulence window (gates)")
    parser.add_argument("--tolerance", type=float, default=ALIGNMENT_TOLERANCE_S,
                        help="Alignment tolerance (s)")
    parser.add_argument("--sweep-windows", type=int, nargs="+", default=None,
                        help="Report mean TI for each window size (e.g., --sweep-windows 2 5 10)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    session = ScanSession(snr_threshold=args.snr, window_size=args.window,
                          tolerance_s=args.tolerance)
    if args.demo:
        angle_lines, wind_lines = get_demo_logs()
        ok = session.load_lines(angle_lines, wind_lines, source_name="demo")
    elif args.angle_log and args.wind_log:
        ok = session.load(args.angle_log, args.wind_log)
    else:
        parser.error("give angle_log and wind_log, or --demo")
    if not ok:
        print(f"Load failed ({type(session.last_error).__name__}): {session.last_error}")
        sys.exit(1)

    scan = session.get_scan_data()
    print(f"Rays:        {len(scan)}")
    print(f"Gates:       {gate_count(scan)} ({valid_gate_count(scan)} valid)")
    print(f"Alignment:   {session.report.alignment.summary()}")
    print(f"Mean TI:     {mean_turbulence(scan):.4f} (window {session.window_size})")

    if args.sweep_windows:
        print(f"\n{'Window':>8}  {'Mean TI':>8}")
        for w in args.sweep_windows:
            session.compute_turbulence(w)
            print(f"{session.window_size:>8}  {mean_turbulence(session.get_scan_data()):>8.4f}")
        session.compute_turbulence(args.window)

    if not session.export_to_csv(args.output):
        print(f"Could not write {args.output}")
        sys.exit(1)
    print(f"\nWrote {valid_gate_count(session.get_scan_data())} rows to {args.output}")


if __name__ == "__main__":
    main()
