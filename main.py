"""
Wind Radar Scan Analyzer — Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os
import time

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import streamlit as st

from data.mock_data import get_demo_logs
from data.text_io import decode_text
from logging_config import setup_logging
from models.errors import AlignmentFailure
from models.scan import DisplayMode, valid_gate_count
from processing.session import ScanSession
from visualization.picker import RayPicker, format_pick
from visualization.plots import create_ppi_figure, create_profile_figure
from visualization.projection import PolarProjection, ViewState
from config import (
    DEFAULT_SNR_THRESHOLD_DB,
    SNR_THRESHOLD_RANGE_DB,
    DEFAULT_WINDOW_SIZE,
    MIN_WINDOW_SIZE,
    MAX_WINDOW_SIZE,
    DEFAULT_MIN_DISTANCE_M,
    DEFAULT_MAX_DISTANCE_M,
    DISTANCE_SLIDER_MAX_M,
    PAN_STEP_PX,
    PLAY_STEP_RAYS,
)

# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Wind Radar Scan Analyzer",
    page_icon="📡",
    layout="wide",
)

if "logging_ready" not in st.session_state:
    setup_logging()
    st.session_state.logging_ready = True

if "scan_session" not in st.session_state:
    st.session_state.scan_session = ScanSession()
if "view_state" not in st.session_state:
    st.session_state.view_state = ViewState()
if "chart_generation" not in st.session_state:
    st.session_state.chart_generation = 0

session: ScanSession = st.session_state.scan_session
projection = PolarProjection(st.session_state.view_state)
picker = RayPicker()

st.title("Wind Radar Scan Analyzer")
st.markdown(
    "Aligns the antenna angle log with the range-resolved wind log, filters "
    "gates by SNR, computes turbulence intensity and shows the scan as a PPI."
)

# ── Sidebar: Data ────────────────────────────────────────────────────────────

st.sidebar.header("Data")

use_demo = st.sidebar.checkbox(
    "Use synthetic demo logs",
    value=False,
    help="One full sweep generated in the radar's own log formats.",
)
angle_file = None
wind_file = None
if not use_demo:
    angle_file = st.sidebar.file_uploader("Angle log", type=["csv", "txt", "dat"])
    wind_file = st.sidebar.file_uploader("Wind log", type=["csv", "txt", "dat"])

load_clicked = st.sidebar.button(
    "Load",
    disabled=not use_demo and (angle_file is None or wind_file is None),
)

if load_clicked:
    with st.spinner("Parsing and aligning logs..."):
        if use_demo:
            angle_lines, wind_lines = get_demo_logs()
            ok = session.load_lines(angle_lines, wind_lines, source_name="demo")
        else:
            ok = session.load_lines(
                decode_text(angle_file.getvalue()).splitlines(),
                decode_text(wind_file.getvalue()).splitlines(),
                source_name=wind_file.name,
                angle_source=angle_file.name,
                wind_source=wind_file.name,
            )
    st.session_state.pop("pick_point", None)
    # A fresh chart key drops the selection made on the previous dataset
    st.session_state.chart_generation += 1
    if ok:
        projection.reset_view()
    elif isinstance(session.last_error, AlignmentFailure):
        st.error(f"Timestamps could not be aligned: {session.last_error}")
    else:
        st.error(f"Parsing failed: {session.last_error}")

# ── Sidebar: Processing ──────────────────────────────────────────────────────

st.sidebar.header("Processing")

snr_threshold = st.sidebar.number_input(
    "SNR Threshold (dB)",
    min_value=SNR_THRESHOLD_RANGE_DB[0],
    max_value=SNR_THRESHOLD_RANGE_DB[1],
    value=DEFAULT_SNR_THRESHOLD_DB,
    step=1.0,
    help="Gates with SNR below this value are marked invalid and drawn grey.",
)
window_size = st.sidebar.slider(
    "TI Window (gates)",
    min_value=MIN_WINDOW_SIZE,
    max_value=MAX_WINDOW_SIZE,
    value=DEFAULT_WINDOW_SIZE,
    help="Sliding window along range used for turbulence intensity.",
)

if session.is_loaded and snr_threshold != session.snr_threshold:
    session.apply_filter(snr_threshold)
if session.is_loaded and window_size != session.window_size:
    session.compute_turbulence(window_size)

mode_label = st.sidebar.radio("Display Mode", ["Radial Speed", "Turbulence Intensity"])
mode = DisplayMode.TURBULENCE if mode_label.startswith("Turbulence") else DisplayMode.SPEED

# ── Sidebar: View ────────────────────────────────────────────────────────────

st.sidebar.header("View")

min_dist, max_dist = st.sidebar.slider(
    "Visible Range (m)",
    min_value=0,
    max_value=DISTANCE_SLIDER_MAX_M,
    value=(int(DEFAULT_MIN_DISTANCE_M), int(DEFAULT_MAX_DISTANCE_M)),
    step=100,
)
if min_dist < max_dist:
    projection.set_visible_range(min_dist, max_dist)
else:
    st.sidebar.warning("Minimum distance must be below maximum distance.")

# Zoom anchors on the selected gate when there is one, else on the view center
anchor = st.session_state.get("pick_point", projection.center)

z1, z2, z3 = st.sidebar.columns(3)
if z1.button("Zoom +"):
    projection.zoom(anchor, +1)
if z2.button("Zoom −"):
    projection.zoom(anchor, -1)
if z3.button("Reset"):
    projection.reset_view()

p1, p2, p3, p4 = st.sidebar.columns(4)
if p1.button("◀"):
    projection.pan((-PAN_STEP_PX, 0.0))
if p2.button("▶"):
    projection.pan((PAN_STEP_PX, 0.0))
if p3.button("▲"):
    projection.pan((0.0, -PAN_STEP_PX))
if p4.button("▼"):
    projection.pan((0.0, PAN_STEP_PX))

st.sidebar.caption(f"Zoom: {projection.state.scale:.2f}x")

# ── Scan ─────────────────────────────────────────────────────────────────────

scan = session.get_scan_data()

# Resolve the pointer selection from the previous run before drawing
pick = None
chart_key = f"ppi_chart_{st.session_state.chart_generation}"
ppi_event = st.session_state.get(chart_key)
if ppi_event and scan:
    points = ppi_event.get("selection", {}).get("points", [])
    if points:
        st.session_state.pick_point = (points[0]["x"], points[0]["y"])
if "pick_point" in st.session_state and scan:
    pick = picker.pick_at(scan, projection, st.session_state.pick_point)

if scan:
    report = session.report
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Rays", f"{len(scan)}")
    m2.metric("Range Gates", f"{len(report.gate_distances)}")
    m3.metric("Valid Gates", f"{valid_gate_count(scan)}")
    m4.metric("Max Time Gap", f"{report.alignment.max_gap_s:.0f} s")

    play_limit = len(scan)
    if len(scan) > 1:
        play_limit = st.slider(
            "Rays shown",
            min_value=1,
            max_value=len(scan),
            value=len(scan),
            help="Draw only the first N rays, in acquisition order.",
        )
    replay = st.button("Replay sweep")
else:
    play_limit = None
    replay = False

ppi_slot = st.empty()

if replay:
    for limit in range(PLAY_STEP_RAYS, len(scan) + 1, PLAY_STEP_RAYS):
        ppi_slot.plotly_chart(
            create_ppi_figure(scan, projection, mode, play_limit=limit),
            use_container_width=True,
        )
        time.sleep(0.025)

fig_ppi = create_ppi_figure(scan, projection, mode, play_limit=play_limit, pick=pick)
ppi_slot.plotly_chart(
    fig_ppi,
    use_container_width=True,
    key=chart_key,
    on_select="rerun",
    selection_mode="points",
)

if pick is not None:
    st.info(format_pick(pick, separator="  |  "))

st.caption(
    f"File: {session.report.source_name or '—'}  |  "
    f"Mode: {mode.label}  |  Rays: {len(scan)}"
)

# ── Ray Profiles ─────────────────────────────────────────────────────────────

if scan:
    ray_index = pick.ray_index if pick is not None else len(scan) // 2
    st.plotly_chart(
        create_profile_figure(scan[ray_index], mode, (min_dist, max_dist)),
        use_container_width=True,
    )

    st.download_button(
        "Export CSV",
        data=session.export_csv_bytes(),
        file_name="radar.csv",
        mime="text/csv",
        help="One row per valid gate: Time, Azimuth, Elevation, Distance, Speed, SNR, TI.",
    )

# ── Diagnostics ──────────────────────────────────────────────────────────────

with st.expander("Load Diagnostics"):
    report = session.report
    st.markdown(
        f"- **Angle log**: {report.angle_stats.summary()}\n"
        f"- **Wind log**: {report.wind_stats.summary()}\n"
        f"- **Alignment**: {report.alignment.summary()} "
        f"(tolerance {session.tolerance_s:g} s)\n"
        f"- **Range gates (m)**: "
        f"{', '.join(f'{d:.0f}' for d in report.gate_distances) or '—'}"
    )
    if session.last_error is not None:
        st.warning(str(session.last_error))

with st.expander("About the Processing"):
    st.markdown(
        """
        **Time Alignment** — Each wind-log row is matched to the angle sample
        nearest in time. Rows with no angle sample within the tolerance are
        dropped.

        **SNR Filter** — Gates whose SNR is below the threshold are marked
        invalid: they are excluded from turbulence statistics and from the
        CSV export, and drawn light grey on the PPI.

        **Turbulence Intensity** — For each valid gate, the standard deviation
        of the valid radial speeds in a sliding window along range divided by
        the absolute mean speed. Zero when fewer than two gates in the window
        are valid or the mean speed is near zero.

        **Column Inference** — The first speed/SNR pair of a wind row is
        located from the end of the row (two columns per header gate), never
        before the date and time columns. Rows whose column count disagrees
        with the header can be misread.
        """
    )
