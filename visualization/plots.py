"""
Visualization module for the Wind Radar Scan Analyzer.

Provides Plotly figures for the Streamlit interface: the PPI heat map,
drawn in screen space through PolarProjection, and per-ray profiles.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
from plotly.colors import sample_colorscale
from plotly.subplots import make_subplots

from config import (
    BEAM_WIDTH_DEG,
    COLOR_LEVELS,
    INVALID_GATE_COLOR,
    RANGE_RING_MAX_M,
    RANGE_RING_SPACING_M,
    SPEED_COLORSCALE,
    SPEED_COLOR_RANGE,
    TURBULENCE_COLORSCALE,
    TURBULENCE_COLOR_RANGE,
)
from models.scan import DisplayMode, RadarRay
from processing.signal import ray_profile
from visualization.picker import PickResult
from visualization.projection import PolarProjection


def color_settings(mode: DisplayMode) -> Tuple[list, Tuple[float, float]]:
    """Colorscale and (vmin, vmax) for a display mode."""
    if mode is DisplayMode.TURBULENCE:
        return TURBULENCE_COLORSCALE, TURBULENCE_COLOR_RANGE
    return SPEED_COLORSCALE, SPEED_COLOR_RANGE


def color_levels(values: np.ndarray, mode: DisplayMode, levels: int = COLOR_LEVELS) -> np.ndarray:
    """Quantize values to integer color levels 0..levels-1, clamping out-of-range values.

    Non-finite values fall on the lowest level.
    """
    _, (vmin, vmax) = color_settings(mode)
    norm = np.clip((np.asarray(values, dtype=float) - vmin) / (vmax - vmin), 0.0, 1.0)
    norm = np.nan_to_num(norm, nan=0.0)
    return np.rint(norm * (levels - 1)).astype(int)


def level_colors(mode: DisplayMode, levels: int = COLOR_LEVELS) -> List[str]:
    colorscale, _ = color_settings(mode)
    return sample_colorscale(colorscale, list(np.linspace(0.0, 1.0, levels)))


def _gate_value(mode: DisplayMode, speed: float, turbulence: float) -> float:
    return turbulence if mode is DisplayMode.TURBULENCE else speed


def _append_polygon(xs: list, ys: list, px: np.ndarray, py: np.ndarray) -> None:
    """Append a closed polygon followed by a gap so 'toself' fills each one separately."""
    xs.extend(px.tolist() + [px[0], None])
    ys.extend(py.tolist() + [py[0], None])


def build_gate_polygons(
    scan: Sequence[RadarRay],
    projection: PolarProjection,
    mode: DisplayMode,
    play_limit: Optional[int] = None,
) -> Dict[str, Tuple[list, list]]:
    """Screen-space quads for every drawable gate, grouped by fill color.

    Each gate spans from its own distance to the next gate's distance
    and from the ray azimuth to azimuth + BEAM_WIDTH_DEG; the last gate
    of a ray has no outer edge and is not drawn. Gates outside the
    visible range are skipped; invalid gates get INVALID_GATE_COLOR.

    Returns:
        Dict mapping color string -> (xs, ys) with None separators.
    """
    palette = level_colors(mode)
    groups: Dict[str, Tuple[list, list]] = {}
    limit = len(scan) if play_limit is None else max(0, min(play_limit, len(scan)))

    for ray in scan[:limit]:
        gates = ray.gates
        if len(gates) < 2:
            continue
        inner = np.array([g.distance for g in gates[:-1]])
        outer = np.array([g.distance for g in gates[1:]])
        values = np.array([_gate_value(mode, g.speed, g.turbulence) for g in gates[:-1]])
        levels = color_levels(values, mode)
        visible = projection.is_visible(inner)

        az1, az2 = ray.azimuth, ray.azimuth + BEAM_WIDTH_DEG
        x1, y1 = projection.project(az1, inner)
        x2, y2 = projection.project(az1, outer)
        x3, y3 = projection.project(az2, outer)
        x4, y4 = projection.project(az2, inner)

        for j in np.flatnonzero(visible):
            color = palette[levels[j]] if gates[j].is_valid else INVALID_GATE_COLOR
            xs, ys = groups.setdefault(color, ([], []))
            _append_polygon(
                xs, ys,
                np.array([x1[j], x2[j], x3[j], x4[j]]),
                np.array([y1[j], y2[j], y3[j], y4[j]]),
            )

    return groups


def _add_range_rings(fig: go.Figure, projection: PolarProjection) -> None:
    """Dashed range rings every RANGE_RING_SPACING_M inside the visible range."""
    ppm = projection.pixels_per_meter()
    ox, oy = projection.origin
    theta = np.linspace(0.0, 2 * np.pi, 181)
    state = projection.state

    for r in range(RANGE_RING_SPACING_M, RANGE_RING_MAX_M + 1, RANGE_RING_SPACING_M):
        if not state.min_distance <= r <= state.max_distance:
            continue
        radius = r * ppm
        fig.add_trace(
            go.Scatter(
                x=ox + radius * np.cos(theta),
                y=oy + radius * np.sin(theta),
                mode="lines",
                line=dict(color="lightgray", width=1, dash="dash"),
                showlegend=False,
                hoverinfo="skip",
            )
        )
        fig.add_annotation(
            x=ox + radius + 5, y=oy,
            text=f"{r}m",
            showarrow=False,
            xanchor="left",
            font=dict(size=10, color="lightgray"),
        )


def _add_hover_points(
    fig: go.Figure,
    scan: Sequence[RadarRay],
    projection: PolarProjection,
    limit: int,
) -> None:
    """Transparent markers at gate centers carrying hover text and click targets."""
    xs, ys, custom = [], [], []
    for i, ray in enumerate(scan[:limit]):
        if not ray.gates:
            continue
        dist = np.array(ray.distances)
        mask = projection.is_visible(dist)
        px, py = projection.project(ray.azimuth + BEAM_WIDTH_DEG / 2, dist)
        for j in np.flatnonzero(mask):
            g = ray.gates[j]
            xs.append(float(px[j]))
            ys.append(float(py[j]))
            custom.append([i, int(j), ray.azimuth, g.distance, g.speed, g.snr, g.turbulence])

    fig.add_trace(
        go.Scatter(
            x=xs,
            y=ys,
            mode="markers",
            marker=dict(size=6, color="rgba(0,0,0,0)"),
            customdata=custom,
            name="Gates",
            showlegend=False,
            hovertemplate=(
                "Azimuth: %{customdata[2]:.1f}°<br>"
                "Distance: %{customdata[3]:.0f} m<br>"
                "Speed: %{customdata[4]:.2f} m/s<br>"
                "SNR: %{customdata[5]:.1f} dB<br>"
                "TI: %{customdata[6]:.3f}<extra></extra>"
            ),
        )
    )


def _add_colorbar(fig: go.Figure, mode: DisplayMode) -> None:
    """Legend: an invisible marker trace whose only job is to show the colorbar."""
    colorscale, (vmin, vmax) = color_settings(mode)
    fig.add_trace(
        go.Scatter(
            x=[None],
            y=[None],
            mode="markers",
            marker=dict(
                colorscale=colorscale,
                cmin=vmin,
                cmax=vmax,
                color=[vmin],
                showscale=True,
                colorbar=dict(title=mode.label),
            ),
            showlegend=False,
            hoverinfo="skip",
        )
    )


def _add_pick_highlight(
    fig: go.Figure,
    projection: PolarProjection,
    pick: PickResult,
) -> None:
    x, y = projection.project(pick.ray.azimuth + BEAM_WIDTH_DEG / 2, pick.gate.distance)
    fig.add_trace(
        go.Scatter(
            x=[x],
            y=[y],
            mode="markers",
            marker=dict(size=14, color="rgba(0,0,0,0)", symbol="circle",
                        line=dict(width=2, color="white")),
            name="Selected Gate",
            showlegend=False,
            hoverinfo="skip",
        )
    )


def create_ppi_figure(
    scan: Sequence[RadarRay],
    projection: PolarProjection,
    mode: DisplayMode = DisplayMode.SPEED,
    play_limit: Optional[int] = None,
    pick: Optional[PickResult] = None,
) -> go.Figure:
    """
    Create the PPI heat map in screen coordinates.

    The axes span the projection's viewport in pixels with y pointing
    down, so figure coordinates of a click can be passed straight to
    ``PolarProjection.unproject``.
    """
    state = projection.state
    fig = go.Figure()

    if not scan:
        fig.add_annotation(
            text="Load an angle log and a wind log to display the scan",
            showarrow=False,
        )
    else:
        limit = len(scan) if play_limit is None else max(0, min(play_limit, len(scan)))
        for color, (xs, ys) in build_gate_polygons(scan, projection, mode, limit).items():
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="lines",
                    fill="toself",
                    fillcolor=color,
                    line=dict(width=0, color=color),
                    showlegend=False,
                    hoverinfo="skip",
                )
            )
        _add_range_rings(fig, projection)
        _add_hover_points(fig, scan, projection, limit)
        _add_colorbar(fig, mode)
        if pick is not None:
            _add_pick_highlight(fig, projection, pick)

    fig.update_layout(
        height=int(state.height),
        template="plotly_dark",
        dragmode="pan",
        margin=dict(l=20, r=20, t=40, b=20),
        title=f"PPI: {mode.label}",
    )
    fig.update_xaxes(range=[0, state.width], visible=False)
    fig.update_yaxes(range=[state.height, 0], visible=False, scaleanchor="x", scaleratio=1)

    return fig


# ── Ray profiles ────────────────────────────────────────────────────────────

def create_profile_figure(
    ray: Optional[RadarRay],
    mode: DisplayMode = DisplayMode.SPEED,
    distance_range: Optional[Tuple[float, float]] = None,
) -> go.Figure:
    """Speed-or-TI and SNR versus distance for one ray (valid gates only)."""
    if ray is None:
        fig = go.Figure()
        fig.add_annotation(text="No ray selected", showarrow=False)
        return fig

    prof = ray_profile(ray, valid_only=True)
    values = prof["turbulence"] if mode is DisplayMode.TURBULENCE else prof["speed"]

    fig = make_subplots(
        rows=1, cols=2,
        subplot_titles=(mode.label, "SNR (dB)"),
        horizontal_spacing=0.08,
    )
    fig.add_trace(
        go.Scatter(
            x=values,
            y=prof["distance"],
            mode="lines+markers",
            line=dict(color="deepskyblue", width=2),
            marker=dict(size=4),
            name=mode.label,
            hovertemplate="%{x:.3f} @ %{y:.0f} m<extra></extra>",
        ),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(
            x=prof["snr"],
            y=prof["distance"],
            mode="lines+markers",
            line=dict(color="tomato", width=2),
            marker=dict(size=4),
            name="SNR",
            hovertemplate="%{x:.1f} dB @ %{y:.0f} m<extra></extra>",
        ),
        row=1, col=2,
    )

    fig.update_layout(
        title=(
            f"Ray {ray.timestamp:%Y-%m-%d %H:%M:%S} | "
            f"az {ray.azimuth:.1f}° | el {ray.elevation:.1f}°"
        ),
        template="plotly_dark",
        height=350,
        showlegend=False,
        margin=dict(l=60, r=30, t=70, b=40),
    )
    fig.update_yaxes(title_text="Distance (m)", row=1, col=1)
    if distance_range is not None:
        fig.update_yaxes(range=list(distance_range))

    return fig
