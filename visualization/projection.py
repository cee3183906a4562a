"""
PPI projection: radar polar coordinates <-> screen pixels.

Screen coordinates follow the usual raster convention (origin top-left,
y grows downward). Radar azimuth 0 is drawn ORIENTATION_OFFSET_DEG
clockwise of screen east. The same transform drives rendering and the
inverse pointer lookup, so whatever is drawn under the pointer is what
``unproject`` reports.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from config import (
    DEFAULT_MAX_DISTANCE_M,
    DEFAULT_MIN_DISTANCE_M,
    DEFAULT_SCALE,
    DEFAULT_VIEW_SIZE_PX,
    MAX_SCALE,
    MIN_SCALE,
    ORIENTATION_OFFSET_DEG,
    RADIUS_DIVISOR,
    REFERENCE_RANGE_M,
    ZOOM_IN_FACTOR,
    ZOOM_OUT_FACTOR,
)

ArrayLike = Union[float, np.ndarray]


@dataclass
class ViewState:
    """Pan/zoom state of one PPI view.

    Owned by the UI shell and handed to PolarProjection by reference;
    the projection mutates it in zoom/pan/reset.
    """

    scale: float = DEFAULT_SCALE
    offset_x: float = 0.0
    offset_y: float = 0.0
    width: float = DEFAULT_VIEW_SIZE_PX[0]
    height: float = DEFAULT_VIEW_SIZE_PX[1]
    min_distance: float = DEFAULT_MIN_DISTANCE_M
    max_distance: float = DEFAULT_MAX_DISTANCE_M

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.offset_x, self.offset_y)


class PolarProjection:
    """Bidirectional (azimuth, distance) <-> screen transform over a ViewState."""

    def __init__(self, state: Optional[ViewState] = None):
        self.state = state if state is not None else ViewState()

    # -- geometry ---------------------------------------------------------

    @property
    def center(self) -> Tuple[float, float]:
        return (self.state.width / 2.0, self.state.height / 2.0)

    @property
    def origin(self) -> Tuple[float, float]:
        """Screen position of the radar (view center plus pan offset)."""
        cx, cy = self.center
        return (cx + self.state.offset_x, cy + self.state.offset_y)

    def pixels_per_meter(self) -> float:
        base_radius = min(self.state.width, self.state.height) / RADIUS_DIVISOR
        return base_radius / REFERENCE_RANGE_M * self.state.scale

    def resize(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("View size must be positive")
        self.state.width = float(width)
        self.state.height = float(height)

    # -- transforms -------------------------------------------------------

    def project(self, azimuth: ArrayLike, distance: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        """Map azimuth (deg) and distance (m) to screen (x, y); works on arrays."""
        theta = np.radians(np.asarray(azimuth, dtype=float) + ORIENTATION_OFFSET_DEG)
        r = np.asarray(distance, dtype=float) * self.pixels_per_meter()
        ox, oy = self.origin
        x = ox + r * np.cos(theta)
        y = oy + r * np.sin(theta)
        if np.ndim(x) == 0:
            return float(x), float(y)
        return x, y

    def unproject(self, x: ArrayLike, y: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
        """Map a screen point back to (azimuth in [0, 360), distance in m)."""
        ox, oy = self.origin
        dx = np.asarray(x, dtype=float) - ox
        dy = np.asarray(y, dtype=float) - oy
        distance = np.hypot(dx, dy) / self.pixels_per_meter()
        azimuth = np.mod(np.degrees(np.arctan2(dy, dx)) - ORIENTATION_OFFSET_DEG, 360.0)
        if np.ndim(azimuth) == 0:
            # mod can round a tiny negative angle up to exactly 360
            az = float(azimuth)
            return (0.0 if az >= 360.0 else az), float(distance)
        return np.where(azimuth >= 360.0, 0.0, azimuth), distance

    # -- view commands ----------------------------------------------------

    def zoom(self, anchor: Tuple[float, float], delta: float) -> None:
        """Zoom in (delta > 0) or out around a fixed screen anchor.

        The anchor's underlying polar position stays under the anchor.
        """
        factor = ZOOM_IN_FACTOR if delta > 0 else ZOOM_OUT_FACTOR
        old_scale = self.state.scale
        new_scale = float(np.clip(old_scale * factor, MIN_SCALE, MAX_SCALE))
        actual = new_scale / old_scale

        cx, cy = self.center
        rel_x = anchor[0] - cx
        rel_y = anchor[1] - cy
        self.state.offset_x = rel_x - (rel_x - self.state.offset_x) * actual
        self.state.offset_y = rel_y - (rel_y - self.state.offset_y) * actual
        self.state.scale = new_scale

    def pan(self, delta: Tuple[float, float]) -> None:
        self.state.offset_x += float(delta[0])
        self.state.offset_y += float(delta[1])

    def reset_view(self) -> None:
        self.state.scale = DEFAULT_SCALE
        self.state.offset_x = 0.0
        self.state.offset_y = 0.0

    def set_visible_range(self, min_distance: float, max_distance: float) -> None:
        """Restrict drawn gates to ``[min_distance, max_distance]`` meters."""
        if min_distance < 0 or min_distance >= max_distance:
            raise ValueError(
                f"Invalid visible range {min_distance}..{max_distance}: "
                f"need 0 <= min < max"
            )
        self.state.min_distance = float(min_distance)
        self.state.max_distance = float(max_distance)

    def is_visible(self, distance: ArrayLike) -> ArrayLike:
        return (np.asarray(distance) >= self.state.min_distance) & (
            np.asarray(distance) <= self.state.max_distance
        )
