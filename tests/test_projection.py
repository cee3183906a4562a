"""Tests for the PPI polar <-> screen projection."""

import numpy as np
import pytest

from config import DEFAULT_SCALE, MAX_SCALE, MIN_SCALE
from visualization.projection import PolarProjection, ViewState


@pytest.fixture
def projection():
    return PolarProjection(ViewState(width=800, height=600))


class TestForwardMap:
    def test_origin_at_view_center(self, projection):
        assert projection.project(123.0, 0.0) == pytest.approx((400.0, 300.0))

    def test_pixels_per_meter(self, projection):
        # short side 600 px -> 600 / 2.2 px for 4000 m, times default scale
        assert projection.pixels_per_meter() == pytest.approx(600 / 2.2 / 4000 * DEFAULT_SCALE)

    def test_orientation_offset(self, projection):
        r = 1000.0 * projection.pixels_per_meter()
        x, y = projection.project(-15.0, 1000.0)
        assert (x, y) == pytest.approx((400.0 + r, 300.0))
        x, y = projection.project(75.0, 1000.0)
        assert (x, y) == pytest.approx((400.0, 300.0 + r))

    def test_offset_shifts_origin(self, projection):
        projection.pan((25.0, -10.0))
        assert projection.project(0.0, 0.0) == pytest.approx((425.0, 290.0))

    def test_vectorized(self, projection):
        x, y = projection.project(np.array([0.0, 90.0]), np.array([500.0, 1500.0]))
        assert x.shape == (2,)
        assert y.shape == (2,)


class TestInverseMap:
    @pytest.mark.parametrize("scale,offset", [
        (DEFAULT_SCALE, (0.0, 0.0)),
        (0.1, (300.0, -120.0)),
        (30.0, (-5000.0, 2500.0)),
        (2.5, (13.7, 42.1)),
    ])
    def test_round_trip(self, projection, scale, offset):
        projection.state.scale = scale
        projection.pan(offset)
        for az in [0.0, 14.9, 15.0, 90.0, 179.5, 270.0, 345.0, 359.9]:
            for dist in [1.0, 250.0, 3999.0, 9000.0]:
                x, y = projection.project(az, dist)
                az2, dist2 = projection.unproject(x, y)
                assert dist2 == pytest.approx(dist, rel=1e-9)
                diff = abs(az2 - az) % 360.0
                assert min(diff, 360.0 - diff) < 1e-7

    def test_azimuth_normalized(self, projection):
        rng = np.random.default_rng(1)
        az, _ = projection.unproject(rng.uniform(0, 800, 500), rng.uniform(0, 600, 500))
        assert np.all(az >= 0.0)
        assert np.all(az < 360.0)

    def test_point_left_of_origin(self, projection):
        az, dist = projection.unproject(300.0, 300.0)
        assert az == pytest.approx(165.0)
        assert dist == pytest.approx(100.0 / projection.pixels_per_meter())


class TestZoom:
    @pytest.mark.parametrize("delta", [1, -1])
    def test_anchor_invariant(self, projection, delta):
        anchor = (620.0, 140.0)
        projection.pan((-40.0, 55.0))
        az, dist = projection.unproject(*anchor)
        for _ in range(5):
            projection.zoom(anchor, delta)
            x, y = projection.project(az, dist)
            assert np.hypot(x - anchor[0], y - anchor[1]) < 1.0

    def test_zoom_factors(self, projection):
        projection.zoom(projection.center, 120)
        assert projection.state.scale == pytest.approx(DEFAULT_SCALE * 1.15)
        projection.zoom(projection.center, -120)
        assert projection.state.scale == pytest.approx(DEFAULT_SCALE * 1.15 * 0.85)

    def test_scale_clamped(self, projection):
        for _ in range(100):
            projection.zoom((0.0, 0.0), 1)
        assert projection.state.scale == MAX_SCALE
        for _ in range(200):
            projection.zoom((0.0, 0.0), -1)
        assert projection.state.scale == MIN_SCALE

    def test_anchor_invariant_at_clamp(self, projection):
        projection.state.scale = MAX_SCALE
        anchor = (100.0, 500.0)
        before = projection.unproject(*anchor)
        projection.zoom(anchor, 1)
        after = projection.unproject(*anchor)
        assert after == pytest.approx(before)


class TestViewCommands:
    def test_pan_accumulates(self, projection):
        projection.pan((10.0, 5.0))
        projection.pan((-3.0, 2.0))
        assert projection.state.offset == pytest.approx((7.0, 7.0))

    def test_reset(self, projection):
        projection.zoom((10.0, 10.0), 1)
        projection.pan((50.0, 50.0))
        projection.reset_view()
        assert projection.state.scale == DEFAULT_SCALE
        assert projection.state.offset == (0.0, 0.0)

    def test_set_visible_range(self, projection):
        projection.set_visible_range(500, 2000)
        assert projection.is_visible(np.array([400.0, 500.0, 2000.0, 2100.0])).tolist() == [
            False, True, True, False,
        ]

    def test_invalid_visible_range(self, projection):
        with pytest.raises(ValueError):
            projection.set_visible_range(2000, 1000)
        with pytest.raises(ValueError):
            projection.set_visible_range(-1, 1000)

    def test_resize(self, projection):
        projection.resize(400, 400)
        assert projection.center == (200.0, 200.0)
        with pytest.raises(ValueError):
            projection.resize(0, 400)

    def test_state_shared_by_reference(self):
        state = ViewState()
        PolarProjection(state).pan((5.0, 0.0))
        assert state.offset_x == 5.0
