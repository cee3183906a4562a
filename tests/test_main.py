"""Script-level tests for the Streamlit shell."""

import os

import pytest
from streamlit.testing.v1 import AppTest

MAIN_PATH = os.path.join(os.path.dirname(__file__), "..", "main.py")


@pytest.fixture
def app():
    at = AppTest.from_file(MAIN_PATH, default_timeout=60)
    at.run()
    return at


class TestChartSelection:
    def test_load_starts_new_chart_generation(self, app):
        app.sidebar.checkbox[0].check().run()
        app.sidebar.button[0].click().run()
        assert app.session_state.chart_generation == 1
        assert not app.exception

    def test_selection_from_previous_dataset_ignored(self, app):
        app.sidebar.checkbox[0].check().run()
        app.sidebar.button[0].click().run()
        old_key = f"ppi_chart_{app.session_state.chart_generation}"
        # a click recorded on the chart of the first dataset
        app.session_state[old_key] = {"selection": {"points": [{"x": 450.0, "y": 350.0}]}}
        app.sidebar.button[0].click().run()
        assert "pick_point" not in app.session_state
