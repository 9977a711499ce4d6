"""Tests for the Streamlit story page."""
from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

import config
from tests.helpers import HEADER, ROWS

APP = str(Path(__file__).resolve().parents[1] / "scrollytelling.py")
DEFAULT_TIMEOUT = 30


def _write_dataset(path, rows):
    path.write_text(HEADER + "\n".join(rows) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def data_path(tmp_path, monkeypatch):
    path = tmp_path / "data" / "MASTER.csv"
    path.parent.mkdir()
    monkeypatch.setattr(config, "DATA_CSV", path)
    st.cache_resource.clear()
    return path


def _run():
    at = AppTest.from_file(APP, default_timeout=DEFAULT_TIMEOUT)
    at.run()
    assert not at.exception
    return at


def _section_headers(at):
    return [h.value for h in at.main.header if h.value[0].isdigit()]


def _click(at, label):
    buttons = [button for button in at.button if button.label == label]
    assert len(buttons) == 1
    buttons[0].click().run()
    assert not at.exception


def _chart_dumps(at):
    return [str(el.proto) for el in at.get("plotly_chart")]


def test_missing_data_file_shows_error_and_stops(data_path):
    at = _run()
    assert len(at.error) == 1
    assert "Make sure `MASTER.csv` exists" in at.error[0].value
    assert _section_headers(at) == []
    assert len(at.metric) == 0


def test_first_run_shows_only_first_section(data_path):
    _write_dataset(data_path, ROWS)
    at = _run()
    headers = _section_headers(at)
    assert len(headers) == 1
    assert headers[0].startswith("1")
    assert len(at.get("plotly_chart")) == 1


def test_keep_scrolling_reveals_one_more_section(data_path):
    _write_dataset(data_path, ROWS)
    at = _run()
    _click(at, "Keep scrolling ↓")
    assert len(_section_headers(at)) == 2
    _click(at, "Keep scrolling ↓")
    assert len(_section_headers(at)) == 3
    # revealed sections are drawn again on every rerun
    assert len(at.get("plotly_chart")) == 3


def test_whole_story_shows_every_section_and_tables(data_path):
    _write_dataset(data_path, ROWS)
    at = _run()
    _click(at, "Show the whole story")
    assert len(_section_headers(at)) == 7
    assert len(at.get("plotly_chart")) == 7
    assert any(h.value.startswith("🧾") for h in at.main.header)


def test_country_selector_defaults_to_largest_emitter(data_path):
    _write_dataset(data_path, ROWS)
    at = _run()
    _click(at, "Show the whole story")
    assert at.selectbox(key="source_country").value == "A"


def test_country_selector_falls_back_to_world(data_path):
    _write_dataset(data_path, [r for r in ROWS if ",2021," not in r])
    at = _run()
    _click(at, "Show the whole story")
    selector = at.selectbox(key="source_country")
    assert selector.value == "World"
    assert selector.options[0] == "World"


def test_year_slider_redraws_map(data_path):
    _write_dataset(data_path, ROWS)
    at = _run()
    _click(at, "Show the whole story")
    assert any("by country in 2021" in dump for dump in _chart_dumps(at))

    at.slider(key="map_year").set_value(1980).run()
    assert not at.exception
    dumps = _chart_dumps(at)
    assert any("by country in 1980" in dump for dump in dumps)
    assert not any("by country in 2021" in dump for dump in dumps)
