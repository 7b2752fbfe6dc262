"""Tests for SentimentDashboardController without building the UI.

Click payloads are plain dicts shaped like plotly's plotly_click event args.
"""

from types import SimpleNamespace

import numpy as np
import pytest

from feargreed.errors import NoDataError
from feargreed.sentiment_widget.algorithms.group_aggregator import aggregate
from feargreed.sentiment_widget.categories import Category
from feargreed.sentiment_widget.dashboard_config import DashboardConfig, DashboardConfigData
from feargreed.sentiment_widget.dashboard_controller import (
    SentimentDashboardController,
    category_from_click_point,
    event_from_click,
    is_strip_point,
    view_from_tab_value,
)
from feargreed.sentiment_widget.figure_generator import FigureGenerator
from feargreed.sentiment_widget.selection_state import IDLE, CategoryClicked, SelectionState
from feargreed.sentiment_widget.views import DashboardView


@pytest.fixture
def controller(sample_records):
    return SentimentDashboardController(
        sample_records,
        figure_generator=FigureGenerator(rng=np.random.default_rng(0)),
    )


def _click(**point):
    return {"points": [point]}


def test_category_from_customdata(sample_records):
    summaries = aggregate(sample_records)
    assert category_from_click_point({"customdata": ["Greed"], "x": 3}, summaries) == Category.GREED
    assert category_from_click_point({"customdata": "Neutral"}, summaries) == Category.NEUTRAL


def test_category_from_x_fallback(sample_records):
    summaries = aggregate(sample_records)
    assert category_from_click_point({"x": 1}, summaries) == Category.FEAR
    assert category_from_click_point({"x": 0.9}, summaries) == Category.FEAR
    assert category_from_click_point({"x": "Extreme Greed"}, summaries) == Category.EXTREME_GREED
    assert category_from_click_point({"x": 17}, summaries) is None
    assert category_from_click_point({}, summaries) is None


def test_is_strip_point():
    assert is_strip_point({"customdata": ["Fear", "2024-01-03 00:00:00"]})
    assert not is_strip_point({"customdata": ["Fear"]})
    assert not is_strip_point({"x": 1})


def test_event_from_click(sample_records):
    summaries = aggregate(sample_records)
    assert event_from_click(_click(customdata=["Fear"]), summaries) == CategoryClicked(Category.FEAR)
    assert event_from_click(_click(customdata=["Fear", "2024-01-03 00:00:00"]), summaries) is None
    assert event_from_click({"points": []}, summaries) is None
    assert event_from_click(None, summaries) is None
    assert event_from_click(_click(customdata=["Bogus"], x="Bogus"), summaries) is None


def test_empty_records_raise():
    with pytest.raises(NoDataError):
        SentimentDashboardController([])


def test_config_drives_figure_generator(sample_records, tmp_path):
    cfg = DashboardConfig(
        path=tmp_path / "c.json",
        data=DashboardConfigData(strip_jitter_amount=0.1, strip_point_size=9),
    )
    ctrl = SentimentDashboardController(sample_records, config=cfg)
    assert ctrl.figure_generator.strip_jitter_amount == 0.1
    assert ctrl.figure_generator.strip_point_size == 9


def test_unrecognized_classifications_disable_distribution_only(record_factory):
    ctrl = SentimentDashboardController(record_factory([(30, "Panic"), (70, "Euphoria")]))
    assert ctrl.summaries == ()
    assert isinstance(ctrl.summaries_error, NoDataError)
    assert len(ctrl.figure_for(DashboardView.TIMELINE)["data"]) == 2


def test_click_toggles_selection_without_ui(controller):
    controller._on_plotly_click(SimpleNamespace(args=_click(customdata=["Greed"])))
    assert controller.selection.state == SelectionState(Category.GREED, True)
    controller._on_plotly_click(SimpleNamespace(args=_click(customdata=["Greed"])))
    assert controller.selection.state == IDLE


def test_strip_point_click_keeps_selection(controller):
    controller.selection.click_category(Category.FEAR)
    controller._on_plotly_click(SimpleNamespace(args=_click(customdata=["Fear", "2024-01-03 00:00:00"], y=35)))
    assert controller.selection.state == SelectionState(Category.FEAR, True)


def test_escape_and_clear_return_to_idle(controller):
    controller.selection.click_category(Category.NEUTRAL)
    escape = SimpleNamespace(key=SimpleNamespace(name="Escape"), action=SimpleNamespace(keydown=True))
    controller._on_keyboard_key(escape)
    assert controller.selection.state.is_idle

    controller.selection.click_category(Category.NEUTRAL)
    controller._clear_selection()
    assert controller.selection.state.is_idle


def test_other_keys_are_ignored(controller):
    controller.selection.click_category(Category.NEUTRAL)
    other = SimpleNamespace(key=SimpleNamespace(name="a"), action=SimpleNamespace(keydown=True))
    controller._on_keyboard_key(other)
    assert controller.selection.state == SelectionState(Category.NEUTRAL, True)


def test_figure_for_distribution_reflects_selection(controller):
    controller.selection.click_category(Category.FEAR)
    fig = controller.figure_for(DashboardView.DISTRIBUTION)
    assert any(t.get("name") == "Fear values" for t in fig["data"])


def test_view_from_tab_value():
    assert view_from_tab_value("price") == DashboardView.PRICE
    assert view_from_tab_value(SimpleNamespace(props={"name": "distribution"})) == DashboardView.DISTRIBUTION
    assert view_from_tab_value("heatmap") is None
    assert view_from_tab_value(None) is None


def test_switching_tab_saves_default_view(sample_records, tmp_path):
    path = tmp_path / "cfg" / "dashboard_config.json"
    ctrl = SentimentDashboardController(sample_records, config=DashboardConfig(path=path))
    ctrl._on_tab_changed(SimpleNamespace(value="distribution"))
    assert DashboardConfig.load(config_path=path).get_default_view() == DashboardView.DISTRIBUTION


def test_current_tab_is_not_rewritten(sample_records, tmp_path):
    path = tmp_path / "dashboard_config.json"
    ctrl = SentimentDashboardController(sample_records, config=DashboardConfig(path=path))
    ctrl._on_tab_changed(SimpleNamespace(value="timeline"))
    assert not path.exists()


def test_tab_change_without_config_stays_in_memory(controller):
    controller.remember_view(DashboardView.PRICE)
    assert controller.config_data.default_view == "price"
