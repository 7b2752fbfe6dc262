"""Smoke and content tests for FigureGenerator.

These check what ends up in the Plotly figure dicts (trace counts, precomputed
box stats, weights, strip points), not visual correctness.
"""

import numpy as np
import pytest

from feargreed.sentiment_widget.algorithms.group_aggregator import aggregate, summary_for
from feargreed.sentiment_widget.categories import Category
from feargreed.sentiment_widget.figure_generator import ONE_DAY_MS, FigureGenerator, bar_width_ms
from feargreed.sentiment_widget.selection_state import IDLE, SelectionState
from feargreed.sentiment_widget.views import DashboardView


@pytest.fixture
def generator():
    return FigureGenerator(strip_jitter_amount=0.4, rng=np.random.default_rng(7))


def _traces(fig, trace_type):
    return [t for t in fig["data"] if t["type"] == trace_type]


def test_render_idle_draws_one_box_per_summary(generator, sample_records):
    summaries = aggregate(sample_records)
    fig = generator.render(summaries, IDLE)
    boxes = _traces(fig, "box")
    assert [b["name"] for b in boxes] == [s.category.value for s in summaries]
    assert all(b["opacity"] == 1.0 for b in boxes)
    assert list(fig["layout"]["xaxis"]["ticktext"]) == [s.category.value for s in summaries]
    assert list(fig["layout"]["xaxis"]["tickvals"]) == list(range(len(summaries)))
    assert not any(t["name"].endswith(" values") for t in fig["data"])


def test_boxes_use_precomputed_nearest_rank_stats(generator, sample_records):
    summaries = aggregate(sample_records)
    fig = generator.render(summaries, IDLE)
    fear_box = next(b for b in _traces(fig, "box") if b["name"] == "Fear")
    fear = summary_for(summaries, Category.FEAR)
    assert list(fear_box["q1"]) == [fear.q1]
    assert list(fear_box["median"]) == [fear.median]
    assert list(fear_box["q3"]) == [fear.q3]
    assert list(fear_box["lowerfence"]) == [fear.whisker_lower]
    assert list(fear_box["upperfence"]) == [fear.whisker_upper]


def test_render_selected_dims_others_and_adds_strip(generator, sample_records):
    summaries = aggregate(sample_records)
    fig = generator.render(summaries, SelectionState(Category.GREED, True))
    for box in _traces(fig, "box"):
        expected = 1.0 if box["name"] == "Greed" else 0.2
        assert box["opacity"] == expected

    strip = next(t for t in fig["data"] if t["name"] == "Greed values")
    greed_pos = [s.category for s in summaries].index(Category.GREED)
    xs = list(strip["x"])
    assert len(xs) == 3
    assert all(greed_pos - 0.2 <= x <= greed_pos + 0.2 for x in xs)
    assert sorted(strip["y"]) == [60.0, 65.0, 70.0]
    assert [c[0] for c in strip["customdata"]] == ["Greed"] * 3


def test_strip_points_same_set_across_renders(sample_records):
    summaries = aggregate(sample_records)
    state = SelectionState(Category.FEAR, True)
    a = FigureGenerator(rng=np.random.default_rng(1)).render(summaries, state)
    b = FigureGenerator(rng=np.random.default_rng(2)).render(summaries, state)
    strip_a = next(t for t in a["data"] if t["name"] == "Fear values")
    strip_b = next(t for t in b["data"] if t["name"] == "Fear values")
    assert sorted(strip_a["y"]) == sorted(strip_b["y"])
    assert list(strip_a["x"]) != list(strip_b["x"])


def test_outlier_trace(generator, record_factory):
    records = record_factory([(v, "Fear") for v in (1, 50, 52, 54, 55, 56, 58, 60, 200)])
    fig = generator.render(aggregate(records), IDLE)
    outliers = next(t for t in fig["data"] if t["name"] == "Fear outliers")
    assert sorted(outliers["y"]) == [1.0, 200.0]


def test_timeline_figure(generator, sample_records):
    fig = generator.figure_timeline(sample_records)
    bars = _traces(fig, "bar")
    assert [b["name"] for b in bars] == ["Extreme Fear", "Fear", "Neutral", "Greed", "Extreme Greed"]
    assert sum(len(b["y"]) for b in bars) == len(sample_records)
    assert fig["layout"]["dragmode"] == "pan"
    assert fig["config"]["scrollZoom"] is True


def test_price_sentiment_figure(generator, sample_records):
    fig = generator.figure_price_sentiment(sample_records)
    price = [t for t in fig["data"] if t.get("name") == "Price"]
    assert len(price) == 1
    assert len(price[0]["y"]) == len(sample_records)
    assert price[0]["yaxis"] == "y2"


def test_price_sentiment_without_price(generator, record_factory):
    records = record_factory([(30, "Fear"), (70, "Greed")])
    fig = generator.figure_price_sentiment(records)
    assert not any(t.get("name") == "Price" for t in fig["data"])
    texts = [a["text"] for a in fig["layout"]["annotations"]]
    assert "No price data in dataset" in texts


def test_bar_width_from_daily_spacing(sample_records):
    assert bar_width_ms(sample_records) == pytest.approx(ONE_DAY_MS * 0.8)
    assert bar_width_ms(sample_records[:1]) == pytest.approx(ONE_DAY_MS * 0.8)


@pytest.mark.parametrize("view", list(DashboardView))
def test_make_figure_all_views(generator, sample_records, view):
    fig = generator.make_figure(view, sample_records, aggregate(sample_records), IDLE)
    assert "data" in fig
    assert len(fig["data"]) > 0
