"""Plotly figure generation for the Fear & Greed dashboard.

This module provides the FigureGenerator class for creating Plotly figure
dictionaries from records, group summaries and selection state, separating
figure generation from UI/controller concerns.
"""

from __future__ import annotations

import statistics
from typing import Optional, Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from feargreed.sentiment_widget.algorithms.group_aggregator import GroupSummary
from feargreed.sentiment_widget.categories import CATEGORY_ORDER, Category, color_for_label
from feargreed.sentiment_widget.dataset import Record
from feargreed.sentiment_widget.render_commands import RenderPlan, build_render_commands
from feargreed.sentiment_widget.selection_state import IDLE, SelectionState, VisualWeight
from feargreed.sentiment_widget.views import DashboardView
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)

VALUE_AXIS_TITLE = "Fear & Greed Index Value"
DATE_FMT = "%Y-%m-%d %H:%M:%S"
ONE_DAY_MS = 24 * 60 * 60 * 1000

# Plotly config passed through ui.plotly (scroll wheel zoom, no logo).
PLOTLY_CONFIG = {"scrollZoom": True, "displaylogo": False}

TIMELINE_INSTRUCTIONS = "Scroll to zoom | Click and drag to pan | Hover over bars for details"
DISTRIBUTION_INSTRUCTIONS = "Click a box to show its daily values | Double-click or Esc to clear"


def _date_str(r: Record) -> str:
    return r.timestamp.strftime(DATE_FMT)


def _ordered_labels(records: Sequence[Record]) -> list[str]:
    """Labels present in records: known categories in axis order, then unknown labels sorted."""
    present = {r.classification for r in records}
    known = [c.value for c in CATEGORY_ORDER if c.value in present]
    unknown = sorted(present - set(known))
    return known + unknown


def bar_width_ms(records: Sequence[Record], fill: float = 0.8) -> float:
    """Bar width in milliseconds: fill * median spacing between timestamps (one day if < 2 records)."""
    if len(records) < 2:
        return ONE_DAY_MS * fill
    ts = [r.timestamp.timestamp() * 1000.0 for r in records]
    gaps = [b - a for a, b in zip(ts, ts[1:]) if b > a]
    if not gaps:
        return ONE_DAY_MS * fill
    return statistics.median(gaps) * fill


def _with_config(fig: go.Figure) -> dict:
    d = fig.to_dict()
    d["config"] = dict(PLOTLY_CONFIG)
    return d


class FigureGenerator:
    """Generates Plotly figure dictionaries for the three dashboard views.

    The distribution view is rendered from a RenderPlan, so the only thing
    decided here is geometry: category positions, colors, and the horizontal
    jitter of strip points.

    Attributes:
        strip_jitter_amount: Total width of the strip jitter band, in category units.
        strip_point_size: Marker size of strip points.
    """

    def __init__(
        self,
        *,
        strip_jitter_amount: float = 0.35,
        strip_point_size: int = 6,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Initialize FigureGenerator.

        Args:
            strip_jitter_amount: Width of the jitter band for strip points.
            strip_point_size: Marker size for strip points.
            rng: Random generator for jitter. Pass a seeded generator for
                reproducible point placement (tests); default is unseeded.
        """
        self.strip_jitter_amount = strip_jitter_amount
        self.strip_point_size = strip_point_size
        self._rng = rng if rng is not None else np.random.default_rng()

    def make_figure(
        self,
        view: DashboardView,
        records: Sequence[Record],
        summaries: Sequence[GroupSummary],
        selection: SelectionState = IDLE,
    ) -> dict:
        """Generate the figure dictionary for a view."""
        if view == DashboardView.TIMELINE:
            result = self.figure_timeline(records)
        elif view == DashboardView.PRICE:
            result = self.figure_price_sentiment(records)
        elif view == DashboardView.DISTRIBUTION:
            result = self.render(summaries, selection)
        else:
            raise ValueError(f"Unknown dashboard view: {view!r}")
        logger.debug(f"Figure generated for {view.value}: {len(result.get('data', []))} traces")
        return result

    # ----------------------------
    # Timeline
    # ----------------------------

    def _bar_traces(self, records: Sequence[Record], *, opacity: float = 1.0) -> list[go.Bar]:
        """One bar trace per classification (legend entry), axis order first."""
        width = bar_width_ms(records)
        traces = []
        for label in _ordered_labels(records):
            sub = [r for r in records if r.classification == label]
            traces.append(go.Bar(
                x=[_date_str(r) for r in sub],
                y=[r.value for r in sub],
                width=[width] * len(sub),
                name=label,
                customdata=[label] * len(sub),
                marker=dict(
                    color=color_for_label(label),
                    line=dict(color="#333", width=0.5),
                ),
                opacity=opacity,
                hovertemplate=(
                    "<b>Date:</b> %{x|%Y-%m-%d}<br>"
                    "<b>Value:</b> %{y:.1f}<br>"
                    "<b>Classification:</b> %{customdata}<extra></extra>"
                ),
            ))
        return traces

    def figure_timeline(self, records: Sequence[Record]) -> dict:
        """Bar chart of the index over time, pan by drag and zoom by scroll."""
        logger.info(f"FigureGenerator.figure_timeline: records={len(records)}")
        fig = go.Figure()
        for trace in self._bar_traces(records):
            fig.add_trace(trace)
        fig.update_layout(
            title=dict(text="Fear & Greed Index Over Time", x=0.5),
            margin=dict(l=80, r=30, t=50, b=90),
            barmode="overlay",
            bargap=0,
            dragmode="pan",
            xaxis=dict(type="date", tickformat="%Y-%m-%d", tickangle=-45),
            yaxis=dict(title=VALUE_AXIS_TITLE, rangemode="tozero", fixedrange=False),
            legend_title_text="Classification",
            uirevision="keep",
            annotations=[dict(
                text=TIMELINE_INSTRUCTIONS,
                xref="paper", yref="paper", x=0.5, y=-0.28,
                showarrow=False,
                font=dict(size=11, color="#666"),
            )],
        )
        return _with_config(fig)

    # ----------------------------
    # Price vs sentiment
    # ----------------------------

    def figure_price_sentiment(self, records: Sequence[Record]) -> dict:
        """Sentiment bars on the left axis and the secondary series (price) as a line on the right."""
        priced = [r for r in records if r.secondary_value is not None]
        logger.info(
            f"FigureGenerator.figure_price_sentiment: records={len(records)}, with_price={len(priced)}"
        )
        fig = make_subplots(specs=[[{"secondary_y": True}]])
        for trace in self._bar_traces(records, opacity=0.6):
            fig.add_trace(trace, secondary_y=False)

        annotations = []
        if priced:
            fig.add_trace(go.Scatter(
                x=[_date_str(r) for r in priced],
                y=[r.secondary_value for r in priced],
                mode="lines",
                name="Price",
                line=dict(color="#1f3b73", width=2),
                hovertemplate="<b>Date:</b> %{x|%Y-%m-%d}<br><b>Price:</b> %{y:,.2f}<extra></extra>",
            ), secondary_y=True)
        else:
            annotations.append(dict(
                text="No price data in dataset",
                xref="paper", yref="paper", x=0.5, y=0.95,
                showarrow=False,
                font=dict(size=12, color="#b00020"),
            ))

        fig.update_layout(
            title=dict(text="Price vs Fear & Greed Index", x=0.5),
            margin=dict(l=80, r=80, t=50, b=90),
            barmode="overlay",
            bargap=0,
            dragmode="pan",
            legend_title_text="Series",
            uirevision="keep",
            annotations=annotations,
        )
        fig.update_xaxes(type="date", tickformat="%Y-%m-%d", tickangle=-45)
        fig.update_yaxes(title_text=VALUE_AXIS_TITLE, rangemode="tozero", secondary_y=False)
        fig.update_yaxes(title_text="Price", secondary_y=True, showgrid=False)
        return _with_config(fig)

    # ----------------------------
    # Distribution
    # ----------------------------

    def render(self, summaries: Sequence[GroupSummary], selection: SelectionState) -> dict:
        """Box plot figure for summaries under selection."""
        return self.render_plan(build_render_commands(summaries, selection))

    def render_plan(self, plan: RenderPlan) -> dict:
        """Draw a RenderPlan.

        Categories sit at integer positions 0..n-1 (present categories only,
        in summary order) with their labels as tick text. Every trace carries
        the category label in customdata[0] so clicks map back to a category.
        """
        logger.info(
            f"FigureGenerator.render_plan: boxes={len(plan.boxes)}, "
            f"strip={plan.strip.category.value if plan.strip else None}"
        )
        positions: dict[Category, int] = {}
        fig = go.Figure()

        for pos, cmd in enumerate(plan.boxes):
            s = cmd.summary
            label = s.category.value
            color = color_for_label(label)
            positions[s.category] = pos

            # precomputed nearest-rank stats; plotly must not recompute quartiles
            fig.add_trace(go.Box(
                x=[pos],
                q1=[s.q1],
                median=[s.median],
                q3=[s.q3],
                lowerfence=[s.whisker_lower],
                upperfence=[s.whisker_upper],
                name=label,
                customdata=[[label]],
                marker=dict(color=color),
                line=dict(width=cmd.line_width, color="#333" if cmd.weight == VisualWeight.HIGHLIGHTED else color),
                fillcolor=color,
                opacity=cmd.opacity,
                boxpoints=False,
                hoverinfo="y+name",
                showlegend=False,
            ))

            if s.outliers:
                fig.add_trace(go.Scatter(
                    x=[pos] * len(s.outliers),
                    y=list(s.outliers),
                    mode="markers",
                    name=f"{label} outliers",
                    customdata=[[label] for _ in s.outliers],
                    marker=dict(color=color, size=5, symbol="circle-open"),
                    opacity=cmd.opacity,
                    hovertemplate=f"{label} outlier: %{{y:.1f}}<extra></extra>",
                    showlegend=False,
                ))

        if plan.strip is not None and plan.strip.category in positions:
            fig.add_trace(self._strip_trace(plan.strip.category, plan.strip.records, positions[plan.strip.category]))

        labels = [cmd.summary.category.value for cmd in plan.boxes]
        fig.update_layout(
            title=dict(text="Fear & Greed Index Distribution by Classification", x=0.5),
            margin=dict(l=80, r=30, t=50, b=80),
            xaxis=dict(
                tickmode="array",
                tickvals=list(range(len(labels))),
                ticktext=labels,
                range=[-0.5, len(labels) - 0.5],
                title="Classification",
            ),
            yaxis=dict(title=VALUE_AXIS_TITLE),
            clickmode="event",
            showlegend=False,
            uirevision="keep",
            annotations=[dict(
                text=DISTRIBUTION_INSTRUCTIONS,
                xref="paper", yref="paper", x=0.5, y=-0.18,
                showarrow=False,
                font=dict(size=11, color="#666"),
            )],
        )
        return _with_config(fig)

    def strip_x(self, position: int, n: int) -> np.ndarray:
        """Jittered x positions for n strip points around a category position."""
        half = self.strip_jitter_amount / 2
        return position + self._rng.uniform(-half, half, size=n)

    def _strip_trace(self, category: Category, records: Sequence[Record], position: int) -> go.Scatter:
        label = category.value
        return go.Scatter(
            x=self.strip_x(position, len(records)).tolist(),
            y=[r.value for r in records],
            mode="markers",
            name=f"{label} values",
            customdata=[[label, _date_str(r)] for r in records],
            marker=dict(
                color=color_for_label(label),
                size=self.strip_point_size,
                opacity=0.7,
                line=dict(color="#333", width=0.5),
            ),
            hovertemplate=(
                "<b>Date:</b> %{customdata[1]}<br>"
                "<b>Value:</b> %{y:.1f}<br>"
                f"<b>Classification:</b> {label}<extra></extra>"
            ),
            showlegend=False,
        )
