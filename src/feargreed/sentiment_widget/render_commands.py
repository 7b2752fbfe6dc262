"""Render plan for the distribution view: (summaries, selection) -> commands.

The plan says what to draw and with which weight; it says nothing about
positions beyond the category axis, so it stays deterministic. Jitter for
strip points is added later by the figure generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from feargreed.sentiment_widget.algorithms.group_aggregator import GroupSummary, summary_for
from feargreed.sentiment_widget.categories import Category
from feargreed.sentiment_widget.dataset import Record
from feargreed.sentiment_widget.selection_state import (
    WEIGHT_LINE_WIDTH,
    WEIGHT_OPACITY,
    SelectionState,
    VisualWeight,
    visual_weight,
)


@dataclass(frozen=True)
class BoxRenderCommand:
    summary: GroupSummary
    weight: VisualWeight
    opacity: float
    line_width: float


@dataclass(frozen=True)
class StripRenderCommand:
    """Individually plotted points of the selected category."""
    category: Category
    records: tuple[Record, ...]


@dataclass(frozen=True)
class RenderPlan:
    boxes: tuple[BoxRenderCommand, ...]
    strip: Optional[StripRenderCommand] = None


def build_render_commands(
    summaries: Sequence[GroupSummary],
    selection: SelectionState,
) -> RenderPlan:
    """Compute box weights and the optional strip plot for the current selection.

    Summaries are never modified; a selected category that is not among the
    summaries yields no strip command.
    """
    boxes = []
    for s in summaries:
        weight = visual_weight(s.category, selection)
        boxes.append(BoxRenderCommand(
            summary=s,
            weight=weight,
            opacity=WEIGHT_OPACITY[weight],
            line_width=WEIGHT_LINE_WIDTH[weight],
        ))

    strip = None
    if selection.strip_visible and selection.selected_category is not None:
        selected = summary_for(summaries, selection.selected_category)
        if selected is not None:
            strip = StripRenderCommand(category=selected.category, records=selected.raw_data)

    return RenderPlan(boxes=tuple(boxes), strip=strip)
