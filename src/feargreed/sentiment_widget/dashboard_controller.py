"""Dashboard controller for the Fear & Greed charts.

Provides SentimentDashboardController, the entry point for building the
tabbed NiceGUI dashboard (timeline, price vs sentiment, distribution) from
loaded records. The distribution tab is interactive: clicking a box selects
its classification and reveals a strip plot of its daily values; clicking it
again, double-clicking the plot, pressing Escape or "Clear selection"
deselects.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from nicegui import ui
from nicegui.events import GenericEventArguments

from feargreed.errors import NoDataError
from feargreed.sentiment_widget.algorithms.group_aggregator import GroupSummary, aggregate, summary_table
from feargreed.sentiment_widget.categories import Category
from feargreed.sentiment_widget.dashboard_config import DashboardConfig, DashboardConfigData
from feargreed.sentiment_widget.dataset import Record
from feargreed.sentiment_widget.figure_generator import FigureGenerator
from feargreed.sentiment_widget.selection_state import (
    CategoryClicked,
    SelectionController,
    SelectionEvent,
    SelectionState,
)
from feargreed.sentiment_widget.views import DashboardView
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)


def category_from_click_point(
    point: dict[str, Any],
    summaries: Sequence[GroupSummary],
) -> Optional[Category]:
    """Map a plotly click point on the distribution figure to a category.

    Box and outlier traces carry the label in customdata[0]; boxes may also
    only report their x position (index into summaries).
    """
    custom = point.get("customdata")
    if isinstance(custom, (list, tuple)) and custom:
        custom = custom[0]
    if isinstance(custom, str):
        category = Category.from_label(custom)
        if category is not None:
            return category

    x = point.get("x")
    if isinstance(x, str):
        return Category.from_label(x)
    if isinstance(x, (int, float)):
        idx = int(round(x))
        if 0 <= idx < len(summaries):
            return summaries[idx].category
    return None


def is_strip_point(point: dict[str, Any]) -> bool:
    """Strip points carry [label, date] in customdata; boxes and outliers carry [label]."""
    custom = point.get("customdata")
    return isinstance(custom, (list, tuple)) and len(custom) >= 2


def event_from_click(
    args: Any,
    summaries: Sequence[GroupSummary],
) -> Optional[SelectionEvent]:
    """Selection event for a plotly_click payload, or None if the click selects nothing.

    Clicks on strip points are not selection clicks (they only show details).
    """
    points = (args or {}).get("points") if isinstance(args, dict) else None
    if not points:
        return None
    p0 = points[0]
    if not isinstance(p0, dict) or is_strip_point(p0):
        return None
    category = category_from_click_point(p0, summaries)
    if category is None:
        logger.warning(f"Could not map plotly click to a category: point={p0}")
        return None
    return CategoryClicked(category)


def view_from_tab_value(value: Any) -> Optional[DashboardView]:
    """DashboardView for a ui.tabs value (tab name, or the ui.tab element itself)."""
    props = getattr(value, "props", None)
    if isinstance(props, dict):
        value = props.get("name")
    try:
        return DashboardView(value)
    except ValueError:
        return None


def _format_stat(v: Any) -> Any:
    if isinstance(v, float):
        return round(v, 2)
    return v


class SentimentDashboardController:
    """Controller for the tabbed Fear & Greed dashboard.

    **Public API:**

    - **__init__(records, ...)**: Configure with loaded records and an optional DashboardConfig.
    - **build(container=None)**: Build the UI (tabs, plots, stats table). Call once.
    - **selection**: SelectionController owning the distribution view's selection state.
    """

    def __init__(
        self,
        records: Sequence[Record],
        *,
        config: Optional[DashboardConfig] = None,
        figure_generator: Optional[FigureGenerator] = None,
    ) -> None:
        """Initialize with records and config.

        Args:
            records: Loaded records, sorted by timestamp. Must not be empty.
            config: Dashboard config; defaults are used when None (nothing is read
                from or written to disk). When given, the last opened tab is
                saved to it as default_view.
            figure_generator: Optional FigureGenerator (e.g. with a seeded rng).

        Raises:
            NoDataError: If records is empty.
        """
        if not records:
            raise NoDataError("No valid records found after filtering")
        self.records = list(records)
        self._config = config
        self.config_data: DashboardConfigData = config.data if config is not None else DashboardConfigData()
        self.figure_generator = figure_generator or FigureGenerator(
            strip_jitter_amount=self.config_data.strip_jitter_amount,
            strip_point_size=self.config_data.strip_point_size,
        )

        # Distribution view is unavailable (not fatal) when no record has a known classification
        self.summaries: tuple[GroupSummary, ...] = ()
        self.summaries_error: Optional[NoDataError] = None
        try:
            self.summaries = aggregate(self.records)
        except NoDataError as e:
            logger.warning(f"Distribution view disabled: {e}")
            self.summaries_error = e

        self.selection = SelectionController()
        self.selection.add_listener(self._on_selection_changed)

        # UI handles
        self._distribution_plot: Optional[ui.plotly] = None
        self._selection_label: Optional[ui.label] = None
        self._clicked_label: Optional[ui.label] = None

    # ----------------------------
    # Figures
    # ----------------------------

    def figure_for(self, view: DashboardView) -> dict:
        return self.figure_generator.make_figure(view, self.records, self.summaries, self.selection.state)

    def remember_view(self, view: DashboardView) -> None:
        """Make view the tab opened on the next page load; saved when a config file is attached."""
        if self.config_data.default_view == view.value:
            return
        self.config_data.default_view = view.value
        if self._config is None:
            return
        try:
            self._config.save()
        except OSError as e:
            logger.warning(f"Could not remember tab {view.value}: {e}")

    # ----------------------------
    # UI
    # ----------------------------

    def build(self, *, container: Optional[ui.element] = None) -> None:
        """Build the dashboard UI (public API). Call once to render.

        Args:
            container: Optional NiceGUI container to build into. If None, widgets
                are created at the current top level.
        """
        def _build_content():
            default_view = DashboardView(self.config_data.default_view)
            with ui.tabs(on_change=self._on_tab_changed).classes("w-full") as tabs:
                tab_map = {view: ui.tab(view.value, label=view.title) for view in DashboardView}
            with ui.tab_panels(tabs, value=tab_map[default_view]).classes("w-full"):
                with ui.tab_panel(tab_map[DashboardView.TIMELINE]):
                    ui.plotly(self.figure_for(DashboardView.TIMELINE)).classes("w-full h-[520px]")
                with ui.tab_panel(tab_map[DashboardView.PRICE]):
                    ui.plotly(self.figure_for(DashboardView.PRICE)).classes("w-full h-[520px]")
                with ui.tab_panel(tab_map[DashboardView.DISTRIBUTION]):
                    self._build_distribution()
            # Global Esc to clear selection
            ui.keyboard(on_key=self._on_keyboard_key)

        if container is not None:
            with container:
                _build_content()
        else:
            _build_content()

    def _build_distribution(self) -> None:
        if self.summaries_error is not None:
            ui.label(f"Distribution unavailable: {self.summaries_error}").classes("text-negative")
            return

        with ui.row().classes("w-full items-center gap-3 flex-wrap"):
            self._selection_label = ui.label(self.selection.state.describe()).classes("text-sm font-medium")
            self._clicked_label = ui.label("Click a box to show its daily values").classes("text-sm text-gray-600")
            ui.button("Clear selection", on_click=self._clear_selection).classes("text-sm")

        plot = ui.plotly(self.figure_for(DashboardView.DISTRIBUTION)).classes("w-full h-[520px]")
        plot.on("plotly_click", self._on_plotly_click)
        plot.on("plotly_doubleclick", lambda e: self.selection.click_background())
        self._distribution_plot = plot

        table_df = summary_table(self.summaries)
        columns = [{"name": c, "label": c, "field": c, "align": "left"} for c in table_df.columns]
        rows = [{k: _format_stat(v) for k, v in row.items()} for row in table_df.to_dict(orient="records")]
        ui.table(columns=columns, rows=rows, row_key="category").classes("w-full")

    # ----------------------------
    # Events
    # ----------------------------

    def _on_plotly_click(self, e: GenericEventArguments) -> None:
        """Handle click events on the distribution plot."""
        args = e.args if isinstance(e.args, dict) else {}
        points = args.get("points") or []
        if points and isinstance(points[0], dict) and is_strip_point(points[0]):
            label, date = points[0]["customdata"][0], points[0]["customdata"][1]
            if self._clicked_label:
                self._clicked_label.text = f"{label}: {date} value={points[0].get('y')}"
            return
        event = event_from_click(args, self.summaries)
        if event is None:
            return
        self.selection.dispatch(event)

    def _on_tab_changed(self, e) -> None:
        view = view_from_tab_value(getattr(e, "value", None))
        if view is not None:
            self.remember_view(view)

    def _on_keyboard_key(self, e) -> None:
        key_name = getattr(getattr(e, "key", None), "name", None) if e else None
        action = getattr(e, "action", None)
        if key_name == "Escape" and getattr(action, "keydown", False):
            if not self.selection.state.is_idle:
                self.selection.click_background()

    def _clear_selection(self) -> None:
        self.selection.click_background()

    def _on_selection_changed(self, state: SelectionState) -> None:
        """Re-render the distribution figure after every transition."""
        if self._selection_label is not None:
            self._selection_label.text = state.describe()
        if self._distribution_plot is None:
            return
        try:
            self._distribution_plot.update_figure(self.figure_generator.render(self.summaries, state))
            self._distribution_plot.update()
        except Exception as ex:
            logger.exception(f"Error re-rendering distribution plot: {ex}")
