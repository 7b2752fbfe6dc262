"""Selection state for the distribution view.

States are Idle (nothing selected) and Selected(category), with an orthogonal
strip_visible flag for the drill-down strip plot:

    Idle         --click(c)-->   Selected(c), strip visible
    Selected(c)  --click(c)-->   Idle, strip hidden
    Selected(c)  --click(c')-->  Selected(c'), strip visible
    any          --background--> Idle, strip hidden

transition() is a pure function; SelectionController owns the one mutable
reference to the current state and notifies listeners after each change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from feargreed.sentiment_widget.categories import Category
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """Which category is selected and whether its strip plot is shown."""
    selected_category: Optional[Category] = None
    strip_visible: bool = False

    @property
    def is_idle(self) -> bool:
        return self.selected_category is None

    def describe(self) -> str:
        """Short label for the UI."""
        if self.selected_category is None:
            return "No selection"
        suffix = " (strip plot shown)" if self.strip_visible else ""
        return f"Selected: {self.selected_category.value}{suffix}"


IDLE = SelectionState()


@dataclass(frozen=True)
class CategoryClicked:
    """User clicked the box (or a point) of a category."""
    category: Category


@dataclass(frozen=True)
class BackgroundClicked:
    """User clicked outside any box, pressed Escape, or asked to clear."""


SelectionEvent = Union[CategoryClicked, BackgroundClicked]


def transition(state: SelectionState, event: SelectionEvent) -> SelectionState:
    """Return the state after event. Does not mutate state."""
    if isinstance(event, BackgroundClicked):
        return IDLE
    if isinstance(event, CategoryClicked):
        if state.selected_category == event.category:
            return IDLE
        return SelectionState(selected_category=event.category, strip_visible=True)
    raise TypeError(f"Unknown selection event: {event!r}")


class VisualWeight(Enum):
    """How prominently a group is drawn."""
    NORMAL = "normal"
    HIGHLIGHTED = "highlighted"
    DIMMED = "dimmed"


# opacity and stroke width per weight
WEIGHT_OPACITY: dict[VisualWeight, float] = {
    VisualWeight.NORMAL: 1.0,
    VisualWeight.HIGHLIGHTED: 1.0,
    VisualWeight.DIMMED: 0.2,
}
WEIGHT_LINE_WIDTH: dict[VisualWeight, float] = {
    VisualWeight.NORMAL: 1.5,
    VisualWeight.HIGHLIGHTED: 3.0,
    VisualWeight.DIMMED: 1.5,
}


def visual_weight(category: Category, state: SelectionState) -> VisualWeight:
    """Weight of the group for category under state."""
    if state.selected_category is None:
        return VisualWeight.NORMAL
    if state.selected_category == category:
        return VisualWeight.HIGHLIGHTED
    return VisualWeight.DIMMED


SelectionListener = Callable[[SelectionState], None]


class SelectionController:
    """Single owner of the current SelectionState.

    dispatch() applies an event via transition(), stores the new state, and
    calls each listener with it. Listeners run synchronously, in
    registration order.
    """

    def __init__(self, initial: SelectionState = IDLE) -> None:
        self._state = initial
        self._listeners: list[SelectionListener] = []

    @property
    def state(self) -> SelectionState:
        return self._state

    def add_listener(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: SelectionEvent) -> SelectionState:
        old = self._state
        new = transition(old, event)
        self._state = new
        logger.info(
            "Selection %s -> %s on %s",
            old.selected_category.value if old.selected_category else "idle",
            new.selected_category.value if new.selected_category else "idle",
            type(event).__name__,
        )
        for listener in self._listeners:
            listener(new)
        return new

    def click_category(self, category: Category) -> SelectionState:
        return self.dispatch(CategoryClicked(category))

    def click_background(self) -> SelectionState:
        return self.dispatch(BackgroundClicked())
