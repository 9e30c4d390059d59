from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
import logging
from typing import Any, Callable

from .scales import DataLimits
from .zoom import (
    UNZOOMED,
    AutoFit,
    AxisRange,
    AxisViewport,
    AxisWindows,
    CommittedRanges,
    Zoomed,
    ZoomWindow,
)

LOGGER = logging.getLogger(__name__)

# A press followed by at most this many moves is a click, not a drag.
CLICK_MOVE_LIMIT = 2
DEFAULT_AUTO_FIT_PADDING_PX = 20.0


@dataclass(frozen=True)
class AxisAccessors:
    """Projects caller records onto the x and y data axes."""

    x: Callable[[Any], float]
    y: Callable[[Any], float]


@dataclass(frozen=True)
class PointerDown:
    point: Any


@dataclass(frozen=True)
class PointerMove:
    point: Any


@dataclass(frozen=True)
class PointerUp:
    point: Any


@dataclass(frozen=True)
class Hover:
    point: Any | None


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class ResetZoom:
    pass


InteractionEvent = PointerDown | PointerMove | PointerUp | Hover | PointerLeave | ResetZoom


@dataclass(frozen=True)
class InteractionState:
    drag_anchor: Any | None = None
    hovered: Any | None = None
    drag_cursor: Any | None = None
    drag_move_count: int = 0
    windows: AxisWindows = field(default_factory=AxisWindows)
    committed: CommittedRanges = field(default_factory=CommittedRanges)

    def __post_init__(self) -> None:
        if self.drag_move_count < 0:
            raise ValueError("drag_move_count must be >= 0")

    @property
    def is_dragging(self) -> bool:
        return self.drag_anchor is not None

    @property
    def x_window(self) -> ZoomWindow:
        return self.windows.x

    @property
    def y_window(self) -> ZoomWindow:
        return self.windows.y


def transition(
    event: InteractionEvent,
    state: InteractionState,
    accessors: AxisAccessors,
    *,
    click_move_limit: int = CLICK_MOVE_LIMIT,
) -> InteractionState:
    """Apply one pointer event and return the next state.

    Events must be applied in delivery order; `drag_move_count` counts every
    `PointerMove` seen while a drag is active. Events that make no sense in
    the current state (an up without a down, a move without a drag) return
    the state unchanged.
    """

    if isinstance(event, PointerDown):
        if state.drag_anchor is None:
            return dataclasses.replace(
                state,
                drag_anchor=event.point,
                hovered=None,
                drag_cursor=None,
                drag_move_count=0,
            )
        # A second down without an up finalizes the pending drag at the new point.
        return _commit(state, state.drag_anchor, event.point, accessors, click_move_limit)

    if isinstance(event, PointerMove):
        if state.drag_anchor is None:
            return state
        return dataclasses.replace(
            state,
            drag_cursor=event.point,
            drag_move_count=state.drag_move_count + 1,
        )

    if isinstance(event, Hover):
        return dataclasses.replace(state, hovered=event.point)

    if isinstance(event, PointerUp):
        if state.drag_anchor is None:
            return state
        return _commit(state, state.drag_anchor, event.point, accessors, click_move_limit)

    if isinstance(event, PointerLeave):
        return dataclasses.replace(state, hovered=None)

    if isinstance(event, ResetZoom):
        return dataclasses.replace(state, windows=AxisWindows(x=UNZOOMED, y=UNZOOMED))

    return state


def _commit(
    state: InteractionState,
    anchor: Any,
    release: Any,
    accessors: AxisAccessors,
    click_move_limit: int,
) -> InteractionState:
    dragged = state.drag_move_count > click_move_limit
    x_window, x_range = _commit_axis(accessors.x, anchor, release, dragged)
    y_window, y_range = _commit_axis(accessors.y, anchor, release, dragged)
    return dataclasses.replace(
        state,
        drag_anchor=None,
        drag_cursor=None,
        drag_move_count=0,
        windows=AxisWindows(x=x_window, y=y_window),
        committed=CommittedRanges(
            x=state.committed.x if x_range is None else x_range,
            y=state.committed.y if y_range is None else y_range,
        ),
    )


def _commit_axis(
    accessor: Callable[[Any], float],
    anchor: Any,
    release: Any,
    dragged: bool,
) -> tuple[ZoomWindow, AxisRange | None]:
    if not dragged:
        return UNZOOMED, None
    a = float(accessor(anchor))
    b = float(accessor(release))
    lo = min(a, b)
    hi = max(a, b)
    return Zoomed(lo, hi), AxisRange(lo, hi)


def visible_range(window: ZoomWindow, *, padding_px: float = DEFAULT_AUTO_FIT_PADDING_PX) -> AxisViewport:
    if isinstance(window, Zoomed):
        return AxisRange(window.min, window.max)
    return AutoFit(padding_px=padding_px)


def visible_range_x(state: InteractionState, *, padding_px: float = DEFAULT_AUTO_FIT_PADDING_PX) -> AxisViewport:
    return visible_range(state.windows.x, padding_px=padding_px)


def visible_range_y(state: InteractionState, *, padding_px: float = DEFAULT_AUTO_FIT_PADDING_PX) -> AxisViewport:
    return visible_range(state.windows.y, padding_px=padding_px)


def drag_rectangle(state: InteractionState, accessors: AxisAccessors) -> DataLimits | None:
    """Data-space rectangle between the drag anchor and the live cursor."""

    if state.drag_anchor is None or state.drag_cursor is None:
        return None
    ax = float(accessors.x(state.drag_anchor))
    ay = float(accessors.y(state.drag_anchor))
    cx = float(accessors.x(state.drag_cursor))
    cy = float(accessors.y(state.drag_cursor))
    return DataLimits(xmin=min(ax, cx), xmax=max(ax, cx), ymin=min(ay, cy), ymax=max(ay, cy))


def hover_target(state: InteractionState) -> Any | None:
    return state.hovered


class ChartInteraction:
    """Owns the interaction state of one chart instance.

    Not thread-safe: a single event source must feed `dispatch`.
    """

    def __init__(
        self,
        accessors: AxisAccessors,
        *,
        click_move_limit: int = CLICK_MOVE_LIMIT,
        auto_fit_padding_px: float = DEFAULT_AUTO_FIT_PADDING_PX,
    ) -> None:
        if click_move_limit < 0:
            raise ValueError("click_move_limit must be >= 0")
        if auto_fit_padding_px < 0:
            raise ValueError("auto_fit_padding_px must be >= 0")
        self._accessors = accessors
        self._click_move_limit = click_move_limit
        self._auto_fit_padding_px = float(auto_fit_padding_px)
        self._state = InteractionState()

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def accessors(self) -> AxisAccessors:
        return self._accessors

    def dispatch(self, event: InteractionEvent) -> InteractionState:
        prev = self._state
        nxt = transition(event, prev, self._accessors, click_move_limit=self._click_move_limit)
        if prev.drag_anchor is not None and nxt.drag_anchor is None:
            if nxt.windows == AxisWindows():
                LOGGER.debug("click after %d moves; zoom reverted", prev.drag_move_count)
            else:
                LOGGER.debug("zoom committed x=%s y=%s", nxt.windows.x, nxt.windows.y)
        self._state = nxt
        return nxt

    def reset_zoom(self) -> InteractionState:
        return self.dispatch(ResetZoom())

    def visible_range_x(self) -> AxisViewport:
        return visible_range_x(self._state, padding_px=self._auto_fit_padding_px)

    def visible_range_y(self) -> AxisViewport:
        return visible_range_y(self._state, padding_px=self._auto_fit_padding_px)

    def drag_rectangle(self) -> DataLimits | None:
        return drag_rectangle(self._state, self._accessors)

    def hover_target(self) -> Any | None:
        return hover_target(self._state)
