from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Sequence

import numpy as np

from .errors import PlotDataError
from .interaction import (
    AxisAccessors,
    Hover,
    InteractionEvent,
    InteractionState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
)
from .scales import DataLimits, build_transform, data_to_pixels, pixels_to_data


PointerPhase = Literal["down", "move", "up", "leave"]

_PHASE_BY_EVENT_TYPE: dict[str, PointerPhase] = {
    "pointer_down": "down",
    "pointer_move": "move",
    "mouse_move": "move",
    "trackpad_move": "move",
    "pointer_up": "up",
    "pointer_leave": "leave",
}


@dataclass(frozen=True)
class PlotPoint:
    """Data-space point decoded from a pointer position."""

    x: float
    y: float
    label: str | None = None


PLOT_POINT_ACCESSORS = AxisAccessors(x=lambda p: p.x, y=lambda p: p.y)


@dataclass(frozen=True)
class PointerSample:
    phase: PointerPhase
    x: float | None = None
    y: float | None = None


def parse_hdi_pointer_event(event_type: str, payload: object) -> PointerSample | None:
    """Parse a normalized HDI pointer event into a typed sample.

    Positions are pixels relative to the rendered target. Events without a
    usable position are dropped, except `pointer_leave` which needs none.
    """

    phase = _PHASE_BY_EVENT_TYPE.get(event_type)
    if phase is None:
        return None
    if phase == "leave":
        return PointerSample(phase="leave")
    if not isinstance(payload, Mapping):
        return None
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (np.isfinite(x) and np.isfinite(y)):
        return None
    return PointerSample(phase=phase, x=x, y=y)


class PointerDecoder:
    """Maps plot pixels back to data space for one rendered frame."""

    def __init__(
        self,
        records: Sequence[Any],
        accessors: AxisAccessors,
        limits: DataLimits,
        plot_rect: tuple[int, int, int, int],
        *,
        hover_radius_px: float = 24.0,
        make_point: Callable[[float, float], Any] = PlotPoint,
    ) -> None:
        x0, y0, width, height = plot_rect
        if width <= 1 or height <= 1:
            raise ValueError("plot_rect width/height must be > 1")
        if hover_radius_px < 0:
            raise ValueError("hover_radius_px must be >= 0")
        self._records = list(records)
        self._limits = limits
        self._origin = (float(x0), float(y0))
        self._size = (int(width), int(height))
        self._hover_radius_px = float(hover_radius_px)
        self._make_point = make_point
        try:
            xs = np.asarray([float(accessors.x(r)) for r in self._records], dtype=np.float64)
            ys = np.asarray([float(accessors.y(r)) for r in self._records], dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"record is not projectable onto numeric axes: {exc}") from exc
        transform = build_transform(limits, width, height)
        px, py = data_to_pixels(xs, ys, transform, height)
        self._px = px
        self._py = py
        self._finite = np.isfinite(px) & np.isfinite(py)

    def contains(self, x_px: float, y_px: float) -> bool:
        rel_x, rel_y = self._relative(x_px, y_px)
        width, height = self._size
        return 0.0 <= rel_x < width and 0.0 <= rel_y < height

    def exact(self, x_px: float, y_px: float) -> Any:
        rel_x, rel_y = self._relative(x_px, y_px)
        width, height = self._size
        x, y = pixels_to_data(rel_x, rel_y, self._limits, width, height)
        return self._make_point(x, y)

    def nearest(self, x_px: float, y_px: float) -> Any | None:
        if not self._records or not np.any(self._finite):
            return None
        rel_x, rel_y = self._relative(x_px, y_px)
        dist2 = (self._px - rel_x) ** 2 + (self._py - rel_y) ** 2
        dist2 = np.where(self._finite, dist2, np.inf)
        idx = int(np.argmin(dist2))
        if dist2[idx] > self._hover_radius_px**2:
            return None
        return self._records[idx]

    def _relative(self, x_px: float, y_px: float) -> tuple[float, float]:
        return float(x_px) - self._origin[0], float(y_px) - self._origin[1]


def route_pointer_event(
    sample: PointerSample,
    state: InteractionState,
    decoder: PointerDecoder,
) -> InteractionEvent | None:
    """Choose the interaction event for a pointer sample given the current drag state.

    While a drag is active, moves decode to the exact data position; otherwise
    they resolve to the nearest plotted record and become hover updates.
    """

    if sample.phase == "leave":
        return PointerLeave()
    if sample.x is None or sample.y is None:
        return None
    if sample.phase == "down":
        if not decoder.contains(sample.x, sample.y):
            return None
        return PointerDown(decoder.exact(sample.x, sample.y))
    if sample.phase == "up":
        return PointerUp(decoder.exact(sample.x, sample.y))
    if state.is_dragging:
        return PointerMove(decoder.exact(sample.x, sample.y))
    if not decoder.contains(sample.x, sample.y):
        return Hover(None)
    return Hover(decoder.nearest(sample.x, sample.y))
