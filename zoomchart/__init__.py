from zoomchart.config import ChartConfig, InteractionConfig, TickConfig, load_chart_config
from zoomchart.errors import ChartConfigError, PlotDataError
from zoomchart.interaction import (
    AxisAccessors,
    ChartInteraction,
    Hover,
    InteractionState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    ResetZoom,
    drag_rectangle,
    hover_target,
    transition,
    visible_range_x,
    visible_range_y,
)
from zoomchart.pointer import PlotPoint, PointerDecoder, parse_hdi_pointer_event, route_pointer_event
from zoomchart.tick_labels import (
    CalendarUnit,
    TickContext,
    TickLabelConfig,
    format_tick_label,
    label_ticks,
    numeric_tick_contexts,
)
from zoomchart.time_ticks import generate_time_ticks
from zoomchart.zoom import UNZOOMED, AutoFit, AxisRange, Unzoomed, Zoomed

__all__ = [
    "UNZOOMED",
    "AutoFit",
    "AxisAccessors",
    "AxisRange",
    "CalendarUnit",
    "ChartConfig",
    "ChartConfigError",
    "ChartInteraction",
    "Hover",
    "InteractionConfig",
    "InteractionState",
    "PlotDataError",
    "PlotPoint",
    "PointerDecoder",
    "PointerDown",
    "PointerLeave",
    "PointerMove",
    "PointerUp",
    "ResetZoom",
    "TickConfig",
    "TickContext",
    "TickLabelConfig",
    "Unzoomed",
    "Zoomed",
    "drag_rectangle",
    "format_tick_label",
    "generate_time_ticks",
    "hover_target",
    "label_ticks",
    "load_chart_config",
    "numeric_tick_contexts",
    "parse_hdi_pointer_event",
    "route_pointer_event",
    "transition",
    "visible_range_x",
    "visible_range_y",
]
