"""Adaptive axis tick labels.

A tick's label depends on where it sits relative to its neighbours rather
than on the tick alone: the first visible tick and ticks that roll over a
coarser calendar field carry full context, routine ticks only carry the
part that changed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
import logging
from typing import Callable, Iterable, Literal

from .scales import format_tick, generate_nice_ticks, tick_step, visible_ticks

LOGGER = logging.getLogger(__name__)

AxisKind = Literal["numeric", "time"]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ENGLISH_MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
UNDEFINED_LABEL = "??"


class CalendarUnit(str, Enum):
    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


CALENDAR_UNITS = tuple(CalendarUnit)


class LabelPath(str, Enum):
    FIRST = "first"
    BOUNDARY_CHANGED = "boundary_changed"
    ROUTINE = "routine"


@dataclass(frozen=True)
class TickContext:
    position: float
    is_first_visible: bool = False
    calendar_unit_changed: bool = False
    calendar_unit: CalendarUnit | None = None


@dataclass(frozen=True)
class TickLabelConfig:
    axis: AxisKind = "time"
    tz: tzinfo = timezone.utc
    month_names: tuple[str, ...] = ENGLISH_MONTH_ABBREVIATIONS
    clock_24h: bool = True
    day_first: bool = False
    show_millis: bool = False
    # None selects decimal labels sharing the tick spacing's precision.
    numeric_formatter: Callable[[float], str] | None = None
    undefined_label: str = UNDEFINED_LABEL

    def __post_init__(self) -> None:
        if self.axis not in {"numeric", "time"}:
            raise ValueError("axis must be 'numeric' or 'time'")
        if len(self.month_names) != 12:
            raise ValueError("month_names must have 12 entries")


@dataclass(frozen=True)
class NotYetDefined:
    """Marks a (unit, path) pair whose label has no agreed format."""

    unit: CalendarUnit
    path: LabelPath


LabelRule = Callable[[datetime, TickLabelConfig], str]


def label_path(ctx: TickContext) -> LabelPath:
    if ctx.is_first_visible:
        return LabelPath.FIRST
    if ctx.calendar_unit_changed:
        return LabelPath.BOUNDARY_CHANGED
    return LabelPath.ROUTINE


def to_datetime(position_ms: float, tz: tzinfo) -> datetime:
    return (EPOCH + timedelta(milliseconds=float(position_ms))).astimezone(tz)


def to_position(dt: datetime) -> float:
    return (dt - EPOCH) / timedelta(milliseconds=1)


def _millis(dt: datetime) -> str:
    return f"{dt.microsecond // 1000:03d}"


def _clock(dt: datetime, config: TickLabelConfig, *, seconds: bool = False, millis: bool = False) -> str:
    """Wall-clock time; in 12-hour mode the am/pm suffix follows any seconds."""

    tail = f":{dt.second:02d}" if seconds or millis else ""
    if millis:
        tail += f".{_millis(dt)}"
    if config.clock_24h:
        return f"{dt.hour:02d}:{dt.minute:02d}{tail}"
    hour = dt.hour % 12 or 12
    suffix = "am" if dt.hour < 12 else "pm"
    return f"{hour}:{dt.minute:02d}{tail}{suffix}"


def _month(dt: datetime, config: TickLabelConfig) -> str:
    return config.month_names[dt.month - 1]


def _short_date(dt: datetime, config: TickLabelConfig) -> str:
    if config.day_first:
        return f"{dt.day} {_month(dt, config)}"
    return f"{_month(dt, config)} {dt.day}"


def _full_millisecond(dt: datetime, config: TickLabelConfig) -> str:
    return _clock(dt, config, millis=True)


def _full_second(dt: datetime, config: TickLabelConfig) -> str:
    return _clock(dt, config, seconds=True, millis=config.show_millis)


def _full_minute(dt: datetime, config: TickLabelConfig) -> str:
    return _clock(dt, config)


def _full_hour(dt: datetime, config: TickLabelConfig) -> str:
    return f"{_short_date(dt, config)} {_clock(dt, config)}"


def _full_day(dt: datetime, config: TickLabelConfig) -> str:
    return _short_date(dt, config)


def _full_month(dt: datetime, config: TickLabelConfig) -> str:
    return f"{_month(dt, config)} {dt.year}"


def _year(dt: datetime, config: TickLabelConfig) -> str:
    return str(dt.year)


def _routine_millisecond(dt: datetime, config: TickLabelConfig) -> str:
    return f".{_millis(dt)}"


def _routine_second(dt: datetime, config: TickLabelConfig) -> str:
    return f":{dt.second:02d}"


def _routine_minute(dt: datetime, config: TickLabelConfig) -> str:
    return f":{dt.minute:02d}"


def _routine_hour(dt: datetime, config: TickLabelConfig) -> str:
    return _clock(dt, config)


def _routine_day(dt: datetime, config: TickLabelConfig) -> str:
    return str(dt.day)


def _routine_month(dt: datetime, config: TickLabelConfig) -> str:
    return _month(dt, config)


_FULL_RULES: dict[CalendarUnit, LabelRule] = {
    CalendarUnit.MILLISECOND: _full_millisecond,
    CalendarUnit.SECOND: _full_second,
    CalendarUnit.MINUTE: _full_minute,
    CalendarUnit.HOUR: _full_hour,
    CalendarUnit.DAY: _full_day,
    CalendarUnit.MONTH: _full_month,
    CalendarUnit.YEAR: _year,
}

_ROUTINE_RULES: dict[CalendarUnit, LabelRule] = {
    CalendarUnit.MILLISECOND: _routine_millisecond,
    CalendarUnit.SECOND: _routine_second,
    CalendarUnit.MINUTE: _routine_minute,
    CalendarUnit.HOUR: _routine_hour,
    CalendarUnit.DAY: _routine_day,
    CalendarUnit.MONTH: _routine_month,
    CalendarUnit.YEAR: _year,
}


def _build_rule_table() -> dict[tuple[CalendarUnit, LabelPath], LabelRule | NotYetDefined]:
    table: dict[tuple[CalendarUnit, LabelPath], LabelRule | NotYetDefined] = {}
    for unit in CALENDAR_UNITS:
        table[(unit, LabelPath.FIRST)] = _FULL_RULES[unit]
        table[(unit, LabelPath.BOUNDARY_CHANGED)] = _FULL_RULES[unit]
        table[(unit, LabelPath.ROUTINE)] = _ROUTINE_RULES[unit]
    # No coarser field rolls over above a year; the label for this case is undecided.
    table[(CalendarUnit.YEAR, LabelPath.BOUNDARY_CHANGED)] = NotYetDefined(
        CalendarUnit.YEAR, LabelPath.BOUNDARY_CHANGED
    )
    return table


LABEL_RULES = _build_rule_table()

_warned_undefined: set[tuple[CalendarUnit, LabelPath]] = set()


def rule_for(unit: CalendarUnit, path: LabelPath) -> LabelRule | NotYetDefined:
    return LABEL_RULES[(unit, path)]


def format_tick_label(ctx: TickContext, config: TickLabelConfig) -> str:
    """Label one tick given its neighbourhood context.

    Never raises for a finite position: instants outside the range a
    `datetime` can hold fall back to the numeric label with a warning.
    """

    if config.axis == "numeric":
        return _numeric_label(ctx.position, config, step=None)
    if ctx.calendar_unit is None:
        raise ValueError("time axis ticks require a calendar_unit")
    rule = rule_for(ctx.calendar_unit, label_path(ctx))
    if isinstance(rule, NotYetDefined):
        key = (rule.unit, rule.path)
        if key not in _warned_undefined:
            _warned_undefined.add(key)
            LOGGER.warning("no label format defined for %s ticks on the %s path", rule.unit.value, rule.path.value)
        return config.undefined_label
    try:
        dt = to_datetime(ctx.position, config.tz)
    except (OverflowError, ValueError):
        LOGGER.warning("time tick at %r ms is outside the supported date range", ctx.position)
        return _numeric_label(ctx.position, config, step=None)
    return rule(dt, config)


def label_ticks(contexts: Iterable[TickContext], config: TickLabelConfig) -> list[str]:
    contexts = list(contexts)
    if config.axis == "numeric":
        step = tick_step(ctx.position for ctx in contexts)
        return [_numeric_label(ctx.position, config, step=step) for ctx in contexts]
    return [format_tick_label(ctx, config) for ctx in contexts]


def _numeric_label(position: float, config: TickLabelConfig, *, step: float | None) -> str:
    if config.numeric_formatter is not None:
        return config.numeric_formatter(position)
    return format_tick(position, step=step)


def numeric_tick_contexts(vmin: float, vmax: float, target: int) -> list[TickContext]:
    ticks = visible_ticks(generate_nice_ticks(vmin, vmax, target), vmin, vmax)
    return [TickContext(position=float(v), is_first_visible=(i == 0)) for i, v in enumerate(ticks)]
