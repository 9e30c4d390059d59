from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
import logging

from .scales import nice_number
from .tick_labels import CALENDAR_UNITS, CalendarUnit, TickContext, to_datetime, to_position

LOGGER = logging.getLogger(__name__)

MAX_TIME_TICKS = 1000

# Nominal unit lengths, only used to pick a step.
_UNIT_MS: dict[CalendarUnit, float] = {
    CalendarUnit.MILLISECOND: 1.0,
    CalendarUnit.SECOND: 1_000.0,
    CalendarUnit.MINUTE: 60_000.0,
    CalendarUnit.HOUR: 3_600_000.0,
    CalendarUnit.DAY: 86_400_000.0,
    CalendarUnit.MONTH: 30.44 * 86_400_000.0,
    CalendarUnit.YEAR: 365.25 * 86_400_000.0,
}

_STEP_LADDER: tuple[tuple[CalendarUnit, int], ...] = (
    (CalendarUnit.MILLISECOND, 1),
    (CalendarUnit.MILLISECOND, 2),
    (CalendarUnit.MILLISECOND, 5),
    (CalendarUnit.MILLISECOND, 10),
    (CalendarUnit.MILLISECOND, 20),
    (CalendarUnit.MILLISECOND, 50),
    (CalendarUnit.MILLISECOND, 100),
    (CalendarUnit.MILLISECOND, 200),
    (CalendarUnit.MILLISECOND, 500),
    (CalendarUnit.SECOND, 1),
    (CalendarUnit.SECOND, 2),
    (CalendarUnit.SECOND, 5),
    (CalendarUnit.SECOND, 10),
    (CalendarUnit.SECOND, 15),
    (CalendarUnit.SECOND, 30),
    (CalendarUnit.MINUTE, 1),
    (CalendarUnit.MINUTE, 2),
    (CalendarUnit.MINUTE, 5),
    (CalendarUnit.MINUTE, 10),
    (CalendarUnit.MINUTE, 15),
    (CalendarUnit.MINUTE, 30),
    (CalendarUnit.HOUR, 1),
    (CalendarUnit.HOUR, 2),
    (CalendarUnit.HOUR, 3),
    (CalendarUnit.HOUR, 6),
    (CalendarUnit.HOUR, 12),
    (CalendarUnit.DAY, 1),
    (CalendarUnit.DAY, 2),
    (CalendarUnit.DAY, 7),
    (CalendarUnit.DAY, 14),
    (CalendarUnit.MONTH, 1),
    (CalendarUnit.MONTH, 2),
    (CalendarUnit.MONTH, 3),
    (CalendarUnit.MONTH, 6),
)


@dataclass(frozen=True)
class TimeStep:
    unit: CalendarUnit
    multiple: int

    def __post_init__(self) -> None:
        if self.multiple <= 0:
            raise ValueError("multiple must be > 0")

    @property
    def nominal_ms(self) -> float:
        return _UNIT_MS[self.unit] * self.multiple


def choose_time_step(span_ms: float, target: int) -> TimeStep:
    if target <= 0:
        raise ValueError("target must be > 0")
    ideal = max(float(span_ms), 1.0) / float(target)
    for unit, multiple in _STEP_LADDER:
        if _UNIT_MS[unit] * multiple >= ideal:
            return TimeStep(unit, multiple)
    years = nice_number(ideal / _UNIT_MS[CalendarUnit.YEAR], round_result=True)
    return TimeStep(CalendarUnit.YEAR, max(1, int(round(years))))


def add_months(dt: datetime, months: int) -> datetime:
    if months == 0:
        return dt
    total = (dt.year * 12) + (dt.month - 1) + int(months)
    year = total // 12
    month = (total % 12) + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def floor_to_step(dt: datetime, step: TimeStep) -> datetime:
    k = step.multiple
    unit = step.unit
    if unit is CalendarUnit.MILLISECOND:
        ms = dt.microsecond // 1000
        return dt.replace(microsecond=(ms // k) * k * 1000)
    dt = dt.replace(microsecond=0)
    if unit is CalendarUnit.SECOND:
        return dt.replace(second=(dt.second // k) * k)
    dt = dt.replace(second=0)
    if unit is CalendarUnit.MINUTE:
        return dt.replace(minute=(dt.minute // k) * k)
    dt = dt.replace(minute=0)
    if unit is CalendarUnit.HOUR:
        return dt.replace(hour=(dt.hour // k) * k)
    dt = dt.replace(hour=0)
    if unit is CalendarUnit.DAY:
        return dt.replace(day=((dt.day - 1) // k) * k + 1)
    dt = dt.replace(day=1)
    if unit is CalendarUnit.MONTH:
        return dt.replace(month=((dt.month - 1) // k) * k + 1)
    return dt.replace(month=1, year=max(1, (dt.year // k) * k))


def advance(dt: datetime, step: TimeStep) -> datetime:
    unit = step.unit
    if unit is CalendarUnit.MONTH:
        return add_months(dt, step.multiple)
    if unit is CalendarUnit.YEAR:
        return add_months(dt, 12 * step.multiple)
    if unit is CalendarUnit.DAY:
        # Wall-clock arithmetic keeps midnight aligned across DST shifts.
        nxt = dt + timedelta(days=step.multiple)
        if nxt.month != dt.month:
            # Multi-day grids restart at the first of each month.
            return nxt.replace(day=1)
        return nxt
    # Step in elapsed time, then snap back onto the local grid so a DST
    # shift does not carry the offset into later ticks.
    tz = dt.tzinfo
    delta = timedelta(milliseconds=_UNIT_MS[unit] * step.multiple)
    origin = to_position(dt)
    candidate = dt
    while True:
        candidate = (candidate.astimezone(timezone.utc) + delta).astimezone(tz)
        aligned = floor_to_step(candidate, step)
        if to_position(aligned) > origin:
            return aligned


def calendar_unit_changed(prev: datetime, current: datetime, unit: CalendarUnit) -> bool:
    """True when a field coarser than `unit` differs between two ticks."""

    fields = (
        current.year != prev.year,
        current.month != prev.month,
        current.day != prev.day,
        current.hour != prev.hour,
        current.minute != prev.minute,
        current.second != prev.second,
    )
    # Fields strictly coarser than `unit`, in year..second order.
    coarser = len(CALENDAR_UNITS) - 1 - CALENDAR_UNITS.index(unit)
    return any(fields[:coarser])


def generate_time_ticks(vmin_ms: float, vmax_ms: float, target: int, *, tz: tzinfo = timezone.utc) -> list[TickContext]:
    """Calendar-aligned ticks within [vmin_ms, vmax_ms], labeled with neighbourhood context."""

    if target <= 0:
        raise ValueError("target must be > 0")
    lo = min(float(vmin_ms), float(vmax_ms))
    hi = max(float(vmin_ms), float(vmax_ms))
    step = choose_time_step(hi - lo, target)

    try:
        current = floor_to_step(to_datetime(lo, tz), step)
    except (OverflowError, ValueError):
        LOGGER.warning("time axis starting at %r ms is outside the supported date range", lo)
        return []
    out: list[TickContext] = []
    prev: datetime | None = None
    while len(out) < MAX_TIME_TICKS:
        position = to_position(current)
        if position > hi:
            break
        if position >= lo:
            out.append(
                TickContext(
                    position=position,
                    is_first_visible=prev is None,
                    calendar_unit_changed=prev is not None and calendar_unit_changed(prev, current, step.unit),
                    calendar_unit=step.unit,
                )
            )
            prev = current
        try:
            current = advance(current, step)
        except (OverflowError, ValueError):
            # Ran past the last representable date.
            break
    return out
