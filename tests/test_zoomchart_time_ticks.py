from __future__ import annotations

from datetime import datetime, timezone
import unittest
from zoneinfo import ZoneInfo

from zoomchart.tick_labels import CalendarUnit, TickLabelConfig, label_ticks, to_datetime, to_position
from zoomchart.time_ticks import (
    TimeStep,
    add_months,
    calendar_unit_changed,
    choose_time_step,
    floor_to_step,
    generate_time_ticks,
)


UTC = timezone.utc
NEW_YORK = ZoneInfo("America/New_York")


def _ms(*args: int) -> float:
    return to_position(datetime(*args, tzinfo=UTC))


class TimeStepTests(unittest.TestCase):
    def test_step_ladder_picks_smallest_step_covering_target(self) -> None:
        self.assertEqual(choose_time_step(60_000.0, 6), TimeStep(CalendarUnit.SECOND, 10))
        self.assertEqual(choose_time_step(3 * 86_400_000.0, 4), TimeStep(CalendarUnit.DAY, 1))
        self.assertEqual(choose_time_step(3.0, 6), TimeStep(CalendarUnit.MILLISECOND, 1))

    def test_long_spans_fall_back_to_nice_year_multiples(self) -> None:
        step = choose_time_step(_ms(2020, 1, 1) - _ms(2000, 1, 1), 5)
        self.assertEqual(step, TimeStep(CalendarUnit.YEAR, 5))

    def test_invalid_inputs_rejected(self) -> None:
        with self.assertRaises(ValueError):
            choose_time_step(1000.0, 0)
        with self.assertRaises(ValueError):
            TimeStep(CalendarUnit.DAY, 0)
        with self.assertRaises(ValueError):
            generate_time_ticks(0.0, 1000.0, 0)

    def test_floor_aligns_to_calendar_boundaries(self) -> None:
        dt = datetime(2024, 8, 17, 13, 47, 29, 123_456, tzinfo=UTC)
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.MILLISECOND, 50)), dt.replace(microsecond=100_000))
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.SECOND, 15)), datetime(2024, 8, 17, 13, 47, 15, tzinfo=UTC))
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.HOUR, 6)), datetime(2024, 8, 17, 12, tzinfo=UTC))
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.DAY, 7)), datetime(2024, 8, 15, tzinfo=UTC))
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.MONTH, 3)), datetime(2024, 7, 1, tzinfo=UTC))
        self.assertEqual(floor_to_step(dt, TimeStep(CalendarUnit.YEAR, 10)), datetime(2020, 1, 1, tzinfo=UTC))

    def test_add_months_clamps_day(self) -> None:
        self.assertEqual(add_months(datetime(2024, 1, 31, tzinfo=UTC), 1), datetime(2024, 2, 29, tzinfo=UTC))
        self.assertEqual(add_months(datetime(2023, 11, 15, tzinfo=UTC), 3), datetime(2024, 2, 15, tzinfo=UTC))

    def test_unit_change_only_considers_coarser_fields(self) -> None:
        a = datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC)
        b = datetime(2024, 2, 1, 0, 0, 0, tzinfo=UTC)
        self.assertTrue(calendar_unit_changed(a, b, CalendarUnit.SECOND))
        self.assertTrue(calendar_unit_changed(a, b, CalendarUnit.DAY))
        self.assertFalse(calendar_unit_changed(b, b.replace(second=30), CalendarUnit.SECOND))
        self.assertFalse(calendar_unit_changed(a, b.replace(year=2025), CalendarUnit.YEAR))


class GenerateTimeTicksTests(unittest.TestCase):
    def test_day_ticks_flag_month_boundary(self) -> None:
        ticks = generate_time_ticks(_ms(2024, 1, 30), _ms(2024, 2, 2), 4)
        self.assertEqual([to_datetime(t.position, UTC).day for t in ticks], [30, 31, 1, 2])
        self.assertEqual([t.is_first_visible for t in ticks], [True, False, False, False])
        self.assertEqual([t.calendar_unit_changed for t in ticks], [False, False, True, False])
        self.assertEqual(label_ticks(ticks, TickLabelConfig()), ["Jan 30", "31", "Feb 1", "2"])

    def test_second_ticks_reestablish_context_on_new_minute(self) -> None:
        ticks = generate_time_ticks(_ms(2024, 3, 5, 12, 34, 50), _ms(2024, 3, 5, 12, 35, 10), 4)
        self.assertTrue(all(t.calendar_unit is CalendarUnit.SECOND for t in ticks))
        self.assertEqual(label_ticks(ticks, TickLabelConfig()), ["12:34:50", ":55", "12:35:00", ":05", ":10"])

    def test_month_ticks_show_year_when_it_rolls_over(self) -> None:
        ticks = generate_time_ticks(_ms(2023, 11, 1), _ms(2024, 3, 1), 4)
        self.assertEqual(label_ticks(ticks, TickLabelConfig()), ["Nov 2023", "Dec", "Jan 2024", "Feb", "Mar"])

    def test_year_ticks_never_report_boundary_change(self) -> None:
        ticks = generate_time_ticks(_ms(2000, 1, 1), _ms(2020, 1, 1), 5)
        self.assertEqual([to_datetime(t.position, UTC).year for t in ticks], [2000, 2005, 2010, 2015, 2020])
        self.assertFalse(any(t.calendar_unit_changed for t in ticks))
        self.assertEqual(label_ticks(ticks, TickLabelConfig()), ["2000", "2005", "2010", "2015", "2020"])

    def test_ticks_stay_within_range_and_accept_reversed_bounds(self) -> None:
        lo = _ms(2024, 3, 5, 12, 0, 7)
        hi = _ms(2024, 3, 5, 12, 1, 53)
        ticks = generate_time_ticks(hi, lo, 6)
        self.assertTrue(ticks)
        self.assertTrue(all(lo <= t.position <= hi for t in ticks))
        self.assertEqual(sum(t.is_first_visible for t in ticks), 1)
        positions = [t.position for t in ticks]
        self.assertEqual(positions, sorted(positions))

    def test_multi_day_grid_restarts_each_month(self) -> None:
        ticks = generate_time_ticks(_ms(2024, 1, 1), _ms(2024, 3, 1), 5)
        days = [(to_datetime(t.position, UTC).month, to_datetime(t.position, UTC).day) for t in ticks]
        self.assertEqual(days, [(1, 1), (1, 15), (1, 29), (2, 1), (2, 15), (2, 29), (3, 1)])

    def test_hour_grid_stays_on_local_multiples_across_spring_forward(self) -> None:
        lo = to_position(datetime(2024, 3, 10, 0, 0, tzinfo=NEW_YORK))
        hi = to_position(datetime(2024, 3, 10, 18, 0, tzinfo=NEW_YORK))
        ticks = generate_time_ticks(lo, hi, 6, tz=NEW_YORK)
        self.assertTrue(all(t.calendar_unit is CalendarUnit.HOUR for t in ticks))
        self.assertEqual([to_datetime(t.position, NEW_YORK).hour for t in ticks], [0, 3, 6, 9, 12, 15, 18])

    def test_repeated_hour_after_fall_back_gets_two_ticks(self) -> None:
        lo = to_position(datetime(2024, 11, 3, 0, 0, tzinfo=NEW_YORK))
        hi = to_position(datetime(2024, 11, 3, 4, 0, tzinfo=NEW_YORK))
        ticks = generate_time_ticks(lo, hi, 5, tz=NEW_YORK)
        positions = [t.position for t in ticks]
        self.assertEqual(positions, sorted(set(positions)))
        self.assertEqual([to_datetime(p, NEW_YORK).hour for p in positions], [0, 1, 1, 2, 3, 4])

    def test_ranges_past_datetime_limits_do_not_raise(self) -> None:
        with self.assertLogs("zoomchart.time_ticks", level="WARNING"):
            self.assertEqual(generate_time_ticks(1e15, 1e15 + 86_400_000.0, 4), [])
        lo = _ms(9999, 12, 29)
        ticks = generate_time_ticks(lo, lo + 10 * 86_400_000.0, 10)
        self.assertEqual([to_datetime(t.position, UTC).day for t in ticks], [29, 30, 31])


if __name__ == "__main__":
    unittest.main()
