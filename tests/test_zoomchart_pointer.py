from __future__ import annotations

import unittest

from zoomchart.errors import PlotDataError
from zoomchart.interaction import (
    ChartInteraction,
    Hover,
    InteractionState,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
)
from zoomchart.pointer import (
    PLOT_POINT_ACCESSORS,
    PlotPoint,
    PointerDecoder,
    PointerSample,
    parse_hdi_pointer_event,
    route_pointer_event,
)
from zoomchart.scales import DataLimits
from zoomchart.zoom import AxisRange


RECORDS = (PlotPoint(2.0, 3.0, "a"), PlotPoint(8.0, 8.0, "b"))


def _decoder(**kwargs) -> PointerDecoder:
    # 101x101 plot at (10, 20): one data unit is ten pixels.
    return PointerDecoder(
        RECORDS,
        PLOT_POINT_ACCESSORS,
        DataLimits(xmin=0.0, xmax=10.0, ymin=0.0, ymax=10.0),
        (10, 20, 101, 101),
        **kwargs,
    )


class ParsePointerEventTests(unittest.TestCase):
    def test_parses_pointer_phases(self) -> None:
        self.assertEqual(parse_hdi_pointer_event("pointer_down", {"x": 1, "y": 2.5}), PointerSample("down", 1.0, 2.5))
        self.assertEqual(parse_hdi_pointer_event("mouse_move", {"x": 3, "y": 4}), PointerSample("move", 3.0, 4.0))
        self.assertEqual(parse_hdi_pointer_event("pointer_up", {"x": 0, "y": 0}), PointerSample("up", 0.0, 0.0))
        self.assertEqual(parse_hdi_pointer_event("pointer_leave", None), PointerSample("leave"))

    def test_rejects_unknown_or_positionless_events(self) -> None:
        self.assertIsNone(parse_hdi_pointer_event("press", {"phase": "down", "key": "a"}))
        self.assertIsNone(parse_hdi_pointer_event("pointer_move", None))
        self.assertIsNone(parse_hdi_pointer_event("pointer_move", {"x": "left", "y": 1}))
        self.assertIsNone(parse_hdi_pointer_event("pointer_down", {"x": 1}))
        self.assertIsNone(parse_hdi_pointer_event("pointer_down", {"x": float("nan"), "y": 1}))


class PointerDecoderTests(unittest.TestCase):
    def test_exact_inverse_maps_plot_pixels(self) -> None:
        point = _decoder().exact(60.0, 70.0)
        self.assertAlmostEqual(point.x, 5.0)
        self.assertAlmostEqual(point.y, 5.0)

    def test_nearest_returns_record_within_radius(self) -> None:
        decoder = _decoder(hover_radius_px=5.0)
        # (2, 3) sits at plot pixel (20, 70), window pixel (30, 90).
        self.assertIs(decoder.nearest(32.0, 88.0), RECORDS[0])
        self.assertIsNone(decoder.nearest(60.0, 70.0))

    def test_empty_dataset_has_no_nearest(self) -> None:
        decoder = PointerDecoder((), PLOT_POINT_ACCESSORS, DataLimits(0.0, 1.0, 0.0, 1.0), (0, 0, 50, 50))
        self.assertIsNone(decoder.nearest(10.0, 10.0))

    def test_unprojectable_records_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            PointerDecoder(
                (PlotPoint("?", 1.0),),  # type: ignore[arg-type]
                PLOT_POINT_ACCESSORS,
                DataLimits(0.0, 1.0, 0.0, 1.0),
                (0, 0, 50, 50),
            )

    def test_invalid_geometry_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PointerDecoder(RECORDS, PLOT_POINT_ACCESSORS, DataLimits(0.0, 1.0, 0.0, 1.0), (0, 0, 1, 50))


class RoutePointerEventTests(unittest.TestCase):
    def test_idle_moves_become_hover_on_nearest_record(self) -> None:
        event = route_pointer_event(PointerSample("move", 31.0, 91.0), InteractionState(), _decoder())
        self.assertEqual(event, Hover(RECORDS[0]))
        outside = route_pointer_event(PointerSample("move", 500.0, 500.0), InteractionState(), _decoder())
        self.assertEqual(outside, Hover(None))

    def test_moves_during_drag_decode_exactly(self) -> None:
        dragging = InteractionState(drag_anchor=PlotPoint(1.0, 1.0))
        event = route_pointer_event(PointerSample("move", 31.0, 91.0), dragging, _decoder())
        self.assertIsInstance(event, PointerMove)
        self.assertAlmostEqual(event.point.x, 2.1)
        self.assertAlmostEqual(event.point.y, 2.9)

    def test_down_outside_plot_is_ignored(self) -> None:
        self.assertIsNone(route_pointer_event(PointerSample("down", 5.0, 5.0), InteractionState(), _decoder()))
        self.assertIsInstance(route_pointer_event(PointerSample("down", 30.0, 90.0), InteractionState(), _decoder()), PointerDown)
        self.assertIsInstance(route_pointer_event(PointerSample("up", 5.0, 5.0), InteractionState(), _decoder()), PointerUp)
        self.assertEqual(route_pointer_event(PointerSample("leave"), InteractionState(), _decoder()), PointerLeave())

    def test_positionless_samples_are_dropped(self) -> None:
        dragging = InteractionState(drag_anchor=PlotPoint(1.0, 1.0))
        for phase in ("down", "move", "up"):
            with self.subTest(phase=phase):
                self.assertIsNone(route_pointer_event(PointerSample(phase), InteractionState(), _decoder()))
                self.assertIsNone(route_pointer_event(PointerSample(phase, 30.0, None), dragging, _decoder()))

    def test_hdi_stream_drives_a_zoom(self) -> None:
        chart = ChartInteraction(PLOT_POINT_ACCESSORS)
        decoder = _decoder()
        stream = [
            ("pointer_move", {"x": 31.0, "y": 91.0}),
            ("pointer_down", {"x": 30.0, "y": 120.0}),
            ("pointer_move", {"x": 40.0, "y": 110.0}),
            ("pointer_move", {"x": 60.0, "y": 90.0}),
            ("pointer_move", {"x": 80.0, "y": 70.0}),
            ("pointer_up", {"x": 80.0, "y": 70.0}),
        ]
        for event_type, payload in stream:
            sample = parse_hdi_pointer_event(event_type, payload)
            self.assertIsNotNone(sample)
            event = route_pointer_event(sample, chart.state, decoder)
            if event is not None:
                chart.dispatch(event)
        x_range = chart.visible_range_x()
        y_range = chart.visible_range_y()
        self.assertIsInstance(x_range, AxisRange)
        self.assertAlmostEqual(x_range.min, 2.0)
        self.assertAlmostEqual(x_range.max, 7.0)
        self.assertAlmostEqual(y_range.min, 0.0)
        self.assertAlmostEqual(y_range.max, 5.0)
        self.assertIsNone(chart.hover_target())


if __name__ == "__main__":
    unittest.main()
