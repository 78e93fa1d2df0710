from __future__ import annotations

import datetime as dt
import unittest

from cyclechart.config import DEFAULT_TUNING, Padding
from cyclechart.grid import build_grid, horizontal_ticks, vertical_gridline_indices
from cyclechart.records import DailyRecord
from cyclechart.scales import (
    PlotRect,
    TemperatureRange,
    compute_temperature_range,
    decimation_stride,
    fallback_y,
    format_temperature,
    index_to_x,
    temperature_to_y,
)


def _records(temps: list[float | None]) -> list[DailyRecord]:
    start = dt.date(2024, 3, 1)
    return [DailyRecord(date=start + dt.timedelta(days=i), temperature=t) for i, t in enumerate(temps)]


def _rect(width: float = 350.0, height: float = 200.0) -> PlotRect:
    return PlotRect.inset(width, height, Padding())


class TemperatureRangeTests(unittest.TestCase):
    def test_empty_temperature_set_uses_default_range(self) -> None:
        self.assertEqual(compute_temperature_range([]), TemperatureRange(36.0, 37.5))
        self.assertEqual(compute_temperature_range(_records([None, None])), TemperatureRange(36.0, 37.5))

    def test_range_contains_readings_and_stays_in_envelope(self) -> None:
        samples = [
            [36.3],
            [36.2, 36.7],
            [35.0, 40.0],
            [35.1, 36.0, 39.9],
            [36.45, 36.45, 36.5],
        ]
        for temps in samples:
            with self.subTest(temps=temps):
                rng = compute_temperature_range(_records(temps))
                self.assertLessEqual(rng.min, min(temps))
                self.assertGreaterEqual(rng.max, max(temps))
                self.assertGreaterEqual(rng.min, 35.0)
                self.assertLessEqual(rng.max, 40.0)
                self.assertLess(rng.min, rng.max)

    def test_margin_is_tenth_of_span(self) -> None:
        rng = compute_temperature_range(_records([36.3, 36.2, 36.4, 36.5, 36.7]))
        self.assertAlmostEqual(rng.min, 36.15, places=9)
        self.assertAlmostEqual(rng.max, 36.75, places=9)

    def test_single_distinct_value_uses_margin_floor(self) -> None:
        rng = compute_temperature_range(_records([36.5, 36.5]))
        self.assertAlmostEqual(rng.min, 36.0, places=9)
        self.assertAlmostEqual(rng.max, 37.0, places=9)

        edge = compute_temperature_range(_records([40.0]))
        self.assertAlmostEqual(edge.min, 39.5, places=9)
        self.assertEqual(edge.max, 40.0)

    def test_outliers_are_clamped_to_envelope(self) -> None:
        rng = compute_temperature_range(_records([34.0, 41.5]))
        self.assertEqual((rng.min, rng.max), (35.0, 40.0))

    def test_missing_readings_are_ignored(self) -> None:
        rng = compute_temperature_range(_records([None, 36.5, float("nan"), 36.9]))
        self.assertAlmostEqual(rng.min, 36.46, places=9)
        self.assertAlmostEqual(rng.max, 36.94, places=9)

    def test_range_rejects_inverted_bounds(self) -> None:
        with self.assertRaises(ValueError):
            TemperatureRange(37.0, 37.0)


class CoordinateMappingTests(unittest.TestCase):
    def test_plot_rect_is_padding_inset(self) -> None:
        rect = _rect()
        self.assertEqual((rect.left, rect.top, rect.width, rect.height), (48.0, 40.0, 278.0, 120.0))
        self.assertEqual((rect.right, rect.bottom), (326.0, 160.0))

    def test_tiny_surface_keeps_positive_rect(self) -> None:
        rect = _rect(20.0, 20.0)
        self.assertGreater(rect.width, 0)
        self.assertGreater(rect.height, 0)

    def test_index_to_x_spans_plot_width(self) -> None:
        rect = _rect()
        self.assertEqual(index_to_x(0, 5, rect), 48.0)
        self.assertEqual(index_to_x(4, 5, rect), 326.0)
        self.assertEqual(index_to_x(0, 1, rect), 48.0)

    def test_temperature_to_y_is_inverted_and_clipped(self) -> None:
        rect = _rect()
        rng = TemperatureRange(36.0, 37.0)
        self.assertEqual(temperature_to_y(37.0, rng, rect), rect.top)
        self.assertEqual(temperature_to_y(36.0, rng, rect), rect.bottom)
        self.assertAlmostEqual(temperature_to_y(36.5, rng, rect), 100.0, places=9)
        self.assertEqual(temperature_to_y(38.0, rng, rect), rect.top)
        self.assertEqual(temperature_to_y(35.0, rng, rect), rect.bottom)

    def test_fallback_y_is_plot_midline(self) -> None:
        self.assertEqual(fallback_y(_rect()), 100.0)

    def test_format_temperature(self) -> None:
        self.assertEqual(format_temperature(36.54), "36.5°C")
        self.assertEqual(format_temperature(37.0), "37.0°C")


class GridBuilderTests(unittest.TestCase):
    def test_five_horizontal_ticks_from_max_to_min(self) -> None:
        rect = _rect()
        ticks = horizontal_ticks(TemperatureRange(36.0, 37.5), rect)
        self.assertEqual(len(ticks), 5)
        self.assertEqual(ticks[0].value, 37.5)
        self.assertEqual(ticks[0].y, rect.top)
        self.assertEqual(ticks[-1].value, 36.0)
        self.assertEqual(ticks[-1].y, rect.bottom)
        self.assertEqual(ticks[0].label, "37.5°C")
        self.assertEqual(ticks[-1].label, "36.0°C")
        gaps = {round(ticks[i + 1].y - ticks[i].y, 9) for i in range(4)}
        self.assertEqual(gaps, {30.0})

    def test_sparse_series_draws_one_line_per_record(self) -> None:
        self.assertEqual(vertical_gridline_indices(5, _rect()), (0, 1, 2, 3, 4))

    def test_dense_series_is_strided_with_right_edge_forced(self) -> None:
        indices = vertical_gridline_indices(30, _rect())
        self.assertEqual(indices[:3], (0, 2, 4))
        self.assertEqual(indices[-2:], (28, 29))
        self.assertEqual(len(indices), 16)

    def test_stride_that_lands_on_last_index_does_not_duplicate(self) -> None:
        indices = vertical_gridline_indices(40, _rect())
        self.assertEqual(indices[-1], 39)
        self.assertEqual(len(indices), len(set(indices)))
        self.assertEqual(indices[1] - indices[0], 3)

    def test_wide_surface_keeps_every_line(self) -> None:
        self.assertEqual(len(vertical_gridline_indices(16, _rect(1000.0, 200.0))), 16)

    def test_rightmost_line_always_present(self) -> None:
        rect = _rect()
        for count in range(1, 120):
            with self.subTest(count=count):
                indices = vertical_gridline_indices(count, rect)
                self.assertEqual(indices[0], 0)
                self.assertEqual(indices[-1], count - 1)

    def test_no_records_no_vertical_lines(self) -> None:
        grid = build_grid(0, TemperatureRange(36.0, 37.5), _rect())
        self.assertEqual(grid.vertical_indices, ())
        self.assertEqual(len(grid.horizontal), DEFAULT_TUNING.horizontal_ticks)

    def test_decimation_requires_both_conditions(self) -> None:
        self.assertEqual(decimation_stride(14, 5.0, min_spacing=25, density_threshold=15, max_items=15), 1)
        self.assertEqual(decimation_stride(100, 30.0, min_spacing=25, density_threshold=15, max_items=15), 1)
        self.assertEqual(decimation_stride(31, 5.0, min_spacing=25, density_threshold=15, max_items=15), 3)


if __name__ == "__main__":
    unittest.main()
