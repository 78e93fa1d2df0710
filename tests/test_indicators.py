from __future__ import annotations

import datetime as dt
import math
import unittest

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, Padding
from cyclechart.indicators import (
    Indicator,
    dot_offsets,
    gather_indicators,
    menstrual_alpha,
    menstrual_bands,
    resolve_day,
)
from cyclechart.records import DailyRecord, IntimacyEvent
from cyclechart.scales import PlotRect, TemperatureRange, fallback_y, temperature_to_y


DAY = dt.date(2024, 3, 1)


class IndicatorLayoutTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rect = PlotRect.inset(350.0, 200.0, Padding())
        self.rng = TemperatureRange(36.0, 37.0)

    def _gather(self, record: DailyRecord, view_mode: str = "all") -> tuple[Indicator, ...]:
        return gather_indicators(record, 0, 1, self.rng, self.rect, view_mode)  # type: ignore[arg-type]

    def test_empty_day_has_no_glyph(self) -> None:
        self.assertEqual(self._gather(DailyRecord(date=DAY)), ())
        self.assertIsNone(resolve_day(0, ()))

    def test_single_indicator_is_one_glyph_at_temperature(self) -> None:
        indicators = self._gather(DailyRecord(date=DAY, temperature=36.5))
        glyph = resolve_day(0, indicators)
        assert glyph is not None
        self.assertFalse(glyph.has_ring)
        self.assertEqual(glyph.dots, ())
        self.assertEqual(glyph.center[1], temperature_to_y(36.5, self.rng, self.rect))
        self.assertEqual(indicators[0].color, DEFAULT_THEME.temperature)

    def test_indicator_without_temperature_uses_fallback_height(self) -> None:
        indicators = self._gather(DailyRecord(date=DAY, menstrual_intensity=2))
        self.assertEqual([i.kind for i in indicators], ["menstrual"])
        self.assertEqual(indicators[0].position[1], fallback_y(self.rect))
        self.assertEqual(indicators[0].value, 2.0)

    def test_multiple_indicators_get_ring_and_one_dot_each(self) -> None:
        record = DailyRecord(
            date=DAY,
            temperature=36.4,
            menstrual_intensity=1,
            intimacy_events=(IntimacyEvent(type="yes"),),
        )
        glyph = resolve_day(0, self._gather(record))
        assert glyph is not None
        self.assertTrue(glyph.has_ring)
        self.assertEqual(len(glyph.dots), 3)
        self.assertEqual(
            [d.color for d in glyph.dots],
            [DEFAULT_THEME.temperature, DEFAULT_THEME.menstrual, DEFAULT_THEME.intimacy],
        )

    def test_pair_dots_sit_left_and_right(self) -> None:
        self.assertEqual(dot_offsets(2), [(-6.0, 0.0), (6.0, 0.0)])

    def test_three_or_more_dots_go_clockwise_from_top(self) -> None:
        offsets = dot_offsets(3)
        self.assertAlmostEqual(offsets[0][0], 0.0, places=9)
        self.assertAlmostEqual(offsets[0][1], -DEFAULT_TUNING.dot_orbit_radius, places=9)
        # Screen y grows downward, so clockwise from the top moves right and down.
        self.assertGreater(offsets[1][0], 0.0)
        self.assertGreater(offsets[1][1], 0.0)
        self.assertLess(offsets[2][0], 0.0)
        for dx, dy in dot_offsets(5):
            self.assertAlmostEqual(math.hypot(dx, dy), DEFAULT_TUNING.dot_orbit_radius, places=9)

    def test_temperature_only_suppresses_other_kinds(self) -> None:
        record = DailyRecord(
            date=DAY,
            temperature=36.4,
            menstrual_intensity=3,
            intimacy_events=(IntimacyEvent(type="yes"),),
        )
        indicators = self._gather(record, "temperature_only")
        self.assertEqual([i.kind for i in indicators], ["temperature"])
        self.assertEqual(self._gather(DailyRecord(date=DAY, menstrual_intensity=3), "temperature_only"), ())

    def test_unmarked_intimacy_types_are_ignored(self) -> None:
        events = (
            IntimacyEvent(type="none"),
            IntimacyEvent(type="NO"),
            IntimacyEvent(type=" "),
            IntimacyEvent(type=None),
        )
        record = DailyRecord(date=DAY, intimacy_events=events)
        self.assertFalse(record.has_intimacy)
        self.assertEqual(self._gather(record), ())
        marked = DailyRecord(date=DAY, intimacy_events=events + (IntimacyEvent(type="protected"),))
        self.assertEqual(marked.intimacy_count, 1)

    def test_menstrual_alpha_is_monotonic_and_capped(self) -> None:
        alphas = [menstrual_alpha(i) for i in range(0, 12)]
        self.assertEqual(alphas, sorted(alphas))
        self.assertAlmostEqual(alphas[1], 0.18, places=9)
        self.assertTrue(all(a <= 0.35 for a in alphas))
        self.assertEqual(menstrual_alpha(50), 0.35)

    def test_bands_cover_only_flow_days(self) -> None:
        records = [
            DailyRecord(date=DAY, menstrual_intensity=3),
            DailyRecord(date=DAY + dt.timedelta(days=1), menstrual_intensity=0),
            DailyRecord(date=DAY + dt.timedelta(days=2)),
        ]
        bands = menstrual_bands(records, self.rect)
        self.assertEqual([b.index for b in bands], [0])
        self.assertAlmostEqual(bands[0].alpha, 0.30, places=9)
        self.assertAlmostEqual(bands[0].width, self.rect.width / 2, places=9)


if __name__ == "__main__":
    unittest.main()
