from __future__ import annotations

import datetime as dt
import unittest
from typing import Any, Callable

from cyclechart import ChartConfig, ChartView, DailyRecord, ImageSurface


class _Timer:
    def __init__(self, delay_s: float, fn: Callable[[], None]) -> None:
        self.delay_s = delay_s
        self.fn = fn
        self.cancelled = False

    def start(self) -> None:
        pass

    def cancel(self) -> None:
        self.cancelled = True


class ChartViewTests(unittest.TestCase):
    def setUp(self) -> None:
        self.timers: list[_Timer] = []

        def factory(delay_s: float, fn: Callable[[], None]) -> _Timer:
            timer = _Timer(delay_s, fn)
            self.timers.append(timer)
            return timer

        self.surface = ImageSurface(200, 120, 1.0)
        self.view = ChartView(self.surface, timer_factory=factory)
        self.records = [
            DailyRecord(date=dt.date(2024, 3, 1), temperature=36.3, menstrual_intensity=2),
            DailyRecord(date=dt.date(2024, 3, 2), temperature=36.5),
        ]

    def _fire_latest(self) -> None:
        self.timers[-1].fn()

    def test_first_update_schedules_and_renders(self) -> None:
        self.assertTrue(self.view.update(self.records))
        self.assertEqual(self.surface.frames_presented, 0)
        self._fire_latest()
        self.assertEqual(self.surface.frames_presented, 1)
        assert self.surface.last_frame is not None
        self.assertEqual(self.surface.last_frame.shape[:2], (120, 200))

    def test_unchanged_inputs_do_not_reschedule(self) -> None:
        self.view.update(self.records)
        self.assertFalse(self.view.update(list(self.records)))
        self.assertFalse(self.view.update(config=ChartConfig()))
        self.assertEqual(len(self.timers), 1)

    def test_each_config_change_reschedules(self) -> None:
        self.view.update(self.records)
        self.assertTrue(self.view.set_view_mode("temperature_only"))
        self.assertTrue(self.view.set_size(300, 150))
        self.assertTrue(self.view.set_enlarged(True))
        self.assertTrue(self.view.set_variant("straight"))
        self.assertFalse(self.view.set_variant("straight"))
        self.assertEqual(len(self.timers), 5)
        self.assertEqual(self.timers[-1].delay_s, 0.3)
        self.assertTrue(all(t.cancelled for t in self.timers[:-1]))
        self.assertEqual(self.view.config.view_mode, "temperature_only")

    def test_record_change_reschedules(self) -> None:
        self.view.update(self.records)
        self.assertTrue(self.view.set_records(self.records[:1]))
        self.assertEqual(len(self.view.records), 1)

    def test_tap_forwards_detail_unchanged(self) -> None:
        received: list[Any] = []
        unsubscribe = self.view.on_chart_tapped(received.append)
        detail = {"x": 12, "y": 40, "changedTouches": []}
        self.view.tap(detail)
        self.assertIs(received[0], detail)
        unsubscribe()
        self.view.tap("ignored")
        self.assertEqual(len(received), 1)

    def test_close_cancels_pending_render(self) -> None:
        self.view.update(self.records)
        self.view.close()
        self.assertTrue(self.timers[-1].cancelled)
        self._fire_latest()
        self.assertEqual(self.surface.frames_presented, 0)
        with self.assertLogs("cyclechart.schedule", level="WARNING"):
            self.assertFalse(self.view.set_enlarged(True))


if __name__ == "__main__":
    unittest.main()
