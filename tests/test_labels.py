from __future__ import annotations

import datetime as dt
import unittest

from cyclechart.config import Padding
from cyclechart.labels import decimate_labels, format_mmdd, label_stride
from cyclechart.records import DailyRecord
from cyclechart.scales import PlotRect


def _days(count: int, start: dt.date = dt.date(2024, 3, 1)) -> list[DailyRecord]:
    return [DailyRecord(date=start + dt.timedelta(days=i)) for i in range(count)]


class LabelDecimatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rect = PlotRect.inset(350.0, 200.0, Padding())

    def test_mmdd_is_zero_padded(self) -> None:
        self.assertEqual(format_mmdd(dt.date(2024, 3, 7)), "0307")
        self.assertEqual(format_mmdd(dt.date(2024, 12, 25)), "1225")

    def test_short_series_labels_every_day(self) -> None:
        labels = decimate_labels(_days(5), self.rect)
        self.assertEqual([label.index for label in labels], [0, 1, 2, 3, 4])
        self.assertEqual([label.text for label in labels], ["0301", "0302", "0303", "0304", "0305"])

    def test_dense_series_is_strided_and_anchored(self) -> None:
        labels = decimate_labels(_days(30), self.rect)
        indices = [label.index for label in labels]
        self.assertEqual(label_stride(30, self.rect), 2)
        self.assertEqual(indices[:3], [0, 2, 4])
        self.assertEqual(indices[-2:], [28, 29])

    def test_first_and_last_always_labeled(self) -> None:
        for count in range(1, 90):
            with self.subTest(count=count):
                indices = [label.index for label in decimate_labels(_days(count), self.rect)]
                self.assertEqual(indices[0], 0)
                self.assertEqual(indices[-1], count - 1)
                self.assertEqual(indices, sorted(set(indices)))

    def test_single_record_gets_one_label(self) -> None:
        labels = decimate_labels(_days(1), self.rect)
        self.assertEqual(len(labels), 1)
        self.assertEqual(labels[0].x, self.rect.left)

    def test_records_without_date_are_skipped(self) -> None:
        records = _days(3)
        records[1] = DailyRecord(date=None, temperature=36.5)
        labels = decimate_labels(records, self.rect)
        self.assertEqual([label.index for label in labels], [0, 2])

    def test_empty_series_has_no_labels(self) -> None:
        self.assertEqual(decimate_labels([], self.rect), ())

    def test_label_thresholds_differ_from_grid(self) -> None:
        # 18 records are dense enough for gridline decimation but below the label trigger.
        self.assertEqual(label_stride(18, self.rect), 1)


if __name__ == "__main__":
    unittest.main()
