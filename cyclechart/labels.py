from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from typing import Sequence

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, ChartTheme, ChartTuning
from cyclechart.raster import DrawContext, TextStyle
from cyclechart.records import DailyRecord
from cyclechart.scales import PlotRect, decimation_stride, index_to_x, natural_spacing


# Baseline offset of date labels from the bottom edge of the surface.
DATE_LABEL_BOTTOM_OFFSET = 15.0


@dataclass(frozen=True)
class DateLabel:
    index: int
    x: float
    text: str


def format_mmdd(day: dt.date) -> str:
    return f"{day.month:02d}{day.day:02d}"


def label_stride(count: int, rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> int:
    return decimation_stride(
        count,
        natural_spacing(count, rect),
        min_spacing=tuning.label_min_spacing,
        density_threshold=tuning.label_density_threshold,
        max_items=tuning.label_max_count,
    )


def decimate_labels(records: Sequence[DailyRecord], rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> tuple[DateLabel, ...]:
    """Pick the date labels to draw, in index order.

    The first and last records are always labeled when their dates resolve,
    independently of the stride.
    """
    count = len(records)
    if count == 0:
        return ()
    stride = label_stride(count, rect, tuning)
    chosen = set(range(0, count, stride))
    chosen.add(0)
    chosen.add(count - 1)
    out: list[DateLabel] = []
    for index in sorted(chosen):
        day = records[index].date
        if day is None:
            continue
        out.append(DateLabel(index=index, x=index_to_x(index, count, rect), text=format_mmdd(day)))
    return tuple(out)


def draw_date_labels(
    ctx: DrawContext,
    labels: Sequence[DateLabel],
    *,
    surface_height: float,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    style = TextStyle(color=theme.axis_text, size_px=theme.date_font_px, align="center", valign="bottom")
    y = surface_height - DATE_LABEL_BOTTOM_OFFSET
    for label in labels:
        ctx.text(label.x, y, label.text, style)
