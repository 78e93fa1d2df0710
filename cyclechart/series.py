from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, RGBA, ChartTheme, ChartTuning, ChartVariant, GlyphSize
from cyclechart.raster import DrawContext, Stroke, TextStyle
from cyclechart.raster.draw_lines import Point
from cyclechart.records import DailyRecord
from cyclechart.scales import PlotRect, TemperatureRange, format_temperature, index_to_x, temperature_to_y


@dataclass(frozen=True)
class SeriesPoint:
    index: int
    x: float
    y: float
    temperature: float


def collect_points(records: Sequence[DailyRecord], rng: TemperatureRange, rect: PlotRect) -> list[SeriesPoint]:
    count = len(records)
    out: list[SeriesPoint] = []
    for index, record in enumerate(records):
        if not record.has_temperature:
            continue
        value = float(record.temperature)  # type: ignore[arg-type]
        out.append(
            SeriesPoint(
                index=index,
                x=index_to_x(index, count, rect),
                y=temperature_to_y(value, rng, rect),
                temperature=value,
            )
        )
    return out


def straight_path(points: Sequence[SeriesPoint]) -> list[Point]:
    if len(points) < 2:
        return []
    return [(p.x, p.y) for p in points]


def smooth_path(points: Sequence[SeriesPoint], *, tension: float = 0.1, segments: int = 16) -> list[Point]:
    """Flattened curve through the points.

    Interior points are reached with cubic Beziers whose control points sit
    ``tension`` times the neighbor-to-neighbor vector before and after the
    point; the tail is a quadratic whose control is the midpoint of the last
    two points. Two points fall back to a straight segment.
    """
    if len(points) < 2:
        return []
    if len(points) == 2:
        return straight_path(points)

    pts = np.asarray([(p.x, p.y) for p in points], dtype=np.float64)
    s = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    path: list[Point] = [(float(pts[0, 0]), float(pts[0, 1]))]
    pen = pts[0]
    for i in range(1, len(pts) - 1):
        current = pts[i]
        delta = (pts[i + 1] - pts[i - 1]) * tension
        c1 = current - delta
        c2 = current + delta
        curve = (
            (1 - s) ** 3 * pen
            + 3 * (1 - s) ** 2 * s * c1
            + 3 * (1 - s) * s**2 * c2
            + s**3 * current
        )
        path.extend((float(x), float(y)) for x, y in curve)
        pen = current

    last = pts[-1]
    control = pen + (last - pen) * 0.5
    tail = (1 - s) ** 2 * pen + 2 * (1 - s) * s * control + s**2 * last
    path.extend((float(x), float(y)) for x, y in tail)
    return path


def line_path(points: Sequence[SeriesPoint], variant: ChartVariant, tuning: ChartTuning = DEFAULT_TUNING) -> list[Point]:
    if variant == "smooth":
        return smooth_path(points, tension=tuning.tension, segments=tuning.curve_segments)
    return straight_path(points)


def draw_temperature_line(
    ctx: DrawContext,
    points: Sequence[SeriesPoint],
    variant: ChartVariant,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    path = line_path(points, variant, tuning)
    if len(path) < 2:
        return
    width = tuning.smooth_line_width if variant == "smooth" else tuning.straight_line_width
    ctx.polyline(path, Stroke(color=theme.temperature, width=width))


def draw_glyph(
    ctx: DrawContext,
    x: float,
    y: float,
    color: RGBA,
    size: GlyphSize,
    *,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    ctx.circle(x, y, size.radius, fill=color, outline=Stroke(color=theme.glyph_outline, width=size.outline_width))


def draw_value_label(
    ctx: DrawContext,
    point: SeriesPoint,
    *,
    is_enlarged: bool = False,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    offset = 18.0 if is_enlarged else 15.0
    size_px = theme.value_font_px_enlarged if is_enlarged else theme.value_font_px
    style = TextStyle(color=theme.temperature, size_px=size_px, align="center", valign="bottom")
    ctx.text(point.x, point.y - offset, format_temperature(point.temperature), style)
