from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Sequence

from cyclechart.config import (
    DEFAULT_THEME,
    DEFAULT_TUNING,
    RGBA,
    ChartTheme,
    ChartTuning,
    GlyphSize,
    ViewMode,
    with_alpha,
)
from cyclechart.raster import DrawContext, Stroke
from cyclechart.records import DailyRecord
from cyclechart.scales import PlotRect, TemperatureRange, fallback_y, index_to_x, natural_spacing, temperature_to_y
from cyclechart.series import draw_glyph


IndicatorKind = Literal["temperature", "menstrual", "intimacy"]


@dataclass(frozen=True)
class Indicator:
    kind: IndicatorKind
    position: tuple[float, float]
    color: RGBA
    value: float


@dataclass(frozen=True)
class Dot:
    x: float
    y: float
    color: RGBA


@dataclass(frozen=True)
class DayGlyph:
    """How one day's indicators are drawn: a single glyph, or a ring with one dot per indicator."""

    index: int
    center: tuple[float, float]
    indicators: tuple[Indicator, ...]
    dots: tuple[Dot, ...] = ()

    @property
    def has_ring(self) -> bool:
        return len(self.indicators) >= 2


@dataclass(frozen=True)
class MenstrualBand:
    index: int
    x: float
    width: float
    alpha: float


def gather_indicators(
    record: DailyRecord,
    index: int,
    count: int,
    rng: TemperatureRange,
    rect: PlotRect,
    view_mode: ViewMode,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> tuple[Indicator, ...]:
    x = index_to_x(index, count, rect)
    if record.has_temperature:
        y = temperature_to_y(float(record.temperature), rng, rect)  # type: ignore[arg-type]
    else:
        y = fallback_y(rect, tuning)
    position = (x, y)

    out: list[Indicator] = []
    if record.has_temperature:
        out.append(Indicator("temperature", position, theme.temperature, float(record.temperature)))  # type: ignore[arg-type]
    if view_mode == "all":
        if record.has_menstrual_flow:
            out.append(Indicator("menstrual", position, theme.menstrual, float(record.menstrual_intensity)))  # type: ignore[arg-type]
        if record.has_intimacy:
            out.append(Indicator("intimacy", position, theme.intimacy, float(record.intimacy_count)))
    return tuple(out)


def dot_offsets(count: int, tuning: ChartTuning = DEFAULT_TUNING) -> list[tuple[float, float]]:
    """Dot offsets around a ring center: a left/right pair, or clockwise from the top."""
    if count < 2:
        return []
    if count == 2:
        return [(-tuning.pair_dot_offset, 0.0), (tuning.pair_dot_offset, 0.0)]
    step = 2.0 * math.pi / count
    r = tuning.dot_orbit_radius
    out: list[tuple[float, float]] = []
    for i in range(count):
        angle = -math.pi / 2.0 + i * step
        out.append((r * math.cos(angle), r * math.sin(angle)))
    return out


def resolve_day(index: int, indicators: Sequence[Indicator], tuning: ChartTuning = DEFAULT_TUNING) -> DayGlyph | None:
    if not indicators:
        return None
    center = indicators[0].position
    if len(indicators) == 1:
        return DayGlyph(index=index, center=center, indicators=tuple(indicators))
    cx, cy = center
    dots = tuple(
        Dot(x=cx + dx, y=cy + dy, color=indicator.color)
        for indicator, (dx, dy) in zip(indicators, dot_offsets(len(indicators), tuning), strict=True)
    )
    return DayGlyph(index=index, center=center, indicators=tuple(indicators), dots=dots)


def resolve_glyphs(
    records: Sequence[DailyRecord],
    rng: TemperatureRange,
    rect: PlotRect,
    view_mode: ViewMode,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> tuple[DayGlyph, ...]:
    count = len(records)
    out: list[DayGlyph] = []
    for index, record in enumerate(records):
        indicators = gather_indicators(record, index, count, rng, rect, view_mode, tuning=tuning, theme=theme)
        glyph = resolve_day(index, indicators, tuning)
        if glyph is not None:
            out.append(glyph)
    return tuple(out)


def menstrual_alpha(intensity: float, tuning: ChartTuning = DEFAULT_TUNING) -> float:
    return min(tuning.band_alpha_base + intensity * tuning.band_alpha_per_unit, tuning.band_alpha_max)


def menstrual_bands(records: Sequence[DailyRecord], rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> tuple[MenstrualBand, ...]:
    count = len(records)
    width = natural_spacing(count, rect)
    out: list[MenstrualBand] = []
    for index, record in enumerate(records):
        if not record.has_menstrual_flow:
            continue
        out.append(
            MenstrualBand(
                index=index,
                x=index_to_x(index, count, rect),
                width=width,
                alpha=menstrual_alpha(float(record.menstrual_intensity), tuning),  # type: ignore[arg-type]
            )
        )
    return tuple(out)


def draw_bands(ctx: DrawContext, bands: Sequence[MenstrualBand], rect: PlotRect, *, theme: ChartTheme = DEFAULT_THEME) -> None:
    for band in bands:
        left = max(rect.left, band.x - band.width / 2.0)
        right = min(rect.right, band.x + band.width / 2.0)
        if right <= left:
            continue
        ctx.rect(left, rect.top, right - left, rect.height, with_alpha(theme.menstrual, band.alpha))


def draw_day_glyph(
    ctx: DrawContext,
    glyph: DayGlyph,
    size: GlyphSize,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    cx, cy = glyph.center
    if not glyph.has_ring:
        draw_glyph(ctx, cx, cy, glyph.indicators[0].color, size, theme=theme)
        return
    ctx.circle(
        cx,
        cy,
        tuning.ring_radius,
        fill=theme.ring_fill,
        outline=Stroke(color=theme.ring, width=tuning.ring_outline_width),
    )
    dot_outline = Stroke(color=theme.glyph_outline, width=1.0)
    for dot in glyph.dots:
        ctx.circle(dot.x, dot.y, tuning.dot_radius, fill=dot.color, outline=dot_outline)
