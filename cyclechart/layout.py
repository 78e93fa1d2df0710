from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, ChartConfig, ChartTheme, ChartTuning
from cyclechart.grid import GridLayout, build_grid
from cyclechart.indicators import DayGlyph, MenstrualBand, menstrual_bands, resolve_glyphs
from cyclechart.labels import DateLabel, decimate_labels
from cyclechart.records import DailyRecord
from cyclechart.scales import PlotRect, TemperatureRange, compute_temperature_range
from cyclechart.series import SeriesPoint, collect_points


@dataclass(frozen=True)
class ChartLayout:
    """Everything one render pass draws, in logical units."""

    width: float
    height: float
    temperature_range: TemperatureRange
    rect: PlotRect
    grid: GridLayout
    labels: tuple[DateLabel, ...]
    points: tuple[SeriesPoint, ...]
    bands: tuple[MenstrualBand, ...]
    glyphs: tuple[DayGlyph, ...]

    @property
    def label_indices(self) -> tuple[int, ...]:
        return tuple(label.index for label in self.labels)

    def glyph_for(self, index: int) -> DayGlyph | None:
        for glyph in self.glyphs:
            if glyph.index == index:
                return glyph
        return None


def layout_chart(
    records: Sequence[DailyRecord],
    config: ChartConfig,
    size: tuple[float, float] | None = None,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> ChartLayout:
    width, height = size if size is not None else (config.width, config.height)
    if width <= 0 or height <= 0:
        width, height = config.width, config.height
    records = list(records)
    rng = compute_temperature_range(records, tuning)
    rect = PlotRect.inset(width, height, tuning.padding)
    bands: tuple[MenstrualBand, ...] = ()
    if config.shows_all_series:
        bands = menstrual_bands(records, rect, tuning)
    return ChartLayout(
        width=float(width),
        height=float(height),
        temperature_range=rng,
        rect=rect,
        grid=build_grid(len(records), rng, rect, tuning),
        labels=decimate_labels(records, rect, tuning),
        points=tuple(collect_points(records, rng, rect)),
        bands=bands,
        glyphs=resolve_glyphs(records, rng, rect, config.view_mode, tuning=tuning, theme=theme),
    )
