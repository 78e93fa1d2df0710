from __future__ import annotations

from dataclasses import dataclass

from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, ChartTheme, ChartTuning
from cyclechart.raster import DrawContext, Stroke, TextStyle
from cyclechart.scales import (
    PlotRect,
    TemperatureRange,
    decimation_stride,
    format_temperature,
    index_to_x,
    natural_spacing,
)


@dataclass(frozen=True)
class HorizontalTick:
    value: float
    y: float
    label: str


@dataclass(frozen=True)
class GridLayout:
    horizontal: tuple[HorizontalTick, ...]
    vertical_indices: tuple[int, ...]
    vertical_x: tuple[float, ...]


def horizontal_ticks(rng: TemperatureRange, rect: PlotRect, count: int = 5) -> tuple[HorizontalTick, ...]:
    """Evenly spaced ticks from ``rng.max`` at the top edge to ``rng.min`` at the bottom edge."""
    intervals = count - 1
    out: list[HorizontalTick] = []
    for i in range(count):
        value = rng.max - i * rng.span / intervals
        y = rect.top + i * rect.height / intervals
        out.append(HorizontalTick(value=value, y=y, label=format_temperature(value)))
    return tuple(out)


def vertical_gridline_indices(count: int, rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> tuple[int, ...]:
    if count <= 0:
        return ()
    stride = decimation_stride(
        count,
        natural_spacing(count, rect),
        min_spacing=tuning.grid_min_spacing,
        density_threshold=tuning.grid_density_threshold,
        max_items=tuning.grid_max_lines,
    )
    indices = list(range(0, count, stride))
    # The right edge is always fenced.
    if indices[-1] != count - 1:
        indices.append(count - 1)
    return tuple(indices)


def build_grid(count: int, rng: TemperatureRange, rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> GridLayout:
    indices = vertical_gridline_indices(count, rect, tuning)
    return GridLayout(
        horizontal=horizontal_ticks(rng, rect, tuning.horizontal_ticks),
        vertical_indices=indices,
        vertical_x=tuple(index_to_x(i, count, rect) for i in indices),
    )


def draw_grid(
    ctx: DrawContext,
    grid: GridLayout,
    rect: PlotRect,
    *,
    is_enlarged: bool = False,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    if is_enlarged:
        stroke = Stroke(color=theme.grid_enlarged, width=0.5, dash=(1.0, 1.0))
        label_style = TextStyle(color=theme.axis_text, size_px=theme.tick_font_px_enlarged, align="right", valign="middle")
    else:
        stroke = Stroke(color=theme.grid, width=1.0, dash=(2.0, 2.0))
        label_style = TextStyle(color=theme.axis_text, size_px=theme.tick_font_px, align="right", valign="middle")

    for tick in grid.horizontal:
        ctx.line(rect.left, tick.y, rect.right, tick.y, stroke)
        ctx.text(rect.left - 5.0, tick.y, tick.label, label_style)

    for x in grid.vertical_x:
        ctx.line(x, rect.top, x, rect.bottom, stroke)
