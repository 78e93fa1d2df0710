from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Protocol, Sequence

import numpy as np

from cyclechart.compile import compile_changed_rect_batch
from cyclechart.config import DEFAULT_THEME, DEFAULT_TUNING, ChartConfig, ChartTheme, ChartTuning, glyph_size, opaque
from cyclechart.errors import SurfaceUnavailableError
from cyclechart.grid import draw_grid
from cyclechart.indicators import draw_bands, draw_day_glyph
from cyclechart.labels import draw_date_labels
from cyclechart.layout import ChartLayout, layout_chart
from cyclechart.matrix import FrameCommit, FrameMatrix, WriteBatch
from cyclechart.raster import DrawContext
from cyclechart.records import DailyRecord
from cyclechart.series import draw_temperature_line, draw_value_label


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceMetrics:
    logical_width: float
    logical_height: float
    pixel_ratio: float | None = None


class ChartSurface(Protocol):
    def metrics(self) -> SurfaceMetrics | None:
        ...

    def present(self, frame_rgba: np.ndarray) -> None:
        ...


class ImageSurface:
    """In-memory surface that keeps the last presented frame."""

    def __init__(self, width: float, height: float, pixel_ratio: float | None = None, *, mounted: bool = True) -> None:
        self.width = width
        self.height = height
        self.pixel_ratio = pixel_ratio
        self.mounted = mounted
        self.last_frame: np.ndarray | None = None
        self.frames_presented = 0

    def metrics(self) -> SurfaceMetrics | None:
        if not self.mounted:
            return None
        return SurfaceMetrics(self.width, self.height, self.pixel_ratio)

    def present(self, frame_rgba: np.ndarray) -> None:
        self.last_frame = frame_rgba
        self.frames_presented += 1


class MatrixSurface:
    """Surface backed by a FrameMatrix.

    The first frame after a (re)allocation is a full rewrite; later frames only
    commit the rectangle that changed, and identical frames commit nothing.
    """

    def __init__(
        self,
        width: float,
        height: float,
        pixel_ratio: float | None = None,
        *,
        matrix: FrameMatrix | None = None,
        background: tuple[int, int, int, int] = DEFAULT_THEME.background,
    ) -> None:
        self.width = width
        self.height = height
        self.pixel_ratio = pixel_ratio
        self.matrix = matrix
        self.background = background
        self.last_commit: FrameCommit | None = None
        self.last_batch: WriteBatch | None = None
        self._previous: np.ndarray | None = None

    def metrics(self) -> SurfaceMetrics | None:
        return SurfaceMetrics(self.width, self.height, self.pixel_ratio)

    def present(self, frame_rgba: np.ndarray) -> None:
        height, width = int(frame_rgba.shape[0]), int(frame_rgba.shape[1])
        if self.matrix is None:
            self.matrix = FrameMatrix(height=height, width=width, background=self.background)
            self._previous = None
        elif self.matrix.resize(height, width):
            self._previous = None
        batch = compile_changed_rect_batch(self._previous, frame_rgba)
        if batch is None:
            LOGGER.debug("frame unchanged; commit skipped")
            return
        self.last_batch = batch
        self.last_commit = self.matrix.submit_write_batch(batch)
        self._previous = frame_rgba.copy()

    def snapshot(self) -> np.ndarray:
        if self.matrix is None:
            raise SurfaceUnavailableError("no frame has been presented to this surface")
        return self.matrix.read_snapshot().numpy()


def resolve_pixel_ratio(pixel_ratio: float | None, tuning: ChartTuning = DEFAULT_TUNING) -> float:
    if pixel_ratio is None or not math.isfinite(pixel_ratio) or pixel_ratio <= 0:
        return tuning.default_pixel_ratio
    return float(pixel_ratio)


def draw_layout(
    ctx: DrawContext,
    layout: ChartLayout,
    config: ChartConfig,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    """Paint a layout in the fixed order: grid, bands, line, glyphs, labels."""
    ctx.clear(opaque(theme.background))
    draw_grid(ctx, layout.grid, layout.rect, is_enlarged=config.is_enlarged, theme=theme)
    draw_bands(ctx, layout.bands, layout.rect, theme=theme)
    draw_temperature_line(ctx, layout.points, config.variant, tuning=tuning, theme=theme)
    size = glyph_size(config.is_enlarged)
    for glyph in layout.glyphs:
        draw_day_glyph(ctx, glyph, size, tuning=tuning, theme=theme)
    if config.show_value_labels:
        for point in layout.points:
            draw_value_label(ctx, point, is_enlarged=config.is_enlarged, theme=theme)
    draw_date_labels(ctx, layout.labels, surface_height=layout.height, theme=theme)


def rasterize_chart(
    records: Sequence[DailyRecord],
    config: ChartConfig,
    pixel_ratio: float | None = None,
    *,
    size: tuple[float, float] | None = None,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> np.ndarray:
    ratio = resolve_pixel_ratio(pixel_ratio, tuning)
    layout = layout_chart(records, config, size, tuning=tuning, theme=theme)
    ctx = DrawContext.create(layout.width, layout.height, ratio, opaque(theme.background))
    draw_layout(ctx, layout, config, tuning=tuning, theme=theme)
    return ctx.canvas


def render_chart(
    records: Sequence[DailyRecord],
    config: ChartConfig,
    surface: ChartSurface,
    *,
    tuning: ChartTuning = DEFAULT_TUNING,
    theme: ChartTheme = DEFAULT_THEME,
) -> None:
    metrics = surface.metrics()
    if metrics is None:
        LOGGER.debug("chart surface not mounted; render skipped")
        return
    width, height = metrics.logical_width, metrics.logical_height
    if width <= 0 or height <= 0:
        width, height = config.width, config.height
    frame = rasterize_chart(
        records,
        config,
        metrics.pixel_ratio,
        size=(width, height),
        tuning=tuning,
        theme=theme,
    )
    surface.present(frame)
    LOGGER.debug("chart rendered: records=%d frame=%dx%d", len(records), frame.shape[1], frame.shape[0])
