from cyclechart.adapters.normalize import normalize_records
from cyclechart.config import ChartConfig, ChartTheme, ChartTuning, load_tuning
from cyclechart.errors import ChartConfigError, CycleChartError, RecordDataError, SurfaceUnavailableError
from cyclechart.export import encode_png, save_png
from cyclechart.layout import ChartLayout, layout_chart
from cyclechart.matrix import FrameMatrix
from cyclechart.records import DailyRecord, IntimacyEvent, fill_date_range
from cyclechart.schedule import RenderScheduler, ScheduledRender
from cyclechart.surface import ChartSurface, ImageSurface, MatrixSurface, SurfaceMetrics, rasterize_chart, render_chart
from cyclechart.view import ChartView

__all__ = [
    "ChartConfig",
    "ChartConfigError",
    "ChartLayout",
    "ChartSurface",
    "ChartTheme",
    "ChartTuning",
    "ChartView",
    "CycleChartError",
    "DailyRecord",
    "FrameMatrix",
    "ImageSurface",
    "IntimacyEvent",
    "MatrixSurface",
    "RecordDataError",
    "RenderScheduler",
    "ScheduledRender",
    "SurfaceMetrics",
    "SurfaceUnavailableError",
    "encode_png",
    "fill_date_range",
    "layout_chart",
    "load_tuning",
    "normalize_records",
    "rasterize_chart",
    "render_chart",
    "save_png",
]
