from .canvas import clear, fill_rect, new_canvas
from .context import DrawContext, Stroke, TextStyle
from .draw_lines import draw_dashed_hline, draw_dashed_vline, draw_line, draw_polyline
from .draw_markers import fill_circle, stroke_circle
from .draw_text import draw_text, text_size

__all__ = [
    "DrawContext",
    "Stroke",
    "TextStyle",
    "clear",
    "draw_dashed_hline",
    "draw_dashed_vline",
    "draw_line",
    "draw_polyline",
    "draw_text",
    "fill_circle",
    "fill_rect",
    "new_canvas",
    "stroke_circle",
    "text_size",
]
