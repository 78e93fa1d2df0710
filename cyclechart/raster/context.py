from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Sequence

import numpy as np

from cyclechart.raster.canvas import RGBA, clear, fill_rect, new_canvas
from cyclechart.raster.draw_lines import Point, draw_dashed_hline, draw_dashed_vline, draw_polyline
from cyclechart.raster.draw_markers import fill_circle, stroke_circle
from cyclechart.raster.draw_text import draw_text, text_size


HAlign = Literal["left", "center", "right"]
VAlign = Literal["top", "middle", "bottom"]


@dataclass(frozen=True)
class Stroke:
    color: RGBA
    width: float = 1.0
    dash: tuple[float, float] | None = None


@dataclass(frozen=True)
class TextStyle:
    color: RGBA
    size_px: float = 12.0
    align: HAlign = "left"
    valign: VAlign = "top"


class DrawContext:
    """Logical-unit drawing on an RGBA canvas scaled by the device pixel ratio.

    Every primitive takes its own style; the context carries no pen state.
    """

    def __init__(self, canvas: np.ndarray, scale: float = 1.0) -> None:
        if canvas.ndim != 3 or canvas.shape[2] != 4 or canvas.dtype != np.uint8:
            raise ValueError("canvas must be a uint8 array of shape (H, W, 4)")
        if scale <= 0:
            raise ValueError("scale must be > 0")
        self.canvas = canvas
        self.scale = float(scale)

    @classmethod
    def create(cls, logical_width: float, logical_height: float, pixel_ratio: float, background: RGBA) -> "DrawContext":
        if logical_width <= 0 or logical_height <= 0:
            raise ValueError("logical size must be > 0")
        width_px = max(1, int(math.ceil(logical_width * pixel_ratio)))
        height_px = max(1, int(math.ceil(logical_height * pixel_ratio)))
        return cls(new_canvas(width_px, height_px, color=background), scale=pixel_ratio)

    @property
    def width(self) -> float:
        return self.canvas.shape[1] / self.scale

    @property
    def height(self) -> float:
        return self.canvas.shape[0] / self.scale

    def clear(self, color: RGBA) -> None:
        clear(self.canvas, color)

    def line(self, x0: float, y0: float, x1: float, y1: float, stroke: Stroke) -> None:
        s = self.scale
        if stroke.dash is not None and (x0 == x1 or y0 == y1):
            dash = (stroke.dash[0] * s, stroke.dash[1] * s)
            if y0 == y1:
                draw_dashed_hline(self.canvas, x0 * s, x1 * s, y0 * s, stroke.color, width=stroke.width * s, dash=dash)
            else:
                draw_dashed_vline(self.canvas, x0 * s, y0 * s, y1 * s, stroke.color, width=stroke.width * s, dash=dash)
            return
        self.polyline(((x0, y0), (x1, y1)), stroke)

    def polyline(self, points: Sequence[Point], stroke: Stroke) -> None:
        s = self.scale
        draw_polyline(self.canvas, [(x * s, y * s) for x, y in points], stroke.color, width=stroke.width * s)

    def circle(self, cx: float, cy: float, radius: float, *, fill: RGBA | None = None, outline: Stroke | None = None) -> None:
        s = self.scale
        if fill is not None:
            fill_circle(self.canvas, cx * s, cy * s, radius * s, fill)
        if outline is not None:
            stroke_circle(self.canvas, cx * s, cy * s, radius * s, outline.color, width=outline.width * s)

    def rect(self, x: float, y: float, width: float, height: float, fill: RGBA) -> None:
        s = self.scale
        fill_rect(
            self.canvas,
            int(round(x * s)),
            int(round(y * s)),
            int(round((x + width) * s)),
            int(round((y + height) * s)),
            fill,
        )

    def text(self, x: float, y: float, text: str, style: TextStyle) -> None:
        if not text:
            return
        s = self.scale
        size_px = style.size_px * s
        w, h = text_size(text, font_size_px=size_px)
        px = x * s
        py = y * s
        if style.align == "center":
            px -= w / 2.0
        elif style.align == "right":
            px -= w
        if style.valign == "middle":
            py -= h / 2.0
        elif style.valign == "bottom":
            py -= h
        draw_text(self.canvas, int(round(px)), int(round(py)), text, style.color, font_size_px=size_px)
