from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from cyclechart.raster.canvas import RGBA, blend_mask


Point = tuple[float, float]


def draw_polyline(dst: np.ndarray, points: Sequence[Point], color: RGBA, width: float = 1.0) -> None:
    """Stroke connected segments with round caps and joins.

    Coverage is accumulated into one mask so translucent strokes do not
    double-blend where segments meet.
    """
    if len(points) < 2:
        return
    half = max(0.5, float(width) * 0.5)
    xs = np.asarray([p[0] for p in points], dtype=np.float64)
    ys = np.asarray([p[1] for p in points], dtype=np.float64)
    x0 = max(0, int(math.floor(float(xs.min()) - half)) - 1)
    y0 = max(0, int(math.floor(float(ys.min()) - half)) - 1)
    x1 = min(dst.shape[1], int(math.ceil(float(xs.max()) + half)) + 2)
    y1 = min(dst.shape[0], int(math.ceil(float(ys.max()) + half)) + 2)
    if x0 >= x1 or y0 >= y1:
        return
    mask = np.zeros((y1 - y0, x1 - x0), dtype=bool)
    for i in range(len(points) - 1):
        _stamp_capsule(mask, x0, y0, points[i], points[i + 1], half)
    blend_mask(dst, x0, y0, mask, color)


def draw_line(dst: np.ndarray, start: Point, end: Point, color: RGBA, width: float = 1.0) -> None:
    draw_polyline(dst, (start, end), color, width)


def draw_dashed_hline(
    dst: np.ndarray,
    x0: float,
    x1: float,
    y: float,
    color: RGBA,
    *,
    width: float = 1.0,
    dash: tuple[float, float] | None = None,
) -> None:
    left = int(round(min(x0, x1)))
    right = int(round(max(x0, x1)))
    thickness = max(1, int(round(width)))
    top = int(math.floor(y - thickness * 0.5 + 0.5))
    length = right - left + 1
    if length <= 0:
        return
    row = _dash_pattern(length, dash)
    blend_mask(dst, left, top, np.repeat(row[None, :], thickness, axis=0), color)


def draw_dashed_vline(
    dst: np.ndarray,
    x: float,
    y0: float,
    y1: float,
    color: RGBA,
    *,
    width: float = 1.0,
    dash: tuple[float, float] | None = None,
) -> None:
    top = int(round(min(y0, y1)))
    bottom = int(round(max(y0, y1)))
    thickness = max(1, int(round(width)))
    left = int(math.floor(x - thickness * 0.5 + 0.5))
    length = bottom - top + 1
    if length <= 0:
        return
    col = _dash_pattern(length, dash)
    blend_mask(dst, left, top, np.repeat(col[:, None], thickness, axis=1), color)


def _dash_pattern(length: int, dash: tuple[float, float] | None) -> np.ndarray:
    if dash is None:
        return np.ones(length, dtype=bool)
    on, off = dash
    on_px = max(1, int(round(on)))
    off_px = max(0, int(round(off)))
    period = on_px + off_px
    return (np.arange(length) % period) < on_px


def _stamp_capsule(mask: np.ndarray, ox: int, oy: int, a: Point, b: Point, half: float) -> None:
    ax, ay = float(a[0]), float(a[1])
    bx, by = float(b[0]), float(b[1])
    h, w = mask.shape
    xa = max(0, int(math.floor(min(ax, bx) - half)) - ox)
    xb = min(w, int(math.ceil(max(ax, bx) + half)) + 1 - ox)
    ya = max(0, int(math.floor(min(ay, by) - half)) - oy)
    yb = min(h, int(math.ceil(max(ay, by) + half)) + 1 - oy)
    if xa >= xb or ya >= yb:
        return
    # Pixel centers in canvas coordinates.
    px = np.arange(xa, xb, dtype=np.float64)[None, :] + ox + 0.5
    py = np.arange(ya, yb, dtype=np.float64)[:, None] + oy + 0.5
    dx = bx - ax
    dy = by - ay
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq <= 1e-12:
        dist_sq = (px - ax) ** 2 + (py - ay) ** 2
    else:
        t = np.clip(((px - ax) * dx + (py - ay) * dy) / seg_len_sq, 0.0, 1.0)
        dist_sq = (px - (ax + t * dx)) ** 2 + (py - (ay + t * dy)) ** 2
    mask[ya:yb, xa:xb] |= dist_sq <= half * half
