from __future__ import annotations

import math

import numpy as np

from cyclechart.raster.canvas import RGBA, blend_mask


def fill_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    _blend_annulus(dst, cx, cy, inner=None, outer=radius, color=color)


def stroke_circle(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA, width: float = 1.0) -> None:
    """Stroke a circle outline centered on ``radius`` (half inside, half outside)."""
    if radius <= 0 or width <= 0:
        return
    half = max(0.5, width * 0.5)
    _blend_annulus(dst, cx, cy, inner=max(0.0, radius - half), outer=radius + half, color=color)


def _blend_annulus(dst: np.ndarray, cx: float, cy: float, *, inner: float | None, outer: float, color: RGBA) -> None:
    x0 = int(math.floor(cx - outer)) - 1
    y0 = int(math.floor(cy - outer)) - 1
    x1 = int(math.ceil(cx + outer)) + 1
    y1 = int(math.ceil(cy + outer)) + 1
    px = np.arange(x0, x1, dtype=np.float64)[None, :] + 0.5
    py = np.arange(y0, y1, dtype=np.float64)[:, None] + 0.5
    dist_sq = (px - cx) ** 2 + (py - cy) ** 2
    mask = dist_sq <= outer * outer
    if inner is not None:
        mask &= dist_sq >= inner * inner
    blend_mask(dst, x0, y0, mask, color)
