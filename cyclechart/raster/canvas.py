from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def clear(dst: np.ndarray, color: RGBA) -> None:
    dst[:, :, 0] = color[0]
    dst[:, :, 1] = color[1]
    dst[:, :, 2] = color[2]
    dst[:, :, 3] = color[3]


def blend_mask(dst: np.ndarray, x0: int, y0: int, mask: np.ndarray, color: RGBA) -> None:
    """Source-over blend ``color`` through a boolean or [0, 1] coverage mask placed at (x0, y0)."""
    h, w = mask.shape
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x0 + w)
    yb = min(dst.shape[0], y0 + h)
    if xa >= xb or ya >= yb:
        return
    cov = mask[ya - y0 : yb - y0, xa - x0 : xb - x0].astype(np.float32)
    if not np.any(cov > 0):
        return
    a = (color[3] / 255.0) * cov[:, :, None]
    view = dst[ya:yb, xa:xb]
    src = np.asarray(color[0:3], dtype=np.float32).reshape(1, 1, 3)
    view[:, :, :3] = np.rint(src * a + view[:, :, :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    view[:, :, 3] = 255


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Fill the half-open pixel rectangle [x0, x1) x [y0, y1)."""
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0], max(y0, y1))
    if xa >= xb or ya >= yb:
        return
    blend_mask(dst, xa, ya, np.ones((yb - ya, xb - xa), dtype=bool), color)

