from __future__ import annotations

import numpy as np
import torch

from cyclechart.matrix import FullRewrite, ReplaceRect, WriteBatch


def _check_frame(frame_rgba: np.ndarray) -> None:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    _check_frame(frame_rgba)
    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
    return WriteBatch([FullRewrite(tensor)])


def compile_changed_rect_batch(previous: np.ndarray | None, frame_rgba: np.ndarray) -> WriteBatch | None:
    """Smallest ReplaceRect covering the pixels that differ from ``previous``.

    Falls back to a full rewrite when there is no comparable previous frame,
    and returns None when nothing changed.
    """
    _check_frame(frame_rgba)
    if previous is None or previous.shape != frame_rgba.shape:
        return compile_full_rewrite_batch(frame_rgba)
    changed = np.any(previous != frame_rgba, axis=2)
    if not np.any(changed):
        return None
    rows = np.flatnonzero(np.any(changed, axis=1))
    cols = np.flatnonzero(np.any(changed, axis=0))
    y0, y1 = int(rows[0]), int(rows[-1]) + 1
    x0, x1 = int(cols[0]), int(cols[-1]) + 1
    patch = torch.from_numpy(np.ascontiguousarray(frame_rgba[y0:y1, x0:x1]))
    return WriteBatch([ReplaceRect(x=x0, y=y0, width=x1 - x0, height=y1 - y0, rect_h_w_4=patch)])
