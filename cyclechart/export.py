from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from PIL import Image


def _to_image(frame_rgba: np.ndarray) -> Image.Image:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    return Image.fromarray(np.ascontiguousarray(frame_rgba))


def encode_png(frame_rgba: np.ndarray) -> bytes:
    buf = io.BytesIO()
    _to_image(frame_rgba).save(buf, format="PNG")
    return buf.getvalue()


def save_png(frame_rgba: np.ndarray, path: str | Path) -> Path:
    out = Path(path)
    if out.parent and not out.parent.exists():
        out.parent.mkdir(parents=True, exist_ok=True)
    _to_image(frame_rgba).save(out, format="PNG")
    return out
