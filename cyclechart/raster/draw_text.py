from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from cyclechart.raster.canvas import RGBA, blend_mask


DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
SANS_FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "helvetica",
    "arial",
    "liberationsans",
    "notosans",
)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> None:
    """Blend ``text`` with its bounding box's top-left corner at (x, y)."""
    if not text:
        return
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask = _render_mask(text=text, font=font)
    blend_mask(dst, x, y, mask.astype(np.float32) / 255.0, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=256)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + SANS_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "").replace("-", "")
            # Regular faces only; "dejavusans" would otherwise match the bold/mono variants first.
            if stem == p or stem == f"{p}regular":
                return path
    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.stem.lower().replace(" ", "").replace("-", ""):
                return path
    return None
