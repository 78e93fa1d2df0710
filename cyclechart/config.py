from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib
from typing import Any, Literal, get_args

from cyclechart.errors import ChartConfigError


RGBA = tuple[int, int, int, int]
ViewMode = Literal["all", "temperature_only"]
ChartVariant = Literal["straight", "smooth"]

VIEW_MODES: tuple[str, ...] = get_args(ViewMode)
VARIANTS: tuple[str, ...] = get_args(ChartVariant)
_VIEW_MODE_ALIASES = {"temperature": "temperature_only", "temperatureOnly": "temperature_only"}


@dataclass(frozen=True)
class ChartConfig:
    """Read-only render parameters. Any field change forces a full re-render."""

    view_mode: ViewMode = "all"
    width: float = 350.0
    height: float = 200.0
    is_enlarged: bool = False
    variant: ChartVariant = "smooth"
    show_value_labels: bool = True

    def __post_init__(self) -> None:
        mode = _VIEW_MODE_ALIASES.get(self.view_mode, self.view_mode)
        if mode not in VIEW_MODES:
            raise ChartConfigError(f"unsupported view_mode: {self.view_mode!r}")
        object.__setattr__(self, "view_mode", mode)
        if self.variant not in VARIANTS:
            raise ChartConfigError(f"unsupported variant: {self.variant!r}")
        if self.width <= 0 or self.height <= 0:
            raise ChartConfigError("width/height must be > 0")

    @property
    def shows_all_series(self) -> bool:
        return self.view_mode == "all"


@dataclass(frozen=True)
class Padding:
    top: float = 40.0
    right: float = 24.0
    bottom: float = 40.0
    left: float = 48.0


@dataclass(frozen=True)
class GlyphSize:
    radius: float
    outline_width: float


GLYPH_SIZES: dict[str, GlyphSize] = {
    "normal": GlyphSize(radius=8.0, outline_width=2.0),
    "enlarged": GlyphSize(radius=6.0, outline_width=1.5),
}


def glyph_size(is_enlarged: bool) -> GlyphSize:
    return GLYPH_SIZES["enlarged" if is_enlarged else "normal"]


@dataclass(frozen=True)
class ChartTuning:
    padding: Padding = field(default_factory=Padding)

    # vertical axis
    default_range: tuple[float, float] = (36.0, 37.5)
    envelope: tuple[float, float] = (35.0, 40.0)
    range_margin_ratio: float = 0.1
    range_margin_floor: float = 0.5
    horizontal_ticks: int = 5

    # decimation
    grid_min_spacing: float = 25.0
    grid_density_threshold: int = 15
    grid_max_lines: int = 15
    label_min_spacing: float = 18.0
    label_density_threshold: int = 20
    label_max_count: int = 20

    # series
    tension: float = 0.1
    curve_segments: int = 16
    straight_line_width: float = 2.0
    smooth_line_width: float = 3.0

    # multi-indicator glyph
    ring_radius: float = 12.0
    ring_outline_width: float = 1.5
    dot_radius: float = 4.0
    dot_orbit_radius: float = 6.0
    pair_dot_offset: float = 6.0
    fallback_height_ratio: float = 0.5

    # menstrual background
    band_alpha_base: float = 0.12
    band_alpha_per_unit: float = 0.06
    band_alpha_max: float = 0.35

    # surface
    default_pixel_ratio: float = 2.0
    settle_delay_s: float = 0.1
    enlarged_settle_delay_s: float = 0.3

    def __post_init__(self) -> None:
        lo, hi = self.envelope
        if not lo < hi:
            raise ChartConfigError("envelope must be (low, high) with low < high")
        dlo, dhi = self.default_range
        if not lo <= dlo < dhi <= hi:
            raise ChartConfigError("default_range must lie inside the envelope")
        if self.horizontal_ticks < 2:
            raise ChartConfigError("horizontal_ticks must be >= 2")
        if self.range_margin_floor <= 0:
            raise ChartConfigError("range_margin_floor must be > 0")
        if self.grid_max_lines <= 0 or self.label_max_count <= 0:
            raise ChartConfigError("grid_max_lines/label_max_count must be > 0")
        if self.curve_segments <= 0:
            raise ChartConfigError("curve_segments must be > 0")
        if not 0.0 <= self.fallback_height_ratio <= 1.0:
            raise ChartConfigError("fallback_height_ratio must be in [0, 1]")
        if self.default_pixel_ratio <= 0:
            raise ChartConfigError("default_pixel_ratio must be > 0")
        if self.settle_delay_s < 0 or self.enlarged_settle_delay_s < 0:
            raise ChartConfigError("settle delays must be >= 0")

    def settle_delay(self, is_enlarged: bool) -> float:
        return self.enlarged_settle_delay_s if is_enlarged else self.settle_delay_s


@dataclass(frozen=True)
class ChartTheme:
    background: RGBA = (255, 255, 255, 255)
    grid: RGBA = (240, 240, 240, 255)
    grid_enlarged: RGBA = (245, 245, 245, 255)
    axis_text: RGBA = (102, 102, 102, 255)
    temperature: RGBA = (255, 107, 157, 255)
    menstrual: RGBA = (255, 71, 87, 255)
    intimacy: RGBA = (83, 82, 237, 255)
    glyph_outline: RGBA = (255, 255, 255, 255)
    ring: RGBA = (200, 200, 200, 255)
    ring_fill: RGBA = (255, 255, 255, 255)
    tick_font_px: float = 12.0
    tick_font_px_enlarged: float = 11.0
    date_font_px: float = 9.0
    value_font_px: float = 10.0
    value_font_px_enlarged: float = 12.0


DEFAULT_TUNING = ChartTuning()
DEFAULT_THEME = ChartTheme()


def opaque(color: RGBA) -> RGBA:
    r, g, b, _ = color
    return (r, g, b, 255)


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, a = color
    return (r, g, b, int(round(max(0.0, min(1.0, alpha)) * a)))


def load_tuning(path: str | Path, *, base: ChartTuning = DEFAULT_TUNING) -> ChartTuning:
    """Read ``[tuning]`` overrides (and an optional ``[tuning.padding]``) from a TOML file."""
    tuning_path = Path(path)
    if not tuning_path.exists():
        raise FileNotFoundError(f"tuning file not found: {tuning_path}")
    with tuning_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid tuning file {tuning_path}: {exc}") from exc
    table = raw.get("tuning", {})
    if not isinstance(table, dict):
        raise ChartConfigError("[tuning] must be a table")
    return tuning_from_mapping(table, base=base)


def tuning_from_mapping(table: dict[str, Any], *, base: ChartTuning = DEFAULT_TUNING) -> ChartTuning:
    known = {f.name: f for f in fields(ChartTuning)}
    overrides: dict[str, Any] = {}
    for key, value in table.items():
        if key not in known:
            raise ChartConfigError(f"unknown tuning key: {key}")
        if key == "padding":
            overrides[key] = _coerce_padding(value, base.padding)
            continue
        current = getattr(base, key)
        overrides[key] = _coerce_like(key, value, current)
    return replace(base, **overrides)


def _coerce_padding(value: Any, current: Padding) -> Padding:
    if not isinstance(value, dict):
        raise ChartConfigError("tuning.padding must be a table")
    allowed = {f.name for f in fields(Padding)}
    unknown = set(value) - allowed
    if unknown:
        raise ChartConfigError(f"unknown padding keys: {sorted(unknown)}")
    return replace(current, **{k: _coerce_like(f"padding.{k}", v, getattr(current, k)) for k, v in value.items()})


def _coerce_like(key: str, value: Any, current: Any) -> Any:
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ChartConfigError(f"{key} must be a boolean")
        return value
    if isinstance(current, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ChartConfigError(f"{key} must be an integer")
        return value
    if isinstance(current, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ChartConfigError(f"{key} must be a number")
        return float(value)
    if isinstance(current, tuple):
        if not isinstance(value, list) or len(value) != len(current):
            raise ChartConfigError(f"{key} must be an array of {len(current)} numbers")
        try:
            return tuple(float(v) for v in value)
        except (TypeError, ValueError) as exc:
            raise ChartConfigError(f"{key} must contain numbers") from exc
    raise ChartConfigError(f"{key} cannot be overridden")
