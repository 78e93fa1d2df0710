from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cyclechart.config import DEFAULT_TUNING, ChartTuning, Padding
from cyclechart.records import DailyRecord, temperatures


@dataclass(frozen=True)
class TemperatureRange:
    min: float
    max: float

    def __post_init__(self) -> None:
        if not self.min < self.max:
            raise ValueError("temperature range must satisfy min < max")

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class PlotRect:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def inset(cls, width: float, height: float, padding: Padding) -> "PlotRect":
        return cls(
            left=padding.left,
            top=padding.top,
            width=max(1.0, width - padding.left - padding.right),
            height=max(1.0, height - padding.top - padding.bottom),
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


def compute_temperature_range(records: Sequence[DailyRecord], tuning: ChartTuning = DEFAULT_TUNING) -> TemperatureRange:
    values = temperatures(records)
    if not values:
        lo, hi = tuning.default_range
        return TemperatureRange(min=lo, max=hi)

    env_lo, env_hi = tuning.envelope
    clipped = np.clip(np.asarray(values, dtype=np.float64), env_lo, env_hi)
    raw_min = float(np.min(clipped))
    raw_max = float(np.max(clipped))
    margin = (raw_max - raw_min) * tuning.range_margin_ratio
    if raw_max == raw_min:
        margin = tuning.range_margin_floor
    return TemperatureRange(min=max(env_lo, raw_min - margin), max=min(env_hi, raw_max + margin))


def natural_spacing(count: int, rect: PlotRect) -> float:
    return rect.width / max(1, count - 1)


def index_to_x(index: int, count: int, rect: PlotRect) -> float:
    return rect.left + (index / max(1, count - 1)) * rect.width


def temperature_to_y(value: float, rng: TemperatureRange, rect: PlotRect) -> float:
    y = rect.top + rect.height - ((value - rng.min) / rng.span) * rect.height
    # Out-of-envelope readings pin to the plot edge instead of leaving it.
    return min(rect.bottom, max(rect.top, y))


def fallback_y(rect: PlotRect, tuning: ChartTuning = DEFAULT_TUNING) -> float:
    return rect.top + rect.height * tuning.fallback_height_ratio


def decimation_stride(count: int, spacing: float, *, min_spacing: float, density_threshold: int, max_items: int) -> int:
    if spacing < min_spacing and count > density_threshold:
        return max(1, -(-count // max_items))
    return 1


def format_temperature(value: float) -> str:
    return f"{value:.1f}°C"
