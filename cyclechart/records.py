from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
import math
import numbers
from typing import Sequence


UNMARKED_INTIMACY_TYPES = frozenset({"", "none", "no"})


@dataclass(frozen=True)
class IntimacyEvent:
    type: str | None = None
    time: str | None = None
    protection: bool | None = None
    note: str | None = None

    @property
    def is_marked(self) -> bool:
        if self.type is None:
            return False
        return self.type.strip().lower() not in UNMARKED_INTIMACY_TYPES


@dataclass(frozen=True)
class DailyRecord:
    """One calendar day of optional temperature, flow and intimacy data."""

    date: dt.date | None
    temperature: float | None = None
    menstrual_intensity: int | None = None
    intimacy_events: tuple[IntimacyEvent, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", _coerce_date(self.date))
        object.__setattr__(self, "temperature", _coerce_temperature(self.temperature))
        if self.menstrual_intensity is not None and self.menstrual_intensity < 0:
            raise ValueError("menstrual_intensity must be >= 0")
        if not isinstance(self.intimacy_events, tuple):
            object.__setattr__(self, "intimacy_events", tuple(self.intimacy_events))

    @property
    def has_temperature(self) -> bool:
        return self.temperature is not None and math.isfinite(self.temperature)

    @property
    def has_menstrual_flow(self) -> bool:
        return self.menstrual_intensity is not None and self.menstrual_intensity > 0

    @property
    def intimacy_count(self) -> int:
        return sum(1 for event in self.intimacy_events if event.is_marked)

    @property
    def has_intimacy(self) -> bool:
        return any(event.is_marked for event in self.intimacy_events)


def _coerce_date(value: object) -> dt.date | None:
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ValueError(f"date must be ISO YYYY-MM-DD, got {value!r}") from exc
    raise ValueError(f"date must be a date or ISO string, got {type(value)!r}")


def _coerce_temperature(value: object) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return float(value)
        except ValueError as exc:
            raise ValueError(f"temperature must be numeric, got {value!r}") from exc
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"temperature must be numeric, got {type(value)!r}")
    return float(value)


def temperatures(records: Sequence[DailyRecord]) -> list[float]:
    return [float(record.temperature) for record in records if record.has_temperature]  # type: ignore[arg-type]


def fill_date_range(records: Sequence[DailyRecord], start: dt.date, end: dt.date) -> list[DailyRecord]:
    """Expand sparse records into one record per day in ``[start, end]``.

    Days without a record become empty records. For duplicate dates the last
    record wins; records outside the range are dropped.
    """
    if end < start:
        raise ValueError("end must not precede start")
    by_date: dict[dt.date, DailyRecord] = {}
    for record in records:
        if record.date is not None:
            by_date[record.date] = record
    out: list[DailyRecord] = []
    day = start
    one = dt.timedelta(days=1)
    while day <= end:
        out.append(by_date.get(day, DailyRecord(date=day)))
        day += one
    return out
