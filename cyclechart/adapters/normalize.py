from __future__ import annotations

from collections.abc import Iterable, Mapping
import datetime as dt
import math
from typing import Any

from cyclechart.errors import RecordDataError
from cyclechart.records import DailyRecord, IntimacyEvent


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


LEGACY_FLOW_PAD_COUNTS = {"none": 0, "light": 1, "medium": 2, "heavy": 3}

_MENSTRUAL_KEYS = ("menstrual", "menstrual_intensity", "menstrualIntensity")
_INTIMACY_KEYS = ("intercourse", "intimacy_events", "intimacyEvents")
_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0"})


def normalize_records(raw: Any) -> list[DailyRecord]:
    """Coerce records, day mappings or a DataFrame into date-sorted DailyRecords.

    Records without a date are dropped. For duplicate dates the last one wins.
    """
    if raw is None:
        return []
    if pd is not None and isinstance(raw, pd.DataFrame):
        items: Iterable[Any] = _records_from_frame(raw)
    elif isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raise RecordDataError(f"unsupported records input type: {type(raw)!r}")
    else:
        items = raw

    by_date: dict[dt.date, DailyRecord] = {}
    for i, item in enumerate(items):
        if isinstance(item, DailyRecord):
            record = item
        elif isinstance(item, Mapping):
            record = _record_from_mapping(item, position=i)
        else:
            raise RecordDataError(f"record {i} has unsupported type: {type(item)!r}")
        if record.date is None:
            continue
        by_date[record.date] = record
    return [by_date[day] for day in sorted(by_date)]


def parse_date(value: Any) -> dt.date | None:
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if pd is not None and isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError as exc:
            raise RecordDataError(f"unparsable date: {value!r}") from exc
    raise RecordDataError(f"unsupported date value: {value!r}")


def _record_from_mapping(item: Mapping[str, Any], *, position: int) -> DailyRecord:
    try:
        day = parse_date(item.get("date"))
    except RecordDataError as exc:
        raise RecordDataError(f"record {position}: {exc}") from exc
    try:
        return DailyRecord(
            date=day,
            temperature=_coerce_temperature(item.get("temperature")),
            menstrual_intensity=_coerce_menstrual(_first_present(item, _MENSTRUAL_KEYS)),
            intimacy_events=_coerce_events(_first_present(item, _INTIMACY_KEYS)),
        )
    except ValueError as exc:
        raise RecordDataError(f"record {position} ({day}): {exc}") from exc


def _first_present(item: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in item and item[key] is not None:
            return item[key]
    return None


def _coerce_number(value: Any, label: str) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise RecordDataError(f"{label} must be numeric, got {value!r}")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise RecordDataError(f"{label} must be numeric, got {value!r}") from exc
    if not math.isfinite(out):
        return None
    return out


def _coerce_temperature(value: Any) -> float | None:
    if isinstance(value, Mapping):
        value = value.get("temperature")
    return _coerce_number(value, "temperature")


def _coerce_menstrual(value: Any) -> int | None:
    if isinstance(value, Mapping):
        if value.get("padCount") is not None:
            value = value["padCount"]
        elif value.get("pad_count") is not None:
            value = value["pad_count"]
        elif value.get("flow") is not None:
            return LEGACY_FLOW_PAD_COUNTS.get(str(value["flow"]).strip().lower(), 0)
        else:
            return None
    if isinstance(value, str) and value.strip().lower() in LEGACY_FLOW_PAD_COUNTS:
        return LEGACY_FLOW_PAD_COUNTS[value.strip().lower()]
    number = _coerce_number(value, "menstrual intensity")
    if number is None:
        return None
    if number < 0:
        raise RecordDataError(f"menstrual intensity must be >= 0, got {number}")
    return int(number)


def _coerce_events(value: Any) -> tuple[IntimacyEvent, ...]:
    if value is None:
        return ()
    if isinstance(value, (IntimacyEvent, Mapping)):
        value = [value]
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise RecordDataError(f"intimacy events must be a list, got {type(value)!r}")
    out: list[IntimacyEvent] = []
    for event in value:
        if event is None:
            continue
        if isinstance(event, IntimacyEvent):
            out.append(event)
        elif isinstance(event, Mapping):
            out.append(
                IntimacyEvent(
                    type=None if event.get("type") is None else str(event.get("type")),
                    time=None if event.get("time") is None else str(event.get("time")),
                    protection=_coerce_protection(event.get("protection")),
                    note=None if event.get("note") is None else str(event.get("note")),
                )
            )
        else:
            raise RecordDataError(f"unsupported intimacy event: {event!r}")
    return tuple(out)


def _coerce_protection(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return None
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return None
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    # Unrecognized flags are treated as absent.
    return None


def _records_from_frame(frame: Any) -> list[dict[str, Any]]:
    if "date" not in frame.columns:
        raise RecordDataError("DataFrame input requires a `date` column")
    out: list[dict[str, Any]] = []
    for row in frame.to_dict(orient="records"):
        item: dict[str, Any] = {"date": row.get("date")}
        if pd.isna(item["date"]):
            item["date"] = None
        for column in ("temperature", "menstrual_intensity"):
            value = row.get(column)
            if value is not None and not pd.isna(value):
                item[column] = value
        count = row.get("intimacy_count")
        if count is not None and not pd.isna(count) and int(count) > 0:
            item["intimacy_events"] = [{"type": "marked"} for _ in range(int(count))]
        out.append(item)
    return out
