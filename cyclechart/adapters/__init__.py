from .normalize import normalize_records, parse_date

__all__ = ["normalize_records", "parse_date"]
