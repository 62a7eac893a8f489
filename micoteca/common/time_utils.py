"""UTC timestamps and date formatting helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def format_day_month_year(value: str | None, *, empty: str = "—") -> str:
    if not value:
        return empty
    parsed = date.fromisoformat(value[:10])
    return parsed.strftime("%d/%m/%Y")
