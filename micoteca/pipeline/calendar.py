"""Species occurrence calendar built from the species calendar dataset."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from micoteca.common.time_utils import format_day_month_year
from micoteca.pipeline.region_filter import parse_coordinate

CalendarSpecies = Mapping[str, Any]

MONTHS = (
    ("Gennaio", "GEN"),
    ("Febbraio", "FEB"),
    ("Marzo", "MAR"),
    ("Aprile", "APR"),
    ("Maggio", "MAG"),
    ("Giugno", "GIU"),
    ("Luglio", "LUG"),
    ("Agosto", "AGO"),
    ("Settembre", "SET"),
    ("Ottobre", "OTT"),
    ("Novembre", "NOV"),
    ("Dicembre", "DIC"),
)

# sort mode -> (date key, day-of-year key, sample key, label)
SORT_KEYS = {
    "earliest": ("earliestDate", "earliestDayOfYear", "earliestSample", "Prima raccolta"),
    "latest": ("latestDate", "latestDayOfYear", "latestSample", "Ultima raccolta"),
}


def _sort_keys(sort_mode: str) -> tuple[str, str, str, str]:
    try:
        return SORT_KEYS[sort_mode]
    except KeyError:
        raise ValueError(f"Unknown sort mode: {sort_mode}") from None


def month_index(mmdd: str) -> int:
    return int(mmdd.split("-")[0]) - 1


def day_of_month(mmdd: str) -> int:
    return int(mmdd.split("-")[1])


def bucket_by_month(species: Iterable[CalendarSpecies], sort_mode: str = "earliest") -> list[list[CalendarSpecies]]:
    date_key, day_key, _sample_key, _label = _sort_keys(sort_mode)
    buckets: list[list[CalendarSpecies]] = [[] for _ in MONTHS]
    for entry in sorted(species, key=lambda item: item[day_key]):
        idx = month_index(entry[date_key])
        if 0 <= idx < len(MONTHS):
            buckets[idx].append(entry)
    return buckets


def month_bar_heights(monthly_count: Iterable[int]) -> list[int]:
    counts = list(monthly_count)
    peak = max([*counts, 1])
    return [round(count / peak * 100) for count in counts]


def sample_endpoints(entry: CalendarSpecies, sort_mode: str) -> dict[str, dict]:
    """Featured sample for the active sort mode, plus the opposite endpoint."""
    other_mode = "latest" if sort_mode == "earliest" else "earliest"
    _d, _doy, featured_key, featured_label = _sort_keys(sort_mode)
    _d, _doy, other_key, other_label = _sort_keys(other_mode)
    return {
        "featured": {"label": featured_label, "sample": dict(entry.get(featured_key) or {})},
        "other": {"label": other_label, "sample": dict(entry.get(other_key) or {})},
    }


def format_collection_date(iso_date: str | None) -> str:
    return format_day_month_year(iso_date)


def openstreetmap_url(coordinates: str, zoom: int = 14) -> str:
    point = parse_coordinate(coordinates)
    return f"https://www.openstreetmap.org/?mlat={point.latitude}&mlon={point.longitude}&zoom={zoom}"


def build_calendar(species: Iterable[CalendarSpecies], sort_mode: str = "earliest") -> list[dict]:
    date_key = _sort_keys(sort_mode)[0]
    months = []
    for (full, abbr), entries in zip(MONTHS, bucket_by_month(species, sort_mode)):
        months.append(
            {
                "month": full,
                "abbr": abbr,
                "count": len(entries),
                "species": [
                    {
                        "fullName": entry.get("fullName"),
                        "day": day_of_month(entry[date_key]),
                        "totalSamples": entry.get("totalSamples", 0),
                    }
                    for entry in entries
                ],
            }
        )
    return months
