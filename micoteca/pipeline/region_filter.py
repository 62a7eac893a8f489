"""Coordinate parsing and region filtering of geo-tagged records."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Iterator

from micoteca.common.constants import DEFAULT_COORDINATES_FIELD
from micoteca.common.errors import DatasetError, MalformedCoordinate
from micoteca.common.geometry import RegionLike, as_region
from micoteca.common.models import Point

MalformedHandler = Callable[[Mapping[str, Any], MalformedCoordinate], None]


def _parse_float(text: str, original: str) -> float:
    try:
        value = float(text.strip())
    except ValueError as exc:
        raise MalformedCoordinate(f"Non-numeric coordinate field in {original!r}") from exc
    if not math.isfinite(value):
        raise MalformedCoordinate(f"Non-finite coordinate field in {original!r}")
    return value


def parse_coordinate(value: Any) -> Point:
    """Parse a ``"<lat>, <lon>"`` string, splitting on the first comma."""
    if not isinstance(value, str):
        raise MalformedCoordinate(f"Coordinate must be a string, got {type(value).__name__}")
    parts = value.split(",", 1)
    if len(parts) != 2:
        raise MalformedCoordinate(f"Expected '<lat>, <lon>', got {value!r}")
    point = Point(latitude=_parse_float(parts[0], value), longitude=_parse_float(parts[1], value))
    if not point.in_range():
        raise MalformedCoordinate(f"Coordinate out of range: {value!r}")
    return point


def records_in_region(
    records: Iterable[Mapping[str, Any]],
    region: RegionLike,
    *,
    coordinates_field: str = DEFAULT_COORDINATES_FIELD,
    on_malformed: MalformedHandler | None = None,
) -> Iterator[Mapping[str, Any]]:
    # Resolve before returning the generator so InvalidGeometry is raised at call time.
    resolved = as_region(region)
    return _select(records, resolved.contains, coordinates_field, on_malformed)


def _select(
    records: Iterable[Mapping[str, Any]],
    contains: Callable[[float, float], bool],
    coordinates_field: str,
    on_malformed: MalformedHandler | None,
) -> Iterator[Mapping[str, Any]]:
    for record in records:
        try:
            if not isinstance(record, Mapping):
                raise MalformedCoordinate(f"Record is not an object: {type(record).__name__}")
            point = parse_coordinate(record.get(coordinates_field))
        except MalformedCoordinate as exc:
            if on_malformed is not None:
                on_malformed(record, exc)
            continue
        if contains(point.latitude, point.longitude):
            yield record


def extract_records(payload: Any, records_key: str) -> list[Mapping[str, Any]]:
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise DatasetError("Dataset must be a JSON list or object")
    if isinstance(payload.get(records_key), list):
        return payload[records_key]
    species = payload.get("species")
    if isinstance(species, list):
        records: list[Mapping[str, Any]] = []
        for entry in species:
            # species without specimens (or not an object at all) contribute nothing
            nested = entry.get(records_key) if isinstance(entry, Mapping) else None
            if isinstance(nested, list):
                records.extend(nested)
        return records
    raise DatasetError(f"Dataset has no '{records_key}' records")
