"""Region resolution and even-odd point-in-polygon testing.

A region is a single outer ring of ``(longitude, latitude)`` vertices taken
from one of three GeoJSON containers: a bare ``Polygon``, a ``Feature``
wrapping a polygon, or a ``FeatureCollection`` whose first feature is used.
Holes and any further features are ignored.

Classification of a point lying exactly on an edge or vertex depends on the
direction of the ray and is not defined.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from micoteca.common.errors import InvalidGeometry

Vertex = tuple[float, float]
Ring = tuple[Vertex, ...]

MIN_RING_VERTICES = 3


def _polygon_ring(payload: Mapping[str, Any]) -> Any:
    rings = payload.get("coordinates")
    if not isinstance(rings, (list, tuple)) or not rings:
        raise InvalidGeometry("Polygon has no rings")
    return rings[0]


def _feature_ring(payload: Mapping[str, Any]) -> Any:
    geometry = payload.get("geometry")
    if not isinstance(geometry, Mapping) or geometry.get("type") != "Polygon":
        raise InvalidGeometry("Feature geometry must be a Polygon")
    return _polygon_ring(geometry)


def _feature_collection_ring(payload: Mapping[str, Any]) -> Any:
    features = payload.get("features")
    if not isinstance(features, (list, tuple)) or not features:
        raise InvalidGeometry("FeatureCollection has no features")
    first = features[0]
    if not isinstance(first, Mapping):
        raise InvalidGeometry("FeatureCollection first feature is not an object")
    return _feature_ring(first)


_RING_RESOLVERS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    "Polygon": _polygon_ring,
    "Feature": _feature_ring,
    "FeatureCollection": _feature_collection_ring,
}


def _to_vertex(raw: Any, idx: int) -> Vertex:
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise InvalidGeometry(f"Ring vertex {idx} is not a [lon, lat] pair")
    try:
        lon = float(raw[0])
        lat = float(raw[1])
    except (TypeError, ValueError) as exc:
        raise InvalidGeometry(f"Ring vertex {idx} is not numeric") from exc
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidGeometry(f"Ring vertex {idx} is not finite")
    return lon, lat


def resolve_outer_ring(payload: Mapping[str, Any]) -> Ring:
    if not isinstance(payload, Mapping):
        raise InvalidGeometry("Region payload must be a GeoJSON object")
    kind = payload.get("type")
    resolver = _RING_RESOLVERS.get(kind) if isinstance(kind, str) else None
    if resolver is None:
        raise InvalidGeometry(f"Unsupported region type: {kind!r}")

    raw_ring = resolver(payload)
    if not isinstance(raw_ring, (list, tuple)):
        raise InvalidGeometry("Outer ring must be a list of vertices")
    if len(raw_ring) < MIN_RING_VERTICES:
        raise InvalidGeometry(f"Outer ring needs at least {MIN_RING_VERTICES} vertices, got {len(raw_ring)}")
    return tuple(_to_vertex(raw, idx) for idx, raw in enumerate(raw_ring))


@dataclass(frozen=True)
class Region:
    ring: Ring

    def __post_init__(self) -> None:
        if len(self.ring) < MIN_RING_VERTICES:
            raise InvalidGeometry(f"Outer ring needs at least {MIN_RING_VERTICES} vertices, got {len(self.ring)}")

    @classmethod
    def from_geojson(cls, payload: Mapping[str, Any]) -> "Region":
        return cls(ring=resolve_outer_ring(payload))

    def contains(self, lat: float, lon: float) -> bool:
        return ring_contains(self.ring, lat, lon)


RegionLike = Union[Region, Mapping[str, Any]]


def as_region(region: RegionLike) -> Region:
    if isinstance(region, Region):
        return region
    return Region.from_geojson(region)


def ring_contains(ring: Ring, lat: float, lon: float) -> bool:
    """Even-odd ray cast towards increasing longitude."""
    inside = False
    prev_lon, prev_lat = ring[-1]
    for cur_lon, cur_lat in ring:
        # Horizontal edges fail the first test, so the division is safe.
        if (cur_lat > lat) != (prev_lat > lat):
            cross_lon = cur_lon + (lat - cur_lat) * (prev_lon - cur_lon) / (prev_lat - cur_lat)
            if cross_lon > lon:
                inside = not inside
        prev_lon, prev_lat = cur_lon, cur_lat
    return inside


def point_in_region(lat: float, lon: float, region: RegionLike) -> bool:
    return as_region(region).contains(lat, lon)
