"""Value objects shared across the filters."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Point:
    latitude: float
    longitude: float

    def in_range(self) -> bool:
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
