from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.validators import require_float, require_latitude, require_longitude, require_radius
from ..core.constants import (
    DEFAULT_WORKPLACE_LATITUDE,
    DEFAULT_WORKPLACE_LONGITUDE,
    DEFAULT_WORKPLACE_RADIUS_METERS,
)


@dataclass(frozen=True)
class Coordinate:
    """WGS84 position; accuracy/timestamp are set for live readings."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: Optional[int] = None

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "Coordinate":
        accuracy = data.get("accuracy")
        timestamp = data.get("timestamp")
        return cls(
            latitude=require_latitude(data.get("latitude")),
            longitude=require_longitude(data.get("longitude")),
            accuracy=require_float(accuracy, "accuracy") if accuracy is not None else None,
            timestamp=int(require_float(timestamp, "timestamp")) if timestamp is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "timestamp": self.timestamp,
        }

    def maps_url(self) -> str:
        return f"https://www.google.com/maps?q={self.latitude},{self.longitude}"


@dataclass(frozen=True)
class WorkplaceConfig:
    """Geofence anchor and allowed radius (singleton record)."""

    latitude: float
    longitude: float
    radius_meters: float

    @property
    def anchor(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def default(cls) -> "WorkplaceConfig":
        return cls(
            latitude=DEFAULT_WORKPLACE_LATITUDE,
            longitude=DEFAULT_WORKPLACE_LONGITUDE,
            radius_meters=DEFAULT_WORKPLACE_RADIUS_METERS,
        )

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "WorkplaceConfig":
        return cls(
            latitude=require_latitude(data.get("latitude")),
            longitude=require_longitude(data.get("longitude")),
            radius_meters=require_radius(data.get("radius_meters")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius_meters": self.radius_meters,
        }
