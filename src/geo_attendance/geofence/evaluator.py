"""Great-circle distance and circular geofence membership."""
from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinate, WorkplaceConfig


@dataclass(frozen=True)
class GeofenceCheck:
    distance_m: float
    radius_m: float
    inside: bool

    def to_dict(self) -> dict:
        return {
            "distance_m": round(self.distance_m),
            "radius_m": self.radius_m,
            "in_range": self.inside,
        }


def distance(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in metres on a sphere of mean Earth radius.

    Longitudes only enter through sin/cos, so the ±180° seam needs no
    special handling.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_within(current: Coordinate, anchor: Coordinate, radius_meters: float) -> bool:
    """Boundary inclusive: a point exactly on the edge is in range."""
    return distance(current, anchor) <= radius_meters


def check(current: Coordinate, config: WorkplaceConfig) -> GeofenceCheck:
    d = distance(current, config.anchor)
    return GeofenceCheck(distance_m=d, radius_m=config.radius_meters, inside=d <= config.radius_meters)
