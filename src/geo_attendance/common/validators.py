from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import MAX_RADIUS_METERS, MIN_RADIUS_METERS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_float(value: Any, field_name: str) -> float:
    """Coerce to a finite float; bools and NaN/inf are rejected."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_latitude(value: Any) -> float:
    lat = require_float(value, "latitude")
    if abs(lat) > 90:
        raise ValidationError("latitude must be within [-90, 90]")
    return lat


def require_longitude(value: Any) -> float:
    lon = require_float(value, "longitude")
    if abs(lon) > 180:
        raise ValidationError("longitude must be within [-180, 180]")
    return lon


def require_radius(value: Any, *, bounded: bool = True) -> float:
    radius = require_float(value, "radius_meters")
    if radius <= 0:
        raise ValidationError("radius_meters must be positive")
    if bounded and not (MIN_RADIUS_METERS <= radius <= MAX_RADIUS_METERS):
        raise ValidationError(f"radius_meters must be within [{MIN_RADIUS_METERS}, {MAX_RADIUS_METERS}]")
    return radius


def clean_note(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    note = str(value).strip()
    return note or None
