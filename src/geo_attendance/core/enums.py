from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles; ADMIN sees every record and manages the workplace."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class AttendanceType(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class AttendanceState(str, Enum):
    """Logical state derived from the newest record of a user."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class SyncState(str, Enum):
    """Local bookkeeping for optimistic writes (never persisted)."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class LocationFailure(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
