from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class LocationUnavailableError(ValidationError):
    """No usable device position (permission denied, unavailable, timeout)."""

    def __init__(self, message: str = "location unavailable", failure=None):
        super().__init__(message)
        self.failure = failure


class OutsideGeofenceError(ValidationError):
    def __init__(self, distance_m: float, radius_m: float):
        super().__init__(f"outside allowed radius: got {round(distance_m)}m, limit {radius_m:g}m")
        self.distance_m = distance_m
        self.radius_m = radius_m


class InvalidTransitionError(ValidationError):
    """Requested check-in/check-out does not follow the current state."""


class WorkplaceNotConfiguredError(ValidationError):
    """Raised when check-in requires a workplace config and none is loaded."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class EmailConfirmationRequiredError(AuthenticationError):
    """Account exists but the e-mail address has not been confirmed yet."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PersistError(DomainError):
    """Durable store could not complete a read or write."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
