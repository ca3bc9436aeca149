from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..core.enums import LocationFailure
from ..core.exceptions import LocationUnavailableError, ValidationError
from .model import Coordinate

_FAILURE_MESSAGES = {
    LocationFailure.PERMISSION_DENIED: "Location permission denied. Please enable GPS.",
    LocationFailure.UNAVAILABLE: "Unable to retrieve location. Please enable GPS.",
    LocationFailure.TIMEOUT: "Timed out while retrieving location.",
}


class LocationProvider(Protocol):
    def read(self) -> Coordinate:
        """One-shot device position; raises LocationUnavailableError."""

        raise NotImplementedError


def failure_error(failure: LocationFailure) -> LocationUnavailableError:
    return LocationUnavailableError(_FAILURE_MESSAGES[failure], failure=failure)


class ReportedLocationProvider(LocationProvider):
    """Position acquired by the browser and posted to the API.

    The payload is either a reading (``latitude``, ``longitude``,
    ``accuracy``, ``timestamp``) or ``{"error": <failure code>}``. The browser
    applies the acquisition timeout itself and reports ``timeout``.
    """

    def __init__(self, payload: Mapping[str, Any] | None):
        self._payload = dict(payload or {})

    def read(self) -> Coordinate:
        error = self._payload.get("error")
        if error:
            try:
                failure = LocationFailure(str(error))
            except ValueError:
                failure = LocationFailure.UNAVAILABLE
            raise failure_error(failure)

        if "latitude" not in self._payload or "longitude" not in self._payload:
            raise failure_error(LocationFailure.UNAVAILABLE)

        try:
            return Coordinate.parse(self._payload)
        except ValidationError as e:
            raise LocationUnavailableError(f"Invalid location reading: {e}", failure=LocationFailure.UNAVAILABLE) from e
