from __future__ import annotations

import logging
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService, DayGroup
from ..attendance.state import available_actions, current_state
from ..common.datetime_utils import now_ms
from ..core.constants import LOCATION_MAX_AGE_MS, SUMMARY_RECORD_LIMIT
from ..core.enums import AttendanceState, AttendanceType, LocationFailure
from ..core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    LocationUnavailableError,
    PersistError,
)
from ..geofence import evaluator
from ..geofence.evaluator import GeofenceCheck
from ..geofence.location import LocationProvider
from ..geofence.model import Coordinate, WorkplaceConfig
from ..geofence.service import WorkplaceService
from ..summary.generator import SummaryGenerator
from ..users.service import SessionUser
from .state import AppState

logger = logging.getLogger(__name__)


class AppController:
    """Owns one user's AppState; all mutations go through these methods."""

    def __init__(
        self,
        attendance: AttendanceService,
        workplace: WorkplaceService,
        summaries: SummaryGenerator,
        *,
        state: Optional[AppState] = None,
        location_max_age_ms: int = LOCATION_MAX_AGE_MS,
    ):
        self._attendance = attendance
        self._workplace = workplace
        self._summaries = summaries
        self._state = state or AppState()
        self._location_max_age_ms = int(location_max_age_ms)

    # -- read accessors -------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def user(self) -> SessionUser:
        if self._state.user is None:
            raise AuthorizationError("Not logged in")
        return self._state.user

    def current_state(self) -> AttendanceState:
        return current_state(self._state.ledger.for_user_durable(self.user.id))

    def is_checked_in(self) -> bool:
        return self.current_state() == AttendanceState.CHECKED_IN

    def fresh_location(self) -> Optional[Coordinate]:
        """Last reported position, or None once it is older than the allowed age."""
        received = self._state.location_received_ms
        if self._state.location is None or received is None:
            return None
        if now_ms() - received > self._location_max_age_ms:
            return None
        return self._state.location

    def enabled_actions(self) -> dict[AttendanceType, bool]:
        """Which buttons the interface enables; both are off without a fresh location."""
        actions = available_actions(self.current_state())
        if self.fresh_location() is None:
            return {t: False for t in actions}
        return actions

    def geofence_check(self) -> Optional[GeofenceCheck]:
        location = self.fresh_location()
        if location is None or self._state.workplace is None:
            return None
        return evaluator.check(location, self._state.workplace)

    def display_records(self, *, view_all: bool = False) -> list[AttendanceRecord]:
        if view_all and self.user.is_admin:
            return self._state.ledger.records()
        return self._state.ledger.for_user(self.user.id)

    def grouped_records(self, *, view_all: bool = False) -> list[DayGroup]:
        return self._attendance.group_by_day(self.display_records(view_all=view_all))

    # -- operations -----------------------------------------------------

    def login(self, user: SessionUser) -> None:
        self._state.clear()
        self._state.user = user
        self.load_records()
        self.load_workplace()

    def logout(self) -> None:
        self._state.clear()

    def load_records(self) -> None:
        user = self.user
        try:
            records = self._attendance.history_for(user, view_all=user.is_admin)
            if user.is_admin:
                # the all-users window can miss the admin's own latest record
                known = {r.id for r in records}
                records += [r for r in self._attendance.history_for(user) if r.id not in known]
        except PersistError as e:
            logger.error("[attendance] failed to load records for user_id=%s: %s", user.id, e)
            self._state.last_error = "Failed to fetch history from database."
            return
        self._state.ledger.replace_all(records)
        self._state.last_error = None

    def load_workplace(self) -> WorkplaceConfig:
        self._state.workplace = self._workplace.get_config()
        return self._state.workplace

    def report_location(self, provider: LocationProvider) -> Coordinate:
        try:
            location = provider.read()
        except LocationUnavailableError as e:
            self._state.location = None
            self._state.location_received_ms = None
            self._state.location_error = str(e)
            raise
        self._state.location = location
        self._state.location_received_ms = now_ms()
        self._state.location_error = None
        return location

    def submit(self, requested: AttendanceType, *, note: Optional[str] = None) -> AttendanceRecord:
        """Two-phase write: tentative ledger entry, then durable append."""
        user = self.user
        location = self.fresh_location()
        if location is None and self._state.location is not None:
            self._state.location = None
            self._state.location_received_ms = None
            self._state.location_error = "Location reading expired. Please refresh your location."
            raise LocationUnavailableError(self._state.location_error, failure=LocationFailure.TIMEOUT)

        record = self._attendance.prepare_submission(
            user,
            requested,
            location=location,
            history=self._state.ledger.for_user_durable(user.id),
            config=self._state.workplace,
            note=note,
        )
        tentative = self._state.ledger.add_tentative(record)

        try:
            self._attendance.persist(tentative)
        except InvalidTransitionError:
            # Another session wrote first; local history is stale.
            self._state.ledger.mark_failed(tentative.id)
            self.load_records()
            raise
        except PersistError as e:
            self._state.ledger.mark_failed(tentative.id)
            self._state.last_error = f"Save failed: {e}"
            raise

        self._state.last_error = None
        return self._state.ledger.confirm(tentative.id)

    def generate_summary(self, *, view_all: bool = False) -> Optional[str]:
        records = self.display_records(view_all=view_all)
        if not records:
            return None
        self._state.summary = self._summaries.summarize(records[:SUMMARY_RECORD_LIMIT])
        return self._state.summary

    def save_workplace(self, config: WorkplaceConfig) -> WorkplaceConfig:
        saved = self._workplace.update_config(self.user, config)
        self._state.workplace = saved
        return saved
