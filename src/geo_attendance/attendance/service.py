from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import format_day, now_ms
from ..common.validators import clean_note
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceType, SyncState
from ..core.exceptions import (
    InvalidTransitionError,
    LocationUnavailableError,
    OutsideGeofenceError,
    WorkplaceNotConfiguredError,
)
from ..geofence import evaluator
from ..geofence.model import Coordinate, WorkplaceConfig
from ..users.service import SessionUser
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state import current_state, validate_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayGroup:
    day: str
    records: list[AttendanceRecord]

    def to_dict(self) -> dict:
        return {"day": self.day, "records": [r.to_dict() for r in self.records]}


class AttendanceService:
    """Use case: geofence-gated check-in/check-out and history reads."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        require_workplace_config: bool = False,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._attendance = attendance
        self._require_config = bool(require_workplace_config)
        self._history_limit = int(history_limit)

    def history_for(self, user: SessionUser, *, view_all: bool = False) -> list[AttendanceRecord]:
        """Role-scoped history; ``view_all`` only widens the scope for admins."""
        return list(
            self._attendance.query_history(
                caller_id=user.id,
                caller_role=user.role,
                user_id=None if (view_all and user.is_admin) else user.id,
                limit=self._history_limit,
            )
        )

    def prepare_submission(
        self,
        user: SessionUser,
        requested: AttendanceType,
        *,
        location: Optional[Coordinate],
        history: Sequence[AttendanceRecord],
        config: Optional[WorkplaceConfig],
        note: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> AttendanceRecord:
        """Run the local checks and build the record to append.

        ``history`` is the caller's own records, newest first. Nothing is
        written here; every rejection happens before the store is touched.
        """
        if location is None:
            raise LocationUnavailableError("location unavailable")

        if config is not None:
            check = evaluator.check(location, config)
            if not check.inside:
                raise OutsideGeofenceError(check.distance_m, config.radius_meters)
        elif self._require_config:
            raise WorkplaceNotConfiguredError("Workplace location is not configured")
        else:
            logger.warning("[attendance] no workplace config loaded, allowing %s for user_id=%s", requested.value, user.id)

        decision = validate_transition(current_state(history), requested)
        if not decision.allowed:
            raise InvalidTransitionError(decision.reason)

        return AttendanceRecord(
            id=str(uuid.uuid4()),
            user_id=user.id,
            user_name=user.display_name,
            user_role=user.role,
            type=requested,
            timestamp=timestamp if timestamp is not None else now_ms(),
            location=location,
            note=clean_note(note),
            sync_state=SyncState.PENDING,
        )

    def persist(self, record: AttendanceRecord) -> AttendanceRecord:
        saved = self._attendance.append(record)
        logger.info("[attendance] %s saved record_id=%s user_id=%s", record.type.value, record.id, record.user_id)
        return saved

    @staticmethod
    def group_by_day(records: Sequence[AttendanceRecord]) -> list[DayGroup]:
        groups: list[DayGroup] = []
        for r in records:
            day = format_day(r.timestamp)
            if groups and groups[-1].day == day:
                groups[-1].records.append(r)
            else:
                groups.append(DayGroup(day=day, records=[r]))
        return groups
