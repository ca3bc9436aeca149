from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceType, Role, SyncState
from ..core.exceptions import InvalidTransitionError, PersistError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geofence.model import Coordinate
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state import current_state, validate_transition

logger = logging.getLogger(__name__)

_COLUMNS = """
    record_id, user_id, user_name, user_role, type, timestamp_ms,
    latitude, longitude, accuracy, location_ts, note
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Coordinate(
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            accuracy=float(r["accuracy"]) if r.get("accuracy") is not None else None,
            timestamp=int(r["location_ts"]) if r.get("location_ts") is not None else None,
        )
    return AttendanceRecord(
        id=str(r["record_id"]),
        user_id=str(r["user_id"]),
        user_name=r["user_name"],
        user_role=Role(r["user_role"]),
        type=AttendanceType(r["type"]),
        timestamp=int(r["timestamp_ms"]),
        location=location,
        note=r.get("note"),
        sync_state=SyncState.CONFIRMED,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        loc = record.location
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Serialise appends per user so two sessions cannot both pass the check.
                cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (record.user_id,))
                fetchall(cur)
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_records
                    WHERE user_id=%s
                    ORDER BY timestamp_ms DESC
                    LIMIT 1
                    """,
                    (record.user_id,),
                )
                latest = fetchone(cur)
                history = [_to_record(latest)] if latest else []
                decision = validate_transition(current_state(history), record.type)
                if not decision.allowed:
                    raise InvalidTransitionError(decision.reason)

                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        record_id, user_id, user_name, user_role, type, timestamp_ms,
                        latitude, longitude, accuracy, location_ts, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.id,
                        record.user_id,
                        record.user_name,
                        record.user_role.value,
                        record.type.value,
                        record.timestamp,
                        loc.latitude if loc else None,
                        loc.longitude if loc else None,
                        loc.accuracy if loc else None,
                        loc.timestamp if loc else None,
                        record.note,
                    ),
                )
        except mysql.connector.Error as e:
            logger.error("[attendance] append failed record_id=%s: %s", record.id, e)
            raise PersistError(f"Database error: {e}", e) from e

        return record.with_sync_state(SyncState.CONFIRMED)

    def query_history(
        self,
        *,
        caller_id: str,
        caller_role: Role,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if caller_role != Role.ADMIN:
            clauses.append("user_id=%s")
            params.append(caller_id)
        elif user_id is not None:
            clauses.append("user_id=%s")
            params.append(user_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit or DEFAULT_HISTORY_LIMIT))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM attendance_records
                    {where}
                    ORDER BY timestamp_ms DESC
                    LIMIT %s
                    """,
                    tuple(params),
                )
                rows = fetchall(cur)
        except mysql.connector.Error as e:
            raise PersistError(f"Failed to fetch history: {e}", e) from e

        return [_to_record(r) for r in rows]
