from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from ..common.datetime_utils import format_datetime, format_time
from ..core.enums import AttendanceType, Role, SyncState
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in or check-out event.

    Records are never updated or deleted once written; ``sync_state`` is
    local bookkeeping only and is not stored.
    """

    id: str
    user_id: str
    user_name: str
    user_role: Role
    type: AttendanceType
    timestamp: int
    location: Optional[Coordinate] = None
    note: Optional[str] = None
    sync_state: SyncState = SyncState.CONFIRMED

    @property
    def synced(self) -> bool:
        return self.sync_state == SyncState.CONFIRMED

    def with_sync_state(self, state: SyncState) -> "AttendanceRecord":
        return replace(self, sync_state=state)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_role": self.user_role.value,
            "type": self.type.value,
            "timestamp": self.timestamp,
            "time": format_time(self.timestamp),
            "datetime": format_datetime(self.timestamp),
            "location": self.location.to_dict() if self.location else None,
            "maps_url": self.location.maps_url() if self.location else None,
            "note": self.note,
            "synced": self.synced,
            "sync_state": self.sync_state.value,
        }
