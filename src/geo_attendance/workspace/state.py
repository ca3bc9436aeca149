from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.ledger import AttendanceLedger
from ..geofence.model import Coordinate, WorkplaceConfig
from ..users.service import SessionUser


@dataclass
class AppState:
    """Everything one logged-in user's screen is built from.

    Populated on login, cleared on logout. Only AppController mutates it.
    """

    user: Optional[SessionUser] = None
    ledger: AttendanceLedger = field(default_factory=AttendanceLedger)
    workplace: Optional[WorkplaceConfig] = None
    location: Optional[Coordinate] = None
    location_received_ms: Optional[int] = None
    location_error: Optional[str] = None
    last_error: Optional[str] = None
    summary: Optional[str] = None

    def clear(self) -> None:
        self.user = None
        self.ledger.clear()
        self.workplace = None
        self.location = None
        self.location_received_ms = None
        self.location_error = None
        self.last_error = None
        self.summary = None
