from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Append-only store of attendance records."""

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        """Durably append ``record``.

        The transition is re-validated against the newest stored record of
        the same user inside the write; raises InvalidTransitionError when it
        no longer applies and PersistError on I/O failure.
        """

        raise NotImplementedError

    def query_history(
        self,
        *,
        caller_id: str,
        caller_role: Role,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first. Non-admin callers only ever receive their own records."""

        raise NotImplementedError
