from __future__ import annotations

from typing import Iterator, List, Optional

from ..core.enums import SyncState
from .model import AttendanceRecord


class AttendanceLedger:
    """In-memory history, newest first, with optimistic entries.

    A submission is added as PENDING before the store is called, then
    promoted to CONFIRMED or flagged FAILED. Failed entries stay visible.
    """

    def __init__(self, records: Optional[List[AttendanceRecord]] = None):
        self._records: List[AttendanceRecord] = sorted(records or [], key=lambda r: r.timestamp, reverse=True)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AttendanceRecord]:
        return iter(self._records)

    def records(self) -> List[AttendanceRecord]:
        return list(self._records)

    def for_user(self, user_id: str) -> List[AttendanceRecord]:
        return [r for r in self._records if r.user_id == user_id]

    def for_user_durable(self, user_id: str) -> List[AttendanceRecord]:
        """Same as for_user, minus entries whose write failed."""
        return [r for r in self._records if r.user_id == user_id and r.sync_state != SyncState.FAILED]

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self._records if r.id == record_id), None)

    def replace_all(self, records: List[AttendanceRecord]) -> None:
        """Reload from the store; locally failed entries are kept on top."""
        failed = [r for r in self._records if r.sync_state == SyncState.FAILED]
        known = {r.id for r in records}
        merged = list(records) + [r for r in failed if r.id not in known]
        self._records = sorted(merged, key=lambda r: r.timestamp, reverse=True)

    def add_tentative(self, record: AttendanceRecord) -> AttendanceRecord:
        pending = record.with_sync_state(SyncState.PENDING)
        self._records.insert(0, pending)
        return pending

    def confirm(self, record_id: str) -> AttendanceRecord:
        return self._set_state(record_id, SyncState.CONFIRMED)

    def mark_failed(self, record_id: str) -> AttendanceRecord:
        return self._set_state(record_id, SyncState.FAILED)

    def clear(self) -> None:
        self._records = []

    def _set_state(self, record_id: str, state: SyncState) -> AttendanceRecord:
        for i, r in enumerate(self._records):
            if r.id == record_id:
                updated = r.with_sync_state(state)
                self._records[i] = updated
                return updated
        raise KeyError(record_id)
