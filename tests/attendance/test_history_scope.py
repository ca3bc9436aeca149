from __future__ import annotations

import mysql.connector
import pytest

from geo_attendance.attendance.model import AttendanceRecord
from geo_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from geo_attendance.attendance.service import AttendanceService
from geo_attendance.core.enums import AttendanceType, Role
from geo_attendance.core.exceptions import InvalidTransitionError, PersistError
from geo_attendance.geofence.model import Coordinate


def _record(record_id: str, user_id: str, t: int, type_=AttendanceType.CHECK_IN) -> AttendanceRecord:
    return AttendanceRecord(
        id=record_id, user_id=user_id, user_name=user_id, user_role=Role.STUDENT, type=type_, timestamp=t
    )


@pytest.fixture
def shared_store(attendance_repo):
    attendance_repo.records = [
        _record("a1", "stu-1", 100),
        _record("b1", "other", 200),
        _record("a2", "stu-1", 300, AttendanceType.CHECK_OUT),
        _record("c1", "adm-1", 400),
    ]
    return attendance_repo


def test_non_admin_only_sees_own_records(shared_store, student):
    svc = AttendanceService(shared_store)

    records = svc.history_for(student, view_all=True)

    assert [r.id for r in records] == ["a2", "a1"]


def test_store_ignores_requested_user_for_non_admin(shared_store):
    records = shared_store.query_history(caller_id="stu-1", caller_role=Role.TEACHER, user_id="other")
    assert {r.user_id for r in records} == {"stu-1"}


def test_admin_sees_all_records_newest_first(shared_store, admin):
    records = AttendanceService(shared_store).history_for(admin, view_all=True)
    assert [r.id for r in records] == ["c1", "a2", "b1", "a1"]


def test_admin_own_view_is_scoped(shared_store, admin):
    records = AttendanceService(shared_store).history_for(admin)
    assert [r.id for r in records] == ["c1"]


def test_group_by_day_keeps_order():
    day = 86_400_000
    records = [_record("x3", "u", 10 * day + 5), _record("x2", "u", 10 * day + 1), _record("x1", "u", 8 * day)]

    groups = AttendanceService.group_by_day(records)

    assert [[r.id for r in grp.records] for grp in groups] == [["x3", "x2"], ["x1"]]


class FakeCursor:
    def __init__(self, script):
        self.script = script
        self.executed: list[tuple[str, tuple]] = []
        self._result = None

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        step = self.script.pop(0) if self.script else None
        if isinstance(step, Exception):
            raise step
        self._result = step

    def fetchone(self):
        return self._result

    def fetchall(self):
        return self._result or []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, *script):
        self.cursor = FakeCursor(list(script))
        self.conn = FakeConnection(self.cursor)

    def connect(self, *, with_database=True):
        return self.conn


def _row(record_id, type_, t, user_id="stu-1"):
    return {
        "record_id": record_id,
        "user_id": user_id,
        "user_name": "Student One",
        "user_role": "STUDENT",
        "type": type_,
        "timestamp_ms": t,
        "latitude": 13.7563,
        "longitude": 100.5018,
        "accuracy": 5.0,
        "location_ts": t,
        "note": None,
    }


def test_mysql_query_history_scopes_non_admin_to_caller():
    factory = FakeConnectionFactory([_row("a1", "CHECK_IN", 100)])
    repo = MySQLAttendanceRepository(factory)

    records = repo.query_history(caller_id="stu-1", caller_role=Role.STUDENT, user_id="someone-else", limit=10)

    sql, params = factory.cursor.executed[0]
    assert "WHERE user_id=%s" in sql
    assert params == ("stu-1", 10)
    assert records[0].location == Coordinate(13.7563, 100.5018, 5.0, 100)


def test_mysql_query_history_admin_without_filter():
    factory = FakeConnectionFactory([])
    MySQLAttendanceRepository(factory).query_history(caller_id="adm-1", caller_role=Role.ADMIN, limit=50)

    sql, params = factory.cursor.executed[0]
    assert "WHERE" not in sql
    assert params == (50,)


def test_mysql_append_rejects_transition_against_latest_row():
    factory = FakeConnectionFactory([{"user_id": "stu-1"}], _row("a1", "CHECK_IN", 100))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(InvalidTransitionError):
        repo.append(_record("new", "stu-1", 200))

    assert factory.conn.rolled_back
    assert not any(sql.startswith("INSERT") for sql, _ in factory.cursor.executed)


def test_mysql_append_inserts_after_check_out():
    factory = FakeConnectionFactory([{"user_id": "stu-1"}], _row("a1", "CHECK_OUT", 100), None)
    repo = MySQLAttendanceRepository(factory)

    saved = repo.append(_record("new", "stu-1", 200))

    assert saved.synced
    assert factory.conn.committed
    sql, params = factory.cursor.executed[-1]
    assert sql.startswith("INSERT INTO attendance_records")
    assert params[0] == "new"


def test_mysql_errors_become_persist_errors():
    factory = FakeConnectionFactory(mysql.connector.Error("connection lost"))

    with pytest.raises(PersistError):
        MySQLAttendanceRepository(factory).append(_record("new", "stu-1", 200))
