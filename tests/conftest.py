from __future__ import annotations

from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from geo_attendance.attendance.model import AttendanceRecord
from geo_attendance.attendance.service import AttendanceService
from geo_attendance.attendance.state import current_state, validate_transition
from geo_attendance.container import wire_container
from geo_attendance.core.enums import Role, SyncState
from geo_attendance.core.exceptions import InvalidTransitionError, PersistError
from geo_attendance.geofence.model import Coordinate, WorkplaceConfig
from geo_attendance.geofence.service import WorkplaceService
from geo_attendance.main import create_app
from geo_attendance.summary.generator import NullSummaryGenerator
from geo_attendance.users.model import User
from geo_attendance.users.service import SessionUser
from geo_attendance.workspace.app_controller import AppController

ANCHOR = Coordinate(latitude=13.7563, longitude=100.5018)


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self.by_id: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def create_user(self, *, user_id, email, display_name, password_hash, role, avatar_color, is_confirmed) -> str:
        self.by_id[user_id] = User(
            user_id=user_id,
            email=email,
            display_name=display_name,
            password_hash=password_hash,
            role=role,
            avatar_color=avatar_color,
            is_confirmed=is_confirmed,
        )
        return user_id


class InMemoryAttendance:
    """Append-only store with the same per-user conditional append as MySQL."""

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self.records: list[AttendanceRecord] = list(records)
        self.append_calls: list[AttendanceRecord] = []
        self.fail_with: Optional[Exception] = None

    def append(self, record: AttendanceRecord) -> AttendanceRecord:
        self.append_calls.append(record)
        if self.fail_with is not None:
            raise self.fail_with
        history = sorted((r for r in self.records if r.user_id == record.user_id), key=lambda r: r.timestamp, reverse=True)
        decision = validate_transition(current_state(history), record.type)
        if not decision.allowed:
            raise InvalidTransitionError(decision.reason)
        saved = record.with_sync_state(SyncState.CONFIRMED)
        self.records.append(saved)
        return saved

    def query_history(self, *, caller_id, caller_role, user_id=None, limit=None):
        items = list(self.records)
        if caller_role != Role.ADMIN:
            items = [r for r in items if r.user_id == caller_id]
        elif user_id is not None:
            items = [r for r in items if r.user_id == user_id]
        items.sort(key=lambda r: r.timestamp, reverse=True)
        return items[:limit] if limit else items


class InMemoryWorkplace:
    def __init__(self, config: Optional[WorkplaceConfig] = None):
        self.config = config
        self.writes: list[WorkplaceConfig] = []
        self.read_error: Optional[Exception] = None

    def read(self) -> Optional[WorkplaceConfig]:
        if self.read_error is not None:
            raise self.read_error
        return self.config

    def write(self, config: WorkplaceConfig) -> None:
        self.writes.append(config)
        self.config = config


class StubSummary:
    def __init__(self, text: str = "You worked 8 hours."):
        self.text = text
        self.calls: list[list[AttendanceRecord]] = []

    def summarize(self, records):
        self.calls.append(list(records))
        return self.text


def make_user(user_id: str, role: Role, name: str = "") -> User:
    return User(
        user_id=user_id,
        email=f"{user_id}@example.com",
        display_name=name or user_id.title(),
        password_hash=generate_password_hash("secret123"),
        role=role,
    )


@pytest.fixture
def fixed_now() -> int:
    # 2026-02-02 08:00:00 UTC in epoch ms
    return 1_770_019_200_000


@pytest.fixture
def anchor() -> Coordinate:
    return ANCHOR


@pytest.fixture
def workplace_config() -> WorkplaceConfig:
    return WorkplaceConfig(latitude=ANCHOR.latitude, longitude=ANCHOR.longitude, radius_meters=500)


@pytest.fixture
def student() -> SessionUser:
    return SessionUser(id="stu-1", email="stu-1@example.com", display_name="Student One", role=Role.STUDENT)


@pytest.fixture
def admin() -> SessionUser:
    return SessionUser(id="adm-1", email="adm-1@example.com", display_name="Admin One", role=Role.ADMIN)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def workplace_repo(workplace_config) -> InMemoryWorkplace:
    return InMemoryWorkplace(workplace_config)


@pytest.fixture
def summary_stub() -> StubSummary:
    return StubSummary()


@pytest.fixture
def make_controller(attendance_repo, workplace_repo, summary_stub):
    def _make(*, require_workplace_config: bool = False) -> AppController:
        return AppController(
            AttendanceService(attendance_repo, require_workplace_config=require_workplace_config),
            WorkplaceService(workplace_repo),
            summary_stub,
        )

    return _make


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            make_user("admin", Role.ADMIN, "Admin Demo"),
            make_user("teacher", Role.TEACHER, "Teacher Demo"),
            make_user("student", Role.STUDENT, "Student Demo"),
        ]
    )


@pytest.fixture
def container(users_repo, attendance_repo, workplace_repo):
    return wire_container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        workplace_repo=workplace_repo,
        summary_generator=NullSummaryGenerator(),
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="geo_attendance.settings.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def persist_error() -> PersistError:
    return PersistError("Database error: connection lost")
