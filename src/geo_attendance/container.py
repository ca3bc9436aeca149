from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import LOCATION_MAX_AGE_MS
from .database.connection import DBConfig, DatabaseConnection
from .geofence.mysql_workplace_repository import MySQLWorkplaceConfigRepository
from .geofence.repository import WorkplaceConfigRepository
from .geofence.service import WorkplaceService
from .summary.generator import SummaryGenerator, build_summary_generator
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .workspace.app_controller import AppController
from .workspace.registry import SessionRegistry


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    workplace_repo: WorkplaceConfigRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    workplace_service: WorkplaceService
    summary_generator: SummaryGenerator

    sessions: SessionRegistry


def wire_container(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    workplace_repo: WorkplaceConfigRepository,
    summary_generator: SummaryGenerator,
    settings: Optional[Any] = None,
) -> Container:
    auth_service = AuthService(
        users_repo,
        require_email_confirmation=bool(getattr(settings, "REQUIRE_EMAIL_CONFIRMATION", False)),
    )
    attendance_service = AttendanceService(
        attendance_repo,
        require_workplace_config=bool(getattr(settings, "REQUIRE_WORKPLACE_CONFIG", False)),
    )
    workplace_service = WorkplaceService(workplace_repo)
    location_max_age_ms = int(getattr(settings, "LOCATION_MAX_AGE_MS", LOCATION_MAX_AGE_MS))
    sessions = SessionRegistry(
        lambda: AppController(
            attendance_service,
            workplace_service,
            summary_generator,
            location_max_age_ms=location_max_age_ms,
        )
    )

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        workplace_repo=workplace_repo,
        auth_service=auth_service,
        attendance_service=attendance_service,
        workplace_service=workplace_service,
        summary_generator=summary_generator,
        sessions=sessions,
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        workplace_repo=MySQLWorkplaceConfigRepository(conn),
        summary_generator=build_summary_generator(settings),
        settings=settings,
    )
