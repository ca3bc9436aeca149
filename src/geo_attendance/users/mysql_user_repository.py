from __future__ import annotations

from typing import Any, Dict, Optional

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import PersistError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, email, display_name, password_hash, role, avatar_color, is_confirmed"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=str(row["user_id"]),
        email=row["email"],
        display_name=row["display_name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        avatar_color=row.get("avatar_color") or "gray",
        is_confirmed=bool(row.get("is_confirmed", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: str) -> Optional[User]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s", (value,))
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise PersistError(f"Failed to load user: {e}", e) from e
        return _to_user(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._get_one("user_id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        display_name: str,
        password_hash: str,
        role: Role,
        avatar_color: str,
        is_confirmed: bool,
    ) -> str:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(user_id, email, display_name, password_hash, role, avatar_color, is_confirmed)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (user_id, email, display_name, password_hash, role.value, avatar_color, int(is_confirmed)),
                )
        except mysql.connector.Error as e:
            raise PersistError(f"Registration failed: {e}", e) from e
        return user_id
