from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User account.

    Plain data object (no database access code).
    """

    user_id: str
    email: str
    display_name: str
    password_hash: str
    role: Role
    avatar_color: str = "gray"
    is_confirmed: bool = True
