from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import AVATAR_COLORS, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, EmailConfirmationRequiredError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Identity of the logged-in user (what we keep in the Flask session)."""

    id: str
    email: str
    display_name: str
    role: Role
    avatar_color: str = "gray"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "role": self.role.value,
            "avatar_color": self.avatar_color,
        }


def _display_name(user: User) -> str:
    return user.display_name or user.email.split("@")[0] or "Unknown User"


def to_session_user(user: User) -> SessionUser:
    return SessionUser(
        id=user.user_id,
        email=user.email,
        display_name=_display_name(user),
        role=user.role,
        avatar_color=user.avatar_color,
    )


class AuthService:
    """Use case: register and authenticate users."""

    def __init__(self, users: UserRepository, *, require_email_confirmation: bool = False):
        self._users = users
        self._require_confirmation = bool(require_email_confirmation)

    def register(self, *, email: str, password: str, name: str, role: Role) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is invalid")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        name = (name or "").strip() or email.split("@")[0]

        if self._users.get_by_email(email):
            raise ValidationError("User already registered")

        user_id = str(uuid.uuid4())
        avatar_color = random.choice(AVATAR_COLORS)
        self._users.create_user(
            user_id=user_id,
            email=email,
            display_name=name,
            password_hash=generate_password_hash(password),
            role=role,
            avatar_color=avatar_color,
            is_confirmed=not self._require_confirmation,
        )
        logger.info("[auth] registered user_id=%s role=%s", user_id, role.value)

        if self._require_confirmation:
            raise EmailConfirmationRequiredError(
                "Email confirmation is required. Please confirm your address before logging in."
            )

        return SessionUser(id=user_id, email=email, display_name=name, role=role, avatar_color=avatar_color)

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid login credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid login credentials")
        if not user.is_confirmed:
            raise EmailConfirmationRequiredError("Email not confirmed")

        return to_session_user(user)

    def get_session_user(self, user_id: str) -> Optional[SessionUser]:
        user = self._users.get_by_id(user_id)
        if not user or not user.is_confirmed:
            return None
        return to_session_user(user)
