from __future__ import annotations

import secrets
import threading
from typing import Callable, Optional

from ..users.service import SessionUser
from .app_controller import AppController


class SessionRegistry:
    """Process-wide map of login token -> AppController.

    Keyed per login, not per user: two devices signed in as the same user
    each get their own AppState.
    """

    def __init__(self, factory: Callable[[], AppController]):
        self._factory = factory
        self._controllers: dict[str, AppController] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_token() -> str:
        return secrets.token_urlsafe(32)

    def get(self, token: str) -> Optional[AppController]:
        with self._lock:
            return self._controllers.get(token)

    def open(self, token: str, user: SessionUser) -> AppController:
        controller = self._factory()
        controller.login(user)
        with self._lock:
            previous = self._controllers.get(token)
            self._controllers[token] = controller
        if previous is not None:
            previous.logout()
        return controller

    def close(self, token: str) -> None:
        with self._lock:
            controller = self._controllers.pop(token, None)
        if controller is not None:
            controller.logout()

    def __len__(self) -> int:
        with self._lock:
            return len(self._controllers)
