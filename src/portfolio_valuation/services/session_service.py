"""Session and notification services.

Both are plain objects created by the caller and handed to whatever needs
them (API clients, the CLI). Nothing here is module-global, so two sessions
can coexist and tests can construct throwaway instances.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Protocol
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    """Source of the bearer token attached to API requests."""

    def get_token(self) -> Optional[str]:
        ...


class StaticTokenProvider:
    """Token provider returning a fixed token (or none)."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token


class SessionService:
    """Holds the authentication state for the lifetime of one session."""

    def __init__(self) -> None:
        self._token: Optional[str] = None
        self._user_id: Optional[str] = None

    def sign_in(self, token: str, user_id: Optional[str] = None) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token
        self._user_id = user_id
        logger.info("Session signed in (user=%s)", user_id or "unknown")

    def sign_out(self) -> None:
        self._token = None
        self._user_id = None
        logger.info("Session signed out")

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def is_authenticated(self) -> bool:
        return self._token is not None

    def get_token(self) -> Optional[str]:
        return self._token


class NotificationSeverity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class Notification(BaseModel):
    severity: NotificationSeverity
    message: str


class NotificationService:
    """Collects user-facing notifications until the presenter drains them."""

    def __init__(self) -> None:
        self._pending: List[Notification] = []

    def notify(self, message: str, severity: NotificationSeverity = NotificationSeverity.INFO) -> Notification:
        n = Notification(severity=severity, message=message)
        self._pending.append(n)
        return n

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.ERROR)

    def warning(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.WARNING)

    def info(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.INFO)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        out, self._pending = self._pending, []
        return out
