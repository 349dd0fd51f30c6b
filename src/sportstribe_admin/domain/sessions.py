"""Domain models for admin sessions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

SessionEventType = Literal["login", "logout"]


class InvalidCredentialsError(Exception):
    """Raised when a login attempt does not satisfy the admin policy."""


@dataclass(frozen=True)
class AdminUser:
    """The administrator bound to the persisted session."""

    id: str
    email: str
    role: str


@dataclass(frozen=True)
class AdminSession:
    """A time-bounded authorization record granting admin access.

    ``token`` is the bearer secret handed to the client that logged in.
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    active: bool
    token: str = ""

    def is_valid_at(self, now: datetime) -> bool:
        """Return whether the session grants access at ``now``."""
        return self.active and now < self.expires_at


@dataclass(frozen=True)
class SessionChange:
    """Notification emitted when the persisted session changes."""

    type: SessionEventType
    subject: str | None
    reason: str
    occurred_at: datetime
