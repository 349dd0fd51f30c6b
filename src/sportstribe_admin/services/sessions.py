"""Admin session lifecycle: login, lazy expiry, legacy migration, logout."""

import json
import logging
import secrets
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta

from sportstribe_admin.domain.sessions import (
    AdminSession,
    AdminUser,
    InvalidCredentialsError,
    SessionChange,
    SessionEventType,
)
from sportstribe_admin.services.notifications import SessionChannel, SessionListener
from sportstribe_admin.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

USER_KEY = "sportstribe_admin_user"
SESSION_KEY = "sportstribe_admin_session"
LEGACY_MARKER = "active"
DEFAULT_TIMEOUT = timedelta(hours=24)


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class AdminPolicy:
    """Credential acceptance rules for the admin console.

    Any identifier containing a marker or ending with a domain suffix is
    accepted regardless of the secret. This mirrors the console's current
    demo policy and is not an identity check.
    """

    admin_email: str
    admin_password: str
    markers: tuple[str, ...] = ("admin",)
    domain_suffixes: tuple[str, ...] = ("@admin.com",)

    def accepts(self, identifier: str, secret: str) -> bool:
        """Return whether the credentials pass the policy."""
        if identifier == self.admin_email and secret == self.admin_password:
            return True
        lowered = identifier.strip().lower()
        if not lowered:
            return False
        if any(marker in lowered for marker in self.markers):
            return True
        return any(lowered.endswith(suffix) for suffix in self.domain_suffixes)


@dataclass
class SessionStore:
    """Owns the single persisted admin session.

    Expiry is never enforced by a timer; it is noticed the next time
    ``has_valid_access`` runs, which then logs the session out.
    """

    storage: KeyValueStorage
    policy: AdminPolicy
    timeout: timedelta = DEFAULT_TIMEOUT
    clock: Callable[[], datetime] = utc_now
    channel: SessionChannel = field(default_factory=SessionChannel)

    def login(self, identifier: str, secret: str) -> AdminSession:
        """Validate credentials and persist a fresh session."""
        if not self.policy.accepts(identifier, secret):
            logger.info("Rejected admin login for %r", identifier)
            raise InvalidCredentialsError("Invalid credentials.")

        now = self.clock()
        user = AdminUser(
            id=f"admin_{int(now.timestamp() * 1000)}",
            email=identifier,
            role="admin",
        )
        session = AdminSession(
            subject=user.email,
            issued_at=now,
            expires_at=now + self.timeout,
            active=True,
            token=secrets.token_urlsafe(32),
        )
        self.storage.set_many(
            {USER_KEY: json.dumps(asdict(user)), SESSION_KEY: _dump_session(session)}
        )
        logger.info(
            "Admin session issued for %s until %s", user.email, session.expires_at
        )
        self._publish("login", user.email, reason="login", now=now)
        return session

    def logout(self, reason: str = "logout") -> None:
        """Clear the persisted session and notify listeners.

        A storage failure is logged; listeners are still notified.
        """
        user = _parse_user(self._read(USER_KEY))
        try:
            self.storage.remove_many([USER_KEY, SESSION_KEY])
        except OSError:
            logger.warning("Failed to clear admin session storage", exc_info=True)
        self._publish(
            "logout",
            user.email if user else None,
            reason=reason,
            now=self.clock(),
        )

    def current_session(self) -> AdminSession | None:
        """Return the persisted session, upgrading the legacy marker."""
        raw_user = self._read(USER_KEY)
        raw_session = self._read(SESSION_KEY)
        if raw_user is None or raw_session is None:
            return None

        user = _parse_user(raw_user)
        if user is None:
            logger.warning("Ignoring malformed admin user record")
            return None

        if raw_session.strip() == LEGACY_MARKER:
            return self._upgrade_legacy(user)

        session = _parse_session(raw_session, subject=user.email)
        if session is None:
            logger.warning("Ignoring malformed admin session record")
        return session

    def has_valid_access(self) -> bool:
        """Return whether an active, unexpired session exists."""
        session = self.current_session()
        if session is None:
            return False
        now = self.clock()
        if now >= session.expires_at:
            logger.info("Admin session for %s expired", session.subject)
            self.logout(reason="expired")
            return False
        return session.is_valid_at(now)

    def authorize(self, token: str | None) -> bool:
        """Return whether ``token`` belongs to the current, valid session."""
        session = self.current_session()
        if session is None or not token or not session.token:
            return False
        if not secrets.compare_digest(session.token, token):
            return False
        return self.has_valid_access()

    def current_user(self) -> AdminUser | None:
        """Return the administrator bound to the current session."""
        if self.current_session() is None:
            return None
        return _parse_user(self._read(USER_KEY))

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session change listener."""
        return self.channel.subscribe(listener)

    def _upgrade_legacy(self, user: AdminUser) -> AdminSession:
        now = self.clock()
        session = AdminSession(
            subject=user.email,
            issued_at=now,
            expires_at=now + self.timeout,
            active=True,
            token=secrets.token_urlsafe(32),
        )
        try:
            self.storage.set(SESSION_KEY, _dump_session(session))
        except OSError:
            logger.warning("Failed to persist upgraded admin session", exc_info=True)
        else:
            logger.info("Upgraded legacy admin session for %s", user.email)
        return session

    def _read(self, key: str) -> str | None:
        try:
            return self.storage.get(key)
        except OSError:
            logger.warning("Failed to read %s from session storage", key, exc_info=True)
            return None

    def _publish(
        self, event: SessionEventType, subject: str | None, reason: str, now: datetime
    ) -> None:
        self.channel.publish(
            SessionChange(type=event, subject=subject, reason=reason, occurred_at=now)
        )


def _dump_session(session: AdminSession) -> str:
    return json.dumps(
        {
            "active": session.active,
            "issued_at": session.issued_at.isoformat(),
            "expires_at": session.expires_at.isoformat(),
            "token": session.token,
        }
    )


def _parse_user(raw: str | None) -> AdminUser | None:
    """Parse the persisted user record."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    email = data.get("email")
    role = data.get("role")
    if not isinstance(email, str) or not email or not isinstance(role, str) or not role:
        return None
    return AdminUser(id=str(data.get("id", "")), email=email, role=role)


def _parse_session(raw: str, subject: str) -> AdminSession | None:
    """Parse the persisted session metadata."""
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, dict) or not isinstance(data.get("active"), bool):
        return None
    try:
        issued_at = _parse_timestamp(data["issued_at"])
        expires_at = _parse_timestamp(data["expires_at"])
    except (KeyError, TypeError, ValueError):
        return None
    token = data.get("token")
    return AdminSession(
        subject=subject,
        issued_at=issued_at,
        expires_at=expires_at,
        active=data["active"],
        token=token if isinstance(token, str) else "",
    )


def _parse_timestamp(value: object) -> datetime:
    if not isinstance(value, str):
        raise TypeError("timestamp must be an ISO-8601 string")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
