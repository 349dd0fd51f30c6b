"""Request and response models for the admin API."""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials submitted from the admin login form."""

    email: str = Field(min_length=1)
    password: str = ""


class SessionView(BaseModel):
    """Public view of the admin session."""

    subject: str
    issued_at: datetime
    expires_at: datetime
    active: bool


class AdminUserView(BaseModel):
    """Public view of the signed-in administrator."""

    id: str
    email: str
    role: str


class SessionResponse(BaseModel):
    """Session state returned after login or on session checks.

    ``token`` is only set by login; send it back as ``X-Admin-Token``.
    """

    session: SessionView
    user: AdminUserView | None = None
    token: str | None = None
