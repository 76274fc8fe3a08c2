"""Authentication-related schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from travelblog.schemas.common import CamelModel


class LoginRequest(CamelModel):
    # presence is checked by the session issuer so both fields fail the same way
    username: str | None = Field(default=None, max_length=64)
    password: str | None = Field(default=None, max_length=128)
    remember_me: bool = False


class UserPublic(CamelModel):
    username: str
    role: str
    display_name: str | None = None


class SessionResponse(CamelModel):
    success: bool = True
    user: UserPublic
    expires_at: datetime
