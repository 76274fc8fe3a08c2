"""Session issuing and verification.

Sessions are stateless: a token carries the subject, role and its own
issue/expiry instants, signed with the application secret. Nothing is stored
server side, so a token stays valid until it expires (there is no revocation
list).
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from travelblog.core.config import Settings, get_settings
from travelblog.core.errors import InvalidCredentials, InvalidInput, Unauthorized
from travelblog.core.security import SessionSigner
from travelblog.services.users import ROLES, CredentialStore, User, authenticate_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionClaims:
    subject: str
    role: str
    issued_at: int
    expires_at: int

    @property
    def is_contributor(self) -> bool:
        return self.role == "contributor"

    @property
    def lifetime_seconds(self) -> int:
        return self.expires_at - self.issued_at

    def expires_at_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class IssuedSession:
    user: User
    token: str
    claims: SessionClaims


def session_ttl(remember_me: bool, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    return settings.remember_me_ttl_seconds if remember_me else settings.session_ttl_seconds


def issue_session(
    store: CredentialStore,
    username: str | None,
    password: str | None,
    remember_me: bool = False,
    now: int | None = None,
    signer: SessionSigner | None = None,
) -> IssuedSession:
    """Verify credentials and sign a session token for the user."""
    if not username or not username.strip() or not password:
        raise InvalidInput("Username and password are required")

    user = authenticate_user(store, username.strip(), password)
    if not user:
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    issued_at = int(time.time()) if now is None else now
    claims = SessionClaims(
        subject=user.username,
        role=user.role,
        issued_at=issued_at,
        expires_at=issued_at + session_ttl(remember_me),
    )
    token = (signer or SessionSigner()).dumps(
        {"sub": claims.subject, "role": claims.role, "iat": claims.issued_at, "exp": claims.expires_at}
    )
    logger.info("User %s logged in (role=%s, remember_me=%s)", user.username, user.role, remember_me)
    return IssuedSession(user=user, token=token, claims=claims)


def verify_session(token: str | None, now: int | None = None, signer: SessionSigner | None = None) -> SessionClaims:
    """Return the claims of a valid token or raise :class:`Unauthorized`."""
    if not token:
        raise Unauthorized("Not authenticated")
    try:
        payload = (signer or SessionSigner()).loads(token)
    except ValueError as exc:
        raise Unauthorized("Invalid session") from exc

    if not isinstance(payload, dict):
        raise Unauthorized("Invalid session")
    subject = payload.get("sub")
    role = payload.get("role")
    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if (
        not isinstance(subject, str)
        or not subject
        or role not in ROLES
        or not isinstance(issued_at, int)
        or not isinstance(expires_at, int)
    ):
        raise Unauthorized("Invalid session")

    current = int(time.time()) if now is None else now
    if expires_at <= current:
        raise Unauthorized("Session expired")

    return SessionClaims(subject=subject, role=role, issued_at=issued_at, expires_at=expires_at)
