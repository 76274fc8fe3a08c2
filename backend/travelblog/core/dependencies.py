"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.config import get_settings
from travelblog.db.session import get_session
from travelblog.services.auth import SessionClaims, verify_session
from travelblog.services.permissions import require_contributor
from travelblog.services.users import CredentialStore, get_credential_store


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


def get_users() -> CredentialStore:
    return get_credential_store()


def extract_token(request: Request) -> str | None:
    """Session token from the session cookie, falling back to a bearer header."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_session(request: Request) -> SessionClaims:
    return verify_session(extract_token(request))


async def get_contributor_session(claims: SessionClaims = Depends(get_current_session)) -> SessionClaims:
    require_contributor(claims)
    return claims
