"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from travelblog.core.config import get_settings
from travelblog.core.dependencies import get_current_session, get_users
from travelblog.schemas.auth import LoginRequest, SessionResponse, UserPublic
from travelblog.schemas.common import SuccessResponse
from travelblog.services.auth import SessionClaims, issue_session
from travelblog.services.users import CredentialStore

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str, max_age: int) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="Strict",
        max_age=max_age,
        path="/",
    )


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "auth"}


@router.post("/login", response_model=SessionResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    users: CredentialStore = Depends(get_users),
) -> SessionResponse:
    issued = issue_session(users, payload.username, payload.password, payload.remember_me)
    _set_session_cookie(response, issued.token, issued.claims.lifetime_seconds)
    return SessionResponse(
        user=UserPublic(username=issued.user.username, role=issued.user.role, display_name=issued.user.display_name),
        expires_at=issued.claims.expires_at_datetime(),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    settings = get_settings()
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="Strict",
    )
    return SuccessResponse(message="Logged out")


@router.get("/verify", response_model=SessionResponse)
async def verify(
    claims: SessionClaims = Depends(get_current_session),
    users: CredentialStore = Depends(get_users),
) -> SessionResponse:
    user = users.find_user(claims.subject)
    return SessionResponse(
        user=UserPublic(
            username=claims.subject,
            role=claims.role,
            display_name=user.display_name if user else None,
        ),
        expires_at=claims.expires_at_datetime(),
    )
