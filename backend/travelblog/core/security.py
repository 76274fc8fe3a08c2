"""Security helpers for password hashing and session signing."""
from __future__ import annotations

from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from .config import get_settings


_password_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        try:
            return _password_context.verify(password, hashed)
        except ValueError:
            # unrecognised or malformed hash in the credential file
            return False

    @staticmethod
    def dummy_verify() -> None:
        """Spend the same effort as a real verification for unknown users."""
        _password_context.dummy_verify()

    @staticmethod
    def is_known_hash(hashed: str) -> bool:
        return _password_context.identify(hashed, required=False) is not None


class SessionSigner:
    """Sign and unsign session payloads."""

    def __init__(self, secret_key: str | None = None, salt: str = "travelblog-session") -> None:
        self._serializer = URLSafeTimedSerializer(secret_key or get_settings().secret_key, salt=salt)

    def dumps(self, data: dict[str, Any]) -> str:
        return self._serializer.dumps(data)

    def loads(self, token: str, max_age: int | None = None) -> dict[str, Any]:
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired) as exc:
            raise ValueError("Invalid or expired session token") from exc
