"""Credential store backed by a static JSON seed file."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from travelblog.core.security import PasswordHasher

logger = logging.getLogger(__name__)

ROLES = ("reader", "contributor")


class CredentialStoreError(RuntimeError):
    """Raised when the credential file cannot be loaded."""


@dataclass(frozen=True, slots=True)
class User:
    username: str
    password_hash: str
    role: str
    display_name: str | None = None
    created_at: str | None = None

    @property
    def is_contributor(self) -> bool:
        return self.role == "contributor"


class CredentialStore:
    """Immutable username -> user mapping, looked up case-insensitively."""

    def __init__(self, users: Iterable[User]) -> None:
        self._users: dict[str, User] = {}
        for user in users:
            key = user.username.lower()
            if key in self._users:
                raise CredentialStoreError(f"Duplicate username in credential store: {user.username}")
            self._users[key] = user

    @classmethod
    def from_file(cls, path: str | Path) -> "CredentialStore":
        path = Path(path)
        if not path.exists():
            logger.warning("Credential file %s not found; no user will be able to log in", path)
            return cls([])
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialStoreError(f"Unable to read credential file {path}: {exc}") from exc
        store = cls.from_dict(data)
        logger.info("Loaded %d user(s) from %s", store.count(), path)
        return store

    @classmethod
    def from_dict(cls, data: dict) -> "CredentialStore":
        entries = data.get("users") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise CredentialStoreError("Credential file must contain a 'users' list")
        return cls(_parse_user(entry) for entry in entries)

    def find_user(self, username: str) -> User | None:
        return self._users.get(username.lower())

    def user_exists(self, username: str) -> bool:
        return self.find_user(username) is not None

    def count(self) -> int:
        return len(self._users)


def _parse_user(entry: dict) -> User:
    try:
        username = str(entry["username"]).strip()
        password_hash = str(entry["passwordHash"])
        role = str(entry["role"])
    except (KeyError, TypeError) as exc:
        raise CredentialStoreError(f"Malformed user entry: {entry!r}") from exc
    if not username:
        raise CredentialStoreError("User entry with empty username")
    if role not in ROLES:
        raise CredentialStoreError(f"User {username} has unknown role {role!r}")
    if not PasswordHasher.is_known_hash(password_hash):
        raise CredentialStoreError(f"User {username} has an unrecognised password hash")
    return User(
        username=username,
        password_hash=password_hash,
        role=role,
        display_name=entry.get("displayName"),
        created_at=entry.get("createdAt"),
    )


_store: CredentialStore | None = None


def get_credential_store() -> CredentialStore:
    global _store
    if _store is None:
        from travelblog.core.config import get_settings

        _store = CredentialStore.from_file(get_settings().users_file)
    return _store


def set_credential_store(store: CredentialStore | None) -> None:
    global _store
    _store = store


def authenticate_user(store: CredentialStore, username: str, password: str) -> User | None:
    user = store.find_user(username)
    if not user:
        PasswordHasher.dummy_verify()
        return None
    if not PasswordHasher.verify(password, user.password_hash):
        return None
    return user
