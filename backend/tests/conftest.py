from __future__ import annotations

import os
import tempfile
import time
from datetime import datetime, timedelta, timezone

os.environ.setdefault("TRAVELBLOG_SECRET_KEY", "test-secret-key")
os.environ.setdefault("TRAVELBLOG_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TRAVELBLOG_USERS_FILE", os.path.join(tempfile.gettempdir(), "travelblog-missing-users.json"))
os.environ.setdefault("TRAVELBLOG_MEDIA_ROOT", tempfile.mkdtemp(prefix="travelblog-media-"))
os.environ.setdefault("TRAVELBLOG_LOG_LEVEL", "WARNING")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from travelblog.core.dependencies import get_db, get_users
from travelblog.core.security import PasswordHasher, SessionSigner
from travelblog.db.base import Base
from travelblog.main import app
from travelblog.models import BlogPost, Photo, TextBlock, Video
from travelblog.services.auth import SessionClaims
from travelblog.services.users import CredentialStore

PASSWORD = "correct-horse-battery"
BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def credential_store() -> CredentialStore:
    hashed = PasswordHasher.hash(PASSWORD)
    return CredentialStore.from_dict(
        {
            "users": [
                {"username": "leser", "passwordHash": hashed, "role": "reader", "displayName": "Leser"},
                {"username": "Anna", "passwordHash": hashed, "role": "contributor", "displayName": "Anna"},
                {"username": "bjorn", "passwordHash": hashed, "role": "contributor"},
            ]
        }
    )


def claims_for(username: str, role: str, ttl: int = 3600) -> SessionClaims:
    now = int(time.time())
    return SessionClaims(subject=username, role=role, issued_at=now, expires_at=now + ttl)


READER = claims_for("leser", "reader")
ANNA = claims_for("Anna", "contributor")
BJORN = claims_for("bjorn", "contributor")


def bearer(claims: SessionClaims) -> dict[str, str]:
    token = SessionSigner().dumps(
        {"sub": claims.subject, "role": claims.role, "iat": claims.issued_at, "exp": claims.expires_at}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, credential_store):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_users] = lambda: credential_store
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="https://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_post(session):
    counter = {"n": 0}

    async def _make(
        author: str = "Anna",
        status: str = "published",
        title: str | None = None,
        created_at: datetime | None = None,
        published_at: datetime | None = None,
    ) -> BlogPost:
        counter["n"] += 1
        n = counter["n"]
        created = created_at or BASE_TIME + timedelta(minutes=n)
        if status == "published" and published_at is None:
            published_at = created
        post = BlogPost(
            slug=f"post-{n}",
            title=title or f"Post {n}",
            template_id="template-01",
            author_id=author,
            status=status,
            created_at=created,
            updated_at=created,
            published_at=published_at if status == "published" else None,
        )
        session.add(post)
        await session.flush()
        return post

    return _make


@pytest.fixture
def add_content(session):
    async def _add(post: BlogPost, kind: str, display_order: float, created_at: datetime | None = None):
        created = created_at or BASE_TIME
        if kind == "photo":
            row = Photo(post_id=post.id, url="https://img.example/p.jpg", alt_text="", display_order=display_order, created_at=created)
        elif kind == "video":
            row = Video(post_id=post.id, url="https://video.example/v.mp4", display_order=display_order, created_at=created)
        else:
            row = TextBlock(post_id=post.id, content="Hello", display_order=display_order, created_at=created)
        session.add(row)
        await session.flush()
        return row

    return _add


@pytest.fixture
def failing_commit(client, session_factory):
    """Route requests to sessions whose commit fails after the work was flushed."""

    async def _get_db():
        async with session_factory() as session:

            async def _commit():
                raise RuntimeError("database is locked")

            session.commit = _commit
            yield session

    def _install() -> None:
        app.dependency_overrides[get_db] = _get_db

    return _install
