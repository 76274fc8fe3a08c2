"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from travelblog.api import api_router
from travelblog.core.config import get_settings
from travelblog.core.errors import register_exception_handlers
from travelblog.db.base import Base
from travelblog.db.session import engine
from travelblog.services.users import get_credential_store

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    store = get_credential_store()
    logger.info("%s started with %d user(s)", settings.app_name, store.count())
    try:
        yield
    finally:
        await engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)

# Locally stored videos; API routes are registered first and take precedence
media_dir = Path(settings.media_root)
media_dir.mkdir(parents=True, exist_ok=True)
app.mount(settings.media_base_url, StaticFiles(directory=str(media_dir)), name="media")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("travelblog.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
