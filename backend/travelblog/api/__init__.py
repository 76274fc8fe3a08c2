"""API router aggregator."""
from fastapi import APIRouter

from travelblog.api.routes import auth, content, media, posts

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(posts.router)
api_router.include_router(content.router)
api_router.include_router(media.router)

__all__ = ["api_router"]
