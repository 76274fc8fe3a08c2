"""Route modules for the travel blog API."""
from . import auth, content, media, posts

__all__ = ["auth", "posts", "content", "media"]
