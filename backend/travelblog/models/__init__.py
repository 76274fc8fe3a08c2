"""SQLAlchemy models exposed for metadata creation and imports."""
from .content import CONTENT_MODELS, Photo, TextBlock, Video
from .post import BlogPost, PostStatus

__all__ = ["BlogPost", "PostStatus", "Photo", "Video", "TextBlock", "CONTENT_MODELS"]
