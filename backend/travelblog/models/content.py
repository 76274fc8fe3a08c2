"""Database models for the ordered content of a post (photos, videos, text)."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelblog.db.base import Base
from travelblog.db.types import UTCDateTime
from travelblog.models.post import new_id, utcnow


class Photo(Base):
    __tablename__ = "photo_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(ForeignKey("blog_posts.id"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    cloudflare_image_id: Mapped[str | None] = mapped_column(String(128), default=None)
    caption: Mapped[str | None] = mapped_column(Text, default=None)
    alt_text: Mapped[str] = mapped_column(String(512), default="")
    width: Mapped[int | None] = mapped_column(Integer, default=None)
    height: Mapped[int | None] = mapped_column(Integer, default=None)
    display_order: Mapped[float] = mapped_column(Float, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)


class Video(Base):
    __tablename__ = "video_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(ForeignKey("blog_posts.id"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    object_key: Mapped[str | None] = mapped_column(String(512), default=None)
    caption: Mapped[str | None] = mapped_column(Text, default=None)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1024), default=None)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, default=None)
    display_order: Mapped[float] = mapped_column(Float, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)


class TextBlock(Base):
    __tablename__ = "text_content"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(ForeignKey("blog_posts.id"), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    section_name: Mapped[str] = mapped_column(String(64), default="main")
    display_order: Mapped[float] = mapped_column(Float, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)


CONTENT_MODELS: dict[str, type[Photo] | type[Video] | type[TextBlock]] = {
    "photo": Photo,
    "video": Video,
    "text": TextBlock,
}
