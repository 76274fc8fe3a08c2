"""Pydantic schemas for post content (photos, videos, text blocks)."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from travelblog.schemas.common import CamelModel

ContentType = Literal["photo", "video", "text"]


class PhotoCreate(CamelModel):
    url: str = Field(..., min_length=1, max_length=1024)
    cloudflare_image_id: str | None = Field(default=None, max_length=128)
    caption: str | None = None
    alt_text: str = Field(default="", max_length=512)
    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)
    display_order: float | None = None


class PhotoUpdate(CamelModel):
    url: str | None = Field(default=None, min_length=1, max_length=1024)
    caption: str | None = None
    alt_text: str | None = Field(default=None, max_length=512)
    width: int | None = Field(default=None, ge=1)
    height: int | None = Field(default=None, ge=1)
    display_order: float | None = None


class PhotoRead(CamelModel):
    id: str
    post_id: str
    url: str
    cloudflare_image_id: str | None = None
    caption: str | None = None
    alt_text: str
    width: int | None = None
    height: int | None = None
    display_order: float
    created_at: datetime


class VideoCreate(CamelModel):
    url: str = Field(..., min_length=1, max_length=1024)
    object_key: str | None = Field(default=None, max_length=512)
    caption: str | None = None
    thumbnail_url: str | None = Field(default=None, max_length=1024)
    duration_seconds: int | None = Field(default=None, ge=0)
    display_order: float | None = None


class VideoUpdate(CamelModel):
    url: str | None = Field(default=None, min_length=1, max_length=1024)
    caption: str | None = None
    thumbnail_url: str | None = Field(default=None, max_length=1024)
    duration_seconds: int | None = Field(default=None, ge=0)
    display_order: float | None = None


class VideoRead(CamelModel):
    id: str
    post_id: str
    url: str
    object_key: str | None = None
    caption: str | None = None
    thumbnail_url: str | None = None
    duration_seconds: int | None = None
    display_order: float
    created_at: datetime


class TextBlockCreate(CamelModel):
    content: str = Field(..., min_length=1)
    section_name: str = Field(default="main", max_length=64)
    display_order: float | None = None


class TextBlockUpdate(CamelModel):
    content: str | None = Field(default=None, min_length=1)
    section_name: str | None = Field(default=None, max_length=64)
    display_order: float | None = None


class TextBlockRead(CamelModel):
    id: str
    post_id: str
    content: str
    section_name: str
    display_order: float
    created_at: datetime


class ContentItemRead(CamelModel):
    """One entry of the assembled render sequence."""

    type: ContentType
    id: str
    display_order: float


class ReorderEntry(CamelModel):
    id: str = Field(..., min_length=1)
    type: ContentType


class ReorderRequest(CamelModel):
    ordered_ids: list[ReorderEntry]


class ReorderResponse(CamelModel):
    success: bool = True
    items: list[ContentItemRead]
