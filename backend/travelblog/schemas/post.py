"""Pydantic schemas for blog posts."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from travelblog.schemas.common import CamelModel
from travelblog.schemas.content import (
    ContentItemRead,
    PhotoCreate,
    PhotoRead,
    TextBlockCreate,
    TextBlockRead,
    VideoCreate,
    VideoRead,
)

StatusValue = Literal["draft", "published"]
StatusFilter = Literal["draft", "published", "all"]


class PostBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    cover_image: str | None = Field(default=None, max_length=1024)
    template_id: str | None = Field(default=None, max_length=32)


class PostCreate(PostBase):
    status: StatusValue = "draft"
    photos: list[PhotoCreate] = Field(default_factory=list)
    videos: list[VideoCreate] = Field(default_factory=list)
    text_blocks: list[TextBlockCreate] = Field(default_factory=list)


class PostUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    cover_image: str | None = Field(default=None, max_length=1024)
    template_id: str | None = Field(default=None, max_length=32)
    status: StatusValue | None = None


class PostSummary(CamelModel):
    id: str
    slug: str
    title: str
    description: str | None = None
    cover_image: str | None = None
    template_id: str
    author_id: str
    status: StatusValue
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None


class PostRead(PostSummary):
    template_name: str


class PostContent(CamelModel):
    photos: list[PhotoRead]
    videos: list[VideoRead]
    text_blocks: list[TextBlockRead]


class PostDetailResponse(CamelModel):
    post: PostRead
    content: PostContent
    items: list[ContentItemRead]


class Pagination(CamelModel):
    total: int
    limit: int
    offset: int
    next_cursor: str | None = None


class PostListResponse(CamelModel):
    posts: list[PostSummary]
    pagination: Pagination
