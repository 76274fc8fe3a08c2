"""Schemas for media upload endpoints."""
from __future__ import annotations

from pydantic import Field

from travelblog.schemas.common import CamelModel
from travelblog.schemas.content import PhotoRead, VideoRead


class PhotoUploadResponse(CamelModel):
    success: bool = True
    photo: PhotoRead


class VideoUploadResponse(CamelModel):
    success: bool = True
    video: VideoRead


class ValidateUrlRequest(CamelModel):
    url: str = Field(..., min_length=1, max_length=2048)


class ValidateUrlResponse(CamelModel):
    valid: bool
    status: int | None = None
    content_type: str | None = None
    message: str | None = None
