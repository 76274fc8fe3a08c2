"""Media upload endpoints.

The object is uploaded to storage first; only once that succeeds is the
returned reference stored as a content row. A failure after the upload leaves
the object in storage (logged, not cleaned up).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.config import get_settings
from travelblog.core.dependencies import get_contributor_session, get_current_session, get_db
from travelblog.core.errors import ServerError
from travelblog.schemas.content import PhotoRead, VideoRead
from travelblog.schemas.media import PhotoUploadResponse, ValidateUrlRequest, ValidateUrlResponse, VideoUploadResponse
from travelblog.services import content as content_service
from travelblog.services import media as media_service
from travelblog.services import posts as post_service
from travelblog.services.auth import SessionClaims
from travelblog.services.media import MediaStorage, MediaStorageError, get_photo_storage, get_video_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "media-upload"}


@router.post("/upload-photo", response_model=PhotoUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    file: UploadFile = File(...),
    post_id: str = Form(..., alias="postId"),
    caption: str | None = Form(default=None),
    alt_text: str = Form(default="", alias="altText"),
    display_order: float | None = Form(default=None, alias="displayOrder"),
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
    storage: MediaStorage = Depends(get_photo_storage),
) -> PhotoUploadResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    max_size_mb = get_settings().max_photo_size_mb
    media_service.check_declared_size(file.size, max_size_mb)
    data = await file.read()
    media_service.validate_upload(data, file.content_type, media_service.PHOTO_CONTENT_TYPES, max_size_mb)

    try:
        stored = await storage.upload(
            data, file.filename or "photo", file.content_type, metadata={"postId": post.id, "uploadedBy": claims.subject}
        )
    except MediaStorageError as exc:
        raise ServerError(str(exc)) from exc

    try:
        photo = await content_service.add_item(
            session,
            post,
            "photo",
            {
                "url": stored.url,
                "cloudflare_image_id": stored.id,
                "caption": caption,
                "alt_text": alt_text,
                "display_order": display_order,
            },
        )
        await session.commit()
    except Exception:
        logger.warning("Photo %s uploaded but not recorded for post %s; object left in storage", stored.id, post.id)
        raise

    logger.info("Photo %s uploaded to post %s by %s", stored.id, post.id, claims.subject)
    return PhotoUploadResponse(photo=PhotoRead.model_validate(photo))


@router.post("/upload-video", response_model=VideoUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    file: UploadFile = File(...),
    post_id: str = Form(..., alias="postId"),
    caption: str | None = Form(default=None),
    display_order: float | None = Form(default=None, alias="displayOrder"),
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
    storage: MediaStorage = Depends(get_video_storage),
) -> VideoUploadResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    max_size_mb = get_settings().max_video_size_mb
    media_service.check_declared_size(file.size, max_size_mb)
    data = await file.read()
    media_service.validate_upload(data, file.content_type, media_service.VIDEO_CONTENT_TYPES, max_size_mb)

    try:
        stored = await storage.upload(data, file.filename or "video", file.content_type)
    except MediaStorageError as exc:
        raise ServerError(str(exc)) from exc

    try:
        video = await content_service.add_item(
            session,
            post,
            "video",
            {"url": stored.url, "object_key": stored.id, "caption": caption, "display_order": display_order},
        )
        await session.commit()
    except Exception:
        logger.warning("Video %s uploaded but not recorded for post %s; object left in storage", stored.id, post.id)
        raise

    logger.info("Video %s uploaded to post %s by %s", stored.id, post.id, claims.subject)
    return VideoUploadResponse(video=VideoRead.model_validate(video))


@router.post("/validate-url", response_model=ValidateUrlResponse)
async def validate_url(
    payload: ValidateUrlRequest,
    _: SessionClaims = Depends(get_contributor_session),
) -> ValidateUrlResponse:
    valid, status_code, content_type = await media_service.check_remote_url(payload.url)
    return ValidateUrlResponse(
        valid=valid,
        status=status_code,
        content_type=content_type,
        message=None if valid else "URL is not reachable",
    )
