"""Endpoints for the photos, videos and text blocks of a post.

Every route loads the post through the ownership check first: drafts the
caller cannot see are reported as missing, visible posts the caller does not
own are refused.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.dependencies import get_current_session, get_db
from travelblog.schemas.common import SuccessResponse
from travelblog.schemas.content import (
    PhotoCreate,
    PhotoRead,
    PhotoUpdate,
    TextBlockCreate,
    TextBlockRead,
    TextBlockUpdate,
    VideoCreate,
    VideoRead,
    VideoUpdate,
)
from travelblog.services import content as content_service
from travelblog.services import posts as post_service
from travelblog.services.auth import SessionClaims

router = APIRouter(prefix="/posts/{post_id}", tags=["content"])


# Photos


@router.post("/photos", response_model=PhotoRead, status_code=status.HTTP_201_CREATED)
async def add_photo(
    post_id: str,
    payload: PhotoCreate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PhotoRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    photo = await content_service.add_item(session, post, "photo", payload.model_dump())
    await session.commit()
    return PhotoRead.model_validate(photo)


@router.api_route("/photos/{photo_id}", methods=["PUT", "PATCH"], response_model=PhotoRead)
async def update_photo(
    post_id: str,
    photo_id: str,
    payload: PhotoUpdate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PhotoRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    photo = await content_service.update_item(session, post, "photo", photo_id, payload.model_dump(exclude_unset=True))
    await session.commit()
    return PhotoRead.model_validate(photo)


@router.delete("/photos/{photo_id}", response_model=SuccessResponse)
async def delete_photo(
    post_id: str,
    photo_id: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> SuccessResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    await content_service.delete_item(session, post, "photo", photo_id)
    await session.commit()
    return SuccessResponse(message="Photo deleted")


# Videos


@router.post("/videos", response_model=VideoRead, status_code=status.HTTP_201_CREATED)
async def add_video(
    post_id: str,
    payload: VideoCreate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> VideoRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    video = await content_service.add_item(session, post, "video", payload.model_dump())
    await session.commit()
    return VideoRead.model_validate(video)


@router.api_route("/videos/{video_id}", methods=["PUT", "PATCH"], response_model=VideoRead)
async def update_video(
    post_id: str,
    video_id: str,
    payload: VideoUpdate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> VideoRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    video = await content_service.update_item(session, post, "video", video_id, payload.model_dump(exclude_unset=True))
    await session.commit()
    return VideoRead.model_validate(video)


@router.delete("/videos/{video_id}", response_model=SuccessResponse)
async def delete_video(
    post_id: str,
    video_id: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> SuccessResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    await content_service.delete_item(session, post, "video", video_id)
    await session.commit()
    return SuccessResponse(message="Video deleted")


# Text blocks


@router.post("/text", response_model=TextBlockRead, status_code=status.HTTP_201_CREATED)
async def add_text(
    post_id: str,
    payload: TextBlockCreate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> TextBlockRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    text = await content_service.add_item(session, post, "text", payload.model_dump())
    await session.commit()
    return TextBlockRead.model_validate(text)


@router.api_route("/text/{text_id}", methods=["PUT", "PATCH"], response_model=TextBlockRead)
async def update_text(
    post_id: str,
    text_id: str,
    payload: TextBlockUpdate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> TextBlockRead:
    post = await post_service.get_post_for_update(session, post_id, claims)
    text = await content_service.update_item(session, post, "text", text_id, payload.model_dump(exclude_unset=True))
    await session.commit()
    return TextBlockRead.model_validate(text)


@router.delete("/text/{text_id}", response_model=SuccessResponse)
async def delete_text(
    post_id: str,
    text_id: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> SuccessResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    await content_service.delete_item(session, post, "text", text_id)
    await session.commit()
    return SuccessResponse(message="Text block deleted")
