"""Blog post endpoints: listing, detail, metadata, deletion and reordering."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.config import get_settings
from travelblog.core.dependencies import get_contributor_session, get_current_session, get_db
from travelblog.schemas.common import SuccessResponse
from travelblog.schemas.content import (
    ContentItemRead,
    PhotoRead,
    ReorderRequest,
    ReorderResponse,
    TextBlockRead,
    VideoRead,
)
from travelblog.schemas.post import (
    Pagination,
    PostContent,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostRead,
    PostSummary,
    PostUpdate,
    StatusFilter,
)
from travelblog.services import content as content_service
from travelblog.services import posts as post_service
from travelblog.services.assembly import AssembledPost
from travelblog.services.auth import SessionClaims

router = APIRouter(prefix="/posts", tags=["posts"])


def _detail_response(assembled: AssembledPost) -> PostDetailResponse:
    post = PostRead.model_validate(
        {**PostSummary.model_validate(assembled.post).model_dump(), "template_name": assembled.template.name}
    )
    return PostDetailResponse(
        post=post,
        content=PostContent(
            photos=[PhotoRead.model_validate(photo) for photo in assembled.photos],
            videos=[VideoRead.model_validate(video) for video in assembled.videos],
            text_blocks=[TextBlockRead.model_validate(text) for text in assembled.text_blocks],
        ),
        items=[ContentItemRead(type=entry.type, id=entry.id, display_order=entry.display_order) for entry in assembled.items],
    )


@router.get("", response_model=PostListResponse)
async def list_posts(
    status_filter: StatusFilter = Query(default="published", alias="status"),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    cursor: str | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PostListResponse:
    settings = get_settings()
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    page = await post_service.list_posts(session, claims, status_filter, page_size, offset, cursor)
    return PostListResponse(
        posts=[PostSummary.model_validate(post) for post in page.posts],
        pagination=Pagination(total=page.total, limit=page.limit, offset=page.offset, next_cursor=page.next_cursor),
    )


@router.post("", response_model=PostDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_contributor_session),
) -> PostDetailResponse:
    post = await post_service.create_post(session, claims, payload)
    assembled = await post_service.load_assembled(session, post)
    await session.commit()
    return _detail_response(assembled)


@router.get("/slug/{slug}", response_model=PostDetailResponse)
async def get_post_by_slug(
    slug: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PostDetailResponse:
    return _detail_response(await post_service.get_post_detail(session, slug, claims))


@router.get("/{id_or_slug}", response_model=PostDetailResponse)
async def get_post(
    id_or_slug: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PostDetailResponse:
    return _detail_response(await post_service.get_post_detail(session, id_or_slug, claims))


@router.patch("/{post_id}", response_model=PostDetailResponse)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> PostDetailResponse:
    post = await post_service.update_post(session, claims, post_id, payload)
    assembled = await post_service.load_assembled(session, post)
    await session.commit()
    return _detail_response(assembled)


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: str,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> SuccessResponse:
    deleted = await post_service.delete_post(session, claims, post_id)
    await session.commit()
    return SuccessResponse(
        message=(
            f"Deleted post with {deleted.photos} photo(s), {deleted.videos} video(s) "
            f"and {deleted.text_blocks} text block(s)"
        )
    )


@router.post("/{post_id}/reorder", response_model=ReorderResponse)
async def reorder_content(
    post_id: str,
    payload: ReorderRequest,
    session: AsyncSession = Depends(get_db),
    claims: SessionClaims = Depends(get_current_session),
) -> ReorderResponse:
    post = await post_service.get_post_for_update(session, post_id, claims)
    entries = await content_service.reorder(session, post, payload.ordered_ids)
    await session.commit()
    return ReorderResponse(
        items=[ContentItemRead(type=entry.type, id=entry.id, display_order=entry.display_order) for entry in entries]
    )
