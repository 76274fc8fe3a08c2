"""Service layer for blog posts: role-gated queries and post level mutations."""
from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from datetime import datetime

from slugify import slugify
from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.errors import Forbidden, InvalidInput, NotFound
from travelblog.models import BlogPost, Photo, PostStatus, TextBlock, Video
from travelblog.models.post import utcnow
from travelblog.schemas.post import PostCreate, PostUpdate
from travelblog.services.assembly import AssembledPost, assemble
from travelblog.services.auth import SessionClaims
from travelblog.services.permissions import can_modify, can_view, require_contributor
from travelblog.services.templates import normalize_template_id

logger = logging.getLogger(__name__)

# newest first; drafts have no publish date and sort by creation
SORT_KEY = func.coalesce(BlogPost.published_at, BlogPost.created_at)


@dataclass(slots=True)
class PostPage:
    posts: list[BlogPost]
    total: int
    limit: int
    offset: int
    next_cursor: str | None = None


@dataclass(frozen=True, slots=True)
class DeletedPost:
    post_id: str
    photos: int
    videos: int
    text_blocks: int


def encode_cursor(post: BlogPost) -> str:
    key = post.published_at or post.created_at
    raw = json.dumps([key.isoformat(), post.id]).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str) -> tuple[datetime, str]:
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii"))
        key, post_id = json.loads(raw)
        return datetime.fromisoformat(key), str(post_id)
    except (ValueError, TypeError) as exc:
        raise InvalidInput("Invalid pagination cursor") from exc


def _visibility_clauses(claims: SessionClaims, status: str) -> list:
    own = func.lower(BlogPost.author_id) == claims.subject.lower()
    # readers, and anyone asking for published posts, only ever see published rows
    if status == PostStatus.published.value or not claims.is_contributor:
        return [BlogPost.status == PostStatus.published.value]
    if status == PostStatus.draft.value:
        return [own, BlogPost.status == PostStatus.draft.value]
    return [own]


async def list_posts(
    session: AsyncSession,
    claims: SessionClaims,
    status: str = "published",
    limit: int = 20,
    offset: int = 0,
    cursor: str | None = None,
) -> PostPage:
    if limit < 1:
        raise InvalidInput("limit must be at least 1")
    if offset < 0:
        raise InvalidInput("offset must not be negative")
    clauses = _visibility_clauses(claims, status)

    total = (await session.execute(select(func.count(BlogPost.id)).where(*clauses))).scalar_one()

    query = select(BlogPost).where(*clauses).order_by(SORT_KEY.desc(), BlogPost.id.asc())
    if cursor:
        key, last_id = decode_cursor(cursor)
        query = query.where(or_(SORT_KEY < key, and_(SORT_KEY == key, BlogPost.id > last_id)))
    else:
        query = query.offset(offset)

    result = await session.execute(query.limit(limit + 1))
    rows = list(result.scalars().all())
    next_cursor = encode_cursor(rows[limit - 1]) if len(rows) > limit else None
    return PostPage(posts=rows[:limit], total=total, limit=limit, offset=offset, next_cursor=next_cursor)


async def find_post(session: AsyncSession, id_or_slug: str) -> BlogPost | None:
    result = await session.execute(
        select(BlogPost).where(or_(BlogPost.id == id_or_slug, BlogPost.slug == id_or_slug))
    )
    return result.scalars().first()


async def get_visible_post(session: AsyncSession, id_or_slug: str, claims: SessionClaims) -> BlogPost:
    """Return the post if it is published or owned by the caller.

    Drafts of other authors are reported as missing so their existence does
    not leak.
    """
    post = await find_post(session, id_or_slug)
    if not post or not can_view(claims, post):
        raise NotFound("Post not found")
    return post


async def get_post_for_update(session: AsyncSession, post_id: str, claims: SessionClaims) -> BlogPost:
    post = await get_visible_post(session, post_id, claims)
    if not can_modify(claims, post):
        raise Forbidden("You do not have permission to modify this post")
    return post


async def load_content(
    session: AsyncSession, post_id: str
) -> tuple[list[Photo], list[Video], list[TextBlock]]:
    photos = (await session.execute(select(Photo).where(Photo.post_id == post_id))).scalars().all()
    videos = (await session.execute(select(Video).where(Video.post_id == post_id))).scalars().all()
    texts = (await session.execute(select(TextBlock).where(TextBlock.post_id == post_id))).scalars().all()
    return list(photos), list(videos), list(texts)


async def load_assembled(session: AsyncSession, post: BlogPost) -> AssembledPost:
    photos, videos, texts = await load_content(session, post.id)
    return assemble(post, photos, videos, texts)


async def get_post_detail(session: AsyncSession, id_or_slug: str, claims: SessionClaims) -> AssembledPost:
    post = await get_visible_post(session, id_or_slug, claims)
    return await load_assembled(session, post)


async def generate_unique_slug(session: AsyncSession, title: str, exclude_id: str | None = None) -> str:
    base_slug = slugify(title) or "post"
    slug = base_slug
    i = 2
    while True:
        query = select(BlogPost.id).where(BlogPost.slug == slug)
        if exclude_id:
            query = query.where(BlogPost.id != exclude_id)
        if (await session.execute(query)).first() is None:
            return slug
        slug = f"{base_slug}-{i}"
        i += 1


def _seed_orders(data: PostCreate) -> list[float]:
    """Display orders for seed content; items without one are appended in payload order."""
    items = [*data.photos, *data.videos, *data.text_blocks]
    given = [item.display_order for item in items if item.display_order is not None]
    next_order = (max(given) + 1) if given else 0
    orders = []
    for item in items:
        if item.display_order is None:
            orders.append(float(next_order))
            next_order += 1
        else:
            orders.append(item.display_order)
    return orders


async def create_post(session: AsyncSession, claims: SessionClaims, data: PostCreate) -> BlogPost:
    """Create a post together with its seed content in the caller's transaction."""
    require_contributor(claims)
    now = utcnow()
    post = BlogPost(
        slug=await generate_unique_slug(session, data.title),
        title=data.title,
        description=data.description,
        cover_image=data.cover_image,
        template_id=normalize_template_id(data.template_id).value,
        author_id=claims.subject,
        status=data.status,
        created_at=now,
        updated_at=now,
        published_at=now if data.status == PostStatus.published.value else None,
    )
    session.add(post)
    await session.flush()

    orders = iter(_seed_orders(data))
    for photo in data.photos:
        session.add(Photo(post_id=post.id, **photo.model_dump(exclude={"display_order"}), display_order=next(orders)))
    for video in data.videos:
        session.add(Video(post_id=post.id, **video.model_dump(exclude={"display_order"}), display_order=next(orders)))
    for text in data.text_blocks:
        session.add(TextBlock(post_id=post.id, **text.model_dump(exclude={"display_order"}), display_order=next(orders)))
    await session.flush()

    logger.info("Post %s (%s) created by %s as %s", post.id, post.slug, claims.subject, post.status)
    return post


async def update_post(session: AsyncSession, claims: SessionClaims, post_id: str, data: PostUpdate) -> BlogPost:
    """Apply a metadata patch. Concurrent patches are last-write-wins."""
    post = await get_post_for_update(session, post_id, claims)
    changes = data.model_dump(exclude_unset=True)

    if "title" in changes:
        if changes["title"] is None:
            raise InvalidInput("title cannot be empty")
        if changes["title"] != post.title and not post.is_published:
            # published slugs stay stable so shared links keep working
            post.slug = await generate_unique_slug(session, changes["title"], exclude_id=post.id)
        post.title = changes["title"]
    if "description" in changes:
        post.description = changes["description"]
    if "cover_image" in changes:
        post.cover_image = changes["cover_image"]
    if "template_id" in changes:
        post.template_id = normalize_template_id(changes["template_id"]).value

    status = changes.get("status")
    if status and status != post.status:
        if status == PostStatus.published.value:
            post.published_at = utcnow()
            logger.info("Post %s published by %s", post.id, claims.subject)
        else:
            post.published_at = None
            logger.info("Post %s unpublished by %s", post.id, claims.subject)
        post.status = status

    post.updated_at = utcnow()
    await session.flush()
    return post


async def delete_post(session: AsyncSession, claims: SessionClaims, post_id: str) -> DeletedPost:
    """Delete a post and every content row that belongs to it.

    The content tables are cleared explicitly rather than relying on the
    storage engine's cascade support; all statements share the caller's
    transaction.
    """
    post = await get_post_for_update(session, post_id, claims)
    counts = {}
    for name, model in (("photos", Photo), ("videos", Video), ("text_blocks", TextBlock)):
        result = await session.execute(delete(model).where(model.post_id == post.id))
        counts[name] = result.rowcount or 0
    await session.delete(post)
    await session.flush()
    logger.info(
        "Post %s deleted by %s (%d photos, %d videos, %d text blocks)",
        post.id,
        claims.subject,
        counts["photos"],
        counts["videos"],
        counts["text_blocks"],
    )
    return DeletedPost(post_id=post.id, **counts)
