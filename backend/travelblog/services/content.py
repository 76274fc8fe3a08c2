"""Service layer for the photos, videos and text blocks of a post."""
from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelblog.core.errors import InvalidInput, NotFound
from travelblog.models import CONTENT_MODELS, BlogPost, Photo, TextBlock, Video
from travelblog.models.post import utcnow
from travelblog.schemas.content import ReorderEntry
from travelblog.services.assembly import ContentEntry, ContentRow
from travelblog.services.posts import load_assembled

logger = logging.getLogger(__name__)

_LABELS = {"photo": "Photo", "video": "Video", "text": "Text block"}


def _model_for(kind: str):
    try:
        return CONTENT_MODELS[kind]
    except KeyError as exc:
        raise InvalidInput(f"Unknown content type: {kind}") from exc


async def next_display_order(session: AsyncSession, post_id: str) -> float:
    """One past the highest display order used by any content type of the post."""
    highest: float | None = None
    for model in (Photo, Video, TextBlock):
        value = (
            await session.execute(select(func.max(model.display_order)).where(model.post_id == post_id))
        ).scalar_one_or_none()
        if value is not None and (highest is None or value > highest):
            highest = value
    return 0.0 if highest is None else float(math.floor(highest) + 1)


def _touch(post: BlogPost) -> None:
    post.updated_at = utcnow()


async def add_item(session: AsyncSession, post: BlogPost, kind: str, values: dict[str, Any]) -> ContentRow:
    model = _model_for(kind)
    values = dict(values)
    if values.get("display_order") is None:
        values["display_order"] = await next_display_order(session, post.id)
    item = model(post_id=post.id, **values)
    session.add(item)
    _touch(post)
    await session.flush()
    logger.info("%s %s added to post %s at %s", _LABELS[kind], item.id, post.id, item.display_order)
    return item


async def get_item(session: AsyncSession, post: BlogPost, kind: str, item_id: str) -> ContentRow:
    model = _model_for(kind)
    item = await session.get(model, item_id)
    if not item or item.post_id != post.id:
        raise NotFound(f"{_LABELS[kind]} not found")
    return item


async def update_item(
    session: AsyncSession, post: BlogPost, kind: str, item_id: str, changes: dict[str, Any]
) -> ContentRow:
    item = await get_item(session, post, kind, item_id)
    for field, value in changes.items():
        if value is None and field in ("url", "content", "alt_text", "section_name", "display_order"):
            raise InvalidInput(f"{field} cannot be null")
        setattr(item, field, value)
    _touch(post)
    await session.flush()
    return item


async def delete_item(session: AsyncSession, post: BlogPost, kind: str, item_id: str) -> None:
    item = await get_item(session, post, kind, item_id)
    await session.delete(item)
    _touch(post)
    await session.flush()
    logger.info("%s %s removed from post %s", _LABELS[kind], item_id, post.id)


async def reorder(session: AsyncSession, post: BlogPost, entries: Sequence[ReorderEntry]) -> tuple[ContentEntry, ...]:
    """Give every content item of the post the display order of its position.

    ``entries`` must list each item of the post exactly once. Validation runs
    before any row changes and all updates are flushed together, so the
    caller's single commit applies the whole ordering or none of it.
    """
    assembled = await load_assembled(session, post)
    existing = {(entry.type, entry.id): entry.item for entry in assembled.items}

    requested = [(entry.type, entry.id) for entry in entries]
    if len(set(requested)) != len(requested):
        raise InvalidInput("orderedIds contains duplicate entries")
    unknown = [f"{kind}:{item_id}" for kind, item_id in requested if (kind, item_id) not in existing]
    if unknown:
        raise InvalidInput(f"orderedIds references content not in this post: {', '.join(unknown)}")
    if len(requested) != len(existing):
        raise InvalidInput("orderedIds must list every content item of the post")

    for position, key in enumerate(requested):
        existing[key].display_order = float(position)
    _touch(post)
    await session.flush()
    logger.info("Post %s reordered (%d items)", post.id, len(requested))

    return tuple(ContentEntry(kind, existing[(kind, item_id)]) for kind, item_id in requested)
