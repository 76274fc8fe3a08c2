"""Merge a post's photos, videos and text blocks into one render sequence."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence, Union

from travelblog.core.errors import InvalidInput, ServerError
from travelblog.models import BlogPost, Photo, TextBlock, Video
from travelblog.services.templates import DEFAULT_TEMPLATE, TEMPLATES, TemplateInfo, get_template

logger = logging.getLogger(__name__)

ContentRow = Union[Photo, Video, TextBlock]


@dataclass(frozen=True, slots=True)
class ContentEntry:
    type: str
    item: ContentRow

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def display_order(self) -> float:
        return self.item.display_order

    @property
    def created_at(self) -> datetime:
        return self.item.created_at

    def sort_key(self) -> tuple[float, datetime, str]:
        return (self.item.display_order, self.item.created_at, self.item.id)


@dataclass(frozen=True, slots=True)
class AssembledPost:
    post: BlogPost
    template: TemplateInfo
    photos: tuple[Photo, ...]
    videos: tuple[Video, ...]
    text_blocks: tuple[TextBlock, ...]
    items: tuple[ContentEntry, ...]


def _resolve_template(post: BlogPost) -> TemplateInfo:
    try:
        return get_template(post.template_id)
    except InvalidInput:
        logger.warning("Post %s has unknown template %r, using default", post.id, post.template_id)
        return TEMPLATES[DEFAULT_TEMPLATE]


def _ordered(entries: list[ContentEntry]) -> tuple[ContentEntry, ...]:
    return tuple(sorted(entries, key=ContentEntry.sort_key))


def assemble(
    post: BlogPost,
    photos: Sequence[Photo],
    videos: Sequence[Video],
    text_blocks: Sequence[TextBlock],
) -> AssembledPost:
    """Order all content of ``post`` by display order across types.

    Equal display orders fall back to creation time, then id, so repeated
    calls give the same sequence. The input sequences are left untouched.
    Media URLs are passed through as stored.
    """
    entries: list[ContentEntry] = []
    for kind, rows in (("photo", photos), ("video", videos), ("text", text_blocks)):
        for row in rows:
            if row.post_id != post.id:
                raise ServerError(f"{kind} {row.id} references post {row.post_id}, expected {post.id}")
            entries.append(ContentEntry(kind, row))

    items = _ordered(entries)
    return AssembledPost(
        post=post,
        template=_resolve_template(post),
        photos=tuple(entry.item for entry in items if entry.type == "photo"),
        videos=tuple(entry.item for entry in items if entry.type == "video"),
        text_blocks=tuple(entry.item for entry in items if entry.type == "text"),
        items=items,
    )
