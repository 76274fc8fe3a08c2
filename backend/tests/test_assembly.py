from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from travelblog.core.errors import ServerError
from travelblog.models import BlogPost, Photo, TextBlock, Video
from travelblog.services.assembly import assemble

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _post(template_id: str = "template-02") -> BlogPost:
    return BlogPost(id="post-1", slug="trip", title="Trip", template_id=template_id, author_id="Anna", status="published")


def _photo(item_id: str, order: float, offset: int = 0, post_id: str = "post-1") -> Photo:
    return Photo(id=item_id, post_id=post_id, url=f"https://img.example/{item_id}", alt_text="", display_order=order, created_at=T0 + timedelta(seconds=offset))


def _text(item_id: str, order: float, offset: int = 0) -> TextBlock:
    return TextBlock(id=item_id, post_id="post-1", content="...", display_order=order, created_at=T0 + timedelta(seconds=offset))


def _video(item_id: str, order: float, offset: int = 0) -> Video:
    return Video(id=item_id, post_id="post-1", url="https://unreachable.invalid/v.mp4", display_order=order, created_at=T0 + timedelta(seconds=offset))


def test_orders_across_types():
    photos = [_photo("p2", 2), _photo("p0", 0), _photo("p1", 1)]
    texts = [_text("t", 1.5)]
    assembled = assemble(_post(), photos, [], texts)
    assert [(entry.type, entry.display_order) for entry in assembled.items] == [
        ("photo", 0),
        ("photo", 1),
        ("text", 1.5),
        ("photo", 2),
    ]
    assert [photo.id for photo in assembled.photos] == ["p0", "p1", "p2"]
    assert assembled.template.name == "Photo Grid"


def test_inputs_are_not_mutated():
    photos = [_photo("p2", 2), _photo("p0", 0)]
    assemble(_post(), photos, [], [])
    assert [photo.id for photo in photos] == ["p2", "p0"]


def test_ties_break_by_creation_time_then_id():
    photos = [_photo("b", 1, offset=5), _photo("a", 1, offset=5)]
    videos = [_video("v", 1, offset=10)]
    texts = [_text("t", 1, offset=0)]
    first = assemble(_post(), photos, videos, texts)
    assert [entry.id for entry in first.items] == ["t", "a", "b", "v"]

    second = assemble(_post(), list(reversed(photos)), videos, texts)
    assert [entry.id for entry in second.items] == [entry.id for entry in first.items]


def test_unreachable_media_is_passed_through():
    assembled = assemble(_post(), [], [_video("v", 0)], [])
    assert assembled.videos[0].url == "https://unreachable.invalid/v.mp4"


def test_empty_post():
    assembled = assemble(_post(), [], [], [])
    assert assembled.items == ()


def test_foreign_content_is_a_server_error():
    with pytest.raises(ServerError):
        assemble(_post(), [_photo("p", 0, post_id="other-post")], [], [])


def test_unknown_template_falls_back_to_default():
    assert assemble(_post("template-99"), [], [], []).template.name == "Classic"
