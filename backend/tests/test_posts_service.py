from __future__ import annotations

import random
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from travelblog.core.errors import Forbidden, InvalidInput, NotFound
from travelblog.models import Photo, TextBlock, Video
from travelblog.schemas.content import PhotoCreate, TextBlockCreate, VideoCreate
from travelblog.schemas.post import PostCreate, PostUpdate
from travelblog.services import posts as post_service

from .conftest import ANNA, BASE_TIME, BJORN, READER, claims_for


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
async def test_published_listing_never_contains_drafts(make_post, session, seed):
    rng = random.Random(seed)
    drafts, published = rng.randint(0, 8), rng.randint(0, 8)
    statuses = ["draft"] * drafts + ["published"] * published
    rng.shuffle(statuses)
    for status in statuses:
        await make_post(author=rng.choice(["Anna", "bjorn"]), status=status)

    for claims in (READER, ANNA, BJORN):
        page = await post_service.list_posts(session, claims, "published", limit=100)
        assert page.total == published
        assert len(page.posts) == published
        assert all(post.status == "published" for post in page.posts)


async def test_contributor_management_view_only_shows_own_posts(make_post, session):
    own_draft = await make_post(author="Anna", status="draft")
    own_published = await make_post(author="Anna", status="published")
    await make_post(author="bjorn", status="draft")
    await make_post(author="bjorn", status="published")

    page = await post_service.list_posts(session, ANNA, "all")
    assert {post.id for post in page.posts} == {own_draft.id, own_published.id}

    drafts = await post_service.list_posts(session, ANNA, "draft")
    assert [post.id for post in drafts.posts] == [own_draft.id]


async def test_management_view_matches_author_case_insensitively(make_post, session):
    draft = await make_post(author="Anna", status="draft")
    lowercase = claims_for("anna", "contributor")

    for status in ("all", "draft"):
        page = await post_service.list_posts(session, lowercase, status)
        assert [post.id for post in page.posts] == [draft.id]


async def test_reader_cannot_widen_status_filter(make_post, session):
    await make_post(author="Anna", status="draft")
    published = await make_post(author="Anna", status="published")
    for status in ("all", "draft"):
        page = await post_service.list_posts(session, READER, status)
        assert [post.id for post in page.posts] == [published.id]


async def test_listing_order_newest_first_with_id_tiebreak(make_post, session):
    older = await make_post(status="published", created_at=BASE_TIME)
    tie_a = await make_post(status="published", created_at=BASE_TIME + timedelta(days=1))
    tie_b = await make_post(status="published", created_at=BASE_TIME + timedelta(days=1))
    draft = await make_post(status="draft", created_at=BASE_TIME + timedelta(days=2))

    page = await post_service.list_posts(session, ANNA, "all")
    tied = sorted([tie_a.id, tie_b.id])
    assert [post.id for post in page.posts] == [draft.id, *tied, older.id]


async def test_published_at_drives_order_over_created_at(make_post, session):
    late_publish = await make_post(
        status="published", created_at=BASE_TIME, published_at=BASE_TIME + timedelta(days=10)
    )
    early = await make_post(status="published", created_at=BASE_TIME + timedelta(days=1))
    page = await post_service.list_posts(session, READER)
    assert [post.id for post in page.posts] == [late_publish.id, early.id]


async def test_offset_pagination(make_post, session):
    for _ in range(5):
        await make_post(status="published")
    first = await post_service.list_posts(session, READER, limit=2, offset=0)
    second = await post_service.list_posts(session, READER, limit=2, offset=2)
    third = await post_service.list_posts(session, READER, limit=2, offset=4)
    ids = [post.id for page in (first, second, third) for post in page.posts]
    assert len(ids) == len(set(ids)) == 5
    assert first.total == 5
    assert third.next_cursor is None


async def test_cursor_pagination_is_stable_under_inserts(make_post, session):
    for _ in range(4):
        await make_post(status="published")
    first = await post_service.list_posts(session, READER, limit=2)
    assert first.next_cursor

    # a newer post arrives between page requests
    await make_post(status="published", created_at=BASE_TIME + timedelta(days=30))

    second = await post_service.list_posts(session, READER, limit=2, cursor=first.next_cursor)
    seen = [post.id for post in first.posts] + [post.id for post in second.posts]
    assert len(set(seen)) == 4
    assert second.next_cursor is None


async def test_invalid_cursor(session):
    with pytest.raises(InvalidInput):
        await post_service.list_posts(session, READER, cursor="%%%")


async def test_get_post_visibility(make_post, session):
    draft = await make_post(author="Anna", status="draft")

    assert (await post_service.get_visible_post(session, draft.id, ANNA)).id == draft.id
    assert (await post_service.get_visible_post(session, draft.slug, ANNA)).id == draft.id
    for claims in (BJORN, READER):
        with pytest.raises(NotFound):
            await post_service.get_visible_post(session, draft.id, claims)


async def test_published_post_visible_to_all(make_post, session):
    post = await make_post(author="Anna", status="published")
    for claims in (READER, BJORN):
        assert (await post_service.get_visible_post(session, post.slug, claims)).id == post.id


async def test_modification_gate(make_post, session):
    published = await make_post(author="Anna", status="published")
    draft = await make_post(author="Anna", status="draft")

    assert (await post_service.get_post_for_update(session, published.id, ANNA)).id == published.id
    with pytest.raises(Forbidden):
        await post_service.get_post_for_update(session, published.id, BJORN)
    with pytest.raises(Forbidden):
        await post_service.get_post_for_update(session, published.id, READER)
    with pytest.raises(NotFound):
        await post_service.get_post_for_update(session, draft.id, BJORN)
    with pytest.raises(NotFound):
        await post_service.get_post_for_update(session, "missing", ANNA)


async def test_create_post_with_seed_content(session):
    payload = PostCreate(
        title="Summer in Norway",
        template_id="4",
        photos=[PhotoCreate(url="https://img.example/1.jpg"), PhotoCreate(url="https://img.example/2.jpg", display_order=5)],
        videos=[VideoCreate(url="https://video.example/1.mp4")],
        text_blocks=[TextBlockCreate(content="We drove north.")],
    )
    post = await post_service.create_post(session, ANNA, payload)
    assert post.slug == "summer-in-norway"
    assert post.template_id == "template-04"
    assert post.status == "draft"
    assert post.published_at is None
    assert post.author_id == "Anna"

    assembled = await post_service.load_assembled(session, post)
    assert [entry.display_order for entry in assembled.items] == [5, 6, 7, 8]
    assert [entry.type for entry in assembled.items] == ["photo", "photo", "video", "text"]


async def test_create_published_post_sets_published_at(session):
    post = await post_service.create_post(session, ANNA, PostCreate(title="Now", status="published"))
    assert post.published_at is not None


async def test_reader_cannot_create(session):
    with pytest.raises(Forbidden):
        await post_service.create_post(session, READER, PostCreate(title="Nope"))


async def test_slugs_are_unique(session):
    first = await post_service.create_post(session, ANNA, PostCreate(title="Road Trip"))
    second = await post_service.create_post(session, BJORN, PostCreate(title="Road trip!"))
    assert first.slug == "road-trip"
    assert second.slug == "road-trip-2"


async def test_publish_and_unpublish(make_post, session):
    post = await make_post(author="Anna", status="draft")
    post = await post_service.update_post(session, ANNA, post.id, PostUpdate(status="published"))
    assert post.status == "published"
    assert post.published_at is not None

    post = await post_service.update_post(session, ANNA, post.id, PostUpdate(status="draft"))
    assert post.status == "draft"
    assert post.published_at is None


async def test_update_metadata(make_post, session):
    post = await make_post(author="Anna", status="draft", title="Old")
    updated = await post_service.update_post(
        session, ANNA, post.id, PostUpdate(title="New Title", description="desc", template_id="template-07")
    )
    assert updated.slug == "new-title"
    assert updated.description == "desc"
    assert updated.template_id == "template-07"

    cleared = await post_service.update_post(session, ANNA, post.id, PostUpdate(description=None))
    assert cleared.description is None
    assert cleared.title == "New Title"


async def test_published_slug_is_stable(make_post, session):
    post = await make_post(author="Anna", status="published")
    slug = post.slug
    updated = await post_service.update_post(session, ANNA, post.id, PostUpdate(title="Renamed"))
    assert updated.title == "Renamed"
    assert updated.slug == slug


async def test_update_rejects_null_title(make_post, session):
    post = await make_post(author="Anna", status="draft")
    with pytest.raises(InvalidInput):
        await post_service.update_post(session, ANNA, post.id, PostUpdate(title=None))


async def test_delete_post_removes_all_content(make_post, add_content, session):
    post = await make_post(author="Anna", status="published")
    other = await make_post(author="Anna", status="published")
    for i in range(3):
        await add_content(post, "photo", i)
    for i in range(2):
        await add_content(post, "video", 10 + i)
    await add_content(post, "text", 20)
    await add_content(other, "photo", 0)

    deleted = await post_service.delete_post(session, ANNA, post.id)
    assert (deleted.photos, deleted.videos, deleted.text_blocks) == (3, 2, 1)

    with pytest.raises(NotFound):
        await post_service.get_visible_post(session, post.id, ANNA)
    for model in (Photo, Video, TextBlock):
        count = (await session.execute(select(func.count()).select_from(model).where(model.post_id == post.id))).scalar_one()
        assert count == 0
    remaining = (await session.execute(select(func.count()).select_from(Photo))).scalar_one()
    assert remaining == 1


async def test_delete_by_other_contributor_forbidden(make_post, session):
    post = await make_post(author="Anna", status="published")
    with pytest.raises(Forbidden):
        await post_service.delete_post(session, BJORN, post.id)
