import uuid

import pytest

from app.core.errors import NotFound
from app.modules.cms import models, schemas, service
from app.modules.profiles.models import UserRole


def post_in(**overrides):
    data = {"title": "Spring Drop", "content": "New packs are live.", "excerpt": "", "is_published": False}
    data.update(overrides)
    return schemas.PostCreate(**data)


async def test_draft_is_hidden_until_published(db, make_profile):
    admin = await make_profile(role=UserRole.ADMIN)
    post = await service.create_post(db, admin, post_in())

    assert post.published_at is None
    assert post.excerpt is None
    assert await service.list_published_posts(db) == []
    with pytest.raises(NotFound):
        await service.get_published_post(db, post.slug)

    published = await service.set_post_published(db, post.id, True)
    assert published.published_at is not None
    assert [p.id for p in await service.list_published_posts(db)] == [post.id]


async def test_reading_a_post_counts_the_view(db, make_profile):
    admin = await make_profile(role=UserRole.ADMIN)
    post = await service.create_post(db, admin, post_in(is_published=True))

    await service.get_published_post(db, post.slug)
    read = await service.get_published_post(db, post.slug)

    assert read.view_count == 2


async def test_update_stamps_first_publish_only(db, make_profile):
    admin = await make_profile(role=UserRole.ADMIN)
    post = await service.create_post(db, admin, post_in(is_published=True))
    first = post.published_at

    updated = await service.update_post(db, post.id, schemas.PostUpdate(title="Summer Drop", content="Packs are live.", is_published=True))

    assert updated.title == "Summer Drop"
    assert updated.published_at == first


async def test_delete_missing_post_is_not_found(db):
    with pytest.raises(NotFound):
        await service.delete_post(db, uuid.uuid4())


async def test_homepage_settings_default_then_upsert(db, make_profile):
    admin = await make_profile(role=UserRole.ADMIN)

    defaults = await service.get_homepage_settings(db)
    assert defaults.hero_title_line1 == service.DEFAULT_HOMEPAGE_SETTINGS["hero_title_line1"]

    data = dict(service.DEFAULT_HOMEPAGE_SETTINGS, cta_title="Sell with us")
    saved = await service.update_homepage_settings(db, admin, schemas.HomepageSettingsUpdate(**data))

    assert saved.cta_title == "Sell with us"
    assert saved.updated_by == admin.id
    stored = await db.get(models.HomepageSettings, models.HOMEPAGE_SETTINGS_ID, populate_existing=True)
    assert stored.id == models.HOMEPAGE_SETTINGS_ID
    assert (await service.get_homepage_settings(db)).cta_title == "Sell with us"
