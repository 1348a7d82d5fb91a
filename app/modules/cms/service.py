import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.modules.catalog.service import generate_slug
from app.modules.cms import models, schemas
from app.modules.profiles.models import Profile

logger = logging.getLogger(__name__)

DEFAULT_HOMEPAGE_SETTINGS = {
    "hero_title_line1": "Explore cutting-edge",
    "hero_title_line2": "AI creative inspiration",
    "hero_subtitle": "SnapStudio connects creators and collectors so every digital artwork finds its home. Fair splits, transparent sales.",
    "hero_button_primary_text": "Start browsing",
    "hero_button_primary_link": "/browse",
    "hero_button_secondary_text": "Become a creator",
    "hero_button_secondary_link": "/register",
    "cta_title": "Ready to share your work?",
    "cta_subtitle": "Join SnapStudio and bring your digital art to more people. We only take a 10% platform fee.",
    "cta_button_text": "Sign up now",
    "cta_button_link": "/register",
    "section_top_rated_title": "Top rated",
    "section_latest_title": "New arrivals",
    "section_blog_title": "Latest news",
}

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

async def create_post(db: AsyncSession, author: Profile, post_in: schemas.PostCreate) -> models.Post:
    post = models.Post(
        author_id=author.id,
        title=post_in.title,
        slug=generate_slug(post_in.title),
        content=post_in.content,
        excerpt=post_in.excerpt or None,
        cover_image=str(post_in.cover_image) if post_in.cover_image else None,
        is_published=post_in.is_published,
        published_at=_utcnow() if post_in.is_published else None
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)
    logger.info(f"[CMS] Post {post.id} created by {author.id}")
    return post

async def _get_post(db: AsyncSession, post_id: UUID) -> models.Post:
    post = await db.get(models.Post, post_id)
    if not post:
        raise NotFound("Post not found")
    return post

async def update_post(db: AsyncSession, post_id: UUID, post_in: schemas.PostUpdate) -> models.Post:
    post = await _get_post(db, post_id)
    was_published = post.is_published

    post.title = post_in.title
    post.content = post_in.content
    post.excerpt = post_in.excerpt or None
    post.cover_image = str(post_in.cover_image) if post_in.cover_image else None
    post.is_published = post_in.is_published
    post.updated_at = _utcnow()

    # First publish stamps the date
    if post_in.is_published and not was_published:
        post.published_at = _utcnow()

    await db.commit()
    await db.refresh(post)
    return post

async def set_post_published(db: AsyncSession, post_id: UUID, is_published: bool) -> models.Post:
    post = await _get_post(db, post_id)
    post.is_published = is_published
    post.updated_at = _utcnow()
    if is_published:
        post.published_at = _utcnow()
    await db.commit()
    await db.refresh(post)
    return post

async def delete_post(db: AsyncSession, post_id: UUID) -> None:
    post = await _get_post(db, post_id)
    await db.delete(post)
    await db.commit()
    logger.info(f"[CMS] Post {post_id} deleted")

async def list_all_posts(db: AsyncSession):
    result = await db.execute(select(models.Post).order_by(models.Post.created_at.desc()))
    return result.scalars().all()

async def list_published_posts(db: AsyncSession, limit: int = 20):
    result = await db.execute(
        select(models.Post)
        .where(models.Post.is_published == True)
        .order_by(models.Post.published_at.desc())
        .limit(limit)
    )
    return result.scalars().all()

async def get_published_post(db: AsyncSession, slug: str) -> models.Post:
    result = await db.execute(
        select(models.Post).where(models.Post.slug == slug, models.Post.is_published == True)
    )
    post = result.scalars().first()
    if not post:
        raise NotFound("Post not found")

    await db.execute(
        update(models.Post)
        .where(models.Post.id == post.id)
        .values(view_count=models.Post.view_count + 1)
    )
    await db.commit()
    await db.refresh(post)
    return post

async def get_homepage_settings(db: AsyncSession) -> models.HomepageSettings:
    settings_row = await db.get(models.HomepageSettings, models.HOMEPAGE_SETTINGS_ID)
    if settings_row:
        return settings_row
    # Not stored yet: transient row with the defaults
    return models.HomepageSettings(id=models.HOMEPAGE_SETTINGS_ID, **DEFAULT_HOMEPAGE_SETTINGS)

async def update_homepage_settings(
    db: AsyncSession,
    admin: Profile,
    settings_in: schemas.HomepageSettingsUpdate
) -> models.HomepageSettings:
    settings_row = await db.get(models.HomepageSettings, models.HOMEPAGE_SETTINGS_ID)
    if settings_row is None:
        settings_row = models.HomepageSettings(id=models.HOMEPAGE_SETTINGS_ID)
        db.add(settings_row)

    for field, value in settings_in.model_dump().items():
        setattr(settings_row, field, value)
    settings_row.updated_by = admin.id
    settings_row.updated_at = _utcnow()

    await db.commit()
    await db.refresh(settings_row)
    logger.info(f"[CMS] Homepage settings updated by {admin.id}")
    return settings_row
