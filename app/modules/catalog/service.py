import logging
import math
import re
import time
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import InvalidInput, NotFound, StorageFailure, Unauthenticated
from app.modules.catalog import models, schemas, splits
from app.modules.profiles.models import Profile, UserRole
from app.modules.profiles import service as profile_service

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^\w\s\u4e00-\u9fa5-]", re.ASCII)
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))

def generate_slug(title: str, now_ms: Optional[int] = None) -> str:
    """Lowercased title (ASCII words and CJK kept) plus a base-36 millisecond suffix."""
    base = _SLUG_STRIP.sub("", title.lower())
    base = re.sub(r"\s+", "-", base)
    base = re.sub(r"-+", "-", base).strip()[:100]
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{base}-{_to_base36(now_ms)}"

async def get_product_detail(db: AsyncSession, product_id: UUID) -> Optional[models.Product]:
    result = await db.execute(
        select(models.Product)
        .where(models.Product.id == product_id)
        .options(selectinload(models.Product.splits))
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()

async def create_product(
    db: AsyncSession,
    creator: Optional[Profile],
    product_in: schemas.ProductCreate
) -> models.Product:
    if creator is None:
        raise Unauthenticated()
    if product_in.price < 0:
        raise InvalidInput("Price cannot be negative")

    # 1. Validate and resolve splits before anything is written
    allocations = await splits.resolve_splits(db, creator, product_in.splits)

    # 2. Product, split rows and role grant commit together
    product = models.Product(
        creator_id=creator.id,
        title=product_in.title,
        slug=generate_slug(product_in.title),
        description=product_in.description or None,
        price=product_in.price,
        category=product_in.category or None,
        cover_image=str(product_in.cover_image) if product_in.cover_image else None,
        preview_images=[str(url) for url in product_in.preview_images],
        file_url=str(product_in.file_url),
        file_type=product_in.file_type,
        file_size=product_in.file_size,
        status=models.ProductStatus.PENDING # Requires admin approval
    )
    db.add(product)

    try:
        await db.flush()
        for recipient_id, percentage in allocations:
            db.add(models.Split(product_id=product.id, recipient_id=recipient_id, percentage=percentage))
        upgraded = profile_service.grant_creator_role(creator)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("[Catalog] Failed to create product")
        raise StorageFailure("Failed to create product") from e

    logger.info(f"[Catalog] Product {product.id} submitted by {creator.id} with {len(allocations)} split(s)")
    if upgraded:
        logger.info(f"[Profiles] Granted creator role to {creator.id}")

    return await get_product_detail(db, product.id)

def _can_see_unpublished(product: models.Product, viewer: Optional[Profile]) -> bool:
    if viewer is None:
        return False
    return viewer.role == UserRole.ADMIN or viewer.id == product.creator_id

async def get_product_by_slug(db: AsyncSession, slug: str, viewer: Optional[Profile] = None) -> models.Product:
    result = await db.execute(
        select(models.Product)
        .where(models.Product.slug == slug)
        .options(selectinload(models.Product.splits))
    )
    product = result.scalars().first()
    if not product:
        raise NotFound("Product not found")
    if product.status != models.ProductStatus.APPROVED and not _can_see_unpublished(product, viewer):
        raise NotFound("Product not found")
    return product

_SORTS = {
    schemas.ProductSort.LATEST: models.Product.published_at.desc(),
    schemas.ProductSort.PRICE_ASC: models.Product.price.asc(),
    schemas.ProductSort.PRICE_DESC: models.Product.price.desc(),
    schemas.ProductSort.RATING: models.Product.weighted_score.desc(),
}

async def list_public_products(
    db: AsyncSession,
    category: Optional[str] = None,
    sort: schemas.ProductSort = schemas.ProductSort.LATEST,
    page: int = 1,
    size: int = 24
) -> dict:
    conditions = [models.Product.status == models.ProductStatus.APPROVED]
    if category:
        conditions.append(models.Product.category == category)

    total = (await db.execute(select(func.count(models.Product.id)).where(*conditions))).scalar() or 0

    query = (
        select(models.Product)
        .where(*conditions)
        .order_by(_SORTS[sort], models.Product.created_at.desc())
        .offset((page - 1) * size)
        .limit(size)
    )
    items = (await db.execute(query)).scalars().all()

    return {
        "items": items,
        "total": total,
        "page": page,
        "size": size,
        "pages": math.ceil(total / size) if size > 0 else 0
    }

async def list_top_rated(db: AsyncSession, limit: int = 8):
    result = await db.execute(
        select(models.Product)
        .where(models.Product.status == models.ProductStatus.APPROVED)
        .order_by(models.Product.weighted_score.desc())
        .limit(limit)
    )
    return result.scalars().all()

async def list_latest(db: AsyncSession, limit: int = 8):
    result = await db.execute(
        select(models.Product)
        .where(models.Product.status == models.ProductStatus.APPROVED)
        .order_by(models.Product.published_at.desc())
        .limit(limit)
    )
    return result.scalars().all()

async def list_creator_products(db: AsyncSession, creator_id: UUID):
    result = await db.execute(
        select(models.Product)
        .where(models.Product.creator_id == creator_id)
        .order_by(models.Product.created_at.desc())
    )
    return result.scalars().all()
