import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyReviewed, InvalidRating, PurchaseRequired, StorageFailure, Unauthenticated
from app.modules.profiles.models import Profile
from app.modules.reviews import models
from app.modules.sales import service as sales_service

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

async def _find_review(db: AsyncSession, user_id: UUID, product_id: UUID) -> Optional[models.Review]:
    result = await db.execute(
        select(models.Review).where(
            models.Review.user_id == user_id,
            models.Review.product_id == product_id
        )
    )
    return result.scalars().first()

async def has_reviewed(db: AsyncSession, user_id: UUID, product_id: UUID) -> bool:
    return await _find_review(db, user_id, product_id) is not None

async def submit_review(
    db: AsyncSession,
    user: Optional[Profile],
    product_id: UUID,
    rating: int,
    comment: Optional[str] = None
) -> models.Review:
    if user is None:
        raise Unauthenticated()
    user_id = user.id

    # Creators never hold an entitlement to their own product, so this also blocks self-reviews
    if not await sales_service.has_entitlement(db, user_id, product_id):
        raise PurchaseRequired()
    if await has_reviewed(db, user_id, product_id):
        raise AlreadyReviewed()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating()

    review = models.Review(
        product_id=product_id,
        user_id=user_id,
        rating=rating,
        comment=(comment or "").strip() or None,
        is_verified_purchase=True
    )
    db.add(review)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if await _find_review(db, user_id, product_id) is not None:
            logger.warning(f"[Reviews] Concurrent review of {product_id} by {user_id} rejected")
            raise AlreadyReviewed() from e
        logger.exception(f"[Reviews] Integrity failure storing review of {product_id}")
        raise StorageFailure("Failed to submit review") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Reviews] Failed storing review of {product_id}")
        raise StorageFailure("Failed to submit review") from e

    await db.refresh(review)
    logger.info(f"[Reviews] {user_id} rated {product_id} {rating}/5")
    return review

async def list_product_reviews(db: AsyncSession, product_id: UUID):
    result = await db.execute(
        select(models.Review)
        .where(models.Review.product_id == product_id)
        .order_by(models.Review.created_at.desc())
    )
    return result.scalars().all()
