"""Denormalized rating figures on products.

Runs after a review is stored, as its own step: the review gate never
touches product rows. ``weighted_score`` is a Bayesian average that pulls
products with few ratings towards a neutral prior, so a single 5-star
review does not outrank a product with many 4.8 ratings.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.catalog import models as catalog_models
from app.modules.reviews import models

logger = logging.getLogger(__name__)

PRIOR_MEAN = Decimal("3.0")
PRIOR_WEIGHT = 5

def weighted_score(rating_sum: int, rating_count: int) -> Decimal:
    score = (PRIOR_MEAN * PRIOR_WEIGHT + Decimal(rating_sum)) / Decimal(PRIOR_WEIGHT + rating_count)
    return score.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)

async def refresh_product_rating(db: AsyncSession, product_id: UUID) -> None:
    result = await db.execute(
        select(func.count(models.Review.id), func.coalesce(func.sum(models.Review.rating), 0))
        .where(models.Review.product_id == product_id)
    )
    count, total = result.one()
    count, total = int(count), int(total)

    avg = (Decimal(total) / count).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if count else Decimal("0")

    await db.execute(
        update(catalog_models.Product)
        .where(catalog_models.Product.id == product_id)
        .values(avg_rating=avg, rating_count=count, weighted_score=weighted_score(total, count))
    )
    await db.commit()
    logger.info(f"[Reviews] Product {product_id} rating {avg} over {count} review(s)")
