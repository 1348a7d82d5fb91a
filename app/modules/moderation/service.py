import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound, StorageFailure, Unauthenticated
from app.modules.admin import service as admin_service
from app.modules.catalog import models as catalog_models
from app.modules.profiles.models import Profile, UserRole
from app.modules.reviews import models as review_models
from app.modules.sales import models as sales_models

logger = logging.getLogger(__name__)

ProductStatus = catalog_models.ProductStatus

def _require_admin(actor: Optional[Profile]) -> UUID:
    if actor is None:
        raise Unauthenticated()
    if actor.role != UserRole.ADMIN:
        raise Forbidden("Admin only")
    return actor.id

async def list_products_by_status(db: AsyncSession, status: ProductStatus = ProductStatus.PENDING):
    # Review queue: oldest submissions first
    result = await db.execute(
        select(catalog_models.Product)
        .where(catalog_models.Product.status == status)
        .order_by(catalog_models.Product.created_at.asc())
    )
    return result.scalars().all()

async def _transition(
    db: AsyncSession,
    admin: Optional[Profile],
    product_id: UUID,
    new_status: ProductStatus
) -> catalog_models.Product:
    admin_id = _require_admin(admin)

    product = await db.get(catalog_models.Product, product_id)
    if not product:
        raise NotFound("Product not found")

    old_status = product.status
    now = datetime.now(timezone.utc)

    product.status = new_status
    product.updated_at = now
    # published_at is written once, on the first approval
    if new_status == ProductStatus.APPROVED and product.published_at is None:
        product.published_at = now

    action = "product.approve" if new_status == ProductStatus.APPROVED else "product.reject"
    admin_service.record_audit_log(
        db,
        action=action,
        user_id=admin_id,
        target_type="product",
        target_id=str(product_id),
        metadata={"old_status": old_status.value, "new_status": new_status.value}
    )

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Moderation] Failed to set {product_id} to {new_status.value}")
        raise StorageFailure("Failed to update product status") from e

    await db.refresh(product)
    logger.info(f"[Moderation] Product {product_id}: {old_status.value} -> {new_status.value} by {admin_id}")
    return product

async def approve_product(db: AsyncSession, admin: Optional[Profile], product_id: UUID) -> catalog_models.Product:
    return await _transition(db, admin, product_id, ProductStatus.APPROVED)

async def reject_product(db: AsyncSession, admin: Optional[Profile], product_id: UUID) -> catalog_models.Product:
    return await _transition(db, admin, product_id, ProductStatus.REJECTED)

async def delete_product(db: AsyncSession, actor: Optional[Profile], product_id: UUID) -> None:
    """
    Delete a product in any status. Allowed for admins and the owner.

    Splits, reviews and entitlements of the product go with it. Transactions
    are kept with their amounts and title snapshot, their product reference
    is cleared; split payments hang off the transaction and are untouched.
    """
    if actor is None:
        raise Unauthenticated()
    actor_id = actor.id
    is_admin = actor.role == UserRole.ADMIN

    product = await db.get(catalog_models.Product, product_id)
    if not product:
        raise NotFound("Product not found")
    if not is_admin and product.creator_id != actor_id:
        raise Forbidden("Only the owner or an admin can delete this product")

    title = product.title
    try:
        await db.execute(delete(catalog_models.Split).where(catalog_models.Split.product_id == product_id))
        await db.execute(delete(review_models.Review).where(review_models.Review.product_id == product_id))
        await db.execute(delete(sales_models.UserPurchase).where(sales_models.UserPurchase.product_id == product_id))
        await db.execute(
            update(sales_models.Transaction)
            .where(sales_models.Transaction.product_id == product_id)
            .values(product_id=None)
        )
        await db.delete(product)

        admin_service.record_audit_log(
            db,
            action="product.delete",
            user_id=actor_id,
            target_type="product",
            target_id=str(product_id),
            metadata={"title": title, "by_admin": is_admin}
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Moderation] Failed to delete product {product_id}")
        raise StorageFailure("Failed to delete product") from e

    logger.info(f"[Moderation] Product {product_id} deleted by {actor_id}")
