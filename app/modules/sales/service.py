import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    AlreadyOwned, NotFound, PurchaseRequired, SelfPurchaseForbidden, StorageFailure, Unauthenticated
)
from app.modules.catalog import models as catalog_models
from app.modules.profiles.models import Profile, UserRole
from app.modules.sales import models
from app.modules.sales.fees import calculate_fees, split_amount

logger = logging.getLogger(__name__)

async def _find_entitlement(db: AsyncSession, user_id: UUID, product_id: UUID) -> Optional[models.UserPurchase]:
    result = await db.execute(
        select(models.UserPurchase).where(
            models.UserPurchase.user_id == user_id,
            models.UserPurchase.product_id == product_id
        )
    )
    return result.scalars().first()

async def has_entitlement(db: AsyncSession, user_id: UUID, product_id: UUID) -> bool:
    return await _find_entitlement(db, user_id, product_id) is not None

async def _split_configuration(db: AsyncSession, product_id: UUID, creator_id: UUID) -> List[Tuple[UUID, Decimal]]:
    result = await db.execute(
        select(catalog_models.Split.recipient_id, catalog_models.Split.percentage)
        .where(catalog_models.Split.product_id == product_id)
        .order_by(catalog_models.Split.created_at)
    )
    rows = [(recipient_id, Decimal(percentage)) for recipient_id, percentage in result.all()]
    if not rows:
        # No configured splits: everything goes to the creator
        rows = [(creator_id, Decimal("100"))]
    return rows

async def purchase(db: AsyncSession, buyer: Optional[Profile], product_id: UUID) -> models.Transaction:
    """
    Settle a purchase: one completed Transaction, the buyer's entitlement and
    one SplitPayment per split row, committed as a single unit.
    """
    # 1. Eligibility, fail fast before any write
    if buyer is None:
        raise Unauthenticated()
    buyer_id = buyer.id

    product = await db.get(catalog_models.Product, product_id)
    if not product:
        raise NotFound("Product does not exist or is unpublished")
    if product.creator_id == buyer_id:
        raise SelfPurchaseForbidden()
    if product.status != catalog_models.ProductStatus.APPROVED:
        raise NotFound("Product does not exist or is unpublished")
    if await has_entitlement(db, buyer_id, product_id):
        raise AlreadyOwned()

    # 2. Amounts
    fees = calculate_fees(product.price)
    creator_id = product.creator_id

    # 3. Writes (single transaction)
    transaction = models.Transaction(
        buyer_id=buyer_id,
        product_id=product_id,
        product_title=product.title,
        amount=fees.amount,
        platform_fee=fees.platform_fee,
        creator_amount=fees.creator_amount,
        status=models.TransactionStatus.COMPLETED, # No external payment confirmation step
        completed_at=datetime.now(timezone.utc)
    )
    db.add(transaction)

    try:
        await db.flush()
        db.add(models.UserPurchase(user_id=buyer_id, product_id=product_id, transaction_id=transaction.id))

        for recipient_id, percentage in await _split_configuration(db, product_id, creator_id):
            db.add(models.SplitPayment(
                transaction_id=transaction.id,
                recipient_id=recipient_id,
                amount=split_amount(fees.creator_amount, percentage),
                percentage=percentage
            ))

        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Unique (user, product) lost a race against a concurrent purchase
        if await _find_entitlement(db, buyer_id, product_id) is not None:
            logger.warning(f"[Settlement] Concurrent purchase of {product_id} by {buyer_id} rejected")
            raise AlreadyOwned() from e
        logger.exception(f"[Settlement] Integrity failure settling {product_id} for {buyer_id}")
        raise StorageFailure("Failed to record purchase") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Settlement] Failed settling {product_id} for {buyer_id}")
        raise StorageFailure("Failed to record purchase") from e

    await db.refresh(transaction)
    logger.info(
        f"[Settlement] Transaction {transaction.id}: {fees.amount} for {product_id} "
        f"(fee {fees.platform_fee}, creators {fees.creator_amount})"
    )
    return transaction

async def list_split_payments(db: AsyncSession, transaction_id: UUID):
    result = await db.execute(
        select(models.SplitPayment)
        .where(models.SplitPayment.transaction_id == transaction_id)
        .order_by(models.SplitPayment.percentage.desc())
    )
    return result.scalars().all()

async def list_purchases(db: AsyncSession, user_id: UUID) -> list:
    P = catalog_models.Product
    result = await db.execute(
        select(models.UserPurchase, P.title, P.slug, P.cover_image, models.Transaction.amount)
        .join(P, models.UserPurchase.product_id == P.id)
        .join(models.Transaction, models.UserPurchase.transaction_id == models.Transaction.id)
        .where(models.UserPurchase.user_id == user_id)
        .order_by(models.UserPurchase.purchased_at.desc())
    )

    response = []
    for purchase, title, slug, cover_image, amount in result.all():
        response.append({
            "id": purchase.id,
            "product_id": purchase.product_id,
            "transaction_id": purchase.transaction_id,
            "purchased_at": purchase.purchased_at,
            "product_title": title,
            "product_slug": slug,
            "cover_image": cover_image,
            "amount": amount
        })
    return response

async def list_earnings(db: AsyncSession, recipient_id: UUID) -> dict:
    result = await db.execute(
        select(models.SplitPayment, models.Transaction.product_id, models.Transaction.product_title)
        .join(models.Transaction, models.SplitPayment.transaction_id == models.Transaction.id)
        .where(
            models.SplitPayment.recipient_id == recipient_id,
            models.Transaction.status == models.TransactionStatus.COMPLETED
        )
        .order_by(models.SplitPayment.created_at.desc())
    )

    items = []
    total = Decimal("0.00")
    for payment, product_id, product_title in result.all():
        total += Decimal(payment.amount)
        items.append({
            "id": payment.id,
            "transaction_id": payment.transaction_id,
            "product_id": product_id,
            "product_title": product_title,
            "amount": payment.amount,
            "percentage": payment.percentage,
            "created_at": payment.created_at
        })
    return {"items": items, "total": total}

async def check_access(db: AsyncSession, user: Profile, product_id: UUID) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    product = await db.get(catalog_models.Product, product_id)
    if product and product.creator_id == user.id:
        return True
    return await has_entitlement(db, user.id, product_id)

async def get_download_url(db: AsyncSession, user: Profile, product_id: UUID) -> str:
    product = await db.get(catalog_models.Product, product_id)
    if not product:
        raise NotFound("Product not found")
    if not await check_access(db, user, product_id):
        raise PurchaseRequired("Purchase the product to download it")

    file_url = product.file_url
    await db.execute(
        update(catalog_models.Product)
        .where(catalog_models.Product.id == product_id)
        .values(download_count=catalog_models.Product.download_count + 1)
    )
    await db.commit()
    return file_url

async def count_completed(db: AsyncSession) -> Tuple[int, Decimal, Decimal]:
    """(number, gross revenue, platform fees) over completed transactions."""
    result = await db.execute(
        select(
            func.count(models.Transaction.id),
            func.coalesce(func.sum(models.Transaction.amount), 0),
            func.coalesce(func.sum(models.Transaction.platform_fee), 0)
        ).where(models.Transaction.status == models.TransactionStatus.COMPLETED)
    )
    count, revenue, fees = result.one()
    return count, Decimal(str(revenue)), Decimal(str(fees))
