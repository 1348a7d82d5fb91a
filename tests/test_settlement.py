import uuid
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    AlreadyOwned, NotFound, PurchaseRequired, SelfPurchaseForbidden, StorageFailure, Unauthenticated
)
from app.modules.catalog.models import ProductStatus
from app.modules.sales import service as sales_service
from app.modules.sales.models import SplitPayment, Transaction, TransactionStatus, UserPurchase


async def count(db, column):
    return (await db.execute(select(func.count(column)))).scalar()


async def test_purchase_without_splits_pays_creator_everything(db, make_profile, make_product):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator, price="299.00")

    transaction = await sales_service.purchase(db, buyer, product.id)

    assert transaction.status == TransactionStatus.COMPLETED
    assert transaction.completed_at is not None
    assert transaction.amount == Decimal("299.00")
    assert transaction.platform_fee == Decimal("29.90")
    assert transaction.creator_amount == Decimal("269.10")
    assert transaction.product_title == product.title

    payments = await sales_service.list_split_payments(db, transaction.id)
    assert [(p.recipient_id, p.amount, p.percentage) for p in payments] == [
        (creator.id, Decimal("269.10"), Decimal("100"))
    ]
    assert await sales_service.has_entitlement(db, buyer.id, product.id)


async def test_purchase_divides_creator_amount_by_split(db, make_profile, make_product):
    creator = await make_profile()
    collaborator = await make_profile()
    buyer = await make_profile()
    product = await make_product(
        creator, price="100.00", splits=[(creator.id, "70"), (collaborator.id, "30")]
    )

    transaction = await sales_service.purchase(db, buyer, product.id)

    assert transaction.platform_fee == Decimal("10.00")
    assert transaction.creator_amount == Decimal("90.00")
    payments = {p.recipient_id: p.amount for p in await sales_service.list_split_payments(db, transaction.id)}
    assert payments == {creator.id: Decimal("63.00"), collaborator.id: Decimal("27.00")}


async def test_free_product_settles_with_zero_amounts(db, make_profile, make_product):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator, price="0.00")

    transaction = await sales_service.purchase(db, buyer, product.id)

    assert transaction.amount == Decimal("0.00")
    assert transaction.platform_fee == Decimal("0.00")
    assert await sales_service.has_entitlement(db, buyer.id, product.id)


@pytest.mark.parametrize("status", [ProductStatus.PENDING, ProductStatus.REJECTED])
async def test_unpublished_product_cannot_be_bought(db, make_profile, make_product, status):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator, status=status)

    with pytest.raises(NotFound):
        await sales_service.purchase(db, buyer, product.id)

    assert await count(db, Transaction.id) == 0


async def test_missing_product_is_not_found(db, make_profile):
    buyer = await make_profile()
    with pytest.raises(NotFound):
        await sales_service.purchase(db, buyer, uuid.uuid4())


@pytest.mark.parametrize("status", [ProductStatus.APPROVED, ProductStatus.PENDING])
async def test_creator_cannot_buy_own_product(db, make_profile, make_product, status):
    creator = await make_profile()
    product = await make_product(creator, status=status)

    with pytest.raises(SelfPurchaseForbidden):
        await sales_service.purchase(db, creator, product.id)

    assert await count(db, Transaction.id) == 0


async def test_anonymous_purchase_is_rejected(db, make_profile, make_product):
    creator = await make_profile()
    product = await make_product(creator)

    with pytest.raises(Unauthenticated):
        await sales_service.purchase(db, None, product.id)


async def test_second_purchase_is_already_owned(db, make_profile, make_product):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator)
    await sales_service.purchase(db, buyer, product.id)

    with pytest.raises(AlreadyOwned):
        await sales_service.purchase(db, buyer, product.id)

    assert await count(db, Transaction.id) == 1


async def test_concurrent_purchase_loses_on_unique_entitlement(db, make_profile, make_product, monkeypatch):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator)
    buyer_id, product_id = buyer.id, product.id
    await sales_service.purchase(db, buyer, product_id)

    # The pre-check misses the row the other request just committed
    async def not_owned_yet(*args, **kwargs):
        return False

    monkeypatch.setattr(sales_service, "has_entitlement", not_owned_yet)

    with pytest.raises(AlreadyOwned):
        await sales_service.purchase(db, buyer, product_id)

    assert await count(db, Transaction.id) == 1
    assert await count(db, SplitPayment.id) == 1
    assert await count(db, UserPurchase.id) == 1
    assert await sales_service._find_entitlement(db, buyer_id, product_id) is not None


async def test_failed_commit_leaves_no_partial_settlement(db, make_profile, make_product, monkeypatch):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator)
    product_id = product.id

    async def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(StorageFailure):
        await sales_service.purchase(db, buyer, product_id)

    assert await count(db, Transaction.id) == 0
    assert await count(db, UserPurchase.id) == 0
    assert await count(db, SplitPayment.id) == 0


async def test_earnings_sum_split_payments_per_recipient(db, make_profile, make_product):
    creator = await make_profile()
    collaborator = await make_profile()
    product = await make_product(creator, price="100.00", splits=[(creator.id, "70"), (collaborator.id, "30")])
    for _ in range(2):
        await sales_service.purchase(db, await make_profile(), product.id)

    earnings = await sales_service.list_earnings(db, collaborator.id)

    assert len(earnings["items"]) == 2
    assert earnings["total"] == Decimal("54.00")


async def test_download_requires_entitlement(db, make_profile, make_product):
    creator = await make_profile()
    buyer = await make_profile()
    product = await make_product(creator)

    with pytest.raises(PurchaseRequired):
        await sales_service.get_download_url(db, buyer, product.id)

    await sales_service.purchase(db, buyer, product.id)
    assert await sales_service.get_download_url(db, buyer, product.id) == "https://files.snapstudio.io/neon.zip"
    assert await sales_service.get_download_url(db, creator, product.id) == product.file_url
