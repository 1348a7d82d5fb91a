from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.core.errors import InvalidInput, NotFound, SplitOverAllocated, Unauthenticated, UnknownCollaborator
from app.modules.catalog import service
from app.modules.catalog.models import Product, ProductStatus, Split
from app.modules.catalog.schemas import ProductCreate, ProductSort, SplitEntry
from app.modules.profiles.models import UserRole


def product_in(price="100.00", splits=None, **kwargs):
    return ProductCreate(
        title=kwargs.pop("title", "Cyber Garden"),
        price=Decimal(price),
        file_url="https://files.snapstudio.io/garden.zip",
        splits=splits or [],
        **kwargs
    )


async def count(db, column):
    return (await db.execute(select(func.count(column)))).scalar()


def test_generate_slug_keeps_words_and_appends_base36_time():
    assert service.generate_slug("Hello, World!  Art", now_ms=0) == "hello-world-art-0"
    assert service.generate_slug("Night Owl", now_ms=36) == "night-owl-10"


def test_generate_slug_keeps_cjk_characters():
    assert service.generate_slug("赛博 城市", now_ms=35) == "赛博-城市-z"


async def test_create_product_is_pending_with_creator_split(db, make_profile):
    creator = await make_profile()

    product = await service.create_product(db, creator, product_in())

    assert product.status == ProductStatus.PENDING
    assert product.published_at is None
    assert [(s.recipient_id, s.percentage) for s in product.splits] == [(creator.id, Decimal("100"))]


async def test_create_product_stores_collaborator_splits(db, make_profile):
    creator = await make_profile()
    collaborator = await make_profile(email="painter@snapstudio.io")

    product = await service.create_product(
        db, creator,
        product_in(splits=[SplitEntry(collaborator_email="painter@snapstudio.io", percentage=Decimal("30"))])
    )

    shares = {s.recipient_id: s.percentage for s in product.splits}
    assert shares == {creator.id: Decimal("70"), collaborator.id: Decimal("30")}


async def test_create_product_grants_creator_role(db, make_profile):
    user = await make_profile()
    admin = await make_profile(role=UserRole.ADMIN)

    await service.create_product(db, user, product_in())
    await service.create_product(db, admin, product_in(title="Cyber Garden II"))

    assert user.role == UserRole.CREATOR
    assert admin.role == UserRole.ADMIN


async def test_over_allocated_splits_write_nothing(db, make_profile):
    creator = await make_profile()
    await make_profile(email="a@snapstudio.io")
    await make_profile(email="b@snapstudio.io")
    splits = [
        SplitEntry(collaborator_email="a@snapstudio.io", percentage=Decimal("60")),
        SplitEntry(collaborator_email="b@snapstudio.io", percentage=Decimal("41")),
    ]

    with pytest.raises(SplitOverAllocated):
        await service.create_product(db, creator, product_in(splits=splits))

    assert await count(db, Product.id) == 0
    assert await count(db, Split.id) == 0
    assert creator.role == UserRole.USER


async def test_unknown_collaborator_writes_nothing(db, make_profile):
    creator = await make_profile()

    with pytest.raises(UnknownCollaborator):
        await service.create_product(
            db, creator,
            product_in(splits=[SplitEntry(collaborator_email="ghost@snapstudio.io", percentage=Decimal("10"))])
        )

    assert await count(db, Product.id) == 0


async def test_create_product_requires_signed_in_creator(db):
    with pytest.raises(Unauthenticated):
        await service.create_product(db, None, product_in())


async def test_negative_price_is_rejected(db, make_profile):
    creator = await make_profile()
    with pytest.raises(InvalidInput):
        await service.create_product(db, creator, product_in(price="-1.00"))


async def test_unpublished_product_is_hidden_from_strangers(db, make_profile, make_product):
    creator = await make_profile()
    stranger = await make_profile()
    admin = await make_profile(role=UserRole.ADMIN)
    product = await make_product(creator, status=ProductStatus.PENDING)

    with pytest.raises(NotFound):
        await service.get_product_by_slug(db, product.slug)
    with pytest.raises(NotFound):
        await service.get_product_by_slug(db, product.slug, stranger)

    assert (await service.get_product_by_slug(db, product.slug, creator)).id == product.id
    assert (await service.get_product_by_slug(db, product.slug, admin)).id == product.id


async def test_browse_lists_only_approved_products(db, make_profile, make_product):
    creator = await make_profile()
    cheap = await make_product(creator, price="5.00")
    pricey = await make_product(creator, price="50.00")
    await make_product(creator, status=ProductStatus.PENDING)
    await make_product(creator, status=ProductStatus.REJECTED)

    page = await service.list_public_products(db, sort=ProductSort.PRICE_ASC)

    assert page["total"] == 2
    assert page["pages"] == 1
    assert [p.id for p in page["items"]] == [cheap.id, pricey.id]
