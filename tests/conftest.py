import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import uuid
from decimal import Decimal
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.db import Base, get_db
from app.core.security import create_access_token
from app.main import app
from app.modules.catalog.models import Product, ProductStatus, Split
from app.modules.profiles.models import Profile, UserRole


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    async def _make(role: UserRole = UserRole.USER, email: Optional[str] = None) -> Profile:
        profile = Profile(
            id=uuid.uuid4(),
            email=email or f"{uuid.uuid4().hex[:10]}@snapstudio.io",
            role=role,
            balance=0,
        )
        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_product(db):
    async def _make(
        creator: Profile,
        price: str = "299.00",
        status: ProductStatus = ProductStatus.APPROVED,
        splits: Optional[List[Tuple[uuid.UUID, str]]] = None,
    ) -> Product:
        product = Product(
            creator_id=creator.id,
            title="Neon Skyline Pack",
            slug=f"neon-skyline-pack-{uuid.uuid4().hex[:8]}",
            price=Decimal(price),
            file_url="https://files.snapstudio.io/neon.zip",
            status=status,
        )
        db.add(product)
        await db.flush()
        for recipient_id, percentage in splits or []:
            db.add(Split(product_id=product.id, recipient_id=recipient_id, percentage=Decimal(percentage)))
        await db.commit()
        await db.refresh(product)
        return product

    return _make


@pytest.fixture
def auth_headers():
    def _headers(profile_id: uuid.UUID, email: Optional[str] = None) -> dict:
        return {"Authorization": f"Bearer {create_access_token(profile_id, email=email)}"}

    return _headers
