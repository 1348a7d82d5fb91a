from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.catalog import schemas, service
from app.modules.moderation import service as moderation_service
from app.modules.profiles.models import Profile

router = APIRouter()

@router.post("/", response_model=schemas.ProductDetail, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: schemas.ProductCreate,
    current_user: Optional[Profile] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Submit a product for review. It stays pending until an admin approves it.
    """
    return await service.create_product(db, current_user, product_in)

@router.get("/", response_model=schemas.ProductListResponse)
async def browse_products(
    category: Optional[str] = None,
    sort: schemas.ProductSort = schemas.ProductSort.LATEST,
    page: int = Query(1, ge=1),
    size: int = Query(24, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_public_products(db, category=category, sort=sort, page=page, size=size)

@router.get("/top-rated", response_model=List[schemas.ProductRead])
async def top_rated_products(
    limit: int = Query(8, ge=1, le=50),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_top_rated(db, limit)

@router.get("/latest", response_model=List[schemas.ProductRead])
async def latest_products(
    limit: int = Query(8, ge=1, le=50),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_latest(db, limit)

@router.get("/mine", response_model=List[schemas.ProductRead])
async def list_my_products(
    current_user: Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_creator_products(db, current_user.id)

@router.get("/{slug}", response_model=schemas.ProductDetail)
async def get_product(
    slug: str,
    current_user: Optional[Profile] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_product_by_slug(db, slug, current_user)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    current_user: Optional[Profile] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> None:
    """Owner or admin, whatever the moderation status."""
    await moderation_service.delete_product(db, current_user, product_id)
