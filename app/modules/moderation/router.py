from typing import Any, List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.catalog import schemas as catalog_schemas
from app.modules.catalog.models import ProductStatus
from app.modules.moderation import service
from app.modules.profiles.models import Profile

router = APIRouter()

@router.get("/products", response_model=List[catalog_schemas.ProductRead])
async def list_products(
    status: ProductStatus = ProductStatus.PENDING,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_products_by_status(db, status)

@router.post("/products/{product_id}/approve", response_model=catalog_schemas.ProductRead)
async def approve_product(
    product_id: UUID,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.approve_product(db, current_user, product_id)

@router.post("/products/{product_id}/reject", response_model=catalog_schemas.ProductRead)
async def reject_product(
    product_id: UUID,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.reject_product(db, current_user, product_id)
