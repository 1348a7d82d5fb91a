from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.profiles.models import Profile
from app.modules.sales import schemas, service

router = APIRouter()

@router.post("/products/{product_id}/purchase", response_model=schemas.PurchaseResponse, status_code=status.HTTP_201_CREATED)
async def purchase_product(
    product_id: UUID,
    current_user: Optional[Profile] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> Any:
    # Payment is simulated: the transaction completes immediately
    transaction = await service.purchase(db, current_user, product_id)
    payments = await service.list_split_payments(db, transaction.id)

    response = schemas.PurchaseResponse.model_validate(transaction)
    response.split_payments = [schemas.SplitPaymentRead.model_validate(p) for p in payments]
    return response

@router.get("/purchases/me", response_model=List[schemas.PurchaseRead])
async def list_my_purchases(
    current_user: Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_purchases(db, current_user.id)

@router.get("/earnings/me", response_model=schemas.EarningsResponse)
async def list_my_earnings(
    current_user: Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_earnings(db, current_user.id)

@router.get("/products/{product_id}/access", response_model=schemas.AccessResponse)
async def check_access(
    product_id: UUID,
    current_user: Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return {"access": await service.check_access(db, current_user, product_id)}

@router.get("/products/{product_id}/download", response_model=schemas.DownloadResponse)
async def download_product(
    product_id: UUID,
    current_user: Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return {"file_url": await service.get_download_url(db, current_user, product_id)}
