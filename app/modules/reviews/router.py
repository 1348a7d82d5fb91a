from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.profiles.models import Profile
from app.modules.reviews import aggregation, schemas, service

router = APIRouter()

@router.get("/products/{product_id}", response_model=List[schemas.ReviewRead])
async def list_reviews(
    product_id: UUID,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_product_reviews(db, product_id)

@router.post("/products/{product_id}", response_model=schemas.ReviewRead, status_code=status.HTTP_201_CREATED)
async def submit_review(
    product_id: UUID,
    review_in: schemas.ReviewCreate,
    current_user: Optional[Profile] = Depends(deps.get_current_user_optional),
    db: AsyncSession = Depends(get_db)
) -> Any:
    review = await service.submit_review(db, current_user, product_id, review_in.rating, review_in.comment)
    await aggregation.refresh_product_rating(db, product_id)
    return review
