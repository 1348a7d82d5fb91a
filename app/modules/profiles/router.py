from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.profiles import models, schemas, service

router = APIRouter()

@router.get("/me", response_model=schemas.ProfileRead)
async def read_my_profile(
    current_user: models.Profile = Depends(deps.get_current_user),
) -> Any:
    return current_user

@router.put("/me", response_model=schemas.ProfileRead)
async def update_my_profile(
    profile_in: schemas.ProfileUpdate,
    current_user: models.Profile = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.update_profile(db, current_user, profile_in)
