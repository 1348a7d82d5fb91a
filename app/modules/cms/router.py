from typing import Any, List
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.cms import schemas, service
from app.modules.profiles.models import Profile

router = APIRouter()

# Public

@router.get("/posts", response_model=List[schemas.PostSummary])
async def list_published_posts(
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_published_posts(db, limit)

@router.get("/posts/{slug}", response_model=schemas.PostRead)
async def get_post(
    slug: str,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_published_post(db, slug)

@router.get("/homepage", response_model=schemas.HomepageSettingsRead)
async def get_homepage_settings(
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_homepage_settings(db)

# Admin

@router.get("/admin/posts", response_model=List[schemas.PostRead])
async def list_all_posts(
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_all_posts(db)

@router.post("/admin/posts", response_model=schemas.PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: schemas.PostCreate,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.create_post(db, current_user, post_in)

@router.put("/admin/posts/{post_id}", response_model=schemas.PostRead)
async def update_post(
    post_id: UUID,
    post_in: schemas.PostUpdate,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.update_post(db, post_id, post_in)

@router.patch("/admin/posts/{post_id}/status", response_model=schemas.PostRead)
async def set_post_status(
    post_id: UUID,
    status_in: schemas.PostStatusUpdate,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.set_post_published(db, post_id, status_in.is_published)

@router.delete("/admin/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: UUID,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> None:
    await service.delete_post(db, post_id)

@router.put("/admin/homepage", response_model=schemas.HomepageSettingsRead)
async def update_homepage_settings(
    settings_in: schemas.HomepageSettingsUpdate,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.update_homepage_settings(db, current_user, settings_in)
