from typing import Any, List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core import deps
from app.modules.admin import schemas, service
from app.modules.profiles import schemas as profile_schemas
from app.modules.profiles import service as profile_service
from app.modules.profiles.models import Profile

router = APIRouter()

@router.get("/stats", response_model=schemas.AdminStats)
async def get_admin_stats(
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Platform-wide statistics for the admin dashboard.
    """
    return await service.get_stats(db)

@router.get("/users", response_model=List[profile_schemas.ProfileRead])
async def get_all_users(
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await profile_service.list_profiles(db)

@router.put("/users/{user_id}/role", response_model=profile_schemas.ProfileRead)
async def update_user_role(
    user_id: UUID,
    role_in: schemas.UserRoleUpdate,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.update_user_role(db, user_id, role_in.role, current_user.id)

@router.get("/audit-logs", response_model=List[schemas.AuditLogRead])
async def get_audit_logs(
    limit: int = 50,
    current_user: Profile = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_audit_logs(db, limit)
