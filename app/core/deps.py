from typing import Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core import security
from app.core.errors import Forbidden, Unauthenticated
from app.modules.profiles.models import Profile, UserRole
from app.modules.profiles import service as profile_service

# Tokens are issued by the identity provider; tokenUrl is only informative for the docs UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)

async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[Profile]:
    if not token:
        return None

    payload = security.decode_access_token(token)
    if payload is None:
        return None

    sub = payload.get("sub")
    if sub is None:
        return None
    try:
        user_id = UUID(sub)
    except ValueError:
        return None

    return await profile_service.get_or_create_profile(db, user_id, payload.get("email"))

async def get_current_user(
    current_user: Optional[Profile] = Depends(get_current_user_optional)
) -> Profile:
    if current_user is None:
        raise Unauthenticated("Could not validate credentials")
    return current_user

async def get_current_admin(
    current_user: Profile = Depends(get_current_user)
) -> Profile:
    if current_user.role != UserRole.ADMIN:
        raise Forbidden("Admin only")
    return current_user
