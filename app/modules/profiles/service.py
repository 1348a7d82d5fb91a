import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidInput, StorageFailure
from app.modules.profiles import models, schemas

logger = logging.getLogger(__name__)

async def get_profile(db: AsyncSession, profile_id: UUID) -> Optional[models.Profile]:
    return await db.get(models.Profile, profile_id)

async def get_profile_by_email(db: AsyncSession, email: str) -> Optional[models.Profile]:
    result = await db.execute(select(models.Profile).where(models.Profile.email == email))
    return result.scalars().first()

async def _insert_profile(db: AsyncSession, profile_id: UUID, email: Optional[str]) -> models.Profile:
    profile = models.Profile(
        id=profile_id,
        email=email,
        role=models.UserRole.USER,
        balance=0
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile

async def get_or_create_profile(db: AsyncSession, profile_id: UUID, email: Optional[str] = None) -> models.Profile:
    """Profiles are provisioned lazily the first time the provider's user shows up."""
    profile = await get_profile(db, profile_id)
    if profile:
        return profile

    try:
        profile = await _insert_profile(db, profile_id, email)
    except IntegrityError as e:
        await db.rollback()
        # A concurrent first request already provisioned this id
        profile = await db.get(models.Profile, profile_id)
        if profile is not None:
            return profile
        if email is None:
            logger.exception(f"[Profiles] Integrity failure provisioning {profile_id}")
            raise StorageFailure("Failed to provision profile") from e

        # Email already belongs to another profile: provision without it
        logger.warning(f"[Profiles] Email of {profile_id} is already in use, provisioning without it")
        try:
            profile = await _insert_profile(db, profile_id, None)
        except SQLAlchemyError as retry_error:
            await db.rollback()
            logger.exception(f"[Profiles] Failed provisioning {profile_id}")
            raise StorageFailure("Failed to provision profile") from retry_error
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Profiles] Failed provisioning {profile_id}")
        raise StorageFailure("Failed to provision profile") from e

    logger.info(f"[Profiles] Provisioned profile {profile_id}")
    return profile

def grant_creator_role(profile: models.Profile) -> bool:
    """
    Explicit user -> creator transition. Creators and admins are left alone.
    Does not commit: callers run it inside their own unit of work.
    """
    if profile.role != models.UserRole.USER:
        return False
    profile.role = models.UserRole.CREATOR
    return True

async def update_profile(db: AsyncSession, profile: models.Profile, profile_in: schemas.ProfileUpdate) -> models.Profile:
    profile_id = profile.id
    update_data = profile_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # Empty strings clear the field
        if isinstance(value, str) and not value.strip():
            value = None
        elif value is not None and not isinstance(value, str):
            value = str(value)
        setattr(profile, field, value)

    db.add(profile)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise InvalidInput("Username is already taken") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"[Profiles] Failed updating {profile_id}")
        raise StorageFailure("Failed to update profile") from e
    await db.refresh(profile)
    return profile

async def list_profiles(db: AsyncSession):
    result = await db.execute(
        select(models.Profile).order_by(models.Profile.created_at.desc())
    )
    return result.scalars().all()
