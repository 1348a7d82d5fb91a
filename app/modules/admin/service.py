import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.core.errors import NotFound
from app.modules.profiles import models as profile_models
from app.modules.catalog import models as catalog_models
from app.modules.cms import models as cms_models
from app.modules.sales import service as sales_service
from app.modules.admin.models import AuditLog
from uuid import UUID
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

def record_audit_log(
    db: AsyncSession,
    action: str,
    user_id: Optional[UUID] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Adds the log to the session without committing.
    It becomes part of the caller's unit of work: the action and its log land together.
    """
    log = AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id else None,
        metadata_json=metadata
    )
    db.add(log)
    return log

async def get_stats(db: AsyncSession) -> dict:
    # Users
    users_res = await db.execute(
        select(profile_models.Profile.role, func.count(profile_models.Profile.id)).group_by(profile_models.Profile.role)
    )
    user_counts = {row[0]: row[1] for row in users_res.all()}

    # Products
    products_res = await db.execute(
        select(catalog_models.Product.status, func.count(catalog_models.Product.id)).group_by(catalog_models.Product.status)
    )
    product_counts = {row[0]: row[1] for row in products_res.all()}

    # Sales
    total_transactions, revenue, platform_fees = await sales_service.count_completed(db)

    # Blog
    posts_res = await db.execute(
        select(func.count(cms_models.Post.id)).where(cms_models.Post.is_published == True)
    )

    return {
        "total_users": sum(user_counts.values()),
        "total_creators": user_counts.get(profile_models.UserRole.CREATOR, 0),
        "total_products": product_counts.get(catalog_models.ProductStatus.APPROVED, 0),
        "pending_products": product_counts.get(catalog_models.ProductStatus.PENDING, 0),
        "total_transactions": total_transactions,
        "total_revenue": revenue,
        "total_platform_fees": platform_fees,
        "total_posts": posts_res.scalar() or 0
    }

async def update_user_role(
    db: AsyncSession,
    user_id: UUID,
    role: profile_models.UserRole,
    current_admin_id: UUID
) -> profile_models.Profile:
    user = await db.get(profile_models.Profile, user_id)
    if not user:
        raise NotFound("User not found")

    old_role = user.role
    user.role = role
    record_audit_log(
        db,
        action="admin.user.role",
        user_id=current_admin_id,
        target_type="profile",
        target_id=str(user.id),
        metadata={"old_role": old_role.value, "new_role": role.value}
    )
    await db.commit()
    await db.refresh(user)
    logger.info(f"[Admin] {user_id} role {old_role.value} -> {role.value}")
    return user

async def get_audit_logs(db: AsyncSession, limit: int = 50):
    result = await db.execute(
        select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
    )
    return result.scalars().all()
