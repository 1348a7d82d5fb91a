from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any
from app.modules.profiles.models import UserRole

class AdminStats(BaseModel):
    total_users: int
    total_creators: int
    total_products: int
    pending_products: int
    total_transactions: int
    total_revenue: Decimal
    total_platform_fees: Decimal
    total_posts: int

class AuditLogRead(BaseModel):
    id: UUID
    user_id: Optional[UUID]
    action: str
    target_type: Optional[str]
    target_id: Optional[str]
    created_at: Optional[datetime]
    metadata_json: Optional[Dict[str, Any]]

    class Config:
        from_attributes = True

class UserRoleUpdate(BaseModel):
    role: UserRole
