from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.sql import func
import uuid

from app.core.db import Base

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=True) # Nullable for system actions

    action = Column(String, nullable=False) # e.g. "product.approve", "product.delete", "admin.user.role"
    target_type = Column(String, nullable=True) # e.g. "product", "profile", "post"
    target_id = Column(String, nullable=True) # UUID as string

    metadata_json = Column(JSON, nullable=True) # Extra details
    created_at = Column(DateTime(timezone=True), server_default=func.now())
