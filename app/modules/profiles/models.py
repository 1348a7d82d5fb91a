import enum
from sqlalchemy import Column, String, DateTime, func, Enum, Numeric, Uuid
from app.core.db import Base

class UserRole(str, enum.Enum):
    USER = "user"
    CREATOR = "creator"
    ADMIN = "admin"

class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider's user; no default on purpose
    id = Column(Uuid(as_uuid=True), primary_key=True)
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String, unique=True, nullable=True)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    bio = Column(String, nullable=True)

    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    balance = Column(Numeric(12, 2), default=0, nullable=False) # Display only

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
