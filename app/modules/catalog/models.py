import uuid
import enum
from sqlalchemy import (
    Column, String, Boolean, Integer, DateTime, func, Enum, ForeignKey, Text, Numeric, JSON, Uuid,
    UniqueConstraint
)
from sqlalchemy.orm import relationship
from app.core.db import Base

class ProductStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved" # Only status visible to buyers
    REJECTED = "rejected"

class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    category = Column(String, nullable=True, index=True)

    # Opaque object-storage URLs, stored verbatim
    cover_image = Column(String, nullable=True)
    preview_images = Column(JSON, default=list, nullable=False)
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=True)

    status = Column(Enum(ProductStatus), default=ProductStatus.PENDING, nullable=False, index=True)
    is_featured = Column(Boolean, default=False, nullable=False)

    view_count = Column(Integer, default=0, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)

    # Denormalized, maintained by reviews.aggregation
    avg_rating = Column(Numeric(3, 2), default=0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    weighted_score = Column(Numeric(6, 4), default=0, nullable=False)

    published_at = Column(DateTime(timezone=True), nullable=True) # Set once, on first approval
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    splits = relationship("Split", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)

class Split(Base):
    __tablename__ = "splits"
    __table_args__ = (
        UniqueConstraint("product_id", "recipient_id", name="uq_splits_product_recipient"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    percentage = Column(Numeric(5, 2), nullable=False)
    role_description = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="splits")
