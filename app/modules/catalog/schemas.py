import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, AnyHttpUrl, EmailStr, Field
from app.modules.catalog.models import ProductStatus

class ProductSort(str, enum.Enum):
    LATEST = "latest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING = "rating"

class SplitEntry(BaseModel):
    collaborator_email: EmailStr
    percentage: Decimal = Field(gt=0, decimal_places=2)

class SplitRead(BaseModel):
    id: UUID
    recipient_id: UUID
    percentage: Decimal
    role_description: Optional[str] = None

    class Config:
        from_attributes = True

class ProductCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(max_digits=12, decimal_places=2)
    category: Optional[str] = None
    cover_image: Optional[AnyHttpUrl] = None
    preview_images: List[AnyHttpUrl] = []
    file_url: AnyHttpUrl
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    splits: List[SplitEntry] = []

class ProductRead(BaseModel):
    id: UUID
    creator_id: UUID
    title: str
    slug: str
    description: Optional[str]
    price: Decimal
    category: Optional[str] = None
    cover_image: Optional[str] = None
    preview_images: List[str] = []
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    status: ProductStatus
    is_featured: bool
    view_count: int
    download_count: int
    avg_rating: Decimal
    rating_count: int
    weighted_score: Decimal
    published_at: Optional[datetime]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProductDetail(ProductRead):
    splits: List[SplitRead] = []

class ProductListResponse(BaseModel):
    items: List[ProductRead]
    total: int
    page: int
    size: int
    pages: int
