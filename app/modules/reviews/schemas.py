from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

class ReviewCreate(BaseModel):
    # Range is enforced by the review gate so the failure carries its own kind
    rating: int
    comment: Optional[str] = None

class ReviewRead(BaseModel):
    id: UUID
    product_id: UUID
    user_id: UUID
    rating: int
    comment: Optional[str]
    is_verified_purchase: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
