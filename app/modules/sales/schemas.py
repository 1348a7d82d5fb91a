from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel
from app.modules.sales.models import TransactionStatus

class SplitPaymentRead(BaseModel):
    id: UUID
    recipient_id: UUID
    amount: Decimal
    percentage: Decimal

    class Config:
        from_attributes = True

class TransactionRead(BaseModel):
    id: UUID
    buyer_id: UUID
    product_id: Optional[UUID]
    product_title: str
    amount: Decimal
    platform_fee: Decimal
    creator_amount: Decimal
    status: TransactionStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PurchaseResponse(TransactionRead):
    split_payments: List[SplitPaymentRead] = []

class PurchaseRead(BaseModel):
    id: UUID
    product_id: UUID
    transaction_id: UUID
    purchased_at: Optional[datetime]
    product_title: str
    product_slug: str
    cover_image: Optional[str] = None
    amount: Decimal

class EarningRead(BaseModel):
    id: UUID
    transaction_id: UUID
    product_id: Optional[UUID]
    product_title: str
    amount: Decimal
    percentage: Decimal
    created_at: Optional[datetime]

class EarningsResponse(BaseModel):
    items: List[EarningRead]
    total: Decimal

class AccessResponse(BaseModel):
    access: bool

class DownloadResponse(BaseModel):
    file_url: str
