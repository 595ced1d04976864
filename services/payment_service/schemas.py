from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, field_validator

from .models import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    order_id: str
    amount: float
    payment_method: PaymentMethod = PaymentMethod.UNSPECIFIED
    reference_number: str = ""
    provider: str = ""


class PaymentRead(BaseModel):
    id: str
    merchant_id: str
    order_id: str
    amount: float
    payment_method: PaymentMethod
    status: PaymentStatus
    reference_number: str
    provider: str
    created_at: datetime
    updated_at: datetime

    # Nullable columns surface as "" (absent and empty are the same thing here)
    @field_validator("reference_number", "provider", mode="before")
    @classmethod
    def null_to_empty(cls, v: Any) -> str:
        return "" if v is None else v

    class Config:
        from_attributes = True


class PaymentFilter(BaseModel):
    order_id: str = ""
    payment_method: PaymentMethod = PaymentMethod.UNSPECIFIED
    status: PaymentStatus = PaymentStatus.UNSPECIFIED


class PaymentList(BaseModel):
    payments: List[PaymentRead]
    total: int
    page: int
    page_size: int
