"""
Pydantic schemas for Payment entity.
"""
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from mandi.models.party import PartyType
from mandi.models.payment import PaymentType


class PaymentCreate(BaseModel):
    """Schema for recording a payment."""
    entity_type: PartyType
    entity_id: int
    amount: Decimal
    payment_type: PaymentType = PaymentType.CASH
    payment_date: date
    transaction_id: Optional[int] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("amount must be positive")
        return v


class PaymentResponse(BaseModel):
    """Schema for payment response."""
    id: int
    entity_type: PartyType
    entity_id: int
    amount: Decimal
    payment_type: PaymentType
    payment_date: date
    transaction_id: Optional[int] = None
    recorded_by_id: Optional[int] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
