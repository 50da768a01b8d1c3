"""
Pydantic schemas for the system settings singleton.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal


class SystemSettingsUpdate(BaseModel):
    """Schema for settings update. The Kisan rate is a fraction: 0.02 means 2%."""
    commission_kisan_rate: Optional[Decimal] = None
    commission_vyapari_rate_per_kg: Optional[Decimal] = None
    mandi_name: Optional[str] = None
    mandi_region: Optional[str] = None
    mandi_address: Optional[str] = None
    mandi_contact: Optional[str] = None


class SystemSettingsResponse(BaseModel):
    """Schema for settings response."""
    commission_kisan_rate: Decimal
    commission_vyapari_rate_per_kg: Decimal
    mandi_name: str
    mandi_region: Optional[str] = None
    mandi_address: Optional[str] = None
    mandi_contact: Optional[str] = None
    last_bill_number: int
    updated_by_id: Optional[int] = None
    updated_at: datetime

    class Config:
        from_attributes = True
