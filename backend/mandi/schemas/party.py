"""
Pydantic schemas for Kisan and Vyapari entities.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from mandi.models.party import PartyType


def _check_phone(v: Optional[str]) -> Optional[str]:
    """Blank means not given. Otherwise digits with an optional leading +, at most 15 long."""
    if v is None:
        return None
    v = v.strip().replace(" ", "")
    if not v:
        return None
    if not v.lstrip("+").isdigit() or len(v) > 15:
        raise ValueError("must be a phone number of at most 15 digits")
    return v


class KisanBase(BaseModel):
    """Base kisan schema."""
    name: str
    address: Optional[str] = None
    pincode: Optional[str] = None
    village: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    aadhaar_number: Optional[str] = None
    is_anonymous: bool = False
    notes: Optional[str] = None

    @field_validator("contact_number", "whatsapp_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class KisanCreate(KisanBase):
    """Schema for kisan registration."""
    pass


class KisanUpdate(BaseModel):
    """Sparse update: fields left out are not changed. The balance is not editable."""
    name: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    village: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    aadhaar_number: Optional[str] = None
    is_anonymous: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("contact_number", "whatsapp_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class KisanBatchUpdate(BaseModel):
    """Fields that may be applied to many kisans at once."""
    ids: List[int]
    contact_number: Optional[str] = None
    village: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("contact_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class KisanResponse(KisanBase):
    """Schema for kisan response."""
    id: int
    bakaya: Decimal
    crops_sold: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VyapariBase(BaseModel):
    """Base vyapari schema."""
    name: str
    address: Optional[str] = None
    pincode: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    gst_number: Optional[str] = None
    is_anonymous: bool = False
    notes: Optional[str] = None

    @field_validator("contact_number", "whatsapp_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class VyapariCreate(VyapariBase):
    """Schema for vyapari registration."""
    pass


class VyapariUpdate(BaseModel):
    """Sparse update: fields left out are not changed. The balance is not editable."""
    name: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    gst_number: Optional[str] = None
    is_anonymous: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("contact_number", "whatsapp_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class VyapariBatchUpdate(BaseModel):
    """Fields that may be applied to many vyaparis at once."""
    ids: List[int]
    contact_number: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    gst_number: Optional[str] = None

    @field_validator("contact_number")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class VyapariResponse(VyapariBase):
    """Schema for vyapari response."""
    id: int
    bakaya: Decimal
    crops_bought: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BatchUpdateResult(BaseModel):
    """Schema for batch update response."""
    updated_count: int


class BalanceDrift(BaseModel):
    """A party whose cached balance disagreed with its history."""
    entity_type: PartyType
    entity_id: int
    name: str
    cached_bakaya: Decimal
    derived_bakaya: Decimal


class RecalculateBalancesResponse(BaseModel):
    """Schema for balance recalculation response."""
    parties_checked: int
    drifted: List[BalanceDrift]
