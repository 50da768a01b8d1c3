"""
Pydantic schemas for Product entity.
"""
from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


def _check_price(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v <= 0:
        raise ValueError("default unit price must be positive if provided")
    return v


class ProductBase(BaseModel):
    """Base product schema."""
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    active: bool = True

    @field_validator("default_unit_price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class ProductCreate(ProductBase):
    """Schema for product creation. The unit is always kg."""
    pass


class ProductUpdate(BaseModel):
    """Schema for product update."""
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    active: Optional[bool] = None

    @field_validator("default_unit_price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class ProductBatchUpdate(BaseModel):
    """Fields that may be applied to many products at once."""
    ids: List[int]
    category: Optional[str] = None
    description: Optional[str] = None
    default_unit_price: Optional[Decimal] = None
    active: Optional[bool] = None

    @field_validator("default_unit_price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class ProductResponse(ProductBase):
    """Schema for product response."""
    id: int
    unit: str
    average_price: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    median_price: Optional[Decimal] = None
    mode_price: Optional[Decimal] = None
    last_unit_price_sold: Optional[Decimal] = None
    total_quantity_sold_kg: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
