"""
Pydantic schemas for Transaction entity.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from mandi.models.transaction import TransactionStatus, TransactionType


class TransactionItemCreate(BaseModel):
    """One product line as entered. Validated by the ledger, not here."""
    product_id: Optional[int] = None
    quantity: Decimal
    unit_price: Decimal


class TransactionCreate(BaseModel):
    """Schema for recording a transaction."""
    kisan_id: int
    vyapari_id: int
    transaction_date: date
    items: List[TransactionItemCreate]
    # Rates default to the system settings; the Kisan rate is a fraction (0.02 = 2%)
    commission_kisan_rate: Optional[Decimal] = None
    commission_vyapari_rate_per_kg: Optional[Decimal] = None
    amount_paid_kisan: Decimal = Decimal("0")
    amount_paid_vyapari: Decimal = Decimal("0")
    transaction_type: TransactionType = TransactionType.SALE_TO_VYAPARI
    notes: Optional[str] = None


class TransactionPreviewRequest(BaseModel):
    """Schema for computing a commission split without saving."""
    items: List[TransactionItemCreate]
    commission_kisan_rate: Optional[Decimal] = None
    commission_vyapari_rate_per_kg: Optional[Decimal] = None


class TransactionPreview(BaseModel):
    """Rounded commission split, as it would be stored."""
    sub_total: Decimal
    total_weight_kg: Decimal
    commission_kisan_rate: Decimal
    commission_kisan_amount: Decimal
    commission_vyapari_rate_per_kg: Decimal
    commission_vyapari_amount: Decimal
    total_commission: Decimal
    net_amount_kisan: Decimal
    net_amount_vyapari: Decimal


class TransactionBatchUpdate(BaseModel):
    """
    Administrative fields applied to many transactions at once.
    None means "no change". Commission math is never recomputed.
    """
    ids: List[int]
    notes: Optional[str] = None
    status: Optional[TransactionStatus] = None
    transaction_type: Optional[TransactionType] = None


class TransactionItemResponse(BaseModel):
    """Schema for transaction item response."""
    id: int
    product_id: int
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    """Schema for transaction response."""
    id: int
    kisan_id: int
    kisan_name: str
    vyapari_id: int
    vyapari_name: str
    transaction_date: date
    recorded_by_id: Optional[int] = None
    items: List[TransactionItemResponse] = []
    sub_total: Decimal
    total_weight_kg: Decimal
    commission_kisan_rate: Decimal
    commission_kisan_amount: Decimal
    commission_vyapari_rate_per_kg: Decimal
    commission_vyapari_amount: Decimal
    total_commission: Decimal
    net_amount_kisan: Decimal
    net_amount_vyapari: Decimal
    amount_paid_kisan: Decimal
    amount_paid_vyapari: Decimal
    status: TransactionStatus
    transaction_type: TransactionType
    notes: Optional[str] = None
    mandi_region: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
