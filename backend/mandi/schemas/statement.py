"""
Pydantic schemas for bill statements and the daily mandi summary.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date
from decimal import Decimal
from mandi.models.party import PartyType
from mandi.schemas.transaction import TransactionResponse
from mandi.schemas.payment import PaymentResponse


class BillStatementSummary(BaseModel):
    """Totals over the transactions inside the statement period."""
    total_weight: Decimal
    total_commission: Decimal
    total_amount_to_kisan_gross: Optional[Decimal] = None  # Kisan statements only
    total_cash_paid_to_kisan: Optional[Decimal] = None  # Kisan statements only
    total_amount_from_vyapari_gross: Optional[Decimal] = None  # Vyapari statements only
    total_cash_collected_from_vyapari: Optional[Decimal] = None  # Vyapari statements only
    total_payments: Decimal
    net_amount_change_in_period: Decimal


class BillStatementResponse(BaseModel):
    """Schema for a computed bill statement. Not persisted."""
    entity_type: PartyType
    entity_id: int
    entity_name: str
    entity_contact: Optional[str] = None
    entity_address: Optional[str] = None
    entity_gst: Optional[str] = None
    statement_date: date
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    opening_balance: Decimal
    closing_balance: Decimal
    current_bakaya: Decimal  # Cached balance of the party, read as stored
    transactions: List[TransactionResponse]
    payments: List[PaymentResponse]
    summary: BillStatementSummary


class DailyMandiSummaryResponse(BaseModel):
    """Schema for the daily mandi summary."""
    summary_date: date
    total_transactions_count: int
    total_weight_processed: Decimal
    daily_collection_from_vyaparis: Decimal
    daily_payments_to_kisans: Decimal
    total_mandi_owes_to_kisans: Decimal
    total_vyaparis_owe_to_mandi: Decimal
    net_mandi_balance: Decimal
