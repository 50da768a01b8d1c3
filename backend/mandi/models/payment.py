"""
Payment model for cash movements between the mandi and a party.
"""
from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Integer, Text, Enum as SQLEnum
from mandi.db.base import BaseModel
from mandi.models.party import PartyType
import enum


class PaymentType(str, enum.Enum):
    """How the money moved."""
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    ADJUSTMENT = "adjustment"
    UPI = "upi"
    CARD_SWIPE = "card_swipe"


class Payment(BaseModel):
    """Payment made to a Kisan or collected from a Vyapari. Always reduces the party's bakaya."""
    __tablename__ = "payments"

    entity_type = Column(SQLEnum(PartyType), nullable=False, index=True)
    entity_id = Column(Integer, nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    payment_type = Column(SQLEnum(PaymentType), default=PaymentType.CASH, nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    recorded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reference_id = Column(String(100), nullable=True)  # Cheque no., UPI txn id, bank UTR
    notes = Column(Text, nullable=True)
