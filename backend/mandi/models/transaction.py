"""
Transaction model for a sale from a Kisan to a Vyapari.
"""
from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from mandi.db.base import BaseModel
import enum


class TransactionStatus(str, enum.Enum):
    """Transaction status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    SALE_TO_VYAPARI = "sale_to_vyapari"
    PURCHASE_FROM_KISAN = "purchase_from_kisan"
    RETURN_VYAPARI = "return_vyapari"
    RETURN_KISAN = "return_kisan"


class Transaction(BaseModel):
    """A sale with its commission split, computed once when recorded."""
    __tablename__ = "transactions"

    kisan_id = Column(Integer, ForeignKey("kisans.id"), nullable=False, index=True)
    vyapari_id = Column(Integer, ForeignKey("vyaparis.id"), nullable=False, index=True)
    kisan_name = Column(String(200), nullable=False)
    vyapari_name = Column(String(200), nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    recorded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    sub_total = Column(Numeric(15, 2), nullable=False)
    total_weight_kg = Column(Numeric(15, 3), nullable=False)

    commission_kisan_rate = Column(Numeric(6, 4), nullable=False)  # Fraction, 0.02 = 2%
    commission_kisan_amount = Column(Numeric(15, 2), nullable=False)
    commission_vyapari_rate_per_kg = Column(Numeric(10, 2), nullable=False)
    commission_vyapari_amount = Column(Numeric(15, 2), nullable=False)
    total_commission = Column(Numeric(15, 2), nullable=False)

    net_amount_kisan = Column(Numeric(15, 2), nullable=False)  # Mandi owes Kisan
    net_amount_vyapari = Column(Numeric(15, 2), nullable=False)  # Vyapari owes mandi
    amount_paid_kisan = Column(Numeric(15, 2), nullable=False, default=0)  # Cash paid at sale time
    amount_paid_vyapari = Column(Numeric(15, 2), nullable=False, default=0)  # Cash collected at sale time

    status = Column(SQLEnum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False)
    transaction_type = Column(SQLEnum(TransactionType), default=TransactionType.SALE_TO_VYAPARI, nullable=False)
    notes = Column(Text, nullable=True)
    mandi_region = Column(String(100), nullable=True)

    # Relationships
    kisan = relationship("Kisan")
    vyapari = relationship("Vyapari")
    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.id"
    )


class TransactionItem(BaseModel):
    """One product line of a transaction."""
    __tablename__ = "transaction_items"

    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    product_name = Column(String(100), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)  # kg
    unit_price = Column(Numeric(12, 2), nullable=False)  # per kg
    total_price = Column(Numeric(15, 2), nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="items")
