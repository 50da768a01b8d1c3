"""Models package - Import all models for SQLAlchemy registration."""
from mandi.models.user import User, UserRole
from mandi.models.party import Kisan, Vyapari, PartyType, PARTY_MODELS
from mandi.models.product import Product
from mandi.models.transaction import Transaction, TransactionItem, TransactionStatus, TransactionType
from mandi.models.payment import Payment, PaymentType
from mandi.models.system_settings import SystemSettings

__all__ = [
    "User",
    "UserRole",
    "Kisan",
    "Vyapari",
    "PartyType",
    "PARTY_MODELS",
    "Product",
    "Transaction",
    "TransactionItem",
    "TransactionStatus",
    "TransactionType",
    "Payment",
    "PaymentType",
    "SystemSettings",
]
