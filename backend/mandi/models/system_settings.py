"""
System settings singleton holding the default commission rates.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Text
from mandi.db.base import BaseModel


class SystemSettings(BaseModel):
    """Mandi-wide defaults. Only one row exists."""
    __tablename__ = "system_settings"

    commission_kisan_rate = Column(Numeric(6, 4), nullable=False)  # Fraction, 0.02 = 2%
    commission_vyapari_rate_per_kg = Column(Numeric(10, 2), nullable=False)
    mandi_name = Column(String(200), nullable=False, default="Mandi")
    mandi_region = Column(String(100), nullable=True)
    mandi_address = Column(Text, nullable=True)
    mandi_contact = Column(String(15), nullable=True)
    last_bill_number = Column(Integer, nullable=False, default=0)
    updated_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
