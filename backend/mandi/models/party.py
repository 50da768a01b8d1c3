"""
Party models: Kisans (farmers) selling produce and Vyaparis (traders) buying it.
"""
from sqlalchemy import Column, String, Numeric, Boolean, Text, ForeignKey, Integer, JSON
from mandi.db.base import BaseModel
import enum


class PartyType(str, enum.Enum):
    """Which side of a sale a party is on."""
    KISAN = "kisan"
    VYAPARI = "vyapari"


class Kisan(BaseModel):
    """Farmer selling produce through the mandi.

    ``bakaya`` is the cached running balance; positive means the mandi owes the Kisan.
    """
    __tablename__ = "kisans"

    name = Column(String(200), nullable=False, index=True)
    address = Column(Text, nullable=True)
    pincode = Column(String(6), nullable=True)
    village = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    contact_number = Column(String(15), nullable=True)
    whatsapp_number = Column(String(15), nullable=True)
    aadhaar_number = Column(String(12), nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)  # "Nakadi Kisan"
    notes = Column(Text, nullable=True)
    crops_sold = Column(JSON, nullable=False, default=list)
    bakaya = Column(Numeric(15, 2), nullable=False, default=0)
    registered_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)


class Vyapari(BaseModel):
    """Trader buying produce through the mandi.

    ``bakaya`` is the cached running balance; positive means the Vyapari owes the mandi.
    """
    __tablename__ = "vyaparis"

    name = Column(String(200), nullable=False, index=True)
    address = Column(Text, nullable=True)
    pincode = Column(String(6), nullable=True)
    city = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    contact_number = Column(String(15), nullable=True)
    whatsapp_number = Column(String(15), nullable=True)
    gst_number = Column(String(15), nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    crops_bought = Column(JSON, nullable=False, default=list)
    bakaya = Column(Numeric(15, 2), nullable=False, default=0)
    registered_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)


PARTY_MODELS = {
    PartyType.KISAN: Kisan,
    PartyType.VYAPARI: Vyapari,
}
