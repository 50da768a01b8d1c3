"""
Product model for traded produce.
"""
from sqlalchemy import Column, String, Numeric, Boolean, Text
from mandi.db.base import BaseModel


class Product(BaseModel):
    """Produce traded at the mandi, always measured in kg."""
    __tablename__ = "products"

    name = Column(String(100), unique=True, nullable=False, index=True)
    unit = Column(String(10), nullable=False, default="kg")
    category = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    default_unit_price = Column(Numeric(12, 2), nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    # Price statistics, refreshed from transaction items
    average_price = Column(Numeric(12, 2), nullable=True)
    min_price = Column(Numeric(12, 2), nullable=True)
    max_price = Column(Numeric(12, 2), nullable=True)
    median_price = Column(Numeric(12, 2), nullable=True)
    mode_price = Column(Numeric(12, 2), nullable=True)
    last_unit_price_sold = Column(Numeric(12, 2), nullable=True)
    total_quantity_sold_kg = Column(Numeric(15, 3), nullable=True)
