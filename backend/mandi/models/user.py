"""
User model for authentication and role-based access.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
from mandi.db.base import BaseModel
import enum


class UserRole(str, enum.Enum):
    """Role enumeration, ordered from most to least privileged."""
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    OPERATOR = "operator"
    VIEWER = "viewer"


class User(BaseModel):
    """Mandi office user with immutable username."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.OPERATOR, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
