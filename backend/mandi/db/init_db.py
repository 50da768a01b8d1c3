"""
Database initialization script.

Creates the tables, the system settings row and, when FIRST_SUPERUSER_PASSWORD
is set, the first superuser.
"""
import logging
from mandi.core.config import settings
from mandi.core.security import get_password_hash
from mandi.db.session import SessionLocal, commit, init_db

# Import all models so SQLAlchemy can register them
from mandi.models import (
    User, UserRole, Kisan, Vyapari, Product,
    Transaction, TransactionItem, Payment, SystemSettings
)
from mandi.services.settings_service import get_system_settings

logger = logging.getLogger(__name__)


def create_first_superuser(db) -> None:
    """Create the configured superuser unless a user with that name exists."""
    if not settings.FIRST_SUPERUSER_PASSWORD:
        logger.info("FIRST_SUPERUSER_PASSWORD not set, skipping superuser creation")
        return

    existing = db.query(User).filter(User.username == settings.FIRST_SUPERUSER_USERNAME).first()
    if existing:
        logger.info(f"User {existing.username} already exists")
        return

    db.add(User(
        username=settings.FIRST_SUPERUSER_USERNAME,
        email=settings.FIRST_SUPERUSER_EMAIL,
        hashed_password=get_password_hash(settings.FIRST_SUPERUSER_PASSWORD),
        role=UserRole.SUPERADMIN
    ))
    commit(db)
    logger.info(f"Created superuser {settings.FIRST_SUPERUSER_USERNAME}")


def initialize() -> None:
    init_db()
    db = SessionLocal()
    try:
        get_system_settings(db)
        create_first_superuser(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    print("Initializing database...")
    initialize()
    print("Database initialized successfully!")
