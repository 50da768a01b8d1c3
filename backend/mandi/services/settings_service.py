"""
System settings service: the singleton row with default commission rates.
"""
import logging
from sqlalchemy.orm import Session
from mandi.core.config import settings
from mandi.core.errors import LedgerValidationError
from mandi.core.utils import reject_nulls, round_money, round_rate
from mandi.db.session import commit
from mandi.models.system_settings import SystemSettings
from mandi.services.ledger_service import validate_commission_rates

logger = logging.getLogger(__name__)

# Columns a patch may change but never clear
REQUIRED_FIELDS = ("commission_kisan_rate", "commission_vyapari_rate_per_kg", "mandi_name")


def get_system_settings(db: Session) -> SystemSettings:
    """Return the settings row, creating it from configured defaults on first use."""
    system_settings = db.query(SystemSettings).order_by(SystemSettings.id).first()
    if system_settings:
        return system_settings

    logger.info("No system settings found, creating defaults")
    system_settings = SystemSettings(
        commission_kisan_rate=settings.DEFAULT_COMMISSION_KISAN_RATE,
        commission_vyapari_rate_per_kg=settings.DEFAULT_COMMISSION_VYAPARI_RATE_PER_KG,
        mandi_name=settings.MANDI_NAME,
        mandi_region=settings.MANDI_REGION or None,
        last_bill_number=0
    )
    db.add(system_settings)
    commit(db)
    db.refresh(system_settings)
    return system_settings


def update_system_settings(db: Session, updates: dict, updated_by_id: int = None) -> SystemSettings:
    """Apply a sparse update to the settings row."""
    reject_nulls(updates, REQUIRED_FIELDS)
    if "mandi_name" in updates and not updates["mandi_name"].strip():
        raise LedgerValidationError("Mandi name cannot be empty")
    updates = dict(updates)
    if "commission_kisan_rate" in updates:
        updates["commission_kisan_rate"] = round_rate(updates["commission_kisan_rate"])
    if "commission_vyapari_rate_per_kg" in updates:
        updates["commission_vyapari_rate_per_kg"] = round_money(updates["commission_vyapari_rate_per_kg"])

    system_settings = get_system_settings(db)
    validate_commission_rates(
        updates.get("commission_kisan_rate", system_settings.commission_kisan_rate),
        updates.get("commission_vyapari_rate_per_kg", system_settings.commission_vyapari_rate_per_kg)
    )

    for field, value in updates.items():
        setattr(system_settings, field, value)
    system_settings.updated_by_id = updated_by_id

    commit(db)
    db.refresh(system_settings)
    logger.info(f"System settings updated by user {updated_by_id}: {sorted(updates)}")
    return system_settings


def next_bill_number(db: Session) -> int:
    """Increment and return the sequential bill number."""
    system_settings = db.query(SystemSettings).order_by(SystemSettings.id).with_for_update().first()
    if system_settings is None:
        system_settings = get_system_settings(db)
    system_settings.last_bill_number = (system_settings.last_bill_number or 0) + 1
    commit(db)
    return system_settings.last_bill_number
