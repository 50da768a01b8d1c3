"""
Rebuild every cached Kisan and Vyapari balance from transaction and payment history.
"""
import sys
import os
import logging

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from mandi.core.config import settings
from mandi.db.session import SessionLocal
from mandi.services.party_service import recalculate_balances


def recalculate():
    """Correct drifted balances and print what changed."""
    db = SessionLocal()
    try:
        result = recalculate_balances(db)
        for drift in result["drifted"]:
            print(
                f"{drift['entity_type'].value} {drift['entity_id']} ({drift['name']}): "
                f"{drift['cached_bakaya']} -> {drift['derived_bakaya']}"
            )
        print(f"Checked {result['parties_checked']} parties, corrected {len(result['drifted'])}")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    recalculate()
