"""
Party service: Kisan and Vyapari registration, edits and balance reconciliation.
"""
import logging
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from mandi.core.errors import LedgerValidationError, NotFoundError
from mandi.core.utils import reject_nulls
from mandi.db.session import commit
from mandi.models.party import PartyType, PARTY_MODELS
from mandi.models.payment import Payment
from mandi.models.transaction import Transaction
from mandi.services.ledger_service import derive_balance

logger = logging.getLogger(__name__)


def _label(entity_type: PartyType) -> str:
    return "Kisan" if PartyType(entity_type) == PartyType.KISAN else "Vyapari"


def _transaction_column(entity_type: PartyType):
    if PartyType(entity_type) == PartyType.KISAN:
        return Transaction.kisan_id
    return Transaction.vyapari_id


def get_party(db: Session, entity_type: PartyType, entity_id: int, for_update: bool = False):
    """Fetch a Kisan or Vyapari by id, raising NotFoundError when absent."""
    model = PARTY_MODELS[PartyType(entity_type)]
    query = db.query(model).filter(model.id == entity_id)
    if for_update:
        query = query.with_for_update()
    party = query.first()
    if not party:
        raise NotFoundError(f"{_label(entity_type)} with ID {entity_id} not found")
    return party


def list_parties(db: Session, entity_type: PartyType, search: Optional[str] = None) -> list:
    """List parties ordered by name, optionally filtered by name or contact number."""
    model = PARTY_MODELS[PartyType(entity_type)]
    query = db.query(model)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(model.name.ilike(pattern), model.contact_number.ilike(pattern)))
    return query.order_by(model.name, model.id).all()


def create_party(db: Session, entity_type: PartyType, data: dict, registered_by_id: int = None):
    """Register a new party with a zero balance."""
    model = PARTY_MODELS[PartyType(entity_type)]
    party = model(**data, bakaya=0, registered_by_id=registered_by_id)
    db.add(party)
    commit(db)
    db.refresh(party)
    logger.info(f"Registered {_label(entity_type)} {party.id} ({party.name})")
    return party


def update_party(db: Session, entity_type: PartyType, entity_id: int, updates: dict):
    """Apply a sparse update. Only keys present in ``updates`` change."""
    reject_nulls(updates, ("name", "is_anonymous"))
    party = get_party(db, entity_type, entity_id)
    if "name" in updates and not (updates["name"] or "").strip():
        raise LedgerValidationError("Name cannot be empty")
    for field, value in updates.items():
        setattr(party, field, value)
    commit(db)
    db.refresh(party)
    return party


def delete_party(db: Session, entity_type: PartyType, entity_id: int) -> None:
    """Delete a party that no transaction or payment refers to."""
    party = get_party(db, entity_type, entity_id)

    referenced = db.query(Transaction.id).filter(_transaction_column(entity_type) == entity_id).first()
    paid = db.query(Payment.id).filter(
        Payment.entity_type == PartyType(entity_type),
        Payment.entity_id == entity_id
    ).first()
    if referenced or paid:
        raise LedgerValidationError(
            f"{_label(entity_type)} {entity_id} has recorded transactions or payments and cannot be deleted"
        )

    db.delete(party)
    commit(db)
    logger.info(f"Deleted {_label(entity_type)} {entity_id}")


def batch_update_parties(db: Session, entity_type: PartyType, ids: List[int], updates: dict) -> int:
    """Apply the same sparse update to several parties in one commit."""
    if not ids:
        raise LedgerValidationError("No IDs provided for batch update")
    if not updates:
        raise LedgerValidationError("No changes detected to apply")

    model = PARTY_MODELS[PartyType(entity_type)]
    parties = db.query(model).filter(model.id.in_(ids)).all()
    found = {p.id for p in parties}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFoundError(f"{_label(entity_type)} IDs not found: {missing}")

    for party in parties:
        for field, value in updates.items():
            setattr(party, field, value)
    commit(db)
    logger.info(f"Batch updated {len(parties)} {_label(entity_type)} records: {sorted(updates)}")
    return len(parties)


def recalculate_balances(db: Session) -> dict:
    """
    Rebuild every cached bakaya from transaction and payment history.

    Returns the number of parties checked and those whose cached value drifted.
    """
    transactions = db.query(Transaction).all()
    payments = db.query(Payment).all()

    drifted = []
    checked = 0
    for entity_type, model in PARTY_MODELS.items():
        for party in db.query(model).with_for_update().all():
            checked += 1
            derived = derive_balance(entity_type, party.id, transactions, payments)
            if derived != party.bakaya:
                drifted.append({
                    "entity_type": entity_type,
                    "entity_id": party.id,
                    "name": party.name,
                    "cached_bakaya": party.bakaya,
                    "derived_bakaya": derived,
                })
                party.bakaya = derived

    commit(db)
    if drifted:
        logger.warning(f"Corrected {len(drifted)} drifted balances out of {checked}")
    else:
        logger.info(f"All {checked} cached balances match history")
    return {"parties_checked": checked, "drifted": drifted}
