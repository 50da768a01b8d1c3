"""
Payment service for cash movements between the mandi and its parties.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from mandi.core.errors import LedgerValidationError, NotFoundError
from mandi.core.utils import round_money, to_decimal
from mandi.db.session import commit
from mandi.models.party import PartyType
from mandi.models.payment import Payment
from mandi.models.transaction import Transaction
from mandi.services.ledger_service import payment_balance_effect
from mandi.services.party_service import get_party

logger = logging.getLogger(__name__)


def record_payment(db: Session, data, recorded_by_id: int = None) -> Payment:
    """
    Store a payment and reduce the party's bakaya in the same commit.

    For a Kisan this is money the mandi paid out; for a Vyapari it is money
    the mandi collected.
    """
    amount = round_money(data.amount)
    if amount <= 0:
        raise LedgerValidationError("Payment amount must be positive")

    entity_type = PartyType(data.entity_type)
    party = get_party(db, entity_type, data.entity_id, for_update=True)

    if data.transaction_id is not None:
        transaction = db.query(Transaction).filter(Transaction.id == data.transaction_id).first()
        if not transaction:
            raise NotFoundError(f"Transaction with ID {data.transaction_id} not found")
        linked_party_id = transaction.kisan_id if entity_type == PartyType.KISAN else transaction.vyapari_id
        if linked_party_id != party.id:
            raise LedgerValidationError(
                f"Transaction {transaction.id} does not involve this {entity_type.value}"
            )

    payment = Payment(
        entity_type=entity_type,
        entity_id=party.id,
        amount=amount,
        payment_type=data.payment_type,
        payment_date=data.payment_date,
        transaction_id=data.transaction_id,
        recorded_by_id=recorded_by_id,
        reference_id=data.reference_id,
        notes=data.notes
    )
    db.add(payment)
    party.bakaya = round_money(to_decimal(party.bakaya) + payment_balance_effect(payment))

    commit(db)
    db.refresh(payment)
    logger.info(f"Recorded payment {payment.id} of {amount} for {entity_type.value} {party.id}")
    return payment


def list_payments(
    db: Session,
    entity_type: Optional[PartyType] = None,
    entity_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[Payment]:
    """List payments oldest first. Date bounds are inclusive."""
    if start_date and end_date and start_date > end_date:
        raise LedgerValidationError("Start date must not be after end date")

    query = db.query(Payment)
    if entity_type is not None:
        query = query.filter(Payment.entity_type == PartyType(entity_type))
    if entity_id is not None:
        query = query.filter(Payment.entity_id == entity_id)
    if start_date:
        query = query.filter(Payment.payment_date >= start_date)
    if end_date:
        query = query.filter(Payment.payment_date <= end_date)
    return query.order_by(Payment.payment_date, Payment.id).all()
