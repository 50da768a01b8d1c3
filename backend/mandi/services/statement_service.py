"""
Statement service: loads a party's history and hands it to the ledger calculator.
"""
import logging
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session, selectinload
from mandi.core.errors import LedgerValidationError
from mandi.models.party import Kisan, Vyapari, PartyType
from mandi.models.payment import Payment
from mandi.models.transaction import Transaction
from mandi.services import ledger_service
from mandi.services.party_service import get_party
from mandi.services.settings_service import get_system_settings, next_bill_number

logger = logging.getLogger(__name__)


def get_bill_statement(
    db: Session,
    entity_type: PartyType,
    entity_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> dict:
    """Build the bill statement for one Kisan or Vyapari."""
    entity_type = PartyType(entity_type)
    if start_date and end_date and start_date > end_date:
        raise LedgerValidationError("Start date must not be after end date")

    party = get_party(db, entity_type, entity_id)

    query = db.query(Transaction).options(selectinload(Transaction.items))
    if entity_type == PartyType.KISAN:
        query = query.filter(Transaction.kisan_id == entity_id)
    else:
        query = query.filter(Transaction.vyapari_id == entity_id)
    # History after the period can never affect the statement
    if end_date:
        query = query.filter(Transaction.transaction_date <= end_date)
    transactions = query.order_by(Transaction.transaction_date, Transaction.id).all()

    payment_query = db.query(Payment).filter(
        Payment.entity_type == entity_type,
        Payment.entity_id == entity_id
    )
    if end_date:
        payment_query = payment_query.filter(Payment.payment_date <= end_date)
    payments = payment_query.order_by(Payment.payment_date, Payment.id).all()

    statement = ledger_service.build_bill_statement(
        entity_type, party, transactions, payments,
        start_date=start_date, end_date=end_date
    )
    logger.debug(
        f"Bill statement for {entity_type.value} {entity_id}: "
        f"{len(statement['transactions'])} transactions, opening {statement['opening_balance']}"
    )
    return statement


def get_daily_summary(db: Session, summary_date: date) -> dict:
    """Summarize one day's trading and the mandi's current overall position."""
    transactions = db.query(Transaction).filter(Transaction.transaction_date == summary_date).all()
    kisans = db.query(Kisan).all()
    vyaparis = db.query(Vyapari).all()
    return ledger_service.summarize_day(summary_date, transactions, kisans, vyaparis)


def print_bill(
    db: Session,
    entity_type: PartyType,
    entity_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> str:
    """Render a numbered, printable bill. Each call takes the next bill number."""
    statement = get_bill_statement(db, entity_type, entity_id, start_date, end_date)
    system_settings = get_system_settings(db)
    bill_number = next_bill_number(db)
    logger.info(f"Printing bill {bill_number} for {PartyType(entity_type).value} {entity_id}")
    return ledger_service.render_bill_text(
        statement, mandi_name=system_settings.mandi_name, bill_number=bill_number
    )
