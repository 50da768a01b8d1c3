"""
Transaction service: recording sales and keeping party balances in step.

A transaction insert and the balance changes it causes are written in a single
commit, with both party rows locked, so concurrent entries for the same party
cannot overwrite each other's balance update.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from mandi.core.errors import LedgerValidationError, NotFoundError
from mandi.core.utils import round_money, to_decimal
from mandi.db.session import commit
from mandi.models.party import PartyType
from mandi.models.payment import Payment
from mandi.models.product import Product
from mandi.models.transaction import Transaction, TransactionItem, TransactionStatus
from mandi.services import ledger_service
from mandi.services.party_service import get_party
from mandi.services.settings_service import get_system_settings

logger = logging.getLogger(__name__)

# Fields a batch edit may touch
BATCH_EDITABLE_FIELDS = ("notes", "status", "transaction_type")


def resolve_rates(system_settings, commission_kisan_rate=None, commission_vyapari_rate_per_kg=None):
    """Fill missing commission rates from the system settings row."""
    if commission_kisan_rate is None:
        commission_kisan_rate = system_settings.commission_kisan_rate
    if commission_vyapari_rate_per_kg is None:
        commission_vyapari_rate_per_kg = system_settings.commission_vyapari_rate_per_kg
    return to_decimal(commission_kisan_rate), to_decimal(commission_vyapari_rate_per_kg)


def preview_commission(db: Session, items, commission_kisan_rate=None, commission_vyapari_rate_per_kg=None):
    """Compute the rounded commission split for entry forms without saving anything."""
    kisan_rate, vyapari_rate = resolve_rates(
        get_system_settings(db), commission_kisan_rate, commission_vyapari_rate_per_kg
    )
    totals = ledger_service.compute_item_totals(items)
    return ledger_service.compute_commission(
        totals.sub_total, totals.total_weight_kg, kisan_rate, vyapari_rate
    ).rounded()


def _append_unique(existing: Optional[list], names: List[str]) -> list:
    merged = list(existing or [])
    for name in names:
        if name not in merged:
            merged.append(name)
    return merged


def record_transaction(db: Session, data, recorded_by_id: int = None) -> Transaction:
    """
    Validate, price and store a transaction, then move both parties' balances.

    ``data`` carries the fields of ``TransactionCreate``.
    """
    if to_decimal(data.amount_paid_kisan) < 0 or to_decimal(data.amount_paid_vyapari) < 0:
        raise LedgerValidationError("Amounts paid cannot be negative")

    totals = ledger_service.compute_item_totals(data.items)
    # May create and commit the settings row, so it runs before any row lock
    system_settings = get_system_settings(db)
    kisan_rate, vyapari_rate = resolve_rates(
        system_settings, data.commission_kisan_rate, data.commission_vyapari_rate_per_kg
    )
    breakdown = ledger_service.compute_commission(
        totals.sub_total, totals.total_weight_kg, kisan_rate, vyapari_rate
    ).rounded()

    kisan = get_party(db, PartyType.KISAN, data.kisan_id, for_update=True)
    vyapari = get_party(db, PartyType.VYAPARI, data.vyapari_id, for_update=True)

    product_ids = {li.product_id for li in totals.items}
    products = {p.id: p for p in db.query(Product).filter(Product.id.in_(product_ids)).all()}
    missing = sorted(product_ids - set(products))
    if missing:
        raise NotFoundError(f"Product IDs not found: {missing}")

    transaction = Transaction(
        kisan_id=kisan.id,
        kisan_name=kisan.name,
        vyapari_id=vyapari.id,
        vyapari_name=vyapari.name,
        transaction_date=data.transaction_date,
        recorded_by_id=recorded_by_id,
        sub_total=breakdown.sub_total,
        total_weight_kg=breakdown.total_weight_kg,
        commission_kisan_rate=breakdown.commission_kisan_rate,
        commission_kisan_amount=breakdown.commission_kisan_amount,
        commission_vyapari_rate_per_kg=breakdown.commission_vyapari_rate_per_kg,
        commission_vyapari_amount=breakdown.commission_vyapari_amount,
        total_commission=breakdown.total_commission,
        net_amount_kisan=breakdown.net_amount_kisan,
        net_amount_vyapari=breakdown.net_amount_vyapari,
        amount_paid_kisan=round_money(data.amount_paid_kisan),
        amount_paid_vyapari=round_money(data.amount_paid_vyapari),
        status=TransactionStatus.COMPLETED,
        transaction_type=data.transaction_type,
        notes=data.notes,
        mandi_region=system_settings.mandi_region
    )
    for li in totals.items:
        transaction.items.append(TransactionItem(
            product_id=li.product_id,
            product_name=products[li.product_id].name,
            quantity=li.quantity,
            unit_price=li.unit_price,
            total_price=li.total_price
        ))
    db.add(transaction)

    kisan_effect = ledger_service.kisan_balance_effect(transaction)
    vyapari_effect = ledger_service.vyapari_balance_effect(transaction)
    kisan.bakaya = round_money(to_decimal(kisan.bakaya) + kisan_effect)
    vyapari.bakaya = round_money(to_decimal(vyapari.bakaya) + vyapari_effect)

    product_names = [products[li.product_id].name for li in totals.items]
    kisan.crops_sold = _append_unique(kisan.crops_sold, product_names)
    vyapari.crops_bought = _append_unique(vyapari.crops_bought, product_names)

    commit(db)
    db.refresh(transaction)
    logger.info(
        f"Recorded transaction {transaction.id}: kisan {kisan.id} {kisan_effect:+.2f}, "
        f"vyapari {vyapari.id} {vyapari_effect:+.2f}, commission {transaction.total_commission}"
    )
    return transaction


def get_transaction(db: Session, transaction_id: int) -> Transaction:
    """Fetch a transaction with its items, raising NotFoundError when absent."""
    transaction = db.query(Transaction).options(
        selectinload(Transaction.items)
    ).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundError(f"Transaction with ID {transaction_id} not found")
    return transaction


def list_transactions(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    kisan_id: Optional[int] = None,
    vyapari_id: Optional[int] = None,
    product_id: Optional[int] = None,
    newest_first: bool = True
) -> List[Transaction]:
    """List transactions matching all given filters. Date bounds are inclusive."""
    if start_date and end_date and start_date > end_date:
        raise LedgerValidationError("Start date must not be after end date")

    query = db.query(Transaction).options(selectinload(Transaction.items))
    if start_date:
        query = query.filter(Transaction.transaction_date >= start_date)
    if end_date:
        query = query.filter(Transaction.transaction_date <= end_date)
    if kisan_id:
        query = query.filter(Transaction.kisan_id == kisan_id)
    if vyapari_id:
        query = query.filter(Transaction.vyapari_id == vyapari_id)
    if product_id:
        query = query.filter(
            Transaction.items.any(TransactionItem.product_id == product_id)
        )

    if newest_first:
        query = query.order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
    else:
        query = query.order_by(Transaction.transaction_date, Transaction.id)
    return query.all()


def delete_transaction(db: Session, transaction_id: int) -> None:
    """Delete a transaction and reverse its effect on both balances in the same commit."""
    transaction = get_transaction(db, transaction_id)

    kisan = get_party(db, PartyType.KISAN, transaction.kisan_id, for_update=True)
    vyapari = get_party(db, PartyType.VYAPARI, transaction.vyapari_id, for_update=True)
    kisan.bakaya = round_money(to_decimal(kisan.bakaya) - ledger_service.kisan_balance_effect(transaction))
    vyapari.bakaya = round_money(to_decimal(vyapari.bakaya) - ledger_service.vyapari_balance_effect(transaction))

    # Linked payments stay on the party's ledger, only the link goes
    db.query(Payment).filter(Payment.transaction_id == transaction_id).update(
        {Payment.transaction_id: None}, synchronize_session=False
    )
    db.delete(transaction)
    commit(db)
    logger.info(f"Deleted transaction {transaction_id} and reversed its balance effects")


def batch_update_transactions(db: Session, ids: List[int], updates: dict) -> int:
    """Apply notes/status/type to several transactions. Commission math is left untouched."""
    if not ids:
        raise LedgerValidationError("No transaction IDs provided for batch update")
    updates = {k: v for k, v in updates.items() if v is not None}
    unknown = set(updates) - set(BATCH_EDITABLE_FIELDS)
    if unknown:
        raise LedgerValidationError(f"Fields cannot be batch edited: {sorted(unknown)}")
    if not updates:
        raise LedgerValidationError("No changes detected to apply")

    transactions = db.query(Transaction).filter(Transaction.id.in_(ids)).all()
    missing = sorted(set(ids) - {t.id for t in transactions})
    if missing:
        raise NotFoundError(f"Transaction IDs not found: {missing}")

    for transaction in transactions:
        for field, value in updates.items():
            setattr(transaction, field, value)
    commit(db)
    logger.info(f"Batch updated {len(transactions)} transactions: {sorted(updates)}")
    return len(transactions)

