"""
Ledger calculator: commission split, balance effects, bill statements and the
daily mandi summary.

Everything here is a pure function over records that were already fetched.
Records only need the attributes of the ORM models (``Transaction``,
``Payment``, ``Kisan`` / ``Vyapari``), so plain objects work as well.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np
from mandi.core.errors import LedgerValidationError
from mandi.core.utils import ZERO, round_money, round_rate, round_weight, to_decimal
from mandi.models.party import PartyType


class LineItem:
    """A validated transaction line with its total computed."""
    def __init__(self, product_id: int, quantity: Decimal, unit_price: Decimal, total_price: Decimal):
        self.product_id = product_id
        self.quantity = quantity
        self.unit_price = unit_price
        self.total_price = total_price


class ItemTotals:
    """Line items plus the sums a transaction stores."""
    def __init__(self, items: List[LineItem], sub_total: Decimal, total_weight_kg: Decimal):
        self.items = items
        self.sub_total = sub_total
        self.total_weight_kg = total_weight_kg


class CommissionBreakdown:
    """Commission split of one transaction at full precision."""
    def __init__(
        self,
        sub_total: Decimal,
        total_weight_kg: Decimal,
        commission_kisan_rate: Decimal,
        commission_vyapari_rate_per_kg: Decimal,
        commission_kisan_amount: Decimal,
        commission_vyapari_amount: Decimal,
    ):
        self.sub_total = sub_total
        self.total_weight_kg = total_weight_kg
        self.commission_kisan_rate = commission_kisan_rate
        self.commission_vyapari_rate_per_kg = commission_vyapari_rate_per_kg
        self.commission_kisan_amount = commission_kisan_amount
        self.commission_vyapari_amount = commission_vyapari_amount

    @property
    def total_commission(self) -> Decimal:
        return self.commission_kisan_amount + self.commission_vyapari_amount

    @property
    def net_amount_kisan(self) -> Decimal:
        """Amount the mandi owes the Kisan."""
        return self.sub_total - self.commission_kisan_amount

    @property
    def net_amount_vyapari(self) -> Decimal:
        """Amount the Vyapari owes the mandi."""
        return self.sub_total + self.commission_vyapari_amount

    def rounded(self) -> "CommissionBreakdown":
        """
        Values to persist. Commissions are rounded to 2 places and the nets are
        derived from the rounded commissions, so the stored record still satisfies
        net_amount_kisan + commission_kisan_amount == sub_total exactly.
        """
        return CommissionBreakdown(
            sub_total=round_money(self.sub_total),
            total_weight_kg=round_weight(self.total_weight_kg),
            commission_kisan_rate=self.commission_kisan_rate,
            commission_vyapari_rate_per_kg=self.commission_vyapari_rate_per_kg,
            commission_kisan_amount=round_money(self.commission_kisan_amount),
            commission_vyapari_amount=round_money(self.commission_vyapari_amount),
        )

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            "sub_total": self.sub_total,
            "total_weight_kg": self.total_weight_kg,
            "commission_kisan_rate": self.commission_kisan_rate,
            "commission_kisan_amount": self.commission_kisan_amount,
            "commission_vyapari_rate_per_kg": self.commission_vyapari_rate_per_kg,
            "commission_vyapari_amount": self.commission_vyapari_amount,
            "total_commission": self.total_commission,
            "net_amount_kisan": self.net_amount_kisan,
            "net_amount_vyapari": self.net_amount_vyapari,
        }


# ---------------------------------------------------------------------------
# Operation A: commission computation
# ---------------------------------------------------------------------------

def compute_item_totals(items: Sequence) -> ItemTotals:
    """
    Validate transaction lines and compute their totals.

    Each item needs ``product_id``, ``quantity`` and ``unit_price``. The line total
    is rounded to 2 places and the sub total is the sum of the rounded line totals,
    so the stored sub total always equals the sum of the stored lines. Quantity and
    unit price are first rounded to their stored precision (3 and 2 places).
    """
    if not items:
        raise LedgerValidationError("A transaction needs at least one item.")

    line_items = []
    for index, item in enumerate(items, start=1):
        if not getattr(item, "product_id", None):
            raise LedgerValidationError(f"Item {index}: no product selected.")
        quantity = round_weight(item.quantity)
        unit_price = round_money(item.unit_price)
        if quantity <= 0:
            raise LedgerValidationError(f"Item {index}: quantity must be positive.")
        if unit_price <= 0:
            raise LedgerValidationError(f"Item {index}: unit price must be positive.")
        line_items.append(LineItem(
            product_id=item.product_id,
            quantity=quantity,
            unit_price=unit_price,
            total_price=round_money(quantity * unit_price)
        ))

    sub_total = sum((li.total_price for li in line_items), ZERO)
    total_weight_kg = sum((li.quantity for li in line_items), ZERO)
    return ItemTotals(line_items, sub_total, total_weight_kg)


def validate_commission_rates(commission_kisan_rate, commission_vyapari_rate_per_kg) -> None:
    """Kisan rate is a fraction in [0, 1); the per-kg Vyapari rate is non-negative."""
    kisan_rate = to_decimal(commission_kisan_rate)
    vyapari_rate = to_decimal(commission_vyapari_rate_per_kg)
    if kisan_rate < 0 or kisan_rate >= 1:
        raise LedgerValidationError(
            "Kisan commission rate must be a fraction between 0 and 1 (0.02 means 2%).",
            details={"commission_kisan_rate": str(kisan_rate)}
        )
    if vyapari_rate < 0:
        raise LedgerValidationError(
            "Vyapari commission rate per kg cannot be negative.",
            details={"commission_vyapari_rate_per_kg": str(vyapari_rate)}
        )


def compute_commission(
    sub_total,
    total_weight_kg,
    commission_kisan_rate,
    commission_vyapari_rate_per_kg
) -> CommissionBreakdown:
    """
    Split commission between Kisan (percentage of value) and Vyapari (flat per kg).

    Inputs are rounded to their stored precision first, so the stored rates
    reproduce the stored commission amounts.
    """
    sub_total = round_money(sub_total)
    total_weight_kg = round_weight(total_weight_kg)
    if sub_total <= 0:
        raise LedgerValidationError("Sub total must be positive.")
    if total_weight_kg <= 0:
        raise LedgerValidationError("Total weight must be positive.")
    kisan_rate = round_rate(commission_kisan_rate)
    vyapari_rate = round_money(commission_vyapari_rate_per_kg)
    validate_commission_rates(kisan_rate, vyapari_rate)

    return CommissionBreakdown(
        sub_total=sub_total,
        total_weight_kg=total_weight_kg,
        commission_kisan_rate=kisan_rate,
        commission_vyapari_rate_per_kg=vyapari_rate,
        commission_kisan_amount=sub_total * kisan_rate,
        commission_vyapari_amount=total_weight_kg * vyapari_rate,
    )


# ---------------------------------------------------------------------------
# Balance effects
# ---------------------------------------------------------------------------

def kisan_balance_effect(txn) -> Decimal:
    """Change in the Kisan's bakaya caused by a transaction."""
    return to_decimal(txn.net_amount_kisan) - to_decimal(txn.amount_paid_kisan)


def vyapari_balance_effect(txn) -> Decimal:
    """Change in the Vyapari's bakaya caused by a transaction."""
    return to_decimal(txn.net_amount_vyapari) - to_decimal(txn.amount_paid_vyapari)


def payment_balance_effect(payment) -> Decimal:
    """A payment always moves the balance towards zero from the mandi's side."""
    return -to_decimal(payment.amount)


def transaction_balance_effect(entity_type: PartyType, txn) -> Decimal:
    if PartyType(entity_type) == PartyType.KISAN:
        return kisan_balance_effect(txn)
    return vyapari_balance_effect(txn)


def _references(entity_type: PartyType, entity_id: int, txn) -> bool:
    if PartyType(entity_type) == PartyType.KISAN:
        return txn.kisan_id == entity_id
    return txn.vyapari_id == entity_id


def _payment_for(entity_type: PartyType, entity_id: int, payment) -> bool:
    return PartyType(payment.entity_type) == PartyType(entity_type) and payment.entity_id == entity_id


def derive_balance(entity_type: PartyType, entity_id: int, transactions: Iterable, payments: Iterable = ()) -> Decimal:
    """Fold every transaction and payment of a party into its balance."""
    balance = ZERO
    for txn in transactions:
        if _references(entity_type, entity_id, txn):
            balance += transaction_balance_effect(entity_type, txn)
    for payment in payments:
        if _payment_for(entity_type, entity_id, payment):
            balance += payment_balance_effect(payment)
    return round_money(balance)


# ---------------------------------------------------------------------------
# Operation B: bill statement
# ---------------------------------------------------------------------------

def _in_range(day: date, start_date: Optional[date], end_date: Optional[date]) -> bool:
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True


def _before_range(day: date, start_date: Optional[date]) -> bool:
    return start_date is not None and day < start_date


def build_bill_statement(
    entity_type: PartyType,
    party,
    transactions: Iterable,
    payments: Iterable = (),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    statement_date: Optional[date] = None
) -> dict:
    """
    Aggregate one party's history into a bill statement.

    Transactions dated inside [start_date, end_date] (inclusive) make up the
    statement and its summary. Transactions and payments dated before start_date
    only contribute to the opening balance. Without a start date the opening
    balance is zero. ``current_bakaya`` is the party's cached balance, taken as is.
    """
    entity_type = PartyType(entity_type)
    if start_date and end_date and start_date > end_date:
        raise LedgerValidationError("Start date must not be after end date.")

    is_kisan = entity_type == PartyType.KISAN
    own_transactions = [t for t in transactions if _references(entity_type, party.id, t)]
    own_payments = [p for p in payments if _payment_for(entity_type, party.id, p)]

    in_range = [t for t in own_transactions if _in_range(t.transaction_date, start_date, end_date)]
    payments_in_range = [p for p in own_payments if _in_range(p.payment_date, start_date, end_date)]

    opening_balance = ZERO
    for txn in own_transactions:
        if _before_range(txn.transaction_date, start_date):
            opening_balance += transaction_balance_effect(entity_type, txn)
    for payment in own_payments:
        if _before_range(payment.payment_date, start_date):
            opening_balance += payment_balance_effect(payment)

    # Stable sort keeps insertion order for equal dates; id breaks ties explicitly
    in_range.sort(key=lambda t: (t.transaction_date, t.id or 0))
    payments_in_range.sort(key=lambda p: (p.payment_date, p.id or 0))

    total_weight = sum((to_decimal(t.total_weight_kg) for t in in_range), ZERO)
    total_commission = sum((to_decimal(t.total_commission) for t in in_range), ZERO)
    gross = sum((to_decimal(t.sub_total) for t in in_range), ZERO)
    total_payments = sum((to_decimal(p.amount) for p in payments_in_range), ZERO)

    if is_kisan:
        cash = sum((to_decimal(t.amount_paid_kisan) for t in in_range), ZERO)
        net_change = sum((to_decimal(t.net_amount_kisan) for t in in_range), ZERO)
    else:
        cash = sum((to_decimal(t.amount_paid_vyapari) for t in in_range), ZERO)
        net_change = sum((to_decimal(t.net_amount_vyapari) for t in in_range), ZERO)

    period_effect = sum((transaction_balance_effect(entity_type, t) for t in in_range), ZERO)
    period_effect += sum((payment_balance_effect(p) for p in payments_in_range), ZERO)

    summary = {
        "total_weight": round_weight(total_weight),
        "total_commission": round_money(total_commission),
        "total_amount_to_kisan_gross": round_money(gross) if is_kisan else None,
        "total_cash_paid_to_kisan": round_money(cash) if is_kisan else None,
        "total_amount_from_vyapari_gross": None if is_kisan else round_money(gross),
        "total_cash_collected_from_vyapari": None if is_kisan else round_money(cash),
        "total_payments": round_money(total_payments),
        "net_amount_change_in_period": round_money(net_change),
    }

    return {
        "entity_type": entity_type,
        "entity_id": party.id,
        "entity_name": party.name,
        "entity_contact": getattr(party, "contact_number", None),
        "entity_address": getattr(party, "village", None) if is_kisan else getattr(party, "city", None),
        "entity_gst": None if is_kisan else getattr(party, "gst_number", None),
        "statement_date": statement_date or date.today(),
        "start_date": start_date,
        "end_date": end_date,
        "opening_balance": round_money(opening_balance),
        "closing_balance": round_money(opening_balance + period_effect),
        "current_bakaya": round_money(party.bakaya),
        "transactions": in_range,
        "payments": payments_in_range,
        "summary": summary,
    }


# ---------------------------------------------------------------------------
# Daily mandi summary
# ---------------------------------------------------------------------------

def summarize_day(summary_date: date, transactions: Iterable, kisans: Iterable, vyaparis: Iterable) -> dict:
    """Totals for one day's transactions plus the mandi's overall position."""
    day_transactions = [t for t in transactions if t.transaction_date == summary_date]

    total_weight = sum((to_decimal(t.total_weight_kg) for t in day_transactions), ZERO)
    collection = sum((to_decimal(t.net_amount_vyapari) for t in day_transactions), ZERO)
    paid_to_kisans = sum((to_decimal(t.amount_paid_kisan) for t in day_transactions), ZERO)

    # Only positive balances count: what the mandi actually owes or is owed
    owes_to_kisans = sum((to_decimal(k.bakaya) for k in kisans if to_decimal(k.bakaya) > 0), ZERO)
    owed_by_vyaparis = sum((to_decimal(v.bakaya) for v in vyaparis if to_decimal(v.bakaya) > 0), ZERO)

    return {
        "summary_date": summary_date,
        "total_transactions_count": len(day_transactions),
        "total_weight_processed": round_weight(total_weight),
        "daily_collection_from_vyaparis": round_money(collection),
        "daily_payments_to_kisans": round_money(paid_to_kisans),
        "total_mandi_owes_to_kisans": round_money(owes_to_kisans),
        "total_vyaparis_owe_to_mandi": round_money(owed_by_vyaparis),
        "net_mandi_balance": round_money(owed_by_vyaparis - owes_to_kisans),
    }


# ---------------------------------------------------------------------------
# Product price statistics
# ---------------------------------------------------------------------------

def compute_price_statistics(prices: Iterable) -> Dict[str, Optional[Decimal]]:
    """Average, min, max, median and mode of unit prices. Mode ties go to the lowest price."""
    values = np.array([float(to_decimal(p)) for p in prices], dtype=float)
    if values.size == 0:
        return {
            "average_price": None,
            "min_price": None,
            "max_price": None,
            "median_price": None,
            "mode_price": None,
        }

    unique, counts = np.unique(values, return_counts=True)
    mode = unique[np.argmax(counts)]  # np.unique sorts, argmax takes the first maximum

    return {
        "average_price": round_money(float(np.mean(values))),
        "min_price": round_money(float(np.min(values))),
        "max_price": round_money(float(np.max(values))),
        "median_price": round_money(float(np.median(values))),
        "mode_price": round_money(float(mode)),
    }


# ---------------------------------------------------------------------------
# Printable bill
# ---------------------------------------------------------------------------

def render_bill_text(statement: dict, mandi_name: str = "Mandi", bill_number: Optional[int] = None) -> str:
    """Render a bill statement as plain text for printing."""
    is_kisan = PartyType(statement["entity_type"]) == PartyType.KISAN
    summary = statement["summary"]
    lines = []
    lines.append(mandi_name)
    if bill_number is not None:
        lines.append(f"Bill No: {bill_number}")
    lines.append(f"{'Kisan' if is_kisan else 'Vyapari'} Bill: {statement['entity_name']}")
    if statement.get("entity_contact"):
        lines.append(f"Contact: {statement['entity_contact']}")
    if statement.get("entity_address"):
        lines.append(f"Address: {statement['entity_address']}")
    if statement.get("entity_gst"):
        lines.append(f"GST: {statement['entity_gst']}")
    lines.append(f"Statement date: {statement['statement_date'].isoformat()}")
    if statement.get("start_date") or statement.get("end_date"):
        start = statement["start_date"].isoformat() if statement.get("start_date") else "-"
        end = statement["end_date"].isoformat() if statement.get("end_date") else "-"
        lines.append(f"Period: {start} to {end}")
    lines.append(f"Opening balance: {statement['opening_balance']:.2f}")

    lines.append("\nTransactions:")
    if not statement["transactions"]:
        lines.append("  (none)")
    for txn in statement["transactions"]:
        counterparty = txn.vyapari_name if is_kisan else txn.kisan_name
        net = txn.net_amount_kisan if is_kisan else txn.net_amount_vyapari
        paid = txn.amount_paid_kisan if is_kisan else txn.amount_paid_vyapari
        lines.append(
            f"  {txn.transaction_date.isoformat()}  {counterparty}  "
            f"{to_decimal(txn.total_weight_kg):.3f} kg  gross {to_decimal(txn.sub_total):.2f}  "
            f"net {to_decimal(net):.2f}  paid {to_decimal(paid):.2f}"
        )

    if statement["payments"]:
        lines.append("\nPayments:")
        for payment in statement["payments"]:
            lines.append(
                f"  {payment.payment_date.isoformat()}  {_payment_type_label(payment.payment_type)}  "
                f"{to_decimal(payment.amount):.2f}"
            )

    lines.append("\nSummary:")
    lines.append(f"  Total weight: {summary['total_weight']:.3f} kg")
    lines.append(f"  Total commission: {summary['total_commission']:.2f}")
    if is_kisan:
        lines.append(f"  Gross amount: {summary['total_amount_to_kisan_gross']:.2f}")
        lines.append(f"  Cash paid: {summary['total_cash_paid_to_kisan']:.2f}")
    else:
        lines.append(f"  Gross amount: {summary['total_amount_from_vyapari_gross']:.2f}")
        lines.append(f"  Cash collected: {summary['total_cash_collected_from_vyapari']:.2f}")
    lines.append(f"  Payments: {summary['total_payments']:.2f}")
    lines.append(f"  Net change: {summary['net_amount_change_in_period']:+.2f}")
    lines.append(f"Closing balance: {statement['closing_balance']:.2f}")
    lines.append(f"Current bakaya: {statement['current_bakaya']:.2f}")
    return "\n".join(lines)


def _payment_type_label(payment_type) -> str:
    value = getattr(payment_type, "value", payment_type)
    return str(value).replace("_", " ")
