"""
Utility functions for the application.
"""
from typing import Any, Dict, Iterable
from decimal import Decimal, ROUND_HALF_UP
from mandi.core.errors import LedgerValidationError

CENT = Decimal("0.01")
GRAM = Decimal("0.001")
RATE = Decimal("0.0001")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats, strings and None to Decimal without float artifacts."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Any) -> Decimal:
    """Round a currency amount to 2 decimal places, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_weight(value: Any) -> Decimal:
    """Round a weight in kg to grams."""
    return to_decimal(value).quantize(GRAM, rounding=ROUND_HALF_UP)


def round_rate(value: Any) -> Decimal:
    """Round a fractional commission rate to 4 places (0.0255 is 2.55%)."""
    return to_decimal(value).quantize(RATE, rounding=ROUND_HALF_UP)


def reject_nulls(updates: Dict[str, Any], fields: Iterable[str]) -> None:
    """Raise LedgerValidationError when a patch sets a required field to None."""
    nulls = sorted(f for f in fields if f in updates and updates[f] is None)
    if nulls:
        raise LedgerValidationError(
            f"Fields cannot be empty: {', '.join(nulls)}",
            details={"fields": nulls}
        )


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
