"""Rounding rules for stored amounts."""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents, halves away from zero.

    An amount with too many digits to be represented in cents is logged
    and stored as 0.

    Example:
        >>> to_cents(Decimal("2.345"))
        Decimal('2.35')
    """
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.warning(f"Amount {amount} cannot be rounded to cents, using 0")
        return ZERO


def to_hours(hours: Decimal) -> Decimal:
    """Round a duration for display and storage (2 decimal places)."""
    return hours.quantize(CENT, rounding=ROUND_HALF_UP)
