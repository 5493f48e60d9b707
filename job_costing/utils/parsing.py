"""Lenient conversion of raw record values.

Job, job type and driver records come from forms and legacy storage, so
numbers may be strings, blanks or garbage. Every converter here degrades to
a default instead of raising, so one bad record cannot halt a batch.
"""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

_WEIGHT_TOKEN_SPLIT = re.compile(r"[\s,;]+")

# Rates, weights, loads and commissions all stay below a trillion; anything
# larger is a typo and would overflow the cent arithmetic downstream
MAX_MAGNITUDE = Decimal("1e12")


def in_range(value: Decimal) -> bool:
    """Finite and below ``MAX_MAGNITUDE`` in absolute value."""
    return value.is_finite() and value.copy_abs() < MAX_MAGNITUDE


def to_decimal(value: Any, default: Decimal = Decimal("0"), field: str = "value") -> Decimal:
    """Convert a raw value to Decimal, falling back to ``default``.

    Args:
        value: Raw value (Decimal, int, float, str or None)
        default: Value returned when conversion is impossible
        field: Field name used in the log message

    Returns:
        The parsed Decimal or ``default``

    Example:
        >>> to_decimal("12.50")
        Decimal('12.50')
        >>> to_decimal(None)
        Decimal('0')
        >>> to_decimal("n/a")
        Decimal('0')
    """
    if isinstance(value, Decimal):
        if in_range(value):
            return value
        logger.warning(f"Out of range {field} {value!r}, using {default}")
        return default
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        logger.warning(f"Non-numeric {field} {value!r}, using {default}")
        return default
    if not result.is_finite():
        logger.warning(f"Non-finite {field} {value!r}, using {default}")
        return default
    if not in_range(result):
        logger.warning(f"Out of range {field} {value!r}, using {default}")
        return default
    return result


def to_int(value: Any, default: int = 0, field: str = "value") -> int:
    """Convert a raw value to an integer count, truncating toward zero.

    Example:
        >>> to_int("5")
        5
        >>> to_int(2.7)
        2
        >>> to_int("")
        0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        if abs(value) < MAX_MAGNITUDE:
            return value
        logger.warning(f"Out of range {field} {value!r}, using {default}")
        return default
    parsed = to_decimal(value, default=Decimal(default), field=field)
    return int(parsed)


def _weight_entry(value: Any) -> Decimal:
    # A non-numeric entry inside a list still occupies a slot worth zero
    return to_decimal(value, field="weight entry")


def normalize_weight(value: Any) -> List[Decimal]:
    """Normalize a weight value into a canonical list of Decimals.

    Accepted shapes:
    - ``None`` or blank string: no weights
    - a single number: one weight
    - a list/tuple of numbers or numeric strings
    - a JSON-encoded array or scalar (``"[10, 12.5]"``)
    - a whitespace/comma separated string (``"10 12.5"``)

    Returns:
        List of weights (possibly empty)

    Example:
        >>> normalize_weight("[10, 12.5]")
        [Decimal('10'), Decimal('12.5')]
        >>> normalize_weight(7)
        [Decimal('7')]
        >>> normalize_weight("4 5,6")
        [Decimal('4'), Decimal('5'), Decimal('6')]
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_weight_entry(w) for w in value]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        else:
            if isinstance(decoded, list):
                return [_weight_entry(w) for w in decoded]
            if isinstance(decoded, (int, float)) and not isinstance(decoded, bool):
                return [to_decimal(text, field="weight")]
            if isinstance(decoded, str):
                return normalize_weight(decoded)
        weights = []
        for token in _WEIGHT_TOKEN_SPLIT.split(text.strip("[]")):
            if not token:
                continue
            parsed = _parse_token(token)
            if parsed is None:
                logger.warning(f"Dropping unusable weight token {token!r}")
                continue
            weights.append(parsed)
        return weights
    return [_weight_entry(value)]


def _parse_token(token: str) -> Optional[Decimal]:
    try:
        parsed = Decimal(token)
    except InvalidOperation:
        return None
    return parsed if in_range(parsed) else None
