"""Money helpers and the commission calculator.

Amounts are integers in the currency's minor unit (cents). Commission is
rounded half-up to the minor unit and the curator receives the remainder, so
``commission + curator_amount`` always equals the total.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

from marketplace.config import DEFAULT_COMMISSION_RATE

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


def format_minor_units(minor: int) -> str:
    """Render minor units as a fixed two-decimal string, e.g. ``15000 -> "150.00"``."""
    return str((Decimal(minor) / 100).quantize(_CENT))


def validate_commission_rate(rate) -> Decimal:
    try:
        value = Decimal(str(rate))
    except InvalidOperation:
        raise ValidationError({"commission_rate": [f"Invalid commission rate: {rate!r}"]}) from None
    if value < 0 or value > 1:
        raise ValidationError({"commission_rate": ["Commission rate must be between 0 and 1"]})
    return value


def split_commission(total: int, rate=None) -> tuple[int, int]:
    """Split ``total`` (minor units) into ``(commission, curator_amount)``.

    ``rate`` is a fraction in [0, 1]; ``None`` means the platform default.
    """
    if total < 0:
        raise ValidationError({"total": ["Total cannot be negative"]})

    value = validate_commission_rate(DEFAULT_COMMISSION_RATE if rate is None else rate)
    commission = int((Decimal(total) * value).quantize(_UNIT, rounding=ROUND_HALF_UP))
    return commission, total - commission
