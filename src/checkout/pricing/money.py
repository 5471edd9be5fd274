"""Money helpers — all checkout arithmetic runs on ``Decimal``."""

from decimal import ROUND_HALF_UP, Decimal

MINOR_UNIT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a float/int/str amount without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_minor(amount: Decimal) -> Decimal:
    """Round half-up to the nearest minor currency unit."""
    return to_decimal(amount).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Express an amount in the gateway's minor unit (e.g. paisa)."""
    return int(round_minor(amount) * 100)
