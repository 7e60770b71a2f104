"""Currency helpers - amounts are held as integer cents"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")

# Largest single amount accepted, in currency units; five of them still fit a BIGINT of cents
MAX_AMOUNT = Decimal("1000000000000")


def to_decimal(value) -> Decimal:
    """Convert a currency input to Decimal (floats go through str to avoid binary noise)"""
    if isinstance(value, bool):
        raise ValueError("Boolean is not a money amount")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a money amount: {value!r}")
    return result


def to_cents(value) -> int:
    """
    Currency units to cents, rounding half away from zero on the 2nd decimal.

    Raises:
        ValueError: not a finite amount, or larger in magnitude than MAX_AMOUNT
    """
    amount = to_decimal(value)
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount exceeds {MAX_AMOUNT}: {value!r}")
    try:
        return int(amount.quantize(CENT, rounding=ROUND_HALF_UP) * 100)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {value!r}") from e


def from_cents(cents: int) -> Decimal:
    """Cents back to currency units (exact)"""
    return (Decimal(cents) / 100).quantize(CENT)


def round_cents(value: Decimal) -> int:
    """Round a fractional cent amount to whole cents, half away from zero"""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
