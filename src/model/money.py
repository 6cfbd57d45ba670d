"""Decimal helpers shared by the pay and tax modules.

Money is carried as `Decimal` end to end; floats are converted through
their string form so 0.1 stays 0.1.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

CENTS = Decimal('0.01')
ZERO = Decimal('0')

# Largest accepted amount, hour count or rate. Products of two such values
# still fit the default 28-digit context with cents to spare.
MAX_AMOUNT = Decimal('1e12')


def to_decimal(value, name: str = 'value') -> Decimal:
    """Convert an int, float, str or Decimal to a finite Decimal.

    Raises:
        TypeError: For booleans, None and other non-numeric types.
        ValueError: For strings that are not numbers, NaN or infinity.
    """
    if isinstance(value, bool) or value is None:
        raise TypeError(f"{name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip().replace(',', ''))
        except InvalidOperation:
            raise ValueError(f"{name} must be a number, got {value!r}")
    else:
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return result


def check_magnitude(amount: Decimal, name: str = 'value') -> Decimal:
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"{name} must not exceed {MAX_AMOUNT:,.0f}, got {amount}")
    return amount


def to_cents(amount: Decimal) -> Decimal:
    # quantize needs room for every integer digit plus two decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
