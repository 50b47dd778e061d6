"""
Exact Decimal Money Helpers

Single-currency amounts are plain Decimals quantized to cents. NEVER uses
float for monetary values.
"""

from decimal import Decimal, InvalidOperation, getcontext
from typing import Union

from .errors import InvalidAmountError

# High precision for financial calculations
getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_amount(value: Union[Decimal, int, str]) -> Decimal:
    """
    Convert a value to an exact amount expressed in cents.

    Floats are rejected outright so that binary rounding never enters the
    ledger, and sub-cent amounts are rejected rather than rounded.

    Raises:
        InvalidAmountError: If the value is a float, not a finite number or
            has more than 2 decimal places
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountError(f"Amount must be an exact decimal, got {type(value).__name__}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid amount: {value!r}") from e

    if quantized != amount:
        raise InvalidAmountError("Amount cannot have more than 2 decimal places")

    return quantized


def is_positive(amount: Decimal) -> bool:
    """Check if amount is strictly positive"""
    return amount > ZERO


def format_amount(amount: Decimal) -> str:
    """Format for display"""
    return f"{amount:,.2f}"
