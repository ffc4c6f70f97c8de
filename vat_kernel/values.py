"""
Values -- Decimal money helpers shared by the VAT engines.

All monetary arithmetic is done in ``Decimal``. Floats are accepted at the
boundary only and are converted through their ``str()`` form, so ``0.1``
becomes ``Decimal("0.1")`` rather than its binary approximation.
Rounding is always ROUND_HALF_UP to the cent, never banker's rounding.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from vat_kernel.exceptions import InvalidAmountError

MONEY_QUANTUM = Decimal("0.01")
ROUNDING_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal("100")

NumberLike = Union[Decimal, int, float, str]


def to_decimal(value: NumberLike, field: str = "amount") -> Decimal:
    """
    Convert a caller-supplied number to ``Decimal``.

    Raises:
        InvalidAmountError: for booleans, None, unparsable strings, NaN
            and infinities.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value, field)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmountError(value, field) from exc
    if not result.is_finite():
        raise InvalidAmountError(value, field)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """Unrounded ``amount * rate_percent / 100``."""
    return amount * rate_percent / HUNDRED


def format_money(value: Decimal) -> str:
    """Render a money amount with exactly two decimals."""
    return f"{round_money(value):f}"


def format_rate(rate: Decimal) -> str:
    """Render a percentage without trailing zeros (``19``, ``9.9``)."""
    if rate == 0:
        return "0"
    return f"{rate.normalize():f}"
