"""Amount sanitization, rounding and display helpers."""

import logging
import re
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

ROUNDING_MODES = {
    "half_up": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}

# Leading numeric prefix, the same way a browser's parseFloat reads input
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def to_amount(value: Any) -> Decimal:
    """
    Coerce a raw contribution into a non-negative Decimal.

    Strings are read up to the first character that can't be part of a number,
    so "12.50 EUR" becomes 12.50. Anything unparseable, negative, NaN or
    infinite is treated as no contribution at all.

    Args:
        value: Decimal, int, float or string

    Returns:
        Sanitized amount (always >= 0)
    """
    if value is None or isinstance(value, bool):
        return ZERO

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            # str() keeps 33.33 as 33.33 instead of its binary expansion
            amount = Decimal(str(value))
        elif isinstance(value, str):
            match = _NUMBER_PREFIX.match(value.strip())
            if not match:
                return ZERO
            amount = Decimal(match.group(0))
        else:
            return ZERO
    except (InvalidOperation, ValueError):
        return ZERO

    if not amount.is_finite():
        logger.debug(f"Treating non-finite amount {value!r} as zero")
        return ZERO

    if amount < 0:
        logger.debug(f"Clamping negative amount {value!r} to zero")
        return ZERO

    return amount


def parse_rounding(name: str) -> str:
    """Map a rounding mode name from settings to a decimal rounding constant."""
    try:
        return ROUNDING_MODES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown rounding mode '{name}'. "
            f"Expected one of: {', '.join(sorted(ROUNDING_MODES))}"
        ) from None


def round_amount(amount: Decimal, rounding: str = ROUND_HALF_UP) -> Decimal:
    """Round to cents with a single, explicit rounding mode."""
    # Adding zero turns -0.00 into 0.00
    return amount.quantize(CENT, rounding=rounding) + ZERO


def format_money(amount: Decimal, rounding: str = ROUND_HALF_UP) -> str:
    """Format an amount for display: $1,234.50, or ($12.00) when negative.

    Rounds with `rounding` first, so displayed cents match transaction cents.
    """
    amount = round_amount(amount, rounding)
    if amount < 0:
        return f"(${abs(amount):,.2f})"
    return f"${amount:,.2f}"
