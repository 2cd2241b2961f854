"""Conversion of base-unit integers to decimal token amounts.

All quote arithmetic stays in integer base units. Decimal amounts are only
produced for display, with a context wide enough for any uint256 value.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

# 78 digits of precision, enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)


def from_wei(amount: int, decimals: int) -> Decimal:
    """Scale a base-unit amount down to a decimal token amount.

    Args:
        amount: Amount in base units
        decimals: Token decimals

    Returns:
        Exact Decimal (e.g. from_wei(1_500_000, 6) == Decimal("1.5"))
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount).scaleb(-decimals)


__all__ = ["DECIMAL_HIGH_PREC_CONTEXT", "from_wei"]
