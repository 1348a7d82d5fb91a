"""Fixed-rate fee arithmetic for settlements.

All amounts are 2-decimal ``Decimal`` values. The platform fee is rounded
half-up to the cent and the creator amount is its exact complement, so
``platform_fee + creator_amount == amount`` always holds.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Union

PLATFORM_FEE_RATE = Decimal("0.10")
CENT = Decimal("0.01")

class FeeBreakdown(NamedTuple):
    amount: Decimal
    platform_fee: Decimal
    creator_amount: Decimal

def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    # str() first so floats do not drag binary noise along
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

def calculate_fees(amount: Union[Decimal, int, float, str]) -> FeeBreakdown:
    amount = to_money(amount)
    platform_fee = (amount * PLATFORM_FEE_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return FeeBreakdown(amount=amount, platform_fee=platform_fee, creator_amount=amount - platform_fee)

def split_amount(creator_amount: Decimal, percentage: Decimal) -> Decimal:
    """Share of the creator amount for one split row. No re-normalization across rows."""
    return (creator_amount * Decimal(percentage) / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)
