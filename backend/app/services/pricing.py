"""
Stay pricing: nightly rate times nights, less the length-of-stay discount.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional

from app.core.config import get_settings

settings = get_settings()

CENT = Decimal("0.01")


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def discount_percent(nights: int, tiers: Optional[Mapping[int, int]] = None) -> Decimal:
    """Largest tier whose minimum night count the stay reaches."""
    if tiers is None:
        tiers = settings.STAY_DISCOUNT_TIERS
    percent = 0
    for min_nights, tier_percent in sorted(tiers.items()):
        if nights >= min_nights:
            percent = tier_percent
    return Decimal(percent)


def calculate_total_price(
    price_per_night: Decimal,
    check_in: date,
    check_out: date,
    tiers: Optional[Mapping[int, int]] = None,
) -> Decimal:
    nights = count_nights(check_in, check_out)
    if nights <= 0:
        raise ValueError("A stay must last at least one night")

    base = Decimal(price_per_night) * nights
    multiplier = Decimal("1") - discount_percent(nights, tiers) / Decimal("100")
    return (base * multiplier).quantize(CENT, rounding=ROUND_HALF_UP)
