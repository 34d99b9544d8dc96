"""
Tests for stay pricing and length-of-stay discounts.
"""

from decimal import Decimal

import pytest

from app.services.pricing import calculate_total_price, count_nights, discount_percent
from conftest import day

TIERS = {7: 5, 28: 15}


def test_count_nights():
    assert count_nights(day(10), day(12)) == 2


@pytest.mark.parametrize(
    "nights,expected",
    [(1, 0), (6, 0), (7, 5), (27, 5), (28, 15), (60, 15)],
)
def test_discount_percent_picks_highest_reached_tier(nights, expected):
    assert discount_percent(nights, TIERS) == Decimal(expected)


def test_short_stay_is_nightly_rate_times_nights():
    assert calculate_total_price(Decimal("100.00"), day(10), day(13), TIERS) == Decimal("300.00")


def test_week_stay_gets_discount():
    # 7 * 100 * 0.95
    assert calculate_total_price(Decimal("100.00"), day(1), day(8), TIERS) == Decimal("665.00")


def test_total_is_rounded_to_cents():
    # 7 * 33.33 * 0.95 = 221.6445
    assert calculate_total_price(Decimal("33.33"), day(1), day(8), TIERS) == Decimal("221.64")


def test_no_tiers_means_no_discount():
    assert calculate_total_price(Decimal("80.00"), day(1), day(11), {}) == Decimal("800.00")


def test_zero_night_stay_is_rejected():
    with pytest.raises(ValueError):
        calculate_total_price(Decimal("100.00"), day(5), day(5), TIERS)
