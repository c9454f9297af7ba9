from decimal import Decimal

import pytest

from loyalty.tiers import (
    LoyaltyTier,
    SellerBadge,
    classify_loyalty_tier,
    classify_seller_badge,
    next_loyalty_tier,
    next_seller_badge,
)


@pytest.mark.parametrize("points, expected", [
    (-5, LoyaltyTier.BRONZE),
    (0, LoyaltyTier.BRONZE),
    (1999, LoyaltyTier.BRONZE),
    (2000, LoyaltyTier.SILVER),
    (4999, LoyaltyTier.SILVER),
    (5000, LoyaltyTier.GOLD),
    (9999, LoyaltyTier.GOLD),
    (10000, LoyaltyTier.PLATINUM),
    (250000, LoyaltyTier.PLATINUM),
])
def test_loyalty_tier_thresholds(points, expected):
    assert classify_loyalty_tier(points) == expected


@pytest.mark.parametrize("revenue, expected", [
    (Decimal("0"), SellerBadge.VERIFIED),
    (Decimal("149999.99"), SellerBadge.VERIFIED),
    (Decimal("150000"), SellerBadge.PRO),
    (Decimal("342330"), SellerBadge.PRO),
    (Decimal("500000"), SellerBadge.ELITE),
    (750000, SellerBadge.ELITE),
])
def test_seller_badge_thresholds(revenue, expected):
    assert classify_seller_badge(revenue) == expected


def test_loyalty_tier_is_monotonic():
    order = list(LoyaltyTier)
    ranks = [order.index(classify_loyalty_tier(p)) for p in range(0, 12001, 250)]
    assert ranks == sorted(ranks)


def test_classification_is_stable_for_repeated_calls():
    assert {classify_loyalty_tier(5000) for _ in range(10)} == {LoyaltyTier.GOLD}


def test_badges_and_tiers_are_independent():
    # 150000 points is Platinum, 150000 MAD is only Pro
    assert classify_loyalty_tier(150000) == LoyaltyTier.PLATINUM
    assert classify_seller_badge(150000) == SellerBadge.PRO


def test_next_labels():
    assert next_loyalty_tier(LoyaltyTier.SILVER) == (LoyaltyTier.GOLD, 5000)
    assert next_loyalty_tier(LoyaltyTier.PLATINUM) is None
    assert next_seller_badge(SellerBadge.PRO) == (SellerBadge.ELITE, Decimal("500000"))
    assert next_seller_badge(SellerBadge.ELITE) is None
