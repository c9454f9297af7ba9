"""
Threshold tables for loyalty tiers and seller revenue badges.

The two classifiers are independent: loyalty tiers are driven by lifetime
points, seller badges by lifetime revenue in MAD.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class LoyaltyTier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class SellerBadge(str, Enum):
    VERIFIED = "Verified"
    PRO = "Pro"
    ELITE = "Elite"


# Ascending by threshold
LOYALTY_TIER_THRESHOLDS: tuple[tuple[LoyaltyTier, int], ...] = (
    (LoyaltyTier.BRONZE, 0),
    (LoyaltyTier.SILVER, 2000),
    (LoyaltyTier.GOLD, 5000),
    (LoyaltyTier.PLATINUM, 10000),
)

SELLER_BADGE_THRESHOLDS: tuple[tuple[SellerBadge, Decimal], ...] = (
    (SellerBadge.VERIFIED, Decimal("0")),
    (SellerBadge.PRO, Decimal("150000")),
    (SellerBadge.ELITE, Decimal("500000")),
)

Number = Union[int, Decimal]


def _classify(value: Number, table):
    label = table[0][0]
    for candidate, threshold in table:
        if value >= threshold:
            label = candidate
    return label


def _next(label, table):
    labels = [entry[0] for entry in table]
    index = labels.index(label)
    if index + 1 < len(table):
        return table[index + 1]
    return None


def classify_loyalty_tier(lifetime_points: int) -> LoyaltyTier:
    return _classify(lifetime_points, LOYALTY_TIER_THRESHOLDS)


def classify_seller_badge(revenue: Number) -> SellerBadge:
    return _classify(Decimal(revenue), SELLER_BADGE_THRESHOLDS)


def next_loyalty_tier(tier: LoyaltyTier) -> Optional[tuple[LoyaltyTier, int]]:
    return _next(tier, LOYALTY_TIER_THRESHOLDS)


def next_seller_badge(badge: SellerBadge) -> Optional[tuple[SellerBadge, Decimal]]:
    return _next(badge, SELLER_BADGE_THRESHOLDS)


def badge_rank(badge: SellerBadge) -> int:
    return [entry[0] for entry in SELLER_BADGE_THRESHOLDS].index(badge)
