"""
Loyalty Points Ledger and Reward Redemption

This module provides:
- Append-only points ledger with a balance clamped at zero
- Tier classification from lifetime points (and seller badges from revenue)
- Reward catalog and redemption into pending claims
- Claim moderation: pending → approved → delivered, or pending → cancelled
- Audit trail of every moderation decision
"""

from .models import (
    TransactionType,
    RewardCategory,
    ClaimStatus,
    LoyaltyReward,
    PointsTransaction,
    ClaimedReward,
    LoyaltyUser,
    LoyaltyStorage,
)
from .tiers import LoyaltyTier, SellerBadge, classify_loyalty_tier, classify_seller_badge
from .catalog import RewardCatalog
from .service import LoyaltyService

__all__ = [
    "TransactionType",
    "RewardCategory",
    "ClaimStatus",
    "LoyaltyReward",
    "PointsTransaction",
    "ClaimedReward",
    "LoyaltyUser",
    "LoyaltyStorage",
    "LoyaltyTier",
    "SellerBadge",
    "classify_loyalty_tier",
    "classify_seller_badge",
    "RewardCatalog",
    "LoyaltyService",
]
