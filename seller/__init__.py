"""Seller revenue tracking, badge progression (Verified → Pro → Elite), listings and payouts."""

from .models import (
    BadgeProgress,
    ListingStatus,
    Payout,
    PayoutStatus,
    PayoutSummary,
    PriceBand,
    SaleResult,
    SellerProduct,
    SellerProfile,
    SellerStorage,
)
from .service import SellerService

__all__ = [
    "BadgeProgress",
    "ListingStatus",
    "Payout",
    "PayoutStatus",
    "PayoutSummary",
    "PriceBand",
    "SaleResult",
    "SellerProduct",
    "SellerProfile",
    "SellerStorage",
    "SellerService",
]
