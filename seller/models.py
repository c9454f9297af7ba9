from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from loyalty.tiers import SellerBadge


class ListingStatus(str, Enum):
    LIVE = "Live"
    PENDING = "Pending"
    REJECTED = "Rejected"


class PriceBand(str, Enum):
    UP_TO_1000 = "0-1000"
    UP_TO_5000 = "1000-5000"
    OVER_5000 = "5000+"


class PayoutStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    PAID = "Paid"
    FAILED = "Failed"


PAYOUT_TRANSITIONS = {
    PayoutStatus.PENDING: {PayoutStatus.PROCESSING, PayoutStatus.FAILED},
    PayoutStatus.PROCESSING: {PayoutStatus.PAID, PayoutStatus.FAILED},
    PayoutStatus.FAILED: {PayoutStatus.PENDING},
    PayoutStatus.PAID: set(),
}


class SellerProfile(BaseModel):
    id: str
    name: str
    email: str
    badge: SellerBadge = SellerBadge.VERIFIED
    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    current_month_sales: Decimal = Decimal("0")
    currency: str = "MAD"


class SellerProduct(BaseModel):
    id: UUID
    seller_id: str
    title: str
    brand: str
    price: Decimal
    condition: str
    category: str
    status: ListingStatus = ListingStatus.PENDING
    image: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    date_added: datetime


class Payout(BaseModel):
    id: UUID
    seller_id: str
    order_id: str
    item: str
    buyer: str
    amount: Decimal
    status: PayoutStatus = PayoutStatus.PENDING
    created_at: datetime
    updated_at: Optional[datetime] = None

    def can_transition_to(self, status: PayoutStatus) -> bool:
        return status in PAYOUT_TRANSITIONS[self.status]


class RegisterSellerRequest(BaseModel):
    seller_id: str
    name: str
    email: str


class RecordSaleRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)


class AddProductRequest(BaseModel):
    title: str
    brand: str
    price: Decimal = Field(..., gt=0)
    condition: str
    category: str
    image: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class UpdateListingStatusRequest(BaseModel):
    status: ListingStatus


class AddPayoutRequest(BaseModel):
    order_id: str
    item: str
    buyer: str
    amount: Decimal = Field(..., gt=0)


class UpdatePayoutStatusRequest(BaseModel):
    status: PayoutStatus


class PayoutSummary(BaseModel):
    total_balance: Decimal
    pending: Decimal
    processing: Decimal
    paid: Decimal
    failed: Decimal


class SaleResult(BaseModel):
    seller: SellerProfile
    upgraded_to: Optional[SellerBadge] = None
    email_sent: bool = False


class BadgeProgress(BaseModel):
    current_badge: SellerBadge
    next_badge: Optional[SellerBadge] = None
    total_revenue: Decimal
    next_threshold: Optional[Decimal] = None
    progress_percent: float
    remaining_revenue: Decimal


class SellerStorage(BaseModel):
    sellers: dict[str, SellerProfile] = Field(default_factory=dict)
    products: list[SellerProduct] = Field(default_factory=list)
    payouts: list[Payout] = Field(default_factory=list)
