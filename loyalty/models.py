from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .tiers import LoyaltyTier, classify_loyalty_tier


class TransactionType(str, Enum):
    EARNED = "earned"
    REDEEMED = "redeemed"
    BONUS = "bonus"
    PENALTY = "penalty"


class RewardCategory(str, Enum):
    VOUCHER = "voucher"
    SERVICE = "service"
    MEMBERSHIP = "membership"
    GIFT_CARD = "gift_card"


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


CLAIM_TRANSITIONS: dict[ClaimStatus, frozenset[ClaimStatus]] = {
    ClaimStatus.PENDING: frozenset({ClaimStatus.APPROVED, ClaimStatus.CANCELLED}),
    ClaimStatus.APPROVED: frozenset({ClaimStatus.DELIVERED}),
    ClaimStatus.DELIVERED: frozenset(),
    ClaimStatus.CANCELLED: frozenset(),
}


class DateWindow(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class LoyaltyReward(BaseModel):
    id: str
    name: str
    description: str = ""
    points_cost: int = Field(..., gt=0)
    category: RewardCategory
    is_active: bool = True
    image_url: Optional[str] = None
    terms: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class PointsTransaction(BaseModel):
    id: UUID
    user_id: str
    username: Optional[str] = None
    type: TransactionType
    points: int
    balance_after: int
    description: str
    reference_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class ClaimedReward(BaseModel):
    id: UUID
    reward_id: str
    reward_name: str
    points_cost: int
    user_id: str
    username: Optional[str] = None
    claimed_at: datetime
    status: ClaimStatus = ClaimStatus.PENDING
    admin_notes: Optional[str] = None
    updated_at: Optional[datetime] = None

    def can_transition_to(self, status: ClaimStatus) -> bool:
        return status in CLAIM_TRANSITIONS[self.status]

    def is_terminal(self) -> bool:
        return not CLAIM_TRANSITIONS[self.status]


class LoyaltyUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    total_points: int = Field(default=0, ge=0)
    lifetime_points: int = Field(default=0, ge=0)
    joined_at: datetime

    @computed_field
    @property
    def tier(self) -> LoyaltyTier:
        return classify_loyalty_tier(self.lifetime_points)


class EnrollRequest(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None


class AddPointsRequest(BaseModel):
    points: int = Field(..., description="Signed delta; negative values debit")
    description: str
    reference_id: Optional[str] = None


class RedeemRequest(BaseModel):
    user_id: str
    reward_id: str


class UpdateClaimStatusRequest(BaseModel):
    status: ClaimStatus
    admin_id: str
    notes: Optional[str] = None


class BulkApproveRequest(BaseModel):
    admin_id: str
    search: Optional[str] = None
    date_window: DateWindow = DateWindow.ALL
    notes: str = "Bulk approved by admin"


class RedemptionResult(BaseModel):
    claim: ClaimedReward
    transaction: PointsTransaction
    user: LoyaltyUser
    email_sent: bool = False
    message: str


class PointsHistoryResponse(BaseModel):
    user_id: str
    transactions: list[PointsTransaction]
    total_count: int
    current_balance: int
    lifetime_points: int
    tier: LoyaltyTier


class BulkApproveResponse(BaseModel):
    approved: list[ClaimedReward]
    approved_count: int


class LoyaltyStats(BaseModel):
    total_rewards: int
    total_claimed: int
    pending_approval: int
    total_points_redeemed: int
    total_points_earned: int


class LoyaltyStorage(BaseModel):
    accounts: dict[str, LoyaltyUser] = Field(default_factory=dict)
    transactions: list[PointsTransaction] = Field(default_factory=list)
    claims: list[ClaimedReward] = Field(default_factory=list)
