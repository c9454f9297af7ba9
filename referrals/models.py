from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class InviteStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    CONVERTED = "converted"
    EXPIRED = "expired"
    BLOCKED = "blocked"


class ReferralCode(BaseModel):
    id: UUID
    code: str
    user_id: str
    user_email: str
    user_name: str
    created_at: datetime
    is_active: bool = True

    model_config = ConfigDict(frozen=True)


class ReferralUser(BaseModel):
    id: str
    email: str
    name: str
    referral_code: Optional[str] = None
    total_invites: int = 0
    converted_invites: int = 0
    total_rewards: int = 0
    conversion_rate: float = 0.0


class ReferralInvite(BaseModel):
    id: UUID
    referral_code: str
    inviter_user_id: str
    inviter_name: str
    inviter_email: str
    invitee_email: str
    status: InviteStatus = InviteStatus.PENDING
    sent_at: datetime
    verified_at: Optional[datetime] = None
    converted_at: Optional[datetime] = None
    verification_token: str
    rewards: int = 0
    is_blocked: bool = False
    block_reason: Optional[str] = None
    blocked_at: Optional[datetime] = None
    blocked_by: Optional[str] = None

    def can_convert(self) -> bool:
        return self.status in (InviteStatus.PENDING, InviteStatus.VERIFIED)

    def can_expire(self) -> bool:
        return self.status in (InviteStatus.PENDING, InviteStatus.VERIFIED)


class RegisterReferralUserRequest(BaseModel):
    user_id: str
    email: str
    name: str


class SendInviteRequest(BaseModel):
    inviter_id: str
    invitee_email: str = Field(..., description="Email address to invite")


class VerifyInviteRequest(BaseModel):
    code: str
    email: str
    token: str


class BlockInviteRequest(BaseModel):
    reason: str = Field(..., description="Reason for blocking")
    admin_id: str


class UnblockInviteRequest(BaseModel):
    admin_id: str


class InviteResponse(BaseModel):
    invite: ReferralInvite
    email_sent: bool = False
    message: str


class ReferralUserStats(BaseModel):
    total_invites: int
    pending_invites: int
    converted_invites: int
    total_rewards: int
    conversion_rate: float


class AdminReferralStats(BaseModel):
    total_codes: int
    total_invites: int
    total_conversions: int
    total_rewards: int
    conversion_rate: float
    top_referrers: list[ReferralUser]


class ReferralStorage(BaseModel):
    users: dict[str, ReferralUser] = Field(default_factory=dict)
    codes: list[ReferralCode] = Field(default_factory=list)
    invites: list[ReferralInvite] = Field(default_factory=list)
