from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AdminActionType(str, Enum):
    BLOCK_REFERRAL = "block_referral"
    UNBLOCK_REFERRAL = "unblock_referral"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    APPROVE_REWARD = "approve_reward"
    REJECT_REWARD = "reject_reward"
    DELIVER_REWARD = "deliver_reward"


class AdminAction(BaseModel):
    id: UUID
    type: AdminActionType
    target_id: str
    reason: str
    performed_by: str
    performed_at: datetime
    metadata: Optional[dict[str, Any]] = None

    model_config = ConfigDict(frozen=True)


class BannedUser(BaseModel):
    id: UUID
    user_id: str
    user_email: str
    reason: str
    banned_at: datetime
    banned_by: str
    is_active: bool = True


class BanUserRequest(BaseModel):
    user_email: str
    reason: str = Field(..., description="Reason for the ban")
    admin_id: str


class UnbanUserRequest(BaseModel):
    admin_id: str


class AdminActionsResponse(BaseModel):
    actions: list[AdminAction]
    total_count: int


class AdminStorage(BaseModel):
    actions: list[AdminAction] = Field(default_factory=list)
    banned_users: list[BannedUser] = Field(default_factory=list)
