from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class MailType(str, Enum):
    REFERRAL_INVITE = "referral_invite"
    REFERRAL_VERIFICATION = "referral_verification"
    REFERRAL_CONVERTED = "referral_converted"
    LOYALTY_REDEMPTION = "loyalty_redemption"
    BADGE_UPGRADE = "badge_upgrade"


class MailMessage(BaseModel):
    to: str
    subject: str
    type: MailType
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    template_id: Optional[int] = None
    params: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)


class DispatchResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
