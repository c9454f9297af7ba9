"""
Referral Program

Invite lifecycle: pending → verified → converted, with admin block/unblock
(blocked ⇄ pending) and time-based expiry. Converted invites credit a fixed
bounty into the inviter's loyalty ledger exactly once.
"""

from .models import (
    InviteStatus,
    ReferralCode,
    ReferralInvite,
    ReferralUser,
    ReferralStorage,
)
from .service import ReferralService

__all__ = [
    "InviteStatus",
    "ReferralCode",
    "ReferralInvite",
    "ReferralUser",
    "ReferralStorage",
    "ReferralService",
]
