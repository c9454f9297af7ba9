"""
Admin back-office

Append-only audit trail of moderation decisions plus user bans.
"""

from .models import AdminActionType, AdminAction, BannedUser, AdminStorage
from .service import AdminService

__all__ = [
    "AdminActionType",
    "AdminAction",
    "BannedUser",
    "AdminStorage",
    "AdminService",
]
