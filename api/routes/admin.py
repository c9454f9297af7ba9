from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from admin.models import AdminAction, AdminActionsResponse, BannedUser, BanUserRequest, UnbanUserRequest
from loyalty.models import (
    BulkApproveRequest,
    BulkApproveResponse,
    ClaimedReward,
    ClaimStatus,
    DateWindow,
    LoyaltyStats,
    PointsTransaction,
    UpdateClaimStatusRequest,
)
from referrals.models import AdminReferralStats, BlockInviteRequest, ReferralInvite, UnblockInviteRequest

from ..container import ServiceContainer
from . import get_services

router = APIRouter(prefix="/admin", tags=["Admin"])


# Loyalty moderation

@router.get("/loyalty/claims", response_model=list[ClaimedReward])
def list_claims(
    search: Optional[str] = None,
    status: Optional[str] = None,
    date_window: DateWindow = DateWindow.ALL,
    services: ServiceContainer = Depends(get_services),
):
    return services.loyalty.filter_claims(search, status, date_window)


@router.post("/loyalty/claims/{claim_id}/status", response_model=ClaimedReward)
def update_claim_status(
    claim_id: UUID, request: UpdateClaimStatusRequest, services: ServiceContainer = Depends(get_services)
):
    return services.loyalty.set_claim_status(claim_id, request.status, request.admin_id, request.notes)


@router.post("/loyalty/claims/bulk-approve", response_model=BulkApproveResponse)
def bulk_approve_claims(request: BulkApproveRequest, services: ServiceContainer = Depends(get_services)):
    view = services.loyalty.filter_claims(request.search, ClaimStatus.PENDING.value, request.date_window)
    return services.loyalty.bulk_approve(request.admin_id, view, request.notes)


@router.get("/loyalty/stats", response_model=LoyaltyStats)
def get_loyalty_stats(services: ServiceContainer = Depends(get_services)):
    return services.loyalty.get_stats()


@router.get("/loyalty/transactions", response_model=list[PointsTransaction])
def export_transactions(services: ServiceContainer = Depends(get_services)):
    return services.loyalty.list_transactions()


# Referral moderation

@router.get("/referrals/invites", response_model=list[ReferralInvite])
def list_invites(
    search: Optional[str] = None,
    status: Optional[str] = None,
    services: ServiceContainer = Depends(get_services),
):
    return services.referrals.filter_invites(search, status)


@router.get("/referrals/stats", response_model=AdminReferralStats)
def get_referral_stats(services: ServiceContainer = Depends(get_services)):
    return services.referrals.get_admin_stats()


@router.post("/referrals/invites/{invite_id}/block", response_model=ReferralInvite)
def block_invite(invite_id: UUID, request: BlockInviteRequest, services: ServiceContainer = Depends(get_services)):
    return services.referrals.block(invite_id, request.reason, request.admin_id)


@router.post("/referrals/invites/{invite_id}/unblock", response_model=ReferralInvite)
def unblock_invite(
    invite_id: UUID, request: UnblockInviteRequest, services: ServiceContainer = Depends(get_services)
):
    return services.referrals.unblock(invite_id, request.admin_id)


@router.post("/referrals/expire", response_model=list[ReferralInvite])
def expire_stale_invites(services: ServiceContainer = Depends(get_services)):
    return services.referrals.expire_stale()


# Audit trail and bans

@router.get("/actions", response_model=AdminActionsResponse)
def get_admin_actions(limit: int = 50, offset: int = 0, services: ServiceContainer = Depends(get_services)):
    return services.admin.get_actions(limit, offset)


@router.get("/actions/export", response_model=list[AdminAction])
def export_admin_actions(services: ServiceContainer = Depends(get_services)):
    return services.admin.list_actions()


@router.post("/users/{user_id}/ban", response_model=BannedUser)
def ban_user(user_id: str, request: BanUserRequest, services: ServiceContainer = Depends(get_services)):
    return services.admin.ban_user(user_id, request.user_email, request.reason, request.admin_id)


@router.post("/users/{user_id}/unban")
def unban_user(user_id: str, request: UnbanUserRequest, services: ServiceContainer = Depends(get_services)):
    return {"lifted": services.admin.unban_user(user_id, request.admin_id)}
