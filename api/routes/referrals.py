from uuid import UUID

from fastapi import APIRouter, Depends, status

from referrals.models import (
    InviteResponse,
    ReferralInvite,
    ReferralUser,
    ReferralUserStats,
    RegisterReferralUserRequest,
    SendInviteRequest,
    VerifyInviteRequest,
)

from ..container import ServiceContainer
from . import get_services

router = APIRouter(prefix="/referrals", tags=["Referrals"])


@router.post("/users", response_model=ReferralUser, status_code=status.HTTP_201_CREATED)
def register_user(request: RegisterReferralUserRequest, services: ServiceContainer = Depends(get_services)):
    return services.referrals.register_user(request.user_id, request.email, request.name)


@router.post("/users/{user_id}/code")
def generate_code(user_id: str, services: ServiceContainer = Depends(get_services)):
    return {"code": services.referrals.generate_code(user_id)}


@router.get("/users/{user_id}/stats", response_model=ReferralUserStats)
def get_user_stats(user_id: str, services: ServiceContainer = Depends(get_services)):
    return services.referrals.get_user_stats(user_id)


@router.post("/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
def send_invite(request: SendInviteRequest, services: ServiceContainer = Depends(get_services)):
    return services.referrals.send_invite(request.inviter_id, request.invitee_email)


@router.post("/verify", response_model=ReferralInvite)
def verify_invite(request: VerifyInviteRequest, services: ServiceContainer = Depends(get_services)):
    return services.referrals.verify(request.code, request.email, request.token)


@router.post("/invites/{invite_id}/convert", response_model=ReferralInvite)
def convert_invite(invite_id: UUID, services: ServiceContainer = Depends(get_services)):
    return services.referrals.convert(invite_id)
