"""Thin forwarders kept for the dashboard's transactional email calls."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import MissingFieldError
from notifications.messages import loyalty_redemption_message, referral_invite_message

from ..container import ServiceContainer
from . import get_services

router = APIRouter(tags=["Mail"])


class ForwardRequest(BaseModel):
    def require(self, *fields: str) -> None:
        missing = [name for name in fields if not getattr(self, name)]
        if missing:
            raise MissingFieldError(missing)


class RedeemEmailRequest(ForwardRequest):
    username: Optional[str] = None
    toEmail: Optional[str] = None
    rewardName: Optional[str] = None
    remainingPoints: Optional[int] = None


class ReferralEmailRequest(ForwardRequest):
    inviteEmail: Optional[str] = None
    referralCode: Optional[str] = None


class SignupRequest(ForwardRequest):
    email: Optional[str] = None
    password: Optional[str] = None
    referralCode: Optional[str] = None


@router.post("/redeem")
def forward_redeem_email(request: RedeemEmailRequest, services: ServiceContainer = Depends(get_services)):
    request.require("toEmail", "rewardName")
    result = services.mailer.send(loyalty_redemption_message(
        request.toEmail,
        request.username,
        request.rewardName,
        request.remainingPoints or 0,
        services.settings.brevo_redeem_template_id,
    ))
    return {"success": result.success, "messageId": result.message_id}


@router.post("/sendReferral")
def forward_referral_email(request: ReferralEmailRequest, services: ServiceContainer = Depends(get_services)):
    request.require("inviteEmail", "referralCode")
    link = f"{services.settings.app_base_url.rstrip('/')}/invite/{request.referralCode}"
    result = services.mailer.send(referral_invite_message(
        "A Trendies seller",
        request.inviteEmail,
        request.referralCode,
        link,
        services.settings.brevo_referral_template_id,
    ))
    return {"success": result.success, "messageId": result.message_id}


@router.post("/signup")
def signup(request: SignupRequest, services: ServiceContainer = Depends(get_services)):
    request.require("email", "password")
    converted = False
    if request.referralCode:
        converted = services.referrals.complete_signup(request.email, request.referralCode)
    return {"success": True, "referralConverted": converted}
