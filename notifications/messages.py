"""Message builders for each transactional email the services send."""

from decimal import Decimal
from typing import Optional
from urllib.parse import quote

from .models import MailMessage, MailType


def referral_link(base_url: str, referral_code: str, invitee_email: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/invite/{referral_code}?email={quote(invitee_email)}&token={token}"


def referral_invite_message(
    inviter_name: str,
    invitee_email: str,
    referral_code: str,
    verification_link: str,
    template_id: Optional[int] = None,
) -> MailMessage:
    return MailMessage(
        to=invitee_email,
        subject=f"{inviter_name} invited you to join Trendies as a seller",
        type=MailType.REFERRAL_INVITE,
        text_content=(
            f"{inviter_name} has invited you to join Trendies as a seller.\n"
            f"Your referral code: {referral_code}\n"
            f"Join now: {verification_link}"
        ),
        template_id=template_id,
        params={"REFERRAL_CODE": referral_code, "VERIFICATION_LINK": verification_link},
        metadata={"referral_code": referral_code},
    )


def referral_converted_message(inviter_email: str, invitee_email: str, bounty: int) -> MailMessage:
    return MailMessage(
        to=inviter_email,
        subject=f"Your referral {invitee_email} just joined Trendies!",
        type=MailType.REFERRAL_CONVERTED,
        text_content=(
            f"{invitee_email} has joined Trendies using your referral link. "
            f"You've earned {bounty} points in referral rewards!"
        ),
        metadata={"invitee_email": invitee_email, "rewards": bounty},
    )


def referral_verification_message(invitee_email: str, referral_code: str, inviter_name: str) -> MailMessage:
    return MailMessage(
        to=invitee_email,
        subject=f"Welcome to Trendies! Your referral with code {referral_code} is confirmed",
        type=MailType.REFERRAL_VERIFICATION,
        text_content=(
            f"Welcome to Trendies! Your referral using code {referral_code} from {inviter_name} "
            "has been confirmed. You'll receive access to your seller dashboard within 24 hours."
        ),
        metadata={"referral_code": referral_code, "inviter_name": inviter_name},
    )


def loyalty_redemption_message(
    to_email: str,
    username: Optional[str],
    reward_name: str,
    remaining_points: int,
    template_id: Optional[int] = None,
) -> MailMessage:
    return MailMessage(
        to=to_email,
        subject=f"Your reward is on its way: {reward_name}",
        type=MailType.LOYALTY_REDEMPTION,
        text_content=(
            f"Hi {username or 'there'}, you redeemed {reward_name}. "
            f"Remaining balance: {remaining_points} points."
        ),
        template_id=template_id,
        params={"username": username, "rewardName": reward_name, "remainingPoints": remaining_points},
    )


def badge_upgrade_message(seller_email: str, badge: str, revenue: Decimal) -> MailMessage:
    return MailMessage(
        to=seller_email,
        subject=f"Congratulations! You've been upgraded to {badge}",
        type=MailType.BADGE_UPGRADE,
        text_content=(
            f"Your seller status has been upgraded to {badge}. "
            "You now have access to enhanced features and benefits."
        ),
        metadata={"badge": badge, "total_revenue": str(revenue)},
    )
