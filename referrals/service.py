import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from loguru import logger

from admin.models import AdminActionType
from admin.service import AdminService
from core.errors import (
    AlreadyInvitedError,
    AlreadyProcessedError,
    InvalidTransitionError,
    NotFoundError,
)
from notifications.mailer import Mailer
from notifications.messages import (
    referral_converted_message,
    referral_invite_message,
    referral_link,
    referral_verification_message,
)

from .models import (
    AdminReferralStats,
    InviteResponse,
    InviteStatus,
    ReferralCode,
    ReferralInvite,
    ReferralStorage,
    ReferralUser,
    ReferralUserStats,
)

if TYPE_CHECKING:
    from loyalty.service import LoyaltyService

DEFAULT_BOUNTY = 500
DEFAULT_INVITE_TTL = timedelta(days=30)
CODE_SUFFIX_SPACE = 10000


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _conversion_rate(converted: int, total: int) -> float:
    return (converted / total) * 100 if total > 0 else 0.0


def demo_storage() -> ReferralStorage:
    storage = ReferralStorage()
    for user in (
        ReferralUser(id="user_1", email="stephen@trendies.com", name="Stephen Johnson",
                     referral_code="REF-STEPHEN2025", total_invites=2, converted_invites=1,
                     total_rewards=DEFAULT_BOUNTY, conversion_rate=50.0),
        ReferralUser(id="user_2", email="sarah@trendies.com", name="Sarah Wilson",
                     referral_code="REF-SARAH2025"),
        ReferralUser(id="user_3", email="mike@trendies.com", name="Mike Chen",
                     referral_code="REF-MIKE2025"),
    ):
        storage.users[user.id] = user
        storage.codes.append(ReferralCode(
            id=uuid4(),
            code=user.referral_code,
            user_id=user.id,
            user_email=user.email,
            user_name=user.name,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        ))

    storage.invites.append(ReferralInvite(
        id=uuid4(),
        referral_code="REF-STEPHEN2025",
        inviter_user_id="user_1",
        inviter_name="Stephen Johnson",
        inviter_email="stephen@trendies.com",
        invitee_email="friend1@example.com",
        status=InviteStatus.CONVERTED,
        sent_at=datetime(2025, 1, 10, 10, 0, tzinfo=timezone.utc),
        verified_at=datetime(2025, 1, 10, 11, 0, tzinfo=timezone.utc),
        converted_at=datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc),
        verification_token="token_123",
        rewards=DEFAULT_BOUNTY,
    ))
    storage.invites.append(ReferralInvite(
        id=uuid4(),
        referral_code="REF-STEPHEN2025",
        inviter_user_id="user_1",
        inviter_name="Stephen Johnson",
        inviter_email="stephen@trendies.com",
        invitee_email="friend2@example.com",
        sent_at=datetime.now(timezone.utc) - timedelta(days=2),
        verification_token="token_456",
    ))
    return storage


class ReferralService:
    def __init__(
        self,
        storage: Optional[ReferralStorage] = None,
        loyalty: Optional["LoyaltyService"] = None,
        admin: Optional[AdminService] = None,
        mailer: Optional[Mailer] = None,
        bounty: int = DEFAULT_BOUNTY,
        invite_ttl: timedelta = DEFAULT_INVITE_TTL,
        app_base_url: str = "http://localhost:3000",
        invite_template_id: Optional[int] = None,
    ):
        self.storage = storage or ReferralStorage()
        self.loyalty = loyalty
        self.admin = admin or AdminService()
        self.mailer = mailer
        self.bounty = bounty
        self.invite_ttl = invite_ttl
        self.app_base_url = app_base_url
        self.invite_template_id = invite_template_id
        self._lock = threading.RLock()

    # Users and codes

    def register_user(self, user_id: str, email: str, name: str) -> ReferralUser:
        with self._lock:
            user = self.storage.users.get(user_id)
            if user is None:
                user = ReferralUser(id=user_id, email=_normalize_email(email), name=name)
                self.storage.users[user_id] = user
                logger.info("Registered referral user", user_id=user_id)
            return user

    def get_user(self, user_id: str) -> ReferralUser:
        user = self.storage.users.get(user_id)
        if user is None:
            raise NotFoundError(f"Referral user {user_id} not found")
        return user

    def generate_code(self, user_id: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        with self._lock:
            user = self.get_user(user_id)
            name_part = (user.name.split(" ")[0] if user.name.strip() else "USER").upper()
            suffix = int(str(int(now.timestamp() * 1000))[-4:])

            taken = {c.code for c in self.storage.codes}
            code = f"REF-{name_part}{suffix:04d}"
            attempts = 0
            while code in taken:
                attempts += 1
                if attempts < CODE_SUFFIX_SPACE:
                    suffix = (suffix + 1) % CODE_SUFFIX_SPACE
                    code = f"REF-{name_part}{suffix:04d}"
                else:
                    # Every four-digit suffix for this name is issued
                    code = f"REF-{name_part}{secrets.randbelow(10 ** 8):08d}"

            for i, existing in enumerate(self.storage.codes):
                if existing.user_id == user_id and existing.is_active:
                    self.storage.codes[i] = existing.model_copy(update={"is_active": False})

            self.storage.codes.append(ReferralCode(
                id=uuid4(),
                code=code,
                user_id=user.id,
                user_email=user.email,
                user_name=user.name,
                created_at=now,
            ))
            self.storage.users[user_id] = user.model_copy(update={"referral_code": code})

        logger.info("Generated referral code", user_id=user_id, code=code)
        return code

    def list_codes(self) -> tuple[ReferralCode, ...]:
        return tuple(self.storage.codes)

    # Invite lifecycle

    def send_invite(self, inviter_id: str, invitee_email: str) -> InviteResponse:
        invitee_email = _normalize_email(invitee_email)
        with self._lock:
            inviter = self.get_user(inviter_id)
            if any(
                inv.inviter_user_id == inviter_id and inv.invitee_email == invitee_email
                for inv in self.storage.invites
            ):
                raise AlreadyInvitedError("This email has already been invited.")

            if not inviter.referral_code:
                self.generate_code(inviter_id)
                inviter = self.get_user(inviter_id)

            invite = ReferralInvite(
                id=uuid4(),
                referral_code=inviter.referral_code,
                inviter_user_id=inviter.id,
                inviter_name=inviter.name,
                inviter_email=inviter.email,
                invitee_email=invitee_email,
                sent_at=datetime.now(timezone.utc),
                verification_token=secrets.token_hex(8),
            )
            self.storage.invites.append(invite)

            total = inviter.total_invites + 1
            self.storage.users[inviter.id] = inviter.model_copy(update={
                "total_invites": total,
                "conversion_rate": _conversion_rate(inviter.converted_invites, total),
            })

        logger.info(
            "Issued referral invite",
            invite_id=str(invite.id),
            code=invite.referral_code,
            inviter_id=inviter_id,
        )

        email_sent = False
        if self.mailer is not None:
            link = referral_link(
                self.app_base_url, invite.referral_code, invite.invitee_email, invite.verification_token
            )
            result = self.mailer.send(referral_invite_message(
                inviter.name, invite.invitee_email, invite.referral_code, link, self.invite_template_id
            ))
            email_sent = result.success
            if not result.success:
                logger.warning("Invite email not sent", invite_id=str(invite.id), error=result.error)

        return InviteResponse(
            invite=invite, email_sent=email_sent, message="Referral invitation sent successfully!"
        )

    def verify(self, code: str, email: str, token: str) -> ReferralInvite:
        email = _normalize_email(email)
        with self._lock:
            for index, invite in enumerate(self.storage.invites):
                if (
                    invite.referral_code == code
                    and invite.invitee_email == email
                    and invite.verification_token == token
                ):
                    break
            else:
                logger.warning("Referral verification failed", code=code)
                raise NotFoundError("Invalid referral code or verification token.")

            invite = self._expire_if_stale(index, invite, datetime.now(timezone.utc))
            if invite.status != InviteStatus.PENDING:
                raise AlreadyProcessedError("This referral has already been processed.")

            verified = invite.model_copy(update={
                "status": InviteStatus.VERIFIED,
                "verified_at": datetime.now(timezone.utc),
            })
            self.storage.invites[index] = verified

        logger.info("Referral verified", invite_id=str(verified.id), code=code)
        return verified

    def convert(self, invite_id: UUID) -> ReferralInvite:
        with self._lock:
            index, invite = self._find_invite(invite_id)
            if invite.status == InviteStatus.CONVERTED:
                logger.info("Referral already converted", invite_id=str(invite_id))
                return invite
            invite = self._expire_if_stale(index, invite, datetime.now(timezone.utc))
            if not invite.can_convert():
                raise InvalidTransitionError(f"Cannot convert a {invite.status.value} referral")

            converted = invite.model_copy(update={
                "status": InviteStatus.CONVERTED,
                "converted_at": datetime.now(timezone.utc),
                "rewards": self.bounty,
            })
            self.storage.invites[index] = converted

            inviter = self.storage.users.get(invite.inviter_user_id)
            if inviter is not None:
                converted_count = inviter.converted_invites + 1
                self.storage.users[inviter.id] = inviter.model_copy(update={
                    "converted_invites": converted_count,
                    "total_rewards": inviter.total_rewards + self.bounty,
                    "conversion_rate": _conversion_rate(converted_count, inviter.total_invites),
                })

            if self.loyalty is not None:
                self.loyalty.enroll(invite.inviter_user_id, invite.inviter_email, invite.inviter_name)
                self.loyalty.add_points(
                    invite.inviter_user_id,
                    self.bounty,
                    f"Referral conversion - {invite.invitee_email}",
                    reference_id=str(invite.id),
                )

        logger.info(
            "Referral converted",
            invite_id=str(invite_id),
            inviter_id=invite.inviter_user_id,
            rewards=self.bounty,
        )

        if self.mailer is not None:
            result = self.mailer.send(
                referral_converted_message(invite.inviter_email, invite.invitee_email, self.bounty)
            )
            if not result.success:
                logger.warning("Conversion email not sent", invite_id=str(invite_id), error=result.error)

            result = self.mailer.send(
                referral_verification_message(invite.invitee_email, invite.referral_code, invite.inviter_name)
            )
            if not result.success:
                logger.warning("Welcome email not sent", invite_id=str(invite_id), error=result.error)

        return converted

    def complete_signup(self, email: str, referral_code: str) -> bool:
        """Convert the invite tied to a new seller's signup, if there is one."""
        email = _normalize_email(email)
        now = datetime.now(timezone.utc)
        with self._lock:
            for index, invite in enumerate(self.storage.invites):
                if invite.referral_code != referral_code or invite.invitee_email != email:
                    continue
                invite = self._expire_if_stale(index, invite, now)
                if invite.can_convert():
                    self.convert(invite.id)
                    return True
        return False

    # Moderation

    def block(self, invite_id: UUID, reason: str, admin_id: str) -> ReferralInvite:
        with self._lock:
            index, invite = self._find_invite(invite_id)
            if invite.status == InviteStatus.CONVERTED:
                raise InvalidTransitionError("Cannot block a converted referral")

            blocked = invite.model_copy(update={
                "status": InviteStatus.BLOCKED,
                "is_blocked": True,
                "block_reason": reason,
                "blocked_at": datetime.now(timezone.utc),
                "blocked_by": admin_id,
            })
            self.storage.invites[index] = blocked
            self.admin.record_action(
                AdminActionType.BLOCK_REFERRAL,
                str(invite_id),
                reason,
                admin_id,
                metadata={"invitee_email": invite.invitee_email, "previous_status": invite.status.value},
            )
        return blocked

    def unblock(self, invite_id: UUID, admin_id: str) -> ReferralInvite:
        with self._lock:
            index, invite = self._find_invite(invite_id)
            if invite.status != InviteStatus.BLOCKED:
                return invite

            # Unblocking restarts the invite; any earlier verification is dropped
            restored = invite.model_copy(update={
                "status": InviteStatus.PENDING,
                "is_blocked": False,
                "block_reason": None,
                "blocked_at": None,
                "blocked_by": None,
                "verified_at": None,
            })
            self.storage.invites[index] = restored
            self.admin.record_action(
                AdminActionType.UNBLOCK_REFERRAL, str(invite_id), "Referral unblocked", admin_id
            )
        return restored

    def expire_stale(self, now: Optional[datetime] = None) -> list[ReferralInvite]:
        now = now or datetime.now(timezone.utc)
        expired = []
        with self._lock:
            for index, invite in enumerate(self.storage.invites):
                updated = self._expire_if_stale(index, invite, now)
                if updated is not invite:
                    expired.append(updated)

        if expired:
            logger.info("Expired stale referral invites", count=len(expired))
        return expired

    # Queries

    def get_invite(self, invite_id: UUID) -> ReferralInvite:
        return self._find_invite(invite_id)[1]

    def list_invites(self) -> tuple[ReferralInvite, ...]:
        return tuple(self.storage.invites)

    def filter_invites(self, search: Optional[str] = None, status: Optional[str] = None) -> list[ReferralInvite]:
        needle = search.lower() if search else None
        results = []
        for invite in self.storage.invites:
            if needle and not any(
                needle in field.lower()
                for field in (invite.inviter_email, invite.invitee_email, invite.referral_code)
            ):
                continue
            if status and status != "all" and invite.status.value != status:
                continue
            results.append(invite)
        return results

    def get_user_stats(self, user_id: str) -> ReferralUserStats:
        invites = [inv for inv in self.storage.invites if inv.inviter_user_id == user_id]
        converted = sum(1 for inv in invites if inv.status == InviteStatus.CONVERTED)
        return ReferralUserStats(
            total_invites=len(invites),
            pending_invites=sum(1 for inv in invites if inv.status == InviteStatus.PENDING),
            converted_invites=converted,
            total_rewards=sum(inv.rewards for inv in invites),
            conversion_rate=_conversion_rate(converted, len(invites)),
        )

    def get_admin_stats(self, top: int = 5) -> AdminReferralStats:
        invites = self.storage.invites
        conversions = sum(1 for inv in invites if inv.status == InviteStatus.CONVERTED)
        top_referrers = sorted(self.storage.users.values(), key=lambda u: u.total_rewards, reverse=True)
        return AdminReferralStats(
            total_codes=len(self.storage.codes),
            total_invites=len(invites),
            total_conversions=conversions,
            total_rewards=sum(inv.rewards for inv in invites),
            conversion_rate=_conversion_rate(conversions, len(invites)),
            top_referrers=top_referrers[:top],
        )

    def _expire_if_stale(self, index: int, invite: ReferralInvite, now: datetime) -> ReferralInvite:
        if not invite.can_expire() or now - invite.sent_at < self.invite_ttl:
            return invite
        expired = invite.model_copy(update={"status": InviteStatus.EXPIRED})
        self.storage.invites[index] = expired
        logger.info("Referral invite expired", invite_id=str(invite.id))
        return expired

    def _find_invite(self, invite_id: UUID) -> tuple[int, ReferralInvite]:
        for index, invite in enumerate(self.storage.invites):
            if invite.id == invite_id:
                return index, invite
        raise NotFoundError(f"Referral invite {invite_id} not found")
