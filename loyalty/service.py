import threading
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from uuid import UUID, uuid4

from loguru import logger

from admin.models import AdminActionType
from admin.service import AdminService
from core.errors import (
    InactiveRewardError,
    InsufficientBalanceError,
    InvalidTransitionError,
    NotFoundError,
)
from notifications.mailer import Mailer
from notifications.messages import loyalty_redemption_message

from .catalog import RewardCatalog
from .models import (
    BulkApproveResponse,
    ClaimedReward,
    ClaimStatus,
    DateWindow,
    LoyaltyStats,
    LoyaltyStorage,
    LoyaltyUser,
    PointsHistoryResponse,
    PointsTransaction,
    RedemptionResult,
    TransactionType,
)

CLAIM_ACTION_TYPES = {
    ClaimStatus.APPROVED: AdminActionType.APPROVE_REWARD,
    ClaimStatus.CANCELLED: AdminActionType.REJECT_REWARD,
    ClaimStatus.DELIVERED: AdminActionType.DELIVER_REWARD,
}

DATE_WINDOW_DAYS = {
    DateWindow.TODAY: 0,
    DateWindow.WEEK: 7,
    DateWindow.MONTH: 30,
}


def demo_storage() -> LoyaltyStorage:
    storage = LoyaltyStorage()
    user = LoyaltyUser(
        id="user_1",
        email="stephen@trendies.com",
        name="Stephen Neary",
        total_points=2400,
        lifetime_points=3200,
        joined_at=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
    )
    storage.accounts[user.id] = user

    history = [
        (TransactionType.EARNED, 500, "Referral conversion - friend1@example.com", "invite_1",
         datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)),
        (TransactionType.EARNED, 500, "Referral conversion - friend2@example.com", "invite_2",
         datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc)),
        (TransactionType.REDEEMED, -100, "Redeemed: Free 2h Return", "reward_2",
         datetime(2025, 1, 16, 10, 0, tzinfo=timezone.utc)),
    ]
    balance = user.total_points - sum(points for _, points, _, _, _ in history)
    for tx_type, points, description, reference_id, created_at in history:
        balance += points
        storage.transactions.append(PointsTransaction(
            id=uuid4(),
            user_id=user.id,
            username=user.name,
            type=tx_type,
            points=points,
            balance_after=balance,
            description=description,
            reference_id=reference_id,
            created_at=created_at,
        ))
    return storage


class LoyaltyService:
    def __init__(
        self,
        storage: Optional[LoyaltyStorage] = None,
        catalog: Optional[RewardCatalog] = None,
        admin: Optional[AdminService] = None,
        mailer: Optional[Mailer] = None,
        redeem_template_id: Optional[int] = None,
    ):
        self.storage = storage or LoyaltyStorage()
        self.catalog = catalog or RewardCatalog()
        self.admin = admin or AdminService()
        self.mailer = mailer
        self.redeem_template_id = redeem_template_id
        self._lock = threading.RLock()

    # Accounts

    def enroll(self, user_id: str, email: Optional[str] = None, name: Optional[str] = None) -> LoyaltyUser:
        with self._lock:
            account = self.storage.accounts.get(user_id)
            if account is None:
                account = LoyaltyUser(
                    id=user_id, email=email, name=name, joined_at=datetime.now(timezone.utc)
                )
                self.storage.accounts[user_id] = account
                logger.info("Enrolled loyalty user", user_id=user_id)
            elif email or name:
                account = account.model_copy(update={
                    "email": email or account.email,
                    "name": name or account.name,
                })
                self.storage.accounts[user_id] = account
            return account

    def get_account(self, user_id: str) -> LoyaltyUser:
        account = self.storage.accounts.get(user_id)
        if account is None:
            raise NotFoundError(f"Loyalty user {user_id} not found")
        return account

    # Ledger

    def add_points(
        self, user_id: str, points: int, description: str, reference_id: Optional[str] = None
    ) -> PointsTransaction:
        with self._lock:
            account = self.storage.accounts.get(user_id) or self.enroll(user_id)
            transaction, updated = self._apply_delta(account, points, description, reference_id)
            self._commit_delta(transaction, updated)
        return transaction

    def _apply_delta(
        self, account: LoyaltyUser, points: int, description: str, reference_id: Optional[str]
    ) -> tuple[PointsTransaction, LoyaltyUser]:
        # Overdraft is clamped at zero rather than rejected
        new_total = max(0, account.total_points + points)
        new_lifetime = account.lifetime_points + points if points > 0 else account.lifetime_points

        transaction = PointsTransaction(
            id=uuid4(),
            user_id=account.id,
            username=account.name,
            type=TransactionType.EARNED if points > 0 else TransactionType.REDEEMED,
            points=points,
            balance_after=new_total,
            description=description,
            reference_id=reference_id,
            created_at=datetime.now(timezone.utc),
        )
        updated = account.model_copy(update={"total_points": new_total, "lifetime_points": new_lifetime})
        return transaction, updated

    def _commit_delta(self, transaction: PointsTransaction, updated: LoyaltyUser) -> None:
        previous = self.storage.accounts.get(updated.id)
        self.storage.transactions.append(transaction)
        self.storage.accounts[updated.id] = updated

        if previous is not None and previous.tier != updated.tier:
            logger.info(
                "Loyalty tier changed",
                user_id=updated.id,
                from_tier=previous.tier.value,
                to_tier=updated.tier.value,
            )

    def get_points_history(self, user_id: str, limit: int = 50, offset: int = 0) -> PointsHistoryResponse:
        account = self.get_account(user_id)
        entries = [t for t in reversed(self.storage.transactions) if t.user_id == user_id]
        return PointsHistoryResponse(
            user_id=user_id,
            transactions=entries[offset:offset + limit],
            total_count=len(entries),
            current_balance=account.total_points,
            lifetime_points=account.lifetime_points,
            tier=account.tier,
        )

    def list_transactions(self) -> tuple[PointsTransaction, ...]:
        return tuple(self.storage.transactions)

    # Redemption

    def redeem(self, user_id: str, reward_id: str) -> RedemptionResult:
        reward = self.catalog.get(reward_id)
        if reward is None:
            raise NotFoundError(f"Reward {reward_id} not found")
        if not reward.is_active:
            raise InactiveRewardError(f"Reward {reward.name} is no longer available")

        with self._lock:
            account = self.storage.accounts.get(user_id)
            balance = account.total_points if account else 0
            if account is None or balance < reward.points_cost:
                raise InsufficientBalanceError(
                    f"Insufficient points: {reward.points_cost} required, {balance} available"
                )

            claim = ClaimedReward(
                id=uuid4(),
                reward_id=reward.id,
                reward_name=reward.name,
                points_cost=reward.points_cost,
                user_id=account.id,
                username=account.name,
                claimed_at=datetime.now(timezone.utc),
            )
            transaction, updated = self._apply_delta(
                account, -reward.points_cost, f"Redeemed: {reward.name}", reward.id
            )

            # Claim and debit land together or not at all
            self.storage.claims.append(claim)
            self._commit_delta(transaction, updated)

        logger.info(
            "Reward redeemed",
            user_id=user_id,
            reward_id=reward.id,
            claim_id=str(claim.id),
            points_cost=reward.points_cost,
            remaining_points=updated.total_points,
        )

        email_sent = False
        if self.mailer is not None and updated.email:
            result = self.mailer.send(loyalty_redemption_message(
                updated.email, updated.name, reward.name, updated.total_points, self.redeem_template_id
            ))
            email_sent = result.success
            if not result.success:
                logger.warning("Redemption email not sent", claim_id=str(claim.id), error=result.error)

        return RedemptionResult(
            claim=claim,
            transaction=transaction,
            user=updated,
            email_sent=email_sent,
            message="Reward claimed successfully! Check your email for confirmation.",
        )

    def get_user_claims(self, user_id: str) -> list[ClaimedReward]:
        return [c for c in reversed(self.storage.claims) if c.user_id == user_id]

    def list_claims(self) -> tuple[ClaimedReward, ...]:
        return tuple(self.storage.claims)

    def get_claim(self, claim_id: UUID) -> ClaimedReward:
        return self._find_claim(claim_id)[1]

    # Moderation

    def set_claim_status(
        self, claim_id: UUID, status: ClaimStatus, admin_id: str, notes: Optional[str] = None
    ) -> ClaimedReward:
        with self._lock:
            index, claim = self._find_claim(claim_id)
            if not claim.can_transition_to(status):
                raise InvalidTransitionError(
                    f"Cannot move claim from {claim.status.value} to {status.value}"
                )

            updated = claim.model_copy(update={
                "status": status,
                "admin_notes": notes if notes is not None else claim.admin_notes,
                "updated_at": datetime.now(timezone.utc),
            })
            self.storage.claims[index] = updated

            self.admin.record_action(
                CLAIM_ACTION_TYPES[status],
                str(claim.id),
                notes or f"Reward {status.value}",
                admin_id,
                metadata={
                    "reward_name": claim.reward_name,
                    "user_id": claim.user_id,
                    "username": claim.username,
                    "points_cost": claim.points_cost,
                },
            )

        logger.info(
            "Claim status updated",
            claim_id=str(claim.id),
            from_status=claim.status.value,
            to_status=status.value,
            admin_id=admin_id,
        )
        return updated

    def bulk_approve(
        self,
        admin_id: str,
        claims: Optional[Iterable[ClaimedReward]] = None,
        notes: str = "Bulk approved by admin",
    ) -> BulkApproveResponse:
        view = list(self.storage.claims if claims is None else claims)
        approved = []
        with self._lock:
            for claim in view:
                # Re-read so a stale view cannot approve an already moderated claim
                _, current = self._find_claim(claim.id)
                if current.status != ClaimStatus.PENDING:
                    continue
                approved.append(self.set_claim_status(current.id, ClaimStatus.APPROVED, admin_id, notes))

        logger.info("Bulk approved claims", count=len(approved), admin_id=admin_id)
        return BulkApproveResponse(approved=approved, approved_count=len(approved))

    def filter_claims(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        date_window: DateWindow = DateWindow.ALL,
        now: Optional[datetime] = None,
    ) -> list[ClaimedReward]:
        now = now or datetime.now(timezone.utc)
        needle = search.lower() if search else None
        max_days = DATE_WINDOW_DAYS.get(date_window)

        results = []
        for claim in reversed(self.storage.claims):
            if needle and needle not in claim.reward_name.lower() and needle not in claim.user_id.lower():
                continue
            if status and status != "all" and claim.status.value != status:
                continue
            if max_days is not None and (now - claim.claimed_at) // timedelta(days=1) > max_days:
                continue
            results.append(claim)
        return results

    def get_stats(self) -> LoyaltyStats:
        claims = self.storage.claims
        return LoyaltyStats(
            total_rewards=len(self.catalog),
            total_claimed=len(claims),
            pending_approval=sum(1 for c in claims if c.status == ClaimStatus.PENDING),
            total_points_redeemed=sum(c.points_cost for c in claims),
            total_points_earned=sum(
                t.points for t in self.storage.transactions if t.type == TransactionType.EARNED
            ),
        )

    def _find_claim(self, claim_id: UUID) -> tuple[int, ClaimedReward]:
        for index, claim in enumerate(self.storage.claims):
            if claim.id == claim_id:
                return index, claim
        raise NotFoundError(f"Claim {claim_id} not found")
