"""
Unit Tests for the Points Ledger

Tests cover:
1. Earning and debiting points
2. Clamping the spendable balance at zero
3. Lifetime points and tier recomputation
4. History ordering and pagination
"""

import pytest

from core.errors import NotFoundError
from loyalty.models import TransactionType
from loyalty.service import LoyaltyService, demo_storage
from loyalty.tiers import LoyaltyTier


USER_ID = "user_42"


def replay(deltas):
    total, lifetime = 0, 0
    for delta in deltas:
        total = max(0, total + delta)
        if delta > 0:
            lifetime += delta
    return total, lifetime


class TestAddPoints:
    """Tests for crediting and debiting the ledger."""

    def test_credit_creates_earned_transaction(self):
        """Test a positive delta is recorded as earned."""
        service = LoyaltyService()
        service.enroll(USER_ID, "seller@example.com", "Amina Seller")

        transaction = service.add_points(USER_ID, 500, "Referral conversion - friend@example.com", "invite_9")

        assert transaction.type == TransactionType.EARNED
        assert transaction.points == 500
        assert transaction.balance_after == 500
        assert transaction.reference_id == "invite_9"
        assert transaction.username == "Amina Seller"

        account = service.get_account(USER_ID)
        assert account.total_points == 500
        assert account.lifetime_points == 500

    def test_debit_creates_redeemed_transaction(self):
        """Test a negative delta is recorded as redeemed and leaves lifetime untouched."""
        service = LoyaltyService()
        service.add_points(USER_ID, 800, "Welcome bonus")

        transaction = service.add_points(USER_ID, -300, "Manual correction")

        assert transaction.type == TransactionType.REDEEMED
        assert transaction.points == -300

        account = service.get_account(USER_ID)
        assert account.total_points == 500
        assert account.lifetime_points == 800

    def test_overdraft_is_clamped_at_zero(self):
        """Test a debit larger than the balance clamps to zero instead of failing."""
        service = LoyaltyService()
        service.add_points(USER_ID, 100, "Small credit")

        transaction = service.add_points(USER_ID, -250, "Oversized debit")

        assert transaction.points == -250
        assert transaction.balance_after == 0
        assert service.get_account(USER_ID).total_points == 0

    def test_unknown_user_gets_account_on_first_credit(self):
        """Test crediting an unknown user opens an account."""
        service = LoyaltyService()

        service.add_points("new_user", 50, "First sale")

        assert service.get_account("new_user").total_points == 50

    def test_get_account_unknown_user_fails(self):
        """Test looking up an unknown account raises NotFoundError."""
        service = LoyaltyService()

        with pytest.raises(NotFoundError):
            service.get_account("ghost")


class TestLedgerReplay:
    """Tests for the replay properties of the ledger."""

    @pytest.mark.parametrize("deltas", [
        [100, 200, -50],
        [100, -500, 300],
        [-10, -20, 5000, -4999],
        [2000, 3000, -4000, 5000],
    ])
    def test_balance_matches_clamped_running_sum(self, deltas):
        """Test balance and lifetime equal the clamped replay of all deltas."""
        service = LoyaltyService()
        for delta in deltas:
            service.add_points(USER_ID, delta, "Replay step")

        expected_total, expected_lifetime = replay(deltas)
        account = service.get_account(USER_ID)
        assert account.total_points == expected_total
        assert account.lifetime_points == expected_lifetime
        assert len(service.list_transactions()) == len(deltas)

    def test_lifetime_never_decreases(self):
        """Test lifetime points are monotonic across debits."""
        service = LoyaltyService()
        seen = []
        for delta in [300, -100, 700, -900, 50]:
            service.add_points(USER_ID, delta, "Step")
            seen.append(service.get_account(USER_ID).lifetime_points)

        assert seen == sorted(seen)


class TestTierRecomputation:
    """Tests for tier changes driven by lifetime points."""

    def test_tier_follows_lifetime_points(self):
        """Test crossing a threshold moves the user up a tier."""
        service = LoyaltyService()
        service.add_points(USER_ID, 1999, "Almost silver")
        assert service.get_account(USER_ID).tier == LoyaltyTier.BRONZE

        service.add_points(USER_ID, 1, "Exactly silver")
        assert service.get_account(USER_ID).tier == LoyaltyTier.SILVER

    def test_spending_does_not_drop_tier(self):
        """Test spending points keeps the tier earned from lifetime points."""
        service = LoyaltyService()
        service.add_points(USER_ID, 5000, "Big sale")
        service.add_points(USER_ID, -4900, "Big redemption")

        account = service.get_account(USER_ID)
        assert account.total_points == 100
        assert account.tier == LoyaltyTier.GOLD


class TestPointsHistory:
    """Tests for points history retrieval."""

    def test_history_is_newest_first_and_paginated(self):
        """Test history ordering, pagination and the reported balance."""
        service = LoyaltyService()
        for i in range(5):
            service.add_points(USER_ID, 10 * (i + 1), f"Credit {i}")
        service.add_points("someone_else", 999, "Not mine")

        history = service.get_points_history(USER_ID, limit=2, offset=1)

        assert history.total_count == 5
        assert [t.description for t in history.transactions] == ["Credit 3", "Credit 2"]
        assert history.current_balance == 150
        assert history.tier == LoyaltyTier.BRONZE

    def test_demo_storage_history(self):
        """Test the seeded demo account is consistent with its ledger."""
        service = LoyaltyService(storage=demo_storage())

        history = service.get_points_history("user_1")

        assert history.current_balance == 2400
        assert history.lifetime_points == 3200
        assert history.tier == LoyaltyTier.SILVER
        assert history.transactions[0].balance_after == 2400
        assert history.transactions[0].description == "Redeemed: Free 2h Return"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
