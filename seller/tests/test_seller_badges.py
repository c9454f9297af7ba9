"""
Unit Tests for Seller Badges and Sales

Tests cover:
1. Recording sales
2. Upgrade-only badge changes
3. Upgrade emails
4. Progress toward the next badge
"""

from decimal import Decimal

import pytest

from core.errors import InvalidAmountError, NotFoundError
from loyalty.tiers import SellerBadge
from notifications.mailer import InMemoryMailer
from notifications.models import MailType
from seller.models import SellerProfile, SellerStorage
from seller.service import SellerService, demo_storage


SELLER_ID = "seller_1"


def make_service(**kwargs) -> SellerService:
    service = SellerService(**kwargs)
    service.register_seller(SELLER_ID, "Amina Seller", "amina@example.com")
    return service


class TestRecordSale:
    """Tests for recording sales."""

    def test_record_sale_updates_totals(self):
        """Test a sale bumps count, revenue and the monthly total."""
        service = make_service()

        result = service.record_sale(SELLER_ID, Decimal("1200.50"))

        assert result.seller.total_sales == 1
        assert result.seller.total_revenue == Decimal("1200.50")
        assert result.seller.current_month_sales == Decimal("1200.50")
        assert result.upgraded_to is None
        assert result.seller.badge == SellerBadge.VERIFIED

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-250")])
    def test_non_positive_sale_fails(self, amount):
        """Test zero or negative sales are refused without touching totals."""
        service = make_service()

        with pytest.raises(InvalidAmountError):
            service.record_sale(SELLER_ID, amount)

        seller = service.get_seller(SELLER_ID)
        assert seller.total_sales == 0
        assert seller.total_revenue == Decimal("0")

    def test_unknown_seller_fails(self):
        """Test recording a sale for an unknown seller fails."""
        service = SellerService()

        with pytest.raises(NotFoundError):
            service.record_sale("ghost", Decimal("10"))


class TestBadgeUpgrade:
    """Tests for badge upgrades."""

    def test_crossing_threshold_upgrades_and_emails(self):
        """Test reaching 150000 MAD upgrades to Pro and sends one email."""
        mailer = InMemoryMailer()
        service = make_service(mailer=mailer)
        service.record_sale(SELLER_ID, Decimal("149999"))

        result = service.record_sale(SELLER_ID, Decimal("1"))

        assert result.upgraded_to == SellerBadge.PRO
        assert result.seller.badge == SellerBadge.PRO
        assert result.email_sent is True
        assert [m.type for m in mailer.outbox] == [MailType.BADGE_UPGRADE]
        assert mailer.outbox[0].to == "amina@example.com"

    def test_jump_straight_to_elite(self):
        """Test a single large sale can skip Pro."""
        service = make_service()

        result = service.record_sale(SELLER_ID, Decimal("600000"))

        assert result.upgraded_to == SellerBadge.ELITE

    def test_badge_never_downgrades(self):
        """Test a badge above the revenue-earned one is kept."""
        storage = SellerStorage()
        storage.sellers[SELLER_ID] = SellerProfile(
            id=SELLER_ID, name="Amina Seller", email="amina@example.com", badge=SellerBadge.ELITE,
        )
        service = SellerService(storage=storage)

        assert service.check_badge_upgrade(SELLER_ID) is None
        assert service.record_sale(SELLER_ID, Decimal("10")).seller.badge == SellerBadge.ELITE

    def test_no_upgrade_no_email(self):
        """Test ordinary sales send nothing."""
        mailer = InMemoryMailer()
        service = make_service(mailer=mailer)

        service.record_sale(SELLER_ID, Decimal("500"))

        assert mailer.outbox == []


class TestBadgeProgress:
    """Tests for progress toward the next badge."""

    def test_progress_for_demo_seller(self):
        """Test a Pro seller at 342330 MAD is partway to Elite."""
        service = SellerService(storage=demo_storage())

        progress = service.get_badge_progress("1")

        assert progress.current_badge == SellerBadge.PRO
        assert progress.next_badge == SellerBadge.ELITE
        assert progress.next_threshold == Decimal("500000")
        assert progress.remaining_revenue == Decimal("157670")
        assert progress.progress_percent == pytest.approx(68.466)

    def test_progress_at_top_badge(self):
        """Test an Elite seller is at 100 percent with nothing remaining."""
        service = make_service()
        service.record_sale(SELLER_ID, Decimal("500000"))

        progress = service.get_badge_progress(SELLER_ID)

        assert progress.next_badge is None
        assert progress.progress_percent == 100.0
        assert progress.remaining_revenue == Decimal("0")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
