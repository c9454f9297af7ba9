"""
Unit Tests for Seller Listings and Payouts

Tests cover:
1. Adding listings and moderating their status
2. Listing filters, including price bands
3. Payout scheduling and the payout state machine
4. Payout search and summary
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from core.errors import InvalidAmountError, InvalidTransitionError, NotFoundError
from seller.models import ListingStatus, PayoutStatus, PriceBand
from seller.service import SellerService, demo_storage


SELLER_ID = "seller_1"


def make_service() -> SellerService:
    service = SellerService()
    service.register_seller(SELLER_ID, "Amina Seller", "amina@example.com")
    return service


class TestListings:
    """Tests for seller listings."""

    def test_add_product_starts_pending(self):
        """Test a new listing awaits review."""
        service = make_service()

        product = service.add_product(
            SELLER_ID, "Kelly Bag", "Hermès", Decimal("42000"), "Excellent", "Bags", tags=["Premium"],
        )

        assert product.status == ListingStatus.PENDING
        assert product.seller_id == SELLER_ID
        assert product.tags == ["Premium"]
        assert service.get_product(product.id) == product

    def test_add_product_unknown_seller_fails(self):
        """Test listing for an unknown seller fails."""
        service = make_service()

        with pytest.raises(NotFoundError):
            service.add_product("ghost", "Scarf", "Hermès", Decimal("300"), "Good", "Accessories")

    def test_add_product_non_positive_price_fails(self):
        """Test a listing must have a positive price."""
        service = make_service()

        with pytest.raises(InvalidAmountError):
            service.add_product(SELLER_ID, "Scarf", "Hermès", Decimal("0"), "Good", "Accessories")

        assert service.filter_products(seller_id=SELLER_ID) == []

    def test_update_listing_status(self):
        """Test a listing can go live and be rejected later."""
        service = make_service()
        product = service.add_product(SELLER_ID, "Scarf", "Hermès", Decimal("300"), "Good", "Accessories")

        live = service.update_listing_status(product.id, ListingStatus.LIVE)
        rejected = service.update_listing_status(product.id, ListingStatus.REJECTED)

        assert live.status == ListingStatus.LIVE
        assert rejected.status == ListingStatus.REJECTED
        assert service.get_product(product.id).status == ListingStatus.REJECTED

    def test_update_unknown_listing_fails(self):
        """Test moderating an unknown listing raises NotFoundError."""
        service = make_service()

        with pytest.raises(NotFoundError):
            service.update_listing_status(uuid4(), ListingStatus.LIVE)

    def test_filter_demo_listings(self):
        """Test field filters combine on the seeded listings."""
        service = SellerService(storage=demo_storage())

        assert [p.title for p in service.filter_products(status=ListingStatus.LIVE)] == [
            "Luxury Watch",
            "Classic Sunglasses",
        ]
        assert [p.brand for p in service.filter_products(category="Bags")] == ["Chanel"]
        assert [p.title for p in service.filter_products(condition="Excellent", status=ListingStatus.REJECTED)] == [
            "Evening Dress",
        ]
        assert service.filter_products(seller_id="nobody") == []

    @pytest.mark.parametrize("band, titles", [
        (PriceBand.UP_TO_1000, ["Cap"]),
        (PriceBand.UP_TO_5000, ["Belt", "Sunglasses"]),
        (PriceBand.OVER_5000, ["Watch"]),
    ])
    def test_price_bands(self, band, titles):
        """Test price bands include their upper bound only."""
        service = make_service()
        for title, price in [("Cap", "1000"), ("Belt", "1000.01"), ("Sunglasses", "5000"), ("Watch", "5000.01")]:
            service.add_product(SELLER_ID, title, "Gucci", Decimal(price), "Good", "Accessories")

        assert [p.title for p in service.filter_products(price_band=band)] == titles


class TestPayouts:
    """Tests for seller payouts."""

    def test_add_payout_starts_pending(self):
        """Test a scheduled payout is pending."""
        service = make_service()

        payout = service.add_payout(SELLER_ID, "#200001", "Dior Saddle Bag", "@ChicCloset", Decimal("3100"))

        assert payout.status == PayoutStatus.PENDING
        assert payout.updated_at is None
        assert service.get_payout(payout.id) == payout

    def test_add_payout_non_positive_amount_fails(self):
        """Test a payout must be for a positive amount."""
        service = make_service()

        with pytest.raises(InvalidAmountError):
            service.add_payout(SELLER_ID, "#200001", "Dior Saddle Bag", "@ChicCloset", Decimal("-1"))

    def test_payout_forward_path(self):
        """Test pending → processing → paid."""
        service = make_service()
        payout = service.add_payout(SELLER_ID, "#200001", "Dior Saddle Bag", "@ChicCloset", Decimal("3100"))

        service.update_payout_status(payout.id, PayoutStatus.PROCESSING)
        paid = service.update_payout_status(payout.id, PayoutStatus.PAID)

        assert paid.status == PayoutStatus.PAID
        assert paid.updated_at is not None

    def test_failed_payout_can_be_retried(self):
        """Test a failed payout returns to pending."""
        service = make_service()
        payout = service.add_payout(SELLER_ID, "#200001", "Dior Saddle Bag", "@ChicCloset", Decimal("3100"))
        service.update_payout_status(payout.id, PayoutStatus.FAILED)

        assert service.update_payout_status(payout.id, PayoutStatus.PENDING).status == PayoutStatus.PENDING

    @pytest.mark.parametrize("path, target", [
        ([], PayoutStatus.PAID),
        ([PayoutStatus.PROCESSING], PayoutStatus.PENDING),
        ([PayoutStatus.PROCESSING, PayoutStatus.PAID], PayoutStatus.FAILED),
        ([PayoutStatus.FAILED], PayoutStatus.PAID),
    ])
    def test_invalid_payout_transitions(self, path, target):
        """Test skipped or backward payout moves are refused."""
        service = make_service()
        payout = service.add_payout(SELLER_ID, "#200001", "Dior Saddle Bag", "@ChicCloset", Decimal("3100"))
        for step in path:
            service.update_payout_status(payout.id, step)

        with pytest.raises(InvalidTransitionError):
            service.update_payout_status(payout.id, target)

    def test_filter_demo_payouts(self):
        """Test search, status and date filters on the seeded payouts."""
        service = SellerService(storage=demo_storage())

        assert [p.order_id for p in service.filter_payouts(search="chanel")] == ["#123455"]
        assert [p.order_id for p in service.filter_payouts(search="@laila")] == ["#123454"]
        assert [p.item for p in service.filter_payouts(status="Paid")] == ["Gucci Handbag"]
        assert len(service.filter_payouts(status="All")) == 4
        recent = service.filter_payouts(since=datetime(2025, 6, 1, tzinfo=timezone.utc))
        assert [p.order_id for p in recent] == ["#123456", "#123455", "#123454"]

    def test_payout_summary(self):
        """Test totals per payout status for the demo seller."""
        service = SellerService(storage=demo_storage())

        summary = service.get_payout_summary("1")

        assert summary.total_balance == Decimal("12550")
        assert summary.paid == Decimal("5200")
        assert summary.pending == Decimal("2750")
        assert summary.failed == Decimal("2980")
        assert summary.processing == Decimal("1620")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
