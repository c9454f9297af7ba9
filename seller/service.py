import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from loguru import logger

from core.errors import InvalidAmountError, InvalidTransitionError, NotFoundError
from loyalty.tiers import badge_rank, classify_seller_badge, next_seller_badge
from notifications.mailer import Mailer
from notifications.messages import badge_upgrade_message

from .models import (
    BadgeProgress,
    ListingStatus,
    Payout,
    PayoutStatus,
    PayoutSummary,
    PriceBand,
    SaleResult,
    SellerProduct,
    SellerProfile,
    SellerStorage,
)

PRICE_BAND_LIMITS = {
    PriceBand.UP_TO_1000: (None, Decimal("1000")),
    PriceBand.UP_TO_5000: (Decimal("1000"), Decimal("5000")),
    PriceBand.OVER_5000: (Decimal("5000"), None),
}


def demo_storage() -> SellerStorage:
    storage = SellerStorage()
    storage.sellers["1"] = SellerProfile(
        id="1",
        name="John Seller",
        email="john@example.com",
        badge=classify_seller_badge(Decimal("342330")),
        total_sales=148,
        total_revenue=Decimal("342330"),
        current_month_sales=Decimal("43700"),
    )

    for title, brand, price, condition, status, category, day, tags in (
        ("Luxury Watch", "Rolex", "15000", "Excellent", ListingStatus.LIVE, "Watches", 15, ["Top Pick", "Premium"]),
        ("Designer Handbag", "Chanel", "8500", "Very Good", ListingStatus.PENDING, "Bags", 14, ["Needs Update"]),
        ("Classic Sunglasses", "Gucci", "3200", "Good", ListingStatus.LIVE, "Accessories", 13, []),
        ("Evening Dress", "Prada", "5500", "Excellent", ListingStatus.REJECTED, "Clothing", 12, ["Needs Update"]),
    ):
        storage.products.append(SellerProduct(
            id=uuid4(),
            seller_id="1",
            title=title,
            brand=brand,
            price=Decimal(price),
            condition=condition,
            category=category,
            status=status,
            tags=tags,
            date_added=datetime(2025, 1, day, tzinfo=timezone.utc),
        ))

    for order_id, item, buyer, amount, status, created_at in (
        ("#123456", "Gucci Handbag", "@ChicCloset", "5200", PayoutStatus.PAID, datetime(2025, 6, 6)),
        ("#123455", "Chanel Wallet", "@JaneDoe123", "2750", PayoutStatus.PENDING, datetime(2025, 6, 5)),
        ("#123454", "Prada Sandals", "@Laila8788", "2980", PayoutStatus.FAILED, datetime(2025, 6, 4)),
        ("#123453", "Dior Sunglasses", "@Rachid_Vee", "1620", PayoutStatus.PROCESSING, datetime(2025, 5, 28)),
    ):
        storage.payouts.append(Payout(
            id=uuid4(),
            seller_id="1",
            order_id=order_id,
            item=item,
            buyer=buyer,
            amount=Decimal(amount),
            status=status,
            created_at=created_at.replace(tzinfo=timezone.utc),
        ))
    return storage


def _in_price_band(price: Decimal, band: PriceBand) -> bool:
    low, high = PRICE_BAND_LIMITS[band]
    if low is not None and price <= low:
        return False
    if high is not None and price > high:
        return False
    return True


class SellerService:
    def __init__(self, storage: Optional[SellerStorage] = None, mailer: Optional[Mailer] = None):
        self.storage = storage or SellerStorage()
        self.mailer = mailer
        self._lock = threading.RLock()

    def register_seller(self, seller_id: str, name: str, email: str) -> SellerProfile:
        with self._lock:
            seller = self.storage.sellers.get(seller_id)
            if seller is None:
                seller = SellerProfile(id=seller_id, name=name, email=email)
                self.storage.sellers[seller_id] = seller
                logger.info("Registered seller", seller_id=seller_id)
            return seller

    def get_seller(self, seller_id: str) -> SellerProfile:
        seller = self.storage.sellers.get(seller_id)
        if seller is None:
            raise NotFoundError(f"Seller {seller_id} not found")
        return seller

    # Sales and badges

    def record_sale(self, seller_id: str, amount: Decimal) -> SaleResult:
        if amount <= 0:
            raise InvalidAmountError(f"Sale amount must be positive, got {amount}")

        with self._lock:
            seller = self.get_seller(seller_id)
            self.storage.sellers[seller_id] = seller.model_copy(update={
                "total_sales": seller.total_sales + 1,
                "total_revenue": seller.total_revenue + amount,
                "current_month_sales": seller.current_month_sales + amount,
            })
            upgraded_to = self.check_badge_upgrade(seller_id)
            seller = self.storage.sellers[seller_id]

        logger.info("Recorded sale", seller_id=seller_id, amount=str(amount), total_revenue=str(seller.total_revenue))

        email_sent = False
        if upgraded_to is not None and self.mailer is not None:
            result = self.mailer.send(badge_upgrade_message(seller.email, upgraded_to.value, seller.total_revenue))
            email_sent = result.success
            if not result.success:
                logger.warning("Badge upgrade email not sent", seller_id=seller_id, error=result.error)

        return SaleResult(seller=seller, upgraded_to=upgraded_to, email_sent=email_sent)

    def check_badge_upgrade(self, seller_id: str):
        """Upgrade to the badge earned by current revenue. Badges never go down."""
        with self._lock:
            seller = self.get_seller(seller_id)
            earned = classify_seller_badge(seller.total_revenue)
            if badge_rank(earned) <= badge_rank(seller.badge):
                return None

            self.storage.sellers[seller_id] = seller.model_copy(update={"badge": earned})

        logger.info("Seller badge upgraded", seller_id=seller_id, from_badge=seller.badge.value, to_badge=earned.value)
        return earned

    def get_badge_progress(self, seller_id: str) -> BadgeProgress:
        seller = self.get_seller(seller_id)
        upcoming = next_seller_badge(seller.badge)
        if upcoming is None:
            return BadgeProgress(
                current_badge=seller.badge,
                total_revenue=seller.total_revenue,
                progress_percent=100.0,
                remaining_revenue=Decimal("0"),
            )

        next_badge, threshold = upcoming
        return BadgeProgress(
            current_badge=seller.badge,
            next_badge=next_badge,
            total_revenue=seller.total_revenue,
            next_threshold=threshold,
            progress_percent=min(float(seller.total_revenue / threshold * 100), 100.0),
            remaining_revenue=max(threshold - seller.total_revenue, Decimal("0")),
        )

    # Listings

    def add_product(
        self,
        seller_id: str,
        title: str,
        brand: str,
        price: Decimal,
        condition: str,
        category: str,
        image: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> SellerProduct:
        if price <= 0:
            raise InvalidAmountError(f"Listing price must be positive, got {price}")

        with self._lock:
            self.get_seller(seller_id)
            product = SellerProduct(
                id=uuid4(),
                seller_id=seller_id,
                title=title,
                brand=brand,
                price=price,
                condition=condition,
                category=category,
                image=image,
                tags=tags or [],
                date_added=datetime.now(timezone.utc),
            )
            self.storage.products.append(product)

        logger.info("Listing added", seller_id=seller_id, product_id=str(product.id), brand=brand)
        return product

    def get_product(self, product_id: UUID) -> SellerProduct:
        return self._find_product(product_id)[1]

    def update_listing_status(self, product_id: UUID, status: ListingStatus) -> SellerProduct:
        with self._lock:
            index, product = self._find_product(product_id)
            if product.status == status:
                return product
            updated = product.model_copy(update={"status": status})
            self.storage.products[index] = updated

        logger.info(
            "Listing status changed",
            product_id=str(product_id),
            from_status=product.status.value,
            to_status=status.value,
        )
        return updated

    def filter_products(
        self,
        seller_id: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
        status: Optional[ListingStatus] = None,
        condition: Optional[str] = None,
        price_band: Optional[PriceBand] = None,
    ) -> list[SellerProduct]:
        results = []
        for product in self.storage.products:
            if seller_id and product.seller_id != seller_id:
                continue
            if category and product.category != category:
                continue
            if brand and product.brand != brand:
                continue
            if status and product.status != status:
                continue
            if condition and product.condition != condition:
                continue
            if price_band and not _in_price_band(product.price, price_band):
                continue
            results.append(product)
        return results

    # Payouts

    def add_payout(self, seller_id: str, order_id: str, item: str, buyer: str, amount: Decimal) -> Payout:
        if amount <= 0:
            raise InvalidAmountError(f"Payout amount must be positive, got {amount}")

        with self._lock:
            self.get_seller(seller_id)
            payout = Payout(
                id=uuid4(),
                seller_id=seller_id,
                order_id=order_id,
                item=item,
                buyer=buyer,
                amount=amount,
                created_at=datetime.now(timezone.utc),
            )
            self.storage.payouts.append(payout)

        logger.info("Payout scheduled", seller_id=seller_id, payout_id=str(payout.id), amount=str(amount))
        return payout

    def get_payout(self, payout_id: UUID) -> Payout:
        return self._find_payout(payout_id)[1]

    def update_payout_status(self, payout_id: UUID, status: PayoutStatus) -> Payout:
        with self._lock:
            index, payout = self._find_payout(payout_id)
            if not payout.can_transition_to(status):
                raise InvalidTransitionError(
                    f"Cannot move payout from {payout.status.value} to {status.value}"
                )
            updated = payout.model_copy(update={"status": status, "updated_at": datetime.now(timezone.utc)})
            self.storage.payouts[index] = updated

        logger.info(
            "Payout status changed",
            payout_id=str(payout_id),
            from_status=payout.status.value,
            to_status=status.value,
        )
        return updated

    def filter_payouts(
        self,
        seller_id: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> list[Payout]:
        needle = search.lower() if search else None
        results = []
        for payout in self.storage.payouts:
            if seller_id and payout.seller_id != seller_id:
                continue
            if needle and not any(needle in field.lower() for field in (payout.order_id, payout.item, payout.buyer)):
                continue
            if status and status.lower() != "all" and payout.status.value != status:
                continue
            if since and payout.created_at < since:
                continue
            results.append(payout)
        return results

    def get_payout_summary(self, seller_id: str) -> PayoutSummary:
        self.get_seller(seller_id)
        payouts = [p for p in self.storage.payouts if p.seller_id == seller_id]

        def total(status: PayoutStatus) -> Decimal:
            return sum((p.amount for p in payouts if p.status == status), Decimal("0"))

        return PayoutSummary(
            total_balance=sum((p.amount for p in payouts), Decimal("0")),
            pending=total(PayoutStatus.PENDING),
            processing=total(PayoutStatus.PROCESSING),
            paid=total(PayoutStatus.PAID),
            failed=total(PayoutStatus.FAILED),
        )

    def _find_product(self, product_id: UUID) -> tuple[int, SellerProduct]:
        for index, product in enumerate(self.storage.products):
            if product.id == product_id:
                return index, product
        raise NotFoundError(f"Listing {product_id} not found")

    def _find_payout(self, payout_id: UUID) -> tuple[int, Payout]:
        for index, payout in enumerate(self.storage.payouts):
            if payout.id == payout_id:
                return index, payout
        raise NotFoundError(f"Payout {payout_id} not found")
