from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from loguru import logger

from admin.models import AdminStorage
from admin.service import AdminService
from core.config import Settings
from core.persistence import JsonBlobStore
from loyalty.catalog import RewardCatalog
from loyalty.models import LoyaltyStorage
from loyalty.service import LoyaltyService
from loyalty.service import demo_storage as loyalty_demo_storage
from notifications.mailer import BrevoMailer, InMemoryMailer, Mailer
from referrals.models import ReferralStorage
from referrals.service import ReferralService
from referrals.service import demo_storage as referral_demo_storage
from seller.models import SellerStorage
from seller.service import SellerService
from seller.service import demo_storage as seller_demo_storage

LOYALTY_BLOB = "trendies-loyalty-storage"
REFERRAL_BLOB = "trendies-referral-storage"
ADMIN_BLOB = "trendies-admin-storage"
SELLER_BLOB = "trendies-seller-storage"


def build_mailer(settings: Settings) -> Mailer:
    if settings.brevo_api_key:
        return BrevoMailer(
            settings.brevo_api_key,
            api_url=settings.brevo_api_url,
            sender_email=settings.brevo_sender_email,
            sender_name=settings.brevo_sender_name,
            timeout=settings.brevo_timeout_seconds,
        )
    logger.warning("No Brevo API key configured, mail goes to the in-memory outbox")
    return InMemoryMailer()


@dataclass
class ServiceContainer:
    settings: Settings
    mailer: Mailer
    admin: AdminService
    loyalty: LoyaltyService
    referrals: ReferralService
    sellers: SellerService
    blob_store: Optional[JsonBlobStore] = field(default=None)

    @classmethod
    def build(cls, settings: Settings, mailer: Optional[Mailer] = None) -> "ServiceContainer":
        blob_store = JsonBlobStore(settings.storage_dir) if settings.storage_dir else None
        mailer = mailer or build_mailer(settings)

        def load(name, model_type, demo):
            stored = blob_store.load(name, model_type) if blob_store else None
            if stored is not None:
                return stored
            return demo() if settings.seed_demo_data else model_type()

        admin = AdminService(load(ADMIN_BLOB, AdminStorage, AdminStorage))
        loyalty = LoyaltyService(
            storage=load(LOYALTY_BLOB, LoyaltyStorage, loyalty_demo_storage),
            catalog=RewardCatalog(),
            admin=admin,
            mailer=mailer,
            redeem_template_id=settings.brevo_redeem_template_id,
        )
        referrals = ReferralService(
            storage=load(REFERRAL_BLOB, ReferralStorage, referral_demo_storage),
            loyalty=loyalty,
            admin=admin,
            mailer=mailer,
            bounty=settings.referral_bounty_points,
            invite_ttl=timedelta(days=settings.referral_invite_ttl_days),
            app_base_url=settings.app_base_url,
            invite_template_id=settings.brevo_referral_template_id,
        )
        sellers = SellerService(load(SELLER_BLOB, SellerStorage, seller_demo_storage), mailer=mailer)

        return cls(
            settings=settings,
            mailer=mailer,
            admin=admin,
            loyalty=loyalty,
            referrals=referrals,
            sellers=sellers,
            blob_store=blob_store,
        )

    def save(self) -> None:
        if self.blob_store is None:
            return
        self.blob_store.save(ADMIN_BLOB, self.admin.storage)
        self.blob_store.save(LOYALTY_BLOB, self.loyalty.storage)
        self.blob_store.save(REFERRAL_BLOB, self.referrals.storage)
        self.blob_store.save(SELLER_BLOB, self.sellers.storage)
        logger.info("Persisted service state", directory=str(self.blob_store.directory))
