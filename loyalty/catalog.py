import threading
from typing import Iterable, Optional

from loguru import logger

from .models import LoyaltyReward, RewardCategory

DEFAULT_REWARDS: tuple[LoyaltyReward, ...] = (
    LoyaltyReward(
        id="reward_1",
        name="€5 Voucher",
        description="€5 discount on your next purchase",
        points_cost=250,
        category=RewardCategory.VOUCHER,
        terms="Valid for 30 days. Cannot be combined with other offers.",
    ),
    LoyaltyReward(
        id="reward_2",
        name="Free 2h Return",
        description="Free 2-hour return service for any item",
        points_cost=100,
        category=RewardCategory.SERVICE,
        terms="Valid within 30 days of purchase.",
    ),
    LoyaltyReward(
        id="reward_3",
        name="Premium Delivery",
        description="Free premium delivery on your next order",
        points_cost=750,
        category=RewardCategory.SERVICE,
        terms="Valid for orders over €50.",
    ),
    LoyaltyReward(
        id="reward_4",
        name="Free Authentication",
        description="Free authentication service for luxury items",
        points_cost=1000,
        category=RewardCategory.SERVICE,
        terms="Valid for items up to €5,000 value.",
    ),
    LoyaltyReward(
        id="reward_5",
        name="VIP Silver (1 month)",
        description="1 month of VIP Silver membership benefits",
        points_cost=3000,
        category=RewardCategory.MEMBERSHIP,
        terms="Includes priority support and exclusive access.",
    ),
    LoyaltyReward(
        id="reward_6",
        name="€20 Gift Card",
        description="€20 gift card for Trendies marketplace",
        points_cost=5000,
        category=RewardCategory.GIFT_CARD,
        terms="Valid for 6 months. Cannot be exchanged for cash.",
    ),
)


class RewardCatalog:
    """Reference data for redeemable rewards, kept in insertion order."""

    def __init__(self, rewards: Optional[Iterable[LoyaltyReward]] = None):
        self._rewards: dict[str, LoyaltyReward] = {}
        self._lock = threading.Lock()
        for reward in DEFAULT_REWARDS if rewards is None else rewards:
            self._rewards[reward.id] = reward

    def list_available(self) -> list[LoyaltyReward]:
        return [r for r in self._rewards.values() if r.is_active]

    def list_all(self) -> list[LoyaltyReward]:
        return list(self._rewards.values())

    def get(self, reward_id: str) -> Optional[LoyaltyReward]:
        return self._rewards.get(reward_id)

    def replace(self, reward: LoyaltyReward) -> None:
        # dict keeps the original slot for an existing key
        with self._lock:
            self._rewards[reward.id] = reward
        logger.info("Catalog entry updated", reward_id=reward.id, points_cost=reward.points_cost)

    def __len__(self) -> int:
        return len(self._rewards)
