import threading
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from loguru import logger

from .models import AdminAction, AdminActionType, AdminActionsResponse, AdminStorage, BannedUser


class AdminService:
    def __init__(self, storage: Optional[AdminStorage] = None):
        self.storage = storage or AdminStorage()
        self._lock = threading.RLock()

    def record_action(
        self,
        action_type: AdminActionType,
        target_id: str,
        reason: str,
        performed_by: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> AdminAction:
        action = AdminAction(
            id=uuid4(),
            type=action_type,
            target_id=target_id,
            reason=reason,
            performed_by=performed_by,
            performed_at=datetime.now(timezone.utc),
            metadata=metadata,
        )
        with self._lock:
            self.storage.actions.append(action)

        logger.info(
            "Recorded admin action",
            action_type=action_type.value,
            target_id=target_id,
            performed_by=performed_by,
        )
        return action

    def get_actions(self, limit: int = 50, offset: int = 0) -> AdminActionsResponse:
        newest_first = list(reversed(self.storage.actions))
        return AdminActionsResponse(
            actions=newest_first[offset:offset + limit],
            total_count=len(newest_first),
        )

    def list_actions(self) -> tuple[AdminAction, ...]:
        return tuple(self.storage.actions)

    def ban_user(self, user_id: str, user_email: str, reason: str, admin_id: str) -> BannedUser:
        banned = BannedUser(
            id=uuid4(),
            user_id=user_id,
            user_email=user_email,
            reason=reason,
            banned_at=datetime.now(timezone.utc),
            banned_by=admin_id,
        )
        with self._lock:
            self.storage.banned_users.append(banned)
            self.record_action(
                AdminActionType.BAN_USER, user_id, reason, admin_id, metadata={"user_email": user_email}
            )
        return banned

    def unban_user(self, user_id: str, admin_id: str) -> int:
        """Deactivate every active ban on the user. Returns how many were lifted."""
        with self._lock:
            lifted = 0
            for i, banned in enumerate(self.storage.banned_users):
                if banned.user_id == user_id and banned.is_active:
                    self.storage.banned_users[i] = banned.model_copy(update={"is_active": False})
                    lifted += 1

            if lifted:
                self.record_action(AdminActionType.UNBAN_USER, user_id, "User unbanned", admin_id)
        return lifted

    def is_user_banned(self, user_id: str) -> bool:
        return any(b.user_id == user_id and b.is_active for b in self.storage.banned_users)

    def list_banned_users(self, active_only: bool = True) -> list[BannedUser]:
        return [b for b in self.storage.banned_users if b.is_active or not active_only]
