"""
Unit Tests for the Admin Audit Log

Tests cover:
1. Recording actions in append order
2. Paginated newest-first listing
3. Banning and unbanning users
"""

import pytest
from pydantic import ValidationError

from admin.models import AdminActionType
from admin.service import AdminService


ADMIN_ID = "admin_user"


class TestRecordAction:
    """Tests for the append-only action log."""

    def test_record_action(self):
        """Test a recorded action carries its target, reason and admin."""
        service = AdminService()

        action = service.record_action(
            AdminActionType.APPROVE_REWARD, "claim_1", "Looks good", ADMIN_ID, {"points_cost": 250}
        )

        assert action.type == AdminActionType.APPROVE_REWARD
        assert action.target_id == "claim_1"
        assert action.reason == "Looks good"
        assert action.performed_by == ADMIN_ID
        assert action.metadata == {"points_cost": 250}
        assert service.list_actions() == (action,)

    def test_actions_are_immutable(self):
        """Test recorded actions cannot be edited."""
        service = AdminService()
        action = service.record_action(AdminActionType.BLOCK_REFERRAL, "invite_1", "Spam", ADMIN_ID)

        with pytest.raises(ValidationError):
            action.reason = "Changed"

    def test_get_actions_newest_first(self):
        """Test paginated listing returns the newest actions first."""
        service = AdminService()
        for i in range(5):
            service.record_action(AdminActionType.REJECT_REWARD, f"claim_{i}", "Rejected", ADMIN_ID)

        response = service.get_actions(limit=2, offset=1)

        assert response.total_count == 5
        assert [a.target_id for a in response.actions] == ["claim_3", "claim_2"]
        assert [a.target_id for a in service.list_actions()][0] == "claim_0"


class TestBans:
    """Tests for user bans."""

    def test_ban_user(self):
        """Test banning a user records a ban_user action."""
        service = AdminService()

        banned = service.ban_user("user_7", "spam@example.com", "Fake referrals", ADMIN_ID)

        assert banned.is_active
        assert service.is_user_banned("user_7")
        action = service.list_actions()[0]
        assert action.type == AdminActionType.BAN_USER
        assert action.metadata == {"user_email": "spam@example.com"}

    def test_unban_user(self):
        """Test unbanning lifts every active ban and logs once."""
        service = AdminService()
        service.ban_user("user_7", "spam@example.com", "First", ADMIN_ID)
        service.ban_user("user_7", "spam@example.com", "Second", ADMIN_ID)

        lifted = service.unban_user("user_7", ADMIN_ID)

        assert lifted == 2
        assert not service.is_user_banned("user_7")
        assert service.list_banned_users() == []
        assert len(service.list_banned_users(active_only=False)) == 2
        assert service.list_actions()[-1].type == AdminActionType.UNBAN_USER

    def test_unban_without_ban_is_noop(self):
        """Test unbanning a user who is not banned logs nothing."""
        service = AdminService()

        assert service.unban_user("user_8", ADMIN_ID) == 0
        assert service.list_actions() == ()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
