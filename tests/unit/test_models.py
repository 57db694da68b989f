"""Unit tests for gamification models (gramps_memory/models/gamification.py)"""
import pytest
from datetime import date
from pydantic import ValidationError

from gramps_memory.models import (
    ActivityOutcome,
    AwardResult,
    DailyActivity,
    TransactionType,
    UserStreak,
    UserXP,
    XPTransaction,
)


class TestUserXP:
    """Test the XP row model"""

    def test_defaults_for_new_user(self):
        xp = UserXP(user_id="user-1")

        assert xp.total_xp == 0
        assert xp.current_level == 1
        assert xp.xp_to_next_level == 50


class TestXPTransaction:
    """Test ledger entries"""

    def test_type_from_string(self):
        tx = XPTransaction(
            user_id="user-1",
            xp_amount=10,
            transaction_type="blog_created",
            description="Created a blog post",
        )

        assert tx.transaction_type == TransactionType.BLOG_CREATED
        assert tx.memory_id is None

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            XPTransaction(
                user_id="user-1",
                xp_amount=10,
                transaction_type="daily_login",
                description="Logged in",
            )


class TestUserStreak:
    """Test the streak row model"""

    def test_zero_state(self):
        streak = UserStreak(user_id="user-1")

        assert streak.current_streak == 0
        assert streak.longest_streak == 0
        assert streak.total_memories == 0
        assert streak.last_activity_date is None

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            UserStreak(user_id="user-1", current_streak=-1)

    def test_daily_activity(self):
        activity = DailyActivity(user_id="user-1", activity_date=date(2024, 1, 6))

        assert activity.memories_recorded == 1


class TestResults:
    """Test operation result models"""

    def test_failed_award(self):
        result = AwardResult(success=False, error="Failed to award XP: down")

        assert result.xp_awarded == 0
        assert result.leveled_up == False
        assert result.new_level is None

    def test_activity_outcome_lists_are_independent(self):
        first = ActivityOutcome()
        second = ActivityOutcome()
        first.errors.append("boom")

        assert second.errors == []
