"""Unit tests for gamification hooks (gramps_memory/gamification/integrations.py)"""
import pytest
from datetime import date
from unittest.mock import AsyncMock, patch

from gramps_memory.gamification.integrations import (
    handle_blog_gamification,
    handle_message_gamification,
    handle_voice_recording_gamification,
)
from gramps_memory.gamification.levels import LEVELS
from gramps_memory.models.gamification import AwardResult, StreakUpdate, UserStreak

HOOKS = "gramps_memory.gamification.integrations"


def _update(test_user_id, before, after, counted=True):
    return StreakUpdate(
        streak=UserStreak(user_id=test_user_id, current_streak=after, longest_streak=after,
                          last_activity_date=date(2024, 1, 6), total_memories=after),
        previous=UserStreak(user_id=test_user_id, current_streak=before, longest_streak=before,
                            last_activity_date=date(2024, 1, 5), total_memories=before),
        counted_today=counted,
    )


def _awarded(xp, level_up=None):
    return AwardResult(
        success=True,
        xp_awarded=xp,
        leveled_up=level_up is not None,
        new_level=level_up,
    )


class TestMessageHook:
    """Test gamification after a conversation message"""

    @pytest.mark.asyncio
    async def test_first_message_of_the_day(self, test_user_id):
        """Test streak, streak bonus and message XP are combined"""
        with patch(f"{HOOKS}.update_streak_with_status", AsyncMock(return_value=_update(test_user_id, 2, 3))), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock(return_value=_awarded(50))) as mock_streak, \
             patch(f"{HOOKS}.award_achievement_xp", AsyncMock()) as mock_achievement, \
             patch(f"{HOOKS}.award_message_xp", AsyncMock(return_value=_awarded(2))) as mock_message:

            outcome = await handle_message_gamification(test_user_id, "voice")

            assert outcome.xp_awarded == 52
            assert outcome.current_streak == 3
            assert outcome.streak_counted_today == True
            assert outcome.errors == []
            assert "Day 3" in outcome.message
            mock_streak.assert_called_once_with(test_user_id, 3)
            mock_achievement.assert_not_called()
            mock_message.assert_called_once_with(test_user_id, "voice")

    @pytest.mark.asyncio
    async def test_later_message_same_day(self, test_user_id):
        """Test only message XP is awarded once the day is counted"""
        with patch(f"{HOOKS}.update_streak_with_status",
                   AsyncMock(return_value=_update(test_user_id, 3, 3, counted=False))), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock()) as mock_streak, \
             patch(f"{HOOKS}.award_message_xp", AsyncMock(return_value=_awarded(2))):

            outcome = await handle_message_gamification(test_user_id)

            assert outcome.xp_awarded == 2
            assert outcome.streak_counted_today == False
            mock_streak.assert_not_called()

    @pytest.mark.asyncio
    async def test_milestone_unlocked(self, test_user_id):
        """Test reaching day 7 awards the streak bonus and the milestone"""
        with patch(f"{HOOKS}.update_streak_with_status", AsyncMock(return_value=_update(test_user_id, 6, 7))), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock(return_value=_awarded(100))), \
             patch(f"{HOOKS}.award_achievement_xp", AsyncMock(return_value=_awarded(100))) as mock_achievement, \
             patch(f"{HOOKS}.award_message_xp", AsyncMock(return_value=_awarded(2, LEVELS[3]))):

            outcome = await handle_message_gamification(test_user_id)

            assert outcome.xp_awarded == 202
            assert [a.id for a in outcome.achievements_unlocked] == ["week_streak"]
            assert outcome.leveled_up == True
            assert outcome.new_level.level == 4
            assert "Level up!" in outcome.message
            mock_achievement.assert_called_once_with(test_user_id, "7 Days in a Row")

    @pytest.mark.asyncio
    async def test_regained_milestone_pays_no_achievement(self, test_user_id):
        """Test reaching day 7 again below a 10 day record pays only the streak bonus"""
        update = StreakUpdate(
            streak=UserStreak(user_id=test_user_id, current_streak=7, longest_streak=10,
                              last_activity_date=date(2024, 1, 6), total_memories=50),
            previous=UserStreak(user_id=test_user_id, current_streak=6, longest_streak=10,
                                last_activity_date=date(2024, 1, 5), total_memories=49),
            counted_today=True,
        )

        with patch(f"{HOOKS}.update_streak_with_status", AsyncMock(return_value=update)), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock(return_value=_awarded(100))), \
             patch(f"{HOOKS}.award_achievement_xp", AsyncMock(return_value=_awarded(100))) as mock_achievement, \
             patch(f"{HOOKS}.award_message_xp", AsyncMock(return_value=_awarded(2))):

            outcome = await handle_message_gamification(test_user_id)

            assert outcome.xp_awarded == 102
            assert outcome.achievements_unlocked == []
            mock_achievement.assert_not_called()

    @pytest.mark.asyncio
    async def test_streak_failure_does_not_block_xp(self, test_user_id):
        """Test message XP is still awarded when the streak update fails"""
        with patch(f"{HOOKS}.update_streak_with_status", AsyncMock(return_value=None)), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock()) as mock_streak, \
             patch(f"{HOOKS}.award_message_xp", AsyncMock(return_value=_awarded(2))):

            outcome = await handle_message_gamification(test_user_id)

            assert outcome.xp_awarded == 2
            assert outcome.current_streak is None
            assert outcome.errors == ["Streak could not be updated"]
            mock_streak.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_award_is_reported(self, test_user_id):
        with patch(f"{HOOKS}.update_streak_with_status",
                   AsyncMock(return_value=_update(test_user_id, 3, 3, counted=False))), \
             patch(f"{HOOKS}.award_message_xp",
                   AsyncMock(return_value=AwardResult(success=False, error="Failed to award XP: down"))):

            outcome = await handle_message_gamification(test_user_id)

            assert outcome.xp_awarded == 0
            assert outcome.errors == ["Failed to award XP: down"]


class TestVoiceHook:
    """Test gamification after a voice recording"""

    @pytest.mark.asyncio
    async def test_voice_recording(self, test_user_id):
        with patch(f"{HOOKS}.update_streak_with_status", AsyncMock(return_value=_update(test_user_id, 0, 1))), \
             patch(f"{HOOKS}.award_streak_xp", AsyncMock(return_value=_awarded(25))), \
             patch(f"{HOOKS}.award_achievement_xp", AsyncMock(return_value=_awarded(100))), \
             patch(f"{HOOKS}.award_voice_xp", AsyncMock(return_value=_awarded(100))) as mock_voice:

            outcome = await handle_voice_recording_gamification(test_user_id, 95)

            assert outcome.xp_awarded == 225
            assert [a.id for a in outcome.achievements_unlocked] == ["first_memory"]
            mock_voice.assert_called_once_with(test_user_id, 95)


class TestBlogHook:
    """Test gamification after a blog post is emailed"""

    @pytest.mark.asyncio
    async def test_blog_with_recipients(self, test_user_id):
        with patch(f"{HOOKS}.award_blog_xp", AsyncMock(return_value=_awarded(10))) as mock_blog, \
             patch(f"{HOOKS}.award_family_share_xp", AsyncMock(return_value=_awarded(100))) as mock_share, \
             patch(f"{HOOKS}.update_streak_with_status", AsyncMock()) as mock_streak:

            outcome = await handle_blog_gamification(test_user_id, "blog-7", recipient_count=2)

            assert outcome.xp_awarded == 110
            mock_blog.assert_called_once_with(test_user_id, "blog-7")
            mock_share.assert_called_once_with(test_user_id, 2)
            mock_streak.assert_not_called()

    @pytest.mark.asyncio
    async def test_blog_without_recipients(self, test_user_id):
        with patch(f"{HOOKS}.award_blog_xp", AsyncMock(return_value=_awarded(10))), \
             patch(f"{HOOKS}.award_family_share_xp", AsyncMock()) as mock_share:

            outcome = await handle_blog_gamification(test_user_id, "blog-7")

            assert outcome.xp_awarded == 10
            assert outcome.message == "+10 XP"
            mock_share.assert_not_called()
