"""
Gamification Integration Hooks

Call these after a memory activity in the conversation UI. Each hook updates
the daily streak, awards XP for the activity, streak milestones and newly
reached memory milestones, and returns one summary for display.

Hooks never raise. A failing step is logged, reported in
ActivityOutcome.errors, and the remaining steps still run, so storytelling
is never blocked by bookkeeping.

Usage:
    from gramps_memory.gamification.integrations import handle_message_gamification

    # After the user's message is saved
    outcome = await handle_message_gamification(user_id, "voice")
"""

import logging
from typing import Optional

from gramps_memory.gamification.achievements import newly_unlocked_achievements
from gramps_memory.gamification.levels import format_xp
from gramps_memory.gamification.streak_system import update_streak_with_status
from gramps_memory.gamification.xp_system import (
    award_achievement_xp,
    award_blog_xp,
    award_family_share_xp,
    award_message_xp,
    award_streak_xp,
    award_voice_xp,
)
from gramps_memory.models.gamification import ActivityOutcome, AwardResult

logger = logging.getLogger(__name__)


def _apply_award(outcome: ActivityOutcome, result: AwardResult) -> None:
    if not result.success:
        outcome.errors.append(result.error or "XP award failed")
        return

    outcome.xp_awarded += result.xp_awarded
    if result.leveled_up:
        outcome.leveled_up = True
        outcome.new_level = result.new_level


async def _track_memory_day(user_id: str, outcome: ActivityOutcome) -> None:
    """Streak update, then streak and milestone XP if the day is newly counted"""
    update = await update_streak_with_status(user_id)
    if update is None:
        outcome.errors.append("Streak could not be updated")
        return

    outcome.current_streak = update.streak.current_streak
    outcome.streak_counted_today = update.counted_today

    if not update.counted_today:
        return

    _apply_award(outcome, await award_streak_xp(user_id, update.streak.current_streak))

    for achievement in newly_unlocked_achievements(update.previous, update.streak):
        outcome.achievements_unlocked.append(achievement)
        _apply_award(outcome, await award_achievement_xp(user_id, achievement.title))


def _build_message(outcome: ActivityOutcome) -> str:
    lines = []
    if outcome.xp_awarded:
        lines.append(f"+{format_xp(outcome.xp_awarded)} XP")
    if outcome.streak_counted_today and outcome.current_streak:
        lines.append(f"🔥 Day {outcome.current_streak} of your memory streak!")
    for achievement in outcome.achievements_unlocked:
        lines.append(f"{achievement.icon} Achievement unlocked: {achievement.title}")
    if outcome.leveled_up and outcome.new_level:
        lines.append(
            f"{outcome.new_level.icon} Level up! You are now level "
            f"{outcome.new_level.level}: {outcome.new_level.title}"
        )
    return "\n".join(lines)


def _finish(user_id: str, activity: str, outcome: ActivityOutcome) -> ActivityOutcome:
    outcome.message = _build_message(outcome)
    if outcome.errors:
        logger.warning(
            f"Gamification for {activity} by user {user_id} partially failed: "
            f"{'; '.join(outcome.errors)}"
        )
    return outcome


async def handle_message_gamification(user_id: str, message_type: str = "text") -> ActivityOutcome:
    """
    Handle gamification for a message in the memory conversation

    Args:
        user_id: User's account ID
        message_type: 'text' or 'voice'
    """
    outcome = ActivityOutcome()
    await _track_memory_day(user_id, outcome)
    _apply_award(outcome, await award_message_xp(user_id, message_type))
    return _finish(user_id, "message", outcome)


async def handle_voice_recording_gamification(
    user_id: str,
    duration_seconds: Optional[float] = None
) -> ActivityOutcome:
    """Handle gamification for a finished voice recording"""
    outcome = ActivityOutcome()
    await _track_memory_day(user_id, outcome)
    _apply_award(outcome, await award_voice_xp(user_id, duration_seconds))
    return _finish(user_id, "voice recording", outcome)


async def handle_blog_gamification(
    user_id: str,
    blog_post_id: str,
    recipient_count: int = 0
) -> ActivityOutcome:
    """
    Handle gamification for a blog post that was saved and emailed

    Args:
        user_id: User's account ID
        blog_post_id: The saved blog post
        recipient_count: Family members the post was emailed to
    """
    outcome = ActivityOutcome()
    _apply_award(outcome, await award_blog_xp(user_id, blog_post_id))
    if recipient_count > 0:
        _apply_award(outcome, await award_family_share_xp(user_id, recipient_count))
    return _finish(user_id, "blog post", outcome)
