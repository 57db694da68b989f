"""
Daily Memory Streak Tracking

A streak is the number of consecutive calendar days (in STREAK_TIMEZONE)
on which the user recorded at least one memory.

Logic:
- First activity ever: streak starts at 1
- First activity of the day, previous one yesterday: streak + 1
- First activity of the day after a gap: streak resets to 1
- Further activities on the same day: no change
- longest_streak follows current_streak upwards and never drops

The daily_activities row for (user, day) is claimed with an atomic insert,
so a day is counted once even when several requests race.
"""

from typing import Optional
from datetime import date
import logging

from gramps_memory.db import queries
from gramps_memory.db.connection import db
from gramps_memory.exceptions import wrap_external_exception
from gramps_memory.models.gamification import StreakUpdate, UserStreak
from gramps_memory.observability.metrics import record_streak_decay, record_streak_update
from gramps_memory.utils.datetime_helpers import previous_day, today_reference

logger = logging.getLogger(__name__)


async def update_streak_with_status(
    user_id: str,
    activity_date: Optional[date] = None
) -> Optional[StreakUpdate]:
    """
    Count a memory-recording activity toward the user's streak

    Args:
        user_id: User's account ID
        activity_date: Calendar day of the activity (defaults to today in
            the reference timezone)

    Returns:
        StreakUpdate with the stored streak and whether this call counted
        the day, or None if the database could not be updated
    """
    today = activity_date or today_reference()
    yesterday = previous_day(today)

    try:
        async with db.transaction() as conn:
            row = await queries.get_user_streak(user_id, for_update=True, conn=conn)
            if row is None:
                row = await queries.create_user_streak(user_id, conn=conn)

            streak = UserStreak(**row)
            previous_streak = streak.current_streak

            if not await queries.claim_daily_activity(user_id, today, conn=conn):
                record_streak_update("already_counted")
                return StreakUpdate(streak=streak, previous=streak, counted_today=False)

            last_date = streak.last_activity_date

            if last_date == yesterday:
                new_current = streak.current_streak + 1
                outcome = "continued"
            elif last_date is not None and last_date != today:
                new_current = 1
                outcome = "reset"
                logger.info(
                    f"User {user_id} streak broken. Was {previous_streak}, "
                    f"last activity {last_date}"
                )
            else:
                new_current = 1
                outcome = "started"

            updated = await queries.save_user_streak(
                user_id,
                {
                    "current_streak": new_current,
                    "longest_streak": max(streak.longest_streak, new_current),
                    "last_activity_date": today,
                    "total_memories": streak.total_memories + 1,
                },
                conn=conn,
            )
    except Exception as e:
        wrap_external_exception(e, operation="update_streak", user_id=user_id)
        record_streak_update("error")
        return None

    record_streak_update(outcome)
    logger.info(
        f"Updated streak for user {user_id}: "
        f"{previous_streak} → {updated['current_streak']} days"
    )

    return StreakUpdate(
        streak=UserStreak(**updated),
        previous=streak,
        counted_today=True,
    )


async def update_streak(user_id: str, activity_date: Optional[date] = None) -> Optional[UserStreak]:
    """
    Update streak when the user records a memory

    Calling it again on the same day returns the stored streak unchanged.

    Returns:
        The user's streak, or None on a database failure (treat as
        "streak unchanged, award no streak XP")
    """
    result = await update_streak_with_status(user_id, activity_date)
    return result.streak if result else None


async def get_streak(user_id: str) -> Optional[UserStreak]:
    """
    Get user's streak

    Returns:
        UserStreak, or None if the user has none yet or it could not be read
    """
    try:
        row = await queries.get_user_streak(user_id)
    except Exception as e:
        wrap_external_exception(e, operation="get_streak", user_id=user_id)
        return None

    return UserStreak(**row) if row else None


async def check_and_reset_streak(user_id: str, today: Optional[date] = None) -> Optional[UserStreak]:
    """
    Zero a streak the user let lapse, without waiting for a new activity

    Meant to run on page load. A streak whose last activity is neither today
    nor yesterday drops to 0; longest_streak and total_memories are kept.
    Creates the zero-state streak for users who have none.

    Returns:
        The user's streak after the check, or None on a database failure
    """
    today = today or today_reference()
    yesterday = previous_day(today)

    try:
        row = await queries.get_user_streak(user_id)
        if row is None:
            return UserStreak(**await queries.create_user_streak(user_id))

        last_date = row["last_activity_date"]
        if last_date is None or last_date in (today, yesterday):
            return UserStreak(**row)

        reset = await queries.decay_user_streak(user_id, active_since=yesterday)
        if reset is None:
            # already zero, or a concurrent activity just revived it
            return await get_streak(user_id)
    except Exception as e:
        wrap_external_exception(e, operation="check_and_reset_streak", user_id=user_id)
        return None

    record_streak_decay()
    logger.info(
        f"Reset streak for user {user_id}: last activity {last_date}, "
        f"was {row['current_streak']} days"
    )
    return UserStreak(**reset)


def get_streak_message(current_streak: int) -> str:
    """Encouragement shown under the streak counter"""
    if current_streak == 0:
        return "Start your memory journey today!"
    if current_streak == 1:
        return "Great start! Keep it going!"
    if current_streak < 7:
        return f"{current_streak} days in a row! You're building momentum!"
    if current_streak < 30:
        return f"{current_streak} days in a row! Amazing dedication!"
    return f"{current_streak} days in a row! You're a memory champion!"


def get_streak_emoji(current_streak: int) -> str:
    if current_streak == 0:
        return "🌱"
    if current_streak < 7:
        return "🔥"
    if current_streak < 30:
        return "💪"
    return "👑"


def format_streak_display(streak: Optional[UserStreak]) -> str:
    """
    Format a streak for plain-text display

    Args:
        streak: Streak from get_streak(), or None for a new user
    """
    if streak is None or (streak.current_streak == 0 and streak.total_memories == 0):
        return "No memories recorded yet. Share your first story to start a streak! 🌱"

    days = streak.current_streak
    lines = [
        f"{get_streak_emoji(days)} {days} Day{'s' if days != 1 else ''} in a Row",
        get_streak_message(days),
        f"📚 Memories recorded: {streak.total_memories}",
        f"🏆 Best streak: {streak.longest_streak}",
    ]
    return "\n".join(lines)
