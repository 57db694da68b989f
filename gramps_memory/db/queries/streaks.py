"""Streak and daily activity database queries"""
import logging
from datetime import date
from typing import Optional
import psycopg
from gramps_memory.db.connection import db

logger = logging.getLogger(__name__)

_STREAK_COLUMNS = """
    user_id::text AS user_id, current_streak, longest_streak, last_activity_date,
    total_memories, created_at, updated_at
"""


async def get_user_streak(
    user_id: str,
    for_update: bool = False,
    conn: Optional[psycopg.AsyncConnection] = None
) -> Optional[dict]:
    """
    Get user streak row

    Args:
        user_id: User's account ID
        for_update: Lock the row until the surrounding transaction ends

    Returns:
        Streak row dict, or None if the user has no streak yet
    """
    lock = " FOR UPDATE" if for_update else ""
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"SELECT {_STREAK_COLUMNS} FROM user_streaks WHERE user_id = %s{lock}",
            (user_id,)
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def create_user_streak(
    user_id: str,
    conn: Optional[psycopg.AsyncConnection] = None
) -> dict:
    """
    Create the zero-state streak row

    Returns the existing row when another request created it first.
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"""
            INSERT INTO user_streaks (user_id, current_streak, longest_streak, total_memories)
            VALUES (%s, 0, 0, 0)
            ON CONFLICT (user_id) DO NOTHING
            RETURNING {_STREAK_COLUMNS}
            """,
            (user_id,)
        )
        row = await cur.fetchone()

        if not row:
            await cur.execute(
                f"SELECT {_STREAK_COLUMNS} FROM user_streaks WHERE user_id = %s",
                (user_id,)
            )
            row = await cur.fetchone()
        else:
            logger.info(f"Created new streak for user {user_id}")

        return dict(row)


async def claim_daily_activity(
    user_id: str,
    activity_date: date,
    conn: Optional[psycopg.AsyncConnection] = None
) -> bool:
    """
    Record that the user was active on a calendar day

    Returns:
        True if this is the first activity of that day, False if the day
        was already recorded
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            """
            INSERT INTO daily_activities (user_id, activity_date, memories_recorded)
            VALUES (%s, %s, 1)
            ON CONFLICT (user_id, activity_date) DO NOTHING
            RETURNING user_id
            """,
            (user_id, activity_date)
        )
        row = await cur.fetchone()
        return row is not None


async def save_user_streak(
    user_id: str,
    streak_data: dict,
    conn: Optional[psycopg.AsyncConnection] = None
) -> dict:
    """
    Update streak data

    Args:
        user_id: User's account ID
        streak_data: Dict with current_streak, longest_streak,
            last_activity_date, total_memories

    Returns:
        The stored row
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"""
            UPDATE user_streaks
            SET current_streak = %s,
                longest_streak = %s,
                last_activity_date = %s,
                total_memories = %s,
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = %s
            RETURNING {_STREAK_COLUMNS}
            """,
            (
                streak_data['current_streak'],
                streak_data['longest_streak'],
                streak_data['last_activity_date'],
                streak_data['total_memories'],
                user_id
            )
        )
        row = await cur.fetchone()
        return dict(row)


async def decay_user_streak(
    user_id: str,
    active_since: date,
    conn: Optional[psycopg.AsyncConnection] = None
) -> Optional[dict]:
    """
    Zero current_streak if the last activity is older than ``active_since``

    The date check is part of the UPDATE so an activity recorded by a
    concurrent request is never wiped.

    Returns:
        The reset row, or None when nothing needed resetting
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"""
            UPDATE user_streaks
            SET current_streak = 0,
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = %s
              AND last_activity_date IS NOT NULL
              AND last_activity_date < %s
              AND current_streak <> 0
            RETURNING {_STREAK_COLUMNS}
            """,
            (user_id, active_since)
        )
        row = await cur.fetchone()
        return dict(row) if row else None
