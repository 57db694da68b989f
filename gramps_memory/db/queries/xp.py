"""XP and XP ledger database queries"""
import logging
from typing import Optional
import psycopg
from gramps_memory.db.connection import db

logger = logging.getLogger(__name__)

_USER_XP_COLUMNS = """
    user_id::text AS user_id, total_xp, current_level, xp_to_next_level, created_at, updated_at
"""

_TRANSACTION_COLUMNS = """
    id::text AS id, user_id::text AS user_id, xp_amount, transaction_type, description,
    memory_id::text AS memory_id, created_at
"""


async def get_user_xp_data(
    user_id: str,
    conn: Optional[psycopg.AsyncConnection] = None
) -> Optional[dict]:
    """
    Get user XP row

    Returns:
        Row dict, or None when the user has never earned XP
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"SELECT {_USER_XP_COLUMNS} FROM user_xp WHERE user_id = %s",
            (user_id,)
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def insert_user_xp(
    user_id: str,
    conn: Optional[psycopg.AsyncConnection] = None
) -> bool:
    """
    Create the zero-state XP row (total 0, level 1, 50 XP to level 2)

    Returns:
        True if created, False if the user already had a row
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            """
            INSERT INTO user_xp (user_id, total_xp, current_level, xp_to_next_level)
            VALUES (%s, 0, 1, 50)
            ON CONFLICT (user_id) DO NOTHING
            RETURNING user_id
            """,
            (user_id,)
        )
        row = await cur.fetchone()

    if row:
        logger.info(f"Created new XP record for user {user_id}")
    return row is not None


async def increment_user_xp(
    user_id: str,
    amount: int,
    conn: Optional[psycopg.AsyncConnection] = None
) -> dict:
    """
    Atomically add XP to a user's total, creating the row if needed

    The addition happens inside the database so concurrent awards for the
    same user never overwrite each other.

    Returns:
        The row after the increment
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"""
            INSERT INTO user_xp (user_id, total_xp, current_level, xp_to_next_level)
            VALUES (%s, %s, 1, 50)
            ON CONFLICT (user_id) DO UPDATE
            SET total_xp = user_xp.total_xp + EXCLUDED.total_xp,
                updated_at = CURRENT_TIMESTAMP
            RETURNING {_USER_XP_COLUMNS}
            """,
            (user_id, amount)
        )
        row = await cur.fetchone()
        return dict(row)


async def update_user_level(
    user_id: str,
    current_level: int,
    xp_to_next_level: int,
    conn: Optional[psycopg.AsyncConnection] = None
) -> None:
    """Store the level fields derived from total_xp"""
    async with db.cursor(conn) as cur:
        await cur.execute(
            """
            UPDATE user_xp
            SET current_level = %s,
                xp_to_next_level = %s,
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = %s
            """,
            (current_level, xp_to_next_level, user_id)
        )


async def add_xp_transaction(
    user_id: str,
    xp_amount: int,
    transaction_type: str,
    description: str,
    memory_id: Optional[str] = None,
    conn: Optional[psycopg.AsyncConnection] = None
) -> Optional[str]:
    """
    Append an XP ledger entry

    Args:
        user_id: User's account ID
        xp_amount: XP granted
        transaction_type: 'message_sent', 'blog_created', 'streak_bonus',
            'achievement', 'family_share' or 'voice_recording'
        description: Human-readable description
        memory_id: Optional blog post / memory the XP was earned for

    Returns:
        Transaction ID (UUID string)
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            """
            INSERT INTO xp_transactions (user_id, xp_amount, transaction_type, description, memory_id)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id
            """,
            (user_id, xp_amount, transaction_type, description, memory_id)
        )
        result = await cur.fetchone()
        return str(result['id']) if result else None


async def get_xp_transactions(
    user_id: str,
    limit: int = 10,
    conn: Optional[psycopg.AsyncConnection] = None
) -> list[dict]:
    """
    Get recent XP transactions for user

    Returns:
        List of transactions ordered by created_at DESC
    """
    async with db.cursor(conn) as cur:
        await cur.execute(
            f"""
            SELECT {_TRANSACTION_COLUMNS}
            FROM xp_transactions
            WHERE user_id = %s
            ORDER BY created_at DESC
            LIMIT %s
            """,
            (user_id, limit)
        )
        rows = await cur.fetchall()
        return [dict(row) for row in rows]
