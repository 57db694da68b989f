"""
Database queries - re-exported so callers can use 'from gramps_memory.db import queries'.

Module organization:
- xp.py: XP totals, levels and the XP transaction ledger
- streaks.py: Daily streaks and the per-day activity guard
"""

# XP operations
from gramps_memory.db.queries.xp import (
    get_user_xp_data,
    insert_user_xp,
    increment_user_xp,
    update_user_level,
    add_xp_transaction,
    get_xp_transactions,
)

# Streak operations
from gramps_memory.db.queries.streaks import (
    get_user_streak,
    create_user_streak,
    claim_daily_activity,
    save_user_streak,
    decay_user_streak,
)

__all__ = [
    # XP (6 functions)
    "get_user_xp_data",
    "insert_user_xp",
    "increment_user_xp",
    "update_user_level",
    "add_xp_transaction",
    "get_xp_transactions",

    # Streaks (5 functions)
    "get_user_streak",
    "create_user_streak",
    "claim_daily_activity",
    "save_user_streak",
    "decay_user_streak",
]
