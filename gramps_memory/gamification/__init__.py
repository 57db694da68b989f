"""
Gamification system for Gramps Memory

- XP and leveling system (13 fixed levels)
- Daily memory streaks
- Memory milestones
- XP transaction ledger
"""

from gramps_memory.gamification.levels import (
    calculate_level,
    calculate_xp_progress,
    check_level_up,
    get_next_level,
)
from gramps_memory.gamification.xp_system import (
    award_xp,
    award_message_xp,
    award_blog_xp,
    award_streak_xp,
    award_achievement_xp,
    award_family_share_xp,
    award_voice_xp,
    get_user_xp,
    get_user_xp_transactions,
    initialize_user_xp,
)
from gramps_memory.gamification.streak_system import update_streak, get_streak, check_and_reset_streak

__all__ = [
    "calculate_level",
    "calculate_xp_progress",
    "check_level_up",
    "get_next_level",
    "award_xp",
    "award_message_xp",
    "award_blog_xp",
    "award_streak_xp",
    "award_achievement_xp",
    "award_family_share_xp",
    "award_voice_xp",
    "get_user_xp",
    "get_user_xp_transactions",
    "initialize_user_xp",
    "update_streak",
    "get_streak",
    "check_and_reset_streak",
]
