"""Pydantic models shared across gramps-memory"""
from gramps_memory.models.gamification import (
    ActivityOutcome,
    AwardResult,
    DailyActivity,
    LevelColor,
    LevelInfo,
    LevelSummary,
    LevelUpCheck,
    MemoryAchievement,
    OperationResult,
    StreakUpdate,
    TransactionType,
    UserStreak,
    UserXP,
    UserXPResult,
    XPProgress,
    XPTransaction,
    XPTransactionsResult,
)

__all__ = [
    "ActivityOutcome",
    "AwardResult",
    "DailyActivity",
    "LevelColor",
    "LevelInfo",
    "LevelSummary",
    "LevelUpCheck",
    "MemoryAchievement",
    "OperationResult",
    "StreakUpdate",
    "TransactionType",
    "UserStreak",
    "UserXP",
    "UserXPResult",
    "XPProgress",
    "XPTransaction",
    "XPTransactionsResult",
]
