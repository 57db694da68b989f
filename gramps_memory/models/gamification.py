"""Gamification models: levels, XP, ledger entries and streaks"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime


class LevelColor(str, Enum):
    """Display color of a level badge"""
    GRAY = "gray"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    RED = "red"
    YELLOW = "yellow"
    INDIGO = "indigo"
    PINK = "pink"
    GOLD = "gold"
    EMERALD = "emerald"
    VIOLET = "violet"
    RAINBOW = "rainbow"


class TransactionType(str, Enum):
    """Kinds of activity that grant XP"""
    MESSAGE_SENT = "message_sent"
    BLOG_CREATED = "blog_created"
    STREAK_BONUS = "streak_bonus"
    ACHIEVEMENT = "achievement"
    FAMILY_SHARE = "family_share"
    VOICE_RECORDING = "voice_recording"


class LevelInfo(BaseModel):
    """One tier of the level table"""
    model_config = ConfigDict(frozen=True)

    level: int
    min_xp: int
    max_xp: int
    xp_required: int
    title: str
    description: str
    color: LevelColor
    icon: str


class XPProgress(BaseModel):
    """Progress through the current level"""
    current_level_xp: int
    xp_to_next_level: int
    progress_percentage: float


class LevelUpCheck(BaseModel):
    """Result of comparing the levels of two XP totals"""
    leveled_up: bool
    old_level: LevelInfo
    new_level: LevelInfo


class UserXP(BaseModel):
    """Cumulative XP row for one user"""
    user_id: str
    total_xp: int = 0
    current_level: int = 1
    xp_to_next_level: int = 50
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class XPTransaction(BaseModel):
    """Append-only ledger entry for a single XP grant"""
    id: Optional[str] = None
    user_id: str
    xp_amount: int
    transaction_type: TransactionType
    description: str
    memory_id: Optional[str] = None
    created_at: Optional[datetime] = None


class UserStreak(BaseModel):
    """Daily memory-recording streak for one user"""
    user_id: str
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_activity_date: Optional[date] = None
    total_memories: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DailyActivity(BaseModel):
    """Marks a calendar day on which the user recorded a memory"""
    user_id: str
    activity_date: date
    memories_recorded: int = 1


class LevelSummary(BaseModel):
    """Everything the level card shows for one user"""
    user_id: str
    total_xp: int
    level: LevelInfo
    progress: XPProgress
    next_level: Optional[LevelInfo] = None
    benefits: list[str] = Field(default_factory=list)


class StreakUpdate(BaseModel):
    """Streak before and after an activity, and whether the day was newly counted"""
    streak: UserStreak
    previous: UserStreak
    counted_today: bool


class MemoryAchievement(BaseModel):
    """Milestone computed from a user's streak and memory count"""
    id: str
    title: str
    description: str
    icon: str
    unlocked: bool
    progress: int
    target: int


# ==========================================
# Operation results
# ==========================================

class OperationResult(BaseModel):
    """Outcome of a gamification call; failures carry a message instead of raising"""
    success: bool
    error: Optional[str] = None


class AwardResult(OperationResult):
    """Outcome of an XP award"""
    xp_awarded: int = 0
    leveled_up: bool = False
    new_level: Optional[LevelInfo] = None
    total_xp: Optional[int] = None


class UserXPResult(OperationResult):
    data: Optional[UserXP] = None


class XPTransactionsResult(OperationResult):
    data: list[XPTransaction] = Field(default_factory=list)


class ActivityOutcome(BaseModel):
    """Everything a single activity earned, ready for display"""
    xp_awarded: int = 0
    leveled_up: bool = False
    new_level: Optional[LevelInfo] = None
    current_streak: Optional[int] = None
    streak_counted_today: bool = False
    achievements_unlocked: list[MemoryAchievement] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    message: str = ""
