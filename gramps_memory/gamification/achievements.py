"""
Memory Milestones

Milestones are derived from the streak row every time they are shown, so
there is nothing to store. Streak milestones are measured on
longest_streak, which never drops, so each one unlocks once and stays
unlocked after the current run breaks.
"""

from typing import NamedTuple, Optional

from gramps_memory.models.gamification import MemoryAchievement, UserStreak


class _Milestone(NamedTuple):
    id: str
    title: str
    description: str
    icon: str
    metric: str  # "longest_streak" or "total_memories"
    target: int


MILESTONES = (
    _Milestone("first_memory", "First Memory Recorded", "Record your very first memory", "🎉", "total_memories", 1),
    _Milestone("week_streak", "7 Days in a Row", "Record memories for 7 consecutive days", "🔥", "longest_streak", 7),
    _Milestone("month_streak", "30 Days in a Row", "Record memories for 30 consecutive days", "💪", "longest_streak", 30),
    _Milestone("hundred_memories", "100 Memories Saved", "Save 100 precious memories", "📚", "total_memories", 100),
    _Milestone("five_hundred_memories", "500 Memories Saved", "Save 500 precious memories", "🏆", "total_memories", 500),
    _Milestone("thousand_memories", "1000 Memories Saved", "Save 1000 precious memories", "👑", "total_memories", 1000),
)


def get_memory_achievements(streak: UserStreak) -> list[MemoryAchievement]:
    """All milestones with the user's progress toward each"""
    achievements = []
    for milestone in MILESTONES:
        value = getattr(streak, milestone.metric)
        achievements.append(
            MemoryAchievement(
                id=milestone.id,
                title=milestone.title,
                description=milestone.description,
                icon=milestone.icon,
                unlocked=value >= milestone.target,
                progress=min(value, milestone.target),
                target=milestone.target,
            )
        )
    return achievements


def newly_unlocked_achievements(
    before: Optional[UserStreak],
    after: UserStreak
) -> list[MemoryAchievement]:
    """
    Milestones unlocked by going from ``before`` to ``after``

    A streak milestone reached again after a reset is not new.
    """
    already = set()
    if before is not None:
        already = {a.id for a in get_memory_achievements(before) if a.unlocked}

    return [
        a for a in get_memory_achievements(after)
        if a.unlocked and a.id not in already
    ]
