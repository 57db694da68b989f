"""
Level Table and Calculator

Thirteen fixed tiers from "Memory Keeper" to "Memory Deity". Each tier
covers the closed range [min_xp, max_xp]; the next tier starts at
max_xp + 1. XP beyond the last tier keeps the user at level 13.

| Level | XP range    | Title            |
|-------|-------------|------------------|
| 1     | 0 - 49      | Memory Keeper    |
| 2     | 50 - 119    | Story Teller     |
| 3     | 120 - 219   | Memory Collector |
| ...   | ...         | ...              |
| 13    | 2920 - 3419 | Memory Deity     |
"""

import random
from typing import Optional

from gramps_memory.models.gamification import LevelColor, LevelInfo, LevelUpCheck, XPProgress


def _tier(level, min_xp, max_xp, xp_required, title, description, color, icon) -> LevelInfo:
    return LevelInfo(
        level=level,
        min_xp=min_xp,
        max_xp=max_xp,
        xp_required=xp_required,
        title=title,
        description=description,
        color=color,
        icon=icon,
    )


LEVELS: tuple[LevelInfo, ...] = (
    _tier(1, 0, 49, 50, "Memory Keeper", "Just starting your journey", LevelColor.GRAY, "🌱"),
    _tier(2, 50, 119, 70, "Story Teller", "Learning to share memories", LevelColor.BLUE, "📝"),
    _tier(3, 120, 219, 100, "Memory Collector", "Building your collection", LevelColor.GREEN, "📚"),
    _tier(4, 220, 359, 140, "Family Historian", "Preserving family stories", LevelColor.PURPLE, "📖"),
    _tier(5, 360, 539, 180, "Memory Master", "Expert at capturing moments", LevelColor.ORANGE, "🎯"),
    _tier(6, 540, 759, 220, "Legacy Builder", "Creating lasting memories", LevelColor.RED, "🏗️"),
    _tier(7, 760, 1019, 260, "Memory Champion", "A true memory expert", LevelColor.YELLOW, "🥇"),
    _tier(8, 1020, 1319, 300, "Family Guardian", "Protector of family heritage", LevelColor.INDIGO, "🛡️"),
    _tier(9, 1320, 1659, 340, "Memory Legend", "Legendary memory keeper", LevelColor.PINK, "⭐"),
    _tier(10, 1660, 2039, 380, "Grandmaster", "The ultimate memory keeper", LevelColor.GOLD, "👑"),
    _tier(11, 2040, 2459, 420, "Memory Sage", "Wisdom keeper of memories", LevelColor.EMERALD, "🧙‍♂️"),
    _tier(12, 2460, 2919, 460, "Eternal Keeper", "Guardian of timeless stories", LevelColor.VIOLET, "🌟"),
    _tier(13, 2920, 3419, 500, "Memory Deity", "Divine memory preserver", LevelColor.RAINBOW, "✨"),
)

MAX_LEVEL = LEVELS[-1].level

_LEVELS_BY_NUMBER = {info.level: info for info in LEVELS}

LEVEL_BENEFITS = {
    1: ["🌱 Just starting your memory journey"],
    2: ["📝 Learning to share your stories"],
    3: ["📚 Building your memory collection"],
    4: ["📖 Becoming a family historian"],
    5: ["🎯 Mastering memory capture"],
    6: ["🏗️ Building lasting legacies"],
    7: ["🥇 A true memory champion"],
    8: ["🛡️ Guardian of family heritage"],
    9: ["⭐ Legendary memory keeper"],
    10: ["👑 The ultimate memory keeper"],
    11: ["🧙‍♂️ Wise keeper of memories"],
    12: ["🌟 Guardian of timeless stories"],
    13: ["✨ Divine memory preserver"],
}

MOTIVATIONAL_MESSAGES = {
    "early": [
        "Every memory counts! Keep going! 🌱",
        "You're building something beautiful! 📝",
        "Each story matters! 📚",
    ],
    "mid": [
        "You're making great progress! 📖",
        "Keep preserving those precious moments! 🎯",
        "Your dedication is inspiring! 🏗️",
    ],
    "late": [
        "Almost there! You're doing amazing! 🥇",
        "The finish line is in sight! 🛡️",
        "You're a true memory champion! ⭐",
    ],
    "complete": [
        "Congratulations! Level up! 🎉",
        "Amazing achievement! 🏆",
        "You're unstoppable! 👑",
    ],
}


def calculate_level(total_xp: int) -> LevelInfo:
    """
    Find the tier a total XP value falls in

    Negative totals count as 0. Totals past the last tier return the last
    tier; there is no level above 13.
    """
    total_xp = max(total_xp, 0)
    for info in LEVELS:
        if info.min_xp <= total_xp <= info.max_xp:
            return info
    return LEVELS[-1]


def calculate_xp_progress(total_xp: int, level_info: LevelInfo) -> XPProgress:
    """
    Calculate progress within a level

    Returns:
        XPProgress with XP earned inside the level, XP still needed for the
        next one (0 once the ceiling tier is full) and a 0-100 percentage
    """
    current_level_xp = total_xp - level_info.min_xp
    xp_to_next_level = max(level_info.xp_required - current_level_xp, 0)
    percentage = current_level_xp / level_info.xp_required * 100

    return XPProgress(
        current_level_xp=current_level_xp,
        xp_to_next_level=xp_to_next_level,
        progress_percentage=min(100.0, max(0.0, percentage)),
    )


def get_next_level(current_level: int) -> Optional[LevelInfo]:
    """Tier after ``current_level``, or None at the top of the table"""
    return _LEVELS_BY_NUMBER.get(current_level + 1) if current_level in _LEVELS_BY_NUMBER else None


def check_level_up(old_xp: int, new_xp: int) -> LevelUpCheck:
    """
    Compare the tiers of two XP totals

    leveled_up is True only when the new tier is strictly higher. XP never
    decreases, so a level-down is not reported.
    """
    old_level = calculate_level(old_xp)
    new_level = calculate_level(new_xp)

    return LevelUpCheck(
        leveled_up=new_level.level > old_level.level,
        old_level=old_level,
        new_level=new_level,
    )


def get_level_benefits(level: int) -> list[str]:
    """Cosmetic perks shown for a level (no features are gated by level)"""
    return list(LEVEL_BENEFITS.get(level, ["🏆 Memory master"]))


def format_xp(xp: int) -> str:
    """Format XP with thousands separators, e.g. 12,345"""
    return f"{xp:,}"


def get_motivational_message(progress_percentage: float, rng: Optional[random.Random] = None) -> str:
    """
    Pick an encouraging line for the level progress bar

    Args:
        progress_percentage: 0-100 progress inside the current level
        rng: Random source, for deterministic output in tests
    """
    if progress_percentage >= 100:
        bucket = "complete"
    elif progress_percentage >= 75:
        bucket = "late"
    elif progress_percentage >= 50:
        bucket = "mid"
    else:
        bucket = "early"

    chooser = rng or random
    return chooser.choice(MOTIVATIONAL_MESSAGES[bucket])
