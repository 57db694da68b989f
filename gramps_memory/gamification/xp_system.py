"""
XP Award Engine

The only writer of cumulative XP. Every award adds to the user's total,
re-derives the level from the level table and appends an entry to the XP
ledger.

XP Award Rules:
- Message sent (text or voice): 2 XP
- Blog post created: 10 XP
- Streak milestones: day 1 25, day 3 50, day 7 100, day 14 150,
  day 30 250, day 100 500, then 100 every 50 days; 0 on other days
- Achievement unlocked: 100 XP
- Family share: 50 XP per family member
- Voice recording: 75 XP, +25 when longer than a minute

The balance is authoritative and the ledger is advisory: when the balance
is saved but the ledger insert keeps failing, the award still succeeds.
"""

from typing import Optional, Union
from datetime import timedelta
import logging

from gramps_memory.config import LEDGER_WRITE_RETRIES
from gramps_memory.db import queries
from gramps_memory.db.connection import db
from gramps_memory.exceptions import ValidationError, wrap_external_exception
from gramps_memory.gamification.levels import (
    calculate_level,
    calculate_xp_progress,
    check_level_up,
    get_level_benefits,
    get_next_level,
)
from gramps_memory.models.gamification import (
    AwardResult,
    LevelSummary,
    OperationResult,
    TransactionType,
    UserXP,
    UserXPResult,
    XPTransaction,
    XPTransactionsResult,
)
from gramps_memory.observability.metrics import (
    record_ledger_failure,
    record_level_up,
    record_xp_award,
    record_xp_award_failure,
)
from gramps_memory.resilience.retry import retry_with_backoff
from gramps_memory.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)

XP_REWARDS = {
    "message_sent": 2,
    "blog_post_created": 10,
    "achievement_unlocked": 100,
    "family_share": 50,
    "voice_recording": 75,
    "voice_length_bonus": 25,
}

STREAK_MILESTONE_XP = {1: 25, 3: 50, 7: 100, 14: 150, 30: 250, 100: 500}
STREAK_LONG_RUN_INTERVAL = 50
STREAK_LONG_RUN_XP = 100

VOICE_BONUS_MIN_SECONDS = 60
MESSAGE_TYPES = ("text", "voice")


# ==========================================
# XP calculators
# ==========================================

def calculate_message_xp() -> int:
    return XP_REWARDS["message_sent"]


def calculate_blog_xp() -> int:
    return XP_REWARDS["blog_post_created"]


def calculate_streak_xp(streak_count: int) -> int:
    """
    XP for reaching a streak length

    Only milestone days earn XP. Past day 100 every 50th day earns 100.
    """
    if streak_count in STREAK_MILESTONE_XP:
        return STREAK_MILESTONE_XP[streak_count]
    if streak_count > 100 and streak_count % STREAK_LONG_RUN_INTERVAL == 0:
        return STREAK_LONG_RUN_XP
    return 0


def calculate_family_share_xp(recipient_count: int) -> int:
    if recipient_count < 0:
        raise ValidationError(
            "must not be negative",
            field="recipient_count",
            value=recipient_count,
            operation="award_family_share_xp",
        )
    return XP_REWARDS["family_share"] * recipient_count


def calculate_voice_xp(duration_seconds: Optional[float] = None) -> int:
    if duration_seconds is not None and duration_seconds < 0:
        raise ValidationError(
            "must not be negative",
            field="duration_seconds",
            value=duration_seconds,
            operation="award_voice_xp",
        )
    amount = XP_REWARDS["voice_recording"]
    if duration_seconds and duration_seconds > VOICE_BONUS_MIN_SECONDS:
        amount += XP_REWARDS["voice_length_bonus"]
    return amount


# ==========================================
# Award engine
# ==========================================

async def award_xp(
    user_id: str,
    xp_amount: int,
    transaction_type: Union[TransactionType, str],
    description: str,
    memory_id: Optional[str] = None
) -> AwardResult:
    """
    Award XP to user and check for level up

    The total is incremented inside the database, so two awards racing for
    the same user both count. The ledger entry is written afterwards and
    retried on transient errors; its failure does not fail the award.

    Args:
        user_id: User's account ID
        xp_amount: XP to add (callers are responsible for keeping it >= 0)
        transaction_type: Activity that earned the XP
        description: Human-readable description for the ledger
        memory_id: Optional blog post / memory the XP belongs to

    Returns:
        AwardResult; new_level is set only when the user leveled up
    """
    try:
        transaction_type = TransactionType(transaction_type)
    except ValueError:
        error = ValidationError(
            "unknown transaction type",
            field="transaction_type",
            value=transaction_type,
            user_id=user_id,
            operation="award_xp",
        )
        return AwardResult(success=False, error=error.user_message)

    try:
        async with db.transaction() as conn:
            row = await queries.increment_user_xp(user_id, xp_amount, conn=conn)
            new_total_xp = row["total_xp"]
            level_info = calculate_level(new_total_xp)
            progress = calculate_xp_progress(new_total_xp, level_info)
            await queries.update_user_level(
                user_id, level_info.level, progress.xp_to_next_level, conn=conn
            )
    except Exception as e:
        error = wrap_external_exception(
            e,
            operation="award_xp",
            user_id=user_id,
            context={"xp_amount": xp_amount, "transaction_type": transaction_type.value},
        )
        record_xp_award_failure(transaction_type.value)
        return AwardResult(success=False, error=f"Failed to award XP: {error.message}")

    old_total_xp = new_total_xp - xp_amount
    level_check = check_level_up(old_total_xp, new_total_xp)

    await _record_transaction(user_id, xp_amount, transaction_type, description, memory_id)

    record_xp_award(transaction_type.value, xp_amount)
    logger.info(
        f"Awarded {xp_amount} XP to user {user_id} for {transaction_type.value}. "
        f"Total: {new_total_xp} XP, Level: {level_info.level}"
    )

    if level_check.leveled_up:
        record_level_up(level_check.new_level.level)
        logger.info(
            f"User {user_id} leveled up from {level_check.old_level.level} "
            f"to {level_check.new_level.level} ({level_check.new_level.title})!"
        )

    return AwardResult(
        success=True,
        xp_awarded=xp_amount,
        leveled_up=level_check.leveled_up,
        new_level=level_check.new_level if level_check.leveled_up else None,
        total_xp=new_total_xp,
    )


async def _record_transaction(
    user_id: str,
    xp_amount: int,
    transaction_type: TransactionType,
    description: str,
    memory_id: Optional[str]
) -> bool:
    """Append the ledger entry; returns False if it was dropped"""
    try:
        await retry_with_backoff(
            queries.add_xp_transaction,
            user_id,
            xp_amount,
            transaction_type.value,
            description,
            memory_id,
            max_retries=LEDGER_WRITE_RETRIES,
        )
        return True
    except Exception as e:
        record_ledger_failure()
        logger.error(
            f"Failed to record XP transaction for user {user_id} "
            f"({xp_amount} XP, {transaction_type.value}); balance already saved: {e}",
            exc_info=True,
        )
        return False


# ==========================================
# Activity helpers
# ==========================================

async def award_message_xp(user_id: str, message_type: str = "text") -> AwardResult:
    """Award XP for a text or voice message in the memory conversation"""
    if message_type not in MESSAGE_TYPES:
        error = ValidationError(
            "must be 'text' or 'voice'",
            field="message_type",
            value=message_type,
            user_id=user_id,
            operation="award_message_xp",
        )
        return AwardResult(success=False, error=error.user_message)

    return await award_xp(
        user_id,
        calculate_message_xp(),
        TransactionType.MESSAGE_SENT,
        f"Sent a {message_type} message",
    )


async def award_blog_xp(user_id: str, blog_post_id: str) -> AwardResult:
    """Award XP for turning a memory into a blog post"""
    return await award_xp(
        user_id,
        calculate_blog_xp(),
        TransactionType.BLOG_CREATED,
        "Created a blog post",
        blog_post_id,
    )


async def award_streak_xp(user_id: str, streak_count: int) -> AwardResult:
    """
    Award the milestone bonus for a streak length

    Non-milestone days succeed with 0 XP and write nothing.
    """
    xp_amount = calculate_streak_xp(streak_count)

    if xp_amount == 0:
        return AwardResult(success=True, xp_awarded=0)

    return await award_xp(
        user_id,
        xp_amount,
        TransactionType.STREAK_BONUS,
        f"{streak_count} day streak bonus",
    )


async def award_achievement_xp(user_id: str, achievement_title: str) -> AwardResult:
    return await award_xp(
        user_id,
        XP_REWARDS["achievement_unlocked"],
        TransactionType.ACHIEVEMENT,
        f"Achievement unlocked: {achievement_title}",
    )


async def award_family_share_xp(user_id: str, recipient_count: int) -> AwardResult:
    """
    Award XP for emailing a blog post to family members

    Sharing with nobody succeeds with 0 XP and writes nothing.
    """
    try:
        xp_amount = calculate_family_share_xp(recipient_count)
    except ValidationError as e:
        return AwardResult(success=False, error=e.user_message)

    if xp_amount == 0:
        return AwardResult(success=True, xp_awarded=0)

    return await award_xp(
        user_id,
        xp_amount,
        TransactionType.FAMILY_SHARE,
        f"Shared with {recipient_count} family member(s)",
    )


async def award_voice_xp(user_id: str, duration_seconds: Optional[float] = None) -> AwardResult:
    """Award XP for a voice recording, with a bonus past one minute"""
    try:
        xp_amount = calculate_voice_xp(duration_seconds)
    except ValidationError as e:
        return AwardResult(success=False, error=e.user_message)

    has_bonus = bool(duration_seconds and duration_seconds > VOICE_BONUS_MIN_SECONDS)
    return await award_xp(
        user_id,
        xp_amount,
        TransactionType.VOICE_RECORDING,
        "Voice recording (bonus for length)" if has_bonus else "Voice recording",
    )


# ==========================================
# Read side
# ==========================================

async def get_user_xp(user_id: str) -> UserXPResult:
    """
    Get user's XP row

    A user who has never earned XP gets success with data=None.
    """
    try:
        row = await queries.get_user_xp_data(user_id)
        return UserXPResult(success=True, data=UserXP(**row) if row else None)
    except Exception as e:
        error = wrap_external_exception(e, operation="get_user_xp", user_id=user_id)
        return UserXPResult(success=False, error=f"Failed to fetch XP data: {error.message}")


async def get_user_level_info(user_id: str) -> Optional[LevelSummary]:
    """
    Get level, progress and next tier for display

    Returns:
        LevelSummary (level 1 with 0 XP for new users), or None if the
        XP row could not be read
    """
    result = await get_user_xp(user_id)
    if not result.success:
        return None

    total_xp = result.data.total_xp if result.data else 0
    level_info = calculate_level(total_xp)

    return LevelSummary(
        user_id=user_id,
        total_xp=total_xp,
        level=level_info,
        progress=calculate_xp_progress(total_xp, level_info),
        next_level=get_next_level(level_info.level),
        benefits=get_level_benefits(level_info.level),
    )


async def get_user_xp_transactions(user_id: str, limit: int = 10) -> XPTransactionsResult:
    """
    Get the most recent XP ledger entries, newest first

    Args:
        user_id: User's account ID
        limit: Maximum number of entries (must be positive)
    """
    if limit <= 0:
        error = ValidationError(
            "must be positive",
            field="limit",
            value=limit,
            user_id=user_id,
            operation="get_user_xp_transactions",
        )
        return XPTransactionsResult(success=False, error=error.user_message)

    try:
        rows = await queries.get_xp_transactions(user_id, limit=limit)
        return XPTransactionsResult(success=True, data=[XPTransaction(**row) for row in rows])
    except Exception as e:
        error = wrap_external_exception(e, operation="get_user_xp_transactions", user_id=user_id)
        return XPTransactionsResult(success=False, error=f"Failed to fetch XP transactions: {error.message}")


async def get_xp_history(user_id: str, days: int = 7, limit: int = 50) -> XPTransactionsResult:
    """
    Get XP ledger entries from the last ``days`` days, newest first
    """
    result = await get_user_xp_transactions(user_id, limit=limit)
    if not result.success:
        return result

    cutoff = now_utc() - timedelta(days=days)
    recent = [
        t for t in result.data
        if t.created_at is not None and _as_utc(t.created_at) >= cutoff
    ]
    return XPTransactionsResult(success=True, data=recent)


def _as_utc(value):
    # timestamp columns without a zone are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=now_utc().tzinfo)
    return value


async def initialize_user_xp(user_id: str) -> OperationResult:
    """
    Create the zero-state XP row ahead of the first award

    Calling it for a user who already has XP changes nothing.
    """
    try:
        created = await queries.insert_user_xp(user_id)
        if not created:
            logger.debug(f"XP record already exists for user {user_id}")
        return OperationResult(success=True)
    except Exception as e:
        error = wrap_external_exception(e, operation="initialize_user_xp", user_id=user_id)
        return OperationResult(success=False, error=f"Failed to initialize XP data: {error.message}")
