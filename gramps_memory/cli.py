"""
Command-line tool for inspecting and adjusting a user's gamification state

Usage:
    gramps-memory xp USER_ID
    gramps-memory history USER_ID --limit 20
    gramps-memory streak USER_ID
    gramps-memory check-streak USER_ID
    gramps-memory award USER_ID 50 achievement "Welcome back bonus"
"""
import argparse
import asyncio
import logging
import sys

from gramps_memory.config import validate_config, LOG_LEVEL
from gramps_memory.db.connection import db
from gramps_memory.gamification.achievements import get_memory_achievements
from gramps_memory.gamification.levels import format_xp, get_motivational_message
from gramps_memory.gamification.streak_system import (
    check_and_reset_streak,
    format_streak_display,
    get_streak,
)
from gramps_memory.gamification.xp_system import (
    award_xp,
    get_user_level_info,
    get_user_xp_transactions,
)
from gramps_memory.models.gamification import TransactionType

logger = logging.getLogger(__name__)


async def show_xp(user_id: str) -> int:
    summary = await get_user_level_info(user_id)
    if summary is None:
        print("❌ Could not load XP data")
        return 1

    level = summary.level
    print(f"{level.icon} Level {level.level} - {level.title}")
    print(f"   {level.description}")
    print(f"   {format_xp(summary.total_xp)} XP ({summary.progress.progress_percentage:.0f}% of this level)")
    if summary.next_level:
        print(f"   {format_xp(summary.progress.xp_to_next_level)} XP to {summary.next_level.title}")
    else:
        print("   Highest level reached")
    for benefit in summary.benefits:
        print(f"   {benefit}")
    print(f"   {get_motivational_message(summary.progress.progress_percentage)}")
    return 0


async def show_history(user_id: str, limit: int) -> int:
    result = await get_user_xp_transactions(user_id, limit=limit)
    if not result.success:
        print(f"❌ {result.error}")
        return 1

    if not result.data:
        print("No XP earned yet")
        return 0

    for t in result.data:
        when = t.created_at.strftime("%Y-%m-%d %H:%M") if t.created_at else "?"
        print(f"{when}  +{t.xp_amount:>4} XP  {t.transaction_type.value:<16} {t.description}")
    return 0


async def show_streak(user_id: str, check: bool) -> int:
    streak = await check_and_reset_streak(user_id) if check else await get_streak(user_id)
    if streak is None and check:
        print("❌ Could not load streak")
        return 1

    print(format_streak_display(streak))
    if streak:
        for achievement in get_memory_achievements(streak):
            mark = "✅" if achievement.unlocked else "⬜"
            print(f"{mark} {achievement.icon} {achievement.title} ({achievement.progress}/{achievement.target})")
    return 0


async def grant_xp(user_id: str, amount: int, transaction_type: str, description: str) -> int:
    result = await award_xp(user_id, amount, transaction_type, description)
    if not result.success:
        print(f"❌ {result.error}")
        return 1

    print(f"✅ Awarded {amount} XP. Total: {format_xp(result.total_xp)} XP")
    if result.leveled_up:
        print(f"🎉 Level up! Now level {result.new_level.level}: {result.new_level.title}")
    return 0


async def run_command(args: argparse.Namespace) -> int:
    await db.init_pool()
    try:
        if args.command == "xp":
            return await show_xp(args.user_id)
        if args.command == "history":
            return await show_history(args.user_id, args.limit)
        if args.command in ("streak", "check-streak"):
            return await show_streak(args.user_id, check=args.command == "check-streak")
        return await grant_xp(args.user_id, args.amount, args.transaction_type, args.description)
    finally:
        await db.close_pool()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gramps Memory XP and streak tools")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("xp", help="Show level and XP").add_argument("user_id", help="User account ID")

    history = sub.add_parser("history", help="Show recent XP transactions")
    history.add_argument("user_id", help="User account ID")
    history.add_argument("--limit", type=int, default=10, help="Number of transactions (default: 10)")

    sub.add_parser("streak", help="Show streak and milestones").add_argument("user_id", help="User account ID")
    sub.add_parser(
        "check-streak", help="Reset a lapsed streak, then show it"
    ).add_argument("user_id", help="User account ID")

    award = sub.add_parser("award", help="Grant XP manually")
    award.add_argument("user_id", help="User account ID")
    award.add_argument("amount", type=int, help="XP to grant")
    award.add_argument("transaction_type", choices=[t.value for t in TransactionType])
    award.add_argument("description", help="Ledger description")

    return parser


def run(argv=None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    )
    validate_config()

    if getattr(args, "amount", 0) < 0:
        print("❌ amount must not be negative")
        sys.exit(2)

    sys.exit(asyncio.run(run_command(args)))


if __name__ == "__main__":
    run()
