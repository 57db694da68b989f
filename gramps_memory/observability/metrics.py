"""
Prometheus metrics for the gamification core.

- XP metrics: XP granted per activity type, failed awards, level-ups
- Ledger metrics: XP history entries that could not be written
- Streak metrics: streak transitions and passive decays
- Database metrics: retried statements

Recording helpers swallow their own errors; a metrics problem must never
break an award or a streak update.
"""

import logging
from prometheus_client import Counter

from gramps_memory.config import ENABLE_METRICS

logger = logging.getLogger(__name__)

# =============================================================================
# XP Metrics
# =============================================================================

xp_awarded_total = Counter(
    "gramps_xp_awarded_total",
    "Total XP granted",
    ["transaction_type"],
)

xp_award_failures_total = Counter(
    "gramps_xp_award_failures_total",
    "XP awards that could not be saved",
    ["transaction_type"],
)

level_ups_total = Counter(
    "gramps_level_ups_total",
    "Total level-ups",
    ["new_level"],
)

ledger_write_failures_total = Counter(
    "gramps_ledger_write_failures_total",
    "XP transactions dropped after the balance was saved",
)

# =============================================================================
# Streak Metrics
# =============================================================================

streak_updates_total = Counter(
    "gramps_streak_updates_total",
    "Streak updates by outcome",
    ["outcome"],  # started/continued/reset/already_counted/error
)

streak_decays_total = Counter(
    "gramps_streak_decays_total",
    "Streaks zeroed because a day was missed",
)

# =============================================================================
# Database Metrics
# =============================================================================

db_retries_total = Counter(
    "gramps_db_retries_total",
    "Retried database operations",
    ["operation"],
)


def record_xp_award(transaction_type: str, amount: int) -> None:
    if not ENABLE_METRICS:
        return
    try:
        xp_awarded_total.labels(transaction_type=transaction_type).inc(max(amount, 0))
    except Exception as e:
        logger.debug(f"Failed to record XP award metric: {e}")


def record_xp_award_failure(transaction_type: str) -> None:
    if not ENABLE_METRICS:
        return
    try:
        xp_award_failures_total.labels(transaction_type=transaction_type).inc()
    except Exception as e:
        logger.debug(f"Failed to record XP failure metric: {e}")


def record_level_up(new_level: int) -> None:
    if not ENABLE_METRICS:
        return
    try:
        level_ups_total.labels(new_level=str(new_level)).inc()
    except Exception as e:
        logger.debug(f"Failed to record level-up metric: {e}")


def record_ledger_failure() -> None:
    if not ENABLE_METRICS:
        return
    try:
        ledger_write_failures_total.inc()
    except Exception as e:
        logger.debug(f"Failed to record ledger metric: {e}")


def record_streak_update(outcome: str) -> None:
    if not ENABLE_METRICS:
        return
    try:
        streak_updates_total.labels(outcome=outcome).inc()
    except Exception as e:
        logger.debug(f"Failed to record streak metric: {e}")


def record_streak_decay() -> None:
    if not ENABLE_METRICS:
        return
    try:
        streak_decays_total.inc()
    except Exception as e:
        logger.debug(f"Failed to record streak decay metric: {e}")


def record_db_retry(operation: str) -> None:
    if not ENABLE_METRICS:
        return
    try:
        db_retries_total.labels(operation=operation).inc()
    except Exception as e:
        logger.debug(f"Failed to record retry metric: {e}")
