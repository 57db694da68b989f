"""Global test fixtures and utilities for gramps-memory tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, date, timezone


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock psycopg connection whose cursor() works as an async context manager"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.cursor.return_value.__aexit__.return_value = False
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


@pytest.fixture
def mock_transaction_db(mock_db_connection):
    """Mock for the global ``db`` whose transaction() yields the mock connection"""
    mock_db = MagicMock()
    mock_db.transaction.return_value.__aenter__.return_value = mock_db_connection
    mock_db.transaction.return_value.__aexit__.return_value = False
    return mock_db


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "6f1c2a9e-3b7d-4c1e-9a55-0d2b8e4f7a10"


# ============================================================================
# Gamification Fixtures
# ============================================================================

@pytest.fixture
def xp_row(test_user_id):
    """Factory for user_xp rows as returned by the queries layer"""
    def _create(total_xp=0, current_level=1, xp_to_next_level=50):
        return {
            "user_id": test_user_id,
            "total_xp": total_xp,
            "current_level": current_level,
            "xp_to_next_level": xp_to_next_level,
            "created_at": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
            "updated_at": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        }
    return _create


@pytest.fixture
def streak_row(test_user_id):
    """Factory for user_streaks rows as returned by the queries layer"""
    def _create(current_streak=0, longest_streak=0, last_activity_date=None, total_memories=0):
        return {
            "user_id": test_user_id,
            "current_streak": current_streak,
            "longest_streak": longest_streak,
            "last_activity_date": last_activity_date,
            "total_memories": total_memories,
            "created_at": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
            "updated_at": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        }
    return _create


@pytest.fixture
def reference_today():
    """Fixed 'today' for streak tests"""
    return date(2024, 1, 6)
