"""Global test fixtures and utilities for mindwell tests"""
import pytest
from datetime import datetime, date, timezone
from pathlib import Path
import tempfile

from mindwell.db.store import ProgressStore
from mindwell.gamification.catalog import DEFAULT_ACHIEVEMENTS, get_exercise_catalog
from mindwell.models.progress import UserProgressState
from mindwell.services.progress_service import ProgressService


# ============================================================================
# User & Auth Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "123456789"


@pytest.fixture
def test_api_key():
    """Standard test API key"""
    return "test_api_key_12345"


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def today():
    """Fixed 'today' for deterministic streak tests (a Wednesday)"""
    return date(2024, 3, 13)


@pytest.fixture
def at_noon():
    """Build a UTC noon timestamp for a calendar day"""
    def _at_noon(day: date) -> datetime:
        return datetime(day.year, day.month, day.day, 12, 0, 0, tzinfo=timezone.utc)
    return _at_noon


# ============================================================================
# Gamification Fixtures
# ============================================================================

@pytest.fixture
def exercise_catalog():
    """Default exercise catalog (id → definition)"""
    return get_exercise_catalog()


@pytest.fixture
def achievements():
    """Default achievement catalog"""
    return list(DEFAULT_ACHIEVEMENTS)


@pytest.fixture
def empty_state(test_user_id):
    """Progress state of a brand new user"""
    return UserProgressState(user_id=test_user_id)


@pytest.fixture
def state_factory(test_user_id):
    """Factory for progress states with custom fields"""
    def _create(**kwargs):
        kwargs.setdefault("user_id", test_user_id)
        return UserProgressState(**kwargs)
    return _create


# ============================================================================
# Store & Service Fixtures
# ============================================================================

@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_store():
    """In-memory progress store"""
    return ProgressStore()


@pytest.fixture
def progress_service(memory_store, today):
    """ProgressService whose clock always returns the fixed 'today'"""
    return ProgressService(memory_store, clock=lambda tz: today)
