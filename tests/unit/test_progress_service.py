"""Unit tests for ProgressService (mindwell/services/progress_service.py)"""
import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from mindwell.exceptions import (
    InvalidActivityDateError,
    RecordNotFoundError,
    StorageError,
    UnknownExerciseError,
    ValidationError,
)
from mindwell.models.exercise import ExerciseCategory


# ============================================================================
# Exercise Completion Tests
# ============================================================================

@pytest.mark.asyncio
async def test_complete_exercise(progress_service, test_user_id, today, at_noon):
    result = await progress_service.complete_exercise(
        test_user_id, "values-clarification", occurred_at=at_noon(today)
    )

    assert result["exercise"].id == "values-clarification"
    assert result["xp_awarded"] == 35
    assert result["total_xp"] == 35
    assert result["level_up"] is False
    assert result["xp_to_next_level"] == 65
    assert result["current_streak"] == 1
    assert result["longest_streak"] == 1
    assert "first-steps" in [a.id for a in result["achievements_unlocked"]]
    assert "You earned 35 XP!" in result["message"]


@pytest.mark.asyncio
async def test_complete_exercise_level_up(progress_service, test_user_id, today, at_noon):
    for offset, exercise_id in enumerate(["values-clarification", "values-clarification"]):
        await progress_service.complete_exercise(
            test_user_id, exercise_id, occurred_at=at_noon(today - timedelta(days=offset + 1))
        )

    result = await progress_service.complete_exercise(
        test_user_id, "progressive-relaxation", occurred_at=at_noon(today)
    )

    assert result["total_xp"] == 100
    assert result["level_up"] is True
    assert result["old_level"] == 1
    assert result["new_level"] == 2
    assert result["current_streak"] == 3
    assert "level-2" in [a.id for a in result["achievements_unlocked"]]


@pytest.mark.asyncio
async def test_unknown_exercise_saves_nothing(progress_service, memory_store, test_user_id, today, at_noon):
    with pytest.raises(UnknownExerciseError):
        await progress_service.complete_exercise(test_user_id, "juggling", occurred_at=at_noon(today))

    assert not memory_store.has_user(test_user_id)


@pytest.mark.asyncio
async def test_future_completion_rejected(progress_service, test_user_id, today, at_noon):
    with pytest.raises(InvalidActivityDateError):
        await progress_service.complete_exercise(
            test_user_id, "breathing", occurred_at=at_noon(today + timedelta(days=10))
        )


@pytest.mark.asyncio
async def test_concurrent_completions_keep_every_award(
    progress_service, memory_store, monkeypatch, test_user_id, today, at_noon
):
    """Test two concurrent completions for one user both count"""
    store_update = memory_store.update

    async def yielding_update(user_id, transition, records=()):
        async def yielding(state):
            await asyncio.sleep(0)
            return transition(state)
        return await store_update(user_id, yielding, records)

    monkeypatch.setattr(memory_store, "update", yielding_update)

    await asyncio.gather(
        progress_service.complete_exercise(test_user_id, "breathing", occurred_at=at_noon(today)),
        progress_service.complete_exercise(test_user_id, "cognitive", occurred_at=at_noon(today)),
    )

    progress = progress_service.get_progress(test_user_id)
    assert progress["total_xp"] == 35
    assert progress["total_completions"] == 2
    assert len(progress_service.get_completions(test_user_id)) == 2


# ============================================================================
# Mood Logging Tests
# ============================================================================

@pytest.mark.asyncio
async def test_log_mood(progress_service, test_user_id, today, at_noon):
    result = await progress_service.log_mood(
        test_user_id, "Sad", intensity=5, note="long week", occurred_at=at_noon(today)
    )

    assert result["entry"].note == "long week"
    assert result["current_streak"] == 1
    assert result["recommended_category"] == "breathing"
    assert "Mood logged" in result["message"]
    assert progress_service.get_latest_mood(test_user_id).id == result["entry"].id
    assert progress_service.get_progress(test_user_id)["total_xp"] == 0


@pytest.mark.asyncio
async def test_log_mood_unknown_mood(progress_service, test_user_id):
    with pytest.raises(ValidationError) as exc_info:
        await progress_service.log_mood(test_user_id, "hangry")

    assert exc_info.value.field == "mood"


@pytest.mark.asyncio
async def test_log_mood_intensity_out_of_range(progress_service, test_user_id):
    with pytest.raises(ValidationError) as exc_info:
        await progress_service.log_mood(test_user_id, "good", intensity=7)

    assert exc_info.value.field == "intensity"


@pytest.mark.asyncio
async def test_invalid_mood_date_appends_nothing(progress_service, test_user_id, today, at_noon):
    with pytest.raises(InvalidActivityDateError):
        await progress_service.log_mood(test_user_id, "good", occurred_at=at_noon(today + timedelta(days=5)))

    assert progress_service.get_moods(test_user_id) == []


@pytest.mark.asyncio
async def test_failed_save_keeps_mood_log_and_state_in_step(
    progress_service, memory_store, test_user_id, today, at_noon
):
    """Test a mood whose progress could not be saved is not kept in the log"""
    with patch.object(memory_store, "_save_progress", side_effect=StorageError("disk full")):
        with pytest.raises(StorageError):
            await progress_service.log_mood(test_user_id, "good", occurred_at=at_noon(today))

    state = memory_store.get_state(test_user_id)
    assert progress_service.get_moods(test_user_id) == []
    assert state.mood_entry_count == 0
    assert state.activity_days == frozenset()


@pytest.mark.asyncio
async def test_seventh_mood_unlocks_mood_master(progress_service, test_user_id, today, at_noon):
    for offset in range(6):
        await progress_service.log_mood(test_user_id, "okay", occurred_at=at_noon(today - timedelta(days=offset)))

    result = await progress_service.log_mood(test_user_id, "great", occurred_at=at_noon(today))

    assert "mood-master" in [a.id for a in result["achievements_unlocked"]]
    assert len(progress_service.get_moods(test_user_id)) == 7


def test_latest_mood_missing(progress_service, test_user_id):
    with pytest.raises(RecordNotFoundError):
        progress_service.get_latest_mood(test_user_id)


# ============================================================================
# Read View Tests
# ============================================================================

@pytest.mark.asyncio
async def test_get_streaks(progress_service, test_user_id, today, at_noon):
    for offset in (1, 2):
        await progress_service.complete_exercise(
            test_user_id, "breathing", occurred_at=at_noon(today - timedelta(days=offset))
        )

    streaks = progress_service.get_streaks(test_user_id)

    assert streaks["today"] == today
    assert streaks["current_streak"] == 2
    assert streaks["at_risk"] is True
    assert streaks["week_view"] == [1, 2]
    assert streaks["projected_week_view"] == [2, 3]
    assert "2 day streak" in streaks["message"]


def test_get_streaks_new_user(progress_service, test_user_id):
    streaks = progress_service.get_streaks(test_user_id)

    assert streaks["current_streak"] == 0
    assert streaks["week_view"] == []
    assert streaks["projected_week_view"] == []


@pytest.mark.asyncio
async def test_get_progress(progress_service, test_user_id, today, at_noon):
    await progress_service.complete_exercise(test_user_id, "gratitude", occurred_at=at_noon(today))

    progress = progress_service.get_progress(test_user_id)

    assert progress["total_xp"] == 20
    assert progress["current_level"] == 1
    assert progress["completion_counts"] == {"gratitude": 1}


def test_get_achievements_new_user(progress_service, test_user_id):
    achievements = progress_service.get_achievements(test_user_id)

    assert achievements["unlocked"] == []
    assert achievements["total_unlocked"] == 0
    assert len(achievements["locked"]) == achievements["total_achievements"]


def test_exercise_catalog_views(progress_service):
    breathing = progress_service.list_exercises(ExerciseCategory.BREATHING)

    assert {e.id for e in breathing} == {"breathing", "box-breathing"}
    assert len(progress_service.list_exercises()) == 9
    assert progress_service.get_exercise("gratitude").xp_reward == 20

    with pytest.raises(UnknownExerciseError):
        progress_service.get_exercise("juggling")


def test_recommend(progress_service):
    result = progress_service.recommend("low", 4)

    assert result["category"] == "cognitive"
    assert [e.id for e in result["exercises"]] == ["cognitive", "thought-record", "values-clarification"]


@pytest.mark.asyncio
async def test_set_timezone(progress_service, test_user_id):
    assert await progress_service.set_timezone(test_user_id, "Asia/Tokyo") == "Asia/Tokyo"

    with pytest.raises(ValidationError):
        await progress_service.set_timezone(test_user_id, "Atlantis/Capital")


# ============================================================================
# Completion History Tests
# ============================================================================

@pytest.mark.asyncio
async def test_get_completions(progress_service, test_user_id, today, at_noon):
    for offset, exercise_id in enumerate(["gratitude", "breathing", "cognitive"]):
        await progress_service.complete_exercise(
            test_user_id, exercise_id, occurred_at=at_noon(today - timedelta(days=offset * 4))
        )

    history = progress_service.get_completions(test_user_id)

    assert [e.exercise_id for e in history] == ["gratitude", "breathing", "cognitive"]
    assert all(e.user_id == test_user_id for e in history)


@pytest.mark.asyncio
async def test_get_completions_recent_days(progress_service, test_user_id, today, at_noon):
    """Test days counts local calendar days back from today, today included"""
    await progress_service.complete_exercise(test_user_id, "breathing", occurred_at=at_noon(today))
    await progress_service.complete_exercise(
        test_user_id, "gratitude", occurred_at=at_noon(today - timedelta(days=6))
    )
    await progress_service.complete_exercise(
        test_user_id, "cognitive", occurred_at=at_noon(today - timedelta(days=7))
    )

    assert [e.exercise_id for e in progress_service.get_completions(test_user_id, days=7)] == [
        "breathing", "gratitude"
    ]
    assert [e.exercise_id for e in progress_service.get_completions(test_user_id, days=1)] == ["breathing"]


@pytest.mark.asyncio
async def test_get_completions_recent_days_uses_user_timezone(progress_service, test_user_id, today):
    await progress_service.set_timezone(test_user_id, "Asia/Tokyo")
    late_evening_utc = datetime(today.year, today.month, today.day, 16, 0, tzinfo=timezone.utc)
    await progress_service.complete_exercise(
        test_user_id, "breathing", occurred_at=late_evening_utc - timedelta(days=1)
    )

    # 16:00 UTC yesterday is already today in Tokyo
    assert len(progress_service.get_completions(test_user_id, days=1)) == 1


@pytest.mark.asyncio
async def test_unknown_exercise_is_not_logged(progress_service, test_user_id, today, at_noon):
    with pytest.raises(UnknownExerciseError):
        await progress_service.complete_exercise(test_user_id, "juggling", occurred_at=at_noon(today))

    assert progress_service.get_completions(test_user_id) == []


def test_get_completions_rejects_bad_days(progress_service, test_user_id):
    with pytest.raises(ValidationError) as exc_info:
        progress_service.get_completions(test_user_id, days=0)

    assert exc_info.value.field == "days"
