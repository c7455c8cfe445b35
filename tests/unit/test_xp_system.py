"""Unit tests for XP and Leveling System (mindwell/gamification/xp_system.py)"""
import pytest
from datetime import date, timedelta

from mindwell.exceptions import InvalidActivityDateError, UnknownExerciseError, ValidationError
from mindwell.gamification.xp_system import (
    XP_PER_LEVEL,
    apply_exercise_completion,
    apply_mood_entry,
    calculate_level,
    calculate_level_from_xp,
    xp_for_level,
)
from mindwell.models.exercise import ExerciseCategory, ExerciseCompletionEvent
from mindwell.models.mood import Mood, MoodEntry


# ============================================================================
# Level Calculation Tests
# ============================================================================

@pytest.mark.parametrize("total_xp,expected_level", [
    (0, 1),
    (99, 1),
    (100, 2),
    (250, 3),
    (1000, 11),
])
def test_calculate_level(total_xp, expected_level):
    """Level is floor(total_xp / 100) + 1"""
    assert calculate_level(total_xp) == expected_level


def test_calculate_level_negative_xp_is_level_1():
    assert calculate_level(-50) == 1


def test_xp_for_level():
    assert xp_for_level(1) == 0
    assert xp_for_level(2) == XP_PER_LEVEL
    assert xp_for_level(5) == 400


def test_calculate_level_from_xp_zero():
    """Test level 1 with 0 XP"""
    result = calculate_level_from_xp(0)

    assert result["current_level"] == 1
    assert result["xp_in_current_level"] == 0
    assert result["xp_to_next_level"] == 100
    assert result["total_xp_for_next_level"] == 100


def test_calculate_level_from_xp_mid_level():
    result = calculate_level_from_xp(250)

    assert result["current_level"] == 3
    assert result["xp_in_current_level"] == 50
    assert result["xp_to_next_level"] == 50
    assert result["total_xp_for_next_level"] == 300


# ============================================================================
# Exercise Completion Tests
# ============================================================================

def test_apply_exercise_completion_awards_catalog_xp(empty_state, exercise_catalog, today, at_noon):
    """Test XP awarded equals the exercise's xp_reward"""
    event = ExerciseCompletionEvent(
        user_id=empty_state.user_id,
        exercise_id="cognitive",
        occurred_at=at_noon(today)
    )

    new_state, xp = apply_exercise_completion(empty_state, event, exercise_catalog, today=today)

    assert xp == 25
    assert new_state.total_xp == 25
    assert new_state.completions_for(ExerciseCategory.COGNITIVE) == 1
    assert today in new_state.activity_days
    assert new_state.longest_streak == 1


def test_total_xp_is_sum_of_rewards(empty_state, exercise_catalog, today, at_noon):
    """Test total XP is the sum of rewards of all completions"""
    exercise_ids = ["cognitive", "breathing", "gratitude", "breathing", "values-clarification"]
    state = empty_state

    for offset, exercise_id in enumerate(exercise_ids):
        day = today - timedelta(days=offset)
        event = ExerciseCompletionEvent(
            user_id=state.user_id,
            exercise_id=exercise_id,
            occurred_at=at_noon(day)
        )
        state, _ = apply_exercise_completion(state, event, exercise_catalog, today=today)

    expected = sum(exercise_catalog[e].xp_reward for e in exercise_ids)
    assert state.total_xp == expected
    assert state.level == 1 + expected // 100
    assert state.total_completions == len(exercise_ids)
    assert state.completions_for(ExerciseCategory.BREATHING) == 2


def test_same_day_completions_award_xp_each_time(empty_state, exercise_catalog, today, at_noon):
    """XP accumulates per completion even when the streak day is already recorded"""
    event = ExerciseCompletionEvent(
        user_id=empty_state.user_id,
        exercise_id="breathing",
        occurred_at=at_noon(today)
    )

    state, _ = apply_exercise_completion(empty_state, event, exercise_catalog, today=today)
    state, _ = apply_exercise_completion(state, event, exercise_catalog, today=today)

    assert state.total_xp == 20
    assert state.activity_days == frozenset({today})
    assert state.longest_streak == 1


def test_unknown_exercise_rejected_without_mutation(state_factory, exercise_catalog, today, at_noon):
    """Test unknown exercise raises and leaves the prior state untouched"""
    state = state_factory(total_xp=80)
    event = ExerciseCompletionEvent(
        user_id=state.user_id,
        exercise_id="does-not-exist",
        occurred_at=at_noon(today)
    )

    with pytest.raises(UnknownExerciseError) as exc_info:
        apply_exercise_completion(state, event, exercise_catalog, today=today)

    assert exc_info.value.exercise_id == "does-not-exist"
    assert state.total_xp == 80
    assert state.activity_days == frozenset()


def test_completion_for_other_user_rejected(empty_state, exercise_catalog, today, at_noon):
    event = ExerciseCompletionEvent(
        user_id="someone-else",
        exercise_id="breathing",
        occurred_at=at_noon(today)
    )

    with pytest.raises(ValidationError):
        apply_exercise_completion(empty_state, event, exercise_catalog, today=today)


def test_far_future_completion_rejected(empty_state, exercise_catalog, today, at_noon):
    event = ExerciseCompletionEvent(
        user_id=empty_state.user_id,
        exercise_id="breathing",
        occurred_at=at_noon(date(2030, 1, 1))
    )

    with pytest.raises(InvalidActivityDateError):
        apply_exercise_completion(empty_state, event, exercise_catalog, today=today)


# ============================================================================
# Mood Entry Tests
# ============================================================================

def test_apply_mood_entry_counts_activity_without_xp(empty_state, today, at_noon):
    """Test mood entries record a streak day but award no XP"""
    entry = MoodEntry(user_id=empty_state.user_id, mood=Mood.LOW, intensity=2, occurred_at=at_noon(today))

    new_state = apply_mood_entry(empty_state, entry, today=today)

    assert new_state.total_xp == 0
    assert new_state.mood_entry_count == 1
    assert new_state.activity_days == frozenset({today})


def test_apply_mood_entry_other_user_rejected(empty_state, today, at_noon):
    entry = MoodEntry(user_id="someone-else", mood=Mood.GOOD, occurred_at=at_noon(today))

    with pytest.raises(ValidationError):
        apply_mood_entry(empty_state, entry, today=today)
