"""
XP and Leveling System

Manages XP awards and level calculations.

Leveling Curve:
- Every 100 cumulative XP is one level, starting at level 1
- No cap on XP or level

XP Award Rules:
- Exercise completion: the exercise's xp_reward from the catalog
- Mood entry: no XP, but it counts as activity for the streak
"""

from typing import Dict, Mapping, Optional, Tuple
from datetime import date
import logging

from mindwell.exceptions import UnknownExerciseError, ValidationError
from mindwell.gamification import streak_system
from mindwell.models.exercise import ExerciseCompletionEvent, ExerciseDefinition
from mindwell.models.mood import MoodEntry
from mindwell.models.progress import UserProgressState

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 100


def calculate_level(total_xp: int) -> int:
    """
    Calculate level from total XP

    Formula: level = 1 + (total_xp // XP_PER_LEVEL)
    """
    if total_xp < 0:
        return 1

    return 1 + (total_xp // XP_PER_LEVEL)


def xp_for_level(level: int) -> int:
    """Total XP at which a level begins"""
    if level <= 1:
        return 0

    return (level - 1) * XP_PER_LEVEL


def calculate_level_from_xp(total_xp: int) -> Dict[str, int]:
    """
    Calculate level and progress within it from total XP

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int
        }
    """
    total_xp = max(total_xp, 0)
    level = calculate_level(total_xp)
    xp_in_level = total_xp - xp_for_level(level)

    return {
        "current_level": level,
        "xp_in_current_level": xp_in_level,
        "xp_to_next_level": XP_PER_LEVEL - xp_in_level,
        "total_xp_for_next_level": xp_for_level(level + 1),
    }


def apply_exercise_completion(
    state: UserProgressState,
    event: ExerciseCompletionEvent,
    exercise_catalog: Mapping[str, ExerciseDefinition],
    today: Optional[date] = None
) -> Tuple[UserProgressState, int]:
    """
    Award XP for a completed exercise and record the day for the streak

    XP and streak updates form one step: every check runs before the new
    state is built, so on error the caller keeps the prior state untouched.

    Args:
        state: Prior progress state
        event: Completion event for state.user_id
        exercise_catalog: Exercise id → definition
        today: User-local "today" for activity-date validation

    Returns:
        (new_state, xp_awarded)

    Raises:
        UnknownExerciseError: exercise_id not in the catalog
        ValidationError: event belongs to another user
        InvalidActivityDateError: event date outside the accepted range
    """
    if event.user_id != state.user_id:
        raise ValidationError(
            message=f"Event for user {event.user_id} applied to state of user {state.user_id}",
            field="user_id",
            value=event.user_id,
            user_id=state.user_id,
            operation="apply_exercise_completion",
        )

    exercise = exercise_catalog.get(event.exercise_id)
    if exercise is None:
        raise UnknownExerciseError(
            event.exercise_id,
            user_id=state.user_id,
            operation="apply_exercise_completion",
        )

    activity_date = streak_system.to_activity_date(event.occurred_at, state.timezone)
    new_state = streak_system.record_activity(state, activity_date, today=today)

    counts = dict(new_state.completion_counts)
    counts[exercise.category] = counts.get(exercise.category, 0) + 1

    old_level = state.level
    new_state = new_state.model_copy(update={
        "total_xp": state.total_xp + exercise.xp_reward,
        "completion_counts": counts,
    })

    logger.info(
        f"Awarded {exercise.xp_reward} XP to user {state.user_id} for {exercise.id}. "
        f"Total: {new_state.total_xp} XP, Level: {new_state.level}"
    )

    if new_state.level > old_level:
        logger.info(f"User {state.user_id} leveled up from {old_level} to {new_state.level}!")

    return new_state, exercise.xp_reward


def apply_mood_entry(
    state: UserProgressState,
    entry: MoodEntry,
    today: Optional[date] = None
) -> UserProgressState:
    """
    Count a mood entry and record its day for the streak (no XP)

    Raises:
        ValidationError: entry belongs to another user
        InvalidActivityDateError: entry date outside the accepted range
    """
    if entry.user_id != state.user_id:
        raise ValidationError(
            message=f"Mood entry for user {entry.user_id} applied to state of user {state.user_id}",
            field="user_id",
            value=entry.user_id,
            user_id=state.user_id,
            operation="apply_mood_entry",
        )

    activity_date = streak_system.to_activity_date(entry.occurred_at, state.timezone)
    new_state = streak_system.record_activity(state, activity_date, today=today)

    return new_state.model_copy(update={"mood_entry_count": state.mood_entry_count + 1})
