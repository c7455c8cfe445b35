"""
Gamification Integration Hooks

Runs one user action through the whole engine: XP and level, streak day,
then achievement evaluation against the resulting state. Pure functions:
state in, result out. Persistence and per-user locking belong to the caller
(see mindwell.services.progress_service).

Usage:
    from mindwell.gamification.integrations import process_exercise_completion

    result = process_exercise_completion(state, event, catalog, achievements, today=today)
    save(result.state)
"""

import logging
from datetime import date
from typing import Iterable, List, Mapping, Optional

from mindwell.gamification import achievement_system, xp_system
from mindwell.models.achievement import AchievementDefinition
from mindwell.models.exercise import ExerciseCompletionEvent, ExerciseDefinition
from mindwell.models.mood import MoodEntry
from mindwell.models.progress import ProgressionResult, UserProgressState

logger = logging.getLogger(__name__)


def process_exercise_completion(
    state: UserProgressState,
    event: ExerciseCompletionEvent,
    exercise_catalog: Mapping[str, ExerciseDefinition],
    achievements: Iterable[AchievementDefinition],
    today: Optional[date] = None
) -> ProgressionResult:
    """
    Apply an exercise completion end to end

    Args:
        state: Prior progress state
        event: Completion event
        exercise_catalog: Exercise id → definition
        achievements: Achievement catalog
        today: User-local "today"; streak rules are observed on this day

    Returns:
        ProgressionResult with the new state, XP awarded, level change and
        newly unlocked achievements

    Raises:
        UnknownExerciseError, InvalidActivityDateError, ValidationError
    """
    new_state, xp_awarded = xp_system.apply_exercise_completion(
        state, event, exercise_catalog, today=today
    )
    new_state, unlocked = achievement_system.evaluate(state, new_state, achievements, as_of=today)

    return ProgressionResult(
        state=new_state,
        xp_awarded=xp_awarded,
        old_level=state.level,
        new_level=new_state.level,
        newly_unlocked=unlocked,
    )


def process_mood_entry(
    state: UserProgressState,
    entry: MoodEntry,
    achievements: Iterable[AchievementDefinition],
    today: Optional[date] = None
) -> ProgressionResult:
    """
    Apply a mood entry end to end (no XP, counts toward streak and mood badges)

    Raises:
        InvalidActivityDateError, ValidationError
    """
    new_state = xp_system.apply_mood_entry(state, entry, today=today)
    new_state, unlocked = achievement_system.evaluate(state, new_state, achievements, as_of=today)

    return ProgressionResult(
        state=new_state,
        xp_awarded=0,
        old_level=state.level,
        new_level=new_state.level,
        newly_unlocked=unlocked,
    )


def build_progress_message(result: ProgressionResult) -> str:
    """
    User-facing feedback for a processed action

    Example:
        "You earned 30 XP! 🎉 Level up! You're now level 2.
         🏆 Achievement unlocked: Rising Star"
    """
    lines: List[str] = []

    if result.xp_awarded > 0:
        lines.append(f"You earned {result.xp_awarded} XP!")
    else:
        lines.append("Mood logged. Thanks for checking in!")

    if result.leveled_up:
        lines.append(f"🎉 Level up! You're now level {result.new_level}.")

    for achievement in result.newly_unlocked:
        lines.append(f"{achievement.icon} Achievement unlocked: {achievement.title}")

    return "\n".join(lines)
