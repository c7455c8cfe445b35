"""
ProgressService - Progression Business Logic

Runs mood entries and exercise completions through the gamification engine
under the store's per-user lock, and builds read views (XP, streaks,
achievements) relative to the user's local "today".
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
from datetime import date, datetime, timedelta

from mindwell.exceptions import UnknownExerciseError, ValidationError
from mindwell.db.store import ProgressStore
from mindwell.gamification import achievement_system, streak_system
from mindwell.gamification.catalog import DEFAULT_ACHIEVEMENTS, get_exercise_catalog, get_exercises_by_category
from mindwell.gamification.integrations import (
    build_progress_message,
    process_exercise_completion,
    process_mood_entry,
)
from mindwell.gamification.recommendations import recommend_exercises, recommend
from mindwell.gamification.xp_system import calculate_level_from_xp
from mindwell.models.achievement import AchievementDefinition
from mindwell.models.exercise import ExerciseCategory, ExerciseCompletionEvent, ExerciseDefinition
from mindwell.models.mood import MoodEntry, parse_mood
from mindwell.utils.datetime_helpers import today_in_timezone, now_utc, to_local_date

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Service for progression features.

    Responsibilities:
    - Mood logging (append-only history, streak day, mood badges)
    - Exercise completion (XP, level, streak day, achievements, completion log)
    - Read views computed fresh on every call (streaks are never cached)
    - Mood-based exercise recommendations
    """

    def __init__(
        self,
        store: ProgressStore,
        exercise_catalog: Optional[Mapping[str, ExerciseDefinition]] = None,
        achievements: Optional[Iterable[AchievementDefinition]] = None,
        clock: Callable[[str], date] = today_in_timezone
    ):
        """
        Initialize ProgressService.

        Args:
            store: ProgressStore instance
            exercise_catalog: Exercise id → definition (defaults to the built-in catalog)
            achievements: Achievement catalog (defaults to the built-in list)
            clock: Returns the user's local date for a timezone name
        """
        self.store = store
        self.exercise_catalog = dict(exercise_catalog) if exercise_catalog is not None else get_exercise_catalog()
        self.achievements = list(achievements) if achievements is not None else list(DEFAULT_ACHIEVEMENTS)
        self.clock = clock
        logger.debug("ProgressService initialized")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def log_mood(
        self,
        user_id: str,
        mood: str,
        intensity: int = 3,
        note: Optional[str] = None,
        occurred_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Record a mood entry and count it as activity for the day.

        Returns:
            {
                'entry': MoodEntry,
                'current_streak': int,
                'achievements_unlocked': list,
                'recommended_category': str,
                'message': str
            }

        Raises:
            ValidationError: unknown mood or intensity outside 1-5
            InvalidActivityDateError: occurred_at outside the accepted range
        """
        parsed = parse_mood(mood)
        if parsed is None:
            raise ValidationError(
                message=f"Unknown mood '{mood}'",
                field="mood",
                value=mood,
                user_id=user_id,
                operation="log_mood",
            )
        if not 1 <= intensity <= 5:
            raise ValidationError(
                message="Intensity must be between 1 and 5",
                field="intensity",
                value=intensity,
                user_id=user_id,
                operation="log_mood",
            )

        entry = MoodEntry(
            user_id=user_id,
            mood=parsed,
            intensity=intensity,
            note=note,
            occurred_at=occurred_at or now_utc(),
        )

        def transition(state):
            today = self.clock(state.timezone)
            result = process_mood_entry(state, entry, self.achievements, today=today)
            return result.state, (result, today)

        result, today = await self.store.update(user_id, transition, records=[entry])

        logger.info(f"User {user_id} logged mood {parsed.value} (intensity {intensity})")

        return {
            "entry": entry,
            "current_streak": streak_system.current_streak(result.state, today),
            "achievements_unlocked": result.newly_unlocked,
            "recommended_category": recommend(parsed, intensity).value,
            "message": build_progress_message(result),
        }

    async def complete_exercise(
        self,
        user_id: str,
        exercise_id: str,
        occurred_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Process an exercise completion.

        Returns:
            {
                'exercise': ExerciseDefinition,
                'xp_awarded': int,
                'total_xp': int,
                'level_up': bool,
                'old_level': int,
                'new_level': int,
                'xp_to_next_level': int,
                'current_streak': int,
                'longest_streak': int,
                'achievements_unlocked': list,
                'message': str  # User-facing message
            }

        Raises:
            UnknownExerciseError: exercise_id not in the catalog (nothing is saved)
            InvalidActivityDateError: occurred_at outside the accepted range
        """
        event = ExerciseCompletionEvent(
            user_id=user_id,
            exercise_id=exercise_id,
            occurred_at=occurred_at or now_utc(),
        )

        def transition(state):
            today = self.clock(state.timezone)
            result = process_exercise_completion(
                state, event, self.exercise_catalog, self.achievements, today=today
            )
            return result.state, (result, today)

        result, today = await self.store.update(user_id, transition, records=[event])
        state = result.state

        return {
            "exercise": self.exercise_catalog[exercise_id],
            "xp_awarded": result.xp_awarded,
            "total_xp": state.total_xp,
            "level_up": result.leveled_up,
            "old_level": result.old_level,
            "new_level": result.new_level,
            "xp_to_next_level": calculate_level_from_xp(state.total_xp)["xp_to_next_level"],
            "current_streak": streak_system.current_streak(state, today),
            "longest_streak": state.longest_streak,
            "achievements_unlocked": result.newly_unlocked,
            "message": build_progress_message(result),
        }

    async def set_timezone(self, user_id: str, timezone: str) -> str:
        """Change the user's timezone; returns the stored value"""
        try:
            state = await self.store.set_timezone(user_id, timezone)
        except ValueError as e:
            raise ValidationError(
                message=str(e),
                field="timezone",
                value=timezone,
                user_id=user_id,
                operation="set_timezone",
            ) from e
        return state.timezone

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    def get_progress(self, user_id: str) -> Dict[str, Any]:
        """
        XP and level information.

        Returns:
            {
                'user_id': str,
                'total_xp': int,
                'current_level': int,
                'xp_in_current_level': int,
                'xp_to_next_level': int,
                'total_xp_for_next_level': int,
                'total_completions': int,
                'completion_counts': dict
            }
        """
        state = self.store.get_state(user_id)

        return {
            "user_id": user_id,
            "total_xp": state.total_xp,
            **calculate_level_from_xp(state.total_xp),
            "total_completions": state.total_completions,
            "completion_counts": {c.value: n for c, n in state.completion_counts.items()},
        }

    def get_streaks(self, user_id: str) -> Dict[str, Any]:
        """
        Streak information observed on the user's local today.

        Includes both week views: 'week_view' from recorded days and
        'projected_week_view' from the backward walk over the streak length.
        """
        state = self.store.get_state(user_id)
        today = self.clock(state.timezone)
        info = streak_system.get_streak_info(state, today)

        return {
            "user_id": user_id,
            "today": today,
            **info,
            "projected_week_view": streak_system.project_week_view(info["current_streak"], today),
            "message": streak_system.format_streak_display(info),
        }

    def get_achievements(self, user_id: str, include_locked: bool = True) -> Dict[str, Any]:
        """Unlocked achievements and, optionally, locked ones with progress"""
        state = self.store.get_state(user_id)
        today = self.clock(state.timezone)
        return achievement_system.get_user_achievements(
            state, self.achievements, as_of=today, include_locked=include_locked
        )

    def list_exercises(self, category: Optional[ExerciseCategory] = None) -> List[ExerciseDefinition]:
        return get_exercises_by_category(category, self.exercise_catalog.values())

    def get_exercise(self, exercise_id: str) -> ExerciseDefinition:
        """
        Raises:
            UnknownExerciseError: exercise_id not in the catalog
        """
        exercise = self.exercise_catalog.get(exercise_id)
        if exercise is None:
            raise UnknownExerciseError(exercise_id, operation="get_exercise")
        return exercise

    def get_moods(self, user_id: str, limit: Optional[int] = None) -> List[MoodEntry]:
        return self.store.get_moods(user_id, limit=limit)

    def get_latest_mood(self, user_id: str) -> MoodEntry:
        return self.store.get_latest_mood(user_id)

    def get_completions(self, user_id: str, days: Optional[int] = None) -> List[ExerciseCompletionEvent]:
        """
        Exercise completion history, newest first

        Args:
            user_id: User
            days: Keep only completions from the last N local calendar days,
                today included (None keeps everything)

        Raises:
            ValidationError: days is less than 1
        """
        if days is not None and days < 1:
            raise ValidationError(
                message="days must be at least 1",
                field="days",
                value=days,
                user_id=user_id,
                operation="get_completions",
            )

        events = self.store.get_completions(user_id)
        if days is None:
            return events

        state = self.store.get_state(user_id)
        since = self.clock(state.timezone) - timedelta(days=days - 1)
        return [e for e in events if to_local_date(e.occurred_at, state.timezone) >= since]

    def recommend(self, mood: str, intensity: int) -> Dict[str, Any]:
        """Recommended category and matching exercises; never raises"""
        category = recommend(mood, intensity)
        return {
            "mood": mood,
            "intensity": intensity,
            "category": category.value,
            "exercises": recommend_exercises(mood, intensity, self.exercise_catalog),
        }
