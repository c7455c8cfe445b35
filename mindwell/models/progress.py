"""User progress models"""
from typing import Optional
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator
import pytz

from mindwell.models.achievement import AchievementDefinition
from mindwell.models.exercise import ExerciseCategory


class UserProgressState(BaseModel):
    """
    Aggregate root for one user's progression

    Level, current streak and total completions are derived and never stored.
    activity_days, unlocked_achievement_ids and the counters only ever grow.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    timezone: str = "UTC"  # IANA timezone used to find the user's local day
    total_xp: int = Field(default=0, ge=0)
    activity_days: frozenset[date] = Field(default_factory=frozenset)
    longest_streak: int = Field(default=0, ge=0)
    unlocked_achievement_ids: frozenset[str] = Field(default_factory=frozenset)
    completion_counts: dict[ExerciseCategory, int] = Field(default_factory=dict)
    mood_entry_count: int = Field(default=0, ge=0)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure valid IANA timezone"""
        try:
            pytz.timezone(v)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(
                f"Invalid timezone: '{v}'. "
                f"Use IANA timezone (e.g., 'Europe/Stockholm', 'America/New_York')"
            )
        return v

    @field_validator('completion_counts')
    @classmethod
    def validate_counts(cls, v: dict[ExerciseCategory, int]) -> dict[ExerciseCategory, int]:
        for category, count in v.items():
            if count < 0:
                raise ValueError(f"Negative completion count for {category.value}: {count}")
        return v

    @property
    def level(self) -> int:
        from mindwell.gamification.xp_system import calculate_level
        return calculate_level(self.total_xp)

    @property
    def total_completions(self) -> int:
        return sum(self.completion_counts.values())

    @property
    def last_activity_date(self) -> Optional[date]:
        return max(self.activity_days) if self.activity_days else None

    def completions_for(self, category: ExerciseCategory) -> int:
        return self.completion_counts.get(category, 0)


class ProgressionResult(BaseModel):
    """Outcome of one logical action (mood entry or exercise completion)"""
    model_config = ConfigDict(frozen=True)

    state: UserProgressState
    xp_awarded: int = 0
    old_level: int
    new_level: int
    newly_unlocked: list[AchievementDefinition] = Field(default_factory=list)

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level
