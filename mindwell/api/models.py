"""Pydantic models for API request/response validation"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field
from datetime import date, datetime

from mindwell.models.achievement import AchievementDefinition
from mindwell.models.exercise import ExerciseCategory, ExerciseDefinition
from mindwell.models.mood import Mood


class MoodLogRequest(BaseModel):
    """Request to log a mood"""
    mood: str = Field(..., description="Mood label (great, good, okay, low, sad)")
    intensity: int = Field(default=3, description="How strongly the mood is felt (1-5)")
    note: Optional[str] = Field(default=None, description="Optional free-text note")
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="When the mood was felt (defaults to now)"
    )


class MoodEntryResponse(BaseModel):
    """A stored mood entry"""
    id: str
    user_id: str
    mood: Mood
    label: str
    emoji: str
    intensity: int
    note: Optional[str] = None
    occurred_at: datetime


class MoodLogResponse(BaseModel):
    """Response after logging a mood"""
    entry: MoodEntryResponse
    current_streak: int
    achievements_unlocked: List[AchievementDefinition]
    recommended_category: str
    message: str


class ExerciseCompletionRequest(BaseModel):
    """Request to record an exercise completion"""
    exercise_id: str = Field(..., description="Catalog exercise id")
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="When the exercise was completed (defaults to now)"
    )


class ExerciseCompletionResponse(BaseModel):
    """Response after completing an exercise"""
    exercise: ExerciseDefinition
    xp_awarded: int
    total_xp: int
    level_up: bool
    old_level: int
    new_level: int
    xp_to_next_level: int
    current_streak: int
    longest_streak: int
    achievements_unlocked: List[AchievementDefinition]
    message: str


class CompletionEntryResponse(BaseModel):
    """A logged exercise completion"""
    id: str
    user_id: str
    exercise_id: str
    title: Optional[str] = Field(None, description="None when the exercise left the catalog")
    category: Optional[ExerciseCategory] = None
    xp_reward: Optional[int] = None
    occurred_at: datetime


class TimezoneUpdateRequest(BaseModel):
    """Request to change the user's timezone"""
    timezone: str = Field(..., description="IANA timezone, e.g. Europe/Stockholm")


class XPResponse(BaseModel):
    """Response with XP and level info"""
    user_id: str
    xp: int
    level: int
    xp_in_current_level: int
    xp_to_next_level: int
    total_xp_for_next_level: int
    total_completions: int
    completion_counts: Dict[str, int]


class StreakResponse(BaseModel):
    """Response with streak info"""
    user_id: str
    today: date
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date] = None
    active_today: bool
    at_risk: bool
    next_milestone: Optional[int] = None
    week_view: List[int] = Field(..., description="Weekdays (Mon=1..Sun=7) with activity this week")
    projected_week_view: List[int] = Field(..., description="Weekdays covered by the current streak")
    message: str


class AchievementProgress(BaseModel):
    current: int
    target: int
    percentage: int


class LockedAchievement(BaseModel):
    achievement: AchievementDefinition
    progress: AchievementProgress


class AchievementResponse(BaseModel):
    """Response with achievement info"""
    user_id: str
    unlocked: List[AchievementDefinition]
    locked: List[LockedAchievement]
    total_unlocked: int
    total_achievements: int


class RecommendationResponse(BaseModel):
    """Exercise recommendation for a mood"""
    mood: str
    intensity: int
    category: str
    exercises: List[ExerciseDefinition]


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    store: str = Field(..., description="Progress store status")
    timestamp: datetime = Field(..., description="Check timestamp")

