"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional

from mindwell.models.exercise import ExerciseCategory


class UnlockRuleType(str, Enum):
    """What an unlock rule measures"""
    STREAK = "streak"  # current streak as of evaluation day
    LONGEST_STREAK = "longest_streak"
    TOTAL_XP = "total_xp"
    LEVEL = "level"
    COMPLETION_COUNT = "completion_count"  # all categories
    CATEGORY_COUNT = "category_count"
    MOOD_COUNT = "mood_count"


class UnlockRule(BaseModel):
    """Threshold predicate over a user's progress: measured value >= threshold"""
    model_config = ConfigDict(frozen=True)

    type: UnlockRuleType
    threshold: int = Field(..., ge=1)
    category: Optional[ExerciseCategory] = None

    @model_validator(mode='after')
    def check_category(self) -> 'UnlockRule':
        """Category rules need a category, the others must not have one"""
        if self.type == UnlockRuleType.CATEGORY_COUNT and self.category is None:
            raise ValueError("category_count rules require a category")
        if self.type != UnlockRuleType.CATEGORY_COUNT and self.category is not None:
            raise ValueError(f"{self.type.value} rules do not take a category")
        return self


class AchievementDefinition(BaseModel):
    """Achievement definition"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    icon: str = "🏅"
    unlock_rule: UnlockRule
