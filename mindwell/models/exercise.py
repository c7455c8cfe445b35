"""Exercise models"""
from enum import Enum
from datetime import datetime, timezone
from uuid import UUID, uuid4
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mindwell.utils.datetime_helpers import ensure_utc


class ExerciseCategory(str, Enum):
    """Exercise categories"""
    BREATHING = "breathing"
    COGNITIVE = "cognitive"
    GRATITUDE = "gratitude"
    MINDFULNESS = "mindfulness"
    JOURNALING = "journaling"


class ExerciseDefinition(BaseModel):
    """Static catalog entry for a guided exercise"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    duration_minutes: int = Field(..., gt=0)
    xp_reward: int = Field(..., gt=0)
    category: ExerciseCategory


class ExerciseCompletionEvent(BaseModel):
    """A user finished an exercise (kept in the completion log)"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    exercise_id: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('occurred_at')
    @classmethod
    def occurred_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
