"""Mood models"""
from enum import Enum
from typing import NamedTuple, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID, uuid4

from mindwell.utils.datetime_helpers import ensure_utc


class Mood(str, Enum):
    """Moods a user can log, best first"""
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    LOW = "low"
    SAD = "sad"


class MoodDisplay(NamedTuple):
    label: str
    emoji: str


MOOD_DISPLAY: dict[Mood, MoodDisplay] = {
    Mood.GREAT: MoodDisplay("Great", "😊"),
    Mood.GOOD: MoodDisplay("Good", "🙂"),
    Mood.OKAY: MoodDisplay("Okay", "😐"),
    Mood.LOW: MoodDisplay("Low", "😕"),
    Mood.SAD: MoodDisplay("Sad", "😢"),
}

# Every mood must have display metadata
_missing = set(Mood) - set(MOOD_DISPLAY)
if _missing:
    raise RuntimeError(f"MOOD_DISPLAY is missing entries for: {sorted(m.value for m in _missing)}")


def parse_mood(value: str) -> Optional[Mood]:
    """Parse a mood label case-insensitively, None if unknown"""
    try:
        return Mood(value.strip().lower())
    except (ValueError, AttributeError):
        return None


class MoodEntry(BaseModel):
    """A single mood submission (append-only)"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    mood: Mood
    intensity: int = Field(default=3, ge=1, le=5)
    note: Optional[str] = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('note')
    @classmethod
    def strip_note(cls, v: Optional[str]) -> Optional[str]:
        """Blank notes are stored as None"""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator('occurred_at')
    @classmethod
    def occurred_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def display(self) -> MoodDisplay:
        return MOOD_DISPLAY[self.mood]
