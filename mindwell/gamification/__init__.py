"""
Progression & engagement engine for MindWell

This module implements the rules turning user actions into rewards:
- XP and leveling (every 100 XP is a level)
- Streaks derived from activity days
- Achievement unlocking
- Mood-based exercise recommendations

All functions are pure: they take the prior UserProgressState and return a
new one. Storage and per-user serialization live in mindwell.services.
"""

from mindwell.gamification.streak_system import record_activity, current_streak, project_week_view
from mindwell.gamification.xp_system import apply_exercise_completion, calculate_level, calculate_level_from_xp
from mindwell.gamification.achievement_system import evaluate
from mindwell.gamification.recommendations import recommend
from mindwell.gamification.integrations import process_exercise_completion, process_mood_entry

__all__ = [
    "record_activity",
    "current_streak",
    "project_week_view",
    "apply_exercise_completion",
    "calculate_level",
    "calculate_level_from_xp",
    "evaluate",
    "recommend",
    "process_exercise_completion",
    "process_mood_entry",
]
