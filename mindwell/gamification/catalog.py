"""
Default exercise and achievement catalogs

Static configuration, not user data. The service layer passes these to the
engine; tests and deployments may pass their own.
"""

from typing import Dict, Iterable, List, Optional

from mindwell.models.achievement import AchievementDefinition, UnlockRule, UnlockRuleType
from mindwell.models.exercise import ExerciseCategory, ExerciseDefinition


DEFAULT_EXERCISES: List[ExerciseDefinition] = [
    ExerciseDefinition(
        id="cognitive",
        title="Cognitive Restructuring",
        description="Challenge and reframe negative thoughts with this guided exercise.",
        duration_minutes=5,
        xp_reward=25,
        category=ExerciseCategory.COGNITIVE,
    ),
    ExerciseDefinition(
        id="breathing",
        title="Breathing Exercise",
        description="Calm your mind with deep breathing techniques to reduce anxiety.",
        duration_minutes=3,
        xp_reward=10,
        category=ExerciseCategory.BREATHING,
    ),
    ExerciseDefinition(
        id="gratitude",
        title="Gratitude Practice",
        description="Focus on positive aspects of your life to improve your mood.",
        duration_minutes=7,
        xp_reward=20,
        category=ExerciseCategory.GRATITUDE,
    ),
    ExerciseDefinition(
        id="mindfulness",
        title="Mindfulness Meditation",
        description="Practice being present in the moment to reduce stress and anxiety.",
        duration_minutes=10,
        xp_reward=20,
        category=ExerciseCategory.MINDFULNESS,
    ),
    ExerciseDefinition(
        id="progressive-relaxation",
        title="Progressive Muscle Relaxation",
        description="Tense and relax each muscle group to reduce physical tension.",
        duration_minutes=12,
        xp_reward=30,
        category=ExerciseCategory.MINDFULNESS,
    ),
    ExerciseDefinition(
        id="thought-record",
        title="Thought Record",
        description="Record and analyze your thoughts to identify thinking patterns.",
        duration_minutes=8,
        xp_reward=25,
        category=ExerciseCategory.COGNITIVE,
    ),
    ExerciseDefinition(
        id="values-clarification",
        title="Values Clarification",
        description="Identify your core values to guide your actions and decisions.",
        duration_minutes=15,
        xp_reward=35,
        category=ExerciseCategory.COGNITIVE,
    ),
    ExerciseDefinition(
        id="box-breathing",
        title="Box Breathing",
        description="A structured breathing technique to reduce stress and anxiety.",
        duration_minutes=5,
        xp_reward=15,
        category=ExerciseCategory.BREATHING,
    ),
    ExerciseDefinition(
        id="reflective-journaling",
        title="Reflective Journaling",
        description="Write about your day with a guided prompt.",
        duration_minutes=10,
        xp_reward=20,
        category=ExerciseCategory.JOURNALING,
    ),
]


DEFAULT_ACHIEVEMENTS: List[AchievementDefinition] = [
    AchievementDefinition(
        id="first-steps",
        title="First Steps",
        description="Complete your first exercise",
        icon="👣",
        unlock_rule=UnlockRule(type=UnlockRuleType.COMPLETION_COUNT, threshold=1),
    ),
    AchievementDefinition(
        id="mood-master",
        title="Mood Master",
        description="Log your mood 7 times",
        icon="😊",
        unlock_rule=UnlockRule(type=UnlockRuleType.MOOD_COUNT, threshold=7),
    ),
    AchievementDefinition(
        id="7-day-streak",
        title="7-Day Streak",
        description="Stay active 7 days in a row",
        icon="⚡",
        unlock_rule=UnlockRule(type=UnlockRuleType.STREAK, threshold=7),
    ),
    AchievementDefinition(
        id="30-day-streak",
        title="30-Day Streak",
        description="Stay active 30 days in a row",
        icon="🔥",
        unlock_rule=UnlockRule(type=UnlockRuleType.STREAK, threshold=30),
    ),
    AchievementDefinition(
        id="mindfulness",
        title="Mindfulness",
        description="Complete a mindfulness exercise",
        icon="🧠",
        unlock_rule=UnlockRule(
            type=UnlockRuleType.CATEGORY_COUNT,
            threshold=1,
            category=ExerciseCategory.MINDFULNESS,
        ),
    ),
    AchievementDefinition(
        id="breath-master",
        title="Breath Master",
        description="Complete 3 breathing exercises",
        icon="🌬️",
        unlock_rule=UnlockRule(
            type=UnlockRuleType.CATEGORY_COUNT,
            threshold=3,
            category=ExerciseCategory.BREATHING,
        ),
    ),
    AchievementDefinition(
        id="journal-master",
        title="Journal Master",
        description="Complete 5 journaling sessions",
        icon="📖",
        unlock_rule=UnlockRule(
            type=UnlockRuleType.CATEGORY_COUNT,
            threshold=5,
            category=ExerciseCategory.JOURNALING,
        ),
    ),
    AchievementDefinition(
        id="level-2",
        title="Rising Star",
        description="Reach level 2",
        icon="⭐",
        unlock_rule=UnlockRule(type=UnlockRuleType.LEVEL, threshold=2),
    ),
    AchievementDefinition(
        id="level-5",
        title="Steady Practice",
        description="Reach level 5",
        icon="🌟",
        unlock_rule=UnlockRule(type=UnlockRuleType.LEVEL, threshold=5),
    ),
    AchievementDefinition(
        id="xp-500",
        title="500 XP",
        description="Earn 500 XP in total",
        icon="💎",
        unlock_rule=UnlockRule(type=UnlockRuleType.TOTAL_XP, threshold=500),
    ),
]


def get_exercise_catalog() -> Dict[str, ExerciseDefinition]:
    """Exercise id → definition for the default catalog"""
    return {exercise.id: exercise for exercise in DEFAULT_EXERCISES}


def get_exercises_by_category(
    category: Optional[ExerciseCategory],
    exercises: Iterable[ExerciseDefinition] = DEFAULT_EXERCISES
) -> List[ExerciseDefinition]:
    """Exercises in a category, in catalog order (all of them when category is None)"""
    return [exercise for exercise in exercises if category is None or exercise.category == category]
