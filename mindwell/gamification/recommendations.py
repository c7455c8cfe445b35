"""
Mood-based exercise recommendations

A fixed heuristic used before (or instead of) any AI-generated suggestion.
Advisory only: unknown moods fall back to mindfulness instead of raising.
"""

import logging
from typing import Dict, List, Mapping, Tuple, Union

from mindwell.models.exercise import ExerciseCategory, ExerciseDefinition
from mindwell.models.mood import Mood, parse_mood

logger = logging.getLogger(__name__)

DEFAULT_HINT = ExerciseCategory.MINDFULNESS
STRONG_INTENSITY = 4  # intensity at or above this uses the "strong" column

# mood → (mild/moderate, strong)
RECOMMENDATIONS: Dict[Mood, Tuple[ExerciseCategory, ExerciseCategory]] = {
    Mood.GREAT: (ExerciseCategory.GRATITUDE, ExerciseCategory.JOURNALING),
    Mood.GOOD: (ExerciseCategory.GRATITUDE, ExerciseCategory.MINDFULNESS),
    Mood.OKAY: (ExerciseCategory.MINDFULNESS, ExerciseCategory.JOURNALING),
    Mood.LOW: (ExerciseCategory.JOURNALING, ExerciseCategory.COGNITIVE),
    Mood.SAD: (ExerciseCategory.COGNITIVE, ExerciseCategory.BREATHING),
}


def recommend(mood: Union[Mood, str], intensity: int) -> ExerciseCategory:
    """
    Suggest an exercise category for a mood and intensity (1-5)

    Intensity outside 1-5 is clamped. Unknown mood labels get the default hint.
    """
    parsed = mood if isinstance(mood, Mood) else parse_mood(mood)
    if parsed is None:
        logger.debug(f"No recommendation for mood '{mood}', using {DEFAULT_HINT.value}")
        return DEFAULT_HINT

    intensity = max(1, min(5, intensity))
    mild, strong = RECOMMENDATIONS[parsed]
    return strong if intensity >= STRONG_INTENSITY else mild


def recommend_exercises(
    mood: Union[Mood, str],
    intensity: int,
    exercise_catalog: Mapping[str, ExerciseDefinition]
) -> List[ExerciseDefinition]:
    """Catalog exercises in the recommended category, shortest first"""
    category = recommend(mood, intensity)
    matches = [e for e in exercise_catalog.values() if e.category == category]
    return sorted(matches, key=lambda e: (e.duration_minutes, e.id))
