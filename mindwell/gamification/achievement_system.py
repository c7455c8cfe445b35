"""
Achievement System

Evaluates unlock rules against a user's progress and reports achievements
crossing from locked to unlocked.

Rules:
- Always evaluated against the post-action state, so the action that causes
  a level-up or streak milestone unlocks its achievement in the same step
- Already unlocked achievements are skipped (achievements never re-lock and
  are never reported twice)
- No rule reads the clock; streak rules are observed on an explicit day
"""

from typing import Dict, Iterable, List, Optional, Tuple
from datetime import date
import logging

from mindwell.exceptions import ValidationError
from mindwell.gamification.streak_system import current_streak
from mindwell.models.achievement import AchievementDefinition, UnlockRule, UnlockRuleType
from mindwell.models.progress import UserProgressState

logger = logging.getLogger(__name__)


def get_rule_value(rule: UnlockRule, state: UserProgressState, as_of: Optional[date] = None) -> int:
    """
    Current value of the metric a rule measures

    Args:
        rule: Unlock rule
        state: Progress state to measure
        as_of: Day the current streak is observed on (defaults to the
            latest activity day of the state)
    """
    if rule.type == UnlockRuleType.STREAK:
        if as_of is None:
            as_of = state.last_activity_date
        return current_streak(state, as_of) if as_of else 0

    if rule.type == UnlockRuleType.LONGEST_STREAK:
        return state.longest_streak

    if rule.type == UnlockRuleType.TOTAL_XP:
        return state.total_xp

    if rule.type == UnlockRuleType.LEVEL:
        return state.level

    if rule.type == UnlockRuleType.COMPLETION_COUNT:
        return state.total_completions

    if rule.type == UnlockRuleType.CATEGORY_COUNT:
        return state.completions_for(rule.category)

    if rule.type == UnlockRuleType.MOOD_COUNT:
        return state.mood_entry_count

    raise ValueError(f"Unhandled rule type: {rule.type}")


def is_rule_satisfied(rule: UnlockRule, state: UserProgressState, as_of: Optional[date] = None) -> bool:
    return get_rule_value(rule, state, as_of) >= rule.threshold


def evaluate(
    prior_state: UserProgressState,
    new_state: UserProgressState,
    definitions: Iterable[AchievementDefinition],
    as_of: Optional[date] = None
) -> Tuple[UserProgressState, List[AchievementDefinition]]:
    """
    Find achievements newly unlocked by the transition prior_state → new_state

    Args:
        prior_state: State before the action
        new_state: State after the action (rules are evaluated against this)
        definitions: Achievement catalog
        as_of: Day streak rules are observed on

    Returns:
        (state with the new ids added to unlocked_achievement_ids,
         newly unlocked definitions in catalog order)
    """
    if prior_state.user_id != new_state.user_id:
        raise ValidationError(
            message="Cannot evaluate achievements across different users",
            field="user_id",
            value=new_state.user_id,
            user_id=prior_state.user_id,
            operation="evaluate_achievements",
        )

    newly_unlocked = []
    unlocked_ids = set(new_state.unlocked_achievement_ids)

    for definition in definitions:
        if definition.id in unlocked_ids:
            continue

        if is_rule_satisfied(definition.unlock_rule, new_state, as_of):
            newly_unlocked.append(definition)
            unlocked_ids.add(definition.id)

            logger.info(
                f"User {new_state.user_id} unlocked achievement: {definition.id} "
                f"({definition.title})"
            )

    if not newly_unlocked:
        return new_state, []

    state = new_state.model_copy(update={"unlocked_achievement_ids": frozenset(unlocked_ids)})
    return state, newly_unlocked


def get_achievement_progress(
    definition: AchievementDefinition,
    state: UserProgressState,
    as_of: Optional[date] = None
) -> Dict[str, int]:
    """
    Progress toward an achievement

    Returns:
        {'current': int, 'target': int, 'percentage': int (0-100)}
    """
    rule = definition.unlock_rule
    value = get_rule_value(rule, state, as_of)
    current = min(value, rule.threshold)

    return {
        "current": current,
        "target": rule.threshold,
        "percentage": int(current * 100 / rule.threshold),
    }


def get_user_achievements(
    state: UserProgressState,
    definitions: Iterable[AchievementDefinition],
    as_of: Optional[date] = None,
    include_locked: bool = True
) -> Dict[str, any]:
    """
    Get a user's achievements with progress

    Returns:
        {
            'unlocked': [definitions],
            'locked': [{'achievement': definition, 'progress': {...}}]
                (if include_locked=True, closest to completion first),
            'total_unlocked': int,
            'total_achievements': int
        }
    """
    definitions = list(definitions)
    unlocked = [d for d in definitions if d.id in state.unlocked_achievement_ids]

    result = {
        "unlocked": unlocked,
        "total_unlocked": len(unlocked),
        "total_achievements": len(definitions),
    }

    if include_locked:
        locked = [
            {"achievement": d, "progress": get_achievement_progress(d, state, as_of)}
            for d in definitions
            if d.id not in state.unlocked_achievement_ids
        ]
        locked.sort(key=lambda x: x["progress"]["percentage"], reverse=True)
        result["locked"] = locked

    return result
