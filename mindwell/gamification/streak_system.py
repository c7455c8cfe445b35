"""
Streak Tracking System

Streaks are derived from the set of activity days, never stored on their own:
- Recording an activity only inserts a calendar day (append-only history)
- The current streak is recomputed on every read relative to "today"
- A missed day makes the observed current streak 0, history is untouched
- The longest streak is a running maximum and never decreases

Week view:
- project_week_view: backward walk from today using only the streak length
- week_view_from_history: the days of this week actually present in history
"""

from typing import Dict, Iterable, List, Optional
from datetime import date, datetime, timedelta
import logging

from mindwell import config
from mindwell.exceptions import InvalidActivityDateError
from mindwell.models.progress import UserProgressState
from mindwell.utils.datetime_helpers import to_local_date, today_in_timezone

logger = logging.getLogger(__name__)

STREAK_MILESTONES = (7, 14, 30, 100)
DAYS_IN_WEEK = 7


def to_activity_date(occurred_at: datetime, timezone: str) -> date:
    """Normalize a timestamp to the user's local calendar day"""
    return to_local_date(occurred_at, timezone)


def validate_activity_date(activity_date: date, today: date) -> None:
    """
    Reject activity dates outside the sane range

    Raises:
        InvalidActivityDateError: if the date is before MIN_ACTIVITY_DATE or
            more than MAX_FUTURE_DAYS after today
    """
    if activity_date < config.MIN_ACTIVITY_DATE:
        raise InvalidActivityDateError(
            activity_date,
            reason=f"before {config.MIN_ACTIVITY_DATE.isoformat()}"
        )

    latest_allowed = today + timedelta(days=config.MAX_FUTURE_DAYS)
    if activity_date > latest_allowed:
        raise InvalidActivityDateError(
            activity_date,
            reason=f"more than {config.MAX_FUTURE_DAYS} day(s) after {today.isoformat()}"
        )


def streak_run_length(activity_days: Iterable[date], end_date: date) -> int:
    """
    Size of the maximal run of consecutive days ending at end_date

    Returns 0 when end_date itself is not an activity day.
    """
    days = activity_days if isinstance(activity_days, (set, frozenset)) else set(activity_days)
    length = 0
    day = end_date
    while day in days:
        length += 1
        day -= timedelta(days=1)
    return length


def _run_end(days: frozenset, start: date) -> date:
    day = start
    while day + timedelta(days=1) in days:
        day += timedelta(days=1)
    return day


def record_activity(
    state: UserProgressState,
    activity_date: date,
    today: Optional[date] = None
) -> UserProgressState:
    """
    Record a qualifying activity on a calendar day

    Logic:
    - Day already recorded: state returned unchanged (idempotent)
    - Otherwise the day is inserted and longest_streak raised to cover the
      run ending at the latest activity day (and the run the new day joins,
      which differs only when an older day is back-filled)

    Args:
        state: Prior progress state
        activity_date: User-local calendar day of the activity
        today: User-local "today" for range validation (defaults to the clock)

    Returns:
        New state (or the same object when the day was already present)

    Raises:
        InvalidActivityDateError: date outside the accepted range
    """
    if today is None:
        today = today_in_timezone(state.timezone)

    validate_activity_date(activity_date, today)

    if activity_date in state.activity_days:
        logger.debug(f"User {state.user_id} already active on {activity_date}, streak unchanged")
        return state

    activity_days = state.activity_days | {activity_date}
    latest_run = streak_run_length(activity_days, max(activity_days))
    joined_run = streak_run_length(activity_days, _run_end(activity_days, activity_date))
    longest = max(state.longest_streak, latest_run, joined_run)

    if longest > state.longest_streak:
        logger.info(f"User {state.user_id} longest streak {state.longest_streak} → {longest} days")

    logger.info(f"Recorded activity for user {state.user_id} on {activity_date}: run of {latest_run} days")

    return state.model_copy(update={
        "activity_days": activity_days,
        "longest_streak": longest,
    })


def current_streak(state: UserProgressState, as_of: date) -> int:
    """
    Current streak as observed on as_of

    Zero when the last activity day is more than one day before as_of, so a
    single missed day breaks the streak even though history is kept. Days
    after as_of (accepted as clock skew) are not counted.
    """
    observed = [day for day in state.activity_days if day <= as_of]
    if not observed:
        return 0

    last_day = max(observed)
    if (as_of - last_day).days > 1:
        return 0

    return streak_run_length(state.activity_days, last_day)


def project_week_view(streak_length: int, today: date) -> List[int]:
    """
    Weekdays (Monday=1 … Sunday=7) shown as completed in a 7-day strip

    Walks backward from today's weekday by streak_length - 1 days, wrapping
    around the week boundary. A zero streak marks nothing regardless of
    history.
    """
    if streak_length <= 0:
        return []

    today_weekday = today.isoweekday()
    completed = set()
    for offset in range(min(streak_length, DAYS_IN_WEEK)):
        day = today_weekday - offset
        if day <= 0:
            day += DAYS_IN_WEEK
        completed.add(day)

    return sorted(completed)


def week_view_from_history(state: UserProgressState, today: date) -> List[int]:
    """
    Weekdays (Monday=1 … Sunday=7) of the current week with recorded activity

    Only days from Monday of today's week up to today are considered.
    """
    monday = today - timedelta(days=today.isoweekday() - 1)
    return [
        day.isoweekday()
        for day in sorted(state.activity_days)
        if monday <= day <= today
    ]


def next_milestone(streak_length: int) -> Optional[int]:
    """First milestone strictly above the given streak, None past the last one"""
    for milestone in STREAK_MILESTONES:
        if streak_length < milestone:
            return milestone
    return None


def get_streak_info(state: UserProgressState, as_of: date) -> Dict[str, any]:
    """
    Get streak information as observed on as_of

    Returns:
        {
            'current_streak': int,
            'longest_streak': int,
            'last_activity_date': date | None,
            'active_today': bool,
            'at_risk': bool,  # streak alive but nothing logged today yet
            'next_milestone': int | None,
            'week_view': list[int],
        }
    """
    current = current_streak(state, as_of)
    last_day = state.last_activity_date

    return {
        "current_streak": current,
        "longest_streak": state.longest_streak,
        "last_activity_date": last_day,
        "active_today": as_of in state.activity_days,
        "at_risk": current > 0 and as_of not in state.activity_days,
        "next_milestone": next_milestone(current),
        "week_view": week_view_from_history(state, as_of),
    }


def format_streak_display(info: Dict[str, any]) -> str:
    """
    Format streak info for display

    Args:
        info: Streak data from get_streak_info()

    Returns:
        Formatted string
    """
    current = info["current_streak"]
    longest = info["longest_streak"]

    if current == 0 and longest == 0:
        return "No streak yet. Complete an exercise or log your mood to start one! 💪"

    if current == 0:
        return f"Streak ended. Your best is {longest} days. Start again today! 💪"

    line = f"🔥 {current} day streak"
    if longest > current:
        line += f" (best: {longest})"
    if info.get("at_risk"):
        line += " ⏳ log something today to keep it going"

    return line
