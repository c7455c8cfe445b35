"""API routes for mindwell"""
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from mindwell.api.models import (
    MoodLogRequest, MoodLogResponse, MoodEntryResponse,
    ExerciseCompletionRequest, ExerciseCompletionResponse, CompletionEntryResponse,
    TimezoneUpdateRequest,
    XPResponse, StreakResponse, AchievementResponse,
    RecommendationResponse, HealthCheckResponse
)
from mindwell.api.auth import verify_api_key
from mindwell.api.middleware import (
    limiter, WRITE_LIMIT, READ_LIMIT, CATALOG_LIMIT, SETTINGS_LIMIT, HEALTH_LIMIT
)
from mindwell.exceptions import MindwellError
from mindwell.models.exercise import ExerciseCategory, ExerciseCompletionEvent, ExerciseDefinition
from mindwell.models.mood import MoodEntry
from mindwell.services import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


def _progress_service():
    return get_container().progress_service


def _mood_response(entry: MoodEntry) -> MoodEntryResponse:
    display = entry.display
    return MoodEntryResponse(
        id=str(entry.id),
        user_id=entry.user_id,
        mood=entry.mood,
        label=display.label,
        emoji=display.emoji,
        intensity=entry.intensity,
        note=entry.note,
        occurred_at=entry.occurred_at
    )


def _completion_response(event: ExerciseCompletionEvent) -> CompletionEntryResponse:
    exercise = _progress_service().exercise_catalog.get(event.exercise_id)
    return CompletionEntryResponse(
        id=str(event.id),
        user_id=event.user_id,
        exercise_id=event.exercise_id,
        title=exercise.title if exercise else None,
        category=exercise.category if exercise else None,
        xp_reward=exercise.xp_reward if exercise else None,
        occurred_at=event.occurred_at
    )


def _internal_error(operation: str, e: Exception) -> HTTPException:
    logger.error(f"Error {operation}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e)
    )


# ==========================================
# Moods
# ==========================================

@router.post(
    "/api/v1/users/{user_id}/moods",
    response_model=MoodLogResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(WRITE_LIMIT)
async def log_mood_endpoint(
    request: Request,
    user_id: str,
    body: MoodLogRequest,
    api_key: str = Depends(verify_api_key)
):
    """Log a mood entry; counts as activity for the day"""
    try:
        result = await _progress_service().log_mood(
            user_id,
            mood=body.mood,
            intensity=body.intensity,
            note=body.note,
            occurred_at=body.occurred_at
        )

        return MoodLogResponse(
            entry=_mood_response(result["entry"]),
            current_streak=result["current_streak"],
            achievements_unlocked=result["achievements_unlocked"],
            recommended_category=result["recommended_category"],
            message=result["message"]
        )

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("logging mood", e)


@router.get("/api/v1/users/{user_id}/moods", response_model=List[MoodEntryResponse])
@limiter.limit(READ_LIMIT)
async def get_moods_endpoint(
    request: Request,
    user_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    api_key: str = Depends(verify_api_key)
):
    """Mood history, newest first"""
    try:
        entries = _progress_service().get_moods(user_id, limit=limit)
        return [_mood_response(entry) for entry in entries]

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting moods", e)


@router.get("/api/v1/users/{user_id}/moods/latest", response_model=MoodEntryResponse)
@limiter.limit(READ_LIMIT)
async def get_latest_mood_endpoint(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Most recent mood entry"""
    try:
        return _mood_response(_progress_service().get_latest_mood(user_id))

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting latest mood", e)


# ==========================================
# Exercises
# ==========================================

@router.get("/api/v1/exercises", response_model=List[ExerciseDefinition])
@limiter.limit(CATALOG_LIMIT)
async def list_exercises_endpoint(
    request: Request,
    category: Optional[ExerciseCategory] = None,
    api_key: str = Depends(verify_api_key)
):
    """Exercise catalog, optionally filtered by category"""
    return _progress_service().list_exercises(category)


@router.get("/api/v1/exercises/{exercise_id}", response_model=ExerciseDefinition)
@limiter.limit(CATALOG_LIMIT)
async def get_exercise_endpoint(
    request: Request,
    exercise_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Single catalog exercise"""
    return _progress_service().get_exercise(exercise_id)


@router.post("/api/v1/users/{user_id}/exercises/complete", response_model=ExerciseCompletionResponse)
@limiter.limit(WRITE_LIMIT)
async def complete_exercise_endpoint(
    request: Request,
    user_id: str,
    body: ExerciseCompletionRequest,
    api_key: str = Depends(verify_api_key)
):
    """Record an exercise completion and award XP"""
    try:
        result = await _progress_service().complete_exercise(
            user_id,
            body.exercise_id,
            occurred_at=body.occurred_at
        )
        return ExerciseCompletionResponse(**result)

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("completing exercise", e)


@router.get(
    "/api/v1/users/{user_id}/exercises/completions",
    response_model=List[CompletionEntryResponse]
)
@limiter.limit(READ_LIMIT)
async def get_completions_endpoint(
    request: Request,
    user_id: str,
    days: Optional[int] = Query(None, ge=1, le=366),
    api_key: str = Depends(verify_api_key)
):
    """Exercise completion history, newest first; days limits it to recent local days"""
    try:
        events = _progress_service().get_completions(user_id, days=days)
        return [_completion_response(event) for event in events]

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting completions", e)


# ==========================================
# Progress
# ==========================================

@router.put("/api/v1/users/{user_id}/timezone")
@limiter.limit(SETTINGS_LIMIT)
async def set_timezone_endpoint(
    request: Request,
    user_id: str,
    body: TimezoneUpdateRequest,
    api_key: str = Depends(verify_api_key)
):
    """Change the timezone used for the user's calendar days"""
    try:
        timezone = await _progress_service().set_timezone(user_id, body.timezone)
        return {"user_id": user_id, "timezone": timezone}

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("setting timezone", e)


@router.get("/api/v1/users/{user_id}/xp", response_model=XPResponse)
@limiter.limit(READ_LIMIT)
async def get_xp(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Get user XP and level"""
    try:
        xp_data = _progress_service().get_progress(user_id)

        return XPResponse(
            user_id=user_id,
            xp=xp_data["total_xp"],
            level=xp_data["current_level"],
            xp_in_current_level=xp_data["xp_in_current_level"],
            xp_to_next_level=xp_data["xp_to_next_level"],
            total_xp_for_next_level=xp_data["total_xp_for_next_level"],
            total_completions=xp_data["total_completions"],
            completion_counts=xp_data["completion_counts"]
        )

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting XP", e)


@router.get("/api/v1/users/{user_id}/streaks", response_model=StreakResponse)
@limiter.limit(READ_LIMIT)
async def get_streaks_endpoint(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Get user streaks"""
    try:
        return StreakResponse(**_progress_service().get_streaks(user_id))

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting streaks", e)


@router.get("/api/v1/users/{user_id}/achievements", response_model=AchievementResponse)
@limiter.limit(READ_LIMIT)
async def get_achievements_endpoint(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key)
):
    """Get user achievements"""
    try:
        achievements = _progress_service().get_achievements(user_id)

        return AchievementResponse(
            user_id=user_id,
            unlocked=achievements["unlocked"],
            locked=achievements["locked"],
            total_unlocked=achievements["total_unlocked"],
            total_achievements=achievements["total_achievements"]
        )

    except (HTTPException, MindwellError):
        raise
    except Exception as e:
        raise _internal_error("getting achievements", e)


# ==========================================
# Recommendations
# ==========================================

@router.get("/api/v1/recommendations", response_model=RecommendationResponse)
@limiter.limit(CATALOG_LIMIT)
async def get_recommendations_endpoint(
    request: Request,
    mood: str,
    intensity: int = 3,
    api_key: str = Depends(verify_api_key)
):
    """Recommended exercise category for a mood; unknown moods get the default"""
    return RecommendationResponse(**_progress_service().recommend(mood, intensity))


@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit(HEALTH_LIMIT)
async def health_check(request: Request):
    """Health check endpoint"""
    try:
        store = get_container().store
        store_status = "persistent" if store.data_path is not None else "memory"
    except RuntimeError as e:
        logger.error(f"Store health check failed: {e}")
        store_status = "unavailable"

    return HealthCheckResponse(
        status="healthy" if store_status != "unavailable" else "degraded",
        store=store_status,
        timestamp=datetime.now()
    )
