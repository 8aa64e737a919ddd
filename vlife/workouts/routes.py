"""Workout API routes.

Plan reads, session logging (start / exercise / complete), history, personal
records and AI week generation.
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from loguru import logger

from vlife.api.responses import no_store_json
from vlife.core.errors import ValidationFailedError
from vlife.db.session import get_session
from vlife.planning.generate_week import generate_week
from vlife.planning.repository import persist_generated_week, select_candidate_exercises
from vlife.planning.schemas import WeekPreferences
from vlife.utils.timezone import to_utc, utc_today
from vlife.workouts import history_service, plan_service, session_service
from vlife.workouts.schemas import (
    CompleteWorkoutRequest,
    ExerciseLogRequest,
    GenerateWeekRequest,
    StartWorkoutRequest,
)
from vlife.workouts.serializers import serialize_exercise_log, serialize_planned_workout

router = APIRouter(prefix="/api/workouts", tags=["workouts"])


def _require_user_id(user_id: str | None) -> str:
    if not user_id:
        raise ValidationFailedError("userId is required")
    return user_id


@router.get("/current-plan")
def current_plan(user_id: str | None = Query(default=None, alias="userId")):
    """Get the user's current active workout plan."""
    user_id = _require_user_id(user_id)
    logger.info("[PLAN] Fetching current workout plan", user_id=user_id)
    with get_session() as session:
        payload = plan_service.get_current_plan(session, user_id, utc_today())
    return no_store_json(payload)


@router.get("/logs/start")
def active_workout(
    user_id: str | None = Query(default=None, alias="userId"),
    workout_id: str | None = Query(default=None, alias="workoutId"),
):
    """Look up the in-progress session for a planned workout, if any."""
    user_id = _require_user_id(user_id)
    if not workout_id:
        raise ValidationFailedError("workoutId is required")

    with get_session() as session:
        workout_log = session_service.get_active_workout(session, user_id, workout_id)
        if workout_log is None:
            return no_store_json({"hasActiveWorkout": False, "workoutLogId": None})
        payload = {
            "hasActiveWorkout": True,
            "workoutLogId": workout_log.id,
            "startedAt": to_utc(workout_log.started_at).isoformat(),
            "exercisesLogged": len(workout_log.exercise_logs),
        }
    return no_store_json(payload)


@router.post("/logs/start")
def start_workout(request: StartWorkoutRequest):
    """Start a workout session, or resume the one already in progress."""
    logger.info("[WORKOUT_LOG] Starting workout session", user_id=request.user_id, workout_id=request.workout_id)
    with get_session() as session:
        result = session_service.start_workout(session, request.user_id, request.workout_id)
        payload = {
            "success": True,
            "workoutLogId": result.workout_log.id,
            "isResume": result.is_resume,
            "workout": serialize_planned_workout(result.planned_workout),
            "message": "Resumed existing workout session" if result.is_resume else "Workout session started",
        }
    return payload


@router.post("/logs/exercise")
def log_exercise(request: ExerciseLogRequest):
    """Log one performed exercise in an in-progress session."""
    with get_session() as session:
        exercise_log = session_service.log_exercise(session, request)
        payload = {
            "success": True,
            "exerciseLog": serialize_exercise_log(exercise_log),
            "message": "Exercise logged successfully",
        }
    return payload


@router.post("/logs/complete")
def complete_workout(request: CompleteWorkoutRequest):
    """Complete a workout session and mark the planned workout done."""
    logger.info("[WORKOUT_LOG] Completing workout", user_id=request.user_id, workout_log_id=request.workout_log_id)
    with get_session() as session:
        summary = session_service.complete_workout(
            session,
            request.user_id,
            request.workout_log_id,
            notes=request.notes,
            perceived_difficulty=request.perceived_difficulty,
            energy_level=request.energy_level,
        )

    return {
        "success": True,
        "summary": {
            "workoutLogId": summary.workout_log_id,
            "duration": summary.duration_minutes,
            "totalExercises": summary.total_exercises,
            "totalSets": summary.total_sets,
            "totalReps": summary.total_reps,
            "totalVolume": summary.total_volume_lbs,
            "averageRpe": summary.avg_rpe,
            "perceivedDifficulty": summary.perceived_difficulty,
            "energyLevel": summary.energy_level,
            "completedAt": summary.completed_at.isoformat(),
        },
        "message": "Workout completed successfully!",
    }


@router.get("/logs")
def workout_logs(
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int = Query(default=history_service.DEFAULT_LIMIT, ge=1, le=100),
):
    """Completed workout history, newest first."""
    user_id = _require_user_id(user_id)
    with get_session() as session:
        logs = history_service.list_workout_logs(session, user_id, limit)
    return no_store_json({"success": True, "logs": logs})


@router.get("/logs/{log_id}")
def workout_log_detail(log_id: str):
    """One workout log with its exercise-level data."""
    with get_session() as session:
        workout_log = history_service.get_workout_log_detail(session, log_id)
    return no_store_json({"success": True, "workoutLog": workout_log})


@router.get("/personal-records")
def personal_records(
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int = Query(default=history_service.DEFAULT_LIMIT, ge=1, le=100),
):
    """Personal records recorded for the user, newest first."""
    user_id = _require_user_id(user_id)
    with get_session() as session:
        records = history_service.list_personal_records(session, user_id, limit)
    return no_store_json({"success": True, "records": records})


@router.post("/generate-week")
async def generate_week_endpoint(request: GenerateWeekRequest):
    """Generate one progression week from the exercise library.

    When planId is given the generated workouts are written to that plan.
    """
    preferences = WeekPreferences(
        training_style=request.preferences.training_style,
        days_per_week=request.preferences.days_per_week,
        session_duration=request.preferences.session_duration,
        exercises_per_workout=request.preferences.exercises_per_workout,
    )

    with get_session() as session:
        candidates = select_candidate_exercises(session, exclude_ids=request.exclude_exercise_ids)

    logger.info(
        "[WEEK_GEN] Week generation requested",
        user_id=request.user_id,
        week_number=request.week_number,
        candidate_count=len(candidates),
        plan_id=request.plan_id,
    )
    week = await generate_week(request.week_number, candidates, preferences)

    workout_ids: list[str] = []
    if request.plan_id:
        with get_session() as session:
            workouts = persist_generated_week(session, request.plan_id, request.user_id, week)
            workout_ids = [w.id for w in workouts]

    return {
        "success": True,
        "week": week.model_dump(by_alias=True),
        "persisted": bool(workout_ids),
        "workoutIds": workout_ids,
    }
