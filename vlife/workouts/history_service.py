"""Workout history and personal record reads."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from vlife.db.models import ExerciseLog, ExercisePRHistory, WorkoutLog
from vlife.workouts.errors import WorkoutLogNotFoundError
from vlife.workouts.serializers import (
    serialize_personal_record,
    serialize_workout_log_detail,
    serialize_workout_log_summary,
)

DEFAULT_LIMIT = 10


def list_workout_logs(session: Session, user_id: str, limit: int = DEFAULT_LIMIT) -> list[dict]:
    """Completed workout logs for a user, newest first."""
    stmt = (
        select(WorkoutLog)
        .where(WorkoutLog.user_id == user_id)
        .where(WorkoutLog.completion_status == "completed")
        .options(selectinload(WorkoutLog.workout))
        .order_by(WorkoutLog.completed_at.desc())
        .limit(limit)
    )
    return [serialize_workout_log_summary(log) for log in session.execute(stmt).scalars().all()]


def get_workout_log_detail(session: Session, workout_log_id: str) -> dict:
    """Full workout log with its exercise logs in logging order.

    Raises:
        WorkoutLogNotFoundError: No log with this id
    """
    stmt = (
        select(WorkoutLog)
        .where(WorkoutLog.id == workout_log_id)
        .options(
            selectinload(WorkoutLog.workout),
            selectinload(WorkoutLog.exercise_logs).selectinload(ExerciseLog.exercise),
        )
    )
    workout_log = session.execute(stmt).scalar_one_or_none()
    if workout_log is None:
        raise WorkoutLogNotFoundError(workout_log_id)
    return serialize_workout_log_detail(workout_log)


def list_personal_records(session: Session, user_id: str, limit: int = DEFAULT_LIMIT) -> list[dict]:
    """Personal records for a user, newest first."""
    stmt = (
        select(ExercisePRHistory)
        .where(ExercisePRHistory.user_id == user_id)
        .options(selectinload(ExercisePRHistory.exercise))
        .order_by(ExercisePRHistory.achieved_at.desc())
        .limit(limit)
    )
    return [serialize_personal_record(record) for record in session.execute(stmt).scalars().all()]
