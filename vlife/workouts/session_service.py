"""Workout session lifecycle: start, log exercises, complete.

State machine per workout log: none -> in_progress -> completed.

Start is idempotent per (user, planned workout): the partial unique index on
workout_logs turns a concurrent double start into an IntegrityError, which
is resolved by resuming the log that won. Completion updates the log and
the planned workout in the caller's transaction, so both land or neither.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vlife.db.models import ExerciseLog, PlanExercise, PlanWorkout, WorkoutLog
from vlife.utils.timezone import utc_now, utc_today
from vlife.workouts.aggregation import elapsed_minutes, summarize_session, summarize_sets
from vlife.workouts.errors import (
    InvalidExerciseLogError,
    PlannedWorkoutNotFoundError,
    WorkoutAlreadyCompletedError,
    WorkoutLogNotFoundError,
    WorkoutNotInProgressError,
)
from vlife.workouts.schemas import ExerciseLogRequest

IN_PROGRESS = "in_progress"
COMPLETED = "completed"

SET_BASED_TYPES = {"strength", "bodyweight", "plyometric"}
DEFAULT_POOL_LENGTH_METERS = 25.0
METERS_PER_MILE = 1609.34


@dataclass(frozen=True)
class StartResult:
    workout_log: WorkoutLog
    planned_workout: PlanWorkout
    is_resume: bool


@dataclass(frozen=True)
class CompletionSummary:
    workout_log_id: str
    duration_minutes: int
    total_exercises: int
    total_sets: int
    total_reps: int
    total_volume_lbs: float
    avg_rpe: float | None
    perceived_difficulty: int | None
    energy_level: int | None
    completed_at: datetime


def get_planned_workout(session: Session, workout_id: str) -> PlanWorkout:
    workout = session.get(PlanWorkout, workout_id)
    if workout is None:
        raise PlannedWorkoutNotFoundError(workout_id)
    return workout


def find_in_progress_log(session: Session, user_id: str, workout_id: str) -> WorkoutLog | None:
    stmt = (
        select(WorkoutLog)
        .where(WorkoutLog.user_id == user_id)
        .where(WorkoutLog.workout_id == workout_id)
        .where(WorkoutLog.completion_status == IN_PROGRESS)
        .order_by(WorkoutLog.started_at.desc())
        .limit(1)
    )
    return session.execute(stmt).scalars().first()


def get_user_workout_log(session: Session, user_id: str, workout_log_id: str) -> WorkoutLog:
    stmt = select(WorkoutLog).where(WorkoutLog.id == workout_log_id).where(WorkoutLog.user_id == user_id)
    workout_log = session.execute(stmt).scalar_one_or_none()
    if workout_log is None:
        raise WorkoutLogNotFoundError(workout_log_id)
    return workout_log


def start_workout(session: Session, user_id: str, workout_id: str, now: datetime | None = None) -> StartResult:
    """Start a session for a planned workout, or resume the one in progress.

    Raises:
        PlannedWorkoutNotFoundError: No planned workout with this id
    """
    now = now or utc_now()
    planned = get_planned_workout(session, workout_id)

    existing = find_in_progress_log(session, user_id, workout_id)
    if existing is not None:
        logger.info("[WORKOUT_LOG] Resuming existing workout session", user_id=user_id, workout_id=workout_id, workout_log_id=existing.id)
        return StartResult(workout_log=existing, planned_workout=planned, is_resume=True)

    workout_log = WorkoutLog(
        user_id=user_id,
        workout_id=workout_id,
        plan_id=planned.plan_id,
        workout_date=utc_today(now),
        started_at=now,
        completion_status=IN_PROGRESS,
        planned_duration_minutes=planned.estimated_duration_minutes,
        exercises_planned=len(planned.exercises),
    )
    session.add(workout_log)
    try:
        session.flush()
    except IntegrityError:
        # Another request inserted the in-progress log between our lookup and insert
        session.rollback()
        winner = find_in_progress_log(session, user_id, workout_id)
        if winner is None:
            raise
        logger.warning(
            "[WORKOUT_LOG] Concurrent start detected, resuming the existing session",
            user_id=user_id,
            workout_id=workout_id,
            workout_log_id=winner.id,
        )
        return StartResult(workout_log=winner, planned_workout=planned, is_resume=True)

    logger.info(
        "[WORKOUT_LOG] Workout session started",
        user_id=user_id,
        workout_id=workout_id,
        workout_log_id=workout_log.id,
        workout_name=planned.workout_name,
    )
    return StartResult(workout_log=workout_log, planned_workout=planned, is_resume=False)


def get_active_workout(session: Session, user_id: str, workout_id: str) -> WorkoutLog | None:
    """The in-progress log for (user, planned workout), if one exists."""
    return find_in_progress_log(session, user_id, workout_id)


def log_exercise(session: Session, request: ExerciseLogRequest) -> ExerciseLog:
    """Record one performed exercise inside an in-progress session.

    Raises:
        WorkoutLogNotFoundError: Log missing or owned by another user
        WorkoutNotInProgressError: Log is already completed
        InvalidExerciseLogError: Type-specific data missing
    """
    workout_log = get_user_workout_log(session, request.user_id, request.workout_log_id)
    if workout_log.completion_status != IN_PROGRESS:
        logger.warning(
            "[WORKOUT_LOG] Exercise logged against a session that is not in progress",
            workout_log_id=workout_log.id,
            status=workout_log.completion_status,
        )
        raise WorkoutNotInProgressError(workout_log.id, workout_log.completion_status)

    exercise_log = ExerciseLog(
        workout_log_id=workout_log.id,
        exercise_id=request.exercise_id,
        plan_exercise_id=request.plan_exercise_id,
        exercise_type=request.exercise_type,
        notes=request.notes,
        form_quality=request.form_quality,
        difficulty_adjustment=request.difficulty_adjustment,
        perceived_exertion=request.perceived_exertion,
        avg_rpe=request.perceived_exertion,
    )

    if request.plan_exercise_id:
        planned_exercise = session.get(PlanExercise, request.plan_exercise_id)
        if planned_exercise is not None:
            exercise_log.sets_planned = planned_exercise.sets

    exercise_type = request.exercise_type
    if exercise_type in SET_BASED_TYPES:
        if not request.sets:
            raise InvalidExerciseLogError(f"Sets data is required for {exercise_type} exercises")
        set_data = [entry.model_dump() for entry in request.sets]
        summary = summarize_sets(set_data)
        exercise_log.set_data = set_data
        exercise_log.sets_completed = summary.sets_completed
        exercise_log.total_reps = summary.total_reps
        exercise_log.total_volume_lbs = summary.total_volume_lbs
        exercise_log.avg_weight_lbs = summary.avg_weight_lbs
        exercise_log.max_weight_lbs = summary.max_weight_lbs
        exercise_log.avg_reps = summary.avg_reps
        exercise_log.max_reps = summary.max_reps
        if summary.avg_rpe is not None:
            exercise_log.avg_rpe = summary.avg_rpe

    elif exercise_type == "cardio":
        if not request.duration_seconds:
            raise InvalidExerciseLogError("Duration is required for cardio exercises")
        exercise_log.duration_seconds = request.duration_seconds
        exercise_log.distance_miles = request.distance_miles
        exercise_log.pace_per_mile_seconds = request.pace_per_mile_seconds
        exercise_log.avg_heart_rate = request.avg_heart_rate
        exercise_log.calories_burned = request.calories_burned

    elif exercise_type == "swimming":
        if not request.swim_stroke or not request.laps_completed:
            raise InvalidExerciseLogError("Swim stroke and laps completed are required for swimming exercises")
        exercise_log.swim_stroke = request.swim_stroke
        exercise_log.laps_completed = request.laps_completed
        exercise_log.pool_length_meters = request.pool_length_meters or DEFAULT_POOL_LENGTH_METERS
        if request.pool_length_meters:
            exercise_log.distance_miles = request.laps_completed * request.pool_length_meters / METERS_PER_MILE

    elif exercise_type == "flexibility":
        if not request.duration_seconds:
            raise InvalidExerciseLogError("Duration is required for flexibility exercises")
        exercise_log.duration_seconds = request.duration_seconds

    session.add(exercise_log)
    session.flush()

    logger.info(
        "[WORKOUT_LOG] Exercise logged",
        workout_log_id=workout_log.id,
        exercise_id=request.exercise_id,
        exercise_type=exercise_type,
        exercise_log_id=exercise_log.id,
    )
    return exercise_log


def complete_workout(
    session: Session,
    user_id: str,
    workout_log_id: str,
    notes: str | None = None,
    perceived_difficulty: int | None = None,
    energy_level: int | None = None,
    now: datetime | None = None,
) -> CompletionSummary:
    """Complete a session: aggregate exercise logs and mark the planned workout.

    Raises:
        WorkoutLogNotFoundError: Log missing or owned by another user
        WorkoutAlreadyCompletedError: Log already completed (nothing is changed)
    """
    now = now or utc_now()
    workout_log = get_user_workout_log(session, user_id, workout_log_id)

    if workout_log.completion_status == COMPLETED:
        logger.warning("[WORKOUT_LOG] Workout already completed", user_id=user_id, workout_log_id=workout_log_id)
        raise WorkoutAlreadyCompletedError(workout_log_id)

    totals = summarize_session(workout_log.exercise_logs)
    duration = elapsed_minutes(workout_log.started_at, now)

    workout_log.completion_status = COMPLETED
    workout_log.actual_duration_minutes = duration
    workout_log.exercises_completed = totals.total_exercises
    workout_log.total_sets = totals.total_sets
    workout_log.total_reps = totals.total_reps
    workout_log.total_volume_lbs = totals.total_volume_lbs
    workout_log.avg_rpe = totals.avg_rpe
    workout_log.notes = notes or workout_log.notes
    workout_log.perceived_difficulty = perceived_difficulty
    workout_log.energy_level = energy_level
    workout_log.completed_at = now

    if workout_log.workout_id:
        planned = session.get(PlanWorkout, workout_log.workout_id)
        if planned is not None:
            planned.is_completed = True
            planned.completed_date = utc_today(now)
            planned.actual_duration_minutes = duration
        else:
            logger.warning("[WORKOUT_LOG] Planned workout missing at completion", workout_id=workout_log.workout_id)

    session.flush()

    logger.info(
        "[WORKOUT_LOG] Workout completed",
        user_id=user_id,
        workout_log_id=workout_log.id,
        duration=duration,
        total_exercises=totals.total_exercises,
        total_sets=totals.total_sets,
        total_volume=totals.total_volume_lbs,
    )
    return CompletionSummary(
        workout_log_id=workout_log.id,
        duration_minutes=duration,
        total_exercises=totals.total_exercises,
        total_sets=totals.total_sets,
        total_reps=totals.total_reps,
        total_volume_lbs=totals.total_volume_lbs,
        avg_rpe=totals.avg_rpe,
        perceived_difficulty=perceived_difficulty,
        energy_level=energy_level,
        completed_at=now,
    )
