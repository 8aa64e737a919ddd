"""Database access for week generation: candidate selection and persistence."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from vlife.core.errors import NotFoundError
from vlife.db.models import ExerciseLibrary, PlanExercise, PlanWorkout, UserWorkoutPlan
from vlife.planning.schemas import ExerciseCandidate, GeneratedWeek

MAX_CANDIDATES = 100


def select_candidate_exercises(
    session: Session,
    exclude_ids: list[str] | None = None,
    limit: int = MAX_CANDIDATES,
) -> list[ExerciseCandidate]:
    """Pick candidate exercises from the library, alphabetically, minus exclusions."""
    stmt = select(ExerciseLibrary).order_by(ExerciseLibrary.name)
    if exclude_ids:
        stmt = stmt.where(ExerciseLibrary.id.not_in(exclude_ids))
    rows = session.execute(stmt.limit(limit)).scalars().all()
    return [
        ExerciseCandidate(
            id=row.id,
            name=row.name,
            category=row.category or "general",
            primary_muscles=list(row.primary_muscles or []),
        )
        for row in rows
    ]


def persist_generated_week(session: Session, plan_id: str, user_id: str, week: GeneratedWeek) -> list[PlanWorkout]:
    """Write a generated week as plan_workouts/plan_exercises rows.

    Raises:
        NotFoundError: Plan does not exist or belongs to another user
    """
    plan = session.execute(
        select(UserWorkoutPlan).where(UserWorkoutPlan.id == plan_id).where(UserWorkoutPlan.user_id == user_id)
    ).scalar_one_or_none()
    if plan is None:
        raise NotFoundError("Workout plan not found")

    workouts: list[PlanWorkout] = []
    for generated in week.workouts:
        workout = PlanWorkout(
            plan_id=plan.id,
            week_number=week.week_number,
            day_of_week=generated.day_of_week,
            workout_name=generated.workout_name,
            workout_type=plan.plan_type,
            target_muscles=list(generated.focus_areas),
            estimated_duration_minutes=generated.estimated_duration,
        )
        session.add(workout)
        session.flush()
        for exercise in generated.exercises:
            session.add(
                PlanExercise(
                    workout_id=workout.id,
                    exercise_id=exercise.exercise_id,
                    exercise_order=exercise.exercise_order,
                    sets=exercise.sets,
                    reps_min=exercise.reps_min,
                    reps_max=exercise.reps_max,
                    rest_seconds=exercise.rest_seconds,
                    tempo=exercise.tempo,
                    rpe=exercise.rpe,
                    notes=exercise.notes,
                )
            )
        workouts.append(workout)

    session.flush()
    logger.info(
        "[WEEK_GEN] Persisted generated week",
        plan_id=plan.id,
        week_number=week.week_number,
        workout_count=len(workouts),
    )
    return workouts
