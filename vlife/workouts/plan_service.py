"""Current workout plan view: plan header, weekly workouts and progress."""

from __future__ import annotations

from datetime import date

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from vlife.db.models import PlanExercise, PlanWorkout, UserWorkoutPlan
from vlife.workouts.serializers import serialize_plan_header, serialize_planned_workout

TOTAL_WEEKS = 4


def get_active_plan(session: Session, user_id: str, today: date) -> UserWorkoutPlan | None:
    """Newest active plan that has not ended yet."""
    stmt = (
        select(UserWorkoutPlan)
        .where(UserWorkoutPlan.user_id == user_id)
        .where(UserWorkoutPlan.status == "active")
        .where(UserWorkoutPlan.end_date >= today)
        .order_by(UserWorkoutPlan.created_at.desc())
        .limit(1)
    )
    return session.execute(stmt).scalars().first()


def compute_progress(workouts: list[PlanWorkout]) -> dict:
    total = len(workouts)
    completed = sum(1 for w in workouts if w.is_completed)
    adherence = round(completed / total * 100) if total > 0 else 0
    return {
        "totalWorkouts": total,
        "completedWorkouts": completed,
        "adherenceRate": adherence,
        "remainingWorkouts": total - completed,
    }


def get_current_plan(session: Session, user_id: str, today: date) -> dict:
    """Build the current-plan payload for a user.

    Week progression is advanced by a database trigger, so the current week is
    read from the plan row. The next workout is the first uncompleted one in
    (week, day) order, which lets users move through the plan at their own pace.
    """
    plan = get_active_plan(session, user_id, today)
    if plan is None:
        logger.info("[PLAN] No active workout plan found", user_id=user_id)
        return {"hasActivePlan": False, "plan": None}

    stmt = (
        select(PlanWorkout)
        .where(PlanWorkout.plan_id == plan.id)
        .options(selectinload(PlanWorkout.exercises).selectinload(PlanExercise.exercise))
        .order_by(PlanWorkout.week_number, PlanWorkout.day_of_week)
    )
    workouts = list(session.execute(stmt).scalars().all())

    weekly_workouts: dict[str, list[dict]] = {}
    for workout in workouts:
        weekly_workouts.setdefault(str(workout.week_number), []).append(serialize_planned_workout(workout))

    progress = compute_progress(workouts)
    current_week = plan.current_week or 1
    next_workout = next((w for w in workouts if not w.is_completed), None)

    logger.info(
        "[PLAN] Current workout plan fetched",
        user_id=user_id,
        plan_id=plan.id,
        current_week=current_week,
        total_workouts=progress["totalWorkouts"],
        completed_workouts=progress["completedWorkouts"],
        has_next_workout=next_workout is not None,
    )

    return {
        "hasActivePlan": True,
        "plan": {
            **serialize_plan_header(plan),
            "currentWeek": current_week,
            "totalWeeks": TOTAL_WEEKS,
            "progress": progress,
            "weeklyWorkouts": weekly_workouts,
            "todaysWorkout": serialize_planned_workout(next_workout) if next_workout else None,
        },
    }
