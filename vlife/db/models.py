from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class ExerciseLibrary(Base):
    """Exercise catalog referenced by planned and logged exercises."""

    __tablename__ = "exercise_library"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    exercise_type: Mapped[str | None] = mapped_column(String, nullable=True)
    primary_muscles: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    target_muscles: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    equipment: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    difficulty: Mapped[str | None] = mapped_column(String, nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)


class UserWorkoutPlan(Base):
    """A user's multi-week workout plan.

    current_week is advanced by a database trigger once every workout of the
    current week is completed; this service only reads it.
    """

    __tablename__ = "user_workout_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    plan_name: Mapped[str] = mapped_column(String, nullable=False)
    plan_type: Mapped[str | None] = mapped_column(String, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_per_week: Mapped[int] = mapped_column(Integer, nullable=False)
    split_pattern: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active", comment="active, completed, archived")
    plan_rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_week: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    workouts: Mapped[list[PlanWorkout]] = relationship("PlanWorkout", back_populates="plan")

    __table_args__ = (Index("idx_user_workout_plans_user_status", "user_id", "status"),)


class PlanWorkout(Base):
    """One planned workout (a day) inside a plan week."""

    __tablename__ = "plan_workouts"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    plan_id: Mapped[str] = mapped_column(String, ForeignKey("user_workout_plans.id"), nullable=False, index=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    workout_name: Mapped[str] = mapped_column(String, nullable=False)
    workout_type: Mapped[str | None] = mapped_column(String, nullable=True)
    target_muscles: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    estimated_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    plan: Mapped[UserWorkoutPlan] = relationship("UserWorkoutPlan", back_populates="workouts")
    exercises: Mapped[list[PlanExercise]] = relationship(
        "PlanExercise",
        back_populates="workout",
        order_by="PlanExercise.exercise_order",
    )


class PlanExercise(Base):
    """Ordered exercise prescription inside a planned workout."""

    __tablename__ = "plan_exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    workout_id: Mapped[str] = mapped_column(String, ForeignKey("plan_workouts.id"), nullable=False, index=True)
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercise_library.id"), nullable=False)
    exercise_order: Mapped[int] = mapped_column(Integer, nullable=False)
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tempo: Mapped[str | None] = mapped_column(String, nullable=True)
    rpe: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    workout: Mapped[PlanWorkout] = relationship("PlanWorkout", back_populates="exercises")
    exercise: Mapped[ExerciseLibrary] = relationship("ExerciseLibrary")


class WorkoutLog(Base):
    """One session attempt at a planned workout.

    Lifecycle: in_progress -> completed. At most one in_progress row per
    (user_id, workout_id), enforced by a partial unique index.
    """

    __tablename__ = "workout_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    plan_id: Mapped[str | None] = mapped_column(String, ForeignKey("user_workout_plans.id"), nullable=True)
    workout_id: Mapped[str | None] = mapped_column(String, ForeignKey("plan_workouts.id"), nullable=True)
    workout_date: Mapped[date] = mapped_column(Date, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completion_status: Mapped[str] = mapped_column(String, nullable=False, default="in_progress")
    planned_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    exercises_planned: Mapped[int | None] = mapped_column(Integer, nullable=True)
    exercises_completed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_volume_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_rpe: Mapped[float | None] = mapped_column(Float, nullable=True)
    perceived_difficulty: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    enjoyment_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    workout: Mapped[PlanWorkout | None] = relationship("PlanWorkout")
    exercise_logs: Mapped[list[ExerciseLog]] = relationship(
        "ExerciseLog",
        back_populates="workout_log",
        order_by="ExerciseLog.created_at",
    )

    __table_args__ = (
        Index(
            "uq_workout_logs_active_session",
            "user_id",
            "workout_id",
            unique=True,
            sqlite_where=text("completion_status = 'in_progress'"),
            postgresql_where=text("completion_status = 'in_progress'"),
        ),
        Index("idx_workout_logs_user_completed", "user_id", "completed_at"),
    )


class ExerciseLog(Base):
    """One performed exercise inside a workout log.

    set_data holds the set-by-set record: [{"weight", "reps", "rpe", "completed"}].
    The aggregate columns are derived from set_data when the row is written.
    """

    __tablename__ = "exercise_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    workout_log_id: Mapped[str] = mapped_column(String, ForeignKey("workout_logs.id"), nullable=False, index=True)
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercise_library.id"), nullable=False)
    plan_exercise_id: Mapped[str | None] = mapped_column(String, ForeignKey("plan_exercises.id"), nullable=True)
    exercise_type: Mapped[str] = mapped_column(String, nullable=False)

    sets_planned: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sets_completed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    set_data: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_volume_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_weight_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_weight_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_reps: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    avg_rpe: Mapped[float | None] = mapped_column(Float, nullable=True)

    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    distance_miles: Mapped[float | None] = mapped_column(Float, nullable=True)
    pace_per_mile_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    avg_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    calories_burned: Mapped[int | None] = mapped_column(Integer, nullable=True)
    swim_stroke: Mapped[str | None] = mapped_column(String, nullable=True)
    laps_completed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pool_length_meters: Mapped[float | None] = mapped_column(Float, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    form_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty_adjustment: Mapped[str | None] = mapped_column(String, nullable=True)
    perceived_exertion: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    workout_log: Mapped[WorkoutLog] = relationship("WorkoutLog", back_populates="exercise_logs")
    exercise: Mapped[ExerciseLibrary] = relationship("ExerciseLibrary")


class ExercisePRHistory(Base):
    """Personal records per (user, exercise).

    Rows are inserted by the check_and_record_prs trigger on exercise_logs;
    read-only from this service.
    """

    __tablename__ = "exercise_pr_history"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercise_library.id"), nullable=False)
    pr_type: Mapped[str] = mapped_column(String, nullable=False, comment="max_weight, max_reps, max_volume")
    weight_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    volume_lbs: Mapped[float | None] = mapped_column(Float, nullable=True)
    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    exercise: Mapped[ExerciseLibrary] = relationship("ExerciseLibrary")


class Subscription(Base):
    """Subscription state mirrored from RevenueCat webhooks, one row per user."""

    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    plan: Mapped[str] = mapped_column(String, nullable=False, default="free", comment="free, pro, elite")
    status: Mapped[str] = mapped_column(String, nullable=False, comment="active, cancelled, past_due")
    billing_cycle: Mapped[str] = mapped_column(String, nullable=False, default="monthly")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    next_billing_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    __table_args__ = (UniqueConstraint("user_id", name="uq_subscriptions_user_id"),)
