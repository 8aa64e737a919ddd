"""Root conftest for all tests.

Every test gets its own in-memory SQLite database. The module-level engine and
session factory in vlife.db.session are swapped for test ones, so the real
get_session() (commit / rollback semantics included) runs against it.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vlife.db.models import Base, ExerciseLibrary, PlanExercise, PlanWorkout, UserWorkoutPlan

USER_ID = "user-123"


@pytest.fixture
def db_engine(monkeypatch):
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    import vlife.db.session as session_module

    monkeypatch.setattr(session_module, "_engine", engine)
    monkeypatch.setattr(session_module, "_SessionLocal", session_local)

    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session for arranging and asserting; commit before exercising endpoints."""
    import vlife.db.session as session_module

    session = session_module._get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_engine):
    from vlife.main import app

    return TestClient(app)


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def library(db_session) -> list[ExerciseLibrary]:
    """Five strength exercises, committed."""
    names = [
        ("Bench Press", ["chest", "triceps"]),
        ("Barbell Row", ["back", "biceps"]),
        ("Back Squat", ["quads", "glutes"]),
        ("Overhead Press", ["shoulders"]),
        ("Romanian Deadlift", ["hamstrings", "glutes"]),
    ]
    exercises = [
        ExerciseLibrary(
            name=name,
            category="strength",
            exercise_type="strength",
            primary_muscles=muscles,
            target_muscles=muscles,
            equipment=["barbell"],
            difficulty="intermediate",
        )
        for name, muscles in names
    ]
    db_session.add_all(exercises)
    db_session.commit()
    return exercises


@pytest.fixture
def workout_plan(db_session, library, user_id) -> UserWorkoutPlan:
    """Active four-week plan with two workouts in week 1 and one in week 2, committed."""
    today = date.today()
    plan = UserWorkoutPlan(
        user_id=user_id,
        plan_name="Strength Foundations",
        plan_type="strength",
        start_date=today - timedelta(days=3),
        end_date=today + timedelta(days=25),
        days_per_week=2,
        split_pattern="upper_lower",
        status="active",
        current_week=1,
        created_at=datetime.now(timezone.utc),
    )
    db_session.add(plan)
    db_session.flush()

    layout = [
        (1, 1, "Upper Body", ["chest", "back"], library[:2]),
        (1, 3, "Lower Body", ["quads", "hamstrings"], library[2:5]),
        (2, 1, "Upper Body", ["chest", "shoulders"], [library[0], library[3]]),
    ]
    for week, day, name, muscles, exercises in layout:
        workout = PlanWorkout(
            plan_id=plan.id,
            week_number=week,
            day_of_week=day,
            workout_name=name,
            workout_type="strength",
            target_muscles=muscles,
            estimated_duration_minutes=45,
        )
        db_session.add(workout)
        db_session.flush()
        for order, exercise in enumerate(exercises, start=1):
            db_session.add(
                PlanExercise(
                    workout_id=workout.id,
                    exercise_id=exercise.id,
                    exercise_order=order,
                    sets=3,
                    reps_min=8,
                    reps_max=12,
                    rest_seconds=90,
                    rpe=7,
                )
            )
    db_session.commit()
    return plan


@pytest.fixture
def first_workout(db_session, workout_plan) -> PlanWorkout:
    return sorted(workout_plan.workouts, key=lambda w: (w.week_number, w.day_of_week))[0]
