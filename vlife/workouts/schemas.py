"""Workout API schemas (Pydantic).

Request bodies use camelCase keys on the wire.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ExerciseType = Literal["strength", "cardio", "flexibility", "bodyweight", "plyometric", "swimming", "sports"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartWorkoutRequest(CamelModel):
    user_id: str = Field(min_length=1)
    workout_id: str = Field(min_length=1)


class CompleteWorkoutRequest(CamelModel):
    user_id: str = Field(min_length=1)
    workout_log_id: str = Field(min_length=1)
    notes: str | None = Field(default=None, max_length=1000)
    perceived_difficulty: int | None = Field(default=None, ge=1, le=10)
    energy_level: int | None = Field(default=None, ge=1, le=10)


class SetEntry(CamelModel):
    reps: int = Field(gt=0)
    weight: float = Field(default=0, ge=0)
    rpe: int | None = Field(default=None, ge=1, le=10)
    completed: bool = True


class ExerciseLogRequest(CamelModel):
    user_id: str = Field(min_length=1)
    workout_log_id: str = Field(min_length=1)
    exercise_id: str = Field(min_length=1)
    exercise_type: ExerciseType
    plan_exercise_id: str | None = None

    # Strength / bodyweight / plyometric
    sets: list[SetEntry] | None = None

    # Cardio
    duration_seconds: int | None = Field(default=None, gt=0)
    distance_miles: float | None = Field(default=None, gt=0)
    avg_heart_rate: int | None = Field(default=None, gt=0)
    calories_burned: int | None = Field(default=None, gt=0)
    pace_per_mile_seconds: int | None = Field(default=None, gt=0)

    # Swimming
    swim_stroke: str | None = Field(default=None, max_length=50)
    laps_completed: int | None = Field(default=None, gt=0)
    pool_length_meters: float | None = Field(default=None, gt=0)

    # Common
    notes: str | None = Field(default=None, max_length=1000)
    form_quality: int | None = Field(default=None, ge=1, le=5)
    difficulty_adjustment: Literal["easier", "same", "harder"] | None = None
    perceived_exertion: int | None = Field(default=None, ge=1, le=10)


class WeekPreferencesInput(CamelModel):
    training_style: str = Field(default="mixed", min_length=1)
    days_per_week: int = Field(default=3, ge=1, le=7)
    session_duration: int = Field(default=45, ge=15, le=180)
    exercises_per_workout: int = Field(default=5, ge=1, le=15)


class GenerateWeekRequest(CamelModel):
    user_id: str = Field(min_length=1)
    week_number: int = Field(ge=1, le=4)
    preferences: WeekPreferencesInput = Field(default_factory=WeekPreferencesInput)
    plan_id: str | None = None
    exclude_exercise_ids: list[str] = Field(default_factory=list)
