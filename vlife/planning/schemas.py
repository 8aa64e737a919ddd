"""Week generation schemas.

Inputs are frozen dataclasses; the model output is a pydantic model so the
JSON returned by the completion endpoint is shape-checked on parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class WeekType(StrEnum):
    BASELINE = "baseline"
    BUILD = "build"
    DELOAD = "deload"


@dataclass(frozen=True)
class ExerciseCandidate:
    """Exercise the model may pick from.

    Attributes:
        id: exercise_library id the model must echo back verbatim
        name: Display name
        category: Library category (strength, cardio, ...)
        primary_muscles: Muscles listed in the prompt line
    """

    id: str
    name: str
    category: str
    primary_muscles: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WeekPreferences:
    """User training preferences for one generated week."""

    training_style: str
    days_per_week: int
    session_duration: int
    exercises_per_workout: int


class GeneratedExercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_id: str = Field(alias="exerciseId")
    exercise_name: str | None = Field(default=None, alias="exerciseName")
    exercise_order: int = Field(alias="exerciseOrder")
    sets: int
    reps_min: int | None = Field(default=None, alias="repsMin")
    reps_max: int | None = Field(default=None, alias="repsMax")
    rest_seconds: int | None = Field(default=None, alias="restSeconds")
    tempo: str | None = None
    rpe: float | None = None
    notes: str | None = None


class GeneratedWorkout(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_of_week: int = Field(alias="dayOfWeek")
    workout_name: str = Field(alias="workoutName")
    focus_areas: list[str] = Field(default_factory=list, alias="focusAreas")
    estimated_duration: int | None = Field(default=None, alias="estimatedDuration")
    exercises: list[GeneratedExercise]


class GeneratedWeek(BaseModel):
    """One generated progression week, as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    week_number: int = Field(alias="weekNumber")
    week_type: WeekType = Field(alias="weekType")
    workouts: list[GeneratedWorkout]

    def exercise_ids(self) -> list[str]:
        return [exercise.exercise_id for workout in self.workouts for exercise in workout.exercises]
