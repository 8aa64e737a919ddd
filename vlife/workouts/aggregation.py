"""Aggregation of logged sets and exercise logs.

Pure functions: no database access, no clock reads.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from vlife.utils.timezone import to_utc


@dataclass(frozen=True)
class SetSummary:
    sets_completed: int
    total_reps: int
    total_volume_lbs: float
    avg_weight_lbs: float | None
    max_weight_lbs: float | None
    avg_reps: float | None
    max_reps: int | None
    avg_rpe: float | None


@dataclass(frozen=True)
class SessionSummary:
    total_exercises: int
    total_sets: int
    total_reps: int
    total_volume_lbs: float
    avg_rpe: float | None


class ExerciseLogLike(Protocol):
    sets_completed: int | None
    total_reps: int | None
    total_volume_lbs: float | None
    avg_rpe: float | None


def mean(values: Iterable[float | int | None]) -> float | None:
    """Arithmetic mean of the non-null values, None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def summarize_sets(sets: Iterable[Mapping[str, Any]]) -> SetSummary:
    """Summarize set-by-set data for one exercise.

    Only sets whose `completed` flag is not False count. Volume is weight x reps.
    """
    done = [s for s in sets if s.get("completed", True) is not False]
    weights = [float(s.get("weight") or 0) for s in done]
    reps = [int(s.get("reps") or 0) for s in done]

    return SetSummary(
        sets_completed=len(done),
        total_reps=sum(reps),
        total_volume_lbs=sum(w * r for w, r in zip(weights, reps, strict=True)),
        avg_weight_lbs=mean(weights),
        max_weight_lbs=max(weights) if weights else None,
        avg_reps=mean(reps),
        max_reps=max(reps) if reps else None,
        avg_rpe=mean(s.get("rpe") for s in done),
    )


def summarize_session(exercise_logs: Iterable[ExerciseLogLike]) -> SessionSummary:
    """Session totals: the sums over exercise logs, and mean of present avg_rpe."""
    logs = list(exercise_logs)
    return SessionSummary(
        total_exercises=len(logs),
        total_sets=sum(log.sets_completed or 0 for log in logs),
        total_reps=sum(log.total_reps or 0 for log in logs),
        total_volume_lbs=sum(log.total_volume_lbs or 0 for log in logs),
        avg_rpe=mean(log.avg_rpe for log in logs),
    )


def elapsed_minutes(started_at: datetime, ended_at: datetime) -> int:
    """Whole minutes between two timestamps, rounded half up."""
    seconds = (to_utc(ended_at) - to_utc(started_at)).total_seconds()
    return math.floor(seconds / 60 + 0.5)
