"""Exercise demonstration endpoint backed by ExerciseDB.

Keeps the RapidAPI key server-side.
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from vlife.api.responses import error_body
from vlife.core.errors import ValidationFailedError
from vlife.integrations.exercisedb.client import ExerciseDBClient

router = APIRouter(prefix="/api/exercise-demo", tags=["exercises"])


@router.get("")
def exercise_demo(name: str | None = Query(default=None)):
    """Fetch demonstration data for an exercise by name."""
    if not name:
        raise ValidationFailedError("Exercise name is required")

    exercise = ExerciseDBClient().search_by_name(name)
    if exercise is None:
        return JSONResponse(status_code=404, content={**error_body("Exercise not found"), "exercise": None})

    return {"success": True, "exercise": exercise}
