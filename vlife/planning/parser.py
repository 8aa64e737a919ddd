"""Parsing and validation of generated weeks.

A truncated completion (finish_reason == "length") is only warned about:
the JSON parse that follows is what fails, with a descriptive error.
"""

from __future__ import annotations

import json

from loguru import logger
from pydantic import ValidationError

from vlife.planning.errors import UnknownExerciseIdError, WeekParseError
from vlife.planning.schemas import ExerciseCandidate, GeneratedWeek
from vlife.services.llm.client import CompletionResult


def parse_week_response(result: CompletionResult, week_number: int) -> GeneratedWeek:
    """Parse completion text into a GeneratedWeek.

    Args:
        result: Completion result from the client
        week_number: Requested week, used for log context only

    Returns:
        GeneratedWeek

    Raises:
        WeekParseError: Text is not JSON, or JSON does not have the week shape
    """
    content = result.content

    if result.truncated:
        logger.warning(
            "[WEEK_GEN] Response truncated due to max_tokens limit",
            week_number=week_number,
            response_length=len(content),
        )
        logger.warning("[WEEK_GEN] Last 200 chars: " + content[-200:])

    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("[WEEK_GEN] JSON parse error", week_number=week_number, error=str(e))
        logger.error("[WEEK_GEN] Attempted to parse: " + content[:500])
        reason = " (response was truncated)" if result.truncated else ""
        raise WeekParseError(f"Failed to parse completion response{reason}: {e}") from e

    try:
        return GeneratedWeek.model_validate(payload)
    except ValidationError as e:
        logger.error("[WEEK_GEN] Response JSON does not match week schema", week_number=week_number, error_count=e.error_count())
        raise WeekParseError(
            "Completion response does not match the expected week shape",
            details=[{"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()],
        ) from e


def validate_exercise_ids(week: GeneratedWeek, exercises: list[ExerciseCandidate]) -> None:
    """Reject a week that references exercises outside the candidate list.

    Raises:
        UnknownExerciseIdError: At least one exerciseId is not a candidate id
    """
    allowed = {exercise.id for exercise in exercises}
    unknown: list[str] = []
    for exercise_id in week.exercise_ids():
        if exercise_id not in allowed and exercise_id not in unknown:
            unknown.append(exercise_id)
    if unknown:
        raise UnknownExerciseIdError(unknown)
