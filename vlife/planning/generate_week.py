"""Week generation: one JSON completion per progression week.

Regenerates the whole week when the model references exercise IDs outside
the candidate list, up to a bounded number of attempts.
"""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from vlife.config.settings import settings
from vlife.core.errors import ValidationFailedError
from vlife.planning.errors import NotEnoughExercisesError, UnknownExerciseIdError
from vlife.planning.parser import parse_week_response, validate_exercise_ids
from vlife.planning.prompts import SYSTEM_PROMPT, build_week_prompt, classify_week
from vlife.planning.schemas import ExerciseCandidate, GeneratedWeek, WeekPreferences
from vlife.services.llm.client import CompletionClient, CompletionResult

MIN_CANDIDATE_EXERCISES = 5


class JSONCompletionClient(Protocol):
    async def complete_json(self, system_prompt: str, user_prompt: str) -> CompletionResult: ...


async def generate_week(
    week_number: int,
    exercises: list[ExerciseCandidate],
    preferences: WeekPreferences,
    *,
    client: JSONCompletionClient | None = None,
    max_attempts: int | None = None,
) -> GeneratedWeek:
    """Generate one progression week via a JSON-mode completion.

    Args:
        week_number: Progression week (1-4)
        exercises: Candidate exercises (at least MIN_CANDIDATE_EXERCISES)
        preferences: User training preferences
        client: Completion client, defaults to the configured CompletionClient
        max_attempts: Attempts allowed when the model invents exercise IDs

    Returns:
        GeneratedWeek whose exercise IDs all come from `exercises`

    Raises:
        NotEnoughExercisesError: Too few candidates, raised before any call
        WeekParseError: Completion was not a parseable week (not retried)
        UnknownExerciseIdError: Every attempt referenced unknown exercise IDs
        ValidationFailedError: max_attempts is less than 1
    """
    if not exercises or len(exercises) < MIN_CANDIDATE_EXERCISES:
        raise NotEnoughExercisesError(
            "Not enough exercises provided",
            details={"required": MIN_CANDIDATE_EXERCISES, "provided": len(exercises or [])},
        )

    attempts = settings.week_generation_max_attempts if max_attempts is None else max_attempts
    if attempts < 1:
        raise ValidationFailedError("max_attempts must be at least 1", details={"max_attempts": attempts})

    client = client or CompletionClient()
    user_prompt = build_week_prompt(week_number, exercises, preferences)

    logger.info(
        "[WEEK_GEN] Generating week",
        week_number=week_number,
        week_type=classify_week(week_number).value,
        candidate_count=len(exercises),
        days_per_week=preferences.days_per_week,
    )

    for attempt in range(1, attempts + 1):
        result = await client.complete_json(SYSTEM_PROMPT, user_prompt)
        logger.info(
            "[WEEK_GEN] Token usage",
            attempt=attempt,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
            total_tokens=result.total_tokens,
            finish_reason=result.finish_reason,
            response_length=len(result.content),
        )

        week = parse_week_response(result, week_number)
        try:
            validate_exercise_ids(week, exercises)
        except UnknownExerciseIdError as e:
            logger.warning(
                "[WEEK_GEN] Model returned unknown exercise IDs",
                attempt=attempt,
                max_attempts=attempts,
                unknown_ids=e.unknown_ids,
            )
            if attempt == attempts:
                raise
            continue

        logger.info(
            "[WEEK_GEN] Week generated successfully",
            week_number=week_number,
            workout_count=len(week.workouts),
            attempt=attempt,
        )
        return week
