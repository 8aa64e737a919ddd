import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from vlife.core.errors import ValidationFailedError
from vlife.planning.errors import LLMNotConfiguredError, NotEnoughExercisesError, UnknownExerciseIdError, WeekParseError
from vlife.planning.generate_week import generate_week
from vlife.planning.prompts import SYSTEM_PROMPT
from vlife.planning.schemas import ExerciseCandidate, WeekPreferences
from vlife.services.llm.client import CompletionClient, CompletionResult

PREFERENCES = WeekPreferences(training_style="mixed", days_per_week=3, session_duration=45, exercises_per_workout=5)


def _candidates(count=6):
    return [ExerciseCandidate(id=f"ex-{i}", name=f"Exercise {i}", category="strength") for i in range(count)]


def _result(exercise_ids, week_number=1, finish_reason="stop"):
    content = json.dumps(
        {
            "weekNumber": week_number,
            "weekType": "baseline",
            "workouts": [
                {
                    "dayOfWeek": 1,
                    "workoutName": "Full Body",
                    "focusAreas": ["full body"],
                    "estimatedDuration": 45,
                    "exercises": [
                        {"exerciseId": exercise_id, "exerciseOrder": order, "sets": 3, "repsMin": 8, "repsMax": 12}
                        for order, exercise_id in enumerate(exercise_ids, start=1)
                    ],
                }
            ],
        }
    )
    return CompletionResult(content=content, finish_reason=finish_reason, prompt_tokens=900, completion_tokens=400, total_tokens=1300)


def _fake_client(*results):
    client = AsyncMock()
    client.complete_json = AsyncMock(side_effect=list(results))
    return client


@pytest.mark.asyncio
async def test_generate_week_returns_parsed_week():
    client = _fake_client(_result(["ex-0", "ex-1", "ex-2"]))

    week = await generate_week(1, _candidates(), PREFERENCES, client=client)

    assert week.week_number == 1
    assert week.exercise_ids() == ["ex-0", "ex-1", "ex-2"]
    client.complete_json.assert_awaited_once()
    system_prompt, user_prompt = client.complete_json.await_args.args
    assert system_prompt == SYSTEM_PROMPT
    assert "Week 1 (baseline)" in user_prompt


@pytest.mark.asyncio
async def test_fewer_than_five_candidates_fails_before_any_call():
    client = _fake_client()

    with pytest.raises(NotEnoughExercisesError) as exc_info:
        await generate_week(1, _candidates(4), PREFERENCES, client=client)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Not enough exercises provided"
    client.complete_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_ids_are_retried_once_then_accepted():
    client = _fake_client(_result(["ex-0", "invented-id"]), _result(["ex-0", "ex-5"]))

    week = await generate_week(1, _candidates(), PREFERENCES, client=client, max_attempts=2)

    assert week.exercise_ids() == ["ex-0", "ex-5"]
    assert client.complete_json.await_count == 2


@pytest.mark.asyncio
async def test_unknown_ids_on_every_attempt_raise():
    client = _fake_client(_result(["invented-1"]), _result(["invented-2"]))

    with pytest.raises(UnknownExerciseIdError) as exc_info:
        await generate_week(1, _candidates(), PREFERENCES, client=client, max_attempts=2)

    assert exc_info.value.unknown_ids == ["invented-2"]
    assert client.complete_json.await_count == 2



@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [0, -1])
async def test_attempts_below_one_are_rejected_before_any_call(max_attempts):
    client = _fake_client()

    with pytest.raises(ValidationFailedError, match="max_attempts must be at least 1"):
        await generate_week(1, _candidates(), PREFERENCES, client=client, max_attempts=max_attempts)

    client.complete_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_parse_failure_is_not_retried():
    client = _fake_client(CompletionResult(content='{"weekNumber": 1, "workouts": [', finish_reason="length"))

    with pytest.raises(WeekParseError, match="response was truncated"):
        await generate_week(1, _candidates(), PREFERENCES, client=client, max_attempts=3)

    assert client.complete_json.await_count == 1


@pytest.mark.asyncio
async def test_missing_api_key_raises_not_configured():
    client = CompletionClient(api_key="")

    with pytest.raises(LLMNotConfiguredError) as exc_info:
        await generate_week(1, _candidates(), PREFERENCES, client=client)

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_completion_client_requests_json_mode():
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=' {"ok": true} '), finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
    )
    fake_openai = MagicMock()
    fake_openai.chat.completions.create = AsyncMock(return_value=response)

    client = CompletionClient(api_key="sk-test", model="gpt-4o", temperature=0.7, max_tokens=6000)
    client._client = fake_openai

    result = await client.complete_json("system", "user")

    assert result.content == '{"ok": true}'
    assert result.finish_reason == "stop"
    assert result.total_tokens == 15
    kwargs = fake_openai.chat.completions.create.await_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 6000
    assert kwargs["messages"][0] == {"role": "system", "content": "system"}
