"""Chat-completion client used for JSON-mode generation.

Thin wrapper around the OpenAI SDK so callers get a plain result object
(content, finish reason, token usage) and tests can substitute any object
with a matching `complete_json` coroutine.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from vlife.config.settings import settings
from vlife.planning.errors import CompletionFailedError, LLMNotConfiguredError


@dataclass(frozen=True)
class CompletionResult:
    content: str
    finish_reason: str | None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"


class CompletionClient:
    """JSON-mode chat-completion client.

    Model, temperature and token ceiling are fixed per client instance and
    default to the configured week-generation values.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.temperature = temperature if temperature is not None else settings.week_generation_temperature
        self.max_tokens = max_tokens or settings.week_generation_max_tokens
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self.api_key:
            raise LLMNotConfiguredError("AI workout generation is not configured (OPENAI_API_KEY is not set)")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def complete_json(self, system_prompt: str, user_prompt: str) -> CompletionResult:
        """Send one chat completion requesting a JSON object response.

        Raises:
            LLMNotConfiguredError: No API key configured
            CompletionFailedError: The provider call failed
        """
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except OpenAIError as e:
            logger.error(f"[LLM] Completion request failed: {type(e).__name__}: {e}")
            raise CompletionFailedError(f"Completion request failed: {e}") from e

        choice = completion.choices[0]
        usage = completion.usage
        return CompletionResult(
            content=(choice.message.content or "").strip(),
            finish_reason=choice.finish_reason,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            total_tokens=usage.total_tokens if usage else None,
        )
