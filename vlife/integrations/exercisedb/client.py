"""ExerciseDB API client (RapidAPI).

Looks up exercise demonstration data (GIF/video, instructions, muscles) by
name or ExerciseDB id. Successful lookups are cached in memory for at most
the configured TTL; misses are not cached.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from vlife.config.settings import settings
from vlife.core.errors import DependencyNotConfiguredError, UpstreamError
from vlife.integrations.exercisedb.cache import TTLCache

REQUEST_TIMEOUT_SECONDS = 10.0

exercise_cache = TTLCache(
    max_entries=settings.exercisedb_cache_max_entries,
    ttl_seconds=settings.exercisedb_cache_ttl_seconds,
)


class ExerciseDBNotConfiguredError(DependencyNotConfiguredError):
    def __init__(self) -> None:
        super().__init__("ExerciseDB API not configured")


def sweep_exercise_cache() -> int:
    """Scheduler job: drop expired entries from the shared cache."""
    removed = exercise_cache.sweep()
    logger.info("[EXERCISEDB] Cache sweep completed", removed=removed, remaining=len(exercise_cache))
    return removed


class ExerciseDBClient:
    """Client for the ExerciseDB v1 API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        host: str | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        """Initialize ExerciseDB client.

        Args:
            api_key: RapidAPI key. If not provided, reads from settings.
            base_url: API base URL. If not provided, reads from settings.
            host: RapidAPI host header. If not provided, reads from settings.
            cache: Response cache. Defaults to the process-wide cache.
        """
        self.api_key = (api_key if api_key is not None else settings.rapidapi_key).strip()
        self.base_url = (base_url or settings.exercisedb_base_url).rstrip("/")
        self.host = host or settings.exercisedb_host
        self.cache = cache if cache is not None else exercise_cache

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ExerciseDBNotConfiguredError()
        return {"x-rapidapi-host": self.host, "x-rapidapi-key": self.api_key}

    def _fetch(self, path: str, params: dict[str, Any] | None = None, *, not_found_ok: bool = False) -> dict | None:
        """GET one API path and return the first exercise, or None.

        Raises:
            ExerciseDBNotConfiguredError: No RapidAPI key
            UpstreamError: Non-success HTTP status other than 429 (and 404 when allowed)
        """
        headers = self._headers()
        url = f"{self.base_url}{path}"
        try:
            response = httpx.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
        except httpx.RequestError as e:
            logger.error(f"[EXERCISEDB] Request failed: {e}")
            raise UpstreamError("Failed to fetch exercise data") from e

        if response.status_code == 429:
            logger.warning("[EXERCISEDB] Rate limit exceeded", path=path)
            return None
        if response.status_code == 404 and not_found_ok:
            return None
        if response.status_code >= 400:
            logger.error("[EXERCISEDB] API error", path=path, status_code=response.status_code)
            raise UpstreamError(f"ExerciseDB API error: {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise UpstreamError("ExerciseDB returned invalid JSON") from e

        if not isinstance(result, dict) or not result.get("success") or not result.get("data"):
            return None
        return result["data"][0]

    def search_by_name(self, exercise_name: str) -> dict | None:
        """Best fuzzy match for an exercise name, or None."""
        cache_key = f"search:{exercise_name.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("[EXERCISEDB] Cache hit", key=cache_key)
            return cached

        exercise = self._fetch("/api/v1/exercises/search", params={"search": exercise_name, "limit": 1})
        if exercise is not None:
            self.cache.set(cache_key, exercise)
        return exercise

    def get_by_id(self, exercise_id: str) -> dict | None:
        """Exercise by ExerciseDB id, or None when unknown."""
        cache_key = f"id:{exercise_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("[EXERCISEDB] Cache hit", key=cache_key)
            return cached

        exercise = self._fetch(f"/api/v1/exercises/{exercise_id}", not_found_ok=True)
        if exercise is not None:
            self.cache.set(cache_key, exercise)
        return exercise
