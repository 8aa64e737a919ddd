"""Base error types shared by all V-Life domains.

Every domain error maps onto one HTTP status so the API layer can render
it without knowing the domain:

- ValidationFailedError: 400, malformed or missing request fields
- StateConflictError: 400, operation not allowed in the current state
- UnauthorizedError: 401
- NotFoundError: 404
- UpstreamError: 500, database or provider failure
- DependencyNotConfiguredError: 503, missing API key or provider config
"""

from __future__ import annotations

from typing import Any


class VLifeError(Exception):
    """Base exception for all V-Life domain errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationFailedError(VLifeError):
    status_code = 400


class StateConflictError(VLifeError):
    status_code = 400


class UnauthorizedError(VLifeError):
    status_code = 401


class NotFoundError(VLifeError):
    status_code = 404


class UpstreamError(VLifeError):
    status_code = 500


class DependencyNotConfiguredError(VLifeError):
    status_code = 503
