"""Domain-specific errors for AI week generation."""

from vlife.core.errors import DependencyNotConfiguredError, UpstreamError, ValidationFailedError


class NotEnoughExercisesError(ValidationFailedError):
    """Raised before any model call when fewer than the minimum candidates are supplied."""


class WeekGenerationError(UpstreamError):
    """Base class for failures after the completion request was sent."""


class CompletionFailedError(WeekGenerationError):
    """Raised when the completion provider call itself fails."""


class WeekParseError(WeekGenerationError):
    """Raised when the completion text is not valid JSON or not a week."""


class UnknownExerciseIdError(WeekGenerationError):
    """Raised when the model returns exercise IDs outside the candidate list.

    Attributes:
        unknown_ids: Offending IDs in the order they appeared
    """

    def __init__(self, unknown_ids: list[str]):
        self.unknown_ids = unknown_ids
        super().__init__(
            f"Generated week references {len(unknown_ids)} exercise(s) not in the candidate list",
            details={"unknownExerciseIds": unknown_ids},
        )


class LLMNotConfiguredError(DependencyNotConfiguredError):
    """Raised when no completion API key is configured."""
