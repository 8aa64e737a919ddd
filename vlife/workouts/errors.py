"""Domain errors for workout sessions."""

from vlife.core.errors import NotFoundError, StateConflictError, ValidationFailedError


class PlannedWorkoutNotFoundError(NotFoundError):
    def __init__(self, workout_id: str):
        self.workout_id = workout_id
        super().__init__("Planned workout not found")


class WorkoutLogNotFoundError(NotFoundError):
    def __init__(self, workout_log_id: str):
        self.workout_log_id = workout_log_id
        super().__init__("Workout log not found")


class WorkoutAlreadyCompletedError(StateConflictError):
    def __init__(self, workout_log_id: str):
        self.workout_log_id = workout_log_id
        super().__init__("Workout already completed")


class WorkoutNotInProgressError(StateConflictError):
    def __init__(self, workout_log_id: str, status: str):
        self.workout_log_id = workout_log_id
        self.status = status
        super().__init__("Workout is not in progress")


class InvalidExerciseLogError(ValidationFailedError):
    """Raised when type-specific exercise data is missing."""
