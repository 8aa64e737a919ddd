import pytest
from pydantic import ValidationError

from vlife.workouts import session_service
from vlife.workouts.errors import InvalidExerciseLogError, WorkoutLogNotFoundError, WorkoutNotInProgressError
from vlife.workouts.schemas import ExerciseLogRequest


@pytest.fixture
def active_log(db_session, first_workout, user_id):
    result = session_service.start_workout(db_session, user_id, first_workout.id)
    db_session.commit()
    return result.workout_log


def _request(active_log, user_id, exercise_id, exercise_type, **fields):
    return ExerciseLogRequest(
        user_id=user_id,
        workout_log_id=active_log.id,
        exercise_id=exercise_id,
        exercise_type=exercise_type,
        **fields,
    )


def test_strength_log_stores_sets_and_aggregates(db_session, active_log, first_workout, user_id):
    plan_exercise = first_workout.exercises[0]
    request = _request(
        active_log,
        user_id,
        plan_exercise.exercise_id,
        "strength",
        plan_exercise_id=plan_exercise.id,
        sets=[{"reps": 10, "weight": 100, "rpe": 6}, {"reps": 10, "weight": 110, "rpe": 8}],
    )

    exercise_log = session_service.log_exercise(db_session, request)

    assert exercise_log.sets_planned == 3
    assert exercise_log.sets_completed == 2
    assert exercise_log.total_reps == 20
    assert exercise_log.total_volume_lbs == 2100
    assert exercise_log.max_weight_lbs == 110
    assert exercise_log.avg_rpe == 7
    assert exercise_log.set_data[0] == {"reps": 10, "weight": 100, "rpe": 6, "completed": True}


def test_strength_log_requires_sets(db_session, active_log, library, user_id):
    with pytest.raises(InvalidExerciseLogError) as exc_info:
        session_service.log_exercise(db_session, _request(active_log, user_id, library[0].id, "strength"))

    assert exc_info.value.status_code == 400
    assert "Sets data is required" in exc_info.value.message


def test_cardio_log_requires_duration(db_session, active_log, library, user_id):
    with pytest.raises(InvalidExerciseLogError, match="Duration is required for cardio"):
        session_service.log_exercise(db_session, _request(active_log, user_id, library[0].id, "cardio", distance_miles=2.0))


def test_cardio_log_records_metrics(db_session, active_log, library, user_id):
    request = _request(
        active_log,
        user_id,
        library[0].id,
        "cardio",
        duration_seconds=1800,
        distance_miles=3.1,
        avg_heart_rate=150,
        perceived_exertion=6,
    )

    exercise_log = session_service.log_exercise(db_session, request)

    assert exercise_log.duration_seconds == 1800
    assert exercise_log.distance_miles == 3.1
    assert exercise_log.avg_rpe == 6


def test_swimming_requires_stroke_and_laps(db_session, active_log, library, user_id):
    with pytest.raises(InvalidExerciseLogError, match="Swim stroke and laps completed are required"):
        session_service.log_exercise(db_session, _request(active_log, user_id, library[0].id, "swimming", laps_completed=20))


def test_swimming_distance_derived_from_pool_length(db_session, active_log, library, user_id):
    request = _request(
        active_log,
        user_id,
        library[0].id,
        "swimming",
        swim_stroke="freestyle",
        laps_completed=64,
        pool_length_meters=25,
    )

    exercise_log = session_service.log_exercise(db_session, request)

    assert exercise_log.pool_length_meters == 25
    assert exercise_log.distance_miles == pytest.approx(64 * 25 / 1609.34)


def test_swimming_defaults_pool_length_without_distance(db_session, active_log, library, user_id):
    request = _request(active_log, user_id, library[0].id, "swimming", swim_stroke="breaststroke", laps_completed=10)

    exercise_log = session_service.log_exercise(db_session, request)

    assert exercise_log.pool_length_meters == 25
    assert exercise_log.distance_miles is None


def test_flexibility_requires_duration(db_session, active_log, library, user_id):
    with pytest.raises(InvalidExerciseLogError, match="Duration is required for flexibility"):
        session_service.log_exercise(db_session, _request(active_log, user_id, library[0].id, "flexibility"))


def test_sports_log_needs_no_type_fields(db_session, active_log, library, user_id):
    exercise_log = session_service.log_exercise(
        db_session,
        _request(active_log, user_id, library[0].id, "sports", notes="Pickup basketball"),
    )

    assert exercise_log.id is not None
    assert exercise_log.notes == "Pickup basketball"


def test_log_into_completed_workout_is_rejected(db_session, active_log, library, user_id):
    session_service.complete_workout(db_session, user_id, active_log.id)
    db_session.commit()

    with pytest.raises(WorkoutNotInProgressError) as exc_info:
        session_service.log_exercise(
            db_session,
            _request(active_log, user_id, library[0].id, "strength", sets=[{"reps": 5, "weight": 100}]),
        )

    assert exc_info.value.status_code == 400


def test_log_for_other_user_is_not_found(db_session, active_log, library):
    with pytest.raises(WorkoutLogNotFoundError):
        session_service.log_exercise(
            db_session,
            _request(active_log, "someone-else", library[0].id, "strength", sets=[{"reps": 5, "weight": 100}]),
        )


def test_set_entry_rejects_non_positive_reps(active_log, library, user_id):
    with pytest.raises(ValidationError):
        _request(active_log, user_id, library[0].id, "strength", sets=[{"reps": 0, "weight": 100}])
