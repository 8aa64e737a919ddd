import pytest

from vlife.core.errors import NotFoundError
from vlife.planning.repository import persist_generated_week, select_candidate_exercises
from vlife.planning.schemas import GeneratedWeek


def _week(exercise_id: str) -> GeneratedWeek:
    return GeneratedWeek.model_validate(
        {
            "weekNumber": 2,
            "weekType": "build",
            "workouts": [
                {
                    "dayOfWeek": 5,
                    "workoutName": "Pull",
                    "focusAreas": ["back", "biceps"],
                    "estimatedDuration": 40,
                    "exercises": [
                        {"exerciseId": exercise_id, "exerciseOrder": 1, "sets": 4, "repsMin": 6, "repsMax": 10, "tempo": "2-0-1-0", "rpe": 8},
                    ],
                }
            ],
        }
    )


def test_candidates_are_alphabetical_minus_exclusions(db_session, library):
    candidates = select_candidate_exercises(db_session, exclude_ids=[library[2].id])

    names = [c.name for c in candidates]
    assert names == sorted(names)
    assert "Back Squat" not in names
    assert len(candidates) == 4
    assert candidates[0].primary_muscles == ["back", "biceps"]


def test_candidates_respect_limit(db_session, library):
    assert len(select_candidate_exercises(db_session, limit=2)) == 2


def test_persist_generated_week(db_session, workout_plan, library, user_id):
    workouts = persist_generated_week(db_session, workout_plan.id, user_id, _week(library[1].id))

    assert len(workouts) == 1
    workout = workouts[0]
    assert workout.week_number == 2
    assert workout.day_of_week == 5
    assert workout.workout_type == "strength"
    assert workout.target_muscles == ["back", "biceps"]
    db_session.refresh(workout)
    assert workout.exercises[0].exercise_id == library[1].id
    assert workout.exercises[0].rpe == 8


def test_persist_into_another_users_plan_is_not_found(db_session, workout_plan, library):
    with pytest.raises(NotFoundError, match="Workout plan not found"):
        persist_generated_week(db_session, workout_plan.id, "intruder", _week(library[1].id))
