"""Serializers that turn workout rows into camelCase JSON dicts for the app."""

from __future__ import annotations

from datetime import date, datetime

from vlife.db.models import ExerciseLibrary, ExerciseLog, ExercisePRHistory, PlanExercise, PlanWorkout, UserWorkoutPlan, WorkoutLog
from vlife.utils.timezone import to_utc

PR_METRIC_LABELS = {
    "max_weight": "Max Weight",
    "max_reps": "Max Reps",
    "max_volume": "Max Volume",
}


def _iso(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value).isoformat()
    return value.isoformat()


def serialize_library_exercise(exercise: ExerciseLibrary | None) -> dict | None:
    if exercise is None:
        return None
    return {
        "id": exercise.id,
        "name": exercise.name,
        "category": exercise.category,
        "exerciseType": exercise.exercise_type,
        "equipment": list(exercise.equipment or []),
        "difficulty": exercise.difficulty,
        "targetMuscles": list(exercise.target_muscles or []),
        "instructions": exercise.instructions,
        "videoUrl": exercise.video_url,
    }


def serialize_plan_exercise(plan_exercise: PlanExercise) -> dict:
    return {
        "id": plan_exercise.id,
        "exerciseId": plan_exercise.exercise_id,
        "exerciseOrder": plan_exercise.exercise_order,
        "sets": plan_exercise.sets,
        "repsMin": plan_exercise.reps_min,
        "repsMax": plan_exercise.reps_max,
        "restSeconds": plan_exercise.rest_seconds,
        "tempo": plan_exercise.tempo,
        "rpe": plan_exercise.rpe,
        "notes": plan_exercise.notes,
        "exercise": serialize_library_exercise(plan_exercise.exercise),
    }


def serialize_planned_workout(workout: PlanWorkout) -> dict:
    return {
        "id": workout.id,
        "planId": workout.plan_id,
        "weekNumber": workout.week_number,
        "dayOfWeek": workout.day_of_week,
        "workoutName": workout.workout_name,
        "workoutType": workout.workout_type,
        "targetMuscles": list(workout.target_muscles or []),
        "estimatedDurationMinutes": workout.estimated_duration_minutes,
        "isCompleted": workout.is_completed,
        "completedDate": _iso(workout.completed_date),
        "actualDurationMinutes": workout.actual_duration_minutes,
        "exercises": [serialize_plan_exercise(e) for e in workout.exercises],
    }


def serialize_plan_header(plan: UserWorkoutPlan) -> dict:
    return {
        "id": plan.id,
        "name": plan.plan_name,
        "type": plan.plan_type,
        "startDate": _iso(plan.start_date),
        "endDate": _iso(plan.end_date),
        "daysPerWeek": plan.days_per_week,
        "splitPattern": plan.split_pattern,
        "status": plan.status,
        "rationale": plan.plan_rationale,
    }


def serialize_exercise_log(exercise_log: ExerciseLog) -> dict:
    library = exercise_log.exercise
    return {
        "id": exercise_log.id,
        "workoutLogId": exercise_log.workout_log_id,
        "exerciseId": exercise_log.exercise_id,
        "planExerciseId": exercise_log.plan_exercise_id,
        "exerciseName": library.name if library else "Exercise",
        "exerciseCategory": library.category if library else None,
        "exerciseType": exercise_log.exercise_type,
        "primaryMuscles": list(library.primary_muscles or []) if library else [],
        "equipment": list(library.equipment or []) if library else [],
        "difficulty": library.difficulty if library else None,
        "setsPlanned": exercise_log.sets_planned,
        "setsCompleted": exercise_log.sets_completed,
        "setData": list(exercise_log.set_data or []),
        "totalReps": exercise_log.total_reps,
        "totalVolumeLbs": exercise_log.total_volume_lbs,
        "avgWeightLbs": exercise_log.avg_weight_lbs,
        "maxWeightLbs": exercise_log.max_weight_lbs,
        "avgReps": exercise_log.avg_reps,
        "maxReps": exercise_log.max_reps,
        "avgRpe": exercise_log.avg_rpe,
        "distanceMiles": exercise_log.distance_miles,
        "durationSeconds": exercise_log.duration_seconds,
        "pacePerMileSeconds": exercise_log.pace_per_mile_seconds,
        "caloriesBurned": exercise_log.calories_burned,
        "avgHeartRate": exercise_log.avg_heart_rate,
        "swimStroke": exercise_log.swim_stroke,
        "lapsCompleted": exercise_log.laps_completed,
        "poolLengthMeters": exercise_log.pool_length_meters,
        "notes": exercise_log.notes,
        "formQuality": exercise_log.form_quality,
        "difficultyAdjustment": exercise_log.difficulty_adjustment,
        "perceivedExertion": exercise_log.perceived_exertion,
    }


def serialize_workout_log_summary(workout_log: WorkoutLog) -> dict:
    workout = workout_log.workout
    return {
        "id": workout_log.id,
        "workoutName": workout.workout_name if workout else "Workout",
        "completedAt": _iso(workout_log.completed_at),
        "duration": workout_log.actual_duration_minutes,
        "totalVolume": workout_log.total_volume_lbs,
        "averageRpe": workout_log.avg_rpe,
        "perceivedDifficulty": workout_log.perceived_difficulty,
        "exercisesCompleted": workout_log.exercises_completed,
        "targetMuscles": list(workout.target_muscles or []) if workout else [],
    }


def serialize_workout_log_detail(workout_log: WorkoutLog) -> dict:
    workout = workout_log.workout
    return {
        "id": workout_log.id,
        "workoutName": workout.workout_name if workout else "Workout",
        "workoutType": workout.workout_type if workout else None,
        "targetMuscles": list(workout.target_muscles or []) if workout else [],
        "workoutDate": _iso(workout_log.workout_date),
        "startedAt": _iso(workout_log.started_at),
        "completedAt": _iso(workout_log.completed_at),
        "duration": workout_log.actual_duration_minutes,
        "estimatedDuration": workout.estimated_duration_minutes if workout else None,
        # Performance
        "perceivedDifficulty": workout_log.perceived_difficulty,
        "energyLevel": workout_log.energy_level,
        "enjoymentRating": workout_log.enjoyment_rating,
        "averageRpe": workout_log.avg_rpe,
        # Completion
        "exercisesPlanned": workout_log.exercises_planned,
        "exercisesCompleted": workout_log.exercises_completed,
        # Volume
        "totalVolumeLbs": workout_log.total_volume_lbs,
        "totalReps": workout_log.total_reps,
        "totalSets": workout_log.total_sets,
        "completionStatus": workout_log.completion_status,
        "notes": workout_log.notes,
        "exercises": [serialize_exercise_log(e) for e in workout_log.exercise_logs],
    }


def serialize_personal_record(record: ExercisePRHistory) -> dict:
    library = record.exercise
    return {
        "id": record.id,
        "exerciseId": record.exercise_id,
        "exerciseName": library.name if library else "Exercise",
        "exerciseCategory": library.category if library else None,
        "prType": record.pr_type,
        "weight": record.weight_lbs,
        "reps": record.reps,
        "volume": record.volume_lbs,
        "achievedAt": _iso(record.achieved_at),
        "metric": PR_METRIC_LABELS.get(record.pr_type, record.pr_type),
    }
