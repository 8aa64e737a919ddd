"""Prompts for single-week workout generation.

One request per progression week keeps latency to a few seconds instead of
generating the whole mesocycle at once.
"""

from __future__ import annotations

from vlife.planning.schemas import ExerciseCandidate, WeekPreferences, WeekType

SYSTEM_PROMPT = (
    "You are a fitness coach. Create workout plans in ultra-compact JSON. "
    'Use 2-3 word notes ONLY (e.g. "Chest up", "Control tempo"). '
    "No verbose descriptions. Respond ONLY with valid JSON."
)

_INTENSITY_BY_WEEK_TYPE = {
    WeekType.BASELINE: "moderate",
    WeekType.DELOAD: "light",
    WeekType.BUILD: "high",
}


def classify_week(week_number: int) -> WeekType:
    """Week 1 establishes the baseline, week 4 deloads, everything between builds."""
    if week_number == 1:
        return WeekType.BASELINE
    if week_number == 4:
        return WeekType.DELOAD
    return WeekType.BUILD


def intensity_for(week_type: WeekType) -> str:
    return _INTENSITY_BY_WEEK_TYPE[week_type]


def format_exercise_list(exercises: list[ExerciseCandidate]) -> str:
    lines = []
    for exercise in exercises:
        muscles = ", ".join(exercise.primary_muscles) if exercise.primary_muscles else "full body"
        lines.append(f"ID: {exercise.id} | {exercise.name} ({exercise.category}) - {muscles}")
    return "\n".join(lines)


def build_week_prompt(
    week_number: int,
    exercises: list[ExerciseCandidate],
    preferences: WeekPreferences,
) -> str:
    """Build the user prompt for one progression week.

    Args:
        week_number: Progression week (1-4)
        exercises: Candidate exercises; the model must use their IDs verbatim
        preferences: Training style, days per week, session length, exercises per workout

    Returns:
        Prompt string ending with the expected JSON shape
    """
    week_type = classify_week(week_number)
    days = preferences.days_per_week
    duration = preferences.session_duration

    return f"""Create {days} workouts for Week {week_number} ({week_type.value}).

**Training Style:** {preferences.training_style}

**Available Exercises:**
{format_exercise_list(exercises)}

**Requirements:**
- {days} workouts
- {duration} min per workout
- {preferences.exercises_per_workout}+ exercises per workout
- Use EXACT UUIDs from list above
- Week {week_number} intensity: {intensity_for(week_type)}
- CRITICAL: Keep "notes" to 2-3 words MAX (e.g. "Chest up" or "Control tempo")

**Output JSON:**
{{
  "weekNumber": {week_number},
  "weekType": "{week_type.value}",
  "workouts": [
    {{
      "dayOfWeek": 1,
      "workoutName": "Upper Body",
      "focusAreas": ["chest", "back"],
      "estimatedDuration": {duration},
      "exercises": [
        {{
          "exerciseId": "UUID-FROM-LIST",
          "exerciseName": "Exercise Name",
          "exerciseOrder": 1,
          "sets": 3,
          "repsMin": 8,
          "repsMax": 12,
          "restSeconds": 90,
          "tempo": "3-0-1-1",
          "rpe": 7,
          "notes": "brief cue"
        }}
      ]
    }}
  ]
}}

Generate {days} complete workouts. Respond with ONLY valid JSON."""
