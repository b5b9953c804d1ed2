"""
Parser Vocabulary

Read-only keyword tables shared by the classifier, line parser, fallback
generator and template assembler. Engines receive a Vocabulary at
construction so tests can swap in their own tables.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class EquipmentRule:
    """Maps exercise-name keywords to an equipment label."""
    keywords: Tuple[str, ...]
    equipment: str


@dataclass(frozen=True)
class Vocabulary:
    """Keyword tables used across the parsing pipeline."""

    # Substrings that mark a line as exercise content
    exercise_terms: Tuple[str, ...]

    # Multi-word names looked for by the last-resort keyword scan
    common_exercise_names: Tuple[str, ...]

    # Day-split keywords ("Upper Body", "Push Day", ...)
    workout_types: Tuple[str, ...]

    weekdays: Tuple[str, ...]

    # Tokens that mark a "name" as PDF metadata or markup rather than an exercise
    metadata_tokens: Tuple[str, ...]

    # Column header words that must never become an exercise name
    header_words: Tuple[str, ...]

    equipment_rules: Tuple[EquipmentRule, ...]
    default_equipment: str

    # Source-title keywords selecting a canned fallback program
    bench_intent: Tuple[str, ...]
    leg_intent: Tuple[str, ...]


DEFAULT_VOCABULARY = Vocabulary(
    exercise_terms=(
        "bench", "press", "squat", "deadlift", "row", "curl", "extension",
        "raise", "pull", "push", "dip", "lunge", "crunch", "plank", "fly", "lift",
    ),
    common_exercise_names=(
        "bench press", "squat", "deadlift", "overhead press", "pull up", "chin up",
        "barbell row", "dumbbell press", "incline press", "decline press",
        "shoulder press", "lat pulldown", "cable row", "bicep curl", "tricep extension",
        "leg press", "leg curl", "leg extension", "calf raise", "dips",
        "push up", "plank", "crunch", "lunge", "hip thrust",
    ),
    workout_types=(
        "upper body", "lower body", "full body", "upper", "lower", "push", "pull",
        "legs", "chest", "back", "arms", "shoulders",
    ),
    weekdays=(
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    ),
    metadata_tokens=(
        "http", "www.", ".com", "endstream", "endobj", "xmlns", "workouts/boost",
    ),
    header_words=(
        "exercise", "exercises", "sets", "reps", "rest", "day", "workout", "name", "time",
    ),
    equipment_rules=(
        EquipmentRule(keywords=("barbell", "deadlift", "squat"), equipment="Barbell"),
        EquipmentRule(keywords=("dumbbell", "db "), equipment="Dumbbells"),
        EquipmentRule(keywords=("bench", "press"), equipment="Bench"),
        EquipmentRule(keywords=("pull", "chin"), equipment="Pull-up Bar"),
        EquipmentRule(keywords=("cable", "machine", "lat "), equipment="Cable Machine"),
    ),
    default_equipment="General Equipment",
    bench_intent=("bench", "press"),
    leg_intent=("leg", "squat"),
)
