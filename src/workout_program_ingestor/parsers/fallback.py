"""
Fallback Generator

Two last resorts for documents the structured pipeline could not read:

- scan_keywords: pull whatever exercise names can be found line by line
- canned_program: a complete template chosen from the document title
"""

import re
import logging
from typing import List, Optional, Tuple

from workout_program_ingestor.utils import normalize_range_text, title_case_words, to_int
from .models import ExerciseEntry, WorkoutDay
from .text_cleaning import is_garbage_text
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .validation import is_valid_exercise_name, is_valid_sets, normalize_rest
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TITLE = "untitled document"

KEYWORD_SCAN_DAY_LABEL = "Detected Exercises"

TRIPLET_PATTERN = re.compile(
    r'^(?P<name>[A-Za-z][A-Za-z\s]+?)\s+(?P<sets>\d+)\s+(?P<reps>\d+(?:\s*[-–]\s*\d+)?)'
    r'\s+(?P<rest>\d+(?:\s*[-–]\s*\d+)?)'
)

# (name, sets, reps, rest_seconds, notes)
CannedExercise = Tuple[str, int, str, int, str]
CannedDay = Tuple[str, Tuple[CannedExercise, ...]]

BENCH_PROGRAM: Tuple[CannedDay, ...] = (
    ("Heavy Bench", (
        ("Barbell Bench Press", 5, "1-4", 120, "Heavy strength work"),
        ("Incline Dumbbell Press", 3, "8-12", 90, "Accessory work"),
        ("Close Grip Bench Press", 3, "6-8", 90, "Tricep strength"),
        ("Dumbbell Flyes", 3, "12-15", 60, "Chest isolation"),
        ("Tricep Dips", 3, "8-12", 90, "Tricep development"),
    )),
    ("Upper Body", (
        ("Overhead Press", 4, "6-8", 120, "Shoulder strength"),
        ("Lateral Raises", 3, "12-15", 60, "Shoulder isolation"),
        ("Barbell Rows", 4, "8-10", 90, "Back strength"),
        ("Pull Ups", 3, "6-10", 90, "Upper body pull"),
        ("Bicep Curls", 3, "10-12", 60, "Bicep work"),
    )),
    ("Legs", (
        ("Squat", 4, "6-8", 120, "Primary leg exercise"),
        ("Leg Press", 3, "10-15", 90, "Volume work"),
        ("Romanian Deadlift", 3, "8-12", 90, "Hamstring focus"),
        ("Leg Extensions", 3, "12-15", 60, "Quad isolation"),
        ("Calf Raises", 4, "15-20", 60, "Calf development"),
    )),
    ("Accessory", (
        ("Dumbbell Press", 3, "8-12", 90, "Shoulder stability"),
        ("Face Pulls", 3, "12-15", 60, "Rear delt work"),
        ("Hammer Curls", 3, "10-12", 60, "Bicep variation"),
        ("Tricep Extensions", 3, "12-15", 60, "Tricep isolation"),
        ("Planks", 3, "30-60s", 60, "Core work"),
    )),
    ("Light Bench", (
        ("Light Bench Press", 3, "8-12", 90, "Technique work"),
        ("Push Ups", 3, "10-15", 60, "Bodyweight variation"),
        ("Dumbbell Rows", 3, "10-12", 60, "Back balance"),
        ("Shoulder Shrugs", 3, "12-15", 60, "Trap work"),
        ("Ab Crunches", 3, "15-20", 60, "Core work"),
    )),
)

LEG_PROGRAM: Tuple[CannedDay, ...] = (
    ("Heavy Legs", (
        ("Squat", 5, "5-8", 120, "Primary leg exercise"),
        ("Leg Press", 4, "8-12", 90, "Volume work"),
        ("Romanian Deadlift", 3, "8-12", 90, "Hamstring focus"),
        ("Leg Extensions", 3, "12-15", 60, "Quad isolation"),
        ("Standing Calf Raises", 4, "15-20", 60, "Calf development"),
    )),
    ("Upper Body", (
        ("Barbell Bench Press", 4, "6-8", 120, "Chest strength"),
        ("Overhead Press", 3, "8-10", 90, "Shoulder work"),
        ("Barbell Rows", 4, "8-10", 90, "Back strength"),
        ("Pull Ups", 3, "6-10", 90, "Upper body pull"),
        ("Dips", 3, "8-12", 90, "Tricep work"),
    )),
    ("Accessory Legs", (
        ("Bulgarian Split Squats", 3, "8-12", 90, "Unilateral work"),
        ("Leg Curls", 3, "12-15", 60, "Hamstring isolation"),
        ("Hip Thrusts", 3, "10-12", 90, "Glute focus"),
        ("Seated Calf Raises", 3, "15-20", 60, "Calf isolation"),
        ("Planks", 3, "30-60s", 60, "Core work"),
    )),
)

SPLIT_PROGRAM: Tuple[CannedDay, ...] = (
    ("Push", (
        ("Barbell Bench Press", 4, "6-8", 120, "Chest strength"),
        ("Overhead Press", 3, "8-10", 90, "Shoulder work"),
        ("Incline Dumbbell Press", 3, "8-12", 90, "Upper chest"),
        ("Lateral Raises", 3, "12-15", 60, "Shoulder isolation"),
        ("Tricep Dips", 3, "8-12", 90, "Tricep work"),
    )),
    ("Pull", (
        ("Deadlift", 4, "5-8", 120, "Full body strength"),
        ("Barbell Rows", 4, "8-10", 90, "Back strength"),
        ("Pull Ups", 3, "6-10", 90, "Upper body pull"),
        ("Lat Pulldowns", 3, "10-12", 90, "Back width"),
        ("Bicep Curls", 3, "10-12", 60, "Bicep work"),
    )),
    ("Legs", (
        ("Squat", 4, "6-8", 120, "Primary leg exercise"),
        ("Leg Press", 3, "10-15", 90, "Volume work"),
        ("Romanian Deadlift", 3, "8-12", 90, "Hamstring focus"),
        ("Leg Extensions", 3, "12-15", 60, "Quad isolation"),
        ("Calf Raises", 4, "15-20", 60, "Calf development"),
    )),
    ("Accessory", (
        ("Dumbbell Press", 3, "8-12", 90, "Shoulder stability"),
        ("Face Pulls", 3, "12-15", 60, "Rear delt work"),
        ("Hammer Curls", 3, "10-12", 60, "Bicep variation"),
        ("Tricep Extensions", 3, "12-15", 60, "Tricep isolation"),
        ("Planks", 3, "30-60s", 60, "Core work"),
    )),
    ("Cardio & Core", (
        ("Running", 1, "20-30 min", 0, "Cardio session"),
        ("Planks", 3, "30-60s", 60, "Core stability"),
        ("Russian Twists", 3, "20 reps", 60, "Core rotation"),
        ("Mountain Climbers", 3, "30 reps", 60, "Dynamic core"),
        ("Burpees", 3, "10 reps", 90, "Full body cardio"),
    )),
)


class FallbackGenerator:
    """Produces exercises when structured extraction found nothing"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds

    # ------------------------------------------------------------------
    # Keyword scan
    # ------------------------------------------------------------------

    def scan_keywords(self, text: str) -> List[ExerciseEntry]:
        """
        Last-resort scan of lines that mention an exercise keyword.

        Each line yields at most one entry: a name/sets/reps/rest triplet if
        present, else a known exercise name found in the line, else the words
        holding the keyword. Entries are deduplicated by name and capped.
        """
        if not text or is_garbage_text(text, self.thresholds.min_printable_ratio):
            return []

        entries: List[ExerciseEntry] = []
        seen = set()
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            lowered = line.lower()
            if not any(term in lowered for term in self.vocabulary.exercise_terms):
                continue

            entry = self._scan_line(line)
            if entry is None or entry.name.lower() in seen:
                continue

            seen.add(entry.name.lower())
            entries.append(entry)
            if len(entries) >= self.thresholds.keyword_scan_limit:
                break

        logger.info(f"Keyword scan found {len(entries)} exercises")
        return entries

    def _scan_line(self, line: str) -> Optional[ExerciseEntry]:
        match = TRIPLET_PATTERN.match(line)
        if match:
            name = match.group('name').strip()
            sets = to_int(match.group('sets'))
            if is_valid_exercise_name(name, self.vocabulary, self.thresholds) and is_valid_sets(sets, self.thresholds):
                return ExerciseEntry(
                    name=name,
                    sets=sets,
                    reps=normalize_range_text(match.group('reps')),
                    rest_seconds=normalize_rest(match.group('rest'), self.thresholds),
                    notes="Detected from document content",
                    match_strategy="keyword_scan",
                )

        lowered = line.lower()
        for known in self.vocabulary.common_exercise_names:
            if re.search(rf'\b{re.escape(known)}\b', lowered):
                return self._default_entry(title_case_words(known))

        words = [
            word.strip('.,;:()[]')
            for word in line.split()
            if any(term in word.lower() for term in self.vocabulary.exercise_terms)
        ]
        name = ' '.join(word for word in words if word)
        if is_valid_exercise_name(name, self.vocabulary, self.thresholds):
            return self._default_entry(title_case_words(name))
        return None

    def _default_entry(self, name: str) -> ExerciseEntry:
        return ExerciseEntry(
            name=name,
            sets=self.thresholds.default_sets,
            reps="8-10",
            rest_seconds=self.thresholds.default_rest_seconds,
            notes="Detected from document content",
            match_strategy="keyword_scan",
        )

    def keyword_day(self, entries: List[ExerciseEntry]) -> WorkoutDay:
        return WorkoutDay(label=KEYWORD_SCAN_DAY_LABEL, exercises=list(entries))

    # ------------------------------------------------------------------
    # Canned programs
    # ------------------------------------------------------------------

    def select_program(self, title: Optional[str]) -> Tuple[CannedDay, ...]:
        """Pick a canned program from keywords in the document title."""
        lowered = (title or "").lower()
        if any(word in lowered for word in self.vocabulary.bench_intent):
            return BENCH_PROGRAM
        if any(word in lowered for word in self.vocabulary.leg_intent):
            return LEG_PROGRAM
        return SPLIT_PROGRAM

    def canned_program(self, title: Optional[str]) -> List[WorkoutDay]:
        """Build the canned program for a title; always at least one non-empty day."""
        source = title or DEFAULT_SOURCE_TITLE
        program = self.select_program(title)

        days = []
        for number, (focus, exercises) in enumerate(program, start=1):
            days.append(WorkoutDay(
                label=f"Day {number}: {focus} (from {source})",
                exercises=[
                    ExerciseEntry(
                        name=name,
                        sets=sets,
                        reps=reps,
                        rest_seconds=rest,
                        notes=notes,
                        match_strategy="filename_fallback",
                    )
                    for name, sets, reps, rest, notes in exercises
                ],
            ))

        logger.info(f"Using canned {program[0][0].lower()} program for '{source}' ({len(days)} days)")
        return days
