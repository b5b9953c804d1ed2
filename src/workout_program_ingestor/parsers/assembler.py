"""
Template Assembler

Builds the final WorkoutTemplate from extracted days: naming, equipment and
metadata inference, and deterministic ids for the template, every day and
every exercise.
"""

import re
import uuid
import logging
from typing import Iterable, List, Optional

from workout_program_ingestor.utils import title_case_words
from .fallback import DEFAULT_SOURCE_TITLE
from .models import (
    ProgressionWeek,
    TemplateDay,
    TemplateExercise,
    WorkoutDay,
    WorkoutTemplate,
)
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_NAME = "Imported Workout Program"
ID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "workout-program-ingestor")

FILE_EXTENSION = re.compile(r'\.[A-Za-z0-9]{1,5}$')
DURATION_PATTERN = re.compile(r'(\d+)\s*-?\s*weeks?\b', re.IGNORECASE)
INSTRUCTION_PATTERN = re.compile(r'^\s*(?:instructions?|notes?|important|tips?)\s*:\s*(.+)$', re.IGNORECASE)
PROGRESSION_PATTERN = re.compile(r'\bweek\s*(\d+)\b.*?(\d+(?:\.\d+)?)\s*%', re.IGNORECASE)

MIN_INSTRUCTION_LENGTH = 10
DEFAULT_DURATION_WEEKS = 8
DEFAULT_ESTIMATED_MINUTES = 60


def _slug(value: str) -> str:
    return re.sub(r'[\s/]+', '-', value.strip().lower())


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def program_name_from_title(title: Optional[str]) -> str:
    """'bench_program-v2.pdf' -> 'Bench Program V2'"""
    if not title or not title.strip():
        return DEFAULT_PROGRAM_NAME
    name = FILE_EXTENSION.sub('', title.strip())
    name = re.sub(r'[_-]', ' ', name)
    name = ' '.join(name.split())
    return title_case_words(name) if name else DEFAULT_PROGRAM_NAME


def infer_difficulty(text: str) -> str:
    lowered = text.lower()
    if 'beginner' in lowered:
        return 'beginner'
    if 'advanced' in lowered:
        return 'advanced'
    return 'intermediate'


def infer_goals(text: str) -> List[str]:
    lowered = text.lower()
    goals = []
    if 'strength' in lowered:
        goals.append('Strength')
    if 'muscle' in lowered or 'hypertrophy' in lowered:
        goals.append('Muscle Gain')
    if 'weight loss' in lowered or 'fat loss' in lowered:
        goals.append('Weight Loss')
    if 'endurance' in lowered:
        goals.append('Endurance')
    return goals or ['General Fitness']


def infer_program_type(text: str) -> str:
    lowered = text.lower()
    if 'push' in lowered and 'pull' in lowered:
        return 'PPL'
    if 'upper' in lowered and 'lower' in lowered:
        return 'Upper/Lower'
    if 'full body' in lowered:
        return 'Full Body'
    return 'Custom'


def infer_duration_weeks(text: str) -> int:
    for match in DURATION_PATTERN.finditer(text):
        weeks = int(match.group(1))
        if 1 <= weeks <= 52:
            return weeks
    return DEFAULT_DURATION_WEEKS


def extract_instructions(text: str) -> List[str]:
    instructions = []
    for line in text.split('\n'):
        match = INSTRUCTION_PATTERN.match(line)
        if match:
            instruction = match.group(1).strip()
            if len(instruction) >= MIN_INSTRUCTION_LENGTH:
                instructions.append(instruction)
    return _dedupe(instructions)


def extract_progression(text: str) -> List[ProgressionWeek]:
    """Collect "Week N ... NN%" rows, first occurrence per week wins."""
    weeks = {}
    for line in text.split('\n'):
        match = PROGRESSION_PATTERN.search(line)
        if not match:
            continue
        week = int(match.group(1))
        percentage = int(float(match.group(2)))
        if week >= 1 and 1 <= percentage <= 200 and week not in weeks:
            weeks[week] = ProgressionWeek(week=week, percentage=percentage)
    return list(weeks.values())


class TemplateAssembler:
    """Turns extracted days into a WorkoutTemplate"""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def infer_equipment(self, days: List[WorkoutDay]) -> List[str]:
        equipment = []
        for day in days:
            for exercise in day.exercises:
                name = exercise.name.lower()
                for rule in self.vocabulary.equipment_rules:
                    if rule.equipment not in equipment and any(k in name for k in rule.keywords):
                        equipment.append(rule.equipment)
        return equipment or [self.vocabulary.default_equipment]

    def assemble(
        self,
        days: List[WorkoutDay],
        title: Optional[str],
        text: str,
        fallback: bool = False,
    ) -> WorkoutTemplate:
        """
        Build the template for the given days.

        Days without exercises are dropped. Ids are UUIDv5 values derived
        from the title, the text and each item's position, so the same input
        always produces the same template.
        """
        kept = [day for day in days if day.exercises]
        if not kept:
            raise ValueError("Cannot assemble a template without exercises")

        text = text or ""
        source = title or DEFAULT_SOURCE_TITLE
        template_id = uuid.uuid5(ID_NAMESPACE, f"{title or ''}\x00{text}")

        schedule = []
        for day_number, day in enumerate(kept, start=1):
            day_key = f"day:{day_number}:{day.label}"
            schedule.append(TemplateDay(
                id=str(uuid.uuid5(template_id, day_key)),
                day_number=day_number,
                label=day.label,
                is_optional=day.is_optional,
                notes=day.notes,
                exercises=[
                    TemplateExercise(
                        id=str(uuid.uuid5(template_id, f"{day_key}:exercise:{position}:{exercise.name}")),
                        name=exercise.name,
                        sets=exercise.sets,
                        reps=exercise.reps,
                        rest_seconds=exercise.rest_seconds,
                        notes=exercise.notes,
                        match_strategy=exercise.match_strategy,
                    )
                    for position, exercise in enumerate(day.exercises, start=1)
                ],
            ))

        total_exercises = sum(len(day.exercises) for day in kept)
        haystack = '\n'.join([text] + [day.label for day in kept])

        difficulty = infer_difficulty(haystack)
        goals = infer_goals(haystack)
        program_type = infer_program_type(haystack)
        equipment = self.infer_equipment(kept)
        progression = extract_progression(text)

        tags = [f"{len(kept)}-day", difficulty]
        tags += [_slug(goal) for goal in goals]
        tags += [_slug(item) for item in equipment]
        tags.append(_slug(program_type))
        if progression:
            tags.append('progression')
        if fallback:
            tags.append('fallback')
        tags.append('imported')

        template = WorkoutTemplate(
            id=str(template_id),
            name=program_name_from_title(title),
            description=f"Imported from {source} - {len(kept)} day program with {total_exercises} exercises",
            source_title=title,
            difficulty=difficulty,
            program_type=program_type,
            goals=goals,
            equipment=equipment,
            duration_weeks=infer_duration_weeks(text),
            days_per_week=len(kept),
            estimated_minutes=DEFAULT_ESTIMATED_MINUTES,
            tags=_dedupe(tags),
            instructions=extract_instructions(text),
            progression=progression,
            schedule=schedule,
        )

        logger.info(f"Assembled template '{template.name}': {len(kept)} days, {total_exercises} exercises")
        return template
