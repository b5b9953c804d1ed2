"""Unit tests for parser models."""
import pytest
from pydantic import ValidationError

from workout_program_ingestor.parsers.models import (
    DaySection,
    DocumentFormat,
    ExerciseEntry,
    ExtractionMethod,
    ExtractionResult,
    StructureSignal,
    WorkoutDay,
)


def make_entry(**overrides):
    data = dict(name="Bench Press", sets=3, reps="8-12", rest_seconds=90, match_strategy="compact")
    data.update(overrides)
    return ExerciseEntry(**data)


class TestExerciseEntry:

    def test_valid_entry(self):
        entry = make_entry()
        assert entry.sets == 3
        assert entry.notes == ""

    @pytest.mark.parametrize("sets", [0, 21])
    def test_sets_out_of_range_rejected(self, sets):
        with pytest.raises(ValidationError):
            make_entry(sets=sets)

    def test_negative_rest_rejected(self):
        with pytest.raises(ValidationError):
            make_entry(rest_seconds=-1)


class TestStructureSignal:

    def test_table_structure_flag(self):
        assert StructureSignal(format=DocumentFormat.TABLE).has_table_structure
        assert not StructureSignal(format=DocumentFormat.NUMBERED_LIST).has_table_structure

    def test_enum_values_serialized(self):
        signal = StructureSignal(format=DocumentFormat.TABLE, reason="table_header")
        assert signal.model_dump()["format"] == "table"


class TestDaySection:

    def test_text_joins_lines(self):
        section = DaySection(index=1, lines=["Day 1", "Squat 3x5"])
        assert section.text == "Day 1\nSquat 3x5"


class TestExtractionResult:

    def test_requires_a_day(self):
        with pytest.raises(ValidationError):
            ExtractionResult(
                days=[],
                format=DocumentFormat.TABLE,
                confidence=0.5,
                method=ExtractionMethod.TABLE,
            )

    def test_confidence_bounds(self):
        day = WorkoutDay(label="Day 1", exercises=[make_entry()])
        with pytest.raises(ValidationError):
            ExtractionResult(days=[day], format=DocumentFormat.TABLE, confidence=1.5, method=ExtractionMethod.TABLE)

    def test_total_exercises(self):
        day = WorkoutDay(label="Day 1", exercises=[make_entry(), make_entry(name="Squat")])
        result = ExtractionResult(days=[day, day], format=DocumentFormat.TABLE, confidence=0.5, method=ExtractionMethod.TABLE)
        assert result.total_exercises == 4
        assert result.method == "table"
