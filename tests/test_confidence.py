"""Tests for confidence scoring."""
import pytest

from workout_program_ingestor.parsers.confidence import ConfidenceScorer
from workout_program_ingestor.parsers.models import (
    DocumentFormat,
    ExerciseEntry,
    StructureSignal,
    WorkoutDay,
)
from workout_program_ingestor.parsers.thresholds import ParserThresholds


def _day(*names):
    return WorkoutDay(
        label="Day 1",
        exercises=[
            ExerciseEntry(name=name, sets=3, reps="10", match_strategy="compact")
            for name in names
        ],
    )


TABLE = StructureSignal(format=DocumentFormat.TABLE, reason="table_header")
PLAIN = StructureSignal(format=DocumentFormat.STRUCTURED_PATTERN, reason="sets_reps_pattern")


@pytest.fixture
def scorer():
    return ConfidenceScorer()


class TestConfidenceScorer:

    def test_table_program(self, scorer):
        day = _day("Bench Press", "Incline Press", "Cable Fly", "Squat", "Romanian Deadlift", "Leg Curl")
        assert scorer.score([day], TABLE) == pytest.approx(0.92)

    def test_without_table_bonus(self, scorer):
        assert scorer.score([_day("Bench Press", "Squat")], PLAIN) == pytest.approx(0.44)

    def test_invalid_names_earn_no_name_credit(self, scorer):
        assert scorer.score([_day("Sets", "Bench Press")], PLAIN) == pytest.approx(0.42)

    def test_caps_and_clamp(self, scorer):
        names = [f"Exercise Variation {chr(65 + i)}" for i in range(20)]
        assert scorer.score([_day(*names)], TABLE) == 1.0

    def test_no_exercises(self, scorer):
        assert scorer.score([], PLAIN) == pytest.approx(0.3)

    def test_counts_across_days(self, scorer):
        split = scorer.score([_day("Bench Press"), _day("Squat")], PLAIN)
        single = scorer.score([_day("Bench Press", "Squat")], PLAIN)
        assert split == single

    def test_fallback_cap(self, scorer):
        assert scorer.cap_for_fallback(0.9) == pytest.approx(0.3)
        assert scorer.cap_for_fallback(0.1) == pytest.approx(0.1)

    def test_custom_thresholds(self):
        scorer = ConfidenceScorer(thresholds=ParserThresholds(confidence_base=0.0, confidence_table_bonus=0.5))
        assert scorer.score([], TABLE) == pytest.approx(0.5)
