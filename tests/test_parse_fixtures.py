"""
Parameterized fixture-based tests for ProgramParsingEngine.

Loads YAML fixture files from tests/fixtures/parse_scenarios/ and runs each
through ProgramParsingEngine.parse(), asserting against the expected output
defined in the fixture.
"""

import yaml
import pytest
from pathlib import Path

from workout_program_ingestor.parsers.engine import ProgramParsingEngine

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "parse_scenarios"


def load_fixtures():
    fixtures = []
    for f in sorted(FIXTURES_DIR.glob("*.yaml")):
        with open(f) as fh:
            data = yaml.safe_load(fh)
            data["_file"] = f.name
            fixtures.append(data)
    return fixtures


def _all_exercises(extraction):
    return [exercise for day in extraction.days for exercise in day.exercises]


@pytest.mark.parametrize("fixture", load_fixtures(), ids=lambda f: f["_file"])
def test_parse_scenario(fixture):
    result = ProgramParsingEngine().parse(fixture["input"], fixture.get("title"))
    extraction = result.extraction
    expected = fixture["expected"]

    all_exercises = _all_exercises(extraction)
    total = len(all_exercises)
    assert total == expected["exercise_count"], (
        f"Expected {expected['exercise_count']} exercises, got {total}. "
        f"Exercises: {[ex.name for ex in all_exercises]}"
    )

    if "method" in expected:
        assert extraction.method == expected["method"], (
            f"Expected method {expected['method']}, got {extraction.method}"
        )
    if "day_labels" in expected:
        assert [day.label for day in extraction.days] == expected["day_labels"]
    if "day_count" in expected:
        assert len(extraction.days) == expected["day_count"]
    if "program_type" in expected:
        assert result.template.program_type == expected["program_type"]

    for i, exp_ex in enumerate(expected.get("exercises", [])):
        actual = all_exercises[i]
        for field in ("name", "sets", "reps", "rest_seconds", "notes"):
            if field in exp_ex:
                assert getattr(actual, field) == exp_ex[field], (
                    f"Exercise {i} ({actual.name}): expected {field}={exp_ex[field]!r}, "
                    f"got {getattr(actual, field)!r}"
                )
