"""
Test fixtures for workout-program-ingestor.

Provides the FastAPI test client, engine instances and sample program texts
so tests run fast, deterministic and offline.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_program_ingestor...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from workout_program_ingestor.main import app
from workout_program_ingestor.parsers.engine import ProgramParsingEngine
from workout_program_ingestor.services.program_ingest import ProgramIngestService, get_ingest_service


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


def plain_ingest_service() -> ProgramIngestService:
    """Ingest service without any external canonicalizer."""
    return ProgramIngestService(engine=ProgramParsingEngine())


@pytest.fixture(scope="session")
def api_client() -> TestClient:
    """Shared FastAPI TestClient for workout-program-ingestor."""
    app.dependency_overrides[get_ingest_service] = plain_ingest_service
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient (for tests needing fresh state)."""
    app.dependency_overrides[get_ingest_service] = plain_ingest_service
    return TestClient(app)


# ---------------------------------------------------------------------------
# Engine Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> ProgramParsingEngine:
    return ProgramParsingEngine()


# ---------------------------------------------------------------------------
# Sample Program Texts
# ---------------------------------------------------------------------------


@pytest.fixture
def table_program_text() -> str:
    """Two-day table program as extracted from a PDF."""
    return (
        "Day 1: Heavy Bench\n"
        "Exercise Sets Reps Rest\n"
        "Barbell Bench Press 5 1 - 4 90 - 120 Sec\n"
        "Incline Dumbbell Press 3 8 -12 60 - 90 Sec\n"
        "Cable Fly 3 12 - 15 60 Sec\n"
        "\n"
        "Day 2: Legs\n"
        "Exercise Sets Reps Rest\n"
        "Back Squat 4 5 - 8 2 - 3 min\n"
        "Romanian Deadlift 3 8 - 10 90 Sec\n"
        "Leg Curl 3 10 - 12 60 Sec\n"
    )


@pytest.fixture
def compact_program_text() -> str:
    """Two-day program written in compact NxM notation."""
    return (
        "Day 1: Push\n"
        "Bench Press 4x6-8 120s\n"
        "Overhead Press 3x8 90s\n"
        "Tricep Dips 3x10\n"
        "\n"
        "Day 2: Pull\n"
        "Barbell Row 4x8 90s\n"
        "Lat Pulldown 3x10-12 60s\n"
        "Hammer Curl 3x12\n"
    )
