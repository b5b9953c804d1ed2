"""
Tests for the /parse/program-text and /parse/program-file endpoints.

Uses the conftest.py `client` fixture, which swaps in an ingest service
without the external name canonicalizer.
"""

import pytest

from workout_program_ingestor.api import routes


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestParseProgramText:

    def test_parse_compact_program(self, client, compact_program_text):
        response = client.post("/parse/program-text", json={
            "text": compact_program_text,
            "title": "ppl.txt",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["extraction"]["method"] == "table"
        assert [d["label"] for d in data["template"]["schedule"]] == ["Day 1: Push", "Day 2: Pull"]
        first = data["template"]["schedule"][0]["exercises"][0]
        assert first["name"] == "Bench Press"
        assert first["sets"] == 4
        assert first["reps"] == "6-8"
        assert first["rest_seconds"] == 120
        assert 0.0 <= data["extraction"]["confidence"] <= 1.0

    def test_title_is_optional(self, client, table_program_text):
        response = client.post("/parse/program-text", json={"text": table_program_text})
        assert response.status_code == 200
        assert response.json()["template"]["name"] == "Imported Workout Program"

    def test_short_text_still_returns_program(self, client):
        response = client.post("/parse/program-text", json={"text": "hi there", "title": "bench-program.pdf"})
        assert response.status_code == 200
        data = response.json()
        assert data["extraction"]["method"] == "filename_fallback"
        assert data["extraction"]["warnings"]
        assert len(data["template"]["schedule"]) == 5

    @pytest.mark.parametrize("text", ["", "   \n  "])
    def test_blank_text_rejected(self, client, text):
        response = client.post("/parse/program-text", json={"text": text})
        assert response.status_code == 400

    def test_missing_text_is_validation_error(self, client):
        response = client.post("/parse/program-text", json={"title": "x.pdf"})
        assert response.status_code == 422


class TestParseProgramFile:

    def test_text_upload(self, client, compact_program_text):
        response = client.post(
            "/parse/program-file",
            files={"file": ("ppl.txt", compact_program_text.encode("utf-8"), "text/plain")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["template"]["name"] == "Ppl"
        assert data["template"]["source_title"] == "ppl.txt"
        assert sum(len(d["exercises"]) for d in data["template"]["schedule"]) == 6

    def test_title_form_field(self, client):
        response = client.post(
            "/parse/program-file",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"title": "bench-program.pdf"},
        )

        assert response.status_code == 200
        template = response.json()["template"]
        assert template["source_title"] == "bench-program.pdf"
        assert template["schedule"][0]["label"] == "Day 1: Heavy Bench (from bench-program.pdf)"

    def test_unsupported_extension_falls_back(self, client):
        response = client.post(
            "/parse/program-file",
            files={"file": ("program.pdf", b"%PDF-1.4 binary", "application/pdf")},
        )

        assert response.status_code == 200
        extraction = response.json()["extraction"]
        assert extraction["method"] == "filename_fallback"
        assert extraction["warnings"][0] == "No text extractor for '.pdf' files"
        assert extraction["issues"][0] == "text_extraction_failed"

    def test_empty_upload_rejected(self, client):
        response = client.post(
            "/parse/program-file",
            files={"file": ("empty.txt", b"", "text/plain")},
        )
        assert response.status_code == 400

    def test_oversized_upload_rejected(self, client, monkeypatch):
        monkeypatch.setattr(routes.settings, "MAX_UPLOAD_BYTES", 10)
        response = client.post(
            "/parse/program-file",
            files={"file": ("big.txt", b"x" * 11, "text/plain")},
        )
        assert response.status_code == 413
