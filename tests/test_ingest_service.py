"""Tests for ProgramIngestService and its collaborators."""

import json

import httpx
import pytest

from workout_program_ingestor.parsers.engine import ProgramParsingEngine
from workout_program_ingestor.services import program_ingest
from workout_program_ingestor.services.program_ingest import (
    HttpNameCanonicalizer,
    PlainTextExtractor,
    ProgramIngestService,
    TextExtractionError,
    build_file_info,
    get_ingest_service,
)


class FakeCanonicalizer:
    def __init__(self, mapping):
        self.mapping = mapping
        self.calls = []

    async def canonicalize(self, names):
        self.calls.append(list(names))
        return self.mapping


class FailingCanonicalizer:
    async def canonicalize(self, names):
        raise RuntimeError("service unavailable")


class BrokenExtractor:
    def can_extract(self, file_info):
        return True

    async def extract_text(self, content, file_info):
        raise TextExtractionError("corrupt document")


def _service(**kwargs):
    return ProgramIngestService(engine=ProgramParsingEngine(), **kwargs)


class TestBuildFileInfo:

    def test_extension_lower_cased(self):
        info = build_file_info("Plan.TXT", 12, "text/plain")
        assert info.filename == "Plan.TXT"
        assert info.extension == ".txt"
        assert info.size_bytes == 12

    def test_missing_filename(self):
        info = build_file_info(None)
        assert info.filename == "upload"
        assert info.extension == ""


class TestPlainTextExtractor:

    def test_can_extract(self):
        extractor = PlainTextExtractor()
        assert extractor.can_extract(build_file_info("a.md"))
        assert not extractor.can_extract(build_file_info("a.pdf"))

    @pytest.mark.asyncio
    async def test_utf8(self):
        info = build_file_info("a.txt")
        assert await PlainTextExtractor().extract_text("Squat 3x5".encode("utf-8"), info) == "Squat 3x5"
        assert info.encoding == "utf-8"

    @pytest.mark.asyncio
    async def test_latin1(self):
        info = build_file_info("a.txt")
        text = await PlainTextExtractor().extract_text("Día 1".encode("latin-1"), info)
        assert text == "Día 1"
        assert info.encoding == "latin-1"

    @pytest.mark.asyncio
    async def test_missing_content(self):
        with pytest.raises(TextExtractionError):
            await PlainTextExtractor().extract_text(None, build_file_info("a.txt"))


class TestIngestService:

    @pytest.mark.asyncio
    async def test_ingest_text(self, compact_program_text):
        program = await _service().ingest_text(compact_program_text, "ppl.txt")
        assert len(program.template.schedule) == 2

    @pytest.mark.asyncio
    async def test_ingest_file_uses_filename_as_title(self, compact_program_text):
        info = build_file_info("push-pull.txt")
        program = await _service().ingest_file(compact_program_text.encode("utf-8"), info)
        assert program.template.source_title == "push-pull.txt"
        assert program.template.name == "Push Pull"

    @pytest.mark.asyncio
    async def test_extraction_failure_becomes_warning(self):
        service = _service(extractors=[BrokenExtractor()])
        program = await service.ingest_file(b"data", build_file_info("legs.txt"))

        assert program.extraction.warnings[0] == "Text extraction failed: corrupt document"
        assert program.extraction.issues[0] == "text_extraction_failed"
        assert program.extraction.method == "filename_fallback"
        assert program.template.schedule[0].label.startswith("Day 1: Heavy Legs")

    @pytest.mark.asyncio
    async def test_canonical_names_applied(self, compact_program_text):
        canonicalizer = FakeCanonicalizer({"Bench Press": "Barbell Bench Press", "Hammer Curl": ""})
        program = await _service(canonicalizer=canonicalizer).ingest_text(compact_program_text, "ppl.txt")

        assert canonicalizer.calls[0][:2] == ["Bench Press", "Overhead Press"]
        assert program.template.schedule[0].exercises[0].name == "Barbell Bench Press"
        assert program.extraction.days[0].exercises[0].name == "Barbell Bench Press"
        assert program.template.schedule[1].exercises[2].name == "Hammer Curl"

    @pytest.mark.asyncio
    async def test_canonicalizer_failure_is_warning(self, compact_program_text):
        program = await _service(canonicalizer=FailingCanonicalizer()).ingest_text(compact_program_text, "ppl.txt")
        assert program.extraction.warnings[-1] == "Exercise name canonicalization failed: service unavailable"
        assert program.template.schedule[0].exercises[0].name == "Bench Press"


class TestHttpNameCanonicalizer:

    @pytest.mark.asyncio
    async def test_posts_names(self, monkeypatch):
        def handler(request):
            assert request.url.path == "/v1/canonicalize"
            names = json.loads(request.content)["names"]
            return httpx.Response(200, json={"names": {name: name.upper() for name in names}})

        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            program_ingest.httpx,
            "AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
        )

        mapping = await HttpNameCanonicalizer("http://names.local/v1/").canonicalize(["Squat"])
        assert mapping == {"Squat": "SQUAT"}

    @pytest.mark.asyncio
    async def test_http_error_raises(self, monkeypatch):
        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            program_ingest.httpx,
            "AsyncClient",
            lambda **kwargs: real_client(
                transport=httpx.MockTransport(lambda request: httpx.Response(503)), **kwargs
            ),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await HttpNameCanonicalizer("http://names.local").canonicalize(["Squat"])


class TestGetIngestService:

    def test_without_canonicalizer(self, monkeypatch):
        monkeypatch.setattr(program_ingest.settings, "USE_NAME_CANONICALIZER", False)
        assert get_ingest_service().canonicalizer is None

    def test_with_canonicalizer(self, monkeypatch):
        monkeypatch.setattr(program_ingest.settings, "USE_NAME_CANONICALIZER", True)
        monkeypatch.setattr(program_ingest.settings, "NAME_CANONICALIZER_URL", "http://names.local")
        service = get_ingest_service()
        assert isinstance(service.canonicalizer, HttpNameCanonicalizer)
        assert service.canonicalizer.base_url == "http://names.local"
