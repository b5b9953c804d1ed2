"""
Program Ingest Service

Glue between uploaded documents and the parsing engine:

- picks a text extractor for the uploaded file and decodes it
- runs the synchronous engine in a worker thread
- optionally canonicalizes exercise names through an external service

Collaborator failures never fail the request; they become warnings and the
engine's fallbacks take over.
"""

import os
import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Sequence

import httpx

from workout_program_ingestor.config import settings
from workout_program_ingestor.parsers.engine import ProgramParsingEngine
from workout_program_ingestor.parsers.models import ExtractionIssue, FileInfo, ParsedProgram

logger = logging.getLogger(__name__)


class TextExtractionError(Exception):
    """Raised when a document's text cannot be extracted."""


class DocumentTextExtractor(Protocol):
    """Turns an uploaded document into plain text"""

    def can_extract(self, file_info: FileInfo) -> bool:
        ...

    async def extract_text(self, content: bytes, file_info: FileInfo) -> str:
        ...


class ExerciseNameCanonicalizer(Protocol):
    """Maps raw exercise names to canonical ones"""

    async def canonicalize(self, names: List[str]) -> Dict[str, str]:
        ...


class PlainTextExtractor:
    """Extractor for plain text uploads"""

    EXTENSIONS = ('.txt', '.text', '.md', '')
    ENCODINGS = ('utf-8', 'utf-8-sig', 'latin-1', 'cp1252')

    def can_extract(self, file_info: FileInfo) -> bool:
        return file_info.extension.lower() in self.EXTENSIONS

    async def extract_text(self, content: bytes, file_info: FileInfo) -> str:
        if content is None:
            raise TextExtractionError(f"No content for {file_info.filename}")

        for encoding in self.ENCODINGS:
            try:
                text = content.decode(encoding)
                file_info.encoding = encoding
                return text
            except UnicodeDecodeError:
                continue

        file_info.encoding = 'utf-8'
        return content.decode('utf-8', errors='replace')


class HttpNameCanonicalizer:
    """Canonicalizes names through an HTTP service (POST {base_url}/canonicalize)"""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    async def canonicalize(self, names: List[str]) -> Dict[str, str]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/canonicalize", json={"names": names})
            response.raise_for_status()
            data = response.json()

        mapping = data.get("names", {}) if isinstance(data, dict) else {}
        return {k: v for k, v in mapping.items() if isinstance(k, str) and isinstance(v, str)}


def build_file_info(filename: Optional[str], size_bytes: int = 0, content_type: Optional[str] = None) -> FileInfo:
    """Describe an upload; the extension is lower-cased and includes the dot."""
    name = filename or "upload"
    _, extension = os.path.splitext(name)
    return FileInfo(
        filename=name,
        extension=extension.lower(),
        size_bytes=size_bytes,
        content_type=content_type,
    )


class ProgramIngestService:
    """Parses workout program documents into templates"""

    def __init__(
        self,
        engine: Optional[ProgramParsingEngine] = None,
        extractors: Optional[Sequence[DocumentTextExtractor]] = None,
        canonicalizer: Optional[ExerciseNameCanonicalizer] = None,
    ):
        self.engine = engine or ProgramParsingEngine(thresholds=settings.parser_thresholds())
        self.extractors: List[DocumentTextExtractor] = list(extractors) if extractors is not None else [PlainTextExtractor()]
        self.canonicalizer = canonicalizer

    async def ingest_text(self, text: str, title: Optional[str] = None) -> ParsedProgram:
        """Parse already-extracted text."""
        program = await asyncio.to_thread(self.engine.parse, text, title)
        return await self._canonicalize(program)

    async def ingest_file(
        self,
        content: bytes,
        file_info: FileInfo,
        title: Optional[str] = None,
    ) -> ParsedProgram:
        """Extract text from an upload and parse it, titled by its filename unless a title is given."""
        text = ""
        failure: Optional[str] = None

        extractor = next((e for e in self.extractors if e.can_extract(file_info)), None)
        if extractor is None:
            failure = f"No text extractor for '{file_info.extension or file_info.filename}' files"
        else:
            try:
                text = await extractor.extract_text(content, file_info)
            except TextExtractionError as e:
                failure = f"Text extraction failed: {e}"

        if failure:
            logger.warning(f"{failure} ({file_info.filename})")

        program = await asyncio.to_thread(self.engine.parse, text, title or file_info.filename)

        if failure:
            program.extraction.warnings.insert(0, failure)
            if ExtractionIssue.TEXT_EXTRACTION_FAILED.value not in program.extraction.issues:
                program.extraction.issues.insert(0, ExtractionIssue.TEXT_EXTRACTION_FAILED.value)

        return await self._canonicalize(program)

    async def _canonicalize(self, program: ParsedProgram) -> ParsedProgram:
        """Apply canonical exercise names; failures only add a warning."""
        if self.canonicalizer is None:
            return program

        names: List[str] = []
        for day in program.template.schedule:
            for exercise in day.exercises:
                if exercise.name not in names:
                    names.append(exercise.name)

        try:
            mapping = await self.canonicalizer.canonicalize(names)
        except Exception as e:
            logger.warning(f"Exercise name canonicalization failed: {e}")
            program.extraction.warnings.append(f"Exercise name canonicalization failed: {e}")
            return program

        renamed = 0
        for day in program.template.schedule:
            for exercise in day.exercises:
                canonical = (mapping.get(exercise.name) or "").strip()
                if canonical and canonical != exercise.name:
                    exercise.name = canonical
                    renamed += 1
        for day in program.extraction.days:
            for entry in day.exercises:
                canonical = (mapping.get(entry.name) or "").strip()
                if canonical:
                    entry.name = canonical

        logger.info(f"Canonicalized {renamed} exercise names")
        return program


def get_ingest_service() -> ProgramIngestService:
    """Build the service from application settings."""
    canonicalizer = None
    if settings.USE_NAME_CANONICALIZER and settings.NAME_CANONICALIZER_URL:
        canonicalizer = HttpNameCanonicalizer(settings.NAME_CANONICALIZER_URL)
    return ProgramIngestService(canonicalizer=canonicalizer)
