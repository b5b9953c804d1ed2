"""
Program parsing endpoints

POST /parse/program-text   parse already-extracted document text
POST /parse/program-file   parse an uploaded document, titled by its filename

Both always answer 200 with a ParsedProgram once the request is valid: when
nothing can be read from the document the engine falls back to a sample
program and says so in extraction.warnings.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from workout_program_ingestor.config import settings
from workout_program_ingestor.parsers.models import ParsedProgram
from workout_program_ingestor.services.program_ingest import (
    ProgramIngestService,
    build_file_info,
    get_ingest_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class ParseProgramTextRequest(BaseModel):
    """Request model for POST /parse/program-text"""
    text: str = Field(..., max_length=500000, description="Text extracted from a workout program document")
    title: str | None = Field(default=None, max_length=255, description="Source title, e.g. the original filename")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.ENVIRONMENT}


@router.post("/parse/program-text", response_model=ParsedProgram)
async def parse_program_text(
    request: ParseProgramTextRequest,
    service: ProgramIngestService = Depends(get_ingest_service),
):
    """Parse workout program text into a structured template."""
    if not request.text or not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")

    program = await service.ingest_text(request.text, request.title)
    logger.info(
        f"Parsed program text ({len(request.text)} chars): "
        f"method={program.extraction.method}, confidence={program.extraction.confidence}"
    )
    return program


@router.post("/parse/program-file", response_model=ParsedProgram)
async def parse_program_file(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    service: ProgramIngestService = Depends(get_ingest_service),
):
    """Parse an uploaded workout program document."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large ({len(content)} bytes, limit {settings.MAX_UPLOAD_BYTES})",
        )

    file_info = build_file_info(file.filename, len(content), file.content_type)
    program = await service.ingest_file(content, file_info, title=title)
    logger.info(
        f"Parsed program file '{file_info.filename}': "
        f"method={program.extraction.method}, confidence={program.extraction.confidence}"
    )
    return program
