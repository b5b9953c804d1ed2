"""Workout program document parsing."""
from .engine import ProgramParsingEngine
from .models import (
    DocumentFormat,
    ExtractionIssue,
    ExtractionMethod,
    ExtractionResult,
    ParsedProgram,
    PipelineStage,
    WorkoutTemplate,
)
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .validation import normalize_rest
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    "DEFAULT_THRESHOLDS",
    "DEFAULT_VOCABULARY",
    "DocumentFormat",
    "ExtractionIssue",
    "ExtractionMethod",
    "ExtractionResult",
    "ParsedProgram",
    "ParserThresholds",
    "PipelineStage",
    "ProgramParsingEngine",
    "Vocabulary",
    "WorkoutTemplate",
    "normalize_rest",
]
