"""
Parser Models

Pydantic models for the structured program that the parsing engine outputs:
per-line exercise entries, training days, the extraction report and the
final workout template.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from enum import Enum


class DocumentFormat(str, Enum):
    """Overall layout of the document text"""
    TABLE = "table"
    STRUCTURED_PATTERN = "structured_pattern"  # "3 sets x 10 reps" prose
    NUMBERED_LIST = "numbered_list"
    UNSTRUCTURED = "unstructured"


class ExtractionMethod(str, Enum):
    """How the final days were produced"""
    TABLE = "table"
    PATTERN = "pattern"
    KEYWORD_SCAN = "keyword_scan"            # Last-resort vocabulary scan
    FILENAME_FALLBACK = "filename_fallback"  # Canned program chosen from the title


class PipelineStage(str, Enum):
    """States visited by one engine call, in order"""
    START = "start"
    CLASSIFIED = "classified"
    SEGMENTED = "segmented"
    EXTRACTED = "extracted"
    EXTRACTION_EMPTY = "extraction_empty"
    FALLBACK_APPLIED = "fallback_applied"
    SCORED = "scored"
    ASSEMBLED = "assembled"
    DONE = "done"


class ExtractionIssue(str, Enum):
    """Non-fatal conditions met while parsing"""
    INPUT_TOO_SHORT = "input_too_short"
    NO_STRUCTURE_DETECTED = "no_structure_detected"
    ZERO_EXERCISES_EXTRACTED = "zero_exercises_extracted"
    INVALID_EXERCISE_REJECTED = "invalid_exercise_rejected"  # Recorded, never warned
    TEXT_EXTRACTION_FAILED = "text_extraction_failed"
    INTERNAL_ERROR = "internal_error"


class StructureSignal(BaseModel):
    """Classifier verdict plus the evidence behind it"""
    format: DocumentFormat = DocumentFormat.UNSTRUCTURED
    reason: Literal[
        "table_header",
        "table_rows",
        "exercise_dense",
        "sets_reps_pattern",
        "list_markers",
        "none",
        "too_short",
    ] = "none"
    table_like_lines: int = Field(default=0, ge=0)
    exercise_lines: int = Field(default=0, ge=0)
    too_short: bool = False

    class Config:
        use_enum_values = True

    @property
    def has_table_structure(self) -> bool:
        return self.format == DocumentFormat.TABLE


class DaySection(BaseModel):
    """Contiguous span of text hypothesized to be one training day"""
    index: int = Field(..., ge=1)
    lines: List[str] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class ExerciseEntry(BaseModel):
    """One exercise parsed from a single line"""
    name: str = Field(..., min_length=1)
    sets: int = Field(..., ge=1, le=20)
    reps: str = Field(..., description="Reps as string to preserve ranges like '8-12'")
    rest_seconds: int = Field(default=90, ge=0)
    notes: str = ""
    match_strategy: str = Field(..., description="Id of the strategy that produced this entry")


class WorkoutDay(BaseModel):
    """One training day with its exercises"""
    label: str
    is_optional: bool = False
    notes: str = ""
    exercises: List[ExerciseEntry] = Field(default_factory=list)


class ExtractionResult(BaseModel):
    """What the engine extracted and how sure it is"""
    days: List[WorkoutDay] = Field(..., min_length=1)
    format: DocumentFormat
    confidence: float = Field(..., ge=0, le=1)
    method: ExtractionMethod
    structure: StructureSignal = Field(default_factory=StructureSignal)
    warnings: List[str] = Field(default_factory=list)
    issues: List[ExtractionIssue] = Field(default_factory=list)
    stages: List[PipelineStage] = Field(default_factory=list)

    class Config:
        use_enum_values = True

    @property
    def total_exercises(self) -> int:
        return sum(len(day.exercises) for day in self.days)


class TemplateExercise(BaseModel):
    """Exercise as stored in a workout template"""
    id: str
    name: str
    sets: int = Field(..., ge=1, le=20)
    reps: str
    rest_seconds: int = Field(..., ge=0)
    weight: str = ""
    notes: str = ""
    match_strategy: str


class TemplateDay(BaseModel):
    """Day as stored in a workout template"""
    id: str
    day_number: int = Field(..., ge=1)
    label: str
    is_optional: bool = False
    notes: str = ""
    exercises: List[TemplateExercise] = Field(default_factory=list)


class ProgressionWeek(BaseModel):
    """Percentage-based progression step ("Week 3 ... 85%")"""
    week: int = Field(..., ge=1)
    percentage: int = Field(..., ge=1, le=200)


class WorkoutTemplate(BaseModel):
    """Final multi-day workout template"""
    id: str
    name: str
    description: str
    source_title: Optional[str] = None
    difficulty: Literal["beginner", "intermediate", "advanced"] = "intermediate"
    category: str = "strength"
    program_type: str = "Custom"
    goals: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    duration_weeks: int = Field(default=8, ge=1, le=52)
    days_per_week: int = Field(..., ge=1)
    estimated_minutes: int = 60
    tags: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    progression: List[ProgressionWeek] = Field(default_factory=list)
    schedule: List[TemplateDay] = Field(..., min_length=1)
    is_custom: bool = True


class ParsedProgram(BaseModel):
    """Everything one engine call returns"""
    template: WorkoutTemplate
    extraction: ExtractionResult


class FileInfo(BaseModel):
    """Information about the uploaded file"""
    filename: str
    extension: str
    size_bytes: int = 0
    content_type: Optional[str] = None
    encoding: Optional[str] = None
