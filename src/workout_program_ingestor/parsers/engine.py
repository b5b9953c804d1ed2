"""
Program Parsing Engine

Converts extracted document text into a structured workout template plus a
confidence score. parse() is total: every input, including the empty string,
yields a template with at least one day holding at least one exercise.

Pipeline:
    clean -> classify -> segment -> extract per section
          -> (keyword scan -> canned program when nothing was found)
          -> score -> assemble
"""

import logging
from typing import List, Optional

from .assembler import TemplateAssembler
from .classifier import StructureClassifier
from .confidence import ConfidenceScorer
from .fallback import FallbackGenerator
from .line_parser import LineParser
from .models import (
    DocumentFormat,
    ExtractionIssue,
    ExtractionMethod,
    ExtractionResult,
    ParsedProgram,
    PipelineStage,
    StructureSignal,
    WorkoutDay,
)
from .section_extractor import SectionExtractor
from .segmenter import DaySegmenter
from .text_cleaning import clean_document_text, is_garbage_text
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


class ParseRun:
    """Mutable bookkeeping for a single parse() call"""

    def __init__(self):
        self.stages: List[PipelineStage] = [PipelineStage.START]
        self.warnings: List[str] = []
        self.issues: List[ExtractionIssue] = []

    def advance(self, stage: PipelineStage):
        self.stages.append(stage)

    def add_warning(self, message: str):
        logger.warning(message)
        self.warnings.append(message)

    def add_issue(self, issue: ExtractionIssue):
        if issue not in self.issues:
            self.issues.append(issue)


class ProgramParsingEngine:
    """Parses workout program text into a ParsedProgram"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds

        self.classifier = StructureClassifier(vocabulary, thresholds)
        self.segmenter = DaySegmenter(vocabulary, thresholds)
        self.line_parser = LineParser(vocabulary, thresholds, segmenter=self.segmenter)
        self.extractor = SectionExtractor(self.line_parser, self.segmenter)
        self.fallback = FallbackGenerator(vocabulary, thresholds)
        self.scorer = ConfidenceScorer(vocabulary, thresholds)
        self.assembler = TemplateAssembler(vocabulary)

    def parse(self, text: Optional[str], title: Optional[str] = None) -> ParsedProgram:
        """
        Parse document text into a workout template.

        Args:
            text: Text extracted from the document (may be empty)
            title: Source title, usually the uploaded filename

        Returns:
            ParsedProgram; never raises
        """
        raw_text = text or ""
        try:
            return self._parse(raw_text, title)
        except Exception as e:
            logger.exception(f"Program parsing failed, using canned program: {e}")
            run = ParseRun()
            run.add_issue(ExtractionIssue.INTERNAL_ERROR)
            run.add_warning(f"Parsing failed ({type(e).__name__}); showing a sample program")
            return self._finish_with_canned(run, raw_text, title, StructureSignal())

    def _parse(self, raw_text: str, title: Optional[str]) -> ParsedProgram:
        run = ParseRun()
        cleaned = clean_document_text(raw_text)

        structure = self.classifier.classify(cleaned)
        run.advance(PipelineStage.CLASSIFIED)

        if structure.too_short:
            run.add_issue(ExtractionIssue.INPUT_TOO_SHORT)
            run.add_warning(
                f"Document text too short to parse ({len(cleaned.strip())} characters)"
            )
            run.advance(PipelineStage.EXTRACTION_EMPTY)
            return self._finish_with_canned(run, cleaned, title, structure)

        if structure.format == DocumentFormat.UNSTRUCTURED:
            run.add_issue(ExtractionIssue.NO_STRUCTURE_DETECTED)

        sections = self.segmenter.segment(cleaned, structure.format)
        run.advance(PipelineStage.SEGMENTED)
        logger.info(f"Found {len(sections)} day sections")

        days: List[WorkoutDay] = []
        for section in sections:
            extraction = self.extractor.extract_detailed(section)
            if extraction.rejected_lines:
                run.add_issue(ExtractionIssue.INVALID_EXERCISE_REJECTED)
            if structure.has_table_structure and not extraction.header_found:
                run.add_warning(f"No table header found in section {section.index}")
            if not extraction.entries:
                continue

            label, is_optional = self.segmenter.name_day(section)
            days.append(WorkoutDay(
                label=label,
                is_optional=is_optional,
                notes=self.segmenter.day_notes(section),
                exercises=extraction.entries,
            ))

        if days:
            run.advance(PipelineStage.EXTRACTED)
            method = ExtractionMethod.TABLE if structure.has_table_structure else ExtractionMethod.PATTERN
            return self._finish(run, days, cleaned, title, structure, method, fallback=False)

        run.add_issue(ExtractionIssue.ZERO_EXERCISES_EXTRACTED)
        run.add_warning("No exercises found in structured sections")
        run.advance(PipelineStage.EXTRACTION_EMPTY)

        if is_garbage_text(raw_text, self.thresholds.min_printable_ratio):
            run.add_warning("Document text looks like binary data; skipping keyword scan")
        else:
            entries = self.fallback.scan_keywords(cleaned)
            if entries:
                run.advance(PipelineStage.FALLBACK_APPLIED)
                run.add_warning(f"Used keyword scan, found {len(entries)} exercises")
                days = [self.fallback.keyword_day(entries)]
                return self._finish(
                    run, days, cleaned, title, structure, ExtractionMethod.KEYWORD_SCAN, fallback=True
                )

        return self._finish_with_canned(run, cleaned, title, structure)

    def _finish_with_canned(
        self,
        run: ParseRun,
        text: str,
        title: Optional[str],
        structure: StructureSignal,
    ) -> ParsedProgram:
        days = self.fallback.canned_program(title)
        run.advance(PipelineStage.FALLBACK_APPLIED)
        run.add_warning("No exercises could be extracted; using a sample program based on the title")
        return self._finish(
            run, days, text, title, structure, ExtractionMethod.FILENAME_FALLBACK, fallback=True
        )

    def _finish(
        self,
        run: ParseRun,
        days: List[WorkoutDay],
        text: str,
        title: Optional[str],
        structure: StructureSignal,
        method: ExtractionMethod,
        fallback: bool,
    ) -> ParsedProgram:
        confidence = self.scorer.score(days, structure)
        if method == ExtractionMethod.FILENAME_FALLBACK:
            confidence = self.scorer.cap_for_fallback(confidence)
        run.advance(PipelineStage.SCORED)

        template = self.assembler.assemble(days, title, text, fallback=fallback)
        run.advance(PipelineStage.ASSEMBLED)
        run.advance(PipelineStage.DONE)

        extraction = ExtractionResult(
            days=[day for day in days if day.exercises],
            format=structure.format,
            confidence=confidence,
            method=method,
            structure=structure,
            warnings=run.warnings,
            issues=run.issues,
            stages=run.stages,
        )
        logger.info(
            f"Parsed program via {method.value}: {len(template.schedule)} days, "
            f"{extraction.total_exercises} exercises, confidence {confidence:.2f}"
        )
        return ParsedProgram(template=template, extraction=extraction)
