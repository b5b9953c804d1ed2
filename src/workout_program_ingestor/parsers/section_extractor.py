"""
Section Extractor

Runs the line parser over every content line of a day section.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from .classifier import is_table_header_line
from .line_parser import LineParser
from .models import DaySection, ExerciseEntry
from .segmenter import DaySegmenter, has_sets_reps_signal

logger = logging.getLogger(__name__)


@dataclass
class SectionExtraction:
    """Entries found in one section plus what happened along the way."""
    entries: List[ExerciseEntry] = field(default_factory=list)
    header_found: bool = False
    rejected_lines: int = 0


class SectionExtractor:
    """Extracts exercise entries from one day section"""

    def __init__(self, line_parser: LineParser, segmenter: DaySegmenter):
        self.line_parser = line_parser
        self.segmenter = segmenter

    def extract(self, section: DaySection) -> Tuple[List[ExerciseEntry], bool]:
        """
        Parse a section's lines into exercise entries.

        Returns:
            (entries in line order, whether a table header was found)
        """
        result = self.extract_detailed(section)
        return result.entries, result.header_found

    def extract_detailed(self, section: DaySection) -> SectionExtraction:
        """
        When the section holds a table header, only the lines after it are
        parsed, plus the opening day line. Header lines are parsed only for
        an exercise written after the day marker or weekday
        ("Day 1: Squat 5x5"); workout-type headers are never parsed.
        """
        logger.debug(f"Extracting section {section.index} ({len(section.text)} chars)")
        result = SectionExtraction()
        lines = list(section.lines)
        for position, line in enumerate(lines):
            if is_table_header_line(line):
                opening = lines[:1] if position and self.segmenter.is_section_header(lines[0]) else []
                lines = opening + lines[position + 1:]
                result.header_found = True
                break

        for line in lines:
            if is_table_header_line(line):
                continue
            if self.segmenter.is_section_header(line):
                line = self.segmenter.header_description(line)
                if not has_sets_reps_signal(line):
                    continue

            entry, rejected = self.line_parser.evaluate(line)
            if rejected:
                result.rejected_lines += 1
            if entry is not None:
                result.entries.append(entry)

        logger.info(f"Extracted {len(result.entries)} exercises from section {section.index}")
        return result
