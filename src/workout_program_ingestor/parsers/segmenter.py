"""
Day Segmenter

Splits cleaned document text into sections that each hold one training day,
and names those sections.

Strategies are tried in order; the first that yields at least two sections
longer than `min_section_length` wins:

1. Lines starting with "Day N"
2. Workout-type header lines ("Upper Body", "Push Day", "Legs:")
3. Repeated table header lines (table documents only)
4. Lines starting with a weekday
5. Blank-line separated paragraphs that carry sets/reps

Otherwise the whole text is a single section.
"""

import re
import logging
from typing import Callable, List, Optional, Tuple

from .classifier import SETS_REPS_PATTERN, TABLE_ROW_SHAPE, is_table_header_line
from .models import DaySection, DocumentFormat
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

DAY_MARKER_LINE = re.compile(r'^\s*day\s*(\d+)\b[\s:.\-–—)]*(.*)$', re.IGNORECASE)
OPTIONAL_CUE = re.compile(r'\b(optional|rest|off)\b', re.IGNORECASE)
NOTE_CUE = re.compile(r'\bnotes?\s*:\s*(.+)$', re.IGNORECASE)
INTENSITY_CUE = re.compile(r'\b(deload|light|heavy)\b', re.IGNORECASE)
COMPACT_SIGNAL = re.compile(r'\d+\s*[xX×]\s*\d+|\d+\s*sets?\b', re.IGNORECASE)
HEADER_SEPARATORS = ' \t:.-–—)'

LinePredicate = Callable[[str], bool]


def has_sets_reps_signal(line: str) -> bool:
    """True when a line carries sets/reps numbers in any supported layout."""
    stripped = line.strip()
    return bool(
        SETS_REPS_PATTERN.search(stripped)
        or COMPACT_SIGNAL.search(stripped)
        or TABLE_ROW_SHAPE.match(stripped)
    )


class DaySegmenter:
    """Splits document text into per-day sections"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds

        types = sorted(vocabulary.workout_types, key=len, reverse=True)
        keywords = '|'.join(re.escape(t) for t in types)
        self.workout_header_line = re.compile(
            rf'^\s*(?:{keywords})\b'
            r'(?:\s*(?:&|/|\+|and)\s*\w+)*'
            r'(?:\s+(?:body|day|workout|session|focus))?'
            r'\s*(?:\([^)]*\))?\s*:?\s*$',
            re.IGNORECASE,
        )
        days = '|'.join(re.escape(d) for d in vocabulary.weekdays)
        self.weekday_line = re.compile(rf'^\s*({days})\b', re.IGNORECASE)

    # ------------------------------------------------------------------
    # Line predicates
    # ------------------------------------------------------------------

    def is_day_marker(self, line: str) -> bool:
        return bool(DAY_MARKER_LINE.match(line))

    def is_workout_header(self, line: str) -> bool:
        return bool(self.workout_header_line.match(line))

    def is_weekday_header(self, line: str) -> bool:
        return bool(self.weekday_line.match(line))

    def is_section_header(self, line: str) -> bool:
        """Day marker, weekday or workout-type header line."""
        return self.is_day_marker(line) or self.is_weekday_header(line) or self.is_workout_header(line)

    def header_description(self, line: str) -> str:
        """Text after the day marker or weekday on a header line ("Day 1: Squat 5x5" -> "Squat 5x5")."""
        day_match = DAY_MARKER_LINE.match(line)
        if day_match:
            return day_match.group(2).strip()
        weekday_match = self.weekday_line.match(line)
        if weekday_match:
            return line[weekday_match.end():].strip(HEADER_SEPARATORS)
        return ""

    # ------------------------------------------------------------------
    # Segmentation
    # ------------------------------------------------------------------

    def segment(self, text: str, format: DocumentFormat) -> List[DaySection]:
        """Split text into day sections, falling back to a single section."""
        lines = (text or "").split('\n')

        strategies: List[Tuple[str, Optional[LinePredicate]]] = [
            ("day markers", self.is_day_marker),
            ("workout-type headers", self.is_workout_header),
        ]
        if format == DocumentFormat.TABLE:
            strategies.append(("table headers", is_table_header_line))
        strategies.append(("weekdays", self.is_weekday_header))
        strategies.append(("paragraphs", None))

        for name, predicate in strategies:
            if predicate is None:
                chunks = self._split_paragraphs(lines)
            else:
                chunks = self._split_at(lines, predicate)

            kept = [chunk for chunk in chunks if self._section_length(chunk) > self.thresholds.min_section_length]
            if len(kept) >= 2:
                logger.info(f"Segmented text into {len(kept)} sections by {name}")
                return self._to_sections(kept)

        logger.info("No day boundaries found, treating text as a single section")
        return self._to_sections([lines])

    def _split_at(self, lines: List[str], predicate: LinePredicate) -> List[List[str]]:
        """Start a new chunk at every line matching predicate.

        Text before the first boundary is kept only when it already holds
        sets/reps lines; otherwise it is a title or intro.
        """
        chunks: List[List[str]] = []
        preamble: List[str] = []
        current: Optional[List[str]] = None

        for line in lines:
            if predicate(line):
                if current is not None:
                    chunks.append(current)
                current = [line]
            elif current is None:
                preamble.append(line)
            else:
                current.append(line)

        if current is not None:
            chunks.append(current)

        if any(has_sets_reps_signal(line) for line in preamble):
            chunks.insert(0, preamble)
        return chunks

    def _split_paragraphs(self, lines: List[str]) -> List[List[str]]:
        chunks: List[List[str]] = []
        current: List[str] = []
        for line in lines:
            if line.strip():
                current.append(line)
            elif current:
                chunks.append(current)
                current = []
        if current:
            chunks.append(current)
        return [chunk for chunk in chunks if any(has_sets_reps_signal(line) for line in chunk)]

    @staticmethod
    def _section_length(chunk: List[str]) -> int:
        return len('\n'.join(chunk).strip())

    @staticmethod
    def _to_sections(chunks: List[List[str]]) -> List[DaySection]:
        sections = []
        for chunk in chunks:
            lines = [line.strip() for line in chunk if line.strip()]
            sections.append(DaySection(index=len(sections) + 1, lines=lines))
        return sections

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def header_lines(self, section: DaySection) -> List[str]:
        """Leading lines of a section that come before any exercise content."""
        headers: List[str] = []
        for line in section.lines[:self.thresholds.optional_header_lines]:
            if is_table_header_line(line):
                break
            if has_sets_reps_signal(line) and not self.is_section_header(line):
                break
            headers.append(line)
        return headers

    def name_day(self, section: DaySection) -> Tuple[str, bool]:
        """Return (label, is_optional) for a section."""
        label = f"Day {section.index}"
        for line in section.lines[:self.thresholds.day_label_scan_lines]:
            day_match = DAY_MARKER_LINE.match(line)
            if day_match:
                description = day_match.group(2).strip()
                if has_sets_reps_signal(description):
                    description = ""
                label = f"Day {day_match.group(1)}: {description}" if description else f"Day {day_match.group(1)}"
                break

            weekday_match = self.weekday_line.match(line)
            if weekday_match:
                label = weekday_match.group(1).capitalize()
                break

            if self.is_workout_header(line):
                label = f"Day {section.index}: {line.strip().rstrip(':').strip()}"
                break

        is_optional = any(
            OPTIONAL_CUE.search(line)
            for line in self.header_lines(section)
            if self.is_section_header(line) and not has_sets_reps_signal(line)
        )
        return label, is_optional

    def day_notes(self, section: DaySection) -> str:
        """Notes taken from a section's header ("Note: ...", deload/light/heavy cues)."""
        notes = []
        for line in self.header_lines(section):
            note_match = NOTE_CUE.search(line)
            if note_match:
                notes.append(note_match.group(1).strip())
                continue
            cue = INTENSITY_CUE.search(line)
            if cue:
                notes.append(f"{cue.group(1).capitalize()} day")
        return '; '.join(notes)
