"""
Structure Classifier

Decides which layout a document's text has so the segmenter and extractor
know what to expect. Checks run in priority order and the first hit wins:

1. A table header line ("Exercise Sets Reps Rest")
2. Three or more table-row shaped lines ("Bench Press 4 8-10 90")
3. Three or more lines mentioning an exercise keyword
4. "N sets x N reps" prose
5. Bullet or numbered list markers
"""

import re
import logging

from .models import DocumentFormat, StructureSignal
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_COL = r'[\s|:,]+'

# Any column-header row, found anywhere in the text
TABLE_HEADER_PATTERN = re.compile(
    rf'\b(?:exercises?|name|workout){_COL}sets{_COL}reps\b',
    re.IGNORECASE,
)

# A line that *starts* with a column-header row
TABLE_HEADER_LINE = re.compile(
    rf'^[\s|]*(?:exercises?|name|workout){_COL}sets{_COL}reps\b',
    re.IGNORECASE,
)

# "Bench Press 4 8-10 90" - words, then int, then int|range, then int|range
TABLE_ROW_SHAPE = re.compile(
    r'^[A-Za-z][A-Za-z\s\'()/&.-]*?\s+\d+\s+\d+(?:\s*[-–]\s*\d+)?\s+\d+(?:\s*[-–]\s*\d+)?'
)

SETS_REPS_PATTERN = re.compile(
    r'\d+\s*sets?\s*(?:x|of|×)\s*\d+(?:\s*[-–]\s*\d+)?\s*reps?',
    re.IGNORECASE,
)

LIST_MARKER_PATTERN = re.compile(r'^\s*(?:\d+[.)]|[-•*·▪◦])\s*\w', re.MULTILINE)


def is_table_header_line(line: str) -> bool:
    return bool(TABLE_HEADER_LINE.match(line.strip()))


def contains_exercise_term(line: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    lowered = line.lower()
    return any(term in lowered for term in vocabulary.exercise_terms)


class StructureClassifier:
    """Classifies cleaned document text into a DocumentFormat"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds

    def classify(self, text: str) -> StructureSignal:
        """Return the detected format together with the counts behind it."""
        text = text or ""
        if len(text.strip()) < self.thresholds.min_text_length:
            logger.info(f"Text too short to classify ({len(text.strip())} chars)")
            return StructureSignal(
                format=DocumentFormat.UNSTRUCTURED,
                reason="too_short",
                too_short=True,
            )

        table_like_lines = 0
        exercise_lines = 0
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            if not line:
                continue
            if TABLE_ROW_SHAPE.match(line):
                table_like_lines += 1
            if contains_exercise_term(line, self.vocabulary):
                exercise_lines += 1

        counts = dict(table_like_lines=table_like_lines, exercise_lines=exercise_lines)

        if TABLE_HEADER_PATTERN.search(text):
            signal = StructureSignal(format=DocumentFormat.TABLE, reason="table_header", **counts)
        elif table_like_lines >= self.thresholds.table_line_threshold:
            signal = StructureSignal(format=DocumentFormat.TABLE, reason="table_rows", **counts)
        elif exercise_lines >= self.thresholds.exercise_line_threshold:
            signal = StructureSignal(format=DocumentFormat.TABLE, reason="exercise_dense", **counts)
        elif SETS_REPS_PATTERN.search(text):
            signal = StructureSignal(
                format=DocumentFormat.STRUCTURED_PATTERN, reason="sets_reps_pattern", **counts
            )
        elif LIST_MARKER_PATTERN.search(text):
            signal = StructureSignal(format=DocumentFormat.NUMBERED_LIST, reason="list_markers", **counts)
        else:
            signal = StructureSignal(format=DocumentFormat.UNSTRUCTURED, reason="none", **counts)

        logger.info(
            f"Detected format {signal.format} ({signal.reason}): "
            f"{table_like_lines} table-like lines, {exercise_lines} exercise lines"
        )
        return signal
