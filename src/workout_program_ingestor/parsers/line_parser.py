"""
Exercise Line Parser

Turns a single line of text into an ExerciseEntry using an ordered cascade of
strategy functions. Each strategy either returns a Candidate or None; the
first candidate that passes validation wins.

Supported layouts, in cascade order:
    table_row   "Barbell Bench Press 5 1 - 4 90 - 120 Sec"
    compact     "Squat 3x8-10 90s", "Bench Press - 4x6 rest 2 min"
    annotated   "Deadlift: 3 sets x 5 reps, rest 3 min", "Lunges (3x12)"
    delimited   "Romanian Deadlift | 3 | 10 | 90"
    bare_name   "Cable Lateral Raise" (defaults applied)
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from workout_program_ingestor.utils import normalize_range_text, to_int
from .classifier import contains_exercise_term, is_table_header_line
from .models import ExerciseEntry
from .segmenter import DaySegmenter
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .validation import is_valid_exercise_name, is_valid_sets, normalize_rest
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

BULLET_PREFIX = re.compile(r'^[\-•*·▪◦]+\s*')
NUMBER_PREFIX = re.compile(r'^\d+[.)]\s+')

_RANGE = r'\d+(?:\s*[-–]\s*\d+)?'
_UNIT = r'(?:sec(?:ond)?s?|s|min(?:ute)?s?|m)\b'
_NAME = r"[A-Za-z][A-Za-z\s'’()/&.,-]*?"
_REST = rf'(?:\d{{1,2}}:[0-5]\d|{_RANGE}\s*(?:{_UNIT})?)'

TABLE_ROW_PATTERN = re.compile(
    rf'^(?P<name>.+?)\s+(?P<sets>\d+)\s+(?P<reps>{_RANGE})\s+(?P<rest>{_REST})\.?'
    r'(?:\s+(?P<notes>[A-Za-z].*))?$',
    re.IGNORECASE,
)

COMPACT_PATTERN = re.compile(
    rf'^(?P<name>{_NAME})(?:\s*[-–:]\s*|\s+)(?P<sets>\d+)\s*[xX×]\s*(?P<reps>{_RANGE})(?:\s*reps?\b)?'
    rf'(?:\s*[,;]?\s+(?:rest\s*:?\s*)?(?P<rest>{_REST})(?![\w%×]))?'
    r'(?:\s*[-–,;]?\s*(?P<notes>.+))?$',
    re.IGNORECASE,
)

ANNOTATED_SETS_PATTERN = re.compile(
    rf'^(?P<name>{_NAME})\s*[:\-–]?\s*(?P<sets>\d+)\s*sets?\s*(?:x|×|of)?\s*(?P<reps>{_RANGE})\s*(?:reps?\b)?(?P<tail>.*)$',
    re.IGNORECASE,
)

ANNOTATED_PAREN_PATTERN = re.compile(
    rf'^(?P<name>[A-Za-z][^()]*?)\s*\(\s*(?P<sets>\d+)\s*[xX×]\s*(?P<reps>{_RANGE})\s*\)(?P<tail>.*)$',
    re.IGNORECASE,
)

REST_IN_TAIL = re.compile(
    rf'\brest(?:\s+for)?\s*[:\-–]?\s*(?P<rest>{_REST})',
    re.IGNORECASE,
)

COLUMN_SPLIT = re.compile(r'\s{2,}|\t|\|')
REPS_COLUMN = re.compile(rf'^{_RANGE}(?:\s*reps?)?$', re.IGNORECASE)
HAS_DIGIT = re.compile(r'\d')
SENTENCE_END = re.compile(r'[.!?]$')


@dataclass
class Candidate:
    """Unvalidated fields pulled out of a line by one strategy."""
    name: str
    sets: Optional[int]
    reps: str
    rest: Optional[str] = None
    notes: str = ""


Strategy = Callable[[str, "LineParser"], Optional[Candidate]]


def _clean_notes(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.strip(' \t-–—,;:()').strip()


def table_row(line: str, parser: "LineParser") -> Optional[Candidate]:
    """<name> <sets> <reps> <rest>[unit] [notes]"""
    match = TABLE_ROW_PATTERN.match(line)
    if not match:
        return None
    return Candidate(
        name=match.group('name').strip(),
        sets=to_int(match.group('sets')),
        reps=match.group('reps'),
        rest=match.group('rest'),
        notes=_clean_notes(match.group('notes')),
    )


def compact(line: str, parser: "LineParser") -> Optional[Candidate]:
    """<name> <sets>x<reps> [rest] [notes]"""
    match = COMPACT_PATTERN.match(line)
    if not match:
        return None
    return Candidate(
        name=match.group('name').strip(' -–:'),
        sets=to_int(match.group('sets')),
        reps=match.group('reps'),
        rest=match.group('rest'),
        notes=_clean_notes(match.group('notes')),
    )


def annotated(line: str, parser: "LineParser") -> Optional[Candidate]:
    """<name>: <sets> sets x <reps> reps [... rest <rest>] or <name> (<sets>x<reps>)"""
    match = ANNOTATED_SETS_PATTERN.match(line) or ANNOTATED_PAREN_PATTERN.match(line)
    if not match:
        return None

    tail = match.group('tail') or ""
    rest = None
    rest_match = REST_IN_TAIL.search(tail)
    if rest_match:
        rest = rest_match.group('rest')
        tail = tail[:rest_match.start()] + tail[rest_match.end():]

    return Candidate(
        name=match.group('name').strip(' -–:'),
        sets=to_int(match.group('sets')),
        reps=match.group('reps'),
        rest=rest,
        notes=_clean_notes(tail),
    )


def delimited(line: str, parser: "LineParser") -> Optional[Candidate]:
    """Columns split on 2+ spaces, tabs or pipes: name | sets | reps [| rest] [| notes...]"""
    columns = [col.strip() for col in COLUMN_SPLIT.split(line)]
    columns = [col for col in columns if col]
    if len(columns) < 3:
        return None

    sets = to_int(columns[1])
    if sets is None:
        return None
    if not REPS_COLUMN.match(columns[2]):
        return None

    rest = None
    extra = columns[3:]
    if extra and HAS_DIGIT.search(extra[0]):
        rest = extra.pop(0)

    return Candidate(
        name=columns[0],
        sets=sets,
        reps=columns[2],
        rest=rest,
        notes='; '.join(extra),
    )


def bare_name(line: str, parser: "LineParser") -> Optional[Candidate]:
    """A short line naming an exercise with no numbers at all."""
    if HAS_DIGIT.search(line) or line.endswith(':') or SENTENCE_END.search(line):
        return None

    words = line.split()
    thresholds = parser.thresholds
    if not thresholds.bare_name_min_words <= len(words) <= thresholds.bare_name_max_words:
        return None
    if not contains_exercise_term(line, parser.vocabulary):
        return None
    if parser.is_header_line(line):
        return None

    return Candidate(
        name=line,
        sets=thresholds.default_sets,
        reps=thresholds.default_reps,
        rest=None,
        notes="Sets and reps not specified",
    )


DEFAULT_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("table_row", table_row),
    ("compact", compact),
    ("annotated", annotated),
    ("delimited", delimited),
    ("bare_name", bare_name),
)


class LineParser:
    """Runs the strategy cascade over one line at a time"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
        segmenter: Optional[DaySegmenter] = None,
        strategies: Tuple[Tuple[str, Strategy], ...] = DEFAULT_STRATEGIES,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds
        self.strategies = strategies
        self.segmenter = segmenter or DaySegmenter(vocabulary, thresholds)

    def is_header_line(self, line: str) -> bool:
        """Day, weekday, workout-type or table header line."""
        return self.segmenter.is_section_header(line) or is_table_header_line(line)

    @staticmethod
    def prepare(line: str) -> str:
        """Trim a line and strip bullet and numbering markers."""
        prepared = (line or "").strip()
        prepared = BULLET_PREFIX.sub('', prepared)
        prepared = NUMBER_PREFIX.sub('', prepared)
        return prepared.strip()

    def parse(self, line: str) -> Optional[ExerciseEntry]:
        entry, _ = self.evaluate(line)
        return entry

    def evaluate(self, line: str) -> Tuple[Optional[ExerciseEntry], bool]:
        """
        Parse a line and report whether any candidate was rejected.

        Returns:
            (entry, rejected) where rejected is True when the first strategy
            that matched the line failed name or set validation. Later
            strategies are not tried once one has matched.
        """
        prepared = self.prepare(line)
        if len(prepared) < self.thresholds.min_line_length:
            return None, False

        for strategy_id, strategy in self.strategies:
            candidate = strategy(prepared, self)
            if candidate is None:
                continue

            entry = self._validate(candidate, strategy_id)
            if entry is None:
                logger.debug(f"Rejected {strategy_id} candidate for line '{prepared}'")
                return None, True

            logger.debug(f"Parsed '{prepared}' with {strategy_id}: {entry.name} {entry.sets}x{entry.reps}")
            return entry, False

        return None, False

    def _validate(self, candidate: Candidate, strategy_id: str) -> Optional[ExerciseEntry]:
        name = ' '.join(candidate.name.split())
        if not is_valid_exercise_name(name, self.vocabulary, self.thresholds):
            return None
        if not is_valid_sets(candidate.sets, self.thresholds):
            return None

        reps = normalize_range_text(candidate.reps) or self.thresholds.default_reps
        return ExerciseEntry(
            name=name,
            sets=candidate.sets,
            reps=reps,
            rest_seconds=normalize_rest(candidate.rest, self.thresholds),
            notes=candidate.notes,
            match_strategy=strategy_id,
        )
