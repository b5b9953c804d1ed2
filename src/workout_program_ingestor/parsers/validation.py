"""
Validation

Name and set-count checks applied to every line-parser candidate, and the
rest-time normalizer shared by all strategies.
"""

import re
import logging
from typing import Optional

from workout_program_ingestor.utils import parse_range, round_half_up, to_int
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

MARKUP_PATTERN = re.compile(r'<[^>]*>')
PDF_OBJ_WORD = re.compile(r'\bobj\b', re.IGNORECASE)
TWO_LETTERS = re.compile(r'[A-Za-z]{2}')
NUMERIC_ONLY = re.compile(r'^[\d\s.,:%-]+$')

CLOCK_PATTERN = re.compile(r'(?<![\d:])(?P<minutes>\d{1,2}):(?P<seconds>[0-5]\d)(?![\d:])')

REST_UNIT_PATTERN = re.compile(
    r'(?P<value>\d+(?:\s*[-–—]\s*\d+)?)\s*(?P<unit>minutes?|mins?|m|seconds?|secs?|s)?\b',
    re.IGNORECASE,
)


def is_valid_exercise_name(
    name: Optional[str],
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """Reject names that are too short/long, markup, metadata or header words."""
    if not name:
        return False

    candidate = name.strip()
    if len(candidate) < thresholds.min_name_length or len(candidate) > thresholds.max_name_length:
        return False

    lowered = candidate.lower()
    if any(token in lowered for token in vocabulary.metadata_tokens):
        return False
    if MARKUP_PATTERN.search(candidate) or PDF_OBJ_WORD.search(candidate):
        return False
    if NUMERIC_ONLY.match(candidate):
        return False
    if not TWO_LETTERS.search(candidate):
        return False
    if lowered in vocabulary.header_words:
        return False

    return True


def is_valid_sets(sets: Optional[int], thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> bool:
    return sets is not None and thresholds.min_sets <= sets <= thresholds.max_sets


def normalize_rest(rest: Optional[str], thresholds: ParserThresholds = DEFAULT_THRESHOLDS) -> int:
    """
    Convert a rest-time string to seconds.

    A range is averaged first (half-up), then unit-less values below
    `minutes_threshold` are read as minutes and everything else as seconds.
    An explicit unit wins over the threshold. Missing or unparseable input
    yields the default rest.

    Examples:
        "5" -> 300, "90" -> 90, "90 - 120" -> 105, "5-8" -> 420,
        "2 min" -> 120, "45s" -> 45, "1:30" -> 90
    """
    if rest is None:
        return thresholds.default_rest_seconds

    text = str(rest).strip()
    clock = CLOCK_PATTERN.search(text)
    if clock:
        return int(clock.group('minutes')) * 60 + int(clock.group('seconds'))

    match = REST_UNIT_PATTERN.search(text)
    if not match:
        return thresholds.default_rest_seconds

    bounds = parse_range(match.group('value'))
    if bounds:
        value = round_half_up((bounds[0] + bounds[1]) / 2)
    else:
        value = to_int(match.group('value'))
        if value is None:
            return thresholds.default_rest_seconds

    unit = (match.group('unit') or '').lower()
    if unit.startswith('m'):
        return value * 60
    if unit.startswith('s'):
        return value
    if value < thresholds.minutes_threshold:
        return value * 60
    return value
