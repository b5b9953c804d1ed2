"""Heuristic thresholds for the parsing pipeline.

These were tuned by hand against real program PDFs; there is no labeled
corpus behind them. Override per engine instead of editing the defaults.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserThresholds:
    """Named, overridable constants used by the parsing stages."""

    # Input shorter than this goes straight to the canned fallback
    min_text_length: int = 50

    # Structure classifier
    table_line_threshold: int = 3
    exercise_line_threshold: int = 3

    # Day segmenter
    min_section_length: int = 30
    day_label_scan_lines: int = 5
    optional_header_lines: int = 3

    # Line parser / validation
    min_line_length: int = 5
    min_name_length: int = 3
    max_name_length: int = 50
    min_sets: int = 1
    max_sets: int = 20
    default_sets: int = 3
    default_reps: str = "8-12"
    default_rest_seconds: int = 90
    minutes_threshold: int = 10
    bare_name_min_words: int = 2
    bare_name_max_words: int = 4

    # Fallback generator
    keyword_scan_limit: int = 15
    min_printable_ratio: float = 0.5

    # Confidence scorer
    confidence_base: float = 0.3
    confidence_per_exercise: float = 0.05
    confidence_exercise_cap: float = 0.4
    confidence_table_bonus: float = 0.2
    confidence_per_valid_name: float = 0.02
    confidence_valid_name_cap: float = 0.3
    fallback_confidence_cap: float = 0.3


DEFAULT_THRESHOLDS = ParserThresholds()
