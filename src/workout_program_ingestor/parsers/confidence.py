"""Confidence scoring for extracted programs."""

import logging
from typing import List

from .models import StructureSignal, WorkoutDay
from .thresholds import DEFAULT_THRESHOLDS, ParserThresholds
from .validation import is_valid_exercise_name
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


class ConfidenceScorer:
    """Scores how much of the document the extracted days reflect"""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        thresholds: ParserThresholds = DEFAULT_THRESHOLDS,
    ):
        self.vocabulary = vocabulary
        self.thresholds = thresholds

    def score(self, days: List[WorkoutDay], structure: StructureSignal) -> float:
        """
        base + per-exercise credit (capped) + table bonus + valid-name credit (capped),
        clamped to [0, 1].
        """
        t = self.thresholds
        exercises = [exercise for day in days for exercise in day.exercises]
        valid_names = sum(
            1 for exercise in exercises
            if is_valid_exercise_name(exercise.name, self.vocabulary, t)
        )

        confidence = t.confidence_base
        confidence += min(len(exercises) * t.confidence_per_exercise, t.confidence_exercise_cap)
        if structure.has_table_structure:
            confidence += t.confidence_table_bonus
        confidence += min(valid_names * t.confidence_per_valid_name, t.confidence_valid_name_cap)

        confidence = round(min(1.0, max(0.0, confidence)), 4)
        logger.debug(f"Confidence {confidence} from {len(exercises)} exercises, {valid_names} valid names")
        return confidence

    def cap_for_fallback(self, confidence: float) -> float:
        """Nothing was read from the document, so the canned program is never trusted much."""
        return min(confidence, max(0.0, min(1.0, self.thresholds.fallback_confidence_cap)))
