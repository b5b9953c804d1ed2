"""Utility functions."""
import math
import re
from typing import Optional, Tuple

_RANGE_RE = re.compile(r"(\d+)\s*[-–—]\s*(\d+)")


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except Exception:
        return None


def parse_range(txt: str) -> Optional[Tuple[int, int]]:
    """Extract (low, high) from a range string like '90 - 120'."""
    if not txt:
        return None
    m = _RANGE_RE.search(txt)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (105.5 -> 106, 6.5 -> 7)."""
    return int(math.floor(value + 0.5))


def normalize_range_text(txt: str) -> str:
    """Collapse '8 -12', '8 – 12' and '8-12' into '8-12'."""
    return _RANGE_RE.sub(r"\1-\2", txt.strip())


def title_case_words(txt: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), txt)
