# src/lab_ingestion/processors/lab/value_extractor.py
"""
Pick the result value out of the words of one table row.

A row typically reads "<name> <value> <unit> <reference range>", so the
extractor has to skip units, reference ranges (whole or split around a
dash) and bounds like "< 5.0" and keep the bare number.
"""

from typing import List, Optional, Sequence, Tuple
import logging

from ...constants import IN_PROGRESS_MARKER
from ...core.context import RecognizedWord
from ...validators import RangeValidator
from .utils.parsing import (
    MAX_VALUE_TOKEN_LENGTH,
    parse_number,
    is_range_token,
    has_comparison,
    has_unit,
    is_comparison_prefix,
    is_lone_dash,
    starts_negative_number,
    ends_with_dash,
)

logger = logging.getLogger(__name__)


def _is_range_neighbour(texts: Sequence[str], i: int) -> bool:
    """Token i is one end of a range written as separate tokens."""
    if i + 1 < len(texts):
        nxt = texts[i + 1]
        # "8.33 -30.19"
        if starts_negative_number(nxt):
            return True
        # "8.33 - 30.19"
        if is_lone_dash(nxt) and i + 2 < len(texts) and parse_number(texts[i + 2]) is not None:
            return True
    # "8.33 - 30.19", this is the upper bound
    if i >= 2 and is_lone_dash(texts[i - 1]) and parse_number(texts[i - 2]) is not None:
        return True
    # "8.33- 30.19"
    if i >= 1 and ends_with_dash(texts[i - 1]):
        return True
    return False


def value_candidates(words: Sequence[RecognizedWord]) -> List[Tuple[float, float]]:
    """
    Candidate values of a row as (value, x1), ordered left to right.
    """
    texts = [w.text.strip() for w in words]
    candidates: List[Tuple[float, float]] = []

    for i, text in enumerate(texts):
        if not text or len(text) > MAX_VALUE_TOKEN_LENGTH:
            continue
        if IN_PROGRESS_MARKER.lower() in text.lower():
            continue
        if has_comparison(text):
            continue
        if is_range_token(text):
            continue
        if has_unit(text):
            continue

        value = parse_number(text)
        if value is None or value <= 0:
            continue

        if i > 0 and is_comparison_prefix(texts[i - 1]):
            continue
        if _is_range_neighbour(texts, i):
            continue

        candidates.append((value, words[i].x1))

    candidates.sort(key=lambda c: c[1])
    return candidates


def extract_numeric_value(
    words: Sequence[RecognizedWord],
    key: str,
    validator: RangeValidator
) -> Optional[float]:
    """
    Extract the result value for key from a row's words.

    Returns the leftmost candidate inside the key's plausible range. When
    none is in range (or the key has no range) the leftmost candidate is
    returned and the caller's range check decides.
    """
    candidates = value_candidates(words)
    if not candidates:
        return None

    if validator.range_for(key) is not None:
        for value, _ in candidates:
            if validator.is_valid(key, value):
                return value

    return candidates[0][0]
