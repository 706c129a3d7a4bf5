# src/lab_ingestion/processors/lab/field_matcher.py
"""
Canonical field matching for lab report lines.

A line claims the first unresolved canonical key one of whose patterns is a
case-insensitive substring of the line and whose exclusion rule (if any)
does not reject it. Exclusion rules keep related fields from stealing each
other's rows, e.g. "Холестерин не-ЛПВП" must never be read as total
cholesterol, and "Гликированный гемоглобин" never as hemoglobin.
"""

from typing import Callable, Collection, Dict, List, Mapping, Optional, Sequence
import logging

from ...constants import (
    FIELD_PATTERNS,
    NON_HDL_MARKERS,
    TOTAL_MARKER,
    VLDL_MARKERS,
    HBA1C_MARKERS,
    SERVICE_LINE_MARKERS,
    SERVICE_LINE_MARKER_GROUPS,
    SHORT_SECTION_TITLES,
    MIN_LINE_LENGTH,
)
from ...core.context import VisualLine

logger = logging.getLogger(__name__)


def _contains_any(lowered: str, markers: Sequence[str]) -> bool:
    return any(marker.lower() in lowered for marker in markers)


def _reject_cholesterol(lowered: str) -> bool:
    return _contains_any(lowered, NON_HDL_MARKERS)


def _reject_non_hdl(lowered: str) -> bool:
    return TOTAL_MARKER in lowered and not _contains_any(lowered, NON_HDL_MARKERS)


def _reject_hdl(lowered: str) -> bool:
    return _contains_any(lowered, NON_HDL_MARKERS)


def _reject_ldl(lowered: str) -> bool:
    return _contains_any(lowered, VLDL_MARKERS)


def _reject_hemoglobin(lowered: str) -> bool:
    return _contains_any(lowered, HBA1C_MARKERS)


# key -> predicate on the lowercased line; True means "not this key"
EXCLUSION_RULES: Dict[str, Callable[[str], bool]] = {
    "cholesterol": _reject_cholesterol,
    "non-hdl-cholesterol": _reject_non_hdl,
    "hdl": _reject_hdl,
    "ldl": _reject_ldl,
    "hemoglobin": _reject_hemoglobin,
}


def is_service_line(text: str) -> bool:
    """
    Table headers, section titles and patient/lab boilerplate.

    Also true for blank and very short texts.
    """
    if text is None:
        return True
    stripped = text.strip()
    if len(stripped) < MIN_LINE_LENGTH:
        return True

    lowered = stripped.lower()
    if any(marker in lowered for marker in SERVICE_LINE_MARKERS):
        return True
    if any(all(m in lowered for m in group) for group in SERVICE_LINE_MARKER_GROUPS):
        return True
    for title, max_length in SHORT_SECTION_TITLES.items():
        if title in lowered and len(lowered) < max_length:
            return True
    return False


class FieldMatcher:
    """
    Map free text (an OCR line or a vision row name) to a canonical key.
    """

    def __init__(self, patterns: Optional[Mapping[str, Sequence[str]]] = None):
        self.patterns = FIELD_PATTERNS if patterns is None else patterns
        self._lowered = {
            key: tuple(p.lower() for p in pats) for key, pats in self.patterns.items()
        }

    def matches_key(self, key: str, text: str) -> bool:
        """Pattern hit for key and not rejected by its exclusion rule."""
        lowered = text.lower()
        if not any(p in lowered for p in self._lowered.get(key, ())):
            return False
        rule = EXCLUSION_RULES.get(key)
        if rule is not None and rule(lowered):
            return False
        return True

    def match(self, text: str, resolved: Collection[str] = ()) -> Optional[str]:
        """
        First unresolved key matching the text.

        Args:
            text: Line text or row name
            resolved: Keys that already have a value

        Returns:
            Canonical key, or None
        """
        if not text:
            return None
        for key in self.patterns:
            if key in resolved:
                continue
            if self.matches_key(key, text):
                return key
        return None

    def matching_keys(self, text: str, resolved: Collection[str] = ()) -> List[str]:
        """Every unresolved key matching the text, in registration order."""
        if not text:
            return []
        return [
            key for key in self.patterns
            if key not in resolved and self.matches_key(key, text)
        ]

    def name_end_x(self, key: str, line: VisualLine) -> float:
        """
        Right edge of the words covered by the key's first matching pattern.

        Values sit to the right of this x. Returns 0 when the pattern cannot
        be located in the line.
        """
        lowered = line.text.lower()
        for pattern in self._lowered.get(key, ()):
            start = lowered.find(pattern)
            if start < 0:
                continue
            end = start + len(pattern)

            # Words are joined by single spaces in line.text
            right_edge = 0.0
            offset = 0
            for word in line.words:
                word_end = offset + len(word.text)
                if offset < end and word_end > start:
                    right_edge = max(right_edge, word.x2)
                offset = word_end + 1
            return right_edge
        return 0.0
