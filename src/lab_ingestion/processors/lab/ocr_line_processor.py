# ============================================================================
# src/lab_ingestion/processors/lab/ocr_line_processor.py
# ============================================================================
"""
OCR Line Processor

Turns the reconstructed lines of one page into accepted values:

1. Skip boilerplate lines (headers, patient data) that carry no numbers
2. Record tests the lab has not finished ("Выполняется") as pending
3. Matched field name → fallback cascade for its value
4. Numbers without a field name → rescue pass
5. Anything left is logged as unmatched

Lines are processed strictly in order because each line must see which
fields earlier lines already claimed.
"""

from typing import List, Optional, Sequence
import logging

from ...config import ocr_settings, OCRSettings
from ...constants import IN_PROGRESS_MARKER
from ...core.context import ExtractionResult, VisualLine
from ...utils.logging import shorten
from ...validators import RangeValidator
from .fallback_cascade import CascadeContext, run_cascade
from .field_matcher import FieldMatcher, is_service_line
from .rescue_pass import RescueContext, rescue_line

logger = logging.getLogger(__name__)


def _is_in_progress(text: str) -> bool:
    return IN_PROGRESS_MARKER.lower() in text.lower()


def _pending_name(text: str) -> str:
    """Line text before the in-progress marker."""
    position = text.lower().find(IN_PROGRESS_MARKER.lower())
    name = text[:position] if position >= 0 else text
    return name.strip(" :-–—")


class OcrLineProcessor:
    """
    Drives matcher, cascade and rescue pass over one page's lines.

    Stateless between pages; all state lives in the ExtractionResult.
    """

    def __init__(
        self,
        matcher: Optional[FieldMatcher] = None,
        validator: Optional[RangeValidator] = None,
        settings: Optional[OCRSettings] = None,
    ):
        self.matcher = matcher or FieldMatcher()
        self.validator = validator or RangeValidator()
        self.settings = settings or ocr_settings

    def process_page(self, lines: Sequence[VisualLine], result: ExtractionResult) -> int:
        """
        Extract values from one page into result.

        Returns:
            Number of values accepted from this page
        """
        accepted_before = len(result.values)

        for index, line in enumerate(lines):
            if not line.words:
                continue
            text = line.text

            if is_service_line(text) and not line.has_digits:
                continue

            if _is_in_progress(text):
                self._record_pending(text, result)
                continue

            key = self.matcher.match(text, result.values)
            if key is not None:
                self._resolve_matched_line(lines, index, key, result)
                continue

            candidate = rescue_line(RescueContext(
                lines=lines,
                index=index,
                resolved=result.values,
                matcher=self.matcher,
                validator=self.validator,
                settings=self.settings,
            ))
            if candidate is not None:
                result.accept(candidate.key, candidate.value)
                continue

            logger.debug(f"Unmatched line: '{shorten(text, 100)}'")

        accepted = len(result.values) - accepted_before
        logger.info(f"Page processed: {len(lines)} lines, {accepted} values accepted")
        return accepted

    def _record_pending(self, text: str, result: ExtractionResult):
        key = self.matcher.match(text, result.values)
        if key is None:
            logger.debug(f"In-progress line without a known field: '{shorten(text)}'")
            return
        name = _pending_name(text)
        logger.info(f"{key}: result pending ('{shorten(name)}')")
        result.add_pending(name, key)

    def _resolve_matched_line(
        self,
        lines: Sequence[VisualLine],
        index: int,
        key: str,
        result: ExtractionResult
    ):
        line = lines[index]
        name_end = self.matcher.name_end_x(key, line)
        value_words = [w for w in line.words if w.x1 > name_end]

        found = run_cascade(CascadeContext(
            lines=lines,
            index=index,
            key=key,
            value_words=value_words,
            matcher=self.matcher,
            validator=self.validator,
            settings=self.settings,
        ))
        if found is not None:
            _, value = found
            result.accept(key, value)
            return

        # Name and "Выполняется" OCR'd as two separate lines
        if self._pending_neighbour(lines, index) is not None:
            logger.info(f"{key}: result pending ('{shorten(line.text)}')")
            result.add_pending(line.text, key)
            return

        logger.warning(f"{key}: name matched but no valid value found. Line: '{shorten(line.text)}'")

    def _pending_neighbour(self, lines: Sequence[VisualLine], index: int) -> Optional[VisualLine]:
        """In-progress marker line without a field name in the row band."""
        line = lines[index]
        tolerance = line.avg_height * self.settings.SAME_ROW_TOLERANCE
        neighbours: List[VisualLine] = [
            other for j, other in enumerate(lines)
            if j != index and abs(other.center_y - line.center_y) <= tolerance
        ]
        for other in neighbours:
            text = other.text
            if _is_in_progress(text) and self.matcher.match(text) is None:
                return other
        return None
