# src/lab_ingestion/processors/lab/line_reconstructor.py
"""
Rebuild table rows from OCR word boxes.

Tesseract's own line segmentation loses row structure on wide lab tables
(name, result, unit and reference columns far apart), so rows are rebuilt
here from word geometry alone.
"""

from typing import List, Optional, Sequence
import logging

from ...config import ocr_settings
from ...core.context import RecognizedWord, VisualLine

logger = logging.getLogger(__name__)


def group_words_into_lines(
    words: Sequence[RecognizedWord],
    tolerance_factor: Optional[float] = None
) -> List[VisualLine]:
    """
    Group words into visual lines by vertical center.

    Words are visited top to bottom. A word joins the most recently started
    line when its center is within tolerance of that line's mean center,
    otherwise it starts a new line. Tolerance is tolerance_factor times the
    page's mean word height.

    Rows that OCR split in two are left split; the fallback cascade
    compensates for them.
    """
    if not words:
        return []

    if tolerance_factor is None:
        tolerance_factor = ocr_settings.LINE_GROUPING_TOLERANCE

    avg_height = sum(w.height for w in words) / len(words)
    tolerance = avg_height * tolerance_factor

    ordered = sorted(words, key=lambda w: (w.center_y, w.x1))

    lines: List[VisualLine] = []
    for word in ordered:
        if lines and abs(lines[-1].center_y - word.center_y) <= tolerance:
            lines[-1].words.append(word)
        else:
            lines.append(VisualLine(words=[word]))

    for line in lines:
        line.words.sort(key=lambda w: w.x1)

    logger.debug(f"Grouped {len(words)} words into {len(lines)} lines (tolerance {tolerance:.1f}px)")
    return lines
