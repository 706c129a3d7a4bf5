# src/lab_ingestion/processors/lab/fallback_cascade.py
"""
Fallback cascade for a matched field whose value is not next to its name.

OCR line reconstruction often separates a row's name from its value: the
row is split into two parallel blocks, the value wraps onto a continuation
line, or the name sits between its value and its reference range. Each
finder below handles one of these layouts. Finders run in priority order
and the first range-valid value wins.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from ...config import ocr_settings, OCRSettings
from ...core.context import RecognizedWord, VisualLine
from ...utils.logging import shorten
from ...validators import RangeValidator
from .field_matcher import FieldMatcher, is_service_line
from .utils.parsing import contains_range
from .value_extractor import extract_numeric_value

logger = logging.getLogger(__name__)


@dataclass
class CascadeContext:
    """Everything a finder may look at for one matched line."""
    lines: Sequence[VisualLine]
    index: int
    key: str
    value_words: List[RecognizedWord]
    matcher: FieldMatcher
    validator: RangeValidator
    settings: OCRSettings = field(default_factory=lambda: ocr_settings)

    @property
    def line(self) -> VisualLine:
        return self.lines[self.index]

    def distance_to(self, other: VisualLine) -> float:
        return abs(other.center_y - self.line.center_y)

    def is_candidate_line(self, other: VisualLine) -> bool:
        """
        A neighbour line that may hold this field's value: has digits, is
        not boilerplate, and does not name a different field.
        """
        if not other.has_digits:
            return False
        text = other.text
        if is_service_line(text):
            return False
        claimed = self.matcher.match(text)
        return claimed is None or claimed == self.key

    def valid_value(self, words: Sequence[RecognizedWord]) -> Optional[float]:
        value = extract_numeric_value(words, self.key, self.validator)
        if value is None:
            return None
        if not self.validator.is_valid(self.key, value):
            logger.debug(f"{self.key}: candidate {value} rejected by range check")
            return None
        return value


def matched_line(ctx: CascadeContext) -> Optional[float]:
    """Words right of the field name (the whole line when nothing is right of it)."""
    words = ctx.value_words or ctx.line.words
    return ctx.valid_value(words)


def same_row_band(ctx: CascadeContext) -> Optional[float]:
    """Other lines within the row band, nearest first (row split into two blocks)."""
    tolerance = ctx.line.avg_height * ctx.settings.SAME_ROW_TOLERANCE
    neighbours = [
        other for j, other in enumerate(ctx.lines)
        if j != ctx.index and ctx.distance_to(other) <= tolerance
    ]
    neighbours.sort(key=ctx.distance_to)

    for other in neighbours:
        if not ctx.is_candidate_line(other):
            continue
        value = ctx.valid_value(other.words)
        if value is not None:
            return value
    return None


def following_lines(ctx: CascadeContext) -> Optional[float]:
    """The next few lines, in order."""
    last = min(ctx.index + ctx.settings.FOLLOWING_LINES_LOOKAHEAD, len(ctx.lines) - 1)
    for j in range(ctx.index + 1, last + 1):
        other = ctx.lines[j]
        if not ctx.is_candidate_line(other):
            continue
        value = ctx.valid_value(other.words)
        if value is not None:
            return value
    return None


def previous_line(ctx: CascadeContext) -> Optional[float]:
    """The line above, when it is a short fragment or sits close."""
    if ctx.index == 0:
        return None
    other = ctx.lines[ctx.index - 1]
    if not ctx.is_candidate_line(other):
        return None

    close = ctx.distance_to(other) < ctx.line.avg_height * ctx.settings.PREVIOUS_LINE_TOLERANCE
    if len(other.text) < 30 or close:
        return ctx.valid_value(other.words)
    return None


def _close_next_line(ctx: CascadeContext) -> Optional[VisualLine]:
    if ctx.index + 1 >= len(ctx.lines):
        return None
    other = ctx.lines[ctx.index + 1]
    if not ctx.is_candidate_line(other):
        return None
    if ctx.distance_to(other) >= ctx.line.avg_height * ctx.settings.NEXT_LINE_TOLERANCE:
        return None
    return other


def combined_with_next(ctx: CascadeContext) -> Optional[float]:
    """Matched line plus the next one (value wrapped onto a continuation line)."""
    other = _close_next_line(ctx)
    if other is None:
        return None
    return ctx.valid_value(list(ctx.line.words) + list(other.words))


def range_only_next(ctx: CascadeContext) -> Optional[float]:
    """Matched line holds only the reference range; the value is on the next line."""
    if not contains_range(ctx.line.text):
        return None
    other = _close_next_line(ctx)
    if other is None:
        return None
    return ctx.valid_value(other.words)


Finder = Callable[[CascadeContext], Optional[float]]

CASCADE: Tuple[Finder, ...] = (
    matched_line,
    same_row_band,
    following_lines,
    previous_line,
    combined_with_next,
    range_only_next,
)


def run_cascade(
    ctx: CascadeContext,
    finders: Sequence[Finder] = CASCADE
) -> Optional[Tuple[str, float]]:
    """
    Run finders in order.

    Returns:
        (finder name, value) of the first range-valid value, or None
    """
    for finder in finders:
        value = finder(ctx)
        if value is not None:
            logger.info(
                f"Found {ctx.key} = {value} via {finder.__name__} "
                f"(line {ctx.index}: '{shorten(ctx.line.text)}')",
                extra={"key": ctx.key}
            )
            return finder.__name__, value
    return None
