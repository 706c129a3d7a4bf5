# src/lab_ingestion/processors/lab/rescue_pass.py
"""
Rescue pass for numeric-only lines.

Some renderings put a field's name and its value so far apart (or across so
much noise) that the name line never finds its value. When a line carries
numbers but no field name, look back for an unclaimed field name and give
it the value.

Candidates come from independent sources, ranked:
1. a name on the same line, left of the first value
2. the nearest preceding line with an unresolved name
3. the value closest to the key's range floor
"""

from dataclasses import dataclass, field
from typing import Callable, Collection, List, Optional, Sequence, Tuple
import logging

from ...config import ocr_settings, OCRSettings
from ...constants import DEFAULT_RANGE
from ...core.context import VisualLine
from ...utils.logging import shorten
from ...validators import RangeValidator
from .field_matcher import FieldMatcher, is_service_line
from .utils.parsing import contains_range, has_cyrillic_word, is_range_token
from .value_extractor import extract_numeric_value

logger = logging.getLogger(__name__)

MIN_RESCUE_LINE_LENGTH = 10
MAX_PLAIN_LINE_LENGTH = 50


@dataclass
class RescueCandidate:
    key: str
    value: float
    look_back: int  # 0 = name on the same line
    name_text: str

    @property
    def same_line(self) -> bool:
        return self.look_back == 0


@dataclass
class RescueContext:
    lines: Sequence[VisualLine]
    index: int
    resolved: Collection[str]
    matcher: FieldMatcher
    validator: RangeValidator
    settings: OCRSettings = field(default_factory=lambda: ocr_settings)

    @property
    def line(self) -> VisualLine:
        return self.lines[self.index]

    def candidates_for(self, name_text: str, look_back: int) -> List[RescueCandidate]:
        found = []
        for key in self.matcher.matching_keys(name_text, self.resolved):
            value = extract_numeric_value(self.line.words, key, self.validator)
            if value is not None and self.validator.is_valid(key, value):
                found.append(RescueCandidate(key, value, look_back, name_text))
        return found


def is_numeric_only_line(line: VisualLine) -> bool:
    """
    Line with numbers and no Cyrillic word, short unless it holds a range.
    """
    text = line.text
    if not line.has_digits or len(text) <= MIN_RESCUE_LINE_LENGTH:
        return False
    if any(has_cyrillic_word(w.text) for w in line.words):
        return False
    return len(text) < MAX_PLAIN_LINE_LENGTH or contains_range(text)


def same_line_names(ctx: RescueContext) -> List[RescueCandidate]:
    """Words left of the first non-range number on the line."""
    value_xs = [
        w.x1 for w in ctx.line.words
        if w.has_digit and not is_range_token(w.text)
    ]
    if not value_xs:
        return []
    first_value_x = min(value_xs)
    name_words = [w for w in ctx.line.words if w.x1 < first_value_x]
    if not name_words:
        return []
    return ctx.candidates_for(" ".join(w.text for w in name_words), 0)


def preceding_line_names(ctx: RescueContext) -> List[RescueCandidate]:
    """Up to RESCUE_MAX_LOOKBACK preceding lines inside the wide band."""
    tolerance = ctx.line.avg_height * ctx.settings.RESCUE_TOLERANCE
    max_look_back = min(ctx.settings.RESCUE_MAX_LOOKBACK, ctx.index)
    found: List[RescueCandidate] = []

    for look_back in range(1, max_look_back + 1):
        if len(found) >= ctx.settings.RESCUE_MAX_CANDIDATES:
            break
        previous = ctx.lines[ctx.index - look_back]
        text = previous.text
        if is_service_line(text):
            continue
        if abs(previous.center_y - ctx.line.center_y) > tolerance:
            continue
        found.extend(ctx.candidates_for(text, look_back))

    return found[:ctx.settings.RESCUE_MAX_CANDIDATES]


CandidateSource = Callable[[RescueContext], List[RescueCandidate]]

RESCUE_SOURCES: Tuple[CandidateSource, ...] = (
    same_line_names,
    preceding_line_names,
)


def _rank(candidate: RescueCandidate, validator: RangeValidator):
    floor = (validator.range_for(candidate.key) or DEFAULT_RANGE)[0]
    return (
        0 if candidate.same_line else 1,
        candidate.look_back,
        abs(candidate.value - floor),
    )


def rescue_line(
    ctx: RescueContext,
    sources: Sequence[CandidateSource] = RESCUE_SOURCES
) -> Optional[RescueCandidate]:
    """
    Find the best unresolved field for a numeric-only line.

    Returns:
        The winning candidate, or None when the line is not numeric-only
        or no unresolved name nearby takes a valid value from it.
    """
    if not is_numeric_only_line(ctx.line):
        return None

    candidates: List[RescueCandidate] = []
    for source in sources:
        candidates.extend(source(ctx))

    if not candidates:
        logger.debug(f"Numeric-only line '{shorten(ctx.line.text, 40)}' matched no name")
        return None

    best = min(candidates, key=lambda c: _rank(c, ctx.validator))
    where = "same line" if best.same_line else f"line -{best.look_back}"
    logger.info(
        f"Rescued {best.key} = {best.value} from '{shorten(ctx.line.text, 30)}' "
        f"(name in {where}: '{shorten(best.name_text, 40)}')"
    )
    return best
