# ============================================================================
# src/lab_ingestion/validators/range_validator.py
# ============================================================================
"""
Plausibility Range Gate

Every candidate value passes through here before it is written into a
result. Bounds are wide physiological limits, not reference ranges: they
exist to reject reference-range fragments, dates, page numbers and OCR
noise that happen to sit next to a field name.

Example:
- Testosterone 24.67 → PASS
- Testosterone 150 → FAIL (no plausible total testosterone is that high)
"""

from typing import Mapping, Optional, Tuple
import logging
import math

from ..constants import PLAUSIBILITY_RANGES


logger = logging.getLogger(__name__)


class RangeValidator:
    """
    Check candidate values against per-key plausibility bounds.

    Keys without a registered range accept any finite value.
    Bounds are inclusive.
    """

    def __init__(self, ranges: Optional[Mapping[str, Tuple[float, float]]] = None):
        self.ranges = PLAUSIBILITY_RANGES if ranges is None else ranges

    def range_for(self, key: str) -> Optional[Tuple[float, float]]:
        return self.ranges.get(key)

    def check(self, key: str, value: float) -> Tuple[bool, Optional[str]]:
        """
        Check if value is plausible for the key.

        Returns:
            (is_plausible, reason_if_not)
        """
        if not math.isfinite(value):
            return False, f"{value} is not a finite number"

        bounds = self.ranges.get(key)
        if bounds is None:
            return True, None

        min_val, max_val = bounds
        if value < min_val:
            return False, f"{value} below plausible minimum {min_val}"
        if value > max_val:
            return False, f"{value} above plausible maximum {max_val}"
        return True, None

    def is_valid(self, key: str, value: float) -> bool:
        valid, reason = self.check(key, value)
        if not valid:
            logger.debug(f"{key}: rejected, {reason}")
        return valid
