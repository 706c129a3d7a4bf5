# ============================================================================
# src/lab_ingestion/core/context/enums.py
# ============================================================================
"""
Extraction Enums
- Strategy outcomes
- Strategy identifiers
"""

from enum import Enum


class ExtractionOutcome(str, Enum):
    HAS_VALUES = "has_values"   # At least one validated value
    NO_VALUES = "no_values"     # Ran cleanly, nothing accepted
    ERROR = "error"             # Strategy raised, diagnostics recorded


class ExtractionSource(str, Enum):
    VISION = "vision"
    OCR = "ocr"
