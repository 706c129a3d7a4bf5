# ============================================================================
# src/lab_ingestion/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .field_names import (
    FIELD_PATTERNS,
    NON_HDL_MARKERS,
    TOTAL_MARKER,
    VLDL_MARKERS,
    HBA1C_MARKERS,
)
from .plausibility_ranges import PLAUSIBILITY_RANGES, DEFAULT_RANGE
from .service_lines import (
    SERVICE_LINE_MARKERS,
    SERVICE_LINE_MARKER_GROUPS,
    SHORT_SECTION_TITLES,
    MIN_LINE_LENGTH,
    IN_PROGRESS_MARKER,
)
from . import messages
