# src/lab_ingestion/processors/lab/__init__.py
"""
Lab table extraction from reconstructed OCR lines.
"""

from .line_reconstructor import group_words_into_lines
from .field_matcher import FieldMatcher, is_service_line
from .value_extractor import extract_numeric_value
from .fallback_cascade import CascadeContext, run_cascade, CASCADE
from .rescue_pass import RescueContext, RescueCandidate, rescue_line
from .ocr_line_processor import OcrLineProcessor
from .report_date import detect_report_date

__all__ = [
    "group_words_into_lines",
    "FieldMatcher",
    "is_service_line",
    "extract_numeric_value",
    "CascadeContext",
    "run_cascade",
    "CASCADE",
    "RescueContext",
    "RescueCandidate",
    "rescue_line",
    "OcrLineProcessor",
    "detect_report_date",
]
