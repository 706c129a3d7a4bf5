# ============================================================================
# src/lab_ingestion/__init__.py
# ============================================================================
"""
Lab Report Ingestion Engine

Extracts named numeric lab measurements from lab-report PDFs, via a Gemini
vision model when configured and local Tesseract OCR otherwise.
"""

__version__ = "0.1.0"

from .core.context import ExtractionResult, ExtractionOutcome
from .core.orchestrator import LabReportParser

__all__ = ["LabReportParser", "ExtractionResult", "ExtractionOutcome", "__version__"]
