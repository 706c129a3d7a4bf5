# src/lab_ingestion/extractors/__init__.py
"""
Page Extraction Module

- Rasterization (pypdfium2)
- Word recognition (Tesseract) and its language data cache
- Vision model transcription (Gemini) and reply parsing
"""

from .pdf_rasterizer import PageBitmap, rasterize_pdf
from .ocr_extractor import WordRecognizer, RecognizedPage
from .tessdata import TessdataManager, get_tessdata_manager
from .vlm_client import GeminiVisionClient
from .vision_parser import parse_vision_response, extract_json_payload

__all__ = [
    "PageBitmap",
    "rasterize_pdf",
    "WordRecognizer",
    "RecognizedPage",
    "TessdataManager",
    "get_tessdata_manager",
    "GeminiVisionClient",
    "parse_vision_response",
    "extract_json_payload",
]
