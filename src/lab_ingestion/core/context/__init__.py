# src/lab_ingestion/core/context/__init__.py

from .enums import ExtractionOutcome, ExtractionSource
from .recognized_word import RecognizedWord, VisualLine
from .extraction_result import ExtractionResult, StrategyResult

__all__ = [
    "ExtractionOutcome",
    "ExtractionSource",
    "RecognizedWord",
    "VisualLine",
    "ExtractionResult",
    "StrategyResult",
]
