# ============================================================================
# src/lab_ingestion/validators/__init__.py
# ============================================================================

from .range_validator import RangeValidator

__all__ = ["RangeValidator"]
