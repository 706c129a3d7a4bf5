# src/lab_ingestion/processors/lab/utils/__init__.py

from .parsing import (
    parse_number,
    parse_decimal,
    parse_date,
    is_range_token,
    has_comparison,
    has_unit,
    has_cyrillic_word,
)

__all__ = [
    "parse_number",
    "parse_decimal",
    "parse_date",
    "is_range_token",
    "has_comparison",
    "has_unit",
    "has_cyrillic_word",
]
