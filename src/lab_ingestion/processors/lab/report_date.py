# src/lab_ingestion/processors/lab/report_date.py
"""Detect the sampling / report date printed on a lab report."""

from datetime import date
from typing import Optional, Sequence

from ...core.context import VisualLine
from .utils.parsing import parse_date

DATE_LABEL = "дата"
# Birth dates are never the report date
EXCLUDED_LABELS = ("рождения",)


def detect_report_date(lines: Sequence[VisualLine]) -> Optional[date]:
    """
    First date on a line labelled as a date, else the first date anywhere.

    Lines mentioning a birth date are ignored.
    """
    fallback: Optional[date] = None
    for line in lines:
        text = line.text
        lowered = text.lower()
        if any(label in lowered for label in EXCLUDED_LABELS):
            continue
        found = parse_date(text)
        if found is None:
            continue
        if DATE_LABEL in lowered:
            return found
        if fallback is None:
            fallback = found
    return fallback
