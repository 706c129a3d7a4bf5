# src/lab_ingestion/processors/lab/utils/parsing.py
"""
Token-level parsing utilities for lab value extraction.

Lab tables put the result, its unit and the reference range on one row, so
a single recognized token can be a value, a unit fragment or half of a
range. These helpers classify tokens; value_extractor.py decides.
"""

import math
import re
from datetime import date
from typing import Optional

NUMBER_RE = re.compile(r'^(\d+[.,]\d+|\d+)$')
RANGE_RE = re.compile(r'^\d+[.,]?\d*[-–—]\d+[.,]?\d*$')
RANGE_IN_TEXT_RE = re.compile(r'\d+[.,]?\d*[-–—]\d+[.,]?\d*')
DASHES = ("-", "–", "—")

COMPARISON_CHARS = ("<", ">", "≤", "≥")
COMPARISON_WORDS = ("менее", "более")

# Case-sensitive on purpose: "Ед" and "МЕ" are unit spellings, "ед"/"ме" are
# common inside words
UNIT_MARKERS = ("моль", "Ед", "мл", "МЕ", "сек", "г/л", "нг")

MAX_VALUE_TOKEN_LENGTH = 10

CYRILLIC_WORD_RE = re.compile(r'[а-яёА-ЯЁ]{3,}')
DATE_RE = re.compile(r'\b(\d{1,2})[./](\d{1,2})[./](\d{4})\b')


def parse_number(token: str) -> Optional[float]:
    """
    Parse a bare decimal token ("24.67", "5,2", "120").

    Returns None for anything else, including signed numbers and ranges.
    """
    token = token.strip()
    if not NUMBER_RE.match(token):
        return None
    try:
        return float(token.replace(",", "."))
    except ValueError:
        return None


def parse_decimal(value_str: str) -> Optional[float]:
    """
    Parse a free-text result cell ("5,5", " 24.67 ").

    Used for vision replies, where the model already isolated the value.
    """
    if value_str is None:
        return None
    cleaned = str(value_str).strip().replace(",", ".").replace(" ", "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    # "NaN", "inf"
    return value if math.isfinite(value) else None


def is_range_token(token: str) -> bool:
    """'8.33-30.19', '3,4–6,3'"""
    return bool(RANGE_RE.match(token.strip()))


def contains_range(text: str) -> bool:
    """Text holds a reference range somewhere ("3.4-6.3 ммоль/л")."""
    return bool(RANGE_IN_TEXT_RE.search(text))


def has_comparison(token: str) -> bool:
    return any(ch in token for ch in COMPARISON_CHARS)


def is_comparison_prefix(token: str) -> bool:
    """Token that turns the following number into a bound ("<", "≥5", "менее")."""
    token = token.strip()
    if token.startswith(COMPARISON_CHARS):
        return True
    return token.lower() in COMPARISON_WORDS


def has_unit(token: str) -> bool:
    if any(marker in token for marker in UNIT_MARKERS):
        return True
    return "%" in token and len(token) > 3


def is_lone_dash(token: str) -> bool:
    return token.strip() in DASHES


def starts_negative_number(token: str) -> bool:
    """'-30.19' style second half of a range split across two tokens."""
    token = token.strip()
    return len(token) > 1 and token[0] in DASHES and token[1].isdigit()


def ends_with_dash(token: str) -> bool:
    """'3.9-' style first half of a range split across two tokens."""
    token = token.strip()
    return len(token) > 1 and token[-1] in DASHES and parse_number(token[:-1]) is not None


def has_cyrillic_word(text: str) -> bool:
    """True when text contains a Cyrillic word of 3+ letters."""
    return bool(CYRILLIC_WORD_RE.search(text))


def parse_date(text: str) -> Optional[date]:
    """
    First plausible DD.MM.YYYY or DD/MM/YYYY date in text.
    """
    if not text:
        return None
    for match in DATE_RE.finditer(text):
        day, month, year = (int(g) for g in match.groups())
        if not 1900 <= year <= 2100:
            continue
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None
