# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.

Most pipeline tests build word boxes by hand instead of running Tesseract:
a row is a list of (text, x1) pairs at a given y, every word WORD_HEIGHT
pixels tall.
"""

import io
from typing import List, Sequence, Tuple

import pytest

from lab_ingestion.core.context import ExtractionResult, RecognizedWord, VisualLine
from lab_ingestion.processors.lab import FieldMatcher, OcrLineProcessor
from lab_ingestion.validators import RangeValidator

WORD_HEIGHT = 20.0
CHAR_WIDTH = 10.0


def make_word(text: str, x1: float, y: float, height: float = WORD_HEIGHT) -> RecognizedWord:
    """Word whose box starts at x1 and is vertically centered on y."""
    width = max(len(text), 1) * CHAR_WIDTH
    return RecognizedWord(
        text=text,
        bbox=(x1, y - height / 2, x1 + width, y + height / 2),
        confidence=95.0,
    )


def make_line(tokens: Sequence[Tuple[str, float]], y: float) -> VisualLine:
    """Visual line from (text, x1) pairs, all on row y."""
    return VisualLine(words=[make_word(text, x1, y) for text, x1 in tokens])


def layout_line(text: str, y: float, x: float = 0.0) -> VisualLine:
    """Visual line from plain text, words laid out left to right."""
    words: List[RecognizedWord] = []
    for token in text.split():
        words.append(make_word(token, x, y))
        x += (len(token) + 1) * CHAR_WIDTH
    return VisualLine(words=words)


@pytest.fixture
def matcher():
    return FieldMatcher()


@pytest.fixture
def validator():
    return RangeValidator()


@pytest.fixture
def result():
    return ExtractionResult(source="ocr")


@pytest.fixture
def line_processor(matcher, validator):
    return OcrLineProcessor(matcher, validator)


@pytest.fixture
def sample_pdf_bytes():
    """Two-page lab report PDF generated with reportlab."""
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setFont("Helvetica", 11)
    pdf.drawString(72, 760, "Sample report 12.03.2024")
    pdf.drawString(72, 720, "Testosterone total 24.67 nmol/l 8.33-30.19")
    pdf.showPage()
    pdf.drawString(72, 760, "Glucose 5.2 mmol/l 3.9-6.1")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@pytest.fixture
def sample_vision_reply():
    """Gemini reply wrapped in a markdown fence, as models often send it."""
    return """```json
{
  "date": "12.03.2024",
  "rows": [
    {"name": "Тестостерон общий", "result": "24,67", "unit": "нмоль/л", "reference": "8.33-30.19"},
    {"name": "Глюкоза", "result": "5.5", "unit": "ммоль/л", "reference": "3.9-6.1"},
    {"name": "Витамин D (25-OH)", "result": "Выполняется", "unit": "", "reference": ""},
    {"name": "Пролактин", "result": "5000", "unit": "мЕд/л", "reference": "86-324"}
  ]
}
```"""
