# src/lab_ingestion/extractors/ocr_extractor.py
"""
OCR Word Recognition for Lab Report Pages

Runs Tesseract (via pytesseract) over a preprocessed page and returns
word-level boxes with confidences. Line structure is rebuilt later from the
box geometry, so only individual words are kept here.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import io
import logging

import pytesseract
from PIL import Image

from ..config import ocr_settings
from ..core.context import RecognizedWord
from ..utils.exceptions import OCRError

logger = logging.getLogger(__name__)

# Tesseract result level for single words
WORD_LEVEL = 5

CYRILLIC = "абвгдеёжзийклмнопрстуфхцчшщъыьэюяАБВГДЕЁЖЗИЙКЛМНОПРСТУФХЦЧШЩЪЫЬЭЮЯ"
LATIN = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
PUNCTUATION = ".,-%<>≤≥()/"
CHAR_WHITELIST = CYRILLIC + LATIN + DIGITS + PUNCTUATION


@dataclass
class RecognizedPage:
    """Words recognized on one page."""
    page_number: int
    words: List[RecognizedWord] = field(default_factory=list)
    mean_confidence: float = 0.0


class WordRecognizer:
    """
    Tesseract word recognizer.

    Create one per extraction call; it holds no state between pages apart
    from its configuration.
    """

    def __init__(
        self,
        tessdata_dir: Optional[Path] = None,
        languages: Optional[str] = None,
        min_confidence: Optional[float] = None,
        page_segmentation_mode: Optional[int] = None,
    ):
        self.tessdata_dir = Path(tessdata_dir) if tessdata_dir else None
        self.languages = languages or ocr_settings.OCR_LANGUAGES
        self.min_confidence = (
            ocr_settings.OCR_MIN_WORD_CONFIDENCE if min_confidence is None else min_confidence
        )
        self.page_segmentation_mode = (
            page_segmentation_mode or ocr_settings.OCR_PAGE_SEGMENTATION_MODE
        )

    def build_config(self) -> str:
        parts = [f"--psm {self.page_segmentation_mode}"]
        if self.tessdata_dir is not None:
            parts.append(f'--tessdata-dir "{self.tessdata_dir}"')
        parts.append(f"-c tessedit_char_whitelist={CHAR_WHITELIST}")
        return " ".join(parts)

    def recognize(self, png_bytes: bytes, page_number: int = 1) -> RecognizedPage:
        """
        Recognize the words on one preprocessed page.

        Args:
            png_bytes: Preprocessed page image (PNG)
            page_number: 1-based page number, for logging

        Returns:
            RecognizedPage with the words at or above the confidence floor

        Raises:
            OCRError: image cannot be decoded or Tesseract fails
        """
        try:
            image = Image.open(io.BytesIO(png_bytes))
            image.load()
        except (OSError, ValueError) as e:
            raise OCRError(f"page {page_number}: cannot decode image: {e}") from e

        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.languages,
                config=self.build_config(),
                output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OCRError(f"page {page_number}: tesseract failed: {e}") from e

        words = []
        confidences = []

        for i, text in enumerate(data["text"]):
            if int(data["level"][i]) != WORD_LEVEL:
                continue
            text = (text or "").strip()
            if not text:
                continue

            conf = float(data["conf"][i])
            if conf < 0:
                continue
            confidences.append(conf)

            if conf < self.min_confidence:
                continue

            # Tesseract provides left, top, width, height
            x0 = float(data["left"][i])
            y0 = float(data["top"][i])
            x1 = x0 + float(data["width"][i])
            y1 = y0 + float(data["height"][i])
            words.append(RecognizedWord(text=text, bbox=(x0, y0, x1, y1), confidence=conf))

        mean_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            f"Page {page_number}: {len(words)}/{len(confidences)} words kept, "
            f"mean confidence {mean_confidence:.1f}",
            extra={"page": page_number}
        )

        return RecognizedPage(
            page_number=page_number,
            words=words,
            mean_confidence=mean_confidence
        )
