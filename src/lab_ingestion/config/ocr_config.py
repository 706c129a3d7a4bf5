# ============================================================================
# src/lab_ingestion/config/ocr_config.py
# ============================================================================
"""
OCR Pipeline Settings
- Page rendering scale
- Tesseract language profile and word confidence floor
- Preprocessing (CLAHE, adaptive threshold)
- Line grouping and fallback search tolerances

The tolerances are multiples of a line's average word height. They were tuned
by hand on sample reports and should be re-tuned against a real corpus.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class OCRSettings(BaseSettings):
    RENDER_SCALE: float = Field(
        default=3.0,
        gt=0.0,
        description="PDF render oversampling (1.0 = 72 dpi). Small table fonts need ~3x."
    )
    OCR_LANGUAGES: str = Field(
        default="rus+eng",
        description="Tesseract language profile"
    )
    OCR_MIN_WORD_CONFIDENCE: float = Field(
        default=60.0,
        ge=0.0, le=100.0,
        description="Words recognized below this confidence (0-100) are dropped"
    )
    OCR_PAGE_SEGMENTATION_MODE: int = Field(
        default=3,
        ge=0, le=13,
        description="Tesseract --psm (3 = fully automatic layout segmentation)"
    )

    CLAHE_CLIP_LIMIT: float = Field(default=2.0, gt=0.0)
    CLAHE_TILE_SIZE: int = Field(default=8, gt=0)
    THRESHOLD_BLOCK_SIZE: int = Field(
        default=15,
        ge=3,
        description="Adaptive threshold neighbourhood, must be odd"
    )
    THRESHOLD_C: float = Field(default=8.0)

    LINE_GROUPING_TOLERANCE: float = Field(
        default=0.5,
        gt=0.0,
        description="Words join a line when centers differ by <= this x page avg word height"
    )
    SAME_ROW_TOLERANCE: float = Field(
        default=3.0,
        gt=0.0,
        description="Band for lines that belong to the same printed row"
    )
    PREVIOUS_LINE_TOLERANCE: float = Field(default=2.0, gt=0.0)
    NEXT_LINE_TOLERANCE: float = Field(default=3.0, gt=0.0)
    RESCUE_TOLERANCE: float = Field(
        default=10.0,
        gt=0.0,
        description="Band searched backwards for a field name of a numeric-only line"
    )
    FOLLOWING_LINES_LOOKAHEAD: int = Field(default=3, ge=1)
    RESCUE_MAX_LOOKBACK: int = Field(default=20, ge=1)
    RESCUE_MAX_CANDIDATES: int = Field(default=15, ge=1)


ocr_settings = OCRSettings()
