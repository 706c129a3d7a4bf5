# ============================================================================
# src/lab_ingestion/config/vision_config.py
# ============================================================================
"""
Vision Model Configuration (Gemini generateContent)
- API key and model
- Request timeout
- Sampling temperature
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class VisionSettings(BaseSettings):
    VISION_ENABLED: bool = Field(
        default=True,
        description="Try the vision model before local OCR when a key is configured"
    )
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        description="Gemini API key. Without it the vision path is skipped."
    )
    GEMINI_MODEL: str = Field(
        default="gemini-2.5-flash",
        description="Multimodal model that reads the page images"
    )
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generateContent API"
    )
    VISION_TIMEOUT: int = Field(
        default=120,
        gt=0,
        description="Total timeout for the single multi-page request (seconds)"
    )
    VISION_TEMPERATURE: float = Field(
        default=0.1,
        ge=0.0, le=2.0,
        description="Sampling temperature (low = deterministic transcription)"
    )


vision_settings = VisionSettings()
