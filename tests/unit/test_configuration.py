# ============================================================================
# FILE: tests/unit/test_configuration.py
# ============================================================================
"""
Configuration loading and environment overrides
"""

from pathlib import Path

import pytest
from pydantic import ValidationError


def test_configuration():
    """Test that configuration loads correctly"""
    from lab_ingestion.config import base_settings, ocr_settings, vision_settings, logging_settings

    assert base_settings.TESSDATA_DIR == Path("tessdata")
    assert base_settings.TESSDATA_BASE_URL.startswith("https://")
    assert ocr_settings.OCR_LANGUAGES == "rus+eng"
    assert ocr_settings.OCR_MIN_WORD_CONFIDENCE == 60
    assert ocr_settings.RENDER_SCALE == 3.0
    assert vision_settings.GEMINI_MODEL
    assert logging_settings.LOG_LEVEL


def test_tolerances_are_ordered():
    """Test fallback search bands widen from line grouping to rescue"""
    from lab_ingestion.config import OCRSettings

    settings = OCRSettings()
    assert settings.LINE_GROUPING_TOLERANCE < settings.PREVIOUS_LINE_TOLERANCE
    assert settings.PREVIOUS_LINE_TOLERANCE < settings.SAME_ROW_TOLERANCE
    assert settings.SAME_ROW_TOLERANCE < settings.RESCUE_TOLERANCE


def test_environment_override(monkeypatch):
    """Test settings are read from the environment"""
    from lab_ingestion.config import OCRSettings, VisionSettings

    monkeypatch.setenv("RENDER_SCALE", "2.5")
    monkeypatch.setenv("OCR_LANGUAGES", "rus")
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")

    assert OCRSettings().RENDER_SCALE == 2.5
    assert OCRSettings().OCR_LANGUAGES == "rus"
    assert VisionSettings().GEMINI_API_KEY == "test-key"


def test_vision_key_optional(monkeypatch):
    """Test vision stays unconfigured without a key"""
    from lab_ingestion.config import VisionSettings

    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    assert VisionSettings().GEMINI_API_KEY is None


def test_invalid_values_rejected():
    """Test configuration validators"""
    from lab_ingestion.config import OCRSettings, VisionSettings

    with pytest.raises(ValidationError):
        OCRSettings(RENDER_SCALE=0)
    with pytest.raises(ValidationError):
        OCRSettings(OCR_MIN_WORD_CONFIDENCE=150)
    with pytest.raises(ValidationError):
        VisionSettings(VISION_TIMEOUT=0)


def test_create_directories(tmp_path):
    """Test tessdata cache directory creation"""
    from lab_ingestion.config import BaseSettingsConfig

    settings = BaseSettingsConfig(TESSDATA_DIR=tmp_path / "cache" / "tessdata")
    settings.create_directories()
    assert settings.TESSDATA_DIR.is_dir()
