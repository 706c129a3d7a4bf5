# ============================================================================
# src/lab_ingestion/config/base_config.py
# ============================================================================
"""
Base Configuration
- Project root
- OCR language data cache
- Asset download source and timeout
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings


class BaseSettingsConfig(BaseSettings):
    # Root project directory
    PROJECT_ROOT: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent.parent,
        description="Root directory of the project"
    )

    # Tesseract language files (*.traineddata)
    TESSDATA_DIR: Path = Field(
        default=Path("tessdata"),
        description="Local cache directory for Tesseract language data"
    )

    TESSDATA_BASE_URL: str = Field(
        default="https://github.com/tesseract-ocr/tessdata/raw/main",
        description="Public source of Tesseract language data"
    )

    ASSET_DOWNLOAD_TIMEOUT: int = Field(
        default=300,
        gt=0,
        description="Total timeout for one language file download (seconds)"
    )

    def create_directories(self):
        """Create the language data cache directory if it doesn't exist"""
        self.TESSDATA_DIR.mkdir(parents=True, exist_ok=True)


# Global instance
base_settings = BaseSettingsConfig()
