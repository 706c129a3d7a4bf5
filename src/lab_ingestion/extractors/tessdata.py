# ============================================================================
# src/lab_ingestion/extractors/tessdata.py
# ============================================================================
"""
Tesseract Language Data Cache

Downloads missing *.traineddata files from the public tessdata repository
into a local directory on first use.

Concurrent first requests share one lock so every file is fetched once, and
each file is written to a temporary name and renamed into place so a reader
never sees a half-written model.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

import aiohttp

from ..config import base_settings, ocr_settings
from ..utils.exceptions import AssetDownloadError, ConfigurationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 16


def split_languages(languages: str) -> List[str]:
    """'rus+eng' -> ['rus', 'eng']"""
    return [lang.strip() for lang in languages.split("+") if lang.strip()]


class TessdataManager:
    """Download-once cache of Tesseract language files."""

    def __init__(
        self,
        tessdata_dir: Optional[Path] = None,
        languages: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.tessdata_dir = Path(tessdata_dir or base_settings.TESSDATA_DIR)
        self.languages = split_languages(languages or ocr_settings.OCR_LANGUAGES)
        if not self.languages:
            raise ConfigurationError(f"no Tesseract languages in '{languages}'")
        self.base_url = (base_url or base_settings.TESSDATA_BASE_URL).rstrip("/")
        self.timeout = timeout or base_settings.ASSET_DOWNLOAD_TIMEOUT
        self._lock = asyncio.Lock()

    def asset_path(self, language: str) -> Path:
        return self.tessdata_dir / f"{language}.traineddata"

    def missing_languages(self) -> List[str]:
        return [lang for lang in self.languages if not self.asset_path(lang).exists()]

    async def ensure_languages(self, force: bool = False) -> Path:
        """
        Make sure every configured language file is present locally.

        Args:
            force: Re-download files that already exist

        Returns:
            The tessdata directory, ready to pass to Tesseract

        Raises:
            AssetDownloadError: a file could not be fetched
        """
        if not force and not self.missing_languages():
            return self.tessdata_dir

        async with self._lock:
            # Another request may have finished the download while we waited
            pending = self.languages if force else self.missing_languages()
            if not pending:
                return self.tessdata_dir

            self.tessdata_dir.mkdir(parents=True, exist_ok=True)
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                for language in pending:
                    await self._download(session, language)

        return self.tessdata_dir

    async def _download(self, session: aiohttp.ClientSession, language: str):
        url = f"{self.base_url}/{language}.traineddata"
        target = self.asset_path(language)
        logger.info(f"Downloading Tesseract language data: {url}")

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{language}.", suffix=".part", dir=str(self.tessdata_dir)
        )
        try:
            size = 0
            with os.fdopen(fd, "wb") as tmp:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise AssetDownloadError(
                            f"{url} returned {response.status}", asset=language
                        )
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        tmp.write(chunk)
                        size += len(chunk)

            if size == 0:
                raise AssetDownloadError(f"{url} returned an empty file", asset=language)

            os.replace(tmp_name, target)
            logger.info(f"Saved {target.name} ({size / (1024 * 1024):.1f} MB)")
        except asyncio.TimeoutError as e:
            raise AssetDownloadError(
                f"download of {language} timed out after {self.timeout}s", asset=language
            ) from e
        except aiohttp.ClientError as e:
            raise AssetDownloadError(f"download of {language} failed: {e}", asset=language) from e
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)


_manager: Optional[TessdataManager] = None


def get_tessdata_manager() -> TessdataManager:
    """Process-wide manager so all requests share one download lock."""
    global _manager
    if _manager is None:
        _manager = TessdataManager()
    return _manager
