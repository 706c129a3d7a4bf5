#!/usr/bin/env python3
# ============================================================================
# scripts/download_tessdata.py
# ============================================================================
"""
Tesseract Language Data Download Script

Fetches the *.traineddata files the OCR path needs into TESSDATA_DIR, so a
fresh deployment does not download them on its first upload.

Usage:
    python scripts/download_tessdata.py --list
    python scripts/download_tessdata.py
    python scripts/download_tessdata.py --languages rus+eng --force
    python scripts/download_tessdata.py --dir /var/cache/tessdata
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lab_ingestion.config import base_settings, ocr_settings
from lab_ingestion.extractors.tessdata import TessdataManager
from lab_ingestion.utils.exceptions import AssetDownloadError
from lab_ingestion.utils.logging import setup_logging


def list_languages(manager: TessdataManager, logger: logging.Logger):
    """Show configured languages and whether each is cached."""
    logger.info(f"Tessdata directory: {manager.tessdata_dir}")
    logger.info(f"Source: {manager.base_url}")
    for language in manager.languages:
        path = manager.asset_path(language)
        if path.exists():
            size_mb = path.stat().st_size / (1024 * 1024)
            logger.info(f"  {language:<6} cached ({size_mb:.1f} MB)")
        else:
            logger.info(f"  {language:<6} missing")


async def download(manager: TessdataManager, logger: logging.Logger, force: bool) -> bool:
    missing = manager.languages if force else manager.missing_languages()
    if not missing:
        logger.info("All language files already cached. Use --force to re-download")
        return True

    logger.info("=" * 60)
    logger.info(f"Downloading: {', '.join(missing)}")
    logger.info(f"Target: {manager.tessdata_dir}")
    logger.info("=" * 60)

    try:
        await manager.ensure_languages(force=force)
    except AssetDownloadError as e:
        logger.error(f"Download failed: {e}")
        return False

    logger.info("Download complete")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Download Tesseract language data for lab report OCR"
    )
    parser.add_argument(
        "--languages",
        default=ocr_settings.OCR_LANGUAGES,
        help=f"Tesseract language profile (default: {ocr_settings.OCR_LANGUAGES})"
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=base_settings.TESSDATA_DIR,
        help=f"Target directory (default: {base_settings.TESSDATA_DIR})"
    )
    parser.add_argument("--list", action="store_true", help="Show cache status and exit")
    parser.add_argument("--force", action="store_true", help="Re-download cached files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO")
    logger = logging.getLogger("download_tessdata")

    manager = TessdataManager(tessdata_dir=args.dir, languages=args.languages)

    if args.list:
        list_languages(manager, logger)
        return 0

    ok = asyncio.run(download(manager, logger, args.force))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
