# src/lab_ingestion/extractors/pdf_rasterizer.py
"""
PDF Page Rasterization

Renders every page of an uploaded PDF into a pixel buffer with pypdfium2.
Lab tables use small fonts, so pages are oversampled (3x = ~216 dpi) before
any recognition happens.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np
import pypdfium2

from ..config import ocr_settings
from ..utils.exceptions import PDFRasterizationError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


@dataclass
class PageBitmap:
    """One rendered page."""
    page_number: int  # 1-based
    width: int
    height: int
    pixels: np.ndarray  # (height, width, channels) BGR(A) or (height, width) gray


def rasterize_pdf(pdf_bytes: bytes, scale: Optional[float] = None) -> List[PageBitmap]:
    """
    Render all pages of a PDF.

    Args:
        pdf_bytes: Raw PDF content
        scale: Render scale relative to 72 dpi (defaults to RENDER_SCALE)

    Returns:
        Rendered pages in document order. Pages that render to an empty
        bitmap are skipped.

    Raises:
        PDFRasterizationError: input is empty, not a PDF, or pdfium fails
    """
    if not pdf_bytes:
        raise PDFRasterizationError("empty document")
    if PDF_MAGIC not in pdf_bytes[:1024]:
        raise PDFRasterizationError("not a PDF document")

    scale = scale or ocr_settings.RENDER_SCALE
    pages: List[PageBitmap] = []

    try:
        pdf = pypdfium2.PdfDocument(pdf_bytes)
    except pypdfium2.PdfiumError as e:
        raise PDFRasterizationError(f"cannot open PDF: {e}") from e

    try:
        for index in range(len(pdf)):
            page = pdf[index]
            try:
                bitmap = page.render(scale=scale)
                # Copy out of the pdfium-owned buffer before it is released
                pixels = np.array(bitmap.to_numpy(), copy=True)
            finally:
                page.close()

            if pixels.size == 0:
                logger.warning(f"Page {index + 1} rendered empty, skipping")
                continue

            pages.append(PageBitmap(
                page_number=index + 1,
                width=pixels.shape[1],
                height=pixels.shape[0],
                pixels=pixels,
            ))
    except pypdfium2.PdfiumError as e:
        raise PDFRasterizationError(f"cannot render PDF: {e}") from e
    finally:
        pdf.close()

    logger.info(f"Rasterized {len(pages)} page(s) at scale {scale}")
    return pages
