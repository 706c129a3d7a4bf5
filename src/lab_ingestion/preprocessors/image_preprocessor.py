# ============================================================================
# src/lab_ingestion/preprocessors/image_preprocessor.py
# ============================================================================
"""
OpenCV-based Page Preprocessing for Lab Reports

Prepares rendered pages for Tesseract and the vision model:
- Grayscale conversion
- Contrast normalization (CLAHE)
- Binarization (Gaussian adaptive threshold)
- PNG re-encoding
"""

from typing import Optional
import logging

import cv2
import numpy as np

from ..config import ocr_settings
from ..utils.exceptions import ImagePreprocessingError

logger = logging.getLogger(__name__)


class ImagePreprocessor:
    """
    Pipeline:
    1. Convert BGR / BGRA / gray input to grayscale
    2. CLAHE contrast enhancement
    3. Adaptive thresholding
    4. Encode as PNG
    """

    def __init__(
        self,
        clip_limit: Optional[float] = None,
        tile_size: Optional[int] = None,
        block_size: Optional[int] = None,
        threshold_c: Optional[float] = None,
    ):
        self.clip_limit = clip_limit or ocr_settings.CLAHE_CLIP_LIMIT
        self.tile_size = tile_size or ocr_settings.CLAHE_TILE_SIZE
        self.block_size = block_size or ocr_settings.THRESHOLD_BLOCK_SIZE
        self.threshold_c = ocr_settings.THRESHOLD_C if threshold_c is None else threshold_c

        # OpenCV rejects even neighbourhoods
        if self.block_size % 2 == 0:
            self.block_size += 1

    def preprocess(self, pixels: np.ndarray) -> bytes:
        """
        Preprocess one rendered page.

        Args:
            pixels: Page buffer (BGR, BGRA or grayscale)

        Returns:
            PNG-encoded binarized page
        """
        gray = self._to_grayscale(pixels)
        gray = self._enhance_contrast(gray)
        binary = self._adaptive_threshold(gray)

        ok, encoded = cv2.imencode(".png", binary)
        if not ok:
            raise ImagePreprocessingError("PNG encoding failed")
        return encoded.tobytes()

    def _to_grayscale(self, image: np.ndarray) -> np.ndarray:
        if image is None or image.size == 0:
            raise ImagePreprocessingError("empty page image")

        if image.dtype != np.uint8:
            image = image.astype(np.uint8)

        if image.ndim == 2:
            return image
        channels = image.shape[2]
        if channels == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        if channels == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        if channels == 1:
            return image[:, :, 0]
        raise ImagePreprocessingError(f"unsupported channel count: {channels}")

    def _enhance_contrast(self, image: np.ndarray) -> np.ndarray:
        clahe = cv2.createCLAHE(
            clipLimit=self.clip_limit,
            tileGridSize=(self.tile_size, self.tile_size)
        )
        return clahe.apply(image)

    def _adaptive_threshold(self, image: np.ndarray) -> np.ndarray:
        return cv2.adaptiveThreshold(
            image,
            maxValue=255,
            adaptiveMethod=cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            thresholdType=cv2.THRESH_BINARY,
            blockSize=self.block_size,
            C=self.threshold_c
        )
