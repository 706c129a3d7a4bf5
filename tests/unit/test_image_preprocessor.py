"""
Unit tests for OpenCV page preprocessing
"""

import cv2
import numpy as np
import pytest

from lab_ingestion.preprocessors import ImagePreprocessor
from lab_ingestion.utils.exceptions import ImagePreprocessingError


def _page(channels):
    shape = (120, 160) if channels == 1 else (120, 160, channels)
    page = np.full(shape, 230, dtype=np.uint8)
    page[40:60, 20:140] = 20
    return page


def _decode(png):
    return cv2.imdecode(np.frombuffer(png, dtype=np.uint8), cv2.IMREAD_UNCHANGED)


@pytest.mark.parametrize("channels", [1, 3, 4])
def test_preprocess_to_binary_png(channels):
    """Test gray, BGR and BGRA pages become binarized PNGs"""
    png = ImagePreprocessor().preprocess(_page(channels))

    assert png.startswith(b"\x89PNG")
    decoded = _decode(png)
    assert decoded.shape == (120, 160)
    assert set(np.unique(decoded)) <= {0, 255}


def test_text_stays_dark():
    """Test dark strokes survive thresholding"""
    decoded = _decode(ImagePreprocessor().preprocess(_page(3)))

    assert decoded[42, 22] == 0
    assert decoded[100, 150] == 255


def test_even_block_size_adjusted():
    """Test OpenCV's odd neighbourhood requirement"""
    assert ImagePreprocessor(block_size=10).block_size == 11
    assert ImagePreprocessor(block_size=15).block_size == 15


def test_empty_page():
    """Test empty input is rejected"""
    with pytest.raises(ImagePreprocessingError):
        ImagePreprocessor().preprocess(np.zeros((0, 0, 3), dtype=np.uint8))
