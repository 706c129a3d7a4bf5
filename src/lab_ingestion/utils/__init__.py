# ============================================================================
# src/lab_ingestion/utils/__init__.py
# ============================================================================
"""
Utility modules for the lab ingestion engine.
"""

from .exceptions import (
    LabIngestionError,
    DocumentProcessingError,
    FatalDocumentError,
    PDFRasterizationError,
    ImagePreprocessingError,
    OCRError,
    TransientServiceError,
    VisionServiceError,
    AssetDownloadError,
    VisionResponseError,
    ConfigurationError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
    log_duration,
    shorten,
)

__all__ = [
    # Exceptions
    'LabIngestionError',
    'DocumentProcessingError',
    'FatalDocumentError',
    'PDFRasterizationError',
    'ImagePreprocessingError',
    'OCRError',
    'TransientServiceError',
    'VisionServiceError',
    'AssetDownloadError',
    'VisionResponseError',
    'ConfigurationError',
    # Logging
    'setup_logging',
    'JsonFormatter',
    'log_duration',
    'shorten',
]
