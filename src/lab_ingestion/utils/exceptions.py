# ============================================================================
# src/lab_ingestion/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the lab report ingestion engine.

Per-field misses and range rejections are not exceptions: they leave the
field unresolved and are only logged.
"""


class LabIngestionError(Exception):
    """Base exception for all lab ingestion errors."""
    pass


class DocumentProcessingError(LabIngestionError):
    """Error while turning the uploaded document into recognizable pages."""
    pass


class FatalDocumentError(DocumentProcessingError):
    """The input cannot be read as a PDF at all. Short-circuits the pipeline."""
    pass


class PDFRasterizationError(FatalDocumentError):
    """PDF bytes could not be opened or rendered."""
    pass


class ImagePreprocessingError(DocumentProcessingError):
    """Page bitmap could not be cleaned or re-encoded."""
    pass


class OCRError(DocumentProcessingError):
    """OCR engine failed on a page."""
    pass


class TransientServiceError(LabIngestionError):
    """A remote collaborator (vision API, asset host) is unavailable."""
    pass


class VisionServiceError(TransientServiceError):
    """Vision model request failed or returned a non-success status."""
    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class AssetDownloadError(TransientServiceError):
    """OCR language data could not be fetched."""
    def __init__(self, message: str, asset: str = None):
        super().__init__(message)
        self.asset = asset


class VisionResponseError(LabIngestionError):
    """Vision model reply does not contain a usable JSON payload."""
    pass


class ConfigurationError(LabIngestionError):
    """Invalid configuration."""
    pass
