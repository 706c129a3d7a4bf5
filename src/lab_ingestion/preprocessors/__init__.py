# src/lab_ingestion/preprocessors/__init__.py

from .image_preprocessor import ImagePreprocessor

__all__ = ["ImagePreprocessor"]
