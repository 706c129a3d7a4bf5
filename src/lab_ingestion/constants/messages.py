# ============================================================================
# src/lab_ingestion/constants/messages.py
# ============================================================================
"""
User-facing diagnostics written into ExtractionResult.unrecognized_items.
Shown to Russian-speaking users as-is.
"""

PARSE_ERROR = "Ошибка парсинга: {message}"
VISION_ERROR = "Ошибка Gemini API: {message}"
NO_PAGES = "Не удалось извлечь изображения из PDF"
PENDING_ITEM = "{name}: {marker}"
