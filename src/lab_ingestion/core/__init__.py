# ============================================================================
# src/lab_ingestion/core/__init__.py
# ============================================================================
"""
Core components: result model and the parsing orchestrator.

The orchestrator is imported from lab_ingestion.core.orchestrator (or the
package root) so that importing the result model stays lightweight.
"""

from .context import (
    ExtractionOutcome,
    ExtractionSource,
    ExtractionResult,
    StrategyResult,
    RecognizedWord,
    VisualLine,
)
