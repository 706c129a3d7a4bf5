# ============================================================================
# src/lab_ingestion/core/context/extraction_result.py
# ============================================================================
"""
Extraction result for one uploaded report
- Canonical key -> value, first accepted value wins
- Ordered diagnostics for the user (errors, pending tests)
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from .enums import ExtractionOutcome
from ...constants import IN_PROGRESS_MARKER
from ...constants.messages import PENDING_ITEM


@dataclass
class ExtractionResult:
    report_date: date = field(default_factory=date.today)
    values: Dict[str, float] = field(default_factory=dict)
    unrecognized_items: List[str] = field(default_factory=list)
    source: Optional[str] = None
    label: Optional[str] = None

    # Pending diagnostics by canonical key, so they can be withdrawn on accept
    _pending: Dict[str, List[str]] = field(default_factory=dict, repr=False)

    def is_resolved(self, key: str) -> bool:
        return key in self.values

    def accept(self, key: str, value: float) -> bool:
        """
        Store a value unless the key already has one.

        Returns:
            True when the value was stored
        """
        if key in self.values:
            return False
        self.values[key] = value

        for item in self._pending.pop(key, []):
            if item in self.unrecognized_items:
                self.unrecognized_items.remove(item)
        return True

    def add_unrecognized(self, item: str):
        self.unrecognized_items.append(item)

    def add_pending(self, name: str, key: Optional[str] = None):
        """Record a test whose result the lab has not finished yet."""
        if key is not None and key in self.values:
            return
        item = PENDING_ITEM.format(name=name.strip(), marker=IN_PROGRESS_MARKER)
        if item in self.unrecognized_items:
            return
        self.unrecognized_items.append(item)
        if key is not None:
            self._pending.setdefault(key, []).append(item)

    @property
    def outcome(self) -> ExtractionOutcome:
        return ExtractionOutcome.HAS_VALUES if self.values else ExtractionOutcome.NO_VALUES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reportDate": self.report_date.isoformat(),
            "values": dict(self.values),
            "unrecognizedItems": list(self.unrecognized_items),
            "source": self.source,
            "label": self.label,
        }


@dataclass
class StrategyResult:
    """Tagged outcome of one extraction strategy."""
    strategy: str
    outcome: ExtractionOutcome
    result: ExtractionResult
