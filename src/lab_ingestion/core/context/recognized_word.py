# ============================================================================
# src/lab_ingestion/core/context/recognized_word.py
# ============================================================================
"""
Recognized words and reconstructed lines
- Word text with its pixel bounding box and OCR confidence
- Visual line: words of one approximate table row, left to right
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class RecognizedWord:
    text: str
    # (x1, y1, x2, y2) in page pixels, y grows downwards
    bbox: Tuple[float, float, float, float]
    confidence: float = 100.0

    @property
    def x1(self) -> float:
        return self.bbox[0]

    @property
    def x2(self) -> float:
        return self.bbox[2]

    @property
    def center_y(self) -> float:
        return (self.bbox[1] + self.bbox[3]) / 2.0

    @property
    def height(self) -> float:
        return self.bbox[3] - self.bbox[1]

    @property
    def has_digit(self) -> bool:
        return any(ch.isdigit() for ch in self.text)


@dataclass
class VisualLine:
    words: List[RecognizedWord] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(w.text for w in self.words)

    @property
    def center_y(self) -> float:
        if not self.words:
            return 0.0
        return sum(w.center_y for w in self.words) / len(self.words)

    @property
    def avg_height(self) -> float:
        if not self.words:
            return 0.0
        return sum(w.height for w in self.words) / len(self.words)

    @property
    def has_digits(self) -> bool:
        return any(w.has_digit for w in self.words)

    def __len__(self) -> int:
        return len(self.words)
