"""
Canonical pipeline contracts.

These models are the schema boundary between stages:
- recognition output (blocks -> lines -> elements with frames)
- reconstructed rows (positioned text in reading order)
- curriculum records (extracted drafts, reference entries, reconciliation output)

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .curriculum import (
    AccuracyReport,
    ExtractedSubject,
    ReconciliationResult,
    ReferenceSubject,
    Slot,
    slot_label,
)
from .grouping import PositionedTextElement, Row
from .ocr import Frame, RecognitionResult, RecognizedBlock, RecognizedElement, RecognizedLine

__all__ = [
    "Frame",
    "RecognizedElement",
    "RecognizedLine",
    "RecognizedBlock",
    "RecognitionResult",
    "PositionedTextElement",
    "Row",
    "Slot",
    "slot_label",
    "ExtractedSubject",
    "ReferenceSubject",
    "AccuracyReport",
    "ReconciliationResult",
]
