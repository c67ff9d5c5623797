"""
Stage 2: Table row reconstruction.

Rebuilds an approximate reading order from free-form positioned text:
- flatten the recognizer's block/line/element tree to (text, x, y)
- cluster elements into rows by vertical proximity
- order rows top-to-bottom and elements left-to-right

No gridline detection, no text interpretation.
"""

from .config import RowAssignment, RowGroupingConfig
from .rows import flatten_elements, reconstruct_rows, rows_from_recognition

__all__ = [
    "RowAssignment",
    "RowGroupingConfig",
    "flatten_elements",
    "reconstruct_rows",
    "rows_from_recognition",
]
