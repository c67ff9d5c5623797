"""
Stage 3: Subject extraction.

Turns reconstructed rows of one quadrant into draft curriculum records:
- strict pass: code-shape classification of leading tokens, wrapped-title merge,
  unit-run detection, title assembly
- title cleanup (pure, reusable outside curricula)
- rescue pass: declarative rules recovering codes the strict pass missed

No reference-table matching happens here.
"""

from .module import extract_quadrant
from .rescue import apply_rescue_rules
from .subjects import CodeMatch, classify_row, extract_subjects, extract_units, is_header_row
from .titles import correct_title, correct_titles, has_probable_ocr_errors


__all__ = [
    "CodeMatch",
    "apply_rescue_rules",
    "classify_row",
    "correct_title",
    "correct_titles",
    "extract_quadrant",
    "extract_subjects",
    "extract_units",
    "has_probable_ocr_errors",
    "is_header_row",
]
