"""
Stage 0 - Image preprocessing and quadrant splitting.

- renders a PDF checklist's first page to PNG (the only place PDFs are handled)
- upscales to a capture-specific width and re-encodes losslessly as PNG,
  falling back to the untouched image when manipulation fails
- detects the early/late year block from a quick recognition pass
- splits the page into four (year, semester) quadrants

No recognition or text interpretation happens here.
"""

from .contracts import (
    CaptureSource,
    PreprocessConfig,
    PreprocessError,
    PreprocessResult,
    QuadrantImage,
    QuadrantPosition,
)
from .module import is_pdf, preprocess_image, rasterize_source
from .quadrants import (
    QUADRANT_ORDER,
    YearDetection,
    YearRange,
    assign_quadrant_slots,
    detect_year_range,
    quadrant_boxes,
    split_into_quadrants,
)

__all__ = [
    "CaptureSource",
    "PreprocessConfig",
    "PreprocessError",
    "PreprocessResult",
    "QUADRANT_ORDER",
    "QuadrantImage",
    "QuadrantPosition",
    "YearDetection",
    "YearRange",
    "assign_quadrant_slots",
    "detect_year_range",
    "is_pdf",
    "preprocess_image",
    "quadrant_boxes",
    "rasterize_source",
    "split_into_quadrants",
]
