"""
Stage 1 - Text recognition (perception only).

- Input: one image file
- Output: recognized text as blocks -> lines -> elements with pixel frames
- No correction, merging or interpretation; an optional confidence floor is
  the only filter

No environment variable reads; all paths are passed explicitly.
"""

from .contracts import OcrConfig, OcrEngineName, OcrError, RecognitionDocumentResult
from .engines import TesseractCliRecognizer, TextRecognizer
from .engines.tesseract_cli import parse_tsv
from .module import get_recognizer, recognize_image_file

__all__ = [
    "OcrConfig",
    "OcrEngineName",
    "OcrError",
    "RecognitionDocumentResult",
    "TesseractCliRecognizer",
    "TextRecognizer",
    "get_recognizer",
    "parse_tsv",
    "recognize_image_file",
]
