from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..contracts import OcrConfig, RecognitionDocumentResult


class TextRecognizer(ABC):
    """
    Interface for text-recognition engines.

    Engines must:
    - return literal text with element frames grouped as blocks/lines/elements
    - honour `config.timeout_s` and report a timeout as `OCR_TIMEOUT`
    - NOT apply semantic correction or filtering beyond the confidence floor
    """

    @abstractmethod
    def recognize(self, *, config: OcrConfig, image_file: Path) -> RecognitionDocumentResult:
        raise NotImplementedError
