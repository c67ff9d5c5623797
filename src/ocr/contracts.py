from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from contracts.ocr import RecognitionResult


class OcrEngineName(str, Enum):
    """
    Recognition backends supported by this module.

    Backends return literal text; no correction happens at this boundary.
    """

    TESSERACT_CLI = "tesseract_cli"


@dataclass(frozen=True, slots=True)
class OcrError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class RecognitionDocumentResult:
    """
    Machine-readable recognition output for one image.

    On failure `ok` is False and `result` is None. Nothing is fabricated to
    fill in a failed recognition.
    """

    ok: bool
    engine: OcrEngineName
    source_image: str | None
    result: RecognitionResult | None
    errors: list[OcrError]
    meta: dict[str, Any]

    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "engine": self.engine.value,
            "source_image": self.source_image,
            "result": None if self.result is None else self.result.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
        }


@dataclass(frozen=True, slots=True)
class OcrConfig:
    """
    Recognition configuration. This module never reads environment variables.
    """

    engine: OcrEngineName = OcrEngineName.TESSERACT_CLI
    confidence_floor: float = 0.0  # words below this normalized confidence are dropped
    language: str = "eng"  # engine hint only
    psm: int | None = None  # Tesseract page segmentation mode; None = engine default
    timeout_s: float = 120.0

    def __post_init__(self) -> None:
        if self.confidence_floor < 0.0 or self.confidence_floor > 1.0:
            raise ValueError("confidence_floor must be within [0.0, 1.0]")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        if self.psm is not None and not (0 <= self.psm <= 13):
            raise ValueError("psm must be within 0..13")
