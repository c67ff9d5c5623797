from __future__ import annotations

import logging
from pathlib import Path

from .contracts import OcrConfig, OcrEngineName, OcrError, RecognitionDocumentResult
from .engines.base import TextRecognizer
from .engines.tesseract_cli import TesseractCliRecognizer

logger = logging.getLogger(__name__)


def get_recognizer(engine: OcrEngineName) -> TextRecognizer:
    if engine == OcrEngineName.TESSERACT_CLI:
        return TesseractCliRecognizer()
    raise ValueError(f"Unsupported recognition engine: {engine}")


def recognize_image_file(
    *,
    config: OcrConfig,
    image_file: Path,
    recognizer: TextRecognizer | None = None,
) -> RecognitionDocumentResult:
    """
    Stage 1 entrypoint: recognize one materialized image.

    PDFs are rejected here; they are rasterized in preprocessing.
    """

    if image_file.suffix.lower() == ".pdf":
        return RecognitionDocumentResult(
            ok=False,
            engine=config.engine,
            source_image=str(image_file),
            result=None,
            errors=[
                OcrError(
                    code="OCR_INPUT_IS_PDF",
                    message="Recognition rejects PDF inputs; rasterize them during preprocessing.",
                    detail={"image_file": str(image_file)},
                )
            ],
            meta={},
        )

    recognizer = recognizer or get_recognizer(config.engine)
    doc = recognizer.recognize(config=config, image_file=image_file)
    if doc.ok and doc.result is not None:
        logger.debug("recognized %s: %d elements", image_file.name, doc.result.element_count())
    else:
        logger.warning("recognition failed for %s: %s", image_file.name, ",".join(doc.error_codes()))
    return doc
