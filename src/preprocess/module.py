from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .contracts import CaptureSource, PreprocessConfig, PreprocessError, PreprocessResult
from .engines import ImageEngine, PdfRasterizer, PillowImageEngine, Pypdfium2Rasterizer

logger = logging.getLogger(__name__)

PREPROCESSED_NAME = "preprocessed.png"
PDF_PAGE_NAME = "source_page_001.png"


def _failed(
    *,
    capture: CaptureSource,
    source_file: Path,
    code: str,
    message: str,
    detail: dict[str, Any],
    meta: dict[str, Any],
) -> PreprocessResult:
    return PreprocessResult(
        ok=False,
        capture_source=capture,
        source_file=str(source_file),
        raster_file=None,
        image_file=None,
        width_px=0,
        height_px=0,
        fell_back=False,
        errors=[PreprocessError(code=code, message=message, detail=detail)],
        meta=meta,
    )


def is_pdf(path: Path) -> bool:
    return path.suffix.lower() == ".pdf"


def rasterize_source(
    *,
    config: PreprocessConfig,
    source_file: Path,
    rasterizer: PdfRasterizer | None = None,
) -> Path:
    """
    Return an image path for `source_file`, rendering page 1 when it is a PDF.

    Raises on render failure; there is no image to fall back to.
    """

    if not is_pdf(source_file):
        return source_file
    rasterizer = rasterizer or Pypdfium2Rasterizer()
    out_file = config.out_dir / PDF_PAGE_NAME
    w, h = rasterizer.render_first_page(pdf_file=source_file, out_file=out_file, dpi=config.pdf_dpi)
    logger.info("rendered PDF page 1 at %d dpi: %dx%d", config.pdf_dpi, w, h)
    return out_file


def preprocess_image(
    *,
    config: PreprocessConfig,
    source_file: Path,
    capture: CaptureSource,
    engine: ImageEngine | None = None,
    rasterizer: PdfRasterizer | None = None,
) -> PreprocessResult:
    """
    Stage 0 entrypoint: upscale to the capture-specific width and re-encode as PNG.

    Never raises for manipulation failures: the untouched source is returned
    with `fell_back=True` and the error recorded.
    """

    engine = engine or PillowImageEngine()
    target_width = config.target_width(capture)
    meta: dict[str, Any] = {"backend": engine.backend_id(), "target_width": target_width}

    if not source_file.exists():
        return _failed(
            capture=capture,
            source_file=source_file,
            code="PREPROCESS_INPUT_NOT_FOUND",
            message="Input image file not found",
            detail={"source_file": str(source_file)},
            meta=meta,
        )

    config.out_dir.mkdir(parents=True, exist_ok=True)

    image_file = source_file
    if is_pdf(source_file):
        meta["pdf_dpi"] = config.pdf_dpi
        try:
            image_file = rasterize_source(config=config, source_file=source_file, rasterizer=rasterizer)
        except Exception as e:
            return _failed(
                capture=capture,
                source_file=source_file,
                code="PREPROCESS_PDF_RENDER_FAILED",
                message="PDF rendering failed",
                detail={"error": repr(e)},
                meta=meta,
            )

    out_file = config.out_dir / PREPROCESSED_NAME
    try:
        width, height = engine.resize(image_file=image_file, out_file=out_file, width=target_width)
        # Final lossless pass so every downstream crop starts from the same PNG encoding.
        width, height = engine.reencode(image_file=out_file, out_file=out_file)
    except Exception as e:
        logger.warning("preprocessing failed, using original image: %r", e)
        errors = [
            PreprocessError(
                code="PREPROCESS_RESIZE_FAILED",
                message="Resize/re-encode failed; falling back to the original image",
                detail={"error": repr(e)},
            )
        ]
        try:
            width, height = engine.size(image_file=image_file)
        except Exception as size_err:
            width, height = 0, 0
            errors.append(
                PreprocessError(
                    code="PREPROCESS_SIZE_UNREADABLE",
                    message="Could not read the original image size",
                    detail={"error": repr(size_err)},
                )
            )
        return PreprocessResult(
            ok=True,
            capture_source=capture,
            source_file=str(source_file),
            raster_file=str(image_file),
            image_file=str(image_file),
            width_px=width,
            height_px=height,
            fell_back=True,
            errors=errors,
            meta=meta,
        )

    logger.info("preprocessed %s (%s): %dx%d PNG", source_file.name, capture.value, width, height)
    return PreprocessResult(
        ok=True,
        capture_source=capture,
        source_file=str(source_file),
        raster_file=str(image_file),
        image_file=str(out_file),
        width_px=width,
        height_px=height,
        fell_back=False,
        errors=[],
        meta=meta,
    )
