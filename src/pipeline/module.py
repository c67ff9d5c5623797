from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from contracts.curriculum import ExtractedSubject, slot_label
from contracts.ocr import RecognitionResult
from curricula.loader import CurriculumConfig
from extraction.module import extract_quadrant
from grouping.rows import rows_from_recognition
from ocr.contracts import RecognitionDocumentResult
from ocr.engines.base import TextRecognizer
from ocr.module import get_recognizer, recognize_image_file
from preprocess.contracts import CaptureSource, QuadrantImage
from preprocess.engines import ImageEngine, PdfRasterizer, PillowImageEngine
from preprocess.module import preprocess_image
from preprocess.quadrants import assign_quadrant_slots, detect_year_range, split_into_quadrants
from reconcile.reconciler import reconcile

from .config import PipelineConfig
from .errors import EmptyResult, ProcessingException
from .states import PipelineRun, PipelineState

logger = logging.getLogger(__name__)


def _recognize_or_raise(
    *,
    config: PipelineConfig,
    image_file: Path,
    recognizer: TextRecognizer,
    stage: str,
) -> RecognitionResult:
    try:
        doc: RecognitionDocumentResult = recognize_image_file(
            config=config.ocr, image_file=image_file, recognizer=recognizer
        )
    except Exception as e:
        raise ProcessingException(
            stage, "Recognition raised", detail={"error": repr(e), "image_file": str(image_file)}
        ) from e

    if not doc.ok or doc.result is None:
        codes = doc.error_codes()
        message = "Recognition timed out" if "OCR_TIMEOUT" in codes else "Recognition failed"
        raise ProcessingException(
            stage,
            message,
            detail={"image_file": str(image_file), "errors": [e.to_dict() for e in doc.errors]},
        )
    return doc.result


def run_curriculum_pipeline(
    *,
    config: PipelineConfig,
    source_file: Path,
    capture: CaptureSource,
    curriculum: CurriculumConfig,
    recognizer: TextRecognizer | None = None,
    image_engine: ImageEngine | None = None,
    rasterizer: PdfRasterizer | None = None,
) -> PipelineRun:
    """
    Run preprocessing through reconciliation for one checklist page.

    Quadrants are recognized, then grouped and extracted, on a thread pool and
    joined in reading order before reconciliation. Returns the run in the
    `review` state. Raises ProcessingException (run in `processing_error`) or
    EmptyResult (run in `no_subjects_found`); the failed run is attached to
    the exception.
    """

    recognizer = recognizer or get_recognizer(config.ocr.engine)
    image_engine = image_engine or PillowImageEngine()
    run = PipelineRun(capture=capture, source_file=str(source_file))

    run.transition(PipelineState.SELECTING_FILE)
    run.transition(PipelineState.PREPROCESSING)
    try:
        subjects = _run_stages(
            run=run,
            config=config,
            source_file=source_file,
            curriculum=curriculum,
            recognizer=recognizer,
            image_engine=image_engine,
            rasterizer=rasterizer,
        )
    except ProcessingException as e:
        run.fail()
        e.run = run
        logger.error("run aborted in %s: %s", e.stage, e.message)
        raise
    except Exception as e:
        stage = run.state.value
        run.fail()
        logger.error("run aborted in %s: %r", stage, e)
        raise ProcessingException(stage, "Stage failed", detail={"error": repr(e)}, run=run) from e

    run.transition(PipelineState.RECONCILING)
    try:
        result = reconcile(subjects, curriculum)
    except Exception as e:
        run.fail()
        raise ProcessingException(
            PipelineState.RECONCILING.value, "Reconciliation failed", detail={"error": repr(e)}, run=run
        ) from e
    run.result = result
    if not result.subjects:
        run.transition(PipelineState.NO_SUBJECTS_FOUND)
        raise EmptyResult(capture, run=run)

    run.transition(PipelineState.REVIEW)
    logger.info(
        "run complete: %d subjects, accuracy %d%% (%d/%d)",
        len(result.subjects),
        result.report.accuracy,
        result.report.correct,
        result.report.total,
    )
    return run


def _run_stages(
    *,
    run: PipelineRun,
    config: PipelineConfig,
    source_file: Path,
    curriculum: CurriculumConfig,
    recognizer: TextRecognizer,
    image_engine: ImageEngine,
    rasterizer: PdfRasterizer | None,
) -> list[ExtractedSubject]:
    pre = preprocess_image(
        config=config.preprocess_config(),
        source_file=source_file,
        capture=run.capture,
        engine=image_engine,
        rasterizer=rasterizer,
    )
    run.preprocess = pre
    if not pre.ok or pre.image_file is None or pre.raster_file is None:
        raise ProcessingException(
            PipelineState.PREPROCESSING.value,
            "No usable image",
            detail={"errors": [{"code": e.code, "message": e.message, "detail": e.detail} for e in pre.errors]},
        )

    run.transition(PipelineState.DETECTING_YEAR)
    quick = _recognize_or_raise(
        config=config,
        image_file=Path(pre.raster_file),
        recognizer=recognizer,
        stage=PipelineState.DETECTING_YEAR.value,
    )
    detection = detect_year_range(quick.text, curriculum.year_detection)
    run.year_detection = detection
    slots = assign_quadrant_slots(detection.year_range, curriculum.year_detection)
    run.quadrant_slots = slots

    run.transition(PipelineState.SPLITTING)
    try:
        quadrants = split_into_quadrants(
            image_file=Path(pre.image_file), out_dir=config.quadrant_dir, engine=image_engine
        )
    except Exception as e:
        raise ProcessingException(
            PipelineState.SPLITTING.value, "Quadrant split failed", detail={"error": repr(e)}
        ) from e

    run.transition(PipelineState.RECOGNIZING)

    def _recognize(q: QuadrantImage) -> RecognitionResult:
        return _recognize_or_raise(
            config=config,
            image_file=Path(q.image_file),
            recognizer=recognizer,
            stage=PipelineState.RECOGNIZING.value,
        )

    def _extract(item: tuple[QuadrantImage, RecognitionResult]) -> list[ExtractedSubject]:
        q, recognized = item
        slot = slots[q.position]
        rows = rows_from_recognition(recognized, config.grouping)
        found = extract_quadrant(rows, slot, curriculum)
        logger.info("%s (%s): %d rows, %d subjects", q.position.value, slot_label(slot), len(rows), len(found))
        return found

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        # map() re-raises the first worker exception in submission order.
        recognized = list(pool.map(_recognize, quadrants))

        run.transition(PipelineState.EXTRACTING)
        try:
            per_quadrant = list(pool.map(_extract, zip(quadrants, recognized)))
        except Exception as e:
            raise ProcessingException(
                PipelineState.EXTRACTING.value, "Extraction failed", detail={"error": repr(e)}
            ) from e

    subjects: list[ExtractedSubject] = []
    for q, found in zip(quadrants, per_quadrant):
        run.quadrant_counts[q.position] = len(found)
        subjects.extend(found)
    logger.info("raw total: %d subjects from %d quadrants", len(subjects), len(quadrants))
    return subjects
