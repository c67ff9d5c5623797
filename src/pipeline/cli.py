from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from curricula.loader import CurriculumConfigError, load_builtin_curriculum, load_curriculum
from grouping.config import RowGroupingConfig
from ocr.contracts import OcrConfig
from preprocess.contracts import CaptureSource
from reconcile.artifacts import write_reconciliation_json_artifact

from .config import QUADRANT_COUNT, PipelineConfig
from .errors import EmptyResult, PersistenceFailure, ProcessingException
from .module import run_curriculum_pipeline
from .persistence import JsonFileSink, persist_subjects

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_EMPTY = 2


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="curriculum-extract",
        description=(
            "Extract curriculum records from a photographed or uploaded checklist page and "
            "reconcile them against a reference curriculum."
        ),
    )
    p.add_argument("--image", required=True, type=Path, help="Checklist image (PNG/JPEG) or PDF.")
    p.add_argument(
        "--camera",
        action="store_true",
        help="Treat the input as a camera capture (higher upscale target).",
    )
    p.add_argument(
        "--work-dir",
        required=True,
        type=Path,
        help="Directory for intermediate images and the reconciliation artifact.",
    )
    p.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Saved subjects JSON (default: <work-dir>/subjects.json).",
    )
    p.add_argument(
        "--curriculum",
        type=Path,
        default=None,
        help="Reference curriculum JSON file (overrides --program).",
    )
    p.add_argument("--program", default="bscs", help="Built-in curriculum id (default: bscs).")
    p.add_argument("--language", default="eng", help="Tesseract language hint (default: eng).")
    p.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode (optional).")
    p.add_argument("--timeout-s", type=float, default=120.0, help="Per-image recognition timeout in seconds.")
    p.add_argument(
        "--row-y-tolerance",
        type=float,
        default=25.0,
        help="Vertical distance (px) within which elements share a row (default: 25).",
    )
    p.add_argument(
        "--max-workers",
        type=int,
        default=QUADRANT_COUNT,
        help="Worker threads for per-quadrant recognition (default: 4).",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        curriculum = (
            load_curriculum(args.curriculum)
            if args.curriculum is not None
            else load_builtin_curriculum(args.program)
        )
    except CurriculumConfigError as e:
        print(json.dumps({"ok": False, "error": "curriculum", "message": str(e)}, sort_keys=True))
        return EXIT_ERROR

    config = PipelineConfig(
        work_dir=args.work_dir,
        ocr=OcrConfig(language=args.language, psm=args.psm, timeout_s=args.timeout_s),
        grouping=RowGroupingConfig(row_y_tolerance=args.row_y_tolerance),
        max_workers=args.max_workers,
    )
    capture = CaptureSource.CAMERA if args.camera else CaptureSource.FILE

    try:
        run = run_curriculum_pipeline(
            config=config,
            source_file=args.image,
            capture=capture,
            curriculum=curriculum,
        )
    except EmptyResult as e:
        summary = e.run.summary() if e.run is not None else {}
        print(json.dumps({**summary, "ok": False, "remediation": e.remediation}, sort_keys=True, ensure_ascii=False))
        return EXIT_EMPTY
    except ProcessingException as e:
        summary = e.run.summary() if e.run is not None else {}
        print(json.dumps({**summary, "ok": False, "error": e.to_dict()}, sort_keys=True, ensure_ascii=False))
        return EXIT_ERROR

    if run.result is None:
        raise RuntimeError("pipeline returned without a result")
    write_reconciliation_json_artifact(
        result=run.result,
        out_file=config.work_dir / "reconciliation.json",
        program_id=curriculum.program_id,
    )

    out_file = args.out if args.out is not None else config.work_dir / "subjects.json"
    try:
        persist_subjects(
            JsonFileSink(out_file, program_id=curriculum.program_id),
            run.result.subjects,
            report=run.result.report,
        )
    except PersistenceFailure as e:
        print(json.dumps({**run.summary(), "ok": False, "error": str(e)}, sort_keys=True, ensure_ascii=False))
        return EXIT_ERROR

    print(json.dumps({**run.summary(), "ok": True, "out": str(out_file)}, sort_keys=True, ensure_ascii=False))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
