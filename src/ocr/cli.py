from __future__ import annotations

import argparse
from pathlib import Path

from .artifacts import write_recognition_json_artifact
from .contracts import OcrConfig
from .module import recognize_image_file


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="curriculum-ocr",
        description="Recognize one checklist image and emit the block/line/element tree as JSON.",
    )
    p.add_argument("--image", required=True, type=Path, help="Input image file (PNG/JPEG).")
    p.add_argument("--out", required=True, type=Path, help="Output JSON artifact file path.")
    p.add_argument(
        "--confidence-floor",
        type=float,
        default=0.0,
        help="Drop words with confidence below this threshold (0..1).",
    )
    p.add_argument("--language", default="eng", help="Tesseract language hint (default: eng).")
    p.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode (optional).")
    p.add_argument("--timeout-s", type=float, default=120.0, help="Recognition timeout in seconds.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    config = OcrConfig(
        confidence_floor=args.confidence_floor,
        language=args.language,
        psm=args.psm,
        timeout_s=args.timeout_s,
    )

    doc = recognize_image_file(config=config, image_file=args.image)
    write_recognition_json_artifact(doc=doc, out_file=args.out)

    return 0 if doc.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
