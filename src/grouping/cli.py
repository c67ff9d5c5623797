from __future__ import annotations

import argparse
import json
from pathlib import Path

from contracts.ocr import RecognitionResult

from .artifacts import write_rows_json_artifact
from .config import RowAssignment, RowGroupingConfig
from .rows import rows_from_recognition


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="curriculum-rows",
        description="Stage 2: rebuild table rows (recognition JSON -> ordered rows).",
    )
    p.add_argument("--input", required=True, type=Path, help="Path to a recognition JSON artifact.")
    p.add_argument("--output", required=True, type=Path, help="Path to write the rows JSON artifact.")
    p.add_argument("--row-y-tolerance", type=float, default=25.0)
    p.add_argument(
        "--assignment",
        choices=[a.value for a in RowAssignment],
        default=RowAssignment.FIRST_FIT.value,
    )
    p.add_argument("--print", action="store_true", dest="print_rows", help="Print rows as text.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    raw = json.loads(args.input.read_text(encoding="utf-8"))
    # Accept either a bare recognition result or a stage result wrapping one.
    recognition = RecognitionResult.from_dict(raw.get("result") or raw)

    cfg = RowGroupingConfig(
        row_y_tolerance=args.row_y_tolerance,
        assignment=RowAssignment(args.assignment),
    )
    rows = rows_from_recognition(recognition, cfg)
    write_rows_json_artifact(rows=rows, out_file=args.output)

    if args.print_rows:
        for r in rows:
            print(f"y={r.y:>5} :: {r.joined_text()}")

    summary = {"rows": len(rows), "elements": sum(len(r.elements) for r in rows)}
    print(json.dumps(summary, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
