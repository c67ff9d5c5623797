from __future__ import annotations

import csv
import subprocess
from collections import defaultdict
from pathlib import Path
from typing import Any

from contracts.ocr import Frame, RecognitionResult, RecognizedBlock, RecognizedElement, RecognizedLine

from ..contracts import OcrConfig, OcrEngineName, OcrError, RecognitionDocumentResult
from .base import TextRecognizer

# Tesseract TSV levels: 1=page, 2=block, 3=paragraph, 4=line, 5=word
WORD_LEVEL = 5


def _normalize_confidence(raw_conf: float | None) -> float | None:
    if raw_conf is None or raw_conf < 0:
        return None
    # Tesseract TSV is 0..100
    return max(0.0, min(1.0, raw_conf / 100.0))


def parse_tsv(tsv: str, *, confidence_floor: float = 0.0) -> RecognitionResult:
    """
    Build the block/line/element tree from Tesseract TSV output.

    Blocks are keyed by (page, block), lines by (page, block, paragraph, line);
    everything is ordered by Tesseract's structural numbering. Empty words and
    rows with malformed geometry are dropped.
    """

    words_by_line: dict[tuple[int, int, int, int], list[tuple[int, RecognizedElement]]] = defaultdict(list)

    reader = csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE)
    for row in reader:
        try:
            level = int(row.get("level") or "0")
        except ValueError:
            continue
        if level != WORD_LEVEL:
            continue

        text = row.get("text") or ""
        if text.strip() == "":
            continue

        try:
            page_num = int(row.get("page_num") or "1")
            block_num = int(row.get("block_num") or "0")
            par_num = int(row.get("par_num") or "0")
            line_num = int(row.get("line_num") or "0")
            word_num = int(row.get("word_num") or "0")
            frame = Frame(
                left=int(row.get("left") or "0"),
                top=int(row.get("top") or "0"),
                width=int(row.get("width") or "0"),
                height=int(row.get("height") or "0"),
            )
        except ValueError:
            continue

        conf_str = row.get("conf") or ""
        try:
            raw_conf: float | None = float(conf_str) if conf_str != "" else None
        except ValueError:
            raw_conf = None
        conf = _normalize_confidence(raw_conf)
        if conf is not None and conf < confidence_floor:
            continue

        words_by_line[(page_num, block_num, par_num, line_num)].append(
            (word_num, RecognizedElement(text=text, frame=frame))
        )

    lines_by_block: dict[tuple[int, int], list[RecognizedLine]] = defaultdict(list)
    for key in sorted(words_by_line):
        words = [e for _, e in sorted(words_by_line[key], key=lambda x: x[0])]
        lines_by_block[(key[0], key[1])].append(RecognizedLine(elements=words))

    blocks = [RecognizedBlock(lines=lines_by_block[k]) for k in sorted(lines_by_block)]
    text = "\n".join(ln.text for b in blocks for ln in b.lines)
    return RecognitionResult(text=text, blocks=blocks)


class TesseractCliRecognizer(TextRecognizer):
    """
    Text recognition via the `tesseract` CLI, parsed from TSV output.
    """

    def _error(self, *, image_file: Path, meta: dict[str, Any], error: OcrError) -> RecognitionDocumentResult:
        return RecognitionDocumentResult(
            ok=False,
            engine=OcrEngineName.TESSERACT_CLI,
            source_image=str(image_file),
            result=None,
            errors=[error],
            meta=meta,
        )

    def recognize(self, *, config: OcrConfig, image_file: Path) -> RecognitionDocumentResult:
        meta: dict[str, Any] = {
            "backend": "tesseract",
            "backend_mode": "cli",
            "language": config.language,
            "psm": config.psm,
            "confidence_floor": config.confidence_floor,
            "timeout_s": config.timeout_s,
        }

        if not image_file.exists():
            return self._error(
                image_file=image_file,
                meta=meta,
                error=OcrError(
                    code="OCR_INPUT_NOT_FOUND",
                    message="Input image file not found",
                    detail={"image_file": str(image_file)},
                ),
            )

        cmd = ["tesseract", str(image_file), "stdout", "-l", config.language]
        if config.psm is not None:
            cmd.extend(["--psm", str(config.psm)])
        cmd.append("tsv")
        meta["command_template"] = ["tesseract", "<IMAGE_FILE>", *cmd[2:]]

        try:
            proc = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=config.timeout_s,
            )
        except FileNotFoundError:
            return self._error(
                image_file=image_file,
                meta=meta,
                error=OcrError(
                    code="OCR_BACKEND_NOT_INSTALLED",
                    message="tesseract binary not found on PATH",
                    detail={"expected_command": "tesseract"},
                ),
            )
        except subprocess.TimeoutExpired:
            return self._error(
                image_file=image_file,
                meta=meta,
                error=OcrError(
                    code="OCR_TIMEOUT",
                    message="Recognition backend timed out",
                    detail={"timeout_s": config.timeout_s},
                ),
            )

        if proc.returncode != 0:
            return self._error(
                image_file=image_file,
                meta=meta,
                error=OcrError(
                    code="OCR_BACKEND_ERROR",
                    message="Recognition backend returned a non-zero exit code",
                    detail={"returncode": proc.returncode, "stderr": proc.stderr[-4000:]},
                ),
            )

        result = parse_tsv(proc.stdout, confidence_floor=config.confidence_floor)
        return RecognitionDocumentResult(
            ok=True,
            engine=OcrEngineName.TESSERACT_CLI,
            source_image=str(image_file),
            result=result,
            errors=[],
            meta={**meta, "element_count": result.element_count()},
        )
