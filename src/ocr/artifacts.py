from __future__ import annotations

import json
from pathlib import Path

from .contracts import RecognitionDocumentResult


def serialize_recognition_result(doc: RecognitionDocumentResult) -> str:
    """
    Stable JSON serialization for audit artifacts.
    """

    return json.dumps(doc.to_dict(), ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_recognition_json_artifact(*, doc: RecognitionDocumentResult, out_file: Path) -> None:
    """
    Write recognition output to a JSON artifact. Callers choose the path.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_recognition_result(doc), encoding="utf-8")
