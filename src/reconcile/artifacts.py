from __future__ import annotations

import json
from pathlib import Path

from contracts.curriculum import ReconciliationResult


def serialize_reconciliation(result: ReconciliationResult, *, program_id: str | None = None) -> str:
    payload = result.to_dict()
    if program_id is not None:
        payload["program_id"] = program_id
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_reconciliation_json_artifact(
    *,
    result: ReconciliationResult,
    out_file: Path,
    program_id: str | None = None,
) -> None:
    """
    Write the corrected subjects, fix log, warnings and accuracy report.

    The caller chooses the path; nothing here assumes an artifact root.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_reconciliation(result, program_id=program_id), encoding="utf-8")
