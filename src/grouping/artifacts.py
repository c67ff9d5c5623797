from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.grouping import Row


def serialize_rows(rows: list[Row]) -> str:
    payload: dict[str, Any] = {"rows": [r.to_dict() for r in rows]}
    return (
        json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"), indent=2)
        + "\n"
    )


def write_rows_json_artifact(*, rows: list[Row], out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_rows(rows), encoding="utf-8")
