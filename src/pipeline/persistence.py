from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from contracts.curriculum import AccuracyReport, ExtractedSubject

from .errors import PersistenceFailure

logger = logging.getLogger(__name__)


class SubjectSink(ABC):
    """Destination for reviewed curriculum records."""

    @abstractmethod
    def save(self, subjects: list[ExtractedSubject], *, report: AccuracyReport | None = None) -> None:
        raise NotImplementedError


def serialize_subjects(
    subjects: list[ExtractedSubject],
    *,
    report: AccuracyReport | None = None,
    program_id: str | None = None,
) -> str:
    payload: dict[str, Any] = {"subjects": [s.to_dict() for s in subjects]}
    if report is not None:
        payload["report"] = report.to_dict()
    if program_id is not None:
        payload["program_id"] = program_id
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


class JsonFileSink(SubjectSink):
    """Writes the records as one stable JSON document, replacing any previous one."""

    def __init__(self, out_file: Path, *, program_id: str | None = None) -> None:
        self.out_file = out_file
        self.program_id = program_id

    def save(self, subjects: list[ExtractedSubject], *, report: AccuracyReport | None = None) -> None:
        self.out_file.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.out_file.with_name(self.out_file.name + ".tmp")
        tmp.write_text(serialize_subjects(subjects, report=report, program_id=self.program_id), encoding="utf-8")
        tmp.replace(self.out_file)


def persist_subjects(
    sink: SubjectSink,
    subjects: list[ExtractedSubject],
    *,
    report: AccuracyReport | None = None,
    attempts: int = 1,
) -> None:
    """
    Hand reviewed records to `sink`, trying up to `attempts` times.

    Raises PersistenceFailure carrying the records so callers can retry the
    save without re-running extraction.
    """

    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    for attempt in range(1, attempts + 1):
        try:
            sink.save(subjects, report=report)
        except Exception as e:
            logger.warning("save attempt %d/%d failed: %r", attempt, attempts, e)
            if attempt == attempts:
                raise PersistenceFailure(subjects, e, attempts=attempts) from e
            continue
        logger.info("saved %d subjects", len(subjects))
        return
