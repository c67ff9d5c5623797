from __future__ import annotations

import json
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from contracts.curriculum import ReferenceSubject, Slot

from .rules import ExtractionRules, RescueRule, YearDetectionRules

MAX_COMPONENT_UNITS = 5

_PROGRAM_ID_PAT = re.compile(r"^[a-z0-9_-]+$")


class CurriculumConfigError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class CurriculumConfig:
    """
    Read-only reference curriculum for one program plus the curriculum-specific
    extraction knowledge (elective families, rescue rules, year detection).

    Loaded once and passed by reference to every stage that needs it.
    """

    program_id: str
    title: str
    slots: dict[Slot, tuple[ReferenceSubject, ...]]  # insertion order = document order
    critical_subjects: tuple[tuple[Slot, ReferenceSubject], ...]
    year_detection: YearDetectionRules
    extraction: ExtractionRules
    rescue_rules: tuple[RescueRule, ...]

    def reference_for(self, slot: Slot) -> tuple[ReferenceSubject, ...]:
        return self.slots.get(slot, ())

    def slot_of_code(self, code: str) -> Slot | None:
        key = code.strip().lower()
        for slot, subjects in self.slots.items():
            for s in subjects:
                if s.code.lower() == key:
                    return slot
        return None

    def subject_count(self) -> int:
        return sum(len(v) for v in self.slots.values())


def _parse_subject(raw: dict[str, Any], *, where: str) -> ReferenceSubject:
    try:
        subj = ReferenceSubject.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise CurriculumConfigError(f"Malformed subject at {where}: {raw!r}") from e

    if subj.total != subj.lec + subj.lab:
        raise CurriculumConfigError(
            f"{subj.code} at {where}: total {subj.total} != lec {subj.lec} + lab {subj.lab}"
        )
    for name, v in (("lec", subj.lec), ("lab", subj.lab), ("total", subj.total)):
        if v < 0 or v > MAX_COMPONENT_UNITS:
            raise CurriculumConfigError(f"{subj.code} at {where}: {name} units {v} outside 0..{MAX_COMPONENT_UNITS}")
    return subj


def curriculum_from_dict(d: dict[str, Any]) -> CurriculumConfig:
    program_id = str(d.get("program_id", "")).strip()
    if not program_id:
        raise CurriculumConfigError("program_id is required")

    years = d.get("years")
    if not isinstance(years, dict) or not years:
        raise CurriculumConfigError("years must be a non-empty mapping")

    slots: dict[Slot, tuple[ReferenceSubject, ...]] = {}
    seen_codes: dict[str, Slot] = {}
    for year, semesters in years.items():
        if not isinstance(semesters, dict):
            raise CurriculumConfigError(f"years[{year!r}] must be a mapping of semesters")
        for semester, subjects_raw in semesters.items():
            slot: Slot = (str(year), str(semester))
            where = f"{year}/{semester}"
            subjects = tuple(_parse_subject(s, where=where) for s in (subjects_raw or []))
            for s in subjects:
                if s.code in seen_codes:
                    raise CurriculumConfigError(f"Duplicate code {s.code!r} ({where})")
                seen_codes[s.code] = slot
            slots[slot] = subjects

    critical: list[tuple[Slot, ReferenceSubject]] = []
    for code in d.get("critical_subjects") or []:
        slot = seen_codes.get(str(code))
        if slot is None:
            raise CurriculumConfigError(f"critical subject {code!r} is not in the reference table")
        ref = next(s for s in slots[slot] if s.code == code)
        critical.append((slot, ref))

    try:
        year_detection = YearDetectionRules.from_dict(d["year_detection"])
        extraction = ExtractionRules.from_dict(d.get("extraction") or {})
        rescue_rules = tuple(RescueRule.from_dict(r) for r in (d.get("rescue_rules") or []))
    except (KeyError, TypeError, ValueError, re.error) as e:
        raise CurriculumConfigError(f"Malformed rules section: {e}") from e

    return CurriculumConfig(
        program_id=program_id,
        title=str(d.get("title", program_id)),
        slots=slots,
        critical_subjects=tuple(critical),
        year_detection=year_detection,
        extraction=extraction,
        rescue_rules=rescue_rules,
    )


def load_curriculum(path: Path) -> CurriculumConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CurriculumConfigError(f"Cannot read curriculum config {path}: {e}") from e
    return curriculum_from_dict(raw)


def load_builtin_curriculum(program_id: str = "bscs") -> CurriculumConfig:
    """
    Load a curriculum shipped under `curricula/data/<program_id>.json`.
    """

    if not _PROGRAM_ID_PAT.match(program_id):
        raise CurriculumConfigError(f"Invalid program id: {program_id!r}")
    res = resources.files("curricula").joinpath("data").joinpath(f"{program_id}.json")
    if not res.is_file():
        raise CurriculumConfigError(f"Unknown program id: {program_id!r}")
    return curriculum_from_dict(json.loads(res.read_text(encoding="utf-8")))
