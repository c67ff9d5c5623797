from __future__ import annotations

import logging
import re

from contracts.curriculum import (
    AccuracyReport,
    ExtractedSubject,
    ReconciliationResult,
    Slot,
    slot_label,
)
from curricula.loader import CurriculumConfig

from .fuzzy import MATCH_THRESHOLD, best_match

logger = logging.getLogger(__name__)

# Codes that are page furniture or recognition debris, never subjects.
GARBAGE_CODE_PATS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^EVSION",
        r"^REVISION",
        r"^TOTAL$",
        r"^YEAR$",
        r"^SEMESTER$",
        r"^NO\.$",
        r"^GRADE$",
        r"^RATING$",
        r"^REM\.$",
        r"^ELECTIVES$",
        r"^PROFESSIONAL$",
        r"^CURRICULUM$",
        r"^[A-Z]\s*$",
        r"^\d+$",
    )
)


def is_garbage_code(code: str) -> bool:
    c = code.strip()
    return c == "" or any(p.search(c) for p in GARBAGE_CODE_PATS)


def _apply_reference_matches(
    subjects: list[ExtractedSubject],
    curriculum: CurriculumConfig,
    threshold: int,
    fixes: list[str],
    warnings: list[str],
) -> int:
    matched = 0
    for s in subjects:
        found = best_match(s.subject_code, curriculum.reference_for(s.slot), threshold)
        if found is None:
            warnings.append(f"No reference match: {s.subject_code} ({slot_label(s.slot)})")
            logger.info("no match: %r in %s", s.subject_code, slot_label(s.slot))
            continue

        ref, score = found
        matched += 1
        tag = f"[{score}% match] {ref.code}"
        if s.subject_code != ref.code:
            fixes.append(f'{tag}: code "{s.subject_code}" -> "{ref.code}"')
        if s.subject_name != ref.name:
            fixes.append(f'{tag}: title "{s.subject_name}" -> "{ref.name}"')
        if (s.lec_units, s.lab_units, s.total_units) != (ref.lec, ref.lab, ref.total):
            fixes.append(f"{tag}: units {s.units_str()} -> {ref.units_str()}")

        # Wholesale overwrite with canonical values, never a partial merge.
        s.subject_code = ref.code
        s.subject_name = ref.name
        s.lec_units = ref.lec
        s.lab_units = ref.lab
        s.total_units = ref.total
    return matched


def _drop_duplicates(subjects: list[ExtractedSubject], fixes: list[str]) -> list[ExtractedSubject]:
    seen: set[tuple[Slot, str]] = set()
    out: list[ExtractedSubject] = []
    for s in subjects:
        key = (s.slot, s.subject_code)
        if key in seen:
            fixes.append(f"Removed duplicate {s.subject_code} ({slot_label(s.slot)})")
            logger.info("duplicate dropped: %s", s.subject_code)
            continue
        seen.add(key)
        out.append(s)
    return out


def _repair_unit_sum(subjects: list[ExtractedSubject], fixes: list[str]) -> None:
    for s in subjects:
        if s.total_units == s.lec_units + s.lab_units:
            continue
        before = s.units_str()
        if s.total_units >= s.lec_units:
            s.lab_units = s.total_units - s.lec_units
        else:
            s.total_units = s.lec_units + s.lab_units
        fixes.append(f"{s.subject_code}: units {before} -> {s.units_str()} (lec + lab = total)")


def _inject_critical(
    subjects: list[ExtractedSubject],
    curriculum: CurriculumConfig,
    fixes: list[str],
) -> int:
    codes = {s.subject_code for s in subjects}
    slots = {s.slot for s in subjects}
    injected = 0
    for slot, ref in curriculum.critical_subjects:
        if ref.code in codes or slot not in slots:
            continue
        subjects.append(ref.to_subject(slot))
        codes.add(ref.code)
        injected += 1
        fixes.append(f"[RESCUE] Added missing {ref.code} ({slot_label(slot)})")
        logger.info("injected critical subject %s (%s)", ref.code, slot_label(slot))
    return injected


def calculate_accuracy(subjects: list[ExtractedSubject], curriculum: CurriculumConfig) -> AccuracyReport:
    """
    Completeness and accuracy over every reference slot represented in `subjects`.

    accuracy = reference entries exactly matched (code, title, units) divided by
    reference entries expected in the represented slots, as a half-up integer
    percent; 0 when no slot is represented.
    """

    present_slots = {s.slot for s in subjects}
    codes = {s.subject_code for s in subjects}

    correct = 0
    total = 0
    missing: dict[str, list[str]] = {}
    for slot, refs in curriculum.slots.items():
        if slot not in present_slots:
            continue
        in_slot = [s for s in subjects if s.slot == slot]
        total += len(refs)
        for ref in refs:
            if any(ref.matches(s) for s in in_slot):
                correct += 1
        absent = [ref.code for ref in refs if ref.code not in codes]
        if absent:
            missing[slot_label(slot)] = absent

    accuracy = int(correct * 100 / total + 0.5) if total > 0 else 0
    return AccuracyReport(accuracy=accuracy, correct=correct, total=total, missing=missing)


def reconcile(
    subjects: list[ExtractedSubject],
    curriculum: CurriculumConfig,
    *,
    threshold: int = MATCH_THRESHOLD,
) -> ReconciliationResult:
    """
    Correct, filter and score a full cross-quadrant extraction batch.

    Subjects that are kept are updated in place; the returned list is new.
    Steps: garbage filter, fuzzy match + wholesale correction, duplicate
    removal, unit-sum repair, critical-subject injection, accuracy report.
    """

    fixes: list[str] = []
    warnings: list[str] = []
    received = len(subjects)

    kept: list[ExtractedSubject] = []
    for s in subjects:
        if is_garbage_code(s.subject_code):
            fixes.append(f'Removed garbage subject: "{s.subject_code}"')
            logger.info("garbage removed: %r", s.subject_code)
            continue
        kept.append(s)
    garbage = received - len(kept)

    matched = _apply_reference_matches(kept, curriculum, threshold, fixes, warnings)
    kept = _drop_duplicates(kept, fixes)
    _repair_unit_sum(kept, fixes)
    injected = _inject_critical(kept, curriculum, fixes)

    report = calculate_accuracy(kept, curriculum)
    names = {r.code: r.name for refs in curriculum.slots.values() for r in refs}
    for label, codes in report.missing.items():
        for code in codes:
            name = names.get(code, "")
            warnings.append(f"Missing: {code} - {name} ({label})")

    logger.info(
        "reconciled: received=%d garbage=%d matched=%d injected=%d final=%d missing=%d accuracy=%d%% (%d/%d)",
        received,
        garbage,
        matched,
        injected,
        len(kept),
        report.missing_count(),
        report.accuracy,
        report.correct,
        report.total,
    )
    return ReconciliationResult(subjects=kept, fixes=fixes, warnings=warnings, report=report)
