from __future__ import annotations

from contracts.curriculum import ExtractedSubject, Slot
from contracts.grouping import Row
from curricula.loader import CurriculumConfig

from .rescue import apply_rescue_rules
from .subjects import extract_subjects


def extract_quadrant(rows: list[Row], slot: Slot, curriculum: CurriculumConfig) -> list[ExtractedSubject]:
    """
    Strict pass followed by the rescue pass for one quadrant.
    """

    rules = curriculum.extraction
    subjects = extract_subjects(rows, slot, rules)
    existing = {s.subject_code for s in subjects}
    subjects.extend(apply_rescue_rules(rows, slot, curriculum.rescue_rules, existing, rules.default_units))
    return subjects
