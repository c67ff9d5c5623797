from __future__ import annotations

import logging
from dataclasses import dataclass

from contracts.curriculum import ExtractedSubject, Slot, slot_label
from contracts.grouping import Row
from curricula.rules import ElectiveFamily, ExtractionRules

from .patterns import (
    ARTIFACT_NUMBER_PAT,
    COURSE_NUMBER_PAT,
    DIGITS_PAT,
    ELEC_KEYWORD_PAT,
    FALLBACK_TITLE,
    HEADER_ROW_PAT,
    MAX_SMALL_UNIT,
    MAX_TITLE_LEN,
    NON_SUBJECT_PREFIXES,
    PREFIX_PAT,
    SECTION_START_PAT,
    SINGLE_LETTER_PAT,
    TITLE_FILLER_PAT,
    TITLE_JUNK_CHARS_PAT,
)
from .titles import correct_title

logger = logging.getLogger(__name__)

# Elective numbers are looked for in tokens [2, _ELECTIVE_SCAN_END).
_ELECTIVE_SCAN_END = 6


@dataclass(frozen=True, slots=True)
class CodeMatch:
    code: str
    title_start: int  # index of the first token after the code tokens
    family: ElectiveFamily | None = None

    @property
    def is_elective(self) -> bool:
        return self.family is not None


def is_header_row(texts: list[str]) -> bool:
    return bool(texts) and HEADER_ROW_PAT.match(texts[0]) is not None


def _family_for_prefix(prefix: str, rules: ExtractionRules) -> ElectiveFamily | None:
    p = prefix.upper()
    for fam in rules.elective_families:
        if fam.prefix == p:
            return fam
    return None


def _classify_elective(texts: list[str], fam: ElectiveFamily) -> CodeMatch:
    for j in range(2, min(len(texts), _ELECTIVE_SCAN_END)):
        t = texts[j]
        if DIGITS_PAT.match(t) and fam.accepts(int(t)):
            return CodeMatch(code=fam.code(t), title_start=j + 1, family=fam)
    return CodeMatch(code=fam.code(str(fam.default_number)), title_start=2, family=fam)


def classify_row(texts: list[str], rules: ExtractionRules) -> CodeMatch | None:
    """
    Recognize the code shape at the start of a row.

    Shapes, in order: lone-letter artifact, department elective, generic
    prefix + number, spelling-variant family with a displaced number.
    """

    if len(texts) < 2:
        return None
    first, second = texts[0], texts[1]

    if SINGLE_LETTER_PAT.match(first) and ARTIFACT_NUMBER_PAT.match(second):
        return CodeMatch(code=f"{rules.primary_prefix} {second}", title_start=2)

    if ELEC_KEYWORD_PAT.match(second):
        fam = _family_for_prefix(first, rules)
        if fam is not None:
            return _classify_elective(texts, fam)

    if not PREFIX_PAT.match(first):
        return None

    prefix = rules.canonical_prefix(first)
    if prefix in NON_SUBJECT_PREFIXES:
        return None

    if COURSE_NUMBER_PAT.match(second):
        return CodeMatch(code=f"{prefix} {second}", title_start=2)

    if rules.is_variant_family(first):
        for j, t in enumerate(texts):
            if DIGITS_PAT.match(t):
                return CodeMatch(code=f"{prefix} {t}", title_start=j + 1)
        return CodeMatch(code=f"{prefix} 1", title_start=2)

    return None


def starts_new_subject(texts: list[str], rules: ExtractionRules) -> bool:
    if not texts:
        return False
    first = texts[0]
    second = texts[1] if len(texts) > 1 else ""
    if SECTION_START_PAT.match(first):
        return True
    if (SINGLE_LETTER_PAT.match(first) or PREFIX_PAT.match(first)) and DIGITS_PAT.match(second):
        return True
    if ELEC_KEYWORD_PAT.match(second) and _family_for_prefix(first, rules) is not None:
        return True
    return False


def extract_units(texts: list[str], start: int, default: tuple[int, int, int]) -> tuple[tuple[int, int, int], int | None]:
    """
    Find the unit numbers scanning right-to-left from the end down to `start`.

    A contiguous run of three integers <= 5 gives (lec, lab, total) and wins
    wherever it sits; otherwise the rightmost run of two gives (lec, 0, total);
    otherwise `default`. Also returns the index where the run begins (title end),
    or None when the default was used.
    """

    run: list[int] = []
    pair: tuple[int, int] | None = None
    pair_idx: int | None = None

    for j in range(len(texts) - 1, start - 1, -1):
        t = texts[j]
        if DIGITS_PAT.match(t) and int(t) <= MAX_SMALL_UNIT:
            run.insert(0, int(t))
            if len(run) == 3:
                return (run[0], run[1], run[2]), j
            continue
        if len(run) == 2 and pair is None:
            pair, pair_idx = (run[0], run[1]), j + 1
        run = []

    if len(run) == 2 and pair is None:
        pair, pair_idx = (run[0], run[1]), start

    if pair is not None:
        return (pair[0], 0, pair[1]), pair_idx
    return default, None


def build_title(texts: list[str], start: int, end: int, family: ElectiveFamily | None) -> str:
    kept = [
        t
        for t in texts[start:end]
        if not DIGITS_PAT.match(t) and not TITLE_FILLER_PAT.match(t) and len(t) > 1
    ]
    title = TITLE_JUNK_CHARS_PAT.sub("", " ".join(kept))
    title, _changes = correct_title(title)
    title = title.strip()

    if len(title) > MAX_TITLE_LEN:
        title = title[: MAX_TITLE_LEN - 3] + "..."
    if len(title) < 2:
        title = family.title if family is not None else FALLBACK_TITLE
    return title


def extract_subjects(rows: list[Row], slot: Slot, rules: ExtractionRules) -> list[ExtractedSubject]:
    """
    Strict pass: one subject per row whose leading tokens form a code.

    Wrapped titles of non-elective subjects are merged from the following row
    when that row does not itself start a subject or a section.
    """

    subjects: list[ExtractedSubject] = []
    i = 0
    while i < len(rows):
        texts = rows[i].texts()
        i += 1
        if not texts or is_header_row(texts):
            continue

        match = classify_row(texts, rules)
        if match is None:
            continue

        all_texts = list(texts)
        if not match.is_elective and i < len(rows):
            next_texts = rows[i].texts()
            if next_texts and not starts_new_subject(next_texts, rules):
                all_texts.extend(next_texts)
                i += 1

        (lec, lab, total), units_idx = extract_units(all_texts, match.title_start, rules.default_units)
        title_end = units_idx if units_idx is not None else len(all_texts)
        title = build_title(all_texts, match.title_start, title_end, match.family)

        subjects.append(
            ExtractedSubject(
                subject_code=match.code,
                subject_name=title,
                lec_units=lec,
                lab_units=lab,
                total_units=total,
                year_level=slot[0],
                semester=slot[1],
            )
        )
        logger.debug("extracted %s | %s | %d/%d/%d", match.code, title[:40], lec, lab, total)

    logger.info("%s: %d subjects from %d rows", slot_label(slot), len(subjects), len(rows))
    return subjects
