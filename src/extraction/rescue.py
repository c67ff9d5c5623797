from __future__ import annotations

import logging
import re

from contracts.curriculum import ExtractedSubject, Slot, slot_label
from contracts.grouping import Row
from curricula.rules import RescueKind, RescueRule

from .patterns import ELEC_KEYWORD_PAT

logger = logging.getLogger(__name__)


def _elective_scan(
    rule: RescueRule,
    rows: list[Row],
    slot: Slot,
    seen: set[str],
    default_units: tuple[int, int, int],
) -> list[ExtractedSubject]:
    if rule.prefix is None or rule.code_label is None or rule.number_pattern is None:
        raise ValueError(f"Incomplete {rule.kind.value} rescue rule")
    mention = re.compile(re.escape(rule.prefix) + r"\s*(?:Elec|Elective)", re.IGNORECASE)
    lec, lab, total = default_units

    added: list[ExtractedSubject] = []
    for row in rows:
        if not mention.search(row.joined_text()):
            continue
        texts = row.texts()
        for j, tok in enumerate(texts):
            if not ELEC_KEYWORD_PAT.match(tok):
                continue
            for k in range(j + 1, min(len(texts), j + 1 + rule.lookahead)):
                num = texts[k]
                if not rule.number_pattern.match(num):
                    continue
                code = f"{rule.code_label} {num}"
                if code not in seen:
                    seen.add(code)
                    added.append(
                        ExtractedSubject(
                            subject_code=code,
                            subject_name=f"{rule.title} {num}",
                            lec_units=lec,
                            lab_units=lab,
                            total_units=total,
                            year_level=slot[0],
                            semester=slot[1],
                        )
                    )
                    logger.info("rescued %s (%s)", code, slot_label(slot))
                break
    return added


def _keyword_code(rule: RescueRule, rows: list[Row], slot: Slot, seen: set[str]) -> list[ExtractedSubject]:
    if rule.subject is None or rule.number is None or rule.keywords_pattern is None:
        raise ValueError(f"Incomplete {rule.kind.value} rescue rule")
    if rule.slot != slot or rule.subject.code in seen:
        return []

    for row in rows:
        text = row.joined_text()
        if rule.number in text and rule.keywords_pattern.search(text):
            seen.add(rule.subject.code)
            logger.info("rescued %s (%s)", rule.subject.code, slot_label(slot))
            return [rule.subject.to_subject(slot)]
    return []


def apply_rescue_rules(
    rows: list[Row],
    slot: Slot,
    rules: tuple[RescueRule, ...],
    existing_codes: set[str],
    default_units: tuple[int, int, int] = (3, 0, 3),
) -> list[ExtractedSubject]:
    """
    Permissive second pass over every row of a quadrant.

    Recovers codes whose tokens are not leading the row (so the strict
    classifier missed them). Returns only the added subjects; `existing_codes`
    is not modified.
    """

    seen = set(existing_codes)
    added: list[ExtractedSubject] = []
    for rule in rules:
        if rule.kind == RescueKind.ELECTIVE_SCAN:
            added.extend(_elective_scan(rule, rows, slot, seen, default_units))
        elif rule.kind == RescueKind.KEYWORD_CODE:
            added.extend(_keyword_code(rule, rows, slot, seen))
        else:  # pragma: no cover
            raise ValueError(f"Unsupported rescue rule kind: {rule.kind}")

    if added:
        logger.info("%s: rescue pass added %d subjects", slot_label(slot), len(added))
    return added
