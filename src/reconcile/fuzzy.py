from __future__ import annotations

import re

from contracts.curriculum import ReferenceSubject

MATCH_THRESHOLD = 80
EXACT_SCORE = 100
CONTAINS_SCORE = 90

_NON_ALNUM_PAT = re.compile(r"[^A-Z0-9]")


def normalize_code(code: str) -> str:
    return _NON_ALNUM_PAT.sub("", code.upper())


def score_codes(a: str, b: str) -> int:
    """
    Similarity of two course codes in 0..100.

    Exact normalized match -> 100; containment either way -> 90; otherwise the
    count of equal characters at equal positions over the longer length,
    rounded half-up. Empty normalized codes score 0.
    """

    n1 = normalize_code(a)
    n2 = normalize_code(b)
    if not n1 or not n2:
        return 0
    if n1 == n2:
        return EXACT_SCORE
    if n1 in n2 or n2 in n1:
        return CONTAINS_SCORE

    matches = sum(1 for c1, c2 in zip(n1, n2) if c1 == c2)
    return int(matches * 100 / max(len(n1), len(n2)) + 0.5)


def best_match(
    code: str,
    candidates: tuple[ReferenceSubject, ...],
    threshold: int = MATCH_THRESHOLD,
) -> tuple[ReferenceSubject, int] | None:
    """
    Highest-scoring candidate at or above `threshold`; the first one wins ties.
    """

    best: ReferenceSubject | None = None
    best_score = 0
    for ref in candidates:
        s = score_codes(code, ref.code)
        if s > best_score:
            best, best_score = ref, s
    if best is None or best_score < threshold:
        return None
    return best, best_score
